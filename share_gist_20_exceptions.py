class InvalidSelectionException(Exception):
    pass


class SimpleHTTPError(Exception):
    def __init__(self, code, response):
        super(SimpleHTTPError, self).__init__(code)
        self.code = code
        self.response = response
