from io import BytesIO
from unittest import TestCase
from unittest.mock import patch
from urllib.error import HTTPError

import share_gist_40_request as gist_request
from share_gist_20_exceptions import SimpleHTTPError
from test.stubs import github_api, sublime

TEST_GISTS_URL = 'https://api.github.test/gists'


class TestApiRequest(TestCase):
    def tearDown(self):
        sublime.settings_storage = {}

    def test_token_auth_string(self):
        self.assertIsNone(gist_request.token_auth_string())

        sublime.load_settings('ShareGist.sublime-settings').set('token', 'some token')
        self.assertEqual(gist_request.token_auth_string(), 'some token')

    @patch('share_gist_40_request.urllib')
    def test_api_request(self, mocked_urllib):
        data = 'some data'
        token = 'some token'
        https_proxy = 'some https proxy'
        method = 'POST'

        mocked_urllib.urlopen().status = 201
        mocked_urllib.urlopen().read.return_value = b'{"some": "response"}'

        result = gist_request.api_request(TEST_GISTS_URL, data, token, https_proxy, method, expected_status=201)

        mocked_urllib.Request.assert_called_with(TEST_GISTS_URL)

        add_header = mocked_urllib.Request().add_header
        self.assertEqual(add_header.call_count, 3)
        self.assertEqual(add_header.call_args_list[0][0], ('Authorization', 'token some token'))
        self.assertEqual(add_header.call_args_list[1][0], ('Accept', 'application/json'))
        self.assertEqual(add_header.call_args_list[2][0], ('Content-Type', 'application/json'))

        self.assertEqual(mocked_urllib.Request().data, b'some data')
        self.assertEqual(mocked_urllib.Request().get_method(), 'POST')

        mocked_urllib.build_opener.assert_called_with(mocked_urllib.HTTPHandler(), mocked_urllib.HTTPSHandler(),
                                                      mocked_urllib.ProxyHandler())
        mocked_urllib.install_opener.assert_called_with(mocked_urllib.build_opener())

        self.assertEqual(result, {'some': 'response'})

    @patch('share_gist_40_request.urllib')
    def test_anonymous_request(self, mocked_urllib):
        mocked_urllib.urlopen().status = 200
        mocked_urllib.urlopen().read.return_value = b'{}'

        gist_request.api_request(TEST_GISTS_URL)

        headers = [call[0][0] for call in mocked_urllib.Request().add_header.call_args_list]
        self.assertEqual(headers, ['Accept', 'Content-Type'])
        self.assertEqual(mocked_urllib.install_opener.call_count, 0)

    @patch('share_gist_40_request.urllib')
    def test_no_content(self, mocked_urllib):
        mocked_urllib.urlopen().status = 204
        mocked_urllib.urlopen().read.return_value = b''

        self.assertIsNone(gist_request.api_request(TEST_GISTS_URL, token='some token'))

    @patch('share_gist_40_request.urllib')
    def test_unexpected_status(self, mocked_urllib):
        mocked_urllib.urlopen().status = 200
        mocked_urllib.urlopen().read.return_value = b'{"html_url": "some html url"}'
        mocked_urllib.HTTPError = HTTPError

        with self.assertRaises(SimpleHTTPError) as context:
            gist_request.api_request(TEST_GISTS_URL, '{}', method='POST', expected_status=201)

        self.assertEqual(context.exception.code, 200)
        self.assertEqual(context.exception.response, '{"html_url": "some html url"}')

    @patch('share_gist_40_request.urllib')
    def test_http_error(self, mocked_urllib):
        mocked_urllib.HTTPError = HTTPError
        mocked_urllib.urlopen.side_effect = HTTPError(TEST_GISTS_URL, 422, 'Unprocessable Entity', {},
                                                      BytesIO(github_api.VALIDATION_FAILED))

        with self.assertRaises(SimpleHTTPError) as context:
            gist_request.api_request(TEST_GISTS_URL, '{}', method='POST', expected_status=201)

        self.assertEqual(context.exception.code, 422)
        self.assertEqual(context.exception.response, github_api.VALIDATION_FAILED.decode('utf8'))

    @patch('builtins.print')
    @patch('share_gist_40_request.urllib')
    def test_debug_output(self, mocked_urllib, mocked_print):
        sublime.load_settings('ShareGist.sublime-settings').set('debug', True)
        mocked_urllib.urlopen().status = 200
        mocked_urllib.urlopen().read.return_value = b'{}'
        mocked_urllib.Request().get_method.return_value = 'GET'
        mocked_urllib.Request().get_full_url.return_value = TEST_GISTS_URL

        gist_request.api_request(TEST_GISTS_URL)

        mocked_print.assert_called_with('Share Gist: API request', 'GET', TEST_GISTS_URL)
