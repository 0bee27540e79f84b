import contextlib
import json

import sublime
import urllib.request as urllib

from share_gist_20_exceptions import SimpleHTTPError


def token_auth_string():
    settings = sublime.load_settings('ShareGist.sublime-settings')
    return settings.get('token') or None


def api_request(url, data=None, token=None, https_proxy=None, method=None, expected_status=None):
    settings = sublime.load_settings('ShareGist.sublime-settings')
    request = urllib.Request(url)

    if method:
        request.get_method = lambda: method

    token = token if token is not None else token_auth_string()
    if token:
        request.add_header('Authorization', 'token ' + token)
    request.add_header('Accept', 'application/json')
    request.add_header('Content-Type', 'application/json')

    if data is not None:
        request.data = bytes(data.encode('utf8'))

    if settings.get('debug'):
        print('Share Gist: API request', request.get_method(), request.get_full_url())

    https_proxy = (
        https_proxy if https_proxy is not None else settings.get('https_proxy')
    )
    if https_proxy:
        opener = urllib.build_opener(
            urllib.HTTPHandler(),
            urllib.HTTPSHandler(),
            urllib.ProxyHandler({'https': https_proxy}),
        )

        urllib.install_opener(opener)

    try:
        with contextlib.closing(urllib.urlopen(request)) as response:
            content = response.read().decode('utf8', 'ignore')

            if expected_status is not None and response.status != expected_status:
                raise SimpleHTTPError(response.status, content)

            if response.status == 204:  # no content
                return None

            return json.loads(content)

    except urllib.HTTPError as err:
        with contextlib.closing(err):
            raise SimpleHTTPError(err.code, err.read().decode('utf8', 'ignore'))
