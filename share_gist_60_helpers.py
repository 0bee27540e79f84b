import os
from urllib.parse import quote

import sublime

FACEBOOK_SHARER_URL = 'https://www.facebook.com/sharer/sharer.php?u={0}'

ICONS = {
    'dark': {
        'key': 'share_gist_dark',
        'icon': 'bookmark',
        'scope': 'region.whitish',
        'skins': ['dark', 'dark-gray', 'flat-dark'],
    },
    'light': {
        'key': 'share_gist_light',
        'icon': 'bookmark',
        'scope': 'region.blackish',
        'skins': ['light', 'light-gray', 'flat-light'],
    },
    'loading': {
        'key': 'share_gist_loading',
        'icon': 'dot',
        'scope': 'region.yellowish',
    },
}


def debug(*args):
    settings = sublime.load_settings('ShareGist.sublime-settings')

    if settings.get('debug'):
        print('Share Gist:', *args)


def icon_for_skin(skin):
    if skin in ICONS['dark']['skins']:
        return ICONS['dark']

    return ICONS['light']


def _add_icon(view, icon, row):
    point = view.text_point(row, 0)
    view.add_regions(icon['key'], [sublime.Region(point, point)], icon['scope'], icon['icon'], sublime.HIDDEN)


def show_share_icon(view, row, skin):
    hide_share_icon(view)
    _add_icon(view, icon_for_skin(skin), row)


def hide_share_icon(view):
    view.erase_regions(ICONS['dark']['key'])
    view.erase_regions(ICONS['light']['key'])


def show_loading_icon(view, row):
    _add_icon(view, ICONS['loading'], row)


def hide_loading_icon(view):
    view.erase_regions(ICONS['loading']['key'])


def get_file_name(view):
    file_name = view.file_name()

    if not isinstance(file_name, str) or not file_name:
        return None

    return os.path.basename(file_name)


def facebook_share_url(url):
    return FACEBOOK_SHARER_URL.format(quote(url, safe=''))
