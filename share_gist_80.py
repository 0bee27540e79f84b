import functools
import json
import threading
import traceback
import webbrowser
from urllib.error import URLError

import sublime
import sublime_plugin

from share_gist_20_exceptions import InvalidSelectionException, SimpleHTTPError
from share_gist_30_normalize import dedent_selection
from share_gist_40_request import api_request
from share_gist_50_selection import (
    TrackerRegistry,
    count_selected_lines,
    count_total_lines,
    needs_confirmation,
)
from share_gist_60_helpers import (
    debug,
    facebook_share_url,
    get_file_name,
    hide_loading_icon,
    hide_share_icon,
    show_loading_icon,
    show_share_icon,
)

CONFIRM_MESSAGE = ("Share Gist: too much code from this file is to be shared.\n\n"
                   "Are you sure you want to share this many lines of code?")

DEFAULT_API_URL = 'https://api.github.com'
DEFAULT_CONFIRM_RATIO = 0.5

settings = None
trackers = TrackerRegistry()


def plugin_loaded():
    global settings
    settings = sublime.load_settings('ShareGist.sublime-settings')
    settings.add_on_change('reload', set_settings)
    set_settings()


def plugin_unloaded():
    trackers.clear()


def set_settings():
    ratio = settings.get('confirm_ratio')
    if ratio is None:
        settings.set('confirm_ratio', DEFAULT_CONFIRM_RATIO)
    elif ratio < 0 or ratio > 1:
        settings.set('confirm_ratio', min(max(ratio, 0), 1))
        sublime.status_message("Share Gist: confirm_ratio should be between 0 and 1")

    api_url = (settings.get('api_url') or DEFAULT_API_URL).rstrip('/')
    settings.set('GISTS_URL', api_url + '/gists')

    # the skin may have changed
    window = sublime.active_window()
    if window is not None:
        refresh_share_icon(window.active_view())


def catch_errors(fn):
    @functools.wraps(fn)
    def _fn(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except InvalidSelectionException:
            sublime.status_message("Share Gist: nothing selected")
        except SimpleHTTPError as err:
            debug('HTTP error', err.code, err.response)
            sublime.error_message("Share Gist: error creating gist (HTTP %s)" % err.code)
        except URLError:
            sublime.error_message("Share Gist: unable to contact GitHub")
        except Exception:
            traceback.print_exc()
            sublime.error_message("Share Gist: unknown error (please, report a bug!)")

    return _fn


def create_gist(filename, code, description=None):
    if not isinstance(filename, str) or not filename:
        return None

    if not isinstance(code, str) or not code:
        return None

    if description is None:
        description = settings.get('description')

    # providing filename with proper extension enables syntax highlighting
    file_data = {filename: {'content': dedent_selection(code)}}
    data = json.dumps({'description': description, 'files': file_data, 'public': False})
    return api_request(settings.get('GISTS_URL'), data, method='POST', expected_status=201)


def selected_regions(view):
    return [region for region in view.sel() if not region.empty()]


def selection_needs_confirmation(view, regions):
    return needs_confirmation(count_selected_lines(view, regions), count_total_lines(view),
                              settings.get('confirm_ratio'))


def refresh_share_icon(view):
    if view is None or view.id() not in trackers:
        return

    tracker = trackers.get(view.id())
    if tracker.is_complete() and tracker.row is not None:
        show_share_icon(view, tracker.row, settings.get('skin'))


class ShareGistListener(sublime_plugin.EventListener):
    def on_selection_modified(self, view):
        regions = selected_regions(view)
        tracker = trackers.get(view.id(), settings.get('selection_delay'))
        generation = tracker.selection_changed(bool(regions))

        hide_share_icon(view)

        if regions:
            sublime.set_timeout(functools.partial(self.on_selection_settled, view, generation), tracker.delay)

    def on_selection_settled(self, view, generation):
        if view.id() not in trackers:
            return  # closed in the meantime

        tracker = trackers.get(view.id())
        if not tracker.settle(generation):
            return

        regions = selected_regions(view)
        if not regions:
            tracker.reset()
            return

        tracker.row, _ = view.rowcol(regions[-1].b)
        tracker.confirm = selection_needs_confirmation(view, regions)
        show_share_icon(view, tracker.row, settings.get('skin'))
        debug('selection complete in view', tracker.view_id, 'on row', tracker.row)

    def on_close(self, view):
        trackers.discard(view.id())


class ShareGistCommand(sublime_plugin.TextCommand):
    def is_enabled(self):
        return len(selected_regions(self.view)) > 0

    @catch_errors
    def run(self, edit):
        regions = selected_regions(self.view)

        if not regions:
            raise InvalidSelectionException()

        filename = get_file_name(self.view)

        if filename is None:
            sublime.status_message("Share Gist: save the file before sharing it")
            return

        code = '\n'.join(self.view.substr(region) for region in regions)
        row, _ = self.view.rowcol(regions[-1].b)

        if self.needs_confirmation(regions):
            if not sublime.ok_cancel_dialog(CONFIRM_MESSAGE, 'Share'):
                return

        self.share(filename, code, row)

    def needs_confirmation(self, regions):
        if self.view.id() in trackers:
            tracker = trackers.get(self.view.id())
            if tracker.is_complete():
                return tracker.confirm

        return selection_needs_confirmation(self.view, regions)

    def share(self, filename, code, row):
        show_loading_icon(self.view, row)
        # Start the upload in a thread so we don't stall the UI
        threading.Thread(target=self.upload, args=(filename, code)).start()

    @catch_errors
    def upload(self, filename, code):
        try:
            gist = create_gist(filename, code)
        finally:
            sublime.set_timeout(functools.partial(hide_loading_icon, self.view), 0)

        if gist is not None:
            sublime.set_timeout(functools.partial(self.on_gist_created, gist), 0)

    def on_gist_created(self, gist):
        url = gist.get('html_url')

        if not url:
            sublime.error_message("Share Gist: error creating gist")
            return

        sublime.set_clipboard(url)
        sublime.status_message("Share Gist: %s (copied to clipboard)" % url)

        options = [['Open in browser', url]]
        commands = ['share_gist_open_url']

        if settings.get('facebook_share'):
            options.append(['Share on Facebook', facebook_share_url(url)])
            commands.append('share_gist_facebook')

        window = self.view.window()
        if window is None:
            window = sublime.active_window()  # view closed during upload

        def on_option(num):
            if num < 0:
                return

            window.run_command(commands[num], {'url': url})

        window.show_quick_panel(options, on_option)


class ShareGistOpenUrlCommand(sublime_plugin.WindowCommand):
    def run(self, url):
        webbrowser.open(url)


class ShareGistFacebookCommand(sublime_plugin.WindowCommand):
    def is_visible(self, url=None):
        return bool(settings.get('facebook_share'))

    def run(self, url):
        webbrowser.open(facebook_share_url(url))
