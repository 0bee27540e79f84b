IDLE = 'idle'
SELECTING = 'selecting'
SELECTION_COMPLETE = 'selection-complete'


def needs_confirmation(selected_lines, total_lines, ratio=0.5):
    if total_lines <= 0:
        return False

    return float(selected_lines) / total_lines > ratio


def count_selected_lines(view, regions):
    lines = 0

    for region in regions:
        begin_row, _ = view.rowcol(region.begin())
        end_row, _ = view.rowcol(region.end())
        lines += end_row - begin_row + 1

    return lines


def count_total_lines(view):
    last_row, _ = view.rowcol(view.size())
    return last_row + 1


class SelectionTracker(object):
    """Tracks whether the selection of a single view has settled.

    Every selection change bumps `generation`; a delayed `settle` call only
    completes the selection if no change happened in between.
    """
    def __init__(self, view_id, delay=300):
        self.view_id = view_id
        self.delay = delay
        self.state = IDLE
        self.generation = 0
        self.row = None
        self.confirm = False

    def selection_changed(self, non_empty):
        self.generation += 1
        self.row = None
        self.confirm = False
        self.state = SELECTING if non_empty else IDLE
        return self.generation

    def settle(self, generation):
        if generation != self.generation or self.state != SELECTING:
            return False

        self.state = SELECTION_COMPLETE
        return True

    def reset(self):
        self.state = IDLE
        self.row = None
        self.confirm = False

    def is_complete(self):
        return self.state == SELECTION_COMPLETE


class TrackerRegistry(object):
    def __init__(self):
        self._trackers = {}

    def get(self, view_id, delay=None):
        tracker = self._trackers.get(view_id)

        if tracker is None:
            tracker = self._trackers[view_id] = SelectionTracker(view_id)

        if delay is not None:
            tracker.delay = delay

        return tracker

    def discard(self, view_id):
        self._trackers.pop(view_id, None)

    def clear(self):
        self._trackers.clear()

    def __contains__(self, view_id):
        return view_id in self._trackers

    def __len__(self):
        return len(self._trackers)
