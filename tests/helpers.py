"""Shared test helpers for Pomodori."""

from pomodori.timer.engine import TimerEngine


class SignalCollector:
    """Utility to capture event / pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class ManualHandle:
    def __init__(self, scheduler, interval, callback):
        self._scheduler = scheduler
        self.interval = interval
        self.callback = callback
        self.cancel_calls = 0

    @property
    def active(self):
        return self in self._scheduler.handles

    def cancel(self):
        self.cancel_calls += 1
        if self.active:
            self._scheduler.handles.remove(self)


class ManualScheduler:
    """Scheduler whose repeating callbacks only fire when told to."""

    def __init__(self):
        self.handles: list[ManualHandle] = []
        self.created = 0

    def schedule_repeating(self, interval_seconds, callback):
        handle = ManualHandle(self, interval_seconds, callback)
        self.handles.append(handle)
        self.created += 1
        return handle

    @property
    def active_count(self):
        return len(self.handles)

    def fire(self, times: int = 1) -> int:
        """Fire every active handle *times* times.  Returns callbacks run."""
        ran = 0
        for _ in range(times):
            for handle in list(self.handles):
                if handle.active:
                    handle.callback()
                    ran += 1
        return ran


def complete_session(engine: TimerEngine, scheduler: ManualScheduler) -> None:
    """Fast-complete the current session by jumping to the last tick."""
    engine._remaining = 1
    scheduler.fire()
