"""Tick sources for the timer engine.

The engine only needs one capability: *call this every N seconds until I
cancel it*.  ``QtScheduler`` satisfies it with a ``QTimer`` on the Qt event
loop, so commands from the tray menu and ticks are serialised on one thread.
Tests swap in a manual scheduler that fires on demand.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from PyQt6.QtCore import QObject, QTimer

log = logging.getLogger(__name__)


class RepeatingHandle(Protocol):
    """A cancellable repeating callback."""

    @property
    def active(self) -> bool: ...

    def cancel(self) -> None:
        """Stop firing.  Must be idempotent and take effect immediately."""
        ...


class Scheduler(Protocol):
    def schedule_repeating(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> RepeatingHandle: ...


# ── Qt implementation ─────────────────────────────────────────────────────


class _QtRepeatingTimer:
    """``QTimer`` wrapper returned by :meth:`QtScheduler.schedule_repeating`."""

    def __init__(
        self,
        interval_ms: int,
        callback: Callable[[], None],
        parent: QObject | None,
    ) -> None:
        self._callback = callback
        self._timer = QTimer(parent)
        self._timer.setInterval(interval_ms)
        self._timer.setSingleShot(False)
        self._timer.timeout.connect(self._callback)
        self._timer.start()

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    @property
    def interval_ms(self) -> int:
        return self._timer.interval() if self._timer is not None else 0

    def cancel(self) -> None:
        if self._timer is None:
            return
        # stop() is synchronous: a queued timeout is discarded, so the
        # callback never runs after cancel() returns.
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None


class QtScheduler:
    """Schedules repeating callbacks on the running Qt event loop."""

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent

    def schedule_repeating(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> _QtRepeatingTimer:
        interval_ms = max(1, round(interval_seconds * 1000))
        log.debug("Scheduling repeating callback every %d ms", interval_ms)
        return _QtRepeatingTimer(interval_ms, callback, self._parent)
