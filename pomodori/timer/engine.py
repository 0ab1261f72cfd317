"""Timer state machine for Pomodori.

States
------
IDLE       Not running, waiting for the user to start.
RUNNING    Counting down the current session.
PAUSED     Frozen; ``remaining`` is kept for the next start().

Transitions
-----------
IDLE | PAUSED → RUNNING        (start)
any → PAUSED                  (pause)
any → IDLE                    (reset: same session, full duration)
any → IDLE                    (skip: next session, full duration)
RUNNING → RUNNING | IDLE      (tick; IDLE + next session on completion)

Sessions alternate WORK → SHORT_BREAK → WORK … with fixed durations.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import NamedTuple

from PyQt6.QtCore import QObject, pyqtSignal

from .scheduler import QtScheduler, RepeatingHandle, Scheduler

log = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class TimerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class Session(Enum):
    WORK = "work"
    SHORT_BREAK = "short_break"

    @property
    def duration(self) -> int:
        """Full length of this session in seconds."""
        return SESSION_PROPERTIES[self].duration

    @property
    def label(self) -> str:
        return SESSION_PROPERTIES[self].label

    @property
    def icon(self) -> str:
        return SESSION_PROPERTIES[self].icon

    @property
    def next(self) -> Session:
        """The session that follows this one in the cycle."""
        return SESSION_PROPERTIES[self].next


class SessionProperties(NamedTuple):
    duration: int
    label: str
    icon: str
    next: Session


# ── constants ─────────────────────────────────────────────────────────────

SESSION_PROPERTIES: dict[Session, SessionProperties] = {
    Session.WORK: SessionProperties(
        duration=25 * 60,
        label="Work",
        icon="\N{TOMATO}",
        next=Session.SHORT_BREAK,
    ),
    Session.SHORT_BREAK: SessionProperties(
        duration=5 * 60,
        label="Break",
        icon="\N{HOT BEVERAGE}",
        next=Session.WORK,
    ),
}

TICK_INTERVAL = 1  # seconds
PAUSED_MARK = "\N{DOUBLE VERTICAL BAR}"


def format_remaining(seconds: float) -> str:
    """``MM:SS`` with both fields zero-padded, floored to whole seconds."""
    m, s = divmod(max(0, int(seconds)), 60)
    return f"{m:02d}:{s:02d}"


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Two-phase Pomodoro timer driven by an injectable tick source.

    The engine knows nothing about the UI.  The shell issues commands
    (``start`` / ``pause`` / ``reset`` / ``skip``) and connects to the
    signals below.  Emission is synchronous on the owning thread, so the
    completion ordering holds for direct connections.

    Signals
    -------
    ticked()
        After every tick and after reset() / skip().
    completed()
        Once per natural completion, before the session advances.
    state_changed(new_state: TimerState)
        After every command and after completion.
    """

    ticked = pyqtSignal()
    completed = pyqtSignal()
    state_changed = pyqtSignal(object)

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        if scheduler is None:
            scheduler = QtScheduler(self)
        self._scheduler: Scheduler = scheduler
        self._tick_source: RepeatingHandle | None = None

        self._state: TimerState = TimerState.IDLE
        self._session: Session = Session.WORK
        self._remaining: int = self._session.duration

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def session(self) -> Session:
        """The session being timed (or up next, when IDLE)."""
        return self._session

    @property
    def remaining(self) -> int:
        """Seconds left on the clock."""
        return self._remaining

    @property
    def total_duration(self) -> int:
        return self._session.duration

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the current session."""
        total = self.total_duration
        elapsed = total - self._remaining
        return max(0.0, min(1.0, elapsed / total))

    @property
    def is_running(self) -> bool:
        return self._state == TimerState.RUNNING

    @property
    def has_tick_source(self) -> bool:
        return self._tick_source is not None

    @property
    def display_string(self) -> str:
        """Menu-bar text, e.g. ``🍅 24:59`` or ``☕ ⏸ 03:10``."""
        clock = format_remaining(self._remaining)
        if self._state == TimerState.PAUSED:
            return f"{self._session.icon} {PAUSED_MARK} {clock}"
        return f"{self._session.icon} {clock}"

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Start the countdown, or resume it from PAUSED.

        Calling it while already RUNNING keeps the existing tick source.
        """
        if self._tick_source is None:
            self._tick_source = self._scheduler.schedule_repeating(
                TICK_INTERVAL, self._on_tick,
            )
        self._set_state(TimerState.RUNNING)

    def pause(self) -> None:
        """Freeze the countdown.  ``remaining`` is left untouched."""
        self._cancel_tick_source()
        self._set_state(TimerState.PAUSED)

    def reset(self) -> None:
        """Back to IDLE with the current session's full duration."""
        self._cancel_tick_source()
        self._remaining = self._session.duration
        self._set_state(TimerState.IDLE)
        self.ticked.emit()

    def skip(self) -> None:
        """Jump to the next session without completing this one."""
        self._cancel_tick_source()
        self._session = self._session.next
        self._remaining = self._session.duration
        self._set_state(TimerState.IDLE)
        self.ticked.emit()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self) -> None:
        self._remaining -= 1
        if self._remaining <= 0:
            self._finish_session()
        self.ticked.emit()

    def _finish_session(self) -> None:
        self._cancel_tick_source()
        log.info("%s session complete", self._session.label)
        # Listeners read the finished session here; advance afterwards.
        try:
            self.completed.emit()
        finally:
            self._session = self._session.next
            self._remaining = self._session.duration
            self._set_state(TimerState.IDLE)

    def _cancel_tick_source(self) -> None:
        source, self._tick_source = self._tick_source, None
        if source is not None:
            source.cancel()

    def _set_state(self, new_state: TimerState) -> None:
        if new_state != self._state:
            log.debug(
                "%s → %s (%s, %ss left)",
                self._state.name, new_state.name,
                self._session.label, self._remaining,
            )
        self._state = new_state
        self.state_changed.emit(new_state)
