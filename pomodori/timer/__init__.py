"""Timer package."""

from .engine import (
    TimerEngine,
    TimerState,
    Session,
    SESSION_PROPERTIES,
    TICK_INTERVAL,
    format_remaining,
)
from .scheduler import QtScheduler, RepeatingHandle, Scheduler

__all__ = [
    "TimerEngine",
    "TimerState",
    "Session",
    "SESSION_PROPERTIES",
    "TICK_INTERVAL",
    "format_remaining",
    "QtScheduler",
    "RepeatingHandle",
    "Scheduler",
]
