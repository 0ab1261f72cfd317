"""Shared pytest fixtures for Pomodori tests."""

import os
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from PyQt6.QtWidgets import QApplication

from pomodori.timer.engine import TimerEngine

from helpers import ManualScheduler


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def engine(qapp, scheduler):
    """Fresh TimerEngine driven by a hand-cranked scheduler."""
    return TimerEngine(scheduler)


@pytest.fixture
def qt_errors(monkeypatch):
    """Collect exceptions raised inside Qt slots instead of aborting.

    PyQt hands slot exceptions to ``sys.excepthook`` and only aborts the
    process when the hook is the interpreter default.
    """
    errors: list[BaseException] = []
    monkeypatch.setattr(sys, "excepthook", lambda tp, val, tb: errors.append(val))
    return errors
