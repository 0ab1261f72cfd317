"""Completion notifications shown through the tray icon."""

from __future__ import annotations

import logging

from PyQt6.QtWidgets import QSystemTrayIcon

from .timer.engine import Session

log = logging.getLogger(__name__)

NOTIFICATION_TITLE = "Pomodori"

_COMPLETION_BODIES: dict[Session, str] = {
    Session.WORK: "Great work! Take a break.",
    Session.SHORT_BREAK: "Break is over — time to focus!",
}


def completion_message(finished: Session) -> tuple[str, str]:
    """Title and body for the session that just finished."""
    return NOTIFICATION_TITLE, _COMPLETION_BODIES[finished]


class TrayNotifier:
    """Shows balloon / Notification Center messages via a tray icon."""

    def __init__(self, tray_icon: QSystemTrayIcon, *, enabled: bool = True) -> None:
        self._tray_icon = tray_icon
        self.enabled = enabled

    def notify(self, title: str, body: str) -> bool:
        """Show a message.  Returns False when it was not delivered."""
        if not self.enabled:
            return False
        if not QSystemTrayIcon.supportsMessages():
            log.warning("Tray messages unsupported here; skipped %r", body)
            return False
        self._tray_icon.showMessage(
            title, body, QSystemTrayIcon.MessageIcon.Information,
        )
        return True
