"""Allow running Pomodori as a module: python -m pomodori."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from PyQt6.QtWidgets import QApplication, QSystemTrayIcon

from .app import PomodoriApp
from .settings import Settings, load_settings

log = logging.getLogger("pomodori")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pomodori",
        description="Menu-bar Pomodoro timer: 25 min work, 5 min break.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        metavar="PATH",
        help="Read preferences from PATH instead of the default settings.json",
    )
    parser.add_argument(
        "--no-sound",
        action="store_true",
        help="Do not play a sound when a session ends",
    )
    parser.add_argument(
        "--no-notifications",
        action="store_true",
        help="Do not show a notification when a session ends",
    )
    parser.add_argument(
        "--volume",
        type=int,
        default=None,
        metavar="0-100",
        help="Alert volume (default: from settings, 70)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log state transitions",
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    """Settings file values, overridden by command-line flags."""
    settings = load_settings(args.config)
    if args.no_sound:
        settings.sound_enabled = False
    if args.no_notifications:
        settings.notifications_enabled = False
    if args.volume is not None:
        settings.sound_volume = max(0, min(args.volume, 100))
    if args.verbose:
        settings.log_level = "DEBUG"
    return settings


def _log_unhandled(exc_type, exc, tb) -> None:
    """Log exceptions escaping Qt slots; the default hook would abort."""
    log.error("Unhandled error in event handler", exc_info=(exc_type, exc, tb))


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = build_settings(args)
    logging.getLogger().setLevel(settings.log_level)
    sys.excepthook = _log_unhandled

    app = QApplication(sys.argv[:1])
    app.setApplicationName("Pomodori")
    app.setOrganizationName("Pomodori")
    app.setQuitOnLastWindowClosed(False)

    if not QSystemTrayIcon.isSystemTrayAvailable():
        log.error("No system tray available; Pomodori needs a menu bar to live in")
        sys.exit(1)

    tray = PomodoriApp(settings)
    tray.show()
    log.info("Pomodori ready")

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
