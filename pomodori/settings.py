"""Shell preferences.

Read from an optional JSON file at:
    ~/Library/Application Support/Pomodori/settings.json

The app only reads this file; session durations are fixed and are not
part of the settings.

Usage::

    settings = load_settings()
    if settings.sound_enabled:
        ...
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path

log = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "Pomodori"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class Settings:
    """User-adjustable presentation preferences."""

    # ── audio ─────────────────────────────────────────────────────────
    sound_enabled: bool = True
    sound_volume: int = 70                 # 0-100

    # ── notifications ─────────────────────────────────────────────────
    notifications_enabled: bool = True

    # ── diagnostics ───────────────────────────────────────────────────
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        # "false" from a hand-edited file is truthy; only real bools count
        for f in fields(self):
            value = getattr(self, f.name)
            if f.type == "bool" and not isinstance(value, bool):
                log.warning("Setting %s=%r is not true/false; using %r",
                            f.name, value, f.default)
                setattr(self, f.name, f.default)
        self.sound_volume = max(0, min(int(self.sound_volume), 100))
        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            self.log_level = "INFO"


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from *path* (default ``SETTINGS_PATH``).

    Missing file, bad JSON or bad values all fall back to defaults.
    """
    path = path or SETTINGS_PATH
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        # Only use keys that exist in the dataclass
        valid_keys = {f.name for f in fields(Settings)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        log.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return Settings()
