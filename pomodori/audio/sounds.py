"""Completion alerts synthesised with numpy and played via QSoundEffect.

Both alerts are rendered once into 16-bit mono WAV files under
``SOUNDS_DIR`` and reused on later launches.

Sound names
-----------
- ``work_complete``  — rising C-major arpeggio, time for a break
- ``break_complete`` — two-strike bell, back to work
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path
from typing import Callable

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect
from PyQt6.QtWidgets import QApplication

from ..timer.engine import Session

log = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "Pomodori"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SAMPLE_RATE = 44100

COMPLETION_SOUNDS: dict[Session, str] = {
    Session.WORK: "work_complete",
    Session.SHORT_BREAK: "break_complete",
}
SOUND_NAMES = tuple(COMPLETION_SOUNDS.values())


# ── synthesis ─────────────────────────────────────────────────────────────


def _envelope(length: int, attack: int, release: int, sustain: float = 0.6) -> np.ndarray:
    """Linear attack → flat sustain → linear release, lengths in samples."""
    env = np.full(length, sustain, dtype=np.float64)
    a = min(attack, length)
    if a:
        env[:a] = np.linspace(0.0, sustain, a)
    r = min(release, length - a)
    if r:
        env[length - r:] = np.linspace(sustain, 0.0, r)
    return env


def _tone(freq: float, seconds: float) -> np.ndarray:
    t = np.arange(int(SAMPLE_RATE * seconds)) / SAMPLE_RATE
    return np.sin(2 * np.pi * freq * t)


def _silence(seconds: float) -> np.ndarray:
    return np.zeros(int(SAMPLE_RATE * seconds))


def encode_wav(samples: np.ndarray) -> bytes:
    """Float samples in -1..1 → 16-bit PCM mono WAV bytes."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype("<i2")
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()


def render_work_complete() -> bytes:
    notes = (523.25, 659.25, 783.99, 1046.50)  # C5 E5 G5 C6
    parts: list[np.ndarray] = []
    for i, freq in enumerate(notes):
        held = i == len(notes) - 1
        dur = 0.4 if held else 0.11
        tone = _tone(freq, dur) * 0.5
        n = len(tone)
        parts.append(tone * _envelope(n, attack=80, release=n // 2 if held else 300))
        parts.append(_silence(0.02))
    return encode_wav(np.concatenate(parts))


def render_break_complete() -> bytes:
    strike = _tone(440.0, 0.6) * 0.35 + _tone(880.0, 0.6) * 0.08
    n = len(strike)
    strike = strike * _envelope(n, attack=int(SAMPLE_RATE * 0.01), release=int(n * 0.8))
    return encode_wav(np.concatenate([strike, _silence(0.08), strike]))


_RENDERERS: dict[str, Callable[[], bytes]] = {
    "work_complete": render_work_complete,
    "break_complete": render_break_complete,
}


def _is_cached(path: Path) -> bool:
    """True if *path* is a complete WAV with at least one frame."""
    if not path.is_file() or path.stat().st_size == 0:
        return False
    try:
        with wave.open(str(path), "rb") as wf:
            n = wf.getnframes()
            expected = n * wf.getsampwidth() * wf.getnchannels()
            return n > 0 and len(wf.readframes(n)) == expected
    except (wave.Error, EOFError, OSError):
        return False


# ── playback ──────────────────────────────────────────────────────────────


class SoundManager(QObject):
    """Caches the alert WAVs and plays them.

    Usage::

        sounds = SoundManager(parent=self, volume=70)
        sounds.play_completion(Session.WORK)
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
        volume: int = 70,
        enabled: bool = True,
    ) -> None:
        super().__init__(parent)
        self._enabled = enabled
        self._volume = max(0, min(volume, 100)) / 100.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}

        for name in self._ensure_wav_files():
            self._load_effect(name)

    # ── public API ────────────────────────────────────────────────────

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def volume(self) -> int:
        return round(self._volume * 100)

    @property
    def available(self) -> tuple[str, ...]:
        """Names that have a loaded effect (the rest fall back to a beep)."""
        return tuple(self._effects)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def set_volume(self, level: int) -> None:
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def play(self, name: str) -> None:
        if not self._enabled:
            return
        effect = self._effects.get(name)
        if effect is None:
            QApplication.beep()
            return
        effect.play()

    def play_completion(self, finished: Session) -> None:
        self.play(COMPLETION_SOUNDS[finished])

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> list[str]:
        ready: list[str] = []
        try:
            self._sounds_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            log.warning("Cannot create sounds dir %s: %s", self._sounds_dir, exc)
            return ready
        for name, render in _RENDERERS.items():
            path = self._sounds_dir / f"{name}.wav"
            if not _is_cached(path):
                # Write beside the target then rename, so an interrupted
                # write never leaves a truncated file under the real name.
                tmp = path.with_suffix(".wav.tmp")
                try:
                    tmp.write_bytes(render())
                    tmp.replace(path)
                except OSError as exc:
                    log.warning("Cannot cache %s: %s", path, exc)
                    tmp.unlink(missing_ok=True)
                    continue
            ready.append(name)
        return ready

    def _load_effect(self, name: str) -> None:
        effect = QSoundEffect(self)
        effect.setSource(QUrl.fromLocalFile(str(self._sounds_dir / f"{name}.wav")))
        effect.setVolume(self._volume)
        self._effects[name] = effect
