"""Audio package."""

from .sounds import SoundManager, COMPLETION_SOUNDS, SOUND_NAMES

__all__ = ["SoundManager", "COMPLETION_SOUNDS", "SOUND_NAMES"]
