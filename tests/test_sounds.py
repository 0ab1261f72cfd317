"""Tests for alert synthesis and the SoundManager."""

from __future__ import annotations

import io
import wave

import numpy as np
import pytest

from pomodori.audio.sounds import (
    COMPLETION_SOUNDS,
    SAMPLE_RATE,
    SOUND_NAMES,
    SoundManager,
    encode_wav,
    render_break_complete,
    render_work_complete,
)
from pomodori.timer.engine import Session

from helpers import SignalCollector


def _read(data: bytes):
    with wave.open(io.BytesIO(data), "rb") as wf:
        return wf.getnchannels(), wf.getsampwidth(), wf.getframerate(), wf.getnframes()


class TestSynthesis:

    @pytest.mark.parametrize("render", [render_work_complete, render_break_complete])
    def test_valid_mono_pcm(self, render):
        channels, width, rate, frames = _read(render())
        assert (channels, width, rate) == (1, 2, SAMPLE_RATE)
        assert frames > SAMPLE_RATE // 4

    def test_encode_clips_out_of_range(self):
        data = encode_wav(np.array([2.0, -2.0, 0.0]))
        with wave.open(io.BytesIO(data), "rb") as wf:
            pcm = np.frombuffer(wf.readframes(3), dtype="<i2")
        assert list(pcm) == [32767, -32767, 0]

    def test_every_session_has_a_sound(self):
        assert set(COMPLETION_SOUNDS) == set(Session)
        assert COMPLETION_SOUNDS[Session.WORK] != COMPLETION_SOUNDS[Session.SHORT_BREAK]


class TestSoundManager:

    def test_caches_wav_files(self, qapp, tmp_path):
        mgr = SoundManager(sounds_dir=tmp_path)
        for name in SOUND_NAMES:
            assert (tmp_path / f"{name}.wav").exists()
        assert set(mgr.available) == set(SOUND_NAMES)

    def test_existing_files_are_kept(self, qapp, tmp_path):
        cached = tmp_path / "work_complete.wav"
        cached.write_bytes(render_work_complete())
        before = cached.stat().st_mtime_ns
        SoundManager(sounds_dir=tmp_path)
        assert cached.stat().st_mtime_ns == before

    def test_volume(self, qapp, tmp_path):
        mgr = SoundManager(sounds_dir=tmp_path, volume=40)
        assert mgr.volume == 40
        mgr.set_volume(150)
        assert mgr.volume == 100

    def test_unwritable_dir_leaves_nothing_loaded(self, qapp, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        mgr = SoundManager(sounds_dir=blocker / "sounds")
        assert mgr.available == ()

    def test_missing_effect_beeps(self, qapp, tmp_path, monkeypatch):
        beeps = SignalCollector()

        class FakeApp:
            @staticmethod
            def beep():
                beeps()

        monkeypatch.setattr("pomodori.audio.sounds.QApplication", FakeApp)
        mgr = SoundManager(sounds_dir=tmp_path)
        mgr.play("no_such_sound")
        assert len(beeps) == 1

    def test_disabled_is_silent(self, qapp, tmp_path, monkeypatch):
        beeps = SignalCollector()

        class FakeApp:
            @staticmethod
            def beep():
                beeps()

        monkeypatch.setattr("pomodori.audio.sounds.QApplication", FakeApp)
        mgr = SoundManager(sounds_dir=tmp_path, enabled=False)
        assert mgr.enabled is False
        mgr.play("no_such_sound")
        assert len(beeps) == 0

    @pytest.mark.parametrize("session", list(Session))
    def test_play_completion_picks_sound(self, qapp, tmp_path, monkeypatch, session):
        mgr = SoundManager(sounds_dir=tmp_path)
        played = SignalCollector()
        monkeypatch.setattr(mgr, "play", played)
        mgr.play_completion(session)
        assert played.items == [COMPLETION_SOUNDS[session]]


class TestCacheRepair:

    def test_empty_file_is_rerendered(self, qapp, tmp_path):
        cached = tmp_path / "work_complete.wav"
        cached.write_bytes(b"")
        mgr = SoundManager(sounds_dir=tmp_path)
        assert cached.read_bytes() == render_work_complete()
        assert "work_complete" in mgr.available

    def test_truncated_file_is_rerendered(self, qapp, tmp_path):
        cached = tmp_path / "break_complete.wav"
        cached.write_bytes(render_break_complete()[:2000])
        SoundManager(sounds_dir=tmp_path)
        assert cached.read_bytes() == render_break_complete()

    def test_garbage_file_is_rerendered(self, qapp, tmp_path):
        cached = tmp_path / "work_complete.wav"
        cached.write_bytes(b"not a wav at all")
        SoundManager(sounds_dir=tmp_path)
        _, _, _, frames = _read(cached.read_bytes())
        assert frames > 0

    def test_no_temp_files_left_behind(self, qapp, tmp_path):
        SoundManager(sounds_dir=tmp_path)
        assert sorted(p.name for p in tmp_path.iterdir()) == sorted(
            f"{name}.wav" for name in SOUND_NAMES
        )
