# tests/test_cues.py

import sys
import types

import numpy as np
import pytest

from cues import CuePlayer, make_tone


class FakeSoundDevice(types.ModuleType):
    def __init__(self, fail=False):
        super().__init__("sounddevice")
        self.calls = []
        self.fail = fail

    def stop(self):
        self.calls.append(("stop",))

    def play(self, data, samplerate):
        if self.fail:
            raise RuntimeError("PortAudio error")
        self.calls.append(("play", len(data), samplerate))


@pytest.fixture
def fake_sd(monkeypatch):
    sd = FakeSoundDevice()
    monkeypatch.setitem(sys.modules, "sounddevice", sd)
    return sd


def test_make_tone_length_and_range():
    tone = make_tone(440, 250, sample_rate=8000)
    assert tone.dtype == np.float32
    assert len(tone) == 2000
    assert np.max(np.abs(tone)) <= 0.5
    assert tone[0] == 0.0


def test_cues_rewind_then_play(fake_sd):
    player = CuePlayer(tones={'warning': (880, 100), 'finished': (220, 200)}, sample_rate=8000)

    player.play_warning_cue()
    player.play_finished_cue()

    assert fake_sd.calls == [
        ("stop",), ("play", 800, 8000),
        ("stop",), ("play", 1600, 8000),
    ]


def test_playback_errors_are_swallowed(monkeypatch):
    sd = FakeSoundDevice(fail=True)
    monkeypatch.setitem(sys.modules, "sounddevice", sd)

    player = CuePlayer(sample_rate=8000)
    player.play_warning_cue()
    player.play_finished_cue()


def test_closed_player_stays_silent(fake_sd):
    with CuePlayer(sample_rate=8000) as player:
        player.play_warning_cue()
    player.play_finished_cue()

    plays = [call for call in fake_sd.calls if call[0] == "play"]
    assert len(plays) == 1
    assert fake_sd.calls[-1] == ("stop",)
