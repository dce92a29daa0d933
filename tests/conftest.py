# tests/conftest.py
"""
Pytest configuration and shared fixtures.

Test settings go into the environment before any project module is imported:
no sounds, and a tick interval long enough that the scheduler never fires
on its own during a test.
"""

import os
import sys

import pytest

os.environ["SOUNDS_ENABLED"] = "false"
os.environ["TICK_INTERVAL_SECONDS"] = "3600"
os.environ["WARNING_TIME"] = "10"

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from storage import SnapshotStore  # noqa: E402


class FakeCuePlayer:
    def __init__(self, fail=False):
        self.played = []
        self.closed = False
        self.fail = fail

    def play_warning_cue(self):
        if self.fail:
            raise RuntimeError("no audio device")
        self.played.append("warning")

    def play_finished_cue(self):
        if self.fail:
            raise RuntimeError("no audio device")
        self.played.append("finished")

    def close(self):
        self.closed = True


class FakeWakeLock:
    def __init__(self):
        self.held = False
        self.acquire_calls = 0
        self.release_calls = 0

    def acquire(self):
        self.acquire_calls += 1
        self.held = True

    def release(self):
        self.release_calls += 1
        self.held = False


@pytest.fixture
def store(tmp_path):
    return SnapshotStore(str(tmp_path / "state" / "meeting_state.json"))


@pytest.fixture
def cue_player():
    return FakeCuePlayer()


@pytest.fixture
def wake_lock():
    return FakeWakeLock()


@pytest.fixture
def failing_cue_player():
    return FakeCuePlayer(fail=True)
