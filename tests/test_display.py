# tests/test_display.py

import pytest

from core import MeetingState
from display import GREEN, GREY, RED, YELLOW, build_display, color_for, format_time, participant_text


@pytest.mark.parametrize("seconds, text", [
    (0, "0:00"),
    (5, "0:05"),
    (59, "0:59"),
    (60, "1:00"),
    (65, "1:05"),
    (600, "10:00"),
    (3725, "62:05"),
])
def test_format_time(seconds, text):
    assert format_time(seconds) == text


def test_format_time_parses_back_to_seconds():
    for seconds in range(0, 4000, 37):
        minutes, secs = format_time(seconds).split(":")
        assert len(secs) == 2
        assert int(minutes) * 60 + int(secs) == seconds


def test_format_time_clamps_negative_input():
    assert format_time(-3) == "0:00"


@pytest.mark.parametrize("warning_time", [0, 1, 10, 300])
def test_zero_is_always_red(warning_time):
    assert color_for(0, warning_time) == RED


@pytest.mark.parametrize("seconds, warning_time, color", [
    (1, 10, YELLOW),
    (10, 10, YELLOW),
    (11, 10, GREEN),
    (1, 0, GREEN),
    (200, 30, GREEN),
])
def test_color_for(seconds, warning_time, color):
    assert color_for(seconds, warning_time) == color


def test_participant_text_counts_current_speaker():
    state = MeetingState.initialize(total_participants=4, initial_meeting_seconds=600, warning_time=10)
    assert participant_text(state) == "Participant 1/4"
    state.advance_participant()
    assert participant_text(state) == "Participant 2/4"


def test_build_display_while_individual_phase_runs():
    state = MeetingState.initialize(total_participants=2, initial_meeting_seconds=300, warning_time=10)
    for _ in range(141):
        state.tick()

    info = build_display(state, is_running=True, sounds_enabled=True)
    assert info['individual'] == {'remaining_seconds': 9, 'text': '0:09', 'color': YELLOW, 'active': True}
    assert info['meeting'] == {'remaining_seconds': 159, 'text': '2:39', 'color': GREEN}
    assert info['participant_text'] == "Participant 1/2"
    assert info['is_running'] is True
    assert info['is_finished'] is False
    assert info['sounds_enabled'] is True
    assert len(info['server_time_of_day']) == 8


def test_build_display_greys_out_finished_individual_phase():
    state = MeetingState.initialize(total_participants=1, initial_meeting_seconds=300, warning_time=10)
    state.advance_participant()

    info = build_display(state)
    assert info['individual']['active'] is False
    assert info['individual']['color'] == GREY
    assert info['individual']['text'] == "0:00"
    assert info['participant_text'] == "All participants done"
    assert info['meeting']['color'] == GREEN
