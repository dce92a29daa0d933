from datetime import datetime

import pytz

import config

# --- Display colors ---
RED = 'RED'
YELLOW = 'YELLOW'
GREEN = 'GREEN'
GREY = 'GREY'  # individual countdown once every participant has spoken


def format_time(seconds):
    """Formats seconds as M:SS, e.g. 65 -> '1:05'."""
    if seconds < 0:
        seconds = 0
    return f"{seconds // 60}:{seconds % 60:02d}"


def color_for(seconds, warning_time):
    if seconds == 0:
        return RED
    if seconds <= warning_time:
        return YELLOW
    return GREEN


def participant_text(state):
    if not state.is_individual_phase_active():
        return "All participants done"
    return f"Participant {state.completed_participants + 1}/{state.total_participants}"


def server_time_of_day(timezone_name=None):
    tz = pytz.timezone(timezone_name or config.DISPLAY_TIMEZONE)
    return datetime.now(tz).strftime("%H:%M:%S")


def build_display(state, is_running=False, sounds_enabled=False):
    """Everything a display needs to render the current state of the meeting."""
    warning_time = state.warning_time
    individual_active = state.is_individual_phase_active()
    individual_seconds = state.remaining_individual_seconds
    meeting_seconds = state.remaining_meeting_seconds

    if individual_active:
        individual_color = color_for(individual_seconds, warning_time)
    else:
        individual_color = GREY

    return {
        'individual': {
            'remaining_seconds': individual_seconds,
            'text': format_time(individual_seconds),
            'color': individual_color,
            'active': individual_active,
        },
        'participant_text': participant_text(state),
        'completed_participants': state.completed_participants,
        'total_participants': state.total_participants,
        'meeting': {
            'remaining_seconds': meeting_seconds,
            'text': format_time(meeting_seconds),
            'color': color_for(meeting_seconds, warning_time),
        },
        'warning_time': warning_time,
        'is_running': is_running,
        'is_finished': state.is_finished(),
        'sounds_enabled': sounds_enabled,
        'server_time_of_day': server_time_of_day(),
    }
