# config.py

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_bool(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


# --- MEETING LENGTHS ---
# Index of the meeting-length selection -> minutes. Anything else is 0 minutes.
MEETING_LENGTH_MINUTES = {
    0: 5,
    1: 10,
    2: 15,
    3: 20,
}

# --- USER SETTINGS ---
# Seconds remaining on the individual countdown at which the warning cue fires.
DEFAULT_WARNING_TIME = 15
WARNING_TIME = int(os.getenv('WARNING_TIME', DEFAULT_WARNING_TIME))
SOUNDS_ENABLED = _env_bool('SOUNDS_ENABLED', True)

# --- TIMER ---
TICK_INTERVAL_SECONDS = float(os.getenv('TICK_INTERVAL_SECONDS', '1.0'))
DISPLAY_TIMEZONE = os.getenv('DISPLAY_TIMEZONE', 'UTC')

# --- SNAPSHOT FILE CONFIGURATION ---
STATE_FILE = os.getenv('STATE_FILE', os.path.join('state', 'meeting_state.json'))

# Persisted snapshot keys. All five are written together and cleared together.
REMAINING_INDIVIDUAL_SECONDS = 'remainingIndividualSeconds'
REMAINING_MEETING_SECONDS = 'remainingMeetingSeconds'
STARTING_INDIVIDUAL_SECONDS = 'startingIndividualSeconds'
COMPLETED_PARTICIPANTS = 'completedParticipants'
TOTAL_PARTICIPANTS = 'totalParticipants'

SNAPSHOT_KEYS = (
    REMAINING_INDIVIDUAL_SECONDS,
    REMAINING_MEETING_SECONDS,
    STARTING_INDIVIDUAL_SECONDS,
    COMPLETED_PARTICIPANTS,
    TOTAL_PARTICIPANTS,
)

# --- AUDIO CUES ---
# cue name -> (frequency Hz, duration ms)
SAMPLE_RATE = 44100
CUE_TONES = {
    'warning': (880, 400),   # bell
    'finished': (220, 1200),  # airhorn
}

# --- SERVER ---
HOST = os.getenv('HOST', '0.0.0.0')
PORT = int(os.getenv('PORT', '5000'))

# --- COMBINED INITIAL SETTINGS ---
# User-adjustable settings the server starts with.
INITIAL_SETTINGS = {
    'warning_time': WARNING_TIME,
    'sounds_enabled': SOUNDS_ENABLED,
}
