import threading
from enum import Enum
from typing import NamedTuple, Optional

import config
from app_logging import logging

logger = logging.getLogger(__name__)


# --- Errors ---

class TimerError(Exception):
    """Base class for meeting timer errors."""


class ConfigurationError(TimerError):
    """Invalid session configuration. Raised before any timer starts."""


class InvalidTransitionError(TimerError):
    """A state change that is not allowed from the current state."""


class PersistenceError(TimerError):
    """The snapshot store could not be read or written."""


# --- Tick results ---

class Cue(Enum):
    WARNING = 'warning'
    FINISHED = 'finished'


class TickResult(NamedTuple):
    remaining_individual_seconds: int
    remaining_meeting_seconds: int
    cue: Optional[Cue] = None


# --- Configuration helpers ---

def meeting_length_seconds(selection):
    """Meeting length in seconds for a meeting-length selection index."""
    return config.MEETING_LENGTH_MINUTES.get(selection, 0) * 60


# --- Meeting state ---

class MeetingState:
    """
    Counters of one meeting session.

    Every operation runs under the same lock, so the scheduled tick and the
    user actions never interleave mid-update.
    """

    def __init__(self, remaining_individual_seconds, remaining_meeting_seconds,
                 starting_individual_seconds, completed_participants,
                 total_participants, warning_time):
        self._lock = threading.RLock()
        self._remaining_individual_seconds = remaining_individual_seconds
        self._remaining_meeting_seconds = remaining_meeting_seconds
        self._starting_individual_seconds = starting_individual_seconds
        self._completed_participants = completed_participants
        self._total_participants = total_participants
        self._warning_time = warning_time
        self._finished = False

        self._validate()
        if not self.is_individual_phase_active():
            self._remaining_individual_seconds = 0

    @classmethod
    def initialize(cls, total_participants, initial_meeting_seconds, warning_time, snapshot=None):
        """
        Builds the state from fresh configuration, or from a snapshot.

        Keys present in the snapshot always win. Missing keys fall back to the
        value computed from the configuration and the fields restored before it.
        """
        if initial_meeting_seconds < 0:
            raise ConfigurationError(f"Meeting length must not be negative, got {initial_meeting_seconds}")
        if warning_time < 0:
            raise ConfigurationError(f"Warning time must not be negative, got {warning_time}")

        snapshot = snapshot or {}

        total = snapshot.get(config.TOTAL_PARTICIPANTS, total_participants)
        if total < 1:
            raise ConfigurationError(f"At least one participant is required, got {total}")

        remaining_meeting = snapshot.get(config.REMAINING_MEETING_SECONDS, initial_meeting_seconds)
        starting_individual = snapshot.get(config.STARTING_INDIVIDUAL_SECONDS, remaining_meeting // total)
        remaining_individual = snapshot.get(config.REMAINING_INDIVIDUAL_SECONDS, starting_individual)
        completed = snapshot.get(config.COMPLETED_PARTICIPANTS, 0)

        return cls(
            remaining_individual_seconds=remaining_individual,
            remaining_meeting_seconds=remaining_meeting,
            starting_individual_seconds=starting_individual,
            completed_participants=completed,
            total_participants=total,
            warning_time=warning_time,
        )

    def _validate(self):
        counters = {
            'remaining_individual_seconds': self._remaining_individual_seconds,
            'remaining_meeting_seconds': self._remaining_meeting_seconds,
            'starting_individual_seconds': self._starting_individual_seconds,
            'completed_participants': self._completed_participants,
        }
        for name, value in counters.items():
            if value < 0:
                raise ConfigurationError(f"{name} must not be negative, got {value}")
        if self._total_participants < 1:
            raise ConfigurationError(f"At least one participant is required, got {self._total_participants}")
        if self._completed_participants > self._total_participants:
            raise ConfigurationError(
                f"completed_participants ({self._completed_participants}) exceeds "
                f"total_participants ({self._total_participants})"
            )

    # --- Operations ---

    def tick(self):
        """One elapsed second. Returns the new counters and the cue to play, if any."""
        with self._lock:
            cue = None
            if self._finished:
                return TickResult(self._remaining_individual_seconds, self._remaining_meeting_seconds)

            if self.is_individual_phase_active() and self._remaining_individual_seconds > 0:
                self._remaining_individual_seconds -= 1

                # Exact equality only: a turn that starts below the threshold never warns.
                if self._remaining_individual_seconds == self._warning_time:
                    cue = Cue.WARNING
                elif self._remaining_individual_seconds == 0:
                    cue = Cue.FINISHED

            if self._remaining_meeting_seconds > 0:
                self._remaining_meeting_seconds -= 1

            return TickResult(self._remaining_individual_seconds, self._remaining_meeting_seconds, cue)

    def advance_participant(self):
        """Moves on to the next participant. Returns True while the individual phase is still active."""
        with self._lock:
            if not self.is_individual_phase_active():
                raise InvalidTransitionError(
                    f"All {self._total_participants} participants have already spoken"
                )

            self._completed_participants += 1

            if not self.is_individual_phase_active():
                logger.debug("Individual phase complete")
                self._remaining_individual_seconds = 0
                return False

            self._remaining_individual_seconds = min(self._starting_individual_seconds,
                                                     self._remaining_meeting_seconds)
            return True

    def finish(self):
        with self._lock:
            self._finished = True

    # --- Queries ---

    def is_individual_phase_active(self):
        with self._lock:
            return self._completed_participants < self._total_participants

    def is_finished(self):
        with self._lock:
            return self._finished

    def snapshot(self):
        """The persisted form of the counters."""
        with self._lock:
            return {
                config.REMAINING_INDIVIDUAL_SECONDS: self._remaining_individual_seconds,
                config.REMAINING_MEETING_SECONDS: self._remaining_meeting_seconds,
                config.STARTING_INDIVIDUAL_SECONDS: self._starting_individual_seconds,
                config.COMPLETED_PARTICIPANTS: self._completed_participants,
                config.TOTAL_PARTICIPANTS: self._total_participants,
            }

    @property
    def remaining_individual_seconds(self):
        with self._lock:
            return self._remaining_individual_seconds

    @property
    def remaining_meeting_seconds(self):
        with self._lock:
            return self._remaining_meeting_seconds

    @property
    def starting_individual_seconds(self):
        with self._lock:
            return self._starting_individual_seconds

    @property
    def completed_participants(self):
        with self._lock:
            return self._completed_participants

    @property
    def total_participants(self):
        with self._lock:
            return self._total_participants

    @property
    def warning_time(self):
        return self._warning_time

    def __repr__(self):
        with self._lock:
            return (
                f"MeetingState(individual={self._remaining_individual_seconds}, "
                f"meeting={self._remaining_meeting_seconds}, "
                f"participants={self._completed_participants}/{self._total_participants}, "
                f"finished={self._finished})"
            )
