import threading

from core import (
    ConfigurationError,
    Cue,
    InvalidTransitionError,
    MeetingState,
    PersistenceError,
    meeting_length_seconds,
)
from cues import CuePlayer
from display import build_display
from scheduler import TickScheduler
from app_logging import logging

logger = logging.getLogger(__name__)


class WakeLock:
    """Keeps the display awake while a session is running. Acquire and release are idempotent."""

    def __init__(self, name='meeting-timer'):
        self.name = name
        self.held = False

    def acquire(self):
        if self.held:
            return
        logger.debug("Acquiring wake lock %s", self.name)
        self.held = True

    def release(self):
        if not self.held:
            return
        logger.debug("Releasing wake lock %s", self.name)
        self.held = False


class MeetingSession:
    """
    Owns one meeting: its state, the tick scheduler, the cue player and the
    wake lock. Display refreshes are pushed to listeners registered with
    add_listener(); they receive the dict built by display.build_display().
    """

    def __init__(self, state: MeetingState, store, cue_player=None, wake_lock=None,
                 interval=None, sounds_enabled=True):
        self.state = state
        self.store = store
        self.cue_player = cue_player if cue_player is not None else CuePlayer()
        self.wake_lock = wake_lock if wake_lock is not None else WakeLock()
        # bool, or a callable for a setting that can change while running
        self.sounds_enabled = sounds_enabled
        self.scheduler = TickScheduler(self.tick, interval)
        self._listeners = []
        self._lock = threading.RLock()
        self._ended = False

    @classmethod
    def create(cls, meeting_length_selection, num_participants, warning_time, store, **kwargs):
        """
        Starts a session from the stored snapshot when there is one, otherwise
        from the meeting-length selection and participant count.
        """
        if warning_time < 0:
            raise ConfigurationError(f"Warning time must not be negative, got {warning_time}")

        initial_seconds = meeting_length_seconds(meeting_length_selection)
        logger.info("Session config: meeting_length=%s (%ss), participants=%s",
                    meeting_length_selection, initial_seconds, num_participants)

        state = None
        snapshot = store.load()
        if snapshot:
            try:
                state = MeetingState.initialize(num_participants, initial_seconds, warning_time, snapshot)
                logger.info("Restored meeting from snapshot: %s", state)
            except ConfigurationError as e:
                logger.warning("Discarding unusable snapshot: %s", e)
                try:
                    store.clear()
                except PersistenceError as clear_error:
                    logger.warning("%s", clear_error)

        if state is None:
            state = MeetingState.initialize(num_participants, initial_seconds, warning_time)

        return cls(state, store, **kwargs)

    # --- Observers ---

    def add_listener(self, callback):
        self._listeners.append(callback)

    def remove_listener(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def display(self):
        return build_display(
            self.state,
            is_running=self.scheduler.running,
            sounds_enabled=self._sounds_enabled(),
        )

    def _notify(self):
        info = self.display()
        for listener in list(self._listeners):
            try:
                listener(info)
            except Exception:
                logger.exception("Display listener failed")

    # --- Lifecycle ---

    @property
    def ended(self):
        return self._ended

    def resume(self):
        with self._lock:
            if self._ended:
                raise InvalidTransitionError("Session has ended")
            self.wake_lock.acquire()
            self.scheduler.start()
        self._notify()

    def suspend(self):
        """Stops ticking and persists the counters, or clears them once the meeting is finished."""
        with self._lock:
            self.scheduler.stop()
            self.wake_lock.release()

            try:
                if self.state.is_finished():
                    self.store.clear()
                else:
                    self.store.save(self.state.snapshot())
            except PersistenceError as e:
                logger.error("Snapshot not persisted: %s", e)
                raise
        self._notify()

    def finish(self):
        """Ends the meeting. Safe to call more than once."""
        with self._lock:
            if self._ended:
                return
            logger.info("Finishing meeting: %s", self.state)
            self._ended = True
            self.cue_player.close()
            self.state.finish()
            self.suspend()

    def exit(self):
        """Explicit exit from any phase: same as finishing the meeting."""
        self.finish()

    # --- Timer and user actions ---

    def tick(self):
        if self.state.is_finished():
            return

        result = self.state.tick()
        if result.cue is not None:
            self._dispatch_cue(result.cue)
        self._notify()

    def advance_participant(self):
        """Returns True while there are still participants left to speak."""
        if self.state.is_finished():
            logger.warning("Ignoring next participant, meeting is finished")
            return False

        try:
            still_active = self.state.advance_participant()
        except InvalidTransitionError as e:
            logger.warning("Ignoring next participant: %s", e)
            return False

        if not still_active:
            logger.info("All %s participants have spoken", self.state.total_participants)
        self._notify()
        return still_active

    def _sounds_enabled(self):
        if callable(self.sounds_enabled):
            return bool(self.sounds_enabled())
        return bool(self.sounds_enabled)

    def _dispatch_cue(self, cue):
        if not self._sounds_enabled():
            logger.debug("Sounds disabled, not playing %s", cue.value)
            return
        try:
            if cue is Cue.WARNING:
                self.cue_player.play_warning_cue()
            elif cue is Cue.FINISHED:
                self.cue_player.play_finished_cue()
        except Exception as e:
            logger.warning("Cue %s failed: %s", cue.value, e)
