import threading

import config
from app_logging import logging

logger = logging.getLogger(__name__)


class TickScheduler:
    """
    Calls `on_tick` every `interval` seconds on a worker thread.

    The first tick fires one interval after start(). Ticks are delivered one
    after another by the same thread, so two ticks never run at once.
    """

    def __init__(self, on_tick, interval=None):
        self.on_tick = on_tick
        self.interval = config.TICK_INTERVAL_SECONDS if interval is None else interval
        self._lock = threading.Lock()
        self._thread = None
        self._stop_event = None

    @property
    def running(self):
        with self._lock:
            return self._thread is not None

    def start(self):
        with self._lock:
            if self._thread is not None:
                return
            logger.debug("Starting a new timer")
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name="tick-scheduler",
                daemon=True,
            )
            self._thread.start()

    def stop(self):
        """Stops ticking. No tick is delivered after this returns."""
        with self._lock:
            thread, stop_event = self._thread, self._stop_event
            if thread is None:
                return
            logger.debug("Canceling timer")
            self._thread = None
            self._stop_event = None
            stop_event.set()

        # a tick callback may stop its own scheduler
        if thread is not threading.current_thread():
            thread.join()

    def _run(self, stop_event):
        while not stop_event.wait(self.interval):
            try:
                self.on_tick()
            except Exception:
                logger.exception("Tick failed")
