import numpy as np

import config
from app_logging import logging

logger = logging.getLogger(__name__)


def make_tone(freq, duration_ms, sample_rate=config.SAMPLE_RATE):
    """Sine tone with a short fade in/out, as float32 in [-1.0, 1.0]."""
    n_samples = int(sample_rate * duration_ms / 1000)
    t = np.arange(n_samples, dtype=np.float32) / sample_rate
    tone = 0.5 * np.sin(2 * np.pi * freq * t)

    # 10 ms fade in/out
    fade = min(n_samples // 2, int(sample_rate * 0.01))
    if fade:
        ramp = np.linspace(0.0, 1.0, fade, dtype=np.float32)
        tone[:fade] *= ramp
        tone[-fade:] *= ramp[::-1]
    return tone.astype(np.float32)


class CuePlayer:
    """
    Plays the warning and finished cues.

    The audio device is opened on first use. Playback is fire-and-forget and
    never raises: a missing cue must not disturb the timer.
    """

    def __init__(self, tones=None, sample_rate=config.SAMPLE_RATE):
        self.tones = tones or config.CUE_TONES
        self.sample_rate = sample_rate
        self._sd = None
        self._buffers = {}
        self._closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _open(self):
        if self._sd is not None:
            return True
        try:
            import sounddevice as sd
        except (ImportError, OSError) as e:
            logger.warning("Sound output unavailable: %s", e)
            return False

        logger.debug("Loading the cue sounds")
        self._buffers = {name: make_tone(freq, dur, self.sample_rate)
                         for name, (freq, dur) in self.tones.items()}
        self._sd = sd
        return True

    def play_warning_cue(self):
        logger.debug("Playing the bell sound")
        self._play('warning')

    def play_finished_cue(self):
        logger.debug("Playing the airhorn sound")
        self._play('finished')

    def _play(self, name):
        if self._closed:
            logger.debug("Cue player is closed, skipping %s", name)
            return
        if not self._open():
            return
        try:
            # Rewind: whatever is playing stops, the cue starts from the beginning.
            self._sd.stop()
            self._sd.play(self._buffers[name], self.sample_rate)
        except Exception as e:
            logger.warning("Could not play %s cue: %s", name, e)

    def close(self):
        if self._closed:
            return
        self._closed = True
        if self._sd is not None:
            try:
                self._sd.stop()
            except Exception as e:
                logger.warning("Could not stop sound output: %s", e)
        self._sd = None
        self._buffers = {}
