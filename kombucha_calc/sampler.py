"""Elapsed fermentation time, sampled now and then on a recurring timer."""

import logging
import threading
import weakref
from datetime import datetime
from typing import Optional

from kombucha_calc.config import SAMPLE_INTERVAL_SEC

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def sample_elapsed_days(start_instant: Optional[datetime], now: datetime) -> float:
    """Days since start_instant, clamped at 0. No start means 0."""
    if start_instant is None:
        return 0.0
    elapsed = (now - start_instant).total_seconds() / SECONDS_PER_DAY
    return max(0.0, elapsed)


def _fire(ref, generation):
    # The timer only holds a weak reference, so a dropped sampler stops ticking
    sampler = ref()
    if sampler is not None:
        sampler._tick(generation)


class ElapsedSampler:
    """
    Keeps elapsed_days current for one start instant.

    track() samples immediately and then every `interval` seconds on a
    single daemon Timer. Changing the start instant cancels the running
    timer before a new one is scheduled; clearing it, or close(), stops
    sampling and resets elapsed_days to 0.
    """

    def __init__(self, interval=SAMPLE_INTERVAL_SEC, clock=datetime.now):
        self.interval = interval
        self._clock = clock
        self._lock = threading.Lock()
        self._timer = None
        self._generation = 0
        self.start_instant = None
        self.elapsed_days = 0.0

    @property
    def running(self):
        return self._timer is not None

    def track(self, start_instant):
        """Follow a new start instant; a no-op if it is unchanged and running."""
        with self._lock:
            if start_instant == self.start_instant and (start_instant is None or self._timer):
                return
            self._cancel()
            self.start_instant = start_instant
            if start_instant is None:
                self.elapsed_days = 0.0
                logger.debug("Start instant cleared, sampling stopped")
                return
            generation = self._generation
        logger.debug("Sampling elapsed time since %s every %ss", start_instant, self.interval)
        self._tick(generation)

    def sample(self):
        """Recompute elapsed_days from the clock."""
        self.elapsed_days = sample_elapsed_days(self.start_instant, self._clock())
        return self.elapsed_days

    def close(self):
        with self._lock:
            self._cancel()
            self.start_instant = None
            self.elapsed_days = 0.0

    def _tick(self, generation):
        with self._lock:
            # A cancelled timer may already have fired
            if generation != self._generation:
                return
            self.sample()
            timer = threading.Timer(self.interval, _fire, args=(weakref.ref(self), generation))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _cancel(self):
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False
