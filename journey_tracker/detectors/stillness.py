"""
Stillness / stop detection.

The accelerometer is considered still when every axis changes by less than a
small delta between consecutive samples. A stop is reported once stillness has
lasted the full stillness window; anything shorter is discarded silently. The
stop is closed (and its duration recorded) when movement resumes or the journey
is paused or stopped.
"""

import logging

from ..events import EventKind, Intensity, MotionEvent, StopRecord
from .base import Detector

logger = logging.getLogger(__name__)


class StillnessDetector(Detector):
    """
    Args:
        delta (float): Maximum per-axis change between samples still counted as still
        duration_ms (int): Continuous stillness needed before a stop is reported
        on_stop (callable): Receives a StopRecord when a reported stop ends
    """

    name = 'stillness'

    def __init__(self, delta=0.05, duration_ms=15000, on_stop=None):
        super().__init__()
        self.delta = delta
        self.duration_ms = duration_ms
        self.on_stop = on_stop
        self.previous = None

    def update(self, sample):
        """Feed one accelerometer sample; returns the stop event when the window completes."""
        current = (sample.x, sample.y, sample.z)
        previous, self.previous = self.previous, current
        if previous is None:
            return None

        still = all(abs(c - p) < self.delta for c, p in zip(current, previous))
        if not still:
            self.close(sample.timestamp_ms)
            return None

        if self.condition_start_ms is None:
            self.condition_start_ms = sample.timestamp_ms
        return self.poll(sample.timestamp_ms)

    def poll(self, now_ms):
        """Fire the stop event if the pending stillness has lasted long enough."""
        if self.condition_start_ms is None or self.active:
            return None

        elapsed = now_ms - self.condition_start_ms
        if elapsed < self.duration_ms:
            return None

        self.active = True
        self.fired_count += 1
        logger.debug(f"Stop detected after {elapsed / 1000:.1f}s of stillness")
        return MotionEvent(
            EventKind.STOP, Intensity.NONE, now_ms,
            value=float(elapsed),
            details={'start_ms': self.condition_start_ms},
        )

    def close(self, now_ms):
        """
        End the current stillness condition.

        A stop that already fired is handed to on_stop; a condition that never
        reached the stillness window is dropped.

        Returns:
            StopRecord or None
        """
        record = None
        if self.active and self.condition_start_ms is not None:
            record = StopRecord(self.condition_start_ms, now_ms)
            if self.on_stop is not None:
                self.on_stop(record)
        elif self.condition_start_ms is not None:
            logger.debug(
                f"Discarding {now_ms - self.condition_start_ms}ms pause "
                f"(< {self.duration_ms}ms stillness window)"
            )

        self.condition_start_ms = None
        self.active = False
        return record

    def reset(self):
        super().reset()
        self.previous = None
