"""
Sharp turn (jerk) detection from the gyroscope.
"""

from ..events import EventKind, Intensity, MotionEvent
from .base import Detector


class TurnDetector(Detector):
    """
    Reports sudden angular-rate spikes on the x or z axis.

    Rates below the noise floor are ignored outright; the sign of the dominant
    axis gives the turn direction (positive = counter-clockwise = left).
    """

    name = 'turn'

    def __init__(self, noise_floor=0.5, minor_threshold=2.0, major_threshold=4.0):
        super().__init__()
        self.noise_floor = noise_floor
        self.minor_threshold = minor_threshold
        self.major_threshold = major_threshold

    def update(self, gx, gz, now_ms, cooldown):
        axis, dominant = ('x', gx) if abs(gx) >= abs(gz) else ('z', gz)
        rate = abs(dominant)

        if rate < self.noise_floor or rate <= self.minor_threshold:
            return None
        if not cooldown.ready(now_ms):
            return None

        cooldown.trigger(now_ms)
        self.fired_count += 1
        intensity = Intensity.MAJOR if rate > self.major_threshold else Intensity.MINOR
        return MotionEvent(
            EventKind.SHARP_TURN, intensity, now_ms,
            value=rate,
            details={
                'direction': 'left' if dominant > 0 else 'right',
                'axis': axis,
            },
        )
