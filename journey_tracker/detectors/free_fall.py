"""
Free-fall detection.

While the device falls the measured acceleration magnitude collapses towards
zero. The length of the dip gives the drop height (h = g * t² / 2): drops higher
than the fall height are reported as falls, shorter ones as bumps. The decision
is made on the recovery edge, once the magnitude climbs back.
"""

from ..events import EventKind, Intensity, MotionEvent
from .base import Detector

GRAVITY = 9.81  # m/s²


class FreeFallDetector(Detector):

    name = 'free_fall'

    def __init__(self, fraction=0.3, baseline_weight=0.05, fall_height_m=0.1524):
        super().__init__()
        self.fraction = fraction
        self.baseline_weight = baseline_weight
        self.fall_height_m = fall_height_m

    def update(self, magnitude, now_ms, cooldown, fallen=False):
        if self.baseline is None:
            if magnitude > 0:
                self.baseline = float(magnitude)
            return None

        if magnitude < self.baseline * self.fraction:
            if self.condition_start_ms is None:
                self.condition_start_ms = now_ms
            return None

        event = None
        if self.condition_start_ms is not None:
            event = self._resolve(now_ms, cooldown, fallen)
            self.condition_start_ms = None

        self.baseline = (1 - self.baseline_weight) * self.baseline + self.baseline_weight * magnitude
        return event

    def _resolve(self, now_ms, cooldown, fallen):
        seconds = (now_ms - self.condition_start_ms) / 1000.0
        height = 0.5 * GRAVITY * seconds ** 2
        is_fall = height > self.fall_height_m

        if not is_fall and fallen:
            return None
        if not cooldown.ready(now_ms):
            return None

        cooldown.trigger(now_ms)
        self.fired_count += 1
        details = {'source': 'free_fall', 'free_fall_ms': now_ms - self.condition_start_ms, 'height_m': height}
        if is_fall:
            return MotionEvent(EventKind.FALL, Intensity.SEVERE, now_ms, value=height, details=details)
        return MotionEvent(EventKind.BUMP, Intensity.MINOR, now_ms, value=height, details=details)
