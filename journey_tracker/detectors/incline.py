"""
Incline / ramp events from the ramp-detection collaborator.

The collaborator reports pitch angles; the first reading of a journey is the
level baseline. A change of at least the threshold is reported once, and the
detector re-arms when the pitch returns within the threshold.
"""

from ..events import EventKind, Intensity, MotionEvent
from .base import Detector


class InclineDetector(Detector):

    name = 'incline'

    def __init__(self, threshold_deg=5.0):
        super().__init__()
        self.threshold_deg = threshold_deg

    def update(self, pitch_deg, now_ms):
        if self.baseline is None:
            self.baseline = float(pitch_deg)
            return None

        change = pitch_deg - self.baseline
        if abs(change) < self.threshold_deg:
            self.active = False
            return None
        if self.active:
            return None

        self.active = True
        self.fired_count += 1
        intensity = Intensity.UP if change > 0 else Intensity.DOWN
        return MotionEvent(EventKind.INCLINE, intensity, now_ms, value=change,
                           details={'pitch_deg': pitch_deg, 'baseline_deg': self.baseline})
