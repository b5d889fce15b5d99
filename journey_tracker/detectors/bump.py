"""
Vertical bump detection.

Compares the accelerometer z axis with a slowly adapting baseline. The baseline
only follows readings that stay within a narrow band around it, so a bump never
drags the baseline towards itself.
"""

from ..events import EventKind, Intensity, MotionEvent
from .base import Detector


class BumpDetector(Detector):

    name = 'bump'

    def __init__(self, minor_threshold=2.0, major_threshold=4.0, baseline_band=0.2, baseline_weight=0.05):
        super().__init__()
        self.minor_threshold = minor_threshold
        self.major_threshold = major_threshold
        self.baseline_band = baseline_band
        self.baseline_weight = baseline_weight

    def update(self, z, now_ms, cooldown, fallen=False):
        """
        Args:
            z (float): Vertical acceleration (m/s²)
            now_ms (int): Sample time
            cooldown (Cooldown): Shared debounce window
            fallen (bool): Fall state; bumps are not reported while fallen

        Returns:
            MotionEvent or None
        """
        if self.baseline is None:
            self.baseline = float(z)
            return None

        deviation = abs(z - self.baseline)
        if deviation <= self.baseline_band:
            self.baseline = (1 - self.baseline_weight) * self.baseline + self.baseline_weight * z

        if fallen or deviation <= self.minor_threshold:
            return None
        if not cooldown.ready(now_ms):
            return None

        cooldown.trigger(now_ms)
        self.fired_count += 1
        intensity = Intensity.MAJOR if deviation > self.major_threshold else Intensity.MINOR
        return MotionEvent(EventKind.BUMP, intensity, now_ms, value=deviation)
