"""
Exponential low-pass location filter.

new = alpha * raw + (1 - alpha) * previous, applied per axis. A high alpha
follows the receiver closely and only shaves off single-fix jitter.
"""

from .base import LocationFilterBase


class LowPassFilter(LocationFilterBase):

    def __init__(self, alpha=0.95, **kwargs):
        """
        Args:
            alpha (float): Weight of the newest raw fix, in (0, 1]
            **kwargs: Gate options passed to LocationFilterBase
        """
        super().__init__(**kwargs)
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self.alpha = alpha
        self._lat = None
        self._lon = None

    def _smooth(self, latitude, longitude):
        if self._lat is None:
            self._lat = latitude
            self._lon = longitude
        else:
            self._lat = self.alpha * latitude + (1 - self.alpha) * self._lat
            self._lon = self.alpha * longitude + (1 - self.alpha) * self._lon
        return self._lat, self._lon

    def _reset_smoothing(self):
        self._lat = None
        self._lon = None
