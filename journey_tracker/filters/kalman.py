"""
Scalar Kalman location filter.

Latitude and longitude are filtered independently with a 1-D random-walk model:
predict adds the process variance Q to the estimate variance P, update blends
the fix in with gain K = P / (P + R).
"""

import numpy as np
from filterpy.kalman import KalmanFilter as FilterPyKalmanFilter

from .base import LocationFilterBase


def _axis_filter(process_variance, measurement_variance):
    kf = FilterPyKalmanFilter(dim_x=1, dim_z=1)
    kf.F = np.array([[1.0]])
    kf.H = np.array([[1.0]])
    kf.Q = np.array([[process_variance]])
    kf.R = np.array([[measurement_variance]])
    return kf


class KalmanLocationFilter(LocationFilterBase):
    """
    Per-axis Kalman smoothing of the coordinate stream.

    Args:
        process_variance (float): Q, expected drift of the true position per fix (deg²)
        measurement_variance (float): R, variance of a raw fix (deg²)
    """

    def __init__(self, process_variance=1e-5, measurement_variance=1e-4, **kwargs):
        super().__init__(**kwargs)
        self.process_variance = process_variance
        self.measurement_variance = measurement_variance
        self._lat_kf = None
        self._lon_kf = None

    def _seed(self, latitude, longitude):
        self._lat_kf = _axis_filter(self.process_variance, self.measurement_variance)
        self._lon_kf = _axis_filter(self.process_variance, self.measurement_variance)
        # First fix is taken as-is with the measurement's own uncertainty
        self._lat_kf.x = np.array([[latitude]])
        self._lon_kf.x = np.array([[longitude]])
        self._lat_kf.P = np.array([[self.measurement_variance]])
        self._lon_kf.P = np.array([[self.measurement_variance]])

    def _smooth(self, latitude, longitude):
        if self._lat_kf is None:
            self._seed(latitude, longitude)
            return latitude, longitude

        for kf, value in ((self._lat_kf, latitude), (self._lon_kf, longitude)):
            kf.predict()
            kf.update(np.array([[value]]))

        return float(self._lat_kf.x[0, 0]), float(self._lon_kf.x[0, 0])

    def _reset_smoothing(self):
        self._lat_kf = None
        self._lon_kf = None

    def get_variance(self):
        """Current estimate variance per axis as (varianceLat, varianceLon), or None."""
        if self._lat_kf is None:
            return None
        return float(self._lat_kf.P[0, 0]), float(self._lon_kf.P[0, 0])
