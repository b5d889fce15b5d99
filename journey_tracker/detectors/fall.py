"""
Fall detection from device orientation.

The first accelerometer samples of a journey calibrate the gravity vector. A
fall is the device staying tilted more than the fall angle away from that
vector for a sustained period. Once fallen, the detector stays latched until
the angle comes back under the threshold.
"""

import logging

import numpy as np

from ..events import EventKind, Intensity, MotionEvent
from .base import Detector

logger = logging.getLogger(__name__)


def angle_between(a, b):
    """
    Angle between two 3-D vectors in degrees.

    Returns:
        float or None: None when either vector has zero magnitude
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    norms = np.linalg.norm(a) * np.linalg.norm(b)
    if norms == 0 or not np.isfinite(norms):
        return None
    cosine = np.clip(np.dot(a, b) / norms, -1.0, 1.0)
    return float(np.degrees(np.arccos(cosine)))


class FallDetector(Detector):
    """
    Args:
        angle_deg (float): Tilt from the calibrated gravity vector that counts as fallen
        sustain_ms (int): How long the tilt must hold before the fall fires
        calibration_samples (int): Samples averaged into the gravity baseline
    """

    name = 'fall'

    def __init__(self, angle_deg=45.0, sustain_ms=500, calibration_samples=1):
        super().__init__()
        self.angle_deg = angle_deg
        self.sustain_ms = sustain_ms
        self.calibration_samples = calibration_samples
        self._calibration = []
        self.last_angle = None

    @property
    def is_fallen(self):
        return self.active

    def update(self, x, y, z, now_ms, cooldown):
        vector = np.array([x, y, z], dtype=float)

        if self.baseline is None:
            if np.linalg.norm(vector) == 0:
                return None
            self._calibration.append(vector)
            if len(self._calibration) >= self.calibration_samples:
                self.baseline = np.mean(self._calibration, axis=0)
                self._calibration = []
            return None

        angle = angle_between(vector, self.baseline)
        if angle is None:
            return None
        self.last_angle = angle

        if angle <= self.angle_deg:
            if self.active:
                logger.info(f"Recovered from fall (tilt {angle:.1f}°)")
            self.condition_start_ms = None
            self.active = False
            return None

        if self.active:
            return None
        if self.condition_start_ms is None:
            self.condition_start_ms = now_ms
        if now_ms - self.condition_start_ms < self.sustain_ms:
            return None
        if not cooldown.ready(now_ms):
            return None

        cooldown.trigger(now_ms)
        self.active = True
        self.fired_count += 1
        return MotionEvent(
            EventKind.FALL, Intensity.SEVERE, now_ms,
            value=angle,
            details={'source': 'orientation', 'tilt_ms': now_ms - self.condition_start_ms},
        )

    def reset(self):
        super().reset()
        self._calibration = []
        self.last_angle = None
