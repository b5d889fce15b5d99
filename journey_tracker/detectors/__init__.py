"""
Motion detectors.

Each detector is an independent state machine fed by the MotionClassifier. The
inertial and speed detectors share one Cooldown instance passed in explicitly.
"""

from .backward import BackwardDetector
from .base import Cooldown, Detector
from .bump import BumpDetector
from .fall import FallDetector, angle_between
from .free_fall import FreeFallDetector
from .incline import InclineDetector
from .speed import OverspeedDetector, SpeedLimitDetector
from .stillness import StillnessDetector
from .turn import TurnDetector

__all__ = [
    'BackwardDetector', 'BumpDetector', 'Cooldown', 'Detector', 'FallDetector',
    'FreeFallDetector', 'InclineDetector', 'OverspeedDetector', 'SpeedLimitDetector',
    'StillnessDetector', 'TurnDetector', 'angle_between',
]
