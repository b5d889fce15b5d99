"""
Semantic events emitted by the motion classifier.
"""

from dataclasses import dataclass, field
from enum import Enum


class EventKind(str, Enum):
    STOP = 'stop'
    BUMP = 'bump'
    FALL = 'fall'
    SHARP_TURN = 'sharp_turn'
    OVERSPEED = 'overspeed'
    SPEED_LIMIT = 'speed_limit'
    BACKWARD = 'backward'
    INCLINE = 'incline'


class Intensity(str, Enum):
    NONE = 'none'
    MINOR = 'minor'
    MAJOR = 'major'
    SEVERE = 'severe'
    UP = 'up'
    DOWN = 'down'


@dataclass(frozen=True)
class MotionEvent:
    """
    A classified motion event.

    Attributes:
        kind: What happened
        intensity: Severity or direction label forwarded to the notification sink
        timestamp_ms: Time of the sample that fired the detector
        value: The measurement that crossed the threshold (units depend on kind)
        details: Extra detector-specific values (direction, angles, durations)
    """

    kind: EventKind
    intensity: Intensity
    timestamp_ms: int
    value: float = 0.0
    details: dict = field(default_factory=dict)

    def as_notification(self):
        """Return the (eventKind, intensityLabel) tuple a notification sink expects."""
        return self.kind.value, self.intensity.value

    def to_dict(self):
        return {
            'kind': self.kind.value,
            'intensity': self.intensity.value,
            'timestamp_ms': self.timestamp_ms,
            'value': self.value,
            'details': dict(self.details),
        }


@dataclass(frozen=True)
class StopRecord:
    start_ms: int
    end_ms: int

    @property
    def duration_ms(self):
        return self.end_ms - self.start_ms

    def to_dict(self):
        return {
            'start_ms': self.start_ms,
            'end_ms': self.end_ms,
            'duration_ms': self.duration_ms,
        }
