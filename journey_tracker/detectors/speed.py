"""
Speed-based alerts from the location filter's instantaneous speed.

OverspeedDetector reports the rising edge across its threshold only, so holding
a high speed produces a single event. SpeedLimitDetector is level-triggered and
repeats while the limit is exceeded, throttled by its own long cooldown rather
than the shared one.
"""

from ..events import EventKind, Intensity, MotionEvent
from .base import Cooldown, Detector


class OverspeedDetector(Detector):

    name = 'overspeed'

    def __init__(self, threshold_mps=2.0):
        super().__init__()
        self.threshold_mps = threshold_mps
        self.previous_speed = None

    def update(self, speed, now_ms, cooldown):
        previous = self.previous_speed if self.previous_speed is not None else 0.0
        self.previous_speed = speed

        rising = previous <= self.threshold_mps < speed
        self.active = speed > self.threshold_mps
        if not rising or not cooldown.ready(now_ms):
            return None

        cooldown.trigger(now_ms)
        self.fired_count += 1
        return MotionEvent(EventKind.OVERSPEED, Intensity.MAJOR, now_ms, value=speed,
                           details={'threshold_mps': self.threshold_mps})

    def reset(self):
        super().reset()
        self.previous_speed = None


class SpeedLimitDetector(Detector):

    name = 'speed_limit'

    def __init__(self, limit_mps=3.0, cooldown_ms=30000):
        super().__init__()
        self.limit_mps = limit_mps
        self.cooldown = Cooldown(cooldown_ms)

    def update(self, speed, now_ms):
        self.active = speed > self.limit_mps
        if not self.active or not self.cooldown.ready(now_ms):
            return None

        self.cooldown.trigger(now_ms)
        self.fired_count += 1
        return MotionEvent(EventKind.SPEED_LIMIT, Intensity.MAJOR, now_ms, value=speed,
                           details={'limit_mps': self.limit_mps})

    def reset(self):
        super().reset()
        self.cooldown.reset()
