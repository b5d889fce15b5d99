"""
Shared pieces of the motion detectors.

Every detector is a small state machine (idle / condition pending) that keeps
only the trailing state it needs. Debouncing is modeled as a timestamp checked
at each sample, never as a pending timer, so nothing outlives a reset.
"""


class Cooldown:
    """
    Suppression window started whenever a detector fires.

    One instance is shared by the inertial and speed detectors so a single
    jolt cannot be reported twice by sibling detectors.

    Args:
        duration_ms (int): Window length
        clock (callable): Optional time source in ms. When set, the window is
            measured on this clock and the sample timestamps passed to
            ready()/trigger() are ignored, so streams stamped on different
            timebases still share one window.
    """

    def __init__(self, duration_ms=1000, clock=None):
        self.duration_ms = duration_ms
        self.clock = clock
        self.until_ms = None

    def _now(self, now_ms):
        return now_ms if self.clock is None else self.clock()

    def ready(self, now_ms):
        return self.until_ms is None or self._now(now_ms) >= self.until_ms

    def trigger(self, now_ms):
        self.until_ms = self._now(now_ms) + self.duration_ms

    def reset(self):
        self.until_ms = None


class Detector:
    """
    Common state for all detectors.

    Attributes:
        baseline: Running reference value (float, vector or None until seeded)
        condition_start_ms: When the qualifying condition began, None when idle
        active: Whether the detector is latched in its fired state
    """

    name = 'detector'

    def __init__(self):
        self.baseline = None
        self.condition_start_ms = None
        self.active = False
        self.fired_count = 0

    def reset(self):
        self.baseline = None
        self.condition_start_ms = None
        self.active = False
        self.fired_count = 0

    @property
    def pending(self):
        return self.condition_start_ms is not None

    def get_state(self):
        baseline = self.baseline
        if baseline is not None and not isinstance(baseline, float):
            baseline = [float(v) for v in baseline]
        return {
            'baseline': baseline,
            'condition_start_ms': self.condition_start_ms,
            'active': self.active,
            'fired_count': self.fired_count,
        }
