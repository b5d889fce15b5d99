"""
Tracker configuration and named threshold presets.

Every numeric threshold used by the location filter, the motion detectors and the
session controller is a named option here. The presets keep the distinct values
that different screens of the tracker were tuned with, so a deployment can pick
one by name and override individual options:

    config = TrackerConfig.preset('sensitive', speed_limit_mps=2.5)
"""

from dataclasses import dataclass, fields, replace
from typing import Optional

from .errors import ConfigError

FILTER_TYPES = ('lowpass', 'kalman')
BACKWARD_REARM_POLICIES = ('stop', 'heading')


@dataclass(frozen=True)
class TrackerConfig:
    # Location filter
    accuracy_threshold_m: float = 20.0
    noise_threshold_m: float = 2.0
    min_moving_speed_mps: float = 0.2
    filter_type: str = 'lowpass'
    lowpass_alpha: float = 0.95
    kalman_process_variance: float = 1e-5
    kalman_measurement_variance: float = 1e-4

    # Shared debounce after any detector fires
    event_cooldown_ms: int = 1000

    # Stillness / stop
    stillness_delta: float = 0.05
    stillness_duration_ms: int = 15000

    # Vertical bump (accelerometer z vs adaptive baseline, m/s²)
    bump_minor_threshold: float = 2.0
    bump_major_threshold: float = 4.0
    bump_baseline_band: float = 0.2
    bump_baseline_weight: float = 0.05

    # Orientation fall (angle from calibrated gravity vector)
    fall_angle_deg: float = 45.0
    fall_sustain_ms: int = 500
    gravity_calibration_samples: int = 1

    # Free-fall (magnitude drop vs adaptive baseline)
    free_fall_fraction: float = 0.3
    free_fall_baseline_weight: float = 0.05
    fall_height_m: float = 0.1524

    # Sharp turn (gyroscope x/z, rad/s)
    turn_noise_floor: float = 0.5
    turn_minor_threshold: float = 2.0
    turn_major_threshold: float = 4.0

    # Speed
    overspeed_threshold_mps: float = 2.0
    speed_limit_mps: float = 3.0
    speed_limit_cooldown_ms: int = 30000

    # Backward movement
    backward_window_ms: int = 3000
    backward_angle_deg: float = 30.0
    backward_min_distance_m: float = 0.3
    backward_min_time_ms: int = 500
    backward_min_speed_mps: float = 0.1
    backward_rearm: str = 'stop'
    forward_heading_deg: Optional[float] = None

    # Incline / ramp
    incline_threshold_deg: float = 5.0

    # Session
    countdown_ms: int = 3000
    tick_interval_ms: int = 1000
    sample_interval_ms: int = 250
    location_interval_ms: int = 250

    @classmethod
    def preset(cls, name='default', **overrides):
        """
        Build a configuration from a named preset.

        Args:
            name (str): One of PRESETS
            **overrides: Individual options replacing the preset's values

        Raises:
            ConfigError: Unknown preset or option name, or invalid values
        """
        try:
            base = PRESETS[name]
        except KeyError:
            raise ConfigError(
                f"Unknown preset: {name}. Use one of: {', '.join(sorted(PRESETS))}"
            ) from None
        return base.with_overrides(**overrides)

    def with_overrides(self, **overrides):
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration option(s): {', '.join(unknown)}")
        config = replace(self, **overrides)
        config.validate()
        return config

    def validate(self):
        """Reject values no detector can work with."""
        if self.filter_type not in FILTER_TYPES:
            raise ConfigError(f"Unknown filter type: {self.filter_type}. Use one of {FILTER_TYPES}")
        if self.backward_rearm not in BACKWARD_REARM_POLICIES:
            raise ConfigError(
                f"Unknown backward re-arm policy: {self.backward_rearm}. "
                f"Use one of {BACKWARD_REARM_POLICIES}"
            )
        if not 0.0 < self.lowpass_alpha <= 1.0:
            raise ConfigError(f"lowpass_alpha must be in (0, 1], got {self.lowpass_alpha}")
        if self.gravity_calibration_samples < 1:
            raise ConfigError("gravity_calibration_samples must be at least 1")

        for pair in (('bump_minor_threshold', 'bump_major_threshold'),
                     ('turn_minor_threshold', 'turn_major_threshold')):
            minor, major = getattr(self, pair[0]), getattr(self, pair[1])
            if minor >= major:
                raise ConfigError(f"{pair[0]} ({minor}) must be below {pair[1]} ({major})")

        positive = (
            'accuracy_threshold_m', 'stillness_delta', 'stillness_duration_ms',
            'bump_minor_threshold', 'fall_angle_deg', 'free_fall_fraction', 'fall_height_m',
            'turn_minor_threshold', 'overspeed_threshold_mps', 'speed_limit_mps',
            'backward_window_ms', 'backward_angle_deg', 'incline_threshold_deg',
            'tick_interval_ms', 'sample_interval_ms', 'location_interval_ms',
            'kalman_process_variance', 'kalman_measurement_variance',
        )
        for name in positive:
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")

        non_negative = (
            'noise_threshold_m', 'min_moving_speed_mps', 'event_cooldown_ms', 'fall_sustain_ms',
            'turn_noise_floor', 'speed_limit_cooldown_ms', 'backward_min_distance_m',
            'backward_min_time_ms', 'backward_min_speed_mps', 'countdown_ms',
        )
        for name in non_negative:
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative, got {getattr(self, name)}")

        return self


PRESETS = {
    'default': TrackerConfig(),
    'sensitive': TrackerConfig(
        noise_threshold_m=1.0,
        turn_minor_threshold=2.0,
        turn_major_threshold=3.5,
        bump_minor_threshold=1.5,
        bump_major_threshold=3.0,
        backward_angle_deg=30.0,
        backward_min_distance_m=0.2,
        location_interval_ms=100,
    ),
    'relaxed': TrackerConfig(
        noise_threshold_m=3.0,
        turn_minor_threshold=3.0,
        turn_major_threshold=5.0,
        bump_minor_threshold=2.5,
        bump_major_threshold=5.0,
        backward_angle_deg=25.0,
        backward_min_distance_m=0.3,
    ),
    'moderate': TrackerConfig(
        turn_minor_threshold=2.5,
        turn_major_threshold=4.5,
    ),
}
