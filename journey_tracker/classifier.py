"""
MotionClassifier - turns filtered sensor samples into semantic motion events.

Runs the detectors synchronously inside whichever sample callback delivered the
data, always in the same order:

    stillness -> bump/fall -> turn -> speed -> backward -> incline

Order matters: a closing stop is recorded before the new sample is processed
any further, and the fall state is settled before the bump detectors look at
the same sample. Inertial and speed detectors share one debounce window so a
single jolt is reported once. Stops, the speed-limit alert and incline events
keep their own gates.

Usage:
    classifier = MotionClassifier(config, on_event=handle_event, on_stop=handle_stop)
    classifier.on_accelerometer(accel_sample)
    classifier.on_gyroscope(gyro_sample)
    classifier.on_location(location_update)
    classifier.on_ramp(pitch_deg, timestamp_ms)
"""

import logging

from .config import TrackerConfig
from .detectors import (
    BackwardDetector, BumpDetector, Cooldown, FallDetector, FreeFallDetector,
    InclineDetector, OverspeedDetector, SpeedLimitDetector, StillnessDetector, TurnDetector,
)

logger = logging.getLogger(__name__)


class MotionClassifier:
    """
    Owns one instance of every detector plus the shared cooldown.

    Args:
        config (TrackerConfig): Thresholds for all detectors
        on_event (callable): Receives every emitted MotionEvent
        on_stop (callable): Receives a StopRecord when a reported stop ends
        clock (callable): Arrival clock in ms for the shared cooldown; None
            measures it on sample timestamps
    """

    def __init__(self, config=None, on_event=None, on_stop=None, clock=None):
        self.config = config or TrackerConfig()
        self.on_event = on_event
        self.on_stop = on_stop
        c = self.config

        self.cooldown = Cooldown(c.event_cooldown_ms, clock=clock)
        self.stillness = StillnessDetector(c.stillness_delta, c.stillness_duration_ms, on_stop=self._stop_closed)
        self.fall = FallDetector(c.fall_angle_deg, c.fall_sustain_ms, c.gravity_calibration_samples)
        self.free_fall = FreeFallDetector(c.free_fall_fraction, c.free_fall_baseline_weight, c.fall_height_m)
        self.bump = BumpDetector(c.bump_minor_threshold, c.bump_major_threshold,
                                 c.bump_baseline_band, c.bump_baseline_weight)
        self.turn = TurnDetector(c.turn_noise_floor, c.turn_minor_threshold, c.turn_major_threshold)
        self.overspeed = OverspeedDetector(c.overspeed_threshold_mps)
        self.speed_limit = SpeedLimitDetector(c.speed_limit_mps, c.speed_limit_cooldown_ms)
        self.backward = BackwardDetector(
            forward_heading_deg=c.forward_heading_deg,
            window_ms=c.backward_window_ms,
            angle_deg=c.backward_angle_deg,
            min_distance_m=c.backward_min_distance_m,
            min_time_ms=c.backward_min_time_ms,
            min_speed_mps=c.backward_min_speed_mps,
            rearm=c.backward_rearm,
        )
        self.incline = InclineDetector(c.incline_threshold_deg)

        self.detectors = (
            self.stillness, self.fall, self.free_fall, self.bump, self.turn,
            self.overspeed, self.speed_limit, self.backward, self.incline,
        )

    @property
    def is_fallen(self):
        return self.fall.is_fallen

    def on_accelerometer(self, sample):
        """Run stillness then fall/free-fall/bump on one accelerometer sample."""
        now = sample.timestamp_ms
        events = [self.stillness.update(sample)]

        events.append(self.fall.update(sample.x, sample.y, sample.z, now, self.cooldown))
        fallen = self.fall.is_fallen
        events.append(self.free_fall.update(sample.magnitude, now, self.cooldown, fallen=fallen))
        events.append(self.bump.update(sample.z, now, self.cooldown, fallen=fallen))

        return self._emit(events)

    def on_gyroscope(self, sample):
        return self._emit([self.turn.update(sample.x, sample.z, sample.timestamp_ms, self.cooldown)])

    def on_location(self, update):
        """
        Run the speed and backward detectors on an accepted LocationUpdate.

        Rejected fixes are ignored.
        """
        if not update.accepted:
            return []
        now = update.timestamp_ms
        speed = update.speed_mps
        events = [
            self.overspeed.update(speed, now, self.cooldown),
            self.speed_limit.update(speed, now),
            self.backward.update(update.latitude, update.longitude, speed, now, self.cooldown,
                                 heading_deg=update.heading_deg),
        ]
        return self._emit(events)

    def on_ramp(self, pitch_deg, timestamp_ms):
        return self._emit([self.incline.update(pitch_deg, timestamp_ms)])

    def poll(self, now_ms):
        """Let time-gated detectors fire between samples."""
        return self._emit([self.stillness.poll(now_ms)])

    def suspend(self, now_ms):
        """
        Pause classification.

        A stop that already fired is closed and recorded; pending stillness is
        dropped. Baselines and cooldown timestamps are kept.
        """
        self.stillness.close(now_ms)
        self.stillness.previous = None

    def close(self, now_ms):
        """Flush anything still open at the end of a journey."""
        self.stillness.close(now_ms)

    def reset(self):
        self.cooldown.reset()
        for detector in self.detectors:
            detector.reset()
        logger.debug("Classifier reset: baselines, cooldowns and pending conditions cleared")

    def get_state(self):
        state = {detector.name: detector.get_state() for detector in self.detectors}
        state['cooldown_until_ms'] = self.cooldown.until_ms
        return state

    def _stop_closed(self, record):
        if self.on_stop is not None:
            self.on_stop(record)

    def _emit(self, candidates):
        events = [event for event in candidates if event is not None]
        for event in events:
            logger.debug(f"Event: {event.kind.value} ({event.intensity.value}) value={event.value:.2f}")
            if self.on_event is not None:
                self.on_event(event)
        return events
