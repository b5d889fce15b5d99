"""
Session controller - journey lifecycle around the classification engine.

States:
    IDLE -> COUNTDOWN -> ACTIVE <-> PAUSED -> STOPPED -> IDLE

The controller owns the location filter, motion classifier and journey
aggregator of the current journey, subscribes to the sample sources while a
journey runs and forwards events to the notification sink and trip log. All
sample handlers and transitions run under one lock, so detectors never see two
samples at once even when sources deliver from their own threads.

Usage:
    controller = SessionController(gps, accel, gyro, config=TrackerConfig.preset('default'),
                                   notifier=show_toast, auto_tick=True)
    controller.request_start()   # 3 s countdown, then ACTIVE
    ...
    summary = controller.stop()
    controller.new_journey()
"""

import logging
import threading
import time
import uuid
from dataclasses import dataclass
from enum import Enum

from .aggregator import JourneyAggregator
from .classifier import MotionClassifier
from .config import TrackerConfig
from .errors import SampleValidationError, SessionStateError
from .filters import filter_from_config
from .samples import InertialSample, RawLocationSample, SensorKind

logger = logging.getLogger(__name__)


def wall_clock_ms():
    return int(time.time() * 1000)


class SessionState(str, Enum):
    IDLE = 'idle'
    COUNTDOWN = 'countdown'
    ACTIVE = 'active'
    PAUSED = 'paused'
    STOPPED = 'stopped'


@dataclass(frozen=True)
class JourneyContext:
    """Per-journey identity handed to collaborators instead of process globals."""

    trip_id: str
    started_at_ms: int


class SessionTicker(threading.Thread):
    """Background thread calling controller.poll() at a fixed interval until stopped."""

    def __init__(self, controller, interval_ms=1000):
        super().__init__(name='journey-ticker', daemon=True)
        self.controller = controller
        self.interval_s = interval_ms / 1000.0
        self.stop_event = threading.Event()

    def run(self):
        while not self.stop_event.wait(self.interval_s):
            try:
                self.controller.poll()
            except Exception as e:
                logger.warning(f"Tick failed: {e}")

    def stop(self):
        self.stop_event.set()


class SessionController:
    """
    Args:
        location_source (SampleSource): Location provider
        accelerometer (SampleSource): Accelerometer stream
        gyroscope (SampleSource): Gyroscope stream
        config (TrackerConfig): Thresholds and timings
        notifier (callable): Notification sink, called with (event_kind, intensity_label)
        trip_log (TripLog): Optional remote trip-logging collaborator
        permission_gate (callable): Returns True when location/sensor access is granted
        clock (callable): Returns the current time in ms; must match sample timestamps
        auto_tick (bool): Run a SessionTicker thread while a journey is in progress
    """

    def __init__(self, location_source, accelerometer, gyroscope, config=None, notifier=None,
                 trip_log=None, permission_gate=None, clock=None, auto_tick=False):
        self.config = (config or TrackerConfig()).validate()
        self.location_source = location_source
        self.accelerometer = accelerometer
        self.gyroscope = gyroscope
        self.notifier = notifier
        self.trip_log = trip_log
        self.permission_gate = permission_gate
        self.clock = clock or wall_clock_ms
        self.auto_tick = auto_tick

        self.location_filter = filter_from_config(self.config)
        # GPS and inertial timestamps may use different timebases; the shared
        # cooldown runs on the controller clock instead
        self.classifier = MotionClassifier(self.config, on_event=self._handle_event,
                                           on_stop=self._handle_stop, clock=self.clock)
        self.aggregator = JourneyAggregator(min_stop_ms=self.config.stillness_duration_ms)

        self.state = SessionState.IDLE
        self.context = None
        self.summary = None
        self.last_message = None
        self._countdown_until_ms = None
        self._last_tick_ms = None
        self._started_sources = []
        self._ticker = None

        self.lock = threading.RLock()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def request_start(self):
        """
        Check permissions and begin the countdown.

        Returns:
            bool: False if the permission gate refused
        """
        with self.lock:
            self._require('start journey', SessionState.IDLE)

            if self.permission_gate is not None and not self._permission_granted():
                self.last_message = 'Location and motion sensor permission is required to track a journey'
                logger.warning("Permission denied - journey not started")
                return False

            self.last_message = None
            self._countdown_until_ms = self.clock() + self.config.countdown_ms
            self.state = SessionState.COUNTDOWN
            logger.info(f"Countdown started ({self.config.countdown_ms / 1000:.0f}s)")

            if self.auto_tick:
                self._start_ticker()
            if self.config.countdown_ms == 0:
                self._activate(self.clock())
            return True

    def cancel(self):
        """Abort a countdown and return to IDLE."""
        with self.lock:
            self._require('cancel countdown', SessionState.COUNTDOWN)
            ticker = self._stop_ticker()
            self._countdown_until_ms = None
            self.state = SessionState.IDLE
            logger.info("Countdown cancelled")
        self._join_ticker(ticker)

    def poll(self, now_ms=None):
        """
        Advance time-driven behavior: finish the countdown, run the ~1 Hz
        distance tick and fire time-gated detectors. Safe to call in any state.
        """
        with self.lock:
            now = self.clock() if now_ms is None else now_ms

            if self.state is SessionState.COUNTDOWN and now >= self._countdown_until_ms:
                self._activate(now)

            if self.state is not SessionState.ACTIVE:
                return

            if self._last_tick_ms is None or now - self._last_tick_ms >= self.config.tick_interval_ms:
                self.aggregator.on_tick(self.location_filter.distance)
                self._last_tick_ms = now

            self.classifier.poll(now)

    def pause(self):
        with self.lock:
            self._require('pause', SessionState.ACTIVE)
            self.classifier.suspend(self.clock())
            self.state = SessionState.PAUSED
            logger.info("Journey paused")

    def resume(self):
        with self.lock:
            self._require('resume', SessionState.PAUSED)
            self.state = SessionState.ACTIVE
            logger.info("Journey resumed")

    def stop(self):
        """
        End the journey: release all sources, flush open detectors and
        finalize the summary.

        Returns:
            JourneySummary
        """
        with self.lock:
            self._require('stop journey', SessionState.ACTIVE, SessionState.PAUSED)
            now = self.clock()
            try:
                self.classifier.close(now)
            finally:
                self._release_sources()
                ticker = self._stop_ticker()
                self.state = SessionState.STOPPED

            self.aggregator.on_tick(self.location_filter.distance)
            self.summary = summary = self.aggregator.finalize(now)
            self._send_trip_record('stop', {'summary': summary.to_dict()})

        # Outside the lock: the ticker may be waiting on it inside poll()
        self._join_ticker(ticker)
        return summary

    def new_journey(self):
        """Discard the finished journey and return every component to its initial state."""
        with self.lock:
            self._require('start a new journey', SessionState.STOPPED, SessionState.IDLE)
            self._reset_components()
            self.aggregator.reset()
            self.summary = None
            self.context = None
            self.state = SessionState.IDLE

    # ------------------------------------------------------------------
    # Sample handlers (source callbacks)
    # ------------------------------------------------------------------

    def handle_location(self, payload):
        with self.lock:
            if not self._accepting('location'):
                return
            sample = self._parse(payload, RawLocationSample, RawLocationSample.from_mapping)
            if sample is None:
                return

            update = self.location_filter.update(sample)
            if not update.accepted:
                return
            self.aggregator.on_speed_sample(update.speed_mps)
            self.classifier.on_location(update)

    def handle_accelerometer(self, payload):
        with self.lock:
            if not self._accepting('accelerometer'):
                return
            sample = self._parse_inertial(payload, SensorKind.ACCELEROMETER)
            if sample is not None:
                self.classifier.on_accelerometer(sample)

    def handle_gyroscope(self, payload):
        with self.lock:
            if not self._accepting('gyroscope'):
                return
            sample = self._parse_inertial(payload, SensorKind.GYROSCOPE)
            if sample is not None:
                self.classifier.on_gyroscope(sample)

    def handle_ramp(self, pitch_deg, timestamp_ms=None):
        """Pitch reading from the ramp-detection collaborator."""
        with self.lock:
            if not self._accepting('ramp'):
                return
            try:
                pitch = float(pitch_deg)
            except (TypeError, ValueError):
                logger.warning(f"Dropping malformed ramp pitch: {pitch_deg!r}")
                return
            now = self.clock() if timestamp_ms is None else timestamp_ms
            self.classifier.on_ramp(pitch, now)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def countdown_remaining_ms(self):
        if self.state is not SessionState.COUNTDOWN:
            return 0
        return max(0, self._countdown_until_ms - self.clock())

    @property
    def distance_m(self):
        return self.aggregator.distance

    def get_status(self):
        with self.lock:
            return {
                'state': self.state.value,
                'trip_id': self.context.trip_id if self.context else None,
                'countdown_remaining_ms': self.countdown_remaining_ms,
                'journey': self.aggregator.snapshot(),
                'is_fallen': self.classifier.is_fallen,
            }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require(self, operation, *allowed):
        if self.state not in allowed:
            raise SessionStateError(operation, self.state.value)

    def _accepting(self, source_name):
        # Stale callbacks after pause/stop are dropped here
        if self.state is SessionState.ACTIVE:
            return True
        logger.debug(f"Ignoring {source_name} sample while {self.state.value}")
        return False

    def _permission_granted(self):
        try:
            return bool(self.permission_gate())
        except Exception as e:
            logger.warning(f"Permission check failed: {e}")
            return False

    def _activate(self, now):
        self._reset_components()
        self.aggregator.start(now)
        self.context = JourneyContext(trip_id=uuid.uuid4().hex, started_at_ms=now)
        self._countdown_until_ms = None
        self._last_tick_ms = now
        self.state = SessionState.ACTIVE

        try:
            self._start_source(self.location_source, self.handle_location, self.config.location_interval_ms)
            self._start_source(self.accelerometer, self.handle_accelerometer, self.config.sample_interval_ms)
            self._start_source(self.gyroscope, self.handle_gyroscope, self.config.sample_interval_ms)
        except Exception:
            logger.exception("Failed to subscribe to sensors - journey not started")
            self._release_sources()
            self._stop_ticker()
            self.state = SessionState.IDLE
            self.context = None
            raise

        logger.info(f"Journey {self.context.trip_id} active")
        self._send_trip_record('start', {'timestamp_ms': now})

    def _start_source(self, source, callback, interval_ms):
        if source is None:
            return
        source.start(callback, interval_ms)
        self._started_sources.append(source)

    def _release_sources(self):
        sources, self._started_sources = self._started_sources, []
        for source in sources:
            try:
                source.stop()
            except Exception as e:
                logger.warning(f"Failed to stop sample source {source!r}: {e}")

    def _start_ticker(self):
        self._stop_ticker()
        self._ticker = SessionTicker(self, self.config.tick_interval_ms)
        self._ticker.start()

    def _stop_ticker(self):
        ticker, self._ticker = self._ticker, None
        if ticker is not None:
            ticker.stop()
        return ticker

    def _join_ticker(self, ticker):
        if ticker is None or ticker is threading.current_thread():
            return
        ticker.join(timeout=1)
        if ticker.is_alive():
            logger.warning("Session ticker did not stop within 1s")

    def _reset_components(self):
        self.location_filter.reset()
        self.classifier.reset()
        self._last_tick_ms = None

    def _parse(self, payload, sample_type, parser):
        if isinstance(payload, sample_type):
            return payload
        try:
            return parser(payload)
        except SampleValidationError as e:
            logger.warning(f"Dropping malformed {sample_type.__name__}: {e}")
            return None

    def _parse_inertial(self, payload, kind):
        if isinstance(payload, InertialSample):
            return payload
        try:
            return InertialSample.from_mapping(kind, payload)
        except SampleValidationError as e:
            logger.warning(f"Dropping malformed {kind.value} sample: {e}")
            return None

    def _handle_event(self, event):
        self.aggregator.on_event(event)
        if self.notifier is not None:
            try:
                self.notifier(*event.as_notification())
            except Exception as e:
                logger.warning(f"Notification sink failed for {event.kind.value}: {e}")
        self._send_trip_record('event', event.to_dict())

    def _handle_stop(self, record):
        self.aggregator.on_stop(record)

    def _send_trip_record(self, record_type, data):
        if self.trip_log is None or self.context is None:
            return
        record = {'tripId': self.context.trip_id, 'data': {'type': record_type, **data}}
        try:
            self.trip_log.send(record)
        except Exception as e:
            logger.warning(f"Trip log rejected {record_type} record: {e}")
