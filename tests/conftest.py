import math

import pytest

from journey_tracker import (
    CallbackSource, InertialSample, RawLocationSample, SensorKind, SessionController,
    TrackerConfig, TripLog,
)

ORIGIN = (51.5007, -0.1246)
METERS_PER_DEG_LAT = 6371000 * math.pi / 180


def offset(lat, lon, north_m=0.0, east_m=0.0):
    """Shift a coordinate by a few meters north/east."""
    dlat = north_m / METERS_PER_DEG_LAT
    dlon = east_m / (METERS_PER_DEG_LAT * math.cos(math.radians(lat)))
    return lat + dlat, lon + dlon


def fix(lat, lon, ts, **kwargs):
    return RawLocationSample(latitude=lat, longitude=lon, timestamp_ms=ts, **kwargs)


def accel(x, y, z, ts):
    return InertialSample(SensorKind.ACCELEROMETER, x, y, z, ts)


def gyro(x, y, z, ts):
    return InertialSample(SensorKind.GYROSCOPE, x, y, z, ts)


class FakeClock:
    def __init__(self, now=1_000_000):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms
        return self.now


class RecordingTripLog(TripLog):
    def __init__(self, fail=False):
        self.records = []
        self.fail = fail

    def send(self, record):
        if self.fail:
            raise ConnectionError("trip endpoint unreachable")
        self.records.append(record)


@pytest.fixture
def config():
    return TrackerConfig()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifications():
    return []


@pytest.fixture
def sources():
    return CallbackSource('gps'), CallbackSource('accelerometer'), CallbackSource('gyroscope')


@pytest.fixture
def trip_log():
    return RecordingTripLog()


@pytest.fixture
def controller(sources, clock, notifications, trip_log):
    gps, acc, gyr = sources
    return SessionController(
        gps, acc, gyr,
        config=TrackerConfig(countdown_ms=3000),
        notifier=lambda kind, intensity: notifications.append((kind, intensity)),
        trip_log=trip_log,
        clock=clock,
    )


@pytest.fixture
def active_controller(controller, clock):
    assert controller.request_start()
    clock.advance(3000)
    controller.poll()
    return controller
