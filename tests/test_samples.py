import pytest

from journey_tracker import InertialSample, RawLocationSample, SampleValidationError, SensorKind


def test_location_from_mapping_with_aliases():
    sample = RawLocationSample.from_mapping(
        {'lat': 51.5, 'lon': -0.12, 'timestamp_ms': 1000, 'accuracy': 6.5, 'speed': 1.2, 'heading': 90}
    )
    assert sample.latitude == 51.5
    assert sample.longitude == -0.12
    assert sample.accuracy_m == 6.5
    assert sample.speed_mps == 1.2
    assert sample.heading_deg == 90.0


def test_location_optional_fields_default_to_none():
    sample = RawLocationSample.from_mapping({'latitude': 1, 'longitude': 2, 'timestamp_ms': 5})
    assert sample.accuracy_m is None
    assert sample.speed_mps is None


def test_timestamp_in_seconds_is_converted():
    sample = RawLocationSample.from_mapping({'latitude': 1, 'longitude': 2, 'timestamp': 1700000000.25})
    assert sample.timestamp_ms == 1700000000250


@pytest.mark.parametrize('payload', [
    {'longitude': 2, 'timestamp_ms': 5},
    {'latitude': 'north', 'longitude': 2, 'timestamp_ms': 5},
    {'latitude': float('nan'), 'longitude': 2, 'timestamp_ms': 5},
    {'latitude': 91, 'longitude': 2, 'timestamp_ms': 5},
    {'latitude': 1, 'longitude': -181, 'timestamp_ms': 5},
    {'latitude': 1, 'longitude': 2},
    [51.5, -0.12],
])
def test_malformed_location_is_rejected(payload):
    with pytest.raises(SampleValidationError):
        RawLocationSample.from_mapping(payload)


def test_inertial_from_values_triple():
    sample = InertialSample.from_mapping(SensorKind.GYROSCOPE, {'values': [0.1, 0.2, 0.3], 'timestamp_ms': 9})
    assert (sample.x, sample.y, sample.z) == (0.1, 0.2, 0.3)
    assert sample.kind is SensorKind.GYROSCOPE


def test_inertial_magnitude():
    sample = InertialSample.from_mapping('accelerometer', {'x': 3, 'y': 4, 'z': 12, 'timestamp_ms': 0})
    assert sample.magnitude == 13.0
    assert sample.kind is SensorKind.ACCELEROMETER


@pytest.mark.parametrize('payload', [
    {'x': 1.0, 'y': 2.0, 'timestamp_ms': 0},
    {'values': [1.0, 2.0], 'timestamp_ms': 0},
    {'values': 7, 'timestamp_ms': 0},
    {'x': 1.0, 'y': 2.0, 'z': 3.0},
    'x=1,y=2,z=3',
])
def test_malformed_inertial_is_rejected(payload):
    with pytest.raises(SampleValidationError):
        InertialSample.from_mapping(SensorKind.ACCELEROMETER, payload)
