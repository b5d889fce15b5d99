from journey_tracker import EventKind, MotionClassifier, TrackerConfig
from journey_tracker.filters.base import LocationUpdate

from conftest import ORIGIN, FakeClock, accel, gyro, offset


def make_classifier(**overrides):
    events, stops = [], []
    classifier = MotionClassifier(
        TrackerConfig(**overrides), on_event=events.append, on_stop=stops.append,
    )
    return classifier, events, stops


def kinds(events):
    return [e.kind for e in events]


def test_bump_debounce_through_classifier():
    classifier, events, _ = make_classifier()
    classifier.on_accelerometer(accel(0, 0, 9.81, 0))
    classifier.on_accelerometer(accel(0, 0, 12.5, 1000))
    classifier.on_accelerometer(accel(0, 0, 12.5, 1200))
    assert kinds(events) == [EventKind.BUMP]

    classifier.on_accelerometer(accel(0, 0, 12.5, 2400))
    assert kinds(events) == [EventKind.BUMP, EventKind.BUMP]


def test_fall_suppresses_bump_until_recovered():
    classifier, events, _ = make_classifier()
    classifier.on_accelerometer(accel(0, 0, 9.81, 0))

    # Tilted on its side; the first jolt is a bump, the fall follows after the cooldown
    for t in range(250, 2001, 250):
        classifier.on_accelerometer(accel(9.81, 0, 0, t))
    assert classifier.is_fallen
    assert kinds(events).count(EventKind.FALL) == 1
    bumps_while_fallen = kinds(events).count(EventKind.BUMP)

    # Large z swings while lying tilted
    for t in range(2250, 6001, 250):
        z = 4.0 if (t // 250) % 2 else -4.0
        classifier.on_accelerometer(accel(9.5, 0, z, t))
    assert classifier.is_fallen
    assert kinds(events).count(EventKind.BUMP) == bumps_while_fallen

    # Upright again: the fall clears and bumps count again
    classifier.on_accelerometer(accel(0, 0, 9.81, 7000))
    assert not classifier.is_fallen
    classifier.on_accelerometer(accel(0, 0, 13.5, 8500))
    assert kinds(events).count(EventKind.BUMP) == bumps_while_fallen + 1


def test_sibling_detectors_share_cooldown():
    classifier, events, _ = make_classifier()
    classifier.on_accelerometer(accel(0, 0, 9.81, 0))
    classifier.on_accelerometer(accel(0, 0, 13.0, 1000))
    classifier.on_gyroscope(gyro(3.0, 0, 0, 1300))
    assert kinds(events) == [EventKind.BUMP]

    classifier.on_gyroscope(gyro(3.0, 0, 0, 2100))
    assert kinds(events) == [EventKind.BUMP, EventKind.SHARP_TURN]


def test_stop_record_closed_before_bump_on_same_sample():
    order = []
    classifier = MotionClassifier(
        TrackerConfig(stillness_duration_ms=1000),
        on_event=lambda e: order.append(e.kind.value),
        on_stop=lambda r: order.append('stop_closed'),
    )
    for t in range(0, 1501, 100):
        classifier.on_accelerometer(accel(0, 0, 9.81, t))
    classifier.on_accelerometer(accel(0, 0, 13.0, 1600))
    assert order == ['stop', 'stop_closed', 'bump']


def test_rejected_location_update_is_ignored():
    classifier, events, _ = make_classifier()
    assert classifier.on_location(LocationUpdate(accepted=False)) == []
    assert classifier.overspeed.previous_speed is None


def test_location_runs_speed_then_backward():
    classifier, events, _ = make_classifier(forward_heading_deg=0.0, overspeed_threshold_mps=0.3,
                                            speed_limit_mps=5.0)
    lat, lon = ORIGIN
    for i in range(6):
        lat, lon = offset(lat, lon, north_m=-0.2)
        classifier.on_location(LocationUpdate(True, lat, lon, 0.8, 0.2, i * 250))

    # Overspeed fires first; backward waits out the shared cooldown
    assert kinds(events) == [EventKind.OVERSPEED, EventKind.BACKWARD]
    assert events[1].timestamp_ms >= events[0].timestamp_ms + 1000


def test_incline_via_ramp_reports():
    classifier, events, _ = make_classifier(incline_threshold_deg=4.0)
    classifier.on_ramp(0.0, 0)
    classifier.on_ramp(4.5, 100)
    assert kinds(events) == [EventKind.INCLINE]


def test_suspend_drops_pending_stillness():
    classifier, events, stops = make_classifier(stillness_duration_ms=1000)
    for t in range(0, 801, 100):
        classifier.on_accelerometer(accel(0, 0, 9.81, t))
    classifier.suspend(850)
    assert not classifier.stillness.pending
    assert classifier.poll(5000) == []
    assert stops == []


def test_reset_forgets_previous_journey():
    classifier, events, _ = make_classifier()
    classifier.on_accelerometer(accel(0, 0, 9.81, 0))
    classifier.on_accelerometer(accel(0, 0, 13.0, 1000))
    classifier.on_ramp(0.0, 1000)
    assert classifier.cooldown.until_ms == 2000

    classifier.reset()
    state = classifier.get_state()
    assert state['cooldown_until_ms'] is None
    for name in ('bump', 'fall', 'free_fall', 'incline'):
        assert state[name]['baseline'] is None
        assert state[name]['fired_count'] == 0

    # The old z baseline (9.81) must not make this sample look like a bump
    classifier.on_accelerometer(accel(0, 0, 13.0, 1100))
    assert classifier.bump.baseline == 13.0
    assert len(events) == 1


def test_cooldown_on_arrival_clock_spans_sensor_timebases():
    arrival = FakeClock(now=5_000)
    events = []
    classifier = MotionClassifier(TrackerConfig(overspeed_threshold_mps=0.5), on_event=events.append,
                                  clock=arrival)

    # GPS stamps epoch ms, the accelerometer stamps ms since boot
    classifier.on_location(LocationUpdate(True, *ORIGIN, 1.0, 0.0, 1_700_000_000_000))
    arrival.advance(100)
    classifier.on_accelerometer(accel(0, 0, 9.81, 50_000))
    arrival.advance(10_000)
    classifier.on_accelerometer(accel(0, 0, 14.0, 60_000))

    assert kinds(events) == [EventKind.OVERSPEED, EventKind.BUMP]


def test_speed_limit_stays_outside_shared_cooldown():
    classifier, events, _ = make_classifier(speed_limit_mps=1.0, overspeed_threshold_mps=5.0)
    classifier.on_accelerometer(accel(0, 0, 9.81, 0))
    classifier.on_accelerometer(accel(0, 0, 13.0, 1000))
    assert classifier.cooldown.until_ms == 2000

    # Fires inside the bump's window and does not extend it
    classifier.on_location(LocationUpdate(True, *ORIGIN, 2.0, 0.0, 1200))
    assert kinds(events) == [EventKind.BUMP, EventKind.SPEED_LIMIT]
    assert classifier.cooldown.until_ms == 2000

    classifier.on_gyroscope(gyro(3.0, 0, 0, 2000))
    assert kinds(events)[-1] is EventKind.SHARP_TURN


def test_reported_course_reaches_backward_detector():
    classifier, _, _ = make_classifier()
    lat, lon = ORIGIN
    for i in range(4):
        lat, lon = offset(lat, lon, north_m=0.1)
        classifier.on_location(LocationUpdate(True, lat, lon, 0.4, 0.1, i * 250, heading_deg=5.0))
    assert classifier.backward.forward_heading == 5.0
