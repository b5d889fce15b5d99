import gzip

import orjson
import pytest

from journey_tracker import TrackerError
from journey_tracker.replay import build_events, load_session, main, replay_session

from conftest import ORIGIN, offset


def recorded_session():
    gps = []
    lat, lon = ORIGIN
    for i in range(12):
        gps.append({'latitude': lat, 'longitude': lon, 'timestamp': 1000.0 + i, 'accuracy': 5.0})
        lat, lon = offset(lat, lon, north_m=1.0)

    accel = [{'x': 0.0, 'y': 0.0, 'z': 9.81, 'timestamp_ms': 1_000_000 + i * 250} for i in range(40)]
    accel[20] = {'x': 0.0, 'y': 0.0, 'z': 12.5, 'timestamp_ms': 1_005_000}

    return {
        'gps_samples': gps,
        'accel_samples': accel,
        'gyro_samples': [{'values': [0.0, 0.0, 3.0], 'timestamp_ms': 1_008_000}],
        'ramp_samples': [{'pitch': 0.0, 'timestamp_ms': 1_000_000}, {'pitch': 7.0, 'timestamp_ms': 1_009_000}],
    }


def test_build_events_orders_by_timestamp():
    events = build_events({
        'accel_samples': [{'x': 0, 'y': 0, 'z': 9.8, 'timestamp_ms': 300}],
        'gps_samples': [{'latitude': 1, 'longitude': 1, 'timestamp': 0.1}],
        'gyro_samples': [{'x': 0, 'y': 0, 'z': 0}],
    })
    assert [(e.timestamp_ms, e.kind) for e in events] == [(100, 'gps'), (300, 'accel')]


def test_build_events_requires_samples():
    with pytest.raises(TrackerError):
        build_events({'gps_samples': []})


def test_replay_counts_recorded_events():
    summary, notifications = replay_session(recorded_session())
    assert summary.counts['bump'] == 1
    assert summary.counts['sharp_turn'] == 1
    assert summary.counts['incline'] == 1
    assert summary.total_distance_m == pytest.approx(11.0, rel=0.05)
    assert ('bump', 'minor') in [(kind, intensity) for _, kind, intensity in notifications]


def test_load_gzipped_session(tmp_path):
    path = tmp_path / 'session.json.gz'
    with gzip.open(path, 'wb') as f:
        f.write(orjson.dumps(recorded_session()))
    assert len(load_session(path)['gps_samples']) == 12


def test_main_writes_json_summary(tmp_path, capsys):
    session = tmp_path / 'session.json'
    session.write_bytes(orjson.dumps(recorded_session()))
    out = tmp_path / 'summary.json'

    assert main([str(session), '--preset', 'moderate', '--filter', 'kalman', '--json', str(out)]) == 0

    summary = orjson.loads(out.read_bytes())
    assert summary['counts']['bump'] == 1
    assert 'JOURNEY SUMMARY' in capsys.readouterr().out


def test_main_reports_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / 'missing.json')]) == 1
    assert 'Replay failed' in capsys.readouterr().err
