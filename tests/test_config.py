import pytest

from journey_tracker import PRESETS, ConfigError, TrackerConfig


def test_defaults_match_default_preset():
    assert TrackerConfig.preset() == TrackerConfig()
    assert TrackerConfig().event_cooldown_ms == 1000
    assert TrackerConfig().stillness_duration_ms == 15000


@pytest.mark.parametrize('name', sorted(PRESETS))
def test_every_preset_validates(name):
    config = TrackerConfig.preset(name)
    assert config.validate() is config


def test_sensitive_preset_lowers_thresholds():
    sensitive = TrackerConfig.preset('sensitive')
    default = TrackerConfig()
    assert sensitive.bump_minor_threshold < default.bump_minor_threshold
    assert sensitive.backward_min_distance_m < default.backward_min_distance_m
    assert sensitive.location_interval_ms == 100


def test_preset_overrides_apply():
    config = TrackerConfig.preset('relaxed', speed_limit_mps=2.5, filter_type='kalman')
    assert config.speed_limit_mps == 2.5
    assert config.filter_type == 'kalman'
    assert config.turn_major_threshold == 5.0


def test_unknown_preset():
    with pytest.raises(ConfigError, match='Unknown preset'):
        TrackerConfig.preset('reckless')


def test_unknown_option():
    with pytest.raises(ConfigError, match='bump_threshold'):
        TrackerConfig().with_overrides(bump_threshold=3.0)


@pytest.mark.parametrize('overrides', [
    {'filter_type': 'particle'},
    {'backward_rearm': 'never'},
    {'lowpass_alpha': 0.0},
    {'lowpass_alpha': 1.5},
    {'gravity_calibration_samples': 0},
    {'bump_minor_threshold': 4.0, 'bump_major_threshold': 4.0},
    {'turn_minor_threshold': 5.0},
    {'stillness_duration_ms': 0},
    {'event_cooldown_ms': -1},
])
def test_invalid_values_are_rejected(overrides):
    with pytest.raises(ConfigError):
        TrackerConfig().with_overrides(**overrides)


def test_config_error_is_a_value_error():
    with pytest.raises(ValueError):
        TrackerConfig(filter_type='particle').validate()
