"""
Pluggable location smoothing filters.

Both implementations share the accuracy gate, speed derivation and distance
accumulation of LocationFilterBase and differ only in how coordinates are
smoothed.

Example usage:
    location_filter = get_filter('lowpass', alpha=0.95)
    location_filter = get_filter('kalman', process_variance=1e-5)

    update = location_filter.update(sample)
    state = location_filter.get_state()
"""

from .base import LocationFilterBase, LocationUpdate


def get_filter(filter_type='lowpass', **kwargs):
    """
    Factory function to get a location filter by name.

    Args:
        filter_type (str): 'lowpass' (exponential smoothing) or 'kalman' (scalar Kalman per axis)
        **kwargs: Additional arguments passed to the filter constructor

    Raises:
        ValueError: If filter_type is not recognized
    """
    if filter_type == 'lowpass':
        from .lowpass import LowPassFilter
        return LowPassFilter(**kwargs)
    elif filter_type == 'kalman':
        from .kalman import KalmanLocationFilter
        return KalmanLocationFilter(**kwargs)
    else:
        raise ValueError(f"Unknown filter type: {filter_type}. Use 'lowpass' or 'kalman'")


def filter_from_config(config):
    """Build the location filter a TrackerConfig selects."""
    gates = {
        'accuracy_threshold_m': config.accuracy_threshold_m,
        'noise_threshold_m': config.noise_threshold_m,
        'min_moving_speed_mps': config.min_moving_speed_mps,
    }
    if config.filter_type == 'kalman':
        return get_filter(
            'kalman',
            process_variance=config.kalman_process_variance,
            measurement_variance=config.kalman_measurement_variance,
            **gates,
        )
    return get_filter(config.filter_type, alpha=config.lowpass_alpha, **gates)


__all__ = ['get_filter', 'filter_from_config', 'LocationFilterBase', 'LocationUpdate']
