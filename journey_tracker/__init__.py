"""
Wheelchair journey tracker - motion-event classification engine.

Turns raw GPS fixes and accelerometer/gyroscope samples into semantic journey
events (stops, bumps, falls, sharp turns, backward movement, inclines,
overspeed) and a journey summary.
"""

from .aggregator import JourneyAggregator, JourneySummary
from .classifier import MotionClassifier
from .config import PRESETS, TrackerConfig
from .errors import ConfigError, SampleValidationError, SessionStateError, TrackerError
from .events import EventKind, Intensity, MotionEvent, StopRecord
from .filters import filter_from_config, get_filter
from .geo import bearing, distance
from .samples import InertialSample, RawLocationSample, SensorKind
from .session import JourneyContext, SessionController, SessionState, SessionTicker
from .sources import CallbackSource, SampleSource, TripLog

__version__ = '0.1.0'

__all__ = [
    'CallbackSource', 'ConfigError', 'EventKind', 'InertialSample', 'Intensity',
    'JourneyAggregator', 'JourneyContext', 'JourneySummary', 'MotionClassifier',
    'MotionEvent', 'PRESETS', 'RawLocationSample', 'SampleSource', 'SampleValidationError',
    'SensorKind', 'SessionController', 'SessionState', 'SessionStateError', 'SessionTicker',
    'StopRecord', 'TrackerConfig', 'TrackerError', 'TripLog', 'bearing', 'distance',
    'filter_from_config', 'get_filter',
]
