"""
Journey aggregation - counters, speed readings and stops for one journey.
"""

import logging
from dataclasses import dataclass
from statistics import mean
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

import orjson

from .errors import SessionStateError
from .events import EventKind, StopRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JourneySummary:
    """Read-only result of a finished journey."""

    start_time_ms: int
    end_time_ms: int
    total_distance_m: float
    average_speed_mps: float
    max_speed_mps: float
    speed_samples: Tuple[float, ...]
    counts: Mapping[str, int]
    stops: Tuple[StopRecord, ...]

    @property
    def duration_s(self):
        return (self.end_time_ms - self.start_time_ms) / 1000.0

    def to_dict(self):
        return {
            'start_time_ms': self.start_time_ms,
            'end_time_ms': self.end_time_ms,
            'duration_s': self.duration_s,
            'total_distance_m': self.total_distance_m,
            'average_speed_mps': self.average_speed_mps,
            'max_speed_mps': self.max_speed_mps,
            'speed_samples': list(self.speed_samples),
            'counts': dict(self.counts),
            'stops': [stop.to_dict() for stop in self.stops],
        }

    def to_json(self, indent=False):
        option = orjson.OPT_INDENT_2 if indent else 0
        return orjson.dumps(self.to_dict(), option=option)


class JourneyAggregator:
    """
    Accumulates journey statistics from classifier callbacks and the periodic tick.

    Counters only ever grow during a journey; reset() is the one way back to zero.

    Args:
        min_stop_ms (int): Stops shorter than this are not recorded
    """

    def __init__(self, min_stop_ms=15000):
        self.min_stop_ms = min_stop_ms
        self.summary = None
        self.reset()

    def reset(self):
        self.start_time_ms = None
        self.distance = 0.0
        self.speed_readings = []
        self.counts = {kind.value: 0 for kind in EventKind}
        self.stops = []
        self.summary = None

    def start(self, now_ms):
        self.reset()
        self.start_time_ms = now_ms

    @property
    def finalized(self):
        return self.summary is not None

    def on_tick(self, total_distance):
        """Copy the location filter's cumulative distance into the reported distance."""
        if self.finalized:
            return
        # The filter total never shrinks; guard against a reset filter mid-journey
        self.distance = max(self.distance, total_distance)

    def on_speed_sample(self, speed):
        if self.finalized:
            return
        self.speed_readings.append(speed)

    def on_event(self, event):
        if self.finalized:
            return
        self.counts[event.kind.value] = self.counts.get(event.kind.value, 0) + 1

    def on_stop(self, record):
        if self.finalized:
            return
        if record.duration_ms < self.min_stop_ms:
            logger.debug(f"Ignoring {record.duration_ms}ms stop (< {self.min_stop_ms}ms)")
            return
        self.stops.append(record)

    def finalize(self, end_time_ms):
        """
        Freeze the journey into a JourneySummary.

        Raises:
            SessionStateError: If the journey was never started or is already finalized
        """
        if self.start_time_ms is None:
            raise SessionStateError('finalize journey', 'not started')
        if self.finalized:
            raise SessionStateError('finalize journey', 'already finalized')

        readings = tuple(self.speed_readings)
        self.summary = JourneySummary(
            start_time_ms=self.start_time_ms,
            end_time_ms=end_time_ms,
            total_distance_m=self.distance,
            average_speed_mps=mean(readings) if readings else 0.0,
            max_speed_mps=max(readings) if readings else 0.0,
            speed_samples=readings,
            counts=MappingProxyType(dict(self.counts)),
            stops=tuple(self.stops),
        )
        logger.info(
            f"Journey finalized: {self.summary.total_distance_m:.1f}m in "
            f"{self.summary.duration_s:.0f}s, {len(self.stops)} stop(s)"
        )
        return self.summary

    def snapshot(self) -> Optional[dict]:
        """Live view of the running journey for display."""
        if self.start_time_ms is None:
            return None
        return {
            'distance_m': self.distance,
            'speed_samples': len(self.speed_readings),
            'counts': dict(self.counts),
            'stops': len(self.stops),
        }
