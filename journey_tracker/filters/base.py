"""
Abstract base class for location smoothing filters.

The base class owns everything the smoothing strategies share: the accuracy
gate, instantaneous speed derivation and dual-gated distance accumulation.
Subclasses only implement how a raw coordinate becomes a filtered one.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..geo import distance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocationUpdate:
    """Result of feeding one raw fix to a location filter."""

    accepted: bool
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    speed_mps: float = 0.0
    delta_m: float = 0.0
    timestamp_ms: Optional[int] = None
    heading_deg: Optional[float] = None


REJECTED = LocationUpdate(accepted=False)


class LocationFilterBase(ABC):
    """
    Smooths a noisy coordinate stream and accumulates traveled distance.

    Distance only grows when the filtered step is longer than the noise
    threshold or the instantaneous speed shows real movement, so a stationary
    receiver drifting around its true position does not inflate the total.

    Args:
        accuracy_threshold_m (float): Fixes reporting a worse accuracy are dropped
        noise_threshold_m (float): Minimum filtered step counted as movement
        min_moving_speed_mps (float): Speed above which any step is counted
    """

    def __init__(self, accuracy_threshold_m=20.0, noise_threshold_m=2.0, min_moving_speed_mps=0.2):
        self.accuracy_threshold_m = accuracy_threshold_m
        self.noise_threshold_m = noise_threshold_m
        self.min_moving_speed_mps = min_moving_speed_mps

        self.distance = 0.0  # meters
        self.speed = 0.0     # m/s
        self.filtered_position = None  # (lat, lon)
        self.last_raw_position = None
        self.last_raw_time_ms = None

        self.accepted_count = 0
        self.rejected_count = 0

        self.lock = threading.Lock()

    @abstractmethod
    def _smooth(self, latitude, longitude):
        """
        Fold a raw coordinate into the filter state.

        Returns:
            tuple: Filtered (latitude, longitude) in degrees
        """

    @abstractmethod
    def _reset_smoothing(self):
        """Forget the smoothing state so the next fix seeds it."""

    def update(self, sample):
        """
        Process one RawLocationSample.

        Returns:
            LocationUpdate: accepted=False when the fix failed the accuracy gate
        """
        with self.lock:
            if sample.accuracy_m is not None and sample.accuracy_m > self.accuracy_threshold_m:
                self.rejected_count += 1
                logger.debug(
                    f"Dropping fix with accuracy {sample.accuracy_m:.1f}m "
                    f"> {self.accuracy_threshold_m:.1f}m"
                )
                return REJECTED

            speed = self._instantaneous_speed(sample)
            previous = self.filtered_position
            filtered = self._smooth(sample.latitude, sample.longitude)

            delta = 0.0
            if previous is not None:
                step = distance(previous[0], previous[1], filtered[0], filtered[1])
                if step > self.noise_threshold_m or speed > self.min_moving_speed_mps:
                    delta = step
                    self.distance += step

            self.filtered_position = filtered
            self.last_raw_position = (sample.latitude, sample.longitude)
            self.last_raw_time_ms = sample.timestamp_ms
            self.speed = speed
            self.accepted_count += 1

            return LocationUpdate(
                accepted=True,
                latitude=filtered[0],
                longitude=filtered[1],
                speed_mps=speed,
                delta_m=delta,
                timestamp_ms=sample.timestamp_ms,
                heading_deg=sample.heading_deg,
            )

    def _instantaneous_speed(self, sample):
        # Prefer the receiver's own Doppler speed when it reports one
        if sample.speed_mps is not None and sample.speed_mps >= 0:
            return sample.speed_mps

        if self.last_raw_position is None:
            return 0.0

        dt = (sample.timestamp_ms - self.last_raw_time_ms) / 1000.0
        if dt <= 0:
            return 0.0

        step = distance(
            self.last_raw_position[0], self.last_raw_position[1],
            sample.latitude, sample.longitude
        )
        return step / dt

    def reset(self):
        """Clear all state for a new journey."""
        with self.lock:
            self.distance = 0.0
            self.speed = 0.0
            self.filtered_position = None
            self.last_raw_position = None
            self.last_raw_time_ms = None
            self.accepted_count = 0
            self.rejected_count = 0
            self._reset_smoothing()

    def get_state(self):
        """
        Get current filter state.

        Returns:
            dict: 'distance' (m), 'speed' (m/s), 'position' (lat, lon) or None,
                'accepted' and 'rejected' fix counts
        """
        with self.lock:
            return {
                'distance': self.distance,
                'speed': self.speed,
                'position': self.filtered_position,
                'accepted': self.accepted_count,
                'rejected': self.rejected_count,
            }
