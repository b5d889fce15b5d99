"""
Sensor sample types delivered by the location provider and inertial streams.

Providers hand the engine either these dataclasses or plain mappings. Mappings
are converted with ``from_mapping`` at the ingestion boundary, which enforces the
required fields and raises SampleValidationError for anything malformed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from .errors import SampleValidationError


class SensorKind(str, Enum):
    ACCELEROMETER = "accelerometer"
    GYROSCOPE = "gyroscope"


def _require_float(payload: Mapping[str, Any], key: str) -> float:
    if key not in payload or payload[key] is None:
        raise SampleValidationError(f"missing required field '{key}'")
    try:
        value = float(payload[key])
    except (TypeError, ValueError):
        raise SampleValidationError(f"field '{key}' is not a number: {payload[key]!r}") from None
    if not math.isfinite(value):
        raise SampleValidationError(f"field '{key}' is not finite: {value}")
    return value


def _optional_float(payload: Mapping[str, Any], key: str) -> Optional[float]:
    if payload.get(key) is None:
        return None
    return _require_float(payload, key)


def timestamp_ms_from_mapping(payload: Mapping[str, Any]) -> int:
    # Recorded sessions carry either integer milliseconds or float seconds
    if payload.get("timestamp_ms") is not None:
        return int(_require_float(payload, "timestamp_ms"))
    if payload.get("timestamp") is not None:
        return int(round(_require_float(payload, "timestamp") * 1000))
    raise SampleValidationError("missing required field 'timestamp_ms'")


@dataclass(frozen=True)
class RawLocationSample:
    """
    A single location fix.

    Attributes:
        latitude: Latitude in degrees, [-90, 90].
        longitude: Longitude in degrees, [-180, 180].
        timestamp_ms: Fix time in integer milliseconds.
        accuracy_m: Horizontal accuracy radius in meters, if reported.
        speed_mps: Device-reported ground speed, if reported.
        heading_deg: Device-reported course over ground, if reported.
    """

    latitude: float
    longitude: float
    timestamp_ms: int
    accuracy_m: Optional[float] = None
    speed_mps: Optional[float] = None
    heading_deg: Optional[float] = None

    def __post_init__(self):
        if not -90.0 <= self.latitude <= 90.0:
            raise SampleValidationError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise SampleValidationError(f"longitude out of range: {self.longitude}")

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "RawLocationSample":
        """Build a sample from a provider payload (``lat``/``lon`` aliases accepted)."""
        if not isinstance(payload, Mapping):
            raise SampleValidationError(f"location payload must be a mapping, got {type(payload).__name__}")
        data = dict(payload)
        if "latitude" not in data and "lat" in data:
            data["latitude"] = data["lat"]
        if "longitude" not in data and "lon" in data:
            data["longitude"] = data["lon"]
        return cls(
            latitude=_require_float(data, "latitude"),
            longitude=_require_float(data, "longitude"),
            timestamp_ms=timestamp_ms_from_mapping(data),
            accuracy_m=_optional_float(data, "accuracy"),
            speed_mps=_optional_float(data, "speed"),
            heading_deg=_optional_float(data, "heading"),
        )


@dataclass(frozen=True)
class InertialSample:
    """
    One accelerometer (m/s²) or gyroscope (rad/s) reading in the device frame.
    """

    kind: SensorKind
    x: float
    y: float
    z: float
    timestamp_ms: int

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    @classmethod
    def from_mapping(cls, kind: SensorKind, payload: Mapping[str, Any]) -> "InertialSample":
        """Build a sample from ``{x, y, z, timestamp_ms}`` or a ``values`` triple."""
        if not isinstance(payload, Mapping):
            raise SampleValidationError(f"{kind.value} payload must be a mapping, got {type(payload).__name__}")
        data = dict(payload)
        values = data.get("values")
        if values is not None:
            try:
                data["x"], data["y"], data["z"] = values[:3]
            except (TypeError, ValueError):
                raise SampleValidationError(f"'values' must hold three numbers: {values!r}") from None
        return cls(
            kind=SensorKind(kind),
            x=_require_float(data, "x"),
            y=_require_float(data, "y"),
            z=_require_float(data, "z"),
            timestamp_ms=timestamp_ms_from_mapping(data),
        )
