#!/usr/bin/env python3
"""
Replay a recorded journey through the motion-event engine.

Feeds the recorded GPS, accelerometer, gyroscope and ramp samples through a
SessionController in timestamp order, with the controller clock following the
recording, then prints the journey summary.

Session files are JSON (optionally gzipped) with any of the keys
gps_samples, accel_samples, gyro_samples and ramp_samples. Each sample carries
timestamp_ms (ms) or timestamp (s).

Usage:
    journey-replay session.json.gz
    journey-replay session.json --preset sensitive --filter kalman --json summary.json
"""

from __future__ import annotations

import argparse
import gzip
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import orjson

from .config import PRESETS, TrackerConfig
from .errors import SampleValidationError, TrackerError
from .samples import timestamp_ms_from_mapping
from .session import SessionController
from .sources import CallbackSource

logger = logging.getLogger(__name__)

SAMPLE_KEYS = {
    "gps_samples": "gps",
    "accel_samples": "accel",
    "gyro_samples": "gyro",
    "ramp_samples": "ramp",
}


@dataclass
class ReplayEvent:
    timestamp_ms: int
    kind: str
    payload: Dict[str, Any]


class ReplayClock:
    """Clock the controller reads instead of wall time."""

    def __init__(self) -> None:
        self._value = 0

    def set(self, value: int) -> None:
        self._value = value

    def now(self) -> int:
        return self._value


def load_session(path: Path) -> Dict[str, Any]:
    opener = gzip.open if path.suffix == ".gz" else open
    with opener(path, "rb") as handle:
        return orjson.loads(handle.read())


def build_events(data: Dict[str, Any]) -> List[ReplayEvent]:
    events: List[ReplayEvent] = []
    skipped = 0

    for key, kind in SAMPLE_KEYS.items():
        for sample in data.get(key) or []:
            try:
                ts = timestamp_ms_from_mapping(sample)
            except (SampleValidationError, AttributeError):
                skipped += 1
                continue
            events.append(ReplayEvent(ts, kind, sample))

    if skipped:
        logger.warning(f"Skipped {skipped} samples without a usable timestamp")
    if not events:
        raise TrackerError("Session has no samples to replay")

    # Stable sort keeps the recorded order for samples sharing a timestamp
    events.sort(key=lambda ev: ev.timestamp_ms)
    return events


def replay_session(
    data: Dict[str, Any],
    config: Optional[TrackerConfig] = None,
) -> Tuple[Any, List[Tuple[int, str, str]]]:
    """
    Run a recorded session through a fresh controller.

    Returns:
        tuple: (JourneySummary, [(timestamp_ms, event_kind, intensity), ...])
    """
    config = config or TrackerConfig()
    events = build_events(data)
    clock = ReplayClock()
    sources = {
        "gps": CallbackSource("gps"),
        "accel": CallbackSource("accelerometer"),
        "gyro": CallbackSource("gyroscope"),
    }
    notifications: List[Tuple[int, str, str]] = []

    controller = SessionController(
        sources["gps"], sources["accel"], sources["gyro"],
        config=config,
        notifier=lambda kind, intensity: notifications.append((clock.now(), kind, intensity)),
        clock=clock.now,
    )

    first_ts = events[0].timestamp_ms
    clock.set(first_ts - config.countdown_ms)
    controller.request_start()
    clock.set(first_ts)
    controller.poll()

    for event in events:
        clock.set(event.timestamp_ms)
        if event.kind == "ramp":
            pitch = event.payload.get("pitch", event.payload.get("angle"))
            if pitch is not None:
                controller.handle_ramp(pitch, event.timestamp_ms)
        else:
            sources[event.kind].push(event.payload)
        controller.poll()

    summary = controller.stop()
    return summary, notifications


def print_summary(summary, notifications, verbose=False) -> None:
    print("\n" + "=" * 80)
    print("JOURNEY SUMMARY")
    print("=" * 80)

    duration = summary.duration_s
    print(f"\nDuration:             {int(duration // 60)}m {int(duration % 60)}s")
    print(f"Total distance:       {summary.total_distance_m:.1f} m")
    print(f"Average speed:        {summary.average_speed_mps:.2f} m/s ({summary.average_speed_mps * 3.6:.1f} km/h)")
    print(f"Max speed:            {summary.max_speed_mps:.2f} m/s")
    print(f"Speed readings:       {len(summary.speed_samples)}")

    print("\nEvents:")
    for kind, count in summary.counts.items():
        print(f"  {kind:<14} {count}")

    print(f"\nStops ({len(summary.stops)}):")
    for stop in summary.stops:
        print(f"  {stop.start_ms} -> {stop.end_ms} ({stop.duration_ms / 1000:.1f}s)")

    if verbose and notifications:
        print("\nTimeline:")
        for ts, kind, intensity in notifications:
            print(f"  {ts}  {kind} ({intensity})")

    print("=" * 80)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Replay a recorded journey through the motion-event engine")
    parser.add_argument("session", type=Path, help="Path to session .json or .json.gz file")
    parser.add_argument("--preset", default="default", choices=sorted(PRESETS), help="Threshold preset")
    parser.add_argument("--filter", dest="filter_type", choices=["lowpass", "kalman"],
                        help="Location smoothing filter (default: preset's)")
    parser.add_argument("--forward-heading", type=float,
                        help="Forward heading in degrees (default: locked from first movement)")
    parser.add_argument("--json", dest="json_out", type=Path, help="Write the summary as JSON to this path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print the event timeline and debug logs")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: Dict[str, Any] = {}
    if args.filter_type:
        overrides["filter_type"] = args.filter_type
    if args.forward_heading is not None:
        overrides["forward_heading_deg"] = args.forward_heading

    try:
        config = TrackerConfig.preset(args.preset, **overrides)
        data = load_session(args.session)
        summary, notifications = replay_session(data, config)
    except (OSError, orjson.JSONDecodeError, TrackerError) as e:
        print(f"⚠ Replay failed: {e}", file=sys.stderr)
        return 1

    print_summary(summary, notifications, verbose=args.verbose)

    if args.json_out:
        args.json_out.write_bytes(summary.to_json(indent=True))
        print(f"✓ Summary saved to {args.json_out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
