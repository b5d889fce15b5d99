"""
Backward movement detection.

Keeps a short time window of filtered coordinates and derives a smoothed travel
bearing by summing each segment's local east/north displacement in meters, so
longer segments weigh more. Travel within the configured angle of the reverse
of the forward heading, at walking-pace speed or above, is backward movement.

Re-arming after an event follows one explicit policy:
    'stop'    - speed must drop below the minimum speed first
    'heading' - the travel bearing must leave the backward window first
"""

import logging
import math
from collections import deque

from ..events import EventKind, Intensity, MotionEvent
from ..geo import angle_difference, latlon_to_meters, normalize_bearing
from .base import Detector

logger = logging.getLogger(__name__)


class BackwardDetector(Detector):
    """
    Args:
        forward_heading_deg (float): Direction the chair faces; None locks it from
            the first moving window, preferring the receiver's reported course
        window_ms (int): Length of the coordinate window
        angle_deg (float): Maximum deviation from the reverse heading
        min_distance_m (float): Buffered distance needed before evaluating
        min_time_ms (int): Buffered time span needed before evaluating
        min_speed_mps (float): Window speed needed to count as moving
        rearm (str): 'stop' or 'heading'
    """

    name = 'backward'

    def __init__(self, forward_heading_deg=None, window_ms=3000, angle_deg=30.0,
                 min_distance_m=0.3, min_time_ms=500, min_speed_mps=0.1, rearm='stop'):
        super().__init__()
        if rearm not in ('stop', 'heading'):
            raise ValueError(f"Unknown re-arm policy: {rearm}. Use 'stop' or 'heading'")
        self.configured_heading = forward_heading_deg
        self.forward_heading = forward_heading_deg
        self.window_ms = window_ms
        self.angle_deg = angle_deg
        self.min_distance_m = min_distance_m
        self.min_time_ms = min_time_ms
        self.min_speed_mps = min_speed_mps
        self.rearm = rearm

        self.armed = True
        self.window = deque()  # (timestamp_ms, lat, lon)
        self.last_travel_bearing = None

    def update(self, latitude, longitude, speed, now_ms, cooldown, heading_deg=None):
        """
        Args:
            latitude, longitude: Filtered coordinate (degrees)
            speed (float): Instantaneous speed from the location filter (m/s)
            now_ms (int): Fix time
            cooldown (Cooldown): Shared debounce window
            heading_deg (float): Course over ground reported with the fix, if any

        Returns:
            MotionEvent or None
        """
        if not self.armed and self.rearm == 'stop' and speed < self.min_speed_mps:
            # A stop starts a fresh segment of travel
            self.armed = True
            self.active = False
            self.window.clear()

        self.window.append((now_ms, latitude, longitude))
        while self.window and self.window[0][0] < now_ms - self.window_ms:
            self.window.popleft()

        travel = self._travel()
        if travel is None:
            return None
        travel_bearing, total, span_ms = travel
        self.last_travel_bearing = travel_bearing

        window_speed = total / (span_ms / 1000.0)
        moving = window_speed >= self.min_speed_mps

        if self.forward_heading is None:
            if moving:
                self.forward_heading = travel_bearing if heading_deg is None else normalize_bearing(heading_deg)
                logger.info(f"Forward heading locked at {self.forward_heading:.1f}°")
            return None

        reverse = (self.forward_heading + 180.0) % 360.0
        deviation = angle_difference(travel_bearing, reverse)
        backward = moving and deviation <= self.angle_deg

        if not backward:
            self.condition_start_ms = None
            if not self.armed and self.rearm == 'heading':
                self.armed = True
                self.active = False
            return None

        if self.condition_start_ms is None:
            self.condition_start_ms = now_ms
        if not self.armed or not cooldown.ready(now_ms):
            return None

        cooldown.trigger(now_ms)
        self.armed = False
        self.active = True
        self.fired_count += 1
        return MotionEvent(
            EventKind.BACKWARD, Intensity.MAJOR, now_ms,
            value=total,
            details={'travel_bearing': travel_bearing, 'forward_heading': self.forward_heading,
                     'window_speed_mps': window_speed},
        )

    def _travel(self):
        """
        Smoothed travel over the window.

        Returns:
            tuple: (bearing deg, total distance m, span ms), or None when the
                window is too short or shows no movement
        """
        if len(self.window) < 2:
            return None
        span_ms = self.window[-1][0] - self.window[0][0]
        if span_ms <= 0:
            return None

        east = north = total = 0.0
        points = list(self.window)
        for (_, lat1, lon1), (_, lat2, lon2) in zip(points, points[1:]):
            de, dn = latlon_to_meters(lat2, lon2, lat1, lon1)
            east += de
            north += dn
            total += math.hypot(de, dn)

        if total == 0:
            return None
        if total < self.min_distance_m and span_ms < self.min_time_ms:
            return None

        return normalize_bearing(math.degrees(math.atan2(east, north))), total, span_ms

    def reset(self):
        super().reset()
        self.forward_heading = self.configured_heading
        self.armed = True
        self.window.clear()
        self.last_travel_bearing = None
