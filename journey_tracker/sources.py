"""
Interfaces to the collaborators around the engine.

The session controller only ever talks to these shapes:
- SampleSource: location provider or inertial sensor stream (start/stop)
- notification sink: any callable taking (event_kind, intensity_label)
- TripLog: receives plain JSON-serializable {tripId, data} records
- permission gate: any callable returning a bool
"""

import logging
import threading
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class SampleSource(ABC):
    """A stream of samples delivered to a callback until stopped."""

    @abstractmethod
    def start(self, callback, interval_ms):
        """
        Begin delivering samples.

        Args:
            callback (callable): Called with each sample (dataclass or mapping)
            interval_ms (int): Requested delivery interval
        """

    @abstractmethod
    def stop(self):
        """Release the underlying provider. Must be safe to call twice."""


class CallbackSource(SampleSource):
    """
    Source whose samples are pushed in by the caller.

    Used by the replay tool and by tests; a live app wraps its platform
    sensor subscription the same way. Pushes while stopped are dropped.
    """

    def __init__(self, name='source'):
        self.name = name
        self.callback = None
        self.interval_ms = None
        self.start_count = 0
        self.stop_count = 0
        self.lock = threading.Lock()

    @property
    def is_running(self):
        return self.callback is not None

    def start(self, callback, interval_ms):
        with self.lock:
            self.callback = callback
            self.interval_ms = interval_ms
            self.start_count += 1
        logger.debug(f"{self.name}: started at {interval_ms}ms interval")

    def stop(self):
        with self.lock:
            was_running = self.callback is not None
            self.callback = None
            if was_running:
                self.stop_count += 1
        if was_running:
            logger.debug(f"{self.name}: stopped")

    def push(self, sample):
        """Deliver one sample; returns False if the source is not running."""
        with self.lock:
            callback = self.callback
        if callback is None:
            return False
        callback(sample)
        return True


class TripLog(ABC):
    """Network collaborator for trip records. Retry and auth are its own business."""

    @abstractmethod
    def send(self, record):
        """
        Args:
            record (dict): {'tripId': str, 'data': {...}}
        """
