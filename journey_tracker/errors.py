"""
Exception hierarchy for the journey tracker.

Nothing in the engine is fatal to the process. These exceptions mark programming
errors (bad configuration, illegal session transitions) and malformed input at the
ingestion boundary, which the session handlers log and drop.
"""


class TrackerError(Exception):
    """Base class for all journey tracker errors."""


class ConfigError(TrackerError, ValueError):
    """Unknown option, unknown preset or inconsistent threshold values."""


class SampleValidationError(TrackerError, ValueError):
    """A raw sensor or location payload is missing fields or has bad values."""


class SessionStateError(TrackerError, RuntimeError):
    """An operation was requested in a session state that does not allow it."""

    def __init__(self, operation, state):
        super().__init__(f"Cannot {operation} while session is {state}")
        self.operation = operation
        self.state = state
