"""Exception types raised by the tracking evaluator."""

from __future__ import annotations

from typing import Optional


class DetrackError(Exception):
    """Base exception for all detrack errors."""

    pass


class ConfigurationError(DetrackError, ValueError):
    """Raised for invalid options, unsupported devices or unavailable backends."""

    pass


class BufferDecodeError(DetrackError, ValueError):
    """Raised when a channel buffer does not match its declared framing."""

    def __init__(self, message: str, expected: Optional[int] = None, actual: Optional[int] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class TrackerInitError(DetrackError, RuntimeError):
    """Raised when a tracker backend cannot be initialized on a detection."""

    pass
