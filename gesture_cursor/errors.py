"""
Exception types raised by the gesture cursor pipeline.
"""


class GestureCursorError(Exception):
    """Base class for all gesture cursor errors."""


class ConfigError(GestureCursorError, ValueError):
    """Configuration file contains an invalid value."""


class DeviceError(GestureCursorError):
    """Camera could not be opened (missing device or permission denied)."""


class ClassifierUnavailable(GestureCursorError):
    """Gesture recognizer model failed to initialize."""


class TransientClassificationFailure(GestureCursorError):
    """A single frame could not be classified. The tick is skipped."""
