"""
Gesture Cursor

Reads webcam frames, recognizes hand gestures with MediaPipe, and turns a
pointing finger into a hover cursor with dwell clicks and a closed fist into
drag scrolling.
"""

__version__ = "0.1.0"

from .types import (
    Keypoint, HandObservation, ClassificationResult, Frame, HoverCommand, ClickCommand,
    GestureChangeCommand, ScrollCommand, CursorState, TickResult, ControllerProto
)
from .errors import (
    GestureCursorError, ConfigError, DeviceError, ClassifierUnavailable,
    TransientClassificationFailure
)
from .config import load_config, Cfg
from .filters import ExponentialSmoother, PointFilter
from .tracking import HandIdentityTracker
from .gestures import PointerGesture, ScrollGesture
from .engine import InteractionEngine
from .controller_mock import MockController

__all__ = [
    "Keypoint",
    "HandObservation",
    "ClassificationResult",
    "Frame",
    "HoverCommand",
    "ClickCommand",
    "GestureChangeCommand",
    "ScrollCommand",
    "CursorState",
    "TickResult",
    "ControllerProto",
    "GestureCursorError",
    "ConfigError",
    "DeviceError",
    "ClassifierUnavailable",
    "TransientClassificationFailure",
    "load_config",
    "Cfg",
    "ExponentialSmoother",
    "PointFilter",
    "HandIdentityTracker",
    "PointerGesture",
    "ScrollGesture",
    "InteractionEngine",
    "MockController",
]
