"""
Type definitions for the gesture cursor pipeline.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, runtime_checkable

import numpy as np


@dataclass(frozen=True)
class Keypoint:
    """Normalized landmark coordinate. x, y in [0..1] relative to the frame."""
    x: float
    y: float
    z: float = 0.0


@dataclass
class HandObservation:
    """One detected hand in one frame: 21 keypoints and the top-ranked gesture label."""
    keypoints: List[Keypoint]
    gesture: Optional[str] = None
    score: float = 0.0
    handedness: Optional[str] = None


@dataclass
class ClassificationResult:
    """Output of a single classifier call."""
    hands: List[HandObservation] = field(default_factory=list)


@dataclass
class Frame:
    """Camera image (BGR) with a monotonic timestamp in milliseconds."""
    image: np.ndarray
    timestamp_ms: int


@dataclass
class HoverCommand:
    """Virtual cursor moved while pointing."""
    x: float
    y: float
    gesture: str


@dataclass
class ClickCommand:
    """Dwell click completed at a normalized position."""
    x: float
    y: float


@dataclass
class GestureChangeCommand:
    """A hand switched to a new gesture label."""
    gesture: str
    x: float
    y: float


@dataclass
class ScrollCommand:
    """Command to scroll by a pixel delta."""
    dy_px: float


@dataclass
class CursorState:
    """What the overlay needs to draw the cursor of one hand."""
    hand_id: int
    x: float
    y: float
    mode: str  # "pointer" or "scroll"
    dwell_progress: float = 0.0


@dataclass
class TickResult:
    """Everything produced by one engine tick."""
    timestamp_ms: int
    hands: List[HandObservation] = field(default_factory=list)
    hand_ids: List[int] = field(default_factory=list)
    cursors: List[CursorState] = field(default_factory=list)
    commands: list = field(default_factory=list)


@runtime_checkable
class ControllerProto(Protocol):
    """Abstract protocol for hosts that receive pointer and scroll commands."""

    async def hover(self, x: float, y: float, gesture: str) -> None:
        """Move the virtual cursor to a normalized position."""
        ...

    async def click(self, x: float, y: float) -> None:
        """Click whatever is under the normalized position."""
        ...

    async def gesture_changed(self, gesture: str, x: float, y: float) -> None:
        """Notify the host that a hand changed gesture."""
        ...

    async def scroll_by(self, dy_px: float) -> None:
        """Scroll the page by a pixel delta."""
        ...
