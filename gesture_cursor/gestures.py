"""
Gesture state machines that turn smoothed hand positions into commands.
"""
import math
from dataclasses import dataclass
from typing import Optional

from .config import PointerConfig, ScrollConfig
from .types import ClickCommand, ScrollCommand


@dataclass
class DwellState:
    """Dwell anchor of one hand."""
    anchor_x: float = 0.0
    anchor_y: float = 0.0
    anchor_time_ms: float = 0.0
    last_gesture: Optional[str] = None


@dataclass
class PointerUpdate:
    """Result of one pointer tick."""
    x: float
    y: float
    dwell_progress: float = 0.0
    click: Optional[ClickCommand] = None


class PointerGesture:
    """
    Converts a pointing hand into hover positions and dwell clicks.

    Features:
    - Hover position reported on every tracking frame
    - Dwell click after holding still for ``dwell_time_ms``
    - Distance hysteresis: moving beyond ``dwell_threshold`` restarts the dwell
    - Refractory period after a click to prevent immediate re-trigger
    - Anchor snapped to the current position on (re-)entry
    """

    IDLE = "idle"
    TRACKING = "tracking"

    def __init__(self, cfg: PointerConfig):
        self.cfg = cfg
        self.state = self.IDLE
        self.dwell = DwellState()

    @property
    def is_tracking(self) -> bool:
        return self.state == self.TRACKING

    def update(self, x: float, y: float, now_ms: float) -> PointerUpdate:
        """
        Process one frame in which the hand shows the pointing gesture.

        Args:
            x: Smoothed normalized x
            y: Smoothed normalized y
            now_ms: Frame timestamp in milliseconds

        Returns:
            PointerUpdate with the dwell progress and an optional click
        """
        dwell = self.dwell

        if self.state != self.TRACKING:
            # A jump back into pointing is movement, never an instant dwell.
            self.state = self.TRACKING
            self._reanchor(x, y, now_ms)
            return PointerUpdate(x=x, y=y)

        dist = math.hypot(x - dwell.anchor_x, y - dwell.anchor_y)
        if dist > self.cfg.dwell_threshold:
            self._reanchor(x, y, now_ms)
            return PointerUpdate(x=x, y=y)

        duration = now_ms - dwell.anchor_time_ms
        progress = min(max(duration / self.cfg.dwell_time_ms, 0.0), 1.0)

        click = None
        if duration >= self.cfg.dwell_time_ms:
            click = ClickCommand(x=x, y=y)
            dwell.anchor_time_ms = now_ms + self.cfg.refractory_ms

        return PointerUpdate(x=x, y=y, dwell_progress=progress, click=click)

    def release(self) -> None:
        """Leave tracking. The stale anchor is replaced on the next entry."""
        self.state = self.IDLE

    def _reanchor(self, x: float, y: float, now_ms: float) -> None:
        self.dwell.anchor_x = x
        self.dwell.anchor_y = y
        self.dwell.anchor_time_ms = now_ms


@dataclass
class ScrollState:
    """Drag-scroll tracking of one hand."""
    last_tracked_y: Optional[float] = None
    velocity: float = 0.0
    active: bool = False


class ScrollGesture:
    """
    Converts closed-fist vertical motion into continuous scrolling.

    Features:
    - Exponentially smoothed velocity of the tracked y-coordinate
    - Velocity threshold so idle jitter never scrolls
    - Re-anchoring on slow but real movement
    - Content follows the hand (scroll delta is the negated velocity)
    - No momentum after release
    """

    def __init__(self, cfg: ScrollConfig):
        self.cfg = cfg
        self.state = ScrollState()

    @property
    def is_active(self) -> bool:
        return self.state.active

    def update(self, y: float) -> Optional[ScrollCommand]:
        """
        Process one frame in which the hand shows the scroll gesture.

        Args:
            y: Tracked (wrist) y-coordinate in [0..1]

        Returns:
            ScrollCommand if the page should move this frame, None otherwise
        """
        state = self.state

        if not state.active or state.last_tracked_y is None:
            state.active = True
            state.last_tracked_y = y
            state.velocity = 0.0
            return None

        delta = y - state.last_tracked_y
        decay = self.cfg.velocity_decay
        state.velocity = state.velocity * decay + delta * (1.0 - decay)

        if abs(state.velocity) > self.cfg.velocity_threshold:
            state.last_tracked_y = y
            return ScrollCommand(dy_px=-state.velocity * self.cfg.multiplier)

        if abs(delta) > self.cfg.reset_threshold:
            state.last_tracked_y = y
        return None

    def release(self) -> None:
        """Stop scrolling and discard the reference position and velocity."""
        self.state = ScrollState()
