"""
Mock controller implementation for testing gesture commands.
"""
import logging
from typing import List, Tuple

logger = logging.getLogger(__name__)


class MockController:
    """Mock controller that logs and records actions instead of executing them."""

    def __init__(self):
        """Initialize the mock controller."""
        self.calls: List[Tuple] = []
        self.hover_count = 0
        self.click_count = 0
        self.scroll_count = 0
        self.gesture_count = 0

    async def hover(self, x: float, y: float, gesture: str) -> None:
        self.hover_count += 1
        self.calls.append(("hover", x, y, gesture))
        logger.debug("[MockController] Hover: (%.3f, %.3f) %s", x, y, gesture)

    async def click(self, x: float, y: float) -> None:
        """Record a dwell click instead of clicking."""
        self.click_count += 1
        self.calls.append(("click", x, y))
        logger.info("[MockController] Click: (%.3f, %.3f) (call #%d)", x, y, self.click_count)

    async def gesture_changed(self, gesture: str, x: float, y: float) -> None:
        self.gesture_count += 1
        self.calls.append(("gesture", gesture, x, y))
        logger.info("[MockController] Gesture: %s", gesture)

    async def scroll_by(self, dy_px: float) -> None:
        """Record scroll command instead of executing it."""
        self.scroll_count += 1
        self.calls.append(("scroll", dy_px))
        logger.info("[MockController] Scroll: dy_px=%.1f (call #%d)", dy_px, self.scroll_count)

    def reset_counters(self) -> None:
        """Reset action counters for testing."""
        self.calls.clear()
        self.hover_count = 0
        self.click_count = 0
        self.scroll_count = 0
        self.gesture_count = 0
