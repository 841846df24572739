"""
First-order exponential smoothing of tracked landmark positions.
"""
from typing import Dict, Hashable, Optional, Tuple


class ExponentialSmoother:
    """
    Smooths one 2D point: ``s += (raw - s) * alpha``.

    The first sample initializes the state directly, so there is no lag on
    the very first observation.
    """

    def __init__(self, alpha: float = 0.4):
        self.alpha = alpha
        self.x: Optional[float] = None
        self.y: Optional[float] = None

    def update(self, x: float, y: float) -> Tuple[float, float]:
        if self.x is None or self.y is None:
            self.x, self.y = x, y
        else:
            self.x += (x - self.x) * self.alpha
            self.y += (y - self.y) * self.alpha
        return self.x, self.y

    @property
    def value(self) -> Optional[Tuple[float, float]]:
        if self.x is None or self.y is None:
            return None
        return self.x, self.y

    def reset(self) -> None:
        self.x = None
        self.y = None


class PointFilter:
    """Smoothed positions for every (hand, landmark) slot."""

    def __init__(self, alpha: float = 0.4):
        self.alpha = alpha
        self._smoothers: Dict[Hashable, Dict[int, ExponentialSmoother]] = {}

    def update(self, hand_id: Hashable, landmark: int, x: float, y: float) -> Tuple[float, float]:
        """
        Feed a raw normalized position and return the smoothed one.

        Args:
            hand_id: Stable identity of the hand
            landmark: Landmark index being tracked (e.g. index fingertip, wrist)
            x: Raw x in [0..1]
            y: Raw y in [0..1]

        Returns:
            Smoothed (x, y)
        """
        slots = self._smoothers.setdefault(hand_id, {})
        smoother = slots.get(landmark)
        if smoother is None:
            smoother = slots[landmark] = ExponentialSmoother(self.alpha)
        return smoother.update(x, y)

    def get(self, hand_id: Hashable, landmark: int) -> Optional[Tuple[float, float]]:
        smoother = self._smoothers.get(hand_id, {}).get(landmark)
        return smoother.value if smoother else None

    def forget(self, hand_id: Hashable) -> None:
        self._smoothers.pop(hand_id, None)

    def clear(self) -> None:
        self._smoothers.clear()

    def __contains__(self, hand_id: Hashable) -> bool:
        return hand_id in self._smoothers
