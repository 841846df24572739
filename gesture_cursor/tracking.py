"""
Stable hand identities across frames.

The recognizer reports hands as a plain list whose order can change from one
frame to the next. Per-hand state (smoothing, dwell, scroll) is keyed by the
identity assigned here instead of by list position.
"""
import math
from dataclasses import dataclass
from typing import Dict, List

from .landmarks import WRIST
from .types import HandObservation


@dataclass
class _Track:
    x: float
    y: float
    last_seen_ms: float


class HandIdentityTracker:
    """
    Assigns identities to the hands of each frame.

    ``nearest``: greedy nearest-neighbour matching of wrist positions against
    the identities seen before, closest pairs first.
    ``index``: identity is the position in the recognizer's list.
    """

    def __init__(self, policy: str = "nearest", max_match_distance: float = 0.25,
                 max_missing_ms: float = 500):
        self.policy = policy
        self.max_match_distance = max_match_distance
        self.max_missing_ms = max_missing_ms
        self._tracks: Dict[int, _Track] = {}
        self._next_id = 0

    def assign(self, hands: List[HandObservation], now_ms: float) -> List[int]:
        """Return one identity per hand, in the same order as ``hands``."""
        positions = [(h.keypoints[WRIST].x, h.keypoints[WRIST].y) for h in hands]

        if self.policy == "index":
            ids = list(range(len(hands)))
        else:
            ids = self._match(positions)

        for hand_id, (x, y) in zip(ids, positions):
            self._tracks[hand_id] = _Track(x, y, now_ms)
        return ids

    def _match(self, positions) -> List[int]:
        pairs = []
        for i, (x, y) in enumerate(positions):
            for hand_id, track in self._tracks.items():
                d = math.hypot(x - track.x, y - track.y)
                if d <= self.max_match_distance:
                    pairs.append((d, i, hand_id))
        pairs.sort()

        ids: List[int] = [-1] * len(positions)
        taken = set()
        for _, i, hand_id in pairs:
            if ids[i] != -1 or hand_id in taken:
                continue
            ids[i] = hand_id
            taken.add(hand_id)

        for i, hand_id in enumerate(ids):
            if hand_id == -1:
                ids[i] = self._next_id
                self._next_id += 1
        return ids

    def prune(self, now_ms: float) -> List[int]:
        """Drop identities unseen for longer than ``max_missing_ms`` and return them."""
        expired = [hand_id for hand_id, track in self._tracks.items()
                   if now_ms - track.last_seen_ms > self.max_missing_ms]
        for hand_id in expired:
            del self._tracks[hand_id]
        return expired

    @property
    def active_ids(self) -> List[int]:
        return sorted(self._tracks)

    def clear(self) -> None:
        self._tracks.clear()
        self._next_id = 0
