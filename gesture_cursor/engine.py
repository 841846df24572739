"""
Interaction engine: per-hand filtering and gesture state, driven one tick at a time.
"""
import logging
from typing import Dict, Optional

from .config import Cfg
from .filters import PointFilter
from .gestures import PointerGesture, ScrollGesture
from .landmarks import INDEX_FINGER_TIP, NUM_LANDMARKS, WRIST, mirror_x
from .tracking import HandIdentityTracker
from .types import (
    ClassificationResult, CursorState, GestureChangeCommand, HandObservation,
    HoverCommand, TickResult
)

logger = logging.getLogger(__name__)


class InteractionEngine:
    """
    Owns all per-hand interaction state.

    Each call to ``process`` is one tick: identities are assigned, positions
    filtered, then the pointer and scroll machines are stepped. The returned
    TickResult lists the commands for the host and the cursor state for the
    overlay. No host code is called from here, so the engine can be driven
    with synthetic classifier output.
    """

    def __init__(self, cfg: Cfg):
        self.cfg = cfg
        self.filter = PointFilter(cfg.filter.alpha)
        self.identities = HandIdentityTracker(
            policy=cfg.identity.policy,
            max_match_distance=cfg.identity.max_match_distance,
            max_missing_ms=cfg.identity.max_missing_ms
        )
        self.pointers: Dict[int, PointerGesture] = {}
        self.scrolls: Dict[int, ScrollGesture] = {}
        self.last_timestamp_ms: Optional[int] = None
        self.closed = False

    def accepts(self, timestamp_ms: int) -> bool:
        """True if a result stamped ``timestamp_ms`` would be applied."""
        if self.closed:
            return False
        return self.last_timestamp_ms is None or timestamp_ms > self.last_timestamp_ms

    def process(self, result: ClassificationResult, timestamp_ms: int) -> Optional[TickResult]:
        """
        Apply one classification result.

        Args:
            result: Hands detected in the frame
            timestamp_ms: Timestamp of the frame the result belongs to

        Returns:
            TickResult, or None if the result is stale or the engine is closed
        """
        if not self.accepts(timestamp_ms):
            logger.debug("Discarding stale result at %sms (last %sms)", timestamp_ms, self.last_timestamp_ms)
            return None
        self.last_timestamp_ms = timestamp_ms

        hands = [h for h in result.hands if len(h.keypoints) >= NUM_LANDMARKS]
        ids = self.identities.assign(hands, timestamp_ms)
        tick = TickResult(timestamp_ms=timestamp_ms, hands=hands, hand_ids=ids)

        for hand_id, hand in sorted(zip(ids, hands), key=lambda pair: pair[0]):
            self._process_hand(hand_id, hand, tick)

        # A hand that is not in this frame is neither pointing nor scrolling.
        seen = set(ids)
        for hand_id, pointer in self.pointers.items():
            if hand_id not in seen:
                pointer.release()
        for hand_id, scroll in self.scrolls.items():
            if hand_id not in seen:
                scroll.release()

        for hand_id in self.identities.prune(timestamp_ms):
            self._forget(hand_id)

        return tick

    def _process_hand(self, hand_id: int, hand: HandObservation, tick: TickResult) -> None:
        mirror = self.cfg.camera.mirror
        now = tick.timestamp_ms

        tip = hand.keypoints[INDEX_FINGER_TIP]
        wrist = hand.keypoints[WRIST]
        x, y = self.filter.update(hand_id, INDEX_FINGER_TIP, mirror_x(tip.x, mirror), tip.y)
        wx, wy = self.filter.update(hand_id, WRIST, mirror_x(wrist.x, mirror), wrist.y)

        pointer = self.pointers.get(hand_id)
        if pointer is None:
            pointer = self.pointers[hand_id] = PointerGesture(self.cfg.pointer)
        scroll = self.scrolls.get(hand_id)
        if scroll is None:
            scroll = self.scrolls[hand_id] = ScrollGesture(self.cfg.scroll)

        gesture = hand.gesture

        if gesture == self.cfg.pointer.gesture:
            scroll.release()
            update = pointer.update(x, y, now)
            if not any(isinstance(c, HoverCommand) for c in tick.commands):
                tick.commands.append(HoverCommand(x=x, y=y, gesture=gesture))
            if update.click is not None:
                logger.debug("Dwell click by hand %d at (%.3f, %.3f)", hand_id, x, y)
                tick.commands.append(update.click)
            tick.cursors.append(CursorState(hand_id=hand_id, x=x, y=y, mode="pointer",
                                            dwell_progress=update.dwell_progress))
        elif gesture == self.cfg.scroll.gesture:
            pointer.release()
            command = scroll.update(wy)
            if command is not None:
                tick.commands.append(command)
            tick.cursors.append(CursorState(hand_id=hand_id, x=wx, y=wy, mode="scroll"))
        else:
            pointer.release()
            scroll.release()

        if gesture and gesture != pointer.dwell.last_gesture:
            pointer.dwell.last_gesture = gesture
            tick.commands.append(GestureChangeCommand(gesture=gesture, x=x, y=y))

    def _forget(self, hand_id: int) -> None:
        logger.debug("Hand %d lost", hand_id)
        self.filter.forget(hand_id)
        self.pointers.pop(hand_id, None)
        self.scrolls.pop(hand_id, None)

    def close(self) -> None:
        """Drop all state. Later results are ignored."""
        self.closed = True
        self.filter.clear()
        self.identities.clear()
        self.pointers.clear()
        self.scrolls.clear()
