"""
Overlay rendering: hand skeletons, cursor and dwell ring drawn with OpenCV.
"""
from typing import Dict, List, Optional, Tuple

import cv2
import numpy as np

from .config import DisplayConfig
from .landmarks import FINGERTIPS, HAND_CONNECTIONS, fingers_extended, mirror_x
from .types import CursorState, HandObservation, TickResult

CURSOR_SIZE = 24
RING_RADIUS = 14
SKELETON_OPACITY = 0.8


def hex_to_bgr(value: str) -> Tuple[int, int, int]:
    value = value.lstrip('#')
    r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    return (b, g, r)


# (line colour, glow colour) per recognizer label
GESTURE_COLORS: Dict[str, Tuple[Tuple[int, int, int], Tuple[int, int, int]]] = {
    'Pointing_Up': (hex_to_bgr('#06b6d4'), hex_to_bgr('#67e8f9')),
    'Thumb_Up': (hex_to_bgr('#22c55e'), hex_to_bgr('#86efac')),
    'Thumb_Down': (hex_to_bgr('#f97316'), hex_to_bgr('#fdba74')),
    'Closed_Fist': (hex_to_bgr('#a855f7'), hex_to_bgr('#d8b4fe')),
    'Open_Palm': (hex_to_bgr('#f59e0b'), hex_to_bgr('#fcd34d')),
    'Victory': (hex_to_bgr('#ec4899'), hex_to_bgr('#f9a8d4')),
    'ILoveYou': (hex_to_bgr('#ef4444'), hex_to_bgr('#f87171')),
}
DEFAULT_COLORS = (hex_to_bgr('#3b82f6'), hex_to_bgr('#60a5fa'))

KEYPOINT_FILL = hex_to_bgr('#1e293b')
TIP_FILL = (255, 255, 255)
CURSOR_FILL = hex_to_bgr('#60a5fa')
CURSOR_GLOW = hex_to_bgr('#3b82f6')
RING_ACTIVE = hex_to_bgr('#3b82f6')
RING_DONE = hex_to_bgr('#22c55e')
RING_TRACK = (90, 90, 90)


class OverlayRenderer:
    """Draws one frame of overlay. Holds no interaction state."""

    def __init__(self, cfg: DisplayConfig, mirror: bool = True):
        self.cfg = cfg
        self.mirror = mirror

    def render(self, frame_bgr: np.ndarray, tick: Optional[TickResult]) -> np.ndarray:
        """
        Draw skeletons, cursors and status onto a copy of the camera frame.

        Args:
            frame_bgr: Camera frame as captured (unmirrored)
            tick: Engine output for this frame, or None to draw the bare frame

        Returns:
            New BGR image, mirrored when the camera is configured as mirrored
        """
        canvas = cv2.flip(frame_bgr, 1) if self.mirror else frame_bgr.copy()
        if tick is None:
            return canvas

        if self.cfg.show_landmarks and tick.hands:
            layer = canvas.copy()
            for hand in tick.hands:
                self.draw_skeleton(layer, hand)
            cv2.addWeighted(layer, SKELETON_OPACITY, canvas, 1 - SKELETON_OPACITY, 0, canvas)

        if self.cfg.show_cursor:
            for cursor in tick.cursors:
                self.draw_cursor(canvas, cursor)

        if self.cfg.show_status:
            self.draw_status(canvas, self.status_lines(tick))

        return canvas

    def draw_skeleton(self, canvas: np.ndarray, hand: HandObservation) -> None:
        height, width = canvas.shape[:2]
        line_color, glow = GESTURE_COLORS.get(hand.gesture or '', DEFAULT_COLORS)

        points = [(int(mirror_x(kp.x, self.mirror) * width), int(kp.y * height))
                  for kp in hand.keypoints]

        for start, end in HAND_CONNECTIONS:
            cv2.line(canvas, points[start], points[end], line_color, 2, cv2.LINE_AA)

        for i, point in enumerate(points):
            if i in FINGERTIPS:
                cv2.circle(canvas, point, 6, glow, -1, cv2.LINE_AA)
                cv2.circle(canvas, point, 4, TIP_FILL, -1, cv2.LINE_AA)
            else:
                cv2.circle(canvas, point, 2, KEYPOINT_FILL, -1, cv2.LINE_AA)
                cv2.circle(canvas, point, 3, glow, 1, cv2.LINE_AA)

    def draw_cursor(self, canvas: np.ndarray, cursor: CursorState) -> None:
        # cursor coordinates are already in display (mirrored) space
        height, width = canvas.shape[:2]
        center = (int(cursor.x * width), int(cursor.y * height))
        radius = CURSOR_SIZE // 2

        glow = canvas.copy()
        cv2.circle(glow, center, radius + 4, CURSOR_GLOW, -1, cv2.LINE_AA)
        cv2.addWeighted(glow, 0.3, canvas, 0.7, 0, canvas)
        cv2.circle(canvas, center, radius - 4, CURSOR_FILL, -1, cv2.LINE_AA)

        if cursor.mode == "pointer" and self.cfg.show_dwell_ring:
            cv2.circle(canvas, center, RING_RADIUS, RING_TRACK, 3, cv2.LINE_AA)
            if cursor.dwell_progress > 0:
                color = RING_DONE if cursor.dwell_progress >= 1.0 else RING_ACTIVE
                cv2.ellipse(canvas, center, (RING_RADIUS, RING_RADIUS), -90, 0,
                            360.0 * cursor.dwell_progress, color, 3, cv2.LINE_AA)

    def status_lines(self, tick: TickResult) -> List[str]:
        if not tick.hands:
            return ["No hand detected"]

        lines = []
        for hand_id, hand in zip(tick.hand_ids, tick.hands):
            lines.append(f"Hand {hand_id}: {hand.gesture or '-'} ({fingers_extended(hand.keypoints)} fingers)")
        for cursor in tick.cursors:
            if cursor.mode == "pointer":
                lines.append(f"Dwell: {cursor.dwell_progress * 100:.0f}%")
        return lines

    @staticmethod
    def draw_status(canvas: np.ndarray, lines: List[str]) -> None:
        y = 30
        for line in lines:
            cv2.putText(canvas, line, (10, y), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 2)
            y += 25
