"""
Hand landmark helpers: indices, skeleton, pose heuristics and result conversion.
"""
import math
from typing import Iterable, List, Optional, Tuple

from .types import ClassificationResult, HandObservation, Keypoint

NUM_LANDMARKS = 21

WRIST = 0
THUMB_IP = 3
THUMB_TIP = 4
INDEX_FINGER_PIP = 6
INDEX_FINGER_TIP = 8
MIDDLE_FINGER_PIP = 10
MIDDLE_FINGER_TIP = 12
RING_FINGER_PIP = 14
RING_FINGER_TIP = 16
PINKY_MCP = 17
PINKY_PIP = 18
PINKY_TIP = 20

FINGERTIPS = (THUMB_TIP, INDEX_FINGER_TIP, MIDDLE_FINGER_TIP, RING_FINGER_TIP, PINKY_TIP)

# Bones drawn by the overlay: each finger chain from the wrist, plus the palm arch.
HAND_CONNECTIONS: Tuple[Tuple[int, int], ...] = (
    (0, 1), (1, 2), (2, 3), (3, 4),
    (0, 5), (5, 6), (6, 7), (7, 8),
    (0, 9), (9, 10), (10, 11), (11, 12),
    (0, 13), (13, 14), (14, 15), (15, 16),
    (0, 17), (17, 18), (18, 19), (19, 20),
    (5, 9), (9, 13), (13, 17),
)

# Labels produced by the MediaPipe gesture recognizer model.
POINTING_UP = "Pointing_Up"
CLOSED_FIST = "Closed_Fist"
OPEN_PALM = "Open_Palm"
NO_GESTURE = "None"


def _dist(a: Keypoint, b: Keypoint) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def palm_center(keypoints: List[Keypoint]) -> Tuple[float, float]:
    """
    Calculate the center of the palm.

    Args:
        keypoints: List of 21 hand landmarks

    Returns:
        (x, y) coordinates of palm center in [0..1] range
    """
    # wrist and the four finger bases
    palm_indices = [0, 5, 9, 13, 17]

    x_sum = sum(keypoints[i].x for i in palm_indices)
    y_sum = sum(keypoints[i].y for i in palm_indices)

    return (x_sum / len(palm_indices), y_sum / len(palm_indices))


def finger_states(keypoints: List[Keypoint]) -> List[bool]:
    """
    Which fingers are extended, as [thumb, index, middle, ring, pinky].

    A finger counts as extended when its tip is clearly farther from the wrist
    than its PIP joint, which holds regardless of hand rotation. The thumb is
    compared against the pinky base instead.
    """
    wrist = keypoints[WRIST]
    states = [_dist(keypoints[THUMB_TIP], keypoints[PINKY_MCP]) >
              _dist(keypoints[THUMB_IP], keypoints[PINKY_MCP])]

    for tip_idx, pip_idx in ((INDEX_FINGER_TIP, INDEX_FINGER_PIP),
                             (MIDDLE_FINGER_TIP, MIDDLE_FINGER_PIP),
                             (RING_FINGER_TIP, RING_FINGER_PIP),
                             (PINKY_TIP, PINKY_PIP)):
        states.append(_dist(keypoints[tip_idx], wrist) > _dist(keypoints[pip_idx], wrist) * 1.1)

    return states


def fingers_extended(keypoints: List[Keypoint]) -> int:
    """Count the number of extended fingers (0-5)."""
    return sum(finger_states(keypoints))


def is_open_hand(keypoints: List[Keypoint]) -> bool:
    """True if all five fingers are extended."""
    return fingers_extended(keypoints) >= 5


def is_index_only(keypoints: List[Keypoint]) -> bool:
    """
    Check if the index finger is the only long finger extended.
    The thumb may be either way.
    """
    _, index, middle, ring, pinky = finger_states(keypoints)
    return index and not (middle or ring or pinky)


def is_closed_fist(keypoints: List[Keypoint]) -> bool:
    """True if none of the four long fingers are extended."""
    return not any(finger_states(keypoints)[1:])


def heuristic_gesture(keypoints: List[Keypoint]) -> Optional[str]:
    """Derive a recognizer-style label from the landmark geometry alone."""
    if len(keypoints) < NUM_LANDMARKS:
        return None
    if is_open_hand(keypoints):
        return OPEN_PALM
    if is_index_only(keypoints):
        return POINTING_UP
    if is_closed_fist(keypoints):
        return CLOSED_FIST
    return None


def mirror_x(x: float, mirror: bool) -> float:
    return 1.0 - x if mirror else x


def observations_from_result(result, fallback_heuristics: bool = False) -> ClassificationResult:
    """
    Convert a MediaPipe ``GestureRecognizerResult`` into plain observations.

    Only the top-ranked gesture category of each hand is kept. The recognizer's
    ``None`` category is treated as no label.

    Args:
        result: Object with ``hand_landmarks``, ``gestures`` and ``handedness`` lists
        fallback_heuristics: Derive a label from the landmarks when the model gives none

    Returns:
        ClassificationResult with one HandObservation per detected hand
    """
    hands: List[HandObservation] = []
    hand_landmarks = getattr(result, "hand_landmarks", None) or []
    gestures = getattr(result, "gestures", None) or []
    handedness = getattr(result, "handedness", None) or []

    for i, landmarks in enumerate(hand_landmarks):
        keypoints = [Keypoint(x=float(lm.x), y=float(lm.y), z=float(getattr(lm, "z", 0.0) or 0.0))
                     for lm in landmarks]

        label, score = _top_category(gestures, i)
        if label == NO_GESTURE:
            label = None
        if label is None and fallback_heuristics:
            label = heuristic_gesture(keypoints)

        side, _ = _top_category(handedness, i)
        hands.append(HandObservation(keypoints=keypoints, gesture=label, score=score, handedness=side))

    return ClassificationResult(hands=hands)


def _top_category(categories: Iterable, index: int) -> Tuple[Optional[str], float]:
    categories = list(categories)
    if index >= len(categories) or not categories[index]:
        return None, 0.0
    top = categories[index][0]
    return top.category_name, float(top.score or 0.0)
