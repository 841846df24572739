"""
Landmark classifier adapter around the MediaPipe GestureRecognizer task.
"""
import logging
from pathlib import Path
from typing import Optional

import cv2
import mediapipe as mp
import numpy as np
from mediapipe.tasks import python as mp_tasks
from mediapipe.tasks.python import vision

from .config import Cfg
from .errors import ClassifierUnavailable, TransientClassificationFailure
from .landmarks import observations_from_result
from .types import ClassificationResult

logger = logging.getLogger(__name__)


class GestureClassifier:
    """Hand landmark + gesture label recognizer running in VIDEO mode."""

    def __init__(self, model_asset_path: str, num_hands: int = 2,
                 min_hand_detection_confidence: float = 0.5,
                 min_hand_presence_confidence: float = 0.5,
                 min_tracking_confidence: float = 0.5,
                 delegate: str = "cpu",
                 fallback_heuristics: bool = False):
        """
        Load the recognizer model.

        Args:
            model_asset_path: Path to a ``gesture_recognizer.task`` bundle
            num_hands: Maximum number of hands to detect
            min_hand_detection_confidence: Minimum confidence for palm detection
            min_hand_presence_confidence: Minimum confidence for hand presence
            min_tracking_confidence: Minimum confidence for landmark tracking
            delegate: "cpu" or "gpu"
            fallback_heuristics: Label unlabeled hands from their landmarks

        Raises:
            ClassifierUnavailable: if the model cannot be loaded
        """
        self.fallback_heuristics = fallback_heuristics
        model_path = Path(model_asset_path)
        if not model_path.exists():
            raise ClassifierUnavailable(f"Gesture model not found: {model_path}")

        base_delegate = (mp_tasks.BaseOptions.Delegate.GPU if delegate == "gpu"
                         else mp_tasks.BaseOptions.Delegate.CPU)
        options = vision.GestureRecognizerOptions(
            base_options=mp_tasks.BaseOptions(model_asset_path=str(model_path), delegate=base_delegate),
            running_mode=vision.RunningMode.VIDEO,
            num_hands=num_hands,
            min_hand_detection_confidence=min_hand_detection_confidence,
            min_hand_presence_confidence=min_hand_presence_confidence,
            min_tracking_confidence=min_tracking_confidence
        )

        try:
            self._recognizer: Optional[vision.GestureRecognizer] = \
                vision.GestureRecognizer.create_from_options(options)
        except Exception as e:
            raise ClassifierUnavailable(f"Failed to load gesture model {model_path}: {e}") from e

        logger.info("Gesture recognizer loaded from %s (%d hands, %s)", model_path, num_hands, delegate)

    @classmethod
    def from_config(cls, cfg: Cfg) -> "GestureClassifier":
        c = cfg.classifier
        return cls(
            model_asset_path=c.model_asset_path,
            num_hands=c.num_hands,
            min_hand_detection_confidence=c.min_hand_detection_confidence,
            min_hand_presence_confidence=c.min_hand_presence_confidence,
            min_tracking_confidence=c.min_tracking_confidence,
            delegate=c.delegate,
            fallback_heuristics=c.fallback_heuristics
        )

    def classify(self, frame_bgr: np.ndarray, timestamp_ms: int) -> ClassificationResult:
        """
        Classify one video frame.

        Args:
            frame_bgr: Input frame in BGR format
            timestamp_ms: Monotonic frame timestamp in milliseconds

        Returns:
            Zero or more hand observations

        Raises:
            TransientClassificationFailure: if this frame could not be processed
        """
        if self._recognizer is None:
            raise TransientClassificationFailure("recognizer is closed")

        try:
            frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
            image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)
            result = self._recognizer.recognize_for_video(image, int(timestamp_ms))
        except Exception as e:
            raise TransientClassificationFailure(str(e)) from e

        return observations_from_result(result, fallback_heuristics=self.fallback_heuristics)

    def close(self) -> None:
        if self._recognizer is not None:
            self._recognizer.close()
            self._recognizer = None
            logger.info("Gesture recognizer closed")
