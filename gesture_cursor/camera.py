"""
Frame source backed by an OpenCV camera capture.
"""
import logging
import time
from typing import Callable, Optional

import cv2

from .config import Cfg
from .errors import DeviceError
from .types import Frame

logger = logging.getLogger(__name__)


class CameraFrameSource:
    """Reads (frame, timestamp) pairs from a camera device."""

    def __init__(self, index: int = 0, width: int = 640, height: int = 480, fps: int = 30,
                 clock: Callable[[], float] = time.monotonic):
        self.index = index
        self.width = width
        self.height = height
        self.fps = fps
        self._clock = clock
        self.cap: Optional[cv2.VideoCapture] = None

    @classmethod
    def from_config(cls, cfg: Cfg) -> "CameraFrameSource":
        return cls(cfg.camera.index, cfg.camera.width, cfg.camera.height, cfg.camera.fps)

    def open(self) -> None:
        """
        Open the camera.

        Raises:
            DeviceError: if the device is missing or access is denied
        """
        cap = cv2.VideoCapture(self.index)
        if not cap.isOpened():
            cap.release()
            raise DeviceError(f"Failed to open camera {self.index}")

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        cap.set(cv2.CAP_PROP_FPS, self.fps)
        self.cap = cap
        logger.info("Camera %d opened (%dx%d @ %dfps)", self.index, self.width, self.height, self.fps)

    def read(self) -> Optional[Frame]:
        """Return the next frame, or None if the camera has nothing to give."""
        if self.cap is None:
            return None
        ok, image = self.cap.read()
        if not ok:
            return None
        return Frame(image=image, timestamp_ms=int(self._clock() * 1000))

    def release(self) -> None:
        if self.cap is not None:
            self.cap.release()
            self.cap = None
            logger.info("Camera %d released", self.index)

    def __enter__(self) -> "CameraFrameSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
