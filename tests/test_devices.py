"""
Tests for the camera and recognizer adapters that need no real device or model.
"""
import unittest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from gesture_cursor.camera import CameraFrameSource
from gesture_cursor.config import load_config
from gesture_cursor.errors import ClassifierUnavailable, DeviceError, GestureCursorError
from gesture_cursor.recognizer import GestureClassifier


class TestCameraFrameSource(unittest.TestCase):

    def setUp(self):
        self.cfg = load_config()

    def test_from_config(self):
        source = CameraFrameSource.from_config(self.cfg)
        self.assertEqual((source.index, source.width, source.height, source.fps),
                         (self.cfg.camera.index, 640, 480, 30))

    def test_read_before_open(self):
        source = CameraFrameSource()
        self.assertIsNone(source.read())
        source.release()

    def test_missing_device(self):
        source = CameraFrameSource(index=9999)
        with self.assertRaises(DeviceError):
            source.open()
        self.assertIsNone(source.cap)


class TestGestureClassifier(unittest.TestCase):

    def test_missing_model(self):
        with self.assertRaises(ClassifierUnavailable) as ctx:
            GestureClassifier("/nonexistent/gesture_recognizer.task")
        self.assertIsInstance(ctx.exception, GestureCursorError)

    def test_from_config_missing_model(self):
        cfg = load_config()
        cfg.classifier.model_asset_path = "/nonexistent/model.task"
        with self.assertRaises(ClassifierUnavailable):
            GestureClassifier.from_config(cfg)


if __name__ == '__main__':
    unittest.main()
