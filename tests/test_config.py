"""
Tests for configuration loading.
"""
import os
import tempfile
import unittest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from gesture_cursor.config import load_config, Cfg
from gesture_cursor.errors import ConfigError


class TestConfigLoading(unittest.TestCase):

    def _write(self, text):
        fd, path = tempfile.mkstemp(suffix=".yaml")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        self.addCleanup(os.remove, path)
        return path

    def test_defaults(self):
        """Shipped defaults carry the tuned interaction constants."""
        cfg = load_config()
        self.assertIsInstance(cfg, Cfg)
        self.assertAlmostEqual(cfg.filter.alpha, 0.4)
        self.assertEqual(cfg.pointer.gesture, "Pointing_Up")
        self.assertAlmostEqual(cfg.pointer.dwell_threshold, 0.05)
        self.assertEqual(cfg.pointer.dwell_time_ms, 1200)
        self.assertEqual(cfg.pointer.refractory_ms, 500)
        self.assertEqual(cfg.scroll.gesture, "Closed_Fist")
        self.assertAlmostEqual(cfg.scroll.velocity_threshold, 0.006)
        self.assertAlmostEqual(cfg.scroll.reset_threshold, 0.02)
        self.assertEqual(cfg.scroll.multiplier, 1800)
        self.assertAlmostEqual(cfg.scroll.velocity_decay, 0.6)
        self.assertEqual(cfg.classifier.num_hands, 2)
        self.assertTrue(cfg.camera.mirror)
        self.assertEqual(cfg.identity.policy, "nearest")

    def test_override_merges_over_defaults(self):
        path = self._write("pointer:\n  dwell_time_ms: 800\nidentity:\n  policy: INDEX\n")
        cfg = load_config(path)
        self.assertEqual(cfg.pointer.dwell_time_ms, 800)
        self.assertAlmostEqual(cfg.pointer.dwell_threshold, 0.05)
        self.assertEqual(cfg.identity.policy, "index")
        self.assertAlmostEqual(cfg.filter.alpha, 0.4)

    def test_empty_override(self):
        cfg = load_config(self._write(""))
        self.assertAlmostEqual(cfg.filter.alpha, 0.4)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_config("/nonexistent/gesture-cursor.yaml")

    def test_invalid_alpha(self):
        for alpha in ("0", "1.5", "-0.2"):
            with self.assertRaises(ConfigError):
                load_config(self._write(f"filter:\n  alpha: {alpha}\n"))

    def test_invalid_values(self):
        bad = [
            "pointer:\n  dwell_time_ms: 0\n",
            "scroll:\n  velocity_decay: 1.0\n",
            "identity:\n  policy: random\n",
            "classifier:\n  delegate: tpu\n",
            "camera:\n  width: wide\n",
        ]
        for text in bad:
            with self.assertRaises(ConfigError):
                load_config(self._write(text))

    def test_config_error_is_value_error(self):
        with self.assertRaises(ValueError):
            load_config(self._write("filter:\n  alpha: 2\n"))

    def test_non_mapping_file(self):
        with self.assertRaises(ConfigError):
            load_config(self._write("- just\n- a list\n"))


if __name__ == '__main__':
    unittest.main()
