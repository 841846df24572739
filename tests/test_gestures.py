"""
Test cases for the pointer (dwell click) and scroll state machines.
"""
import unittest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from gesture_cursor.gestures import PointerGesture, ScrollGesture
from gesture_cursor.types import ClickCommand, ScrollCommand
from gesture_cursor.config import load_config


class TestPointerGesture(unittest.TestCase):
    """Test hover and dwell click behaviour."""

    def setUp(self):
        """Set up test configuration."""
        self.cfg = load_config()
        self.pointer = PointerGesture(self.cfg.pointer)

    def test_entry_never_clicks(self):
        update = self.pointer.update(0.5, 0.5, 10_000)
        self.assertIsNone(update.click)
        self.assertEqual(update.dwell_progress, 0.0)
        self.assertTrue(self.pointer.is_tracking)

    def test_dwell_triggers_exactly_once_per_stay(self):
        """Holding still fires one click, then nothing during the refractory period."""
        clicks = []
        for t in range(0, 2800, 50):
            update = self.pointer.update(0.5, 0.5, t)
            if update.click:
                clicks.append((t, update.click))

        self.assertEqual(len(clicks), 1)
        t_click, click = clicks[0]
        self.assertEqual(t_click, 1200)
        self.assertIsInstance(click, ClickCommand)
        self.assertAlmostEqual(click.x, 0.5)
        self.assertAlmostEqual(click.y, 0.5)

    def test_second_click_after_refractory_and_dwell(self):
        self.pointer.update(0.5, 0.5, 0)
        self.assertIsNotNone(self.pointer.update(0.5, 0.5, 1200).click)
        # anchor moved to 1200 + 500, next dwell completes at 2900
        self.assertIsNone(self.pointer.update(0.5, 0.5, 2899).click)
        self.assertIsNotNone(self.pointer.update(0.5, 0.5, 2900).click)

    def test_progress_during_refractory_is_zero(self):
        self.pointer.update(0.5, 0.5, 0)
        self.pointer.update(0.5, 0.5, 1200)
        self.assertEqual(self.pointer.update(0.5, 0.5, 1300).dwell_progress, 0.0)

    def test_dwell_progress(self):
        self.pointer.update(0.5, 0.5, 0)
        update = self.pointer.update(0.5, 0.5, 600)
        self.assertAlmostEqual(update.dwell_progress, 0.5)
        self.assertEqual(self.pointer.update(0.5, 0.5, 1200).dwell_progress, 1.0)

    def test_small_motion_keeps_dwelling(self):
        self.pointer.update(0.5, 0.5, 0)
        self.pointer.update(0.53, 0.5, 600)
        self.assertIsNotNone(self.pointer.update(0.52, 0.52, 1200).click)

    def test_dwell_resets_on_movement(self):
        """Moving past the threshold re-anchors and no click fires."""
        self.pointer.update(0.5, 0.5, 0)
        update = self.pointer.update(0.6, 0.5, 800)
        self.assertIsNone(update.click)
        self.assertAlmostEqual(self.pointer.dwell.anchor_x, 0.6)
        self.assertEqual(self.pointer.dwell.anchor_time_ms, 800)

        self.assertIsNone(self.pointer.update(0.6, 0.5, 1300).click)
        self.assertIsNotNone(self.pointer.update(0.6, 0.5, 2000).click)

    def test_gesture_switch_reanchors(self):
        """Re-entering the pointing gesture elsewhere must not click on a stale anchor."""
        self.pointer.update(0.2, 0.2, 0)
        self.pointer.update(0.2, 0.2, 1000)
        self.pointer.release()
        self.assertFalse(self.pointer.is_tracking)

        update = self.pointer.update(0.8, 0.8, 1500)
        self.assertIsNone(update.click)
        self.assertEqual(update.dwell_progress, 0.0)
        self.assertAlmostEqual(self.pointer.dwell.anchor_x, 0.8)
        self.assertAlmostEqual(self.pointer.dwell.anchor_y, 0.8)
        self.assertIsNone(self.pointer.update(0.8, 0.8, 2000).click)

    def test_reentry_at_same_position_restarts_dwell(self):
        self.pointer.update(0.2, 0.2, 0)
        self.pointer.release()
        self.assertIsNone(self.pointer.update(0.2, 0.2, 5000).click)
        self.assertIsNone(self.pointer.update(0.2, 0.2, 6000).click)
        self.assertIsNotNone(self.pointer.update(0.2, 0.2, 6200).click)


class TestScrollGesture(unittest.TestCase):
    """Test closed-fist drag scrolling."""

    def setUp(self):
        """Set up test configuration."""
        self.cfg = load_config()
        self.scroll = ScrollGesture(self.cfg.scroll)

    def test_entry_frame_does_not_scroll(self):
        self.assertIsNone(self.scroll.update(0.5))
        self.assertTrue(self.scroll.is_active)
        self.assertEqual(self.scroll.state.last_tracked_y, 0.5)
        self.assertEqual(self.scroll.state.velocity, 0.0)

    def test_jitter_below_threshold_never_scrolls(self):
        commands = []
        for y in [0.5, 0.501, 0.5, 0.502, 0.501, 0.503, 0.5, 0.499]:
            commands.append(self.scroll.update(y))
        self.assertEqual([c for c in commands if c is not None], [])

    def test_upward_fist_scrolls_positive_and_ramps(self):
        """Wrist moving up (y decreasing) scrolls with a positive, growing delta."""
        commands = [self.scroll.update(y) for y in (0.50, 0.46, 0.42, 0.38)]

        self.assertIsNone(commands[0])
        deltas = [c.dy_px for c in commands[1:]]
        self.assertTrue(all(isinstance(c, ScrollCommand) for c in commands[1:]))
        self.assertTrue(all(d > 0 for d in deltas))
        self.assertLess(deltas[0], deltas[1])
        self.assertLess(deltas[1], deltas[2])
        # velocity = 0 * 0.6 + (-0.04) * 0.4 on the first moving frame
        self.assertAlmostEqual(deltas[0], 0.016 * 1800)

    def test_downward_fist_scrolls_negative(self):
        commands = [self.scroll.update(y) for y in (0.30, 0.35, 0.40)]
        self.assertTrue(all(c.dy_px < 0 for c in commands[1:]))

    def test_slow_large_move_reanchors_without_scrolling(self):
        self.scroll.update(0.5)
        self.assertIsNotNone(self.scroll.update(0.52))
        # velocity 0.008 * 0.6 - 0.0225 * 0.4 = -0.0042: below threshold, delta above reset
        command = self.scroll.update(0.4975)
        self.assertIsNone(command)
        self.assertAlmostEqual(self.scroll.state.last_tracked_y, 0.4975)
        self.assertAlmostEqual(self.scroll.state.velocity, -0.0042)

    def test_release_discards_state(self):
        self.scroll.update(0.5)
        self.scroll.update(0.4)
        self.scroll.release()
        self.assertFalse(self.scroll.is_active)
        self.assertIsNone(self.scroll.state.last_tracked_y)
        self.assertEqual(self.scroll.state.velocity, 0.0)
        # next entry is an entry frame again
        self.assertIsNone(self.scroll.update(0.1))


if __name__ == '__main__':
    unittest.main()
