"""
Tests for hand identity assignment.
"""
import unittest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from gesture_cursor.tracking import HandIdentityTracker
from gesture_cursor.types import HandObservation, Keypoint


def hand_at(x, y):
    return HandObservation(keypoints=[Keypoint(x, y)] * 21)


class TestNearestPolicy(unittest.TestCase):

    def setUp(self):
        self.tracker = HandIdentityTracker(policy="nearest", max_match_distance=0.25, max_missing_ms=500)

    def test_new_hands_get_fresh_ids(self):
        self.assertEqual(self.tracker.assign([hand_at(0.2, 0.5), hand_at(0.8, 0.5)], 0), [0, 1])
        self.assertEqual(self.tracker.active_ids, [0, 1])

    def test_ids_follow_positions(self):
        self.tracker.assign([hand_at(0.2, 0.5), hand_at(0.8, 0.5)], 0)
        ids = self.tracker.assign([hand_at(0.78, 0.52), hand_at(0.21, 0.49)], 16)
        self.assertEqual(ids, [1, 0])

    def test_closest_pair_wins(self):
        self.tracker.assign([hand_at(0.5, 0.5)], 0)
        # both candidates are in range, the nearer one keeps the identity
        ids = self.tracker.assign([hand_at(0.6, 0.5), hand_at(0.52, 0.5)], 16)
        self.assertEqual(ids, [1, 0])

    def test_out_of_range_hand_is_new(self):
        self.tracker.assign([hand_at(0.1, 0.1)], 0)
        self.assertEqual(self.tracker.assign([hand_at(0.9, 0.9)], 16), [1])

    def test_prune_expired(self):
        self.tracker.assign([hand_at(0.2, 0.5), hand_at(0.8, 0.5)], 0)
        self.tracker.assign([hand_at(0.2, 0.5)], 300)

        self.assertEqual(self.tracker.prune(400), [])
        self.assertEqual(self.tracker.prune(600), [1])
        self.assertEqual(self.tracker.active_ids, [0])

    def test_clear_restarts_numbering(self):
        self.tracker.assign([hand_at(0.2, 0.5)], 0)
        self.tracker.clear()
        self.assertEqual(self.tracker.active_ids, [])
        self.assertEqual(self.tracker.assign([hand_at(0.9, 0.9)], 16), [0])


class TestIndexPolicy(unittest.TestCase):

    def test_position_in_list(self):
        tracker = HandIdentityTracker(policy="index")
        tracker.assign([hand_at(0.2, 0.5), hand_at(0.8, 0.5)], 0)
        self.assertEqual(tracker.assign([hand_at(0.8, 0.5), hand_at(0.2, 0.5)], 16), [0, 1])
        self.assertEqual(tracker.assign([hand_at(0.5, 0.5)], 32), [0])


if __name__ == '__main__':
    unittest.main()
