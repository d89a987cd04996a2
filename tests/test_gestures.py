"""
Test cases for gesture rules with synthetic hand landmarks.
"""
import unittest
import sys
from pathlib import Path
from typing import Iterable, List, Optional

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from landmark_rules.config import GestureConfig
from landmark_rules.gestures import (
    GestureClassifier, check_finger_interlocked, check_middle_finger, check_open_palm,
    check_palm_upward, check_pointing, detect_gesture, find_left_right,
)
from landmark_rules.landmarks import FINGERS, HandLM
from landmark_rules.types import DetectedHand, GestureLabel, Point2D, Point3D

ALL_FINGERS = ("index", "middle", "ring", "pinky")


def make_keypoints(straight: Iterable[str] = ALL_FINGERS, dx: float = 0.0, dy: float = 0.0,
                   thumb_up: bool = False) -> List[Point2D]:
    """
    Create 21 hand landmarks in pixel space (y grows downward).

    Fingers listed in `straight` point straight up; the others curl so that
    the tip ends below the PIP joint.
    """
    pts = [Point2D(0.0, 0.0)] * 21
    pts[HandLM.WRIST] = Point2D(190.0, 400.0)
    for offset, name in enumerate(ALL_FINGERS):
        x = 145.0 + 30.0 * offset
        mcp, pip, dip, tip = FINGERS[name]
        pts[mcp] = Point2D(x, 300.0)
        pts[pip] = Point2D(x, 250.0)
        if name in straight:
            pts[dip] = Point2D(x, 220.0)
            pts[tip] = Point2D(x, 190.0)
        else:
            pts[dip] = Point2D(x + 10.0, 265.0)
            pts[tip] = Point2D(x + 5.0, 275.0)

    if thumb_up:
        thumb = [(130.0, 380.0), (120.0, 340.0), (115.0, 300.0), (110.0, 260.0)]
    else:
        thumb = [(140.0, 380.0), (110.0, 360.0), (90.0, 360.0), (80.0, 370.0)]
    for idx, (x, y) in zip((HandLM.THUMB_CMC, HandLM.THUMB_MCP, HandLM.THUMB_IP, HandLM.THUMB_TIP), thumb):
        pts[idx] = Point2D(x, y)

    return [Point2D(p.x + dx, p.y + dy) for p in pts]


def make_hand(straight: Iterable[str] = ALL_FINGERS, handedness: Optional[str] = None,
              dx: float = 0.0, thumb_up: bool = False) -> DetectedHand:
    return DetectedHand(
        keypoints=make_keypoints(straight, dx=dx, thumb_up=thumb_up),
        handedness=handedness,
    )


MIDDLE_ONLY = ("middle",)


class TestMiddleFinger(unittest.TestCase):
    """Test the middle finger rule."""

    def test_detected(self):
        self.assertEqual(check_middle_finger(make_hand(MIDDLE_ONLY)), GestureLabel.MIDDLE_FINGER)

    def test_thumb_position_does_not_matter(self):
        for thumb_up in (False, True):
            hand = make_hand(MIDDLE_ONLY, thumb_up=thumb_up)
            self.assertEqual(detect_gesture([hand]), GestureLabel.MIDDLE_FINGER)

    def test_other_finger_extended(self):
        self.assertIsNone(check_middle_finger(make_hand(("middle", "index"))))
        self.assertIsNone(check_middle_finger(make_hand(("middle", "pinky"))))

    def test_middle_curled(self):
        self.assertIsNone(check_middle_finger(make_hand(())))

    def test_label_value(self):
        self.assertEqual(detect_gesture([make_hand(MIDDLE_ONLY)]), "Middle Finger")


class TestTwoHandRules(unittest.TestCase):
    """Test finger interlock and open palm rules."""

    def test_open_palm_with_parallel_hands(self):
        hands = [make_hand(handedness="Left"), make_hand(handedness="Right", dx=300.0)]
        self.assertEqual(detect_gesture(hands), GestureLabel.OPEN_PALM)

    def test_open_palm_needs_open_hands(self):
        # Two straight fingers per hand; wrists still exactly parallel
        hands = [
            make_hand(("index", "ring"), handedness="Left"),
            make_hand(("index", "ring"), handedness="Right", dx=300.0),
        ]
        self.assertIsNone(detect_gesture(hands))

    def test_open_palm_needs_parallel_hands(self):
        left = make_keypoints()
        # Same open hand rotated a quarter turn
        right = [Point2D(600.0 - p.y, 100.0 + p.x) for p in make_keypoints()]
        self.assertIsNone(check_open_palm(left, right))

    def test_open_palm_absent_hand(self):
        self.assertIsNone(check_open_palm(make_keypoints(), None))
        self.assertIsNone(check_open_palm(None, make_keypoints()))

    def test_finger_interlocked(self):
        left = make_keypoints(())
        right = make_keypoints((), dx=20.0)
        self.assertEqual(check_finger_interlocked(left, right), GestureLabel.FINGER_INTERLOCKED)

    def test_finger_interlocked_needs_three_joints(self):
        left = make_keypoints(())
        right = make_keypoints((), dx=300.0)
        # Move only two joints next to their left counterparts
        for idx in (HandLM.THUMB_IP, HandLM.INDEX_PIP):
            right[idx] = left[idx]
        self.assertIsNone(check_finger_interlocked(left, right))

        right[HandLM.MIDDLE_PIP] = Point2D(left[HandLM.MIDDLE_PIP].x + 39.0, left[HandLM.MIDDLE_PIP].y)
        self.assertEqual(check_finger_interlocked(left, right), GestureLabel.FINGER_INTERLOCKED)

    def test_finger_interlocked_distance_is_strict(self):
        left = make_keypoints(())
        right = make_keypoints((), dx=40.0)
        self.assertIsNone(check_finger_interlocked(left, right))

    def test_finger_interlocked_absent_hand(self):
        self.assertIsNone(check_finger_interlocked(None, make_keypoints()))

    def test_interlocked_takes_priority_over_open_palm(self):
        left, right = make_keypoints(), make_keypoints(dx=10.0)
        self.assertEqual(check_open_palm(left, right), GestureLabel.OPEN_PALM)

        hands = [DetectedHand(left, handedness="Left"), DetectedHand(right, handedness="Right")]
        self.assertEqual(detect_gesture(hands), GestureLabel.FINGER_INTERLOCKED)

    def test_two_hand_rules_need_left_and_right(self):
        hands = [make_hand(handedness="Left"), make_hand(handedness="Left", dx=300.0)]
        self.assertIsNone(detect_gesture(hands))

        hands = [make_hand(handedness=None), make_hand(handedness="Right", dx=300.0)]
        self.assertIsNone(detect_gesture(hands))

    def test_single_hand_rules_follow_two_hand_rules(self):
        hands = [
            make_hand((), handedness="Left"),
            make_hand(MIDDLE_ONLY, handedness="Right", dx=300.0),
        ]
        self.assertEqual(detect_gesture(hands), GestureLabel.MIDDLE_FINGER)

    def test_find_left_right_takes_first_of_each(self):
        a = make_hand(handedness="Right")
        b = make_hand(handedness="Left")
        c = make_hand(handedness="Left", dx=300.0)
        self.assertEqual(find_left_right([a, b, c]), (b, a))


class TestOptionalRules(unittest.TestCase):
    """Test the rules that are available but not active by default."""

    def make_pointing_hand(self, with_3d: bool) -> DetectedHand:
        keypoints = make_keypoints(("index",))
        keypoints3d = None
        if with_3d:
            keypoints3d = [Point3D(p.x / 1000.0, p.y / 1000.0, 0.0) for p in keypoints]
        return DetectedHand(keypoints=keypoints, keypoints3d=keypoints3d, handedness="Right")

    def make_palm_upward_hand(self) -> DetectedHand:
        pts = [Point2D(0.0, 0.0)] * 21
        pts[HandLM.WRIST] = Point2D(100.0, 300.0)
        for name, y in (("index", 290.0), ("middle", 300.0), ("ring", 310.0), ("pinky", 320.0)):
            mcp, pip, dip, tip = FINGERS[name]
            pts[mcp] = Point2D(200.0, y)
            pts[pip] = Point2D(240.0, y)
            pts[dip] = Point2D(260.0, y)
            pts[tip] = Point2D(280.0, y)
        return DetectedHand(keypoints=pts)

    def test_pointing(self):
        self.assertEqual(check_pointing(self.make_pointing_hand(with_3d=True)), GestureLabel.POINTING)

    def test_pointing_without_3d_landmarks(self):
        self.assertEqual(check_pointing(self.make_pointing_hand(with_3d=False)), GestureLabel.POINTING)

    def test_pointing_needs_bent_fingers(self):
        self.assertIsNone(check_pointing(make_hand(("index", "middle", "ring"))))

    def test_palm_upward(self):
        self.assertEqual(check_palm_upward(self.make_palm_upward_hand()), GestureLabel.PALM_UPWARD)

    def test_palm_upward_needs_level_knuckles(self):
        # Fingers pointing up the image: wrist -> MCP lines are near vertical
        self.assertIsNone(check_palm_upward(make_hand()))

    def test_disabled_by_default(self):
        self.assertIsNone(detect_gesture([self.make_pointing_hand(with_3d=True)]))
        self.assertIsNone(detect_gesture([self.make_palm_upward_hand()]))

    def test_enabled_by_configuration(self):
        cfg = GestureConfig(single_hand_rules=("middle_finger", "pointing", "palm_upward"))
        classifier = GestureClassifier(cfg)
        self.assertEqual(classifier.classify([self.make_pointing_hand(with_3d=True)]), GestureLabel.POINTING)
        self.assertEqual(classifier.classify([self.make_palm_upward_hand()]), GestureLabel.PALM_UPWARD)
        self.assertEqual(classifier.classify([make_hand(MIDDLE_ONLY)]), GestureLabel.MIDDLE_FINGER)

    def test_rule_order_is_configurable(self):
        cfg = GestureConfig(two_hand_rules=("open_palm", "finger_interlocked"))
        hands = [make_hand(handedness="Left"), make_hand(handedness="Right", dx=10.0)]
        self.assertEqual(GestureClassifier(cfg).classify(hands), GestureLabel.OPEN_PALM)

    def test_unknown_rule_name(self):
        with self.assertRaises(ValueError):
            GestureClassifier(GestureConfig(single_hand_rules=("thumbs_up",)))
        with self.assertRaises(ValueError):
            GestureClassifier(GestureConfig(two_hand_rules=("clap",)))


class TestGestureClassifier(unittest.TestCase):
    """Test frame-level behaviour of the classifier."""

    def setUp(self):
        """Set up a default classifier."""
        self.classifier = GestureClassifier()

    def test_no_hands(self):
        self.assertIsNone(self.classifier.classify([]))
        self.assertIsNone(self.classifier.classify(None))

    def test_no_gesture(self):
        self.assertIsNone(self.classifier.classify([make_hand()]))

    def test_hand_without_keypoints_is_skipped(self):
        hands = [DetectedHand(keypoints=[]), make_hand(MIDDLE_ONLY)]
        self.assertEqual(self.classifier.classify(hands), GestureLabel.MIDDLE_FINGER)

    def test_frames_are_independent(self):
        middle = [make_hand(MIDDLE_ONLY)]
        self.assertEqual(self.classifier.classify(middle), GestureLabel.MIDDLE_FINGER)
        self.assertIsNone(self.classifier.classify([make_hand()]))
        self.assertEqual(self.classifier.classify(middle), GestureLabel.MIDDLE_FINGER)

    def test_short_landmark_set_is_caller_error(self):
        with self.assertRaises(IndexError):
            self.classifier.classify([DetectedHand(keypoints=[Point2D(0, 0)] * 5)])


if __name__ == '__main__':
    unittest.main()
