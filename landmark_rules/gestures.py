"""
Gesture rules that turn hand landmark configurations into labels.

Two-hand rules are tried first when the frame holds both a left and a right
hand; otherwise (or if none fires) single-hand rules are tried per hand in
frame order. The first rule to fire decides the label.
"""
import logging
from functools import partial
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .config import GestureConfig
from .geometry import (
    angle_to_horizon, bent_angle_3d, colinear_3d, distance_2d, lines_parallel_2d,
    BENT_3D_TOLERANCE, COLINEAR_3D_TOLERANCE, HORIZON_THRESHOLD_DEG, PARALLEL_TOLERANCE_DEG,
)
from .landmarks import (
    HandLM, is_hand_open, FINGER_STRAIGHT_TOLERANCE, INTERLOCK_DISTANCE_PX, INTERLOCK_MIN_JOINTS,
    OPEN_HAND_MIN_FINGERS, PALM_UPWARD_COLINEAR_TOLERANCE,
)
from .types import DetectedHand, GestureLabel, LEFT, RIGHT

logger = logging.getLogger(__name__)

# Thumb IP and the PIP joint of each other finger
INTERLOCK_JOINTS = (HandLM.THUMB_IP, HandLM.INDEX_PIP, HandLM.MIDDLE_PIP, HandLM.RING_PIP, HandLM.PINKY_PIP)

SingleHandRule = Callable[[DetectedHand], Optional[GestureLabel]]
TwoHandRule = Callable[[Sequence, Sequence], Optional[GestureLabel]]


def _points_3d(hand: DetectedHand) -> Sequence:
    """3D landmarks when available, else the 2D landmarks (z taken as 0)."""
    return hand.keypoints3d if hand.keypoints3d else hand.keypoints


# =============================================================================
# SINGLE-HAND RULES
# =============================================================================

def check_middle_finger(hand: DetectedHand) -> Optional[GestureLabel]:
    """Middle finger extended upward, index, ring and pinky curled (image y grows downward)."""
    lm = hand.keypoints
    middle_up = lm[HandLM.MIDDLE_TIP].y < lm[HandLM.MIDDLE_PIP].y
    index_curled = lm[HandLM.INDEX_TIP].y > lm[HandLM.INDEX_PIP].y
    ring_curled = lm[HandLM.RING_TIP].y > lm[HandLM.RING_PIP].y
    pinky_curled = lm[HandLM.PINKY_TIP].y > lm[HandLM.PINKY_PIP].y

    if middle_up and index_curled and ring_curled and pinky_curled:
        return GestureLabel.MIDDLE_FINGER
    return None


def check_pointing(hand: DetectedHand, bent_tolerance: float = BENT_3D_TOLERANCE,
                   colinear_tolerance: float = COLINEAR_3D_TOLERANCE) -> Optional[GestureLabel]:
    """Middle and ring fingers bent, thumb or index roughly straight."""
    lm = _points_3d(hand)

    middle_ring_bent = (
        bent_angle_3d(lm[HandLM.MIDDLE_TIP], lm[HandLM.MIDDLE_DIP], lm[HandLM.MIDDLE_PIP], bent_tolerance)
        and bent_angle_3d(lm[HandLM.RING_TIP], lm[HandLM.RING_DIP], lm[HandLM.RING_PIP], bent_tolerance)
    )
    thumb_or_index_straight = (
        colinear_3d(lm[HandLM.THUMB_TIP], lm[HandLM.THUMB_IP], lm[HandLM.THUMB_MCP], colinear_tolerance)
        or colinear_3d(lm[HandLM.INDEX_TIP], lm[HandLM.INDEX_DIP], lm[HandLM.INDEX_PIP], colinear_tolerance)
    )

    if middle_ring_bent and thumb_or_index_straight:
        return GestureLabel.POINTING
    return None


def check_palm_upward(hand: DetectedHand, horizon_deg: float = HORIZON_THRESHOLD_DEG,
                      colinear_tolerance: float = PALM_UPWARD_COLINEAR_TOLERANCE) -> Optional[GestureLabel]:
    """Knuckles level with the wrist, index and middle fingers straight."""
    lm = hand.keypoints
    wrist = lm[HandLM.WRIST]
    knuckles_level = all(
        angle_to_horizon(wrist, lm[idx], horizon_deg)
        for idx in (HandLM.INDEX_MCP, HandLM.MIDDLE_MCP, HandLM.PINKY_MCP)
    )
    if not knuckles_level:
        return None

    lm3 = _points_3d(hand)
    fingers_straight = (
        colinear_3d(lm3[HandLM.INDEX_TIP], lm3[HandLM.INDEX_DIP], lm3[HandLM.INDEX_PIP], colinear_tolerance)
        and colinear_3d(lm3[HandLM.MIDDLE_TIP], lm3[HandLM.MIDDLE_DIP], lm3[HandLM.MIDDLE_PIP], colinear_tolerance)
    )
    if fingers_straight:
        return GestureLabel.PALM_UPWARD
    return None


# =============================================================================
# TWO-HAND RULES
# =============================================================================

def check_finger_interlocked(left: Optional[Sequence], right: Optional[Sequence],
                             threshold_px: float = INTERLOCK_DISTANCE_PX,
                             min_joints: int = INTERLOCK_MIN_JOINTS) -> Optional[GestureLabel]:
    """Enough matching left/right finger joints lie close together."""
    if not left or not right:
        return None

    close = sum(
        1 for idx in INTERLOCK_JOINTS
        if distance_2d(left[idx], right[idx]) < threshold_px
    )
    if close >= min_joints:
        return GestureLabel.FINGER_INTERLOCKED
    return None


def check_open_palm(left: Optional[Sequence], right: Optional[Sequence],
                    tolerance_deg: float = PARALLEL_TOLERANCE_DEG,
                    finger_tolerance: float = FINGER_STRAIGHT_TOLERANCE,
                    min_straight: int = OPEN_HAND_MIN_FINGERS) -> Optional[GestureLabel]:
    """Both hands open with their wrist -> middle fingertip lines parallel."""
    if not is_hand_open(left, finger_tolerance, min_straight):
        return None
    if not is_hand_open(right, finger_tolerance, min_straight):
        return None

    if lines_parallel_2d(left[HandLM.WRIST], left[HandLM.MIDDLE_TIP],
                         right[HandLM.WRIST], right[HandLM.MIDDLE_TIP], tolerance_deg):
        return GestureLabel.OPEN_PALM
    return None


# =============================================================================
# RULE ORDER
# =============================================================================

def single_hand_rules(cfg: GestureConfig) -> Dict[str, SingleHandRule]:
    """All single-hand rules by configuration name, bound to cfg thresholds."""
    return {
        "middle_finger": check_middle_finger,
        "pointing": partial(
            check_pointing,
            bent_tolerance=cfg.pointing_bent_tolerance,
            colinear_tolerance=cfg.pointing_colinear_tolerance,
        ),
        "palm_upward": partial(
            check_palm_upward,
            horizon_deg=cfg.palm_upward_horizon_deg,
            colinear_tolerance=cfg.palm_upward_colinear_tolerance,
        ),
    }


def two_hand_rules(cfg: GestureConfig) -> Dict[str, TwoHandRule]:
    """All two-hand rules by configuration name, bound to cfg thresholds."""
    return {
        "finger_interlocked": partial(
            check_finger_interlocked,
            threshold_px=cfg.interlock_distance_px,
            min_joints=cfg.interlock_min_joints,
        ),
        "open_palm": partial(
            check_open_palm,
            tolerance_deg=cfg.palm_parallel_tolerance_deg,
            finger_tolerance=cfg.finger_straight_tolerance,
            min_straight=cfg.open_hand_min_fingers,
        ),
    }


def _select(available: Dict[str, Callable], names: Sequence[str], kind: str) -> List[Tuple[str, Callable]]:
    unknown = [name for name in names if name not in available]
    if unknown:
        raise ValueError(f"Unknown {kind} rules: {unknown} (available: {sorted(available)})")
    return [(name, available[name]) for name in names]


def find_left_right(hands: Sequence[DetectedHand]) -> Tuple[Optional[DetectedHand], Optional[DetectedHand]]:
    """First hand tagged Left and first hand tagged Right, in frame order."""
    left = next((h for h in hands if h.handedness == LEFT), None)
    right = next((h for h in hands if h.handedness == RIGHT), None)
    return left, right


class GestureClassifier:
    """
    Ordered rule evaluator for one frame of detected hands.

    Holds only the active rule lists; every call to classify() depends on
    its argument alone.
    """

    def __init__(self, cfg: Optional[GestureConfig] = None):
        """
        Build the active rule lists.

        Raises:
            ValueError: if cfg names a rule that does not exist
        """
        self.cfg = cfg or GestureConfig()
        self.two_hand = _select(two_hand_rules(self.cfg), self.cfg.two_hand_rules, "two-hand")
        self.single_hand = _select(single_hand_rules(self.cfg), self.cfg.single_hand_rules, "single-hand")

    def classify(self, hands: Optional[Sequence[DetectedHand]]) -> Optional[GestureLabel]:
        """
        Classify a frame of detected hands.

        Args:
            hands: Detected hands in frame order (None or empty if no hands)

        Returns:
            The first label whose rule fires, or None
        """
        if not hands:
            return None

        if len(hands) >= 2:
            left, right = find_left_right(hands)
            if left is not None and right is not None and left.keypoints and right.keypoints:
                for name, rule in self.two_hand:
                    label = rule(left.keypoints, right.keypoints)
                    if label is not None:
                        logger.debug(f"Two-hand rule {name} fired: {label.value}")
                        return label

        for i, hand in enumerate(hands):
            if not hand.keypoints:
                continue
            for name, rule in self.single_hand:
                label = rule(hand)
                if label is not None:
                    logger.debug(f"Single-hand rule {name} fired on hand #{i}: {label.value}")
                    return label

        return None


def detect_gesture(hands: Optional[Sequence[DetectedHand]],
                   cfg: Optional[GestureConfig] = None) -> Optional[GestureLabel]:
    """Classify a frame of detected hands with the default (or given) rule order."""
    return GestureClassifier(cfg).classify(hands)
