"""
Landmark index scheme and per-entity feature extraction.
"""
import math
from typing import Optional, Sequence, Tuple

from .geometry import colinear_2d
from .types import Point2D

FINGER_STRAIGHT_TOLERANCE = 0.15
OPEN_HAND_MIN_FINGERS = 3
INTERLOCK_DISTANCE_PX = 40.0
INTERLOCK_MIN_JOINTS = 3
PALM_UPWARD_COLINEAR_TOLERANCE = 0.3


class HandLM:
    """MediaPipe Hands landmark indices (21 points)."""
    WRIST = 0
    THUMB_CMC, THUMB_MCP, THUMB_IP, THUMB_TIP = 1, 2, 3, 4
    INDEX_MCP, INDEX_PIP, INDEX_DIP, INDEX_TIP = 5, 6, 7, 8
    MIDDLE_MCP, MIDDLE_PIP, MIDDLE_DIP, MIDDLE_TIP = 9, 10, 11, 12
    RING_MCP, RING_PIP, RING_DIP, RING_TIP = 13, 14, 15, 16
    PINKY_MCP, PINKY_PIP, PINKY_DIP, PINKY_TIP = 17, 18, 19, 20


class FaceLM:
    """MediaPipe FaceMesh landmark indices (478 points with iris refinement)."""
    LEFT_IRIS = (468, 469, 470, 471, 472)  # center + 4 boundary points
    RIGHT_IRIS = (473, 474, 475, 476, 477)

    # Eye corners are listed image-left first: ratios along x run from the
    # first corner to the second.
    LEFT_EYE_CORNERS = (33, 133)
    LEFT_EYE_TOP, LEFT_EYE_BOTTOM = 159, 145
    RIGHT_EYE_CORNERS = (362, 263)
    RIGHT_EYE_TOP, RIGHT_EYE_BOTTOM = 386, 374


# (mcp, pip, dip, tip) for the four non-thumb fingers
FINGERS = {
    "index": (HandLM.INDEX_MCP, HandLM.INDEX_PIP, HandLM.INDEX_DIP, HandLM.INDEX_TIP),
    "middle": (HandLM.MIDDLE_MCP, HandLM.MIDDLE_PIP, HandLM.MIDDLE_DIP, HandLM.MIDDLE_TIP),
    "ring": (HandLM.RING_MCP, HandLM.RING_PIP, HandLM.RING_DIP, HandLM.RING_TIP),
    "pinky": (HandLM.PINKY_MCP, HandLM.PINKY_PIP, HandLM.PINKY_DIP, HandLM.PINKY_TIP),
}


def iris_center(iris_points: Sequence) -> Point2D:
    """
    Calculate the center of an iris cluster.

    Args:
        iris_points: Iris landmarks (5 for the MediaPipe scheme)

    Returns:
        Mean (x, y) of the points; (nan, nan) for an empty cluster
    """
    if not iris_points:
        return Point2D(math.nan, math.nan)

    x_sum = sum(p.x for p in iris_points)
    y_sum = sum(p.y for p in iris_points)

    return Point2D(x_sum / len(iris_points), y_sum / len(iris_points))


def is_finger_straight(hand: Sequence, mcp_idx: int, pip_idx: int, dip_idx: int, tip_idx: int,
                       tolerance: float = FINGER_STRAIGHT_TOLERANCE) -> bool:
    """
    Check if a finger is straight in the image plane.

    Both (MCP, PIP, TIP) and (PIP, DIP, TIP) must be colinear.

    Args:
        hand: List of 21 hand landmarks
        mcp_idx, pip_idx, dip_idx, tip_idx: Joint indices of the finger
        tolerance: Colinearity tolerance for both joint triples

    Returns:
        True if the finger is straight
    """
    mcp, pip, dip, tip = hand[mcp_idx], hand[pip_idx], hand[dip_idx], hand[tip_idx]
    return colinear_2d(mcp, pip, tip, tolerance) and colinear_2d(pip, dip, tip, tolerance)


def straight_finger_count(hand: Sequence, tolerance: float = FINGER_STRAIGHT_TOLERANCE) -> int:
    """Count straight fingers among index, middle, ring and pinky."""
    return sum(
        1 for joints in FINGERS.values()
        if is_finger_straight(hand, *joints, tolerance=tolerance)
    )


def is_hand_open(hand: Optional[Sequence], tolerance: float = FINGER_STRAIGHT_TOLERANCE,
                 min_straight: int = OPEN_HAND_MIN_FINGERS) -> bool:
    """
    Check if the hand is open (most non-thumb fingers straight).

    Args:
        hand: List of 21 hand landmarks, or None if the hand is absent
        tolerance: Colinearity tolerance used for each finger
        min_straight: Minimum number of straight fingers

    Returns:
        True if at least min_straight of the 4 fingers are straight
    """
    if not hand:
        return False
    return straight_finger_count(hand, tolerance) >= min_straight


def eye_points(face: Sequence, corners: Tuple[int, int], top: int, bottom: int):
    """Boundary landmarks of one eye as (corner_a, corner_b, top, bottom)."""
    return face[corners[0]], face[corners[1]], face[top], face[bottom]
