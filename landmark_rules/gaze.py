"""
Gaze direction from face mesh iris landmarks.
"""
import logging
import math
from typing import List, Optional, Sequence

from .config import GazeThresholds
from .landmarks import FaceLM, iris_center, eye_points
from .types import DetectedFace, GazeEstimate, GazeLabel

logger = logging.getLogger(__name__)


def _ratio(value: float, start: float, end: float) -> float:
    """Position of value between start and end (nan for a zero-length span)."""
    span = end - start
    if span == 0:
        return math.nan
    return (value - start) / span


def relative_pupil_position(keypoints: Sequence) -> tuple:
    """
    Compute where the pupils sit inside the eyes.

    The horizontal ratio is relative to each eye's own corners, which makes it
    independent of head position and scale but not of head rotation.

    Args:
        keypoints: List of 478 face landmarks

    Returns:
        (rel_x, rel_y) averaged over both eyes
    """
    left_pupil = iris_center([keypoints[i] for i in FaceLM.LEFT_IRIS])
    right_pupil = iris_center([keypoints[i] for i in FaceLM.RIGHT_IRIS])

    l_a, l_b, l_top, l_bottom = eye_points(
        keypoints, FaceLM.LEFT_EYE_CORNERS, FaceLM.LEFT_EYE_TOP, FaceLM.LEFT_EYE_BOTTOM
    )
    r_a, r_b, r_top, r_bottom = eye_points(
        keypoints, FaceLM.RIGHT_EYE_CORNERS, FaceLM.RIGHT_EYE_TOP, FaceLM.RIGHT_EYE_BOTTOM
    )

    rel_x = (
        _ratio(left_pupil.x, l_a.x, l_b.x) + _ratio(right_pupil.x, r_a.x, r_b.x)
    ) / 2
    rel_y = (
        _ratio(left_pupil.y, l_top.y, l_bottom.y) + _ratio(right_pupil.y, r_top.y, r_bottom.y)
    ) / 2
    return rel_x, rel_y


def classify_gaze(rel_x: float, rel_y: float,
                  thresholds: Optional[GazeThresholds] = None) -> GazeLabel:
    """
    Map a relative pupil position to a gaze label.

    Horizontal extremes are checked first, so UP and DOWN are only reachable
    while rel_x is mid-range. NaN ratios fail every test and give CENTER.
    """
    t = thresholds or GazeThresholds()
    if rel_x < t.right_below:
        return GazeLabel.RIGHT
    if rel_x > t.left_above:
        return GazeLabel.LEFT
    if 0 < rel_y < t.up_below:
        return GazeLabel.UP
    if rel_y < 0:
        return GazeLabel.DOWN
    return GazeLabel.CENTER


def estimate_gaze(face: DetectedFace, thresholds: Optional[GazeThresholds] = None) -> GazeEstimate:
    """Relative pupil position and gaze label for one face."""
    rel_x, rel_y = relative_pupil_position(face.keypoints)
    label = classify_gaze(rel_x, rel_y, thresholds)
    logger.debug(f"Gaze {label.value}: rel_x={rel_x:.3f} rel_y={rel_y:.3f}")
    return GazeEstimate(rel_x=rel_x, rel_y=rel_y, label=label)


def detect_gaze_direction(face: DetectedFace, thresholds: Optional[GazeThresholds] = None) -> GazeLabel:
    """Gaze label for one face."""
    return estimate_gaze(face, thresholds).label


def detect_gaze_directions(faces: Sequence[DetectedFace],
                           thresholds: Optional[GazeThresholds] = None) -> List[GazeLabel]:
    """Gaze label for every face of a frame, in frame order."""
    return [detect_gaze_direction(face, thresholds) for face in faces]
