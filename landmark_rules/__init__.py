"""
Landmark Rules

Rule-based classification of face mesh and hand landmarks: gaze direction
from iris position and hand gestures from finger geometry. Landmarks are
supplied per frame by MediaPipe (or any provider producing the same index
scheme).
"""

__version__ = "0.1.0"
__author__ = "Landmark Rules Team"

from .types import (
    Point2D, Point3D, DetectedHand, DetectedFace, GazeEstimate,
    GazeLabel, GestureLabel, LabelReporterProto,
)
from .config import load_config, Cfg, GazeThresholds, GestureConfig
from .geometry import (
    colinear_3d, bent_angle_3d, colinear_2d, lines_parallel_2d, distance_2d, angle_to_horizon,
)
from .landmarks import HandLM, FaceLM, iris_center, is_finger_straight, is_hand_open
from .gaze import estimate_gaze, detect_gaze_direction, detect_gaze_directions
from .gestures import GestureClassifier, detect_gesture
from .reporter import LogReporter

__all__ = [
    "Point2D",
    "Point3D",
    "DetectedHand",
    "DetectedFace",
    "GazeEstimate",
    "GazeLabel",
    "GestureLabel",
    "LabelReporterProto",
    "load_config",
    "Cfg",
    "GazeThresholds",
    "GestureConfig",
    "colinear_3d",
    "bent_angle_3d",
    "colinear_2d",
    "lines_parallel_2d",
    "distance_2d",
    "angle_to_horizon",
    "HandLM",
    "FaceLM",
    "iris_center",
    "is_finger_straight",
    "is_hand_open",
    "estimate_gaze",
    "detect_gaze_direction",
    "detect_gaze_directions",
    "GestureClassifier",
    "detect_gesture",
    "LogReporter",
]
