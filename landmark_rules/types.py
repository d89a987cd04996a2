"""
Type definitions for landmark rule evaluation.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Sequence, runtime_checkable


@dataclass(frozen=True)
class Point2D:
    """A landmark position in pixel space."""
    x: float
    y: float


@dataclass(frozen=True)
class Point3D:
    """A landmark position in model space (z is relative depth)."""
    x: float
    y: float
    z: float


class GazeLabel(str, Enum):
    CENTER = "CENTER"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    UP = "UP"
    DOWN = "DOWN"


class GestureLabel(str, Enum):
    MIDDLE_FINGER = "Middle Finger"
    POINTING = "Pointing"
    PALM_UPWARD = "Palm Upward"
    OPEN_PALM = "Open Palm"
    FINGER_INTERLOCKED = "Finger Interlocked"


LEFT = "Left"
RIGHT = "Right"


@dataclass(frozen=True)
class DetectedHand:
    """One hand detected in the current frame."""
    keypoints: Sequence[Point2D]  # length 21, pixel coordinates
    keypoints3d: Optional[Sequence[Point3D]] = None
    handedness: Optional[str] = None  # "Left" / "Right" (None if unknown)


@dataclass(frozen=True)
class DetectedFace:
    """One face mesh detected in the current frame."""
    keypoints: Sequence[Point2D]  # length 478 with iris refinement


@dataclass(frozen=True)
class GazeEstimate:
    """Relative pupil position within both eyes and the resulting label."""
    rel_x: float  # 0..1 between the eye corners
    rel_y: float  # 0..1 between the upper and lower lid
    label: GazeLabel


@runtime_checkable
class LabelReporterProto(Protocol):
    """Abstract protocol for consumers of per-frame classification labels."""

    def report_gesture(self, label: Optional[GestureLabel]) -> None:
        """Receive the gesture label for a frame (None if no gesture)."""
        ...

    def report_gaze(self, face_index: int, label: GazeLabel) -> None:
        """Receive the gaze label for one face of a frame."""
        ...
