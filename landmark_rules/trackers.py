"""
Keypoint providers backed by MediaPipe Hands and FaceMesh.

These only convert MediaPipe results into DetectedHand / DetectedFace
records; all classification happens in gestures.py and gaze.py.
"""
import cv2
import numpy as np
from typing import List, Optional, Sequence, Tuple

from .types import DetectedFace, DetectedHand, Point2D, Point3D, LEFT, RIGHT


def _to_pixels(landmarks, frame_wh: Tuple[int, int]) -> List[Point2D]:
    width, height = frame_wh
    return [Point2D(lm.x * width, lm.y * height) for lm in landmarks]


def _handedness_label(handedness, invert: bool) -> Optional[str]:
    """Extract handedness label, optionally swapping left/right."""
    try:
        label = handedness.classification[0].label
    except (AttributeError, IndexError):
        return None

    if invert:
        return {LEFT: RIGHT, RIGHT: LEFT}.get(label, label)
    return label


def _mediapipe_solutions():
    """The mp.solutions namespace (some MediaPipe builds ship only the Tasks API)."""
    import mediapipe as mp  # type: ignore

    if not hasattr(mp, "solutions"):
        raise RuntimeError("This MediaPipe build does not include mp.solutions (Hands / FaceMesh)")
    return mp.solutions


def hands_from_results(results, frame_wh: Tuple[int, int], invert_handedness: bool = False) -> List[DetectedHand]:
    """
    Convert a MediaPipe Hands result into detected hands.

    Args:
        results: Output of mp.solutions.hands.Hands.process()
        frame_wh: Frame dimensions (width, height)
        invert_handedness: Swap Left/Right labels (for non-mirrored input)

    Returns:
        One DetectedHand per detected hand, in MediaPipe's order
    """
    if not results.multi_hand_landmarks:
        return []

    world = getattr(results, "multi_hand_world_landmarks", None) or []
    handedness = getattr(results, "multi_handedness", None) or []

    hands = []
    for i, hand_landmarks in enumerate(results.multi_hand_landmarks):
        keypoints3d = None
        if i < len(world):
            keypoints3d = [Point3D(lm.x, lm.y, lm.z) for lm in world[i].landmark]
        label = _handedness_label(handedness[i], invert_handedness) if i < len(handedness) else None
        hands.append(DetectedHand(
            keypoints=_to_pixels(hand_landmarks.landmark, frame_wh),
            keypoints3d=keypoints3d,
            handedness=label,
        ))
    return hands


def faces_from_results(results, frame_wh: Tuple[int, int]) -> List[DetectedFace]:
    """Convert a MediaPipe FaceMesh result into detected faces."""
    if not results.multi_face_landmarks:
        return []
    return [
        DetectedFace(keypoints=_to_pixels(face_landmarks.landmark, frame_wh))
        for face_landmarks in results.multi_face_landmarks
    ]


class HandsTracker:
    """Hand landmark provider using MediaPipe Hands."""

    def __init__(self, max_num_hands: int = 2, min_detection_conf: float = 0.6,
                 min_tracking_conf: float = 0.6, invert_handedness: bool = False):
        """
        Initialize the hands tracker.

        Args:
            max_num_hands: Maximum number of hands to detect
            min_detection_conf: Minimum confidence for hand detection
            min_tracking_conf: Minimum confidence for hand tracking
            invert_handedness: Swap Left/Right labels
        """
        self.hands = _mediapipe_solutions().hands.Hands(
            static_image_mode=False,
            max_num_hands=max_num_hands,
            min_detection_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf
        )
        self.invert_handedness = invert_handedness

    def process(self, frame_bgr: np.ndarray) -> List[DetectedHand]:
        """
        Process a frame and return the detected hands.

        Args:
            frame_bgr: Input frame in BGR format

        Returns:
            Detected hands in pixel coordinates (empty if none)
        """
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self.hands.process(frame_rgb)
        height, width = frame_bgr.shape[:2]
        return hands_from_results(results, (width, height), self.invert_handedness)

    def close(self) -> None:
        self.hands.close()


class FaceMeshTracker:
    """Face landmark provider using MediaPipe FaceMesh with iris refinement."""

    def __init__(self, max_num_faces: int = 1, refine_landmarks: bool = True,
                 min_detection_conf: float = 0.6, min_tracking_conf: float = 0.6):
        self.face_mesh = _mediapipe_solutions().face_mesh.FaceMesh(
            static_image_mode=False,
            max_num_faces=max_num_faces,
            refine_landmarks=refine_landmarks,
            min_detection_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf
        )

    def process(self, frame_bgr: np.ndarray) -> List[DetectedFace]:
        """Process a frame and return the detected faces."""
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self.face_mesh.process(frame_rgb)
        height, width = frame_bgr.shape[:2]
        return faces_from_results(results, (width, height))

    def close(self) -> None:
        self.face_mesh.close()


def draw_keypoints(frame: np.ndarray, keypoints: Sequence[Point2D], radius: int = 2,
                   color: Tuple[int, int, int] = (0, 255, 0)) -> np.ndarray:
    """
    Draw landmark dots on the frame.

    Args:
        frame: Input frame
        keypoints: Landmarks in pixel coordinates
        radius: Dot radius in pixels
        color: BGR colour

    Returns:
        Frame with landmarks drawn
    """
    for p in keypoints:
        cv2.circle(frame, (int(p.x), int(p.y)), radius, color, -1)
    return frame
