"""
Label reporter that logs classification results.
"""
import logging
from typing import Optional

from .types import GazeLabel, GestureLabel

logger = logging.getLogger(__name__)


class LogReporter:
    """Reporter that logs labels instead of acting on them."""

    def __init__(self):
        """Initialize the reporter."""
        self.gesture_count = 0
        self.gaze_count = 0
        self.last_gesture: Optional[GestureLabel] = None

    def report_gesture(self, label: Optional[GestureLabel]) -> None:
        """Log the gesture label; frames without a gesture are not logged."""
        self.last_gesture = label
        if label is None:
            return
        self.gesture_count += 1
        logger.info(f"Gesture: {label.value} (#{self.gesture_count})")

    def report_gaze(self, face_index: int, label: GazeLabel) -> None:
        """Log the gaze label of one face."""
        self.gaze_count += 1
        logger.info(f"Gaze: {label.value} (face {face_index})")

    def reset_counters(self) -> None:
        """Reset report counters for testing."""
        self.gesture_count = 0
        self.gaze_count = 0
        self.last_gesture = None
