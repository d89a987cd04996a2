"""
Webcam demo for landmark rule evaluation.
"""
import cv2
import logging
import sys
from typing import Optional

from .config import Cfg, load_config
from .gaze import estimate_gaze
from .gestures import GestureClassifier
from .reporter import LogReporter
from .trackers import FaceMeshTracker, HandsTracker, draw_keypoints

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


class LandmarkRulesApp:
    """Main application class for the hands or face pipeline."""

    def __init__(self, config: Optional[Cfg] = None, face_mode: bool = False):
        """Initialize the application with configuration."""
        self.config = config if config is not None else load_config()
        self.face_mode = face_mode
        self.reporter = LogReporter()

        mp_cfg = self.config.mediapipe
        if face_mode:
            self.tracker = FaceMeshTracker(
                max_num_faces=mp_cfg.max_num_faces,
                refine_landmarks=mp_cfg.refine_landmarks,
                min_detection_conf=mp_cfg.min_detection_confidence,
                min_tracking_conf=mp_cfg.min_tracking_confidence
            )
        else:
            self.tracker = HandsTracker(
                max_num_hands=mp_cfg.max_num_hands,
                min_detection_conf=mp_cfg.min_detection_confidence,
                min_tracking_conf=mp_cfg.min_tracking_confidence,
                invert_handedness=mp_cfg.invert_handedness
            )
        self.classifier = GestureClassifier(self.config.gestures)

        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)

        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")

    def _process_hands(self, frame) -> str:
        hands = self.tracker.process(frame)
        if self.config.display.show_landmarks:
            for hand in hands:
                draw_keypoints(frame, hand.keypoints)

        gesture = self.classifier.classify(hands)
        self.reporter.report_gesture(gesture)

        if not hands:
            return "No hand detected"
        return f"Hands: {len(hands)} | Gesture: {gesture.value if gesture else '-'}"

    def _process_faces(self, frame) -> str:
        faces = self.tracker.process(frame)
        if not faces:
            return "No face detected"

        texts = []
        for i, face in enumerate(faces):
            if self.config.display.show_landmarks:
                draw_keypoints(frame, face.keypoints, radius=1)
            gaze = estimate_gaze(face, self.config.gaze)
            self.reporter.report_gaze(i, gaze.label)
            texts.append(f"{gaze.label.value} ({gaze.rel_x:.2f}, {gaze.rel_y:.2f})")
        return "Gaze: " + " | ".join(texts)

    def run(self):
        """Run the main application loop."""
        logger.info(f"Starting {self.config.display.window_name} "
                    f"({'face' if self.face_mode else 'hands'} mode), press 'q' to quit")

        try:
            while True:
                ret, frame = self.cap.read()
                if not ret:
                    logger.error("Failed to read frame from camera")
                    break

                if self.face_mode:
                    status_text = self._process_faces(frame)
                else:
                    status_text = self._process_hands(frame)

                cv2.putText(frame, status_text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
                cv2.imshow(self.config.display.window_name, frame)

                if cv2.waitKey(1) & 0xFF == ord('q'):
                    break
        finally:
            self.cap.release()
            self.tracker.close()
            cv2.destroyAllWindows()


def main():
    """Entry point for the application."""
    config_path = None
    if "--config" in sys.argv:
        idx = sys.argv.index("--config")
        if idx + 1 >= len(sys.argv):
            print("Usage: landmark-rules [--face] [--config PATH]")
            sys.exit(2)
        config_path = sys.argv[idx + 1]
    face_mode = "--face" in sys.argv

    try:
        cfg = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        logging.basicConfig(format=LOG_FORMAT)
        logger.error(f"Config error: {e}")
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, cfg.logging.level.upper(), logging.INFO),
        format=LOG_FORMAT
    )

    try:
        app = LandmarkRulesApp(cfg, face_mode=face_mode)
        app.run()
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
    except RuntimeError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error in main loop: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
