"""
Configuration management for landmark rule evaluation.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any, Tuple
from dataclasses import dataclass, field, fields

from .geometry import (
    COLINEAR_3D_TOLERANCE, BENT_3D_TOLERANCE, PARALLEL_TOLERANCE_DEG, HORIZON_THRESHOLD_DEG,
)
from .landmarks import (
    FINGER_STRAIGHT_TOLERANCE, INTERLOCK_DISTANCE_PX, INTERLOCK_MIN_JOINTS, OPEN_HAND_MIN_FINGERS,
    PALM_UPWARD_COLINEAR_TOLERANCE,
)


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands / FaceMesh configuration settings."""
    max_num_hands: int = 2
    max_num_faces: int = 1
    refine_landmarks: bool = True  # needed for the iris landmarks 468-477
    min_detection_confidence: float = 0.6
    min_tracking_confidence: float = 0.6
    invert_handedness: bool = False


@dataclass
class GazeThresholds:
    """Decision boundaries on the relative pupil position."""
    right_below: float = 0.35
    left_above: float = 0.65
    up_below: float = 0.3


@dataclass
class GestureConfig:
    """Gesture rule thresholds and the active rule order."""
    finger_straight_tolerance: float = FINGER_STRAIGHT_TOLERANCE
    open_hand_min_fingers: int = OPEN_HAND_MIN_FINGERS
    interlock_distance_px: float = INTERLOCK_DISTANCE_PX
    interlock_min_joints: int = INTERLOCK_MIN_JOINTS
    palm_parallel_tolerance_deg: float = PARALLEL_TOLERANCE_DEG
    pointing_bent_tolerance: float = BENT_3D_TOLERANCE
    pointing_colinear_tolerance: float = COLINEAR_3D_TOLERANCE
    palm_upward_horizon_deg: float = HORIZON_THRESHOLD_DEG
    palm_upward_colinear_tolerance: float = PALM_UPWARD_COLINEAR_TOLERANCE
    two_hand_rules: Tuple[str, ...] = ("finger_interlocked", "open_palm")
    single_hand_rules: Tuple[str, ...] = ("middle_finger",)


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_landmarks: bool = True
    window_name: str = "Landmark Rules"


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "INFO"


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    gaze: GazeThresholds = field(default_factory=GazeThresholds)
    gestures: GestureConfig = field(default_factory=GestureConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses config.default.yaml

    Returns:
        Configuration object with all settings
    """
    if path is None:
        # Use default config file in project root
        project_root = Path(__file__).parent.parent
        path = project_root / "config.default.yaml"

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    return _dict_to_config(data or {})


def _section(name: str, cls, data: Optional[Dict[str, Any]]):
    """Build one config section, keeping defaults for missing keys."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Config section '{name}' must be a mapping, got {type(data).__name__}")
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} keys: {sorted(unknown)}")
    return cls(**data)


def _rule_names(key: str, value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"gestures.{key} must be a list of rule names, got {value!r}")
    return tuple(value)


def _dict_to_config(data: Any) -> Cfg:
    """Convert dictionary to configuration object."""
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping, got {type(data).__name__}")

    gestures_data = data.get('gestures')
    if isinstance(gestures_data, dict):
        gestures_data = dict(gestures_data)
        for key in ('two_hand_rules', 'single_hand_rules'):
            if key in gestures_data:
                gestures_data[key] = _rule_names(key, gestures_data[key])

    return Cfg(
        camera=_section('camera', CameraConfig, data.get('camera')),
        mediapipe=_section('mediapipe', MediaPipeConfig, data.get('mediapipe')),
        gaze=_section('gaze', GazeThresholds, data.get('gaze')),
        gestures=_section('gestures', GestureConfig, gestures_data),
        display=_section('display', DisplayConfig, data.get('display')),
        logging=_section('logging', LoggingConfig, data.get('logging')),
    )
