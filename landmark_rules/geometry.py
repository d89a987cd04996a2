"""
Vector geometry predicates over landmark points.

Every predicate is a pure function of its arguments. Degenerate input
(a zero-length vector or segment) makes the colinearity, bend and
parallelism predicates return False; it is never an error.
"""
import math
from typing import Optional, Tuple

# Default tolerances
COLINEAR_3D_TOLERANCE = 0.08
BENT_3D_TOLERANCE = 0.15
COLINEAR_2D_TOLERANCE = 0.1
PARALLEL_TOLERANCE_DEG = 20.0
HORIZON_THRESHOLD_DEG = 70.0

Vec3 = Tuple[float, float, float]


def _vec3(a, b) -> Vec3:
    """Vector a -> b; points without a z coordinate are taken at z = 0."""
    return (b.x - a.x, b.y - a.y, getattr(b, "z", 0.0) - getattr(a, "z", 0.0))


def _cross3(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _norm3(a: Vec3) -> float:
    return math.sqrt(a[0] ** 2 + a[1] ** 2 + a[2] ** 2)


def colinearity_3d(p1, p2, p3) -> Optional[float]:
    """
    Normalized cross product magnitude of (p2 - p1) and (p3 - p1).

    This is the sine of the angle between the two vectors: 0 for points on
    one line, 1 for a right angle.

    Returns:
        The measure, or None if either vector has zero length
    """
    v1 = _vec3(p1, p2)
    v2 = _vec3(p1, p3)
    denom = _norm3(v1) * _norm3(v2)
    if denom == 0:
        return None
    return _norm3(_cross3(v1, v2)) / denom


def colinear_3d(p1, p2, p3, tolerance: float = COLINEAR_3D_TOLERANCE) -> bool:
    """Check if three points lie approximately on one line in 3D."""
    measure = colinearity_3d(p1, p2, p3)
    return measure is not None and measure < tolerance


def bent_angle_3d(p1, p2, p3, tolerance: float = BENT_3D_TOLERANCE) -> bool:
    """Check if three points form a sharp bend in 3D."""
    measure = colinearity_3d(p1, p2, p3)
    return measure is not None and measure > tolerance


def colinear_2d(p1, p2, p3, tolerance: float = COLINEAR_2D_TOLERANCE) -> bool:
    """
    Check if three points lie approximately on one line in the image plane.

    Uses the absolute 2D cross product (twice the triangle area) normalized
    by the lengths of (p2 - p1) and (p3 - p1).
    """
    v1x, v1y = p2.x - p1.x, p2.y - p1.y
    v2x, v2y = p3.x - p1.x, p3.y - p1.y
    denom = math.hypot(v1x, v1y) * math.hypot(v2x, v2y)
    if denom == 0:
        return False
    area = abs(v1x * v2y - v1y * v2x)
    return area / denom < tolerance


def segment_angle_deg(p1, p2, q1, q2) -> Optional[float]:
    """Angle in degrees [0, 180] between segments p1->p2 and q1->q2 (None if degenerate)."""
    v1x, v1y = p2.x - p1.x, p2.y - p1.y
    v2x, v2y = q2.x - q1.x, q2.y - q1.y
    denom = math.hypot(v1x, v1y) * math.hypot(v2x, v2y)
    if denom == 0:
        return None
    cos_theta = (v1x * v2x + v1y * v2y) / denom
    return math.degrees(math.acos(min(1.0, max(-1.0, cos_theta))))


def lines_parallel_2d(p1, p2, q1, q2, tolerance_deg: float = PARALLEL_TOLERANCE_DEG) -> bool:
    """Check if segments p1->p2 and q1->q2 are parallel (same or opposite direction)."""
    angle = segment_angle_deg(p1, p2, q1, q2)
    if angle is None:
        return False
    return angle < tolerance_deg or abs(180.0 - angle) < tolerance_deg


def distance_2d(p1, p2) -> float:
    """Euclidean distance between two points in pixel space."""
    return math.hypot(p1.x - p2.x, p1.y - p2.y)


def angle_to_horizon(p1, p2, threshold_deg: float = HORIZON_THRESHOLD_DEG) -> bool:
    """Check if segment p1->p2 is within threshold_deg of the horizontal axis."""
    angle = abs(math.degrees(math.atan2(p2.y - p1.y, p2.x - p1.x)))
    return angle < threshold_deg or angle > 180.0 - threshold_deg
