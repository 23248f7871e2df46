"""Vector helpers shared by the polygon layers.

Arithmetic is done with numpy; these functions only add the conventions
polycore relies on:
- Points are copied into read-only float64 arrays of shape (3,)
- "Coincide" means squared distance within a squared tolerance
- Values handed back to callers are always fresh, writable copies
"""

import math
from collections.abc import Sequence

import numpy as np

from polycore.exceptions import InvalidArgumentError

Vector = np.ndarray


def as_point(location: Sequence[float] | np.ndarray, description: str = "location") -> Vector:
    """Copy a location into a read-only 3-D float64 array.

    Args:
        location: Any length-3 sequence of real numbers
        description: Name used in error messages

    Returns:
        A new array that nothing else references

    Raises:
        InvalidArgumentError: If location is None or not three finite numbers
    """
    if location is None:
        raise InvalidArgumentError(f"{description} must not be None")
    try:
        result = np.array(location, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"{description} is not a 3-D point: {exc}") from exc

    if result.shape != (3,):
        raise InvalidArgumentError(
            f"{description} must have exactly 3 coordinates, got shape {result.shape}"
        )
    if not np.all(np.isfinite(result)):
        raise InvalidArgumentError(f"{description} has non-finite coordinates")

    result.flags.writeable = False
    return result


def distance_squared(a: Vector, b: Vector) -> float:
    """Squared Euclidean distance between two points."""
    offset = b - a
    return float(np.dot(offset, offset))


def length_squared(v: Vector) -> float:
    """Squared length of a vector."""
    return float(np.dot(v, v))


def do_coincide(a: Vector, b: Vector, tolerance2: float) -> bool:
    """Test whether two locations lie within sqrt(tolerance2) of each other."""
    return distance_squared(a, b) <= tolerance2


def normalize(v: Vector) -> Vector:
    """Return v scaled to unit length (a zero vector is returned unchanged)."""
    length = math.sqrt(length_squared(v))
    if length == 0.0:
        return v.copy()
    return v / length


def dominant_axis_sign(v: Vector) -> float:
    """Sign of the component of v with the largest magnitude.

    Ties go to the lowest axis (x before y before z). Returns 0.0 for a zero
    vector.
    """
    axis = int(np.argmax(np.abs(v)))
    return float(np.sign(v[axis]))


def cross_2d(x1: float, z1: float, x2: float, z2: float) -> float:
    """Z-component of the cross product of two planar (x, z) offsets."""
    return x1 * z2 - z1 * x2


def within_segment(t: float, fuzz: float) -> bool:
    """Test whether line parameter t falls in [0, 1], with squared slack fuzz."""
    if t < 0.0 and t * t > fuzz:
        return False
    ct = 1.0 - t
    if ct < 0.0 and ct * ct > fuzz:
        return False
    return True


def distance_squared_to_segment(point: Vector, start: Vector, end: Vector) -> tuple[float, Vector]:
    """Squared distance from a point to a segment.

    Returns:
        Tuple of (squared_distance, closest_point_on_segment)
    """
    offset = end - start
    ls = length_squared(offset)
    if ls == 0.0:
        return distance_squared(start, point), start.copy()

    t = float(np.dot(point - start, offset)) / ls
    t = max(0.0, min(1.0, t))
    closest = start + offset * t
    return distance_squared(closest, point), closest


def intersect_segments(
    start1: Vector, end1: Vector, start2: Vector, end2: Vector, tolerance2: float
) -> Vector | None:
    """Find a location where two segments meet.

    A zero-length segment meets the other if it lies within tolerance of it.
    Parallel segments meet if an end of one lies within tolerance of the
    other. Otherwise the closest points of the two lines must coincide and
    lie on their segments, allowing one tolerance of slack at either end.

    Args:
        start1: Start of the 1st segment
        end1: End of the 1st segment
        start2: Start of the 2nd segment
        end2: End of the 2nd segment
        tolerance2: Squared tolerance for coincidence

    Returns:
        A new location on the 2nd segment, or None if they don't meet
    """
    offset1 = end1 - start1
    ls1 = length_squared(offset1)
    if ls1 == 0.0:
        sd, closest = distance_squared_to_segment(start1, start2, end2)
        return closest if sd <= tolerance2 else None

    offset2 = end2 - start2
    ls2 = length_squared(offset2)
    if ls2 == 0.0:
        sd, _ = distance_squared_to_segment(start2, start1, end1)
        return start2.copy() if sd <= tolerance2 else None

    n = np.cross(offset1, offset2)
    if length_squared(n) <= tolerance2:
        # parallel: meet only where an end lies on the other segment
        for point, start, end in (
            (start2, start1, end1),
            (end2, start1, end1),
            (start1, start2, end2),
            (end1, start2, end2),
        ):
            if distance_squared_to_segment(point, start, end)[0] <= tolerance2:
                return point.copy()
        return None

    n1 = np.cross(offset1, n)
    n2 = np.cross(offset2, n)
    t1 = float(np.dot(start2 - start1, n2)) / float(np.dot(offset1, n2))
    t2 = float(np.dot(start1 - start2, n1)) / float(np.dot(offset2, n1))
    closest1 = start1 + offset1 * t1
    closest2 = start2 + offset2 * t2
    if not do_coincide(closest1, closest2, tolerance2):
        return None
    if not within_segment(t1, tolerance2 / ls1):
        return None
    if not within_segment(t2, tolerance2 / ls2):
        return None
    return closest2
