"""
Geometric Primitives Module
===========================

Pure vector and segment arithmetic - NO state, NO side effects.

Design:
- Points are plain (x, y) tuples (hashable, immutable)
- Scalar math for the hot path (called per sample by the solver)
- numpy only where it reads better (shoelace area, centroid)
- Total functions: degenerate input yields None, never raises

Conventions:
- y axis points up, so a positive signed area means counter-clockwise winding
- Angles are radians
"""

import math
from typing import Optional, Sequence, Tuple

import numpy as np

Point = Tuple[float, float]


def subtract(a: Point, b: Point) -> Point:
    """Vector from b to a."""
    return (a[0] - b[0], a[1] - b[1])


def add(a: Point, b: Point) -> Point:
    return (a[0] + b[0], a[1] + b[1])


def scale(v: Point, factor: float) -> Point:
    return (v[0] * factor, v[1] * factor)


def dot(u: Point, v: Point) -> float:
    return u[0] * v[0] + u[1] * v[1]


def cross(u: Point, v: Point) -> float:
    """
    Z component of the 3D cross product of two planar vectors.

    Positive when v is counter-clockwise from u.
    """
    return u[0] * v[1] - u[1] * v[0]


def norm(v: Point) -> float:
    return math.hypot(v[0], v[1])


def distance(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def lerp(a: Point, b: Point, t: float) -> Point:
    """Point at fraction t along the segment a -> b."""
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def nearly_equal(a: float, b: float, epsilon: float) -> bool:
    """
    Tolerant comparison used for every angle and length test.

    Args:
        a: First value
        b: Second value
        epsilon: Absolute tolerance (tuned for input jitter, not machine epsilon)

    Returns:
        True if |a - b| <= epsilon
    """
    return abs(a - b) <= epsilon


def angle_between(u: Point, v: Point) -> Optional[float]:
    """
    Unsigned angle between two vectors.

    Args:
        u: First vector
        v: Second vector

    Returns:
        Angle in [0, pi], or None if either vector has zero length
    """
    lu = norm(u)
    lv = norm(v)
    if lu == 0.0 or lv == 0.0:
        return None

    # Clamp guards acos against rounding just outside [-1, 1]
    cosine = max(-1.0, min(1.0, dot(u, v) / (lu * lv)))
    return math.acos(cosine)


def interior_angle(
    previous: Point,
    vertex: Point,
    following: Point,
    counter_clockwise: bool = True
) -> Optional[float]:
    """
    Interior angle of a polygon at `vertex`.

    The interior lies to the left of each directed edge for a
    counter-clockwise polygon (to the right for clockwise), so the angle is
    measured from the outgoing edge to the incoming edge in that sense.

    Args:
        previous: Position of the preceding vertex
        vertex: Position of the vertex being measured
        following: Position of the next vertex
        counter_clockwise: Winding of the polygon

    Returns:
        Angle in [0, 2*pi), or None if a neighbour coincides with the vertex
    """
    outgoing = subtract(following, vertex)
    incoming = subtract(previous, vertex)

    angle = angle_between(outgoing, incoming)
    if angle is None:
        return None

    turn = cross(outgoing, incoming)
    if not counter_clockwise:
        turn = -turn

    if turn >= 0:
        return angle
    return 2 * math.pi - angle


def orientation(p: Point, q: Point, r: Point) -> int:
    """
    Orientation of the ordered triple (p, q, r).

    Returns:
        1: counter-clockwise
        -1: clockwise
        0: collinear
    """
    value = cross(subtract(q, p), subtract(r, p))
    if value > 0:
        return 1
    elif value < 0:
        return -1
    else:
        return 0


def on_segment(p: Point, q: Point, r: Point) -> bool:
    """True if q lies within the bounding box of segment p-r (q assumed collinear)."""
    return (
        min(p[0], r[0]) <= q[0] <= max(p[0], r[0])
        and min(p[1], r[1]) <= q[1] <= max(p[1], r[1])
    )


def segments_intersect(p1: Point, p2: Point, q1: Point, q2: Point) -> bool:
    """
    Test whether closed segments p1-p2 and q1-q2 share any point.

    Collinear overlaps and touching endpoints count as intersecting.
    """
    o1 = orientation(p1, p2, q1)
    o2 = orientation(p1, p2, q2)
    o3 = orientation(q1, q2, p1)
    o4 = orientation(q1, q2, p2)

    if o1 != o2 and o3 != o4:
        return True

    # Collinear special cases
    if o1 == 0 and on_segment(p1, q1, p2):
        return True
    if o2 == 0 and on_segment(p1, q2, p2):
        return True
    if o3 == 0 and on_segment(q1, p1, q2):
        return True
    if o4 == 0 and on_segment(q1, p2, q2):
        return True

    return False


def signed_area(p1: Point, p2: Point, p3: Point, p4: Point) -> float:
    """
    Shoelace area of the quadrilateral p1-p2-p3-p4.

    Returns:
        Positive for counter-clockwise winding, negative for clockwise,
        near zero for degenerate figures
    """
    xy = np.array([p1, p2, p3, p4], dtype=float)
    x = xy[:, 0]
    y = xy[:, 1]
    return float(0.5 * (np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y)))


def centroid(points: Sequence[Point]) -> Point:
    """Arithmetic mean of the points."""
    mean = np.asarray(points, dtype=float).mean(axis=0)
    return (float(mean[0]), float(mean[1]))


def rotate_about(point: Point, pivot: Point, radians: float) -> Point:
    """Rotate `point` counter-clockwise about `pivot`."""
    c = math.cos(radians)
    s = math.sin(radians)
    dx, dy = subtract(point, pivot)
    return (pivot[0] + dx * c - dy * s, pivot[1] + dx * s + dy * c)


def polygon_contains_point(polygon: Sequence[Point], point: Point) -> bool:
    """
    Even-odd point-in-polygon test for simple (possibly concave) polygons.

    Points exactly on an edge count as inside.
    """
    count = len(polygon)
    if count < 3:
        return False

    x, y = point
    inside = False
    for i in range(count):
        a = polygon[i]
        b = polygon[(i + 1) % count]

        if orientation(a, b, point) == 0 and on_segment(a, point, b):
            return True

        if (a[1] > y) != (b[1] > y):
            x_cross = a[0] + (y - a[1]) * (b[0] - a[0]) / (b[1] - a[1])
            if x < x_cross:
                inside = not inside

    return inside
