"""
Geometry Layer
==============

Bounded Context: Pure planar geometry for a four-vertex figure.

Responsibilities:
- Vector and segment arithmetic (primitives)
- Bounding region and drag-area construction (bounds)
- Separating-axis collision tests (collision)
- NO figure state, NO classification

Design Philosophy:
- Pure functions where possible
- Immutable data structures
- Total functions: degenerate input yields None or DEGENERATE, never raises
"""

from quadrilateral_shape.geometry.primitives import (
    Point,
    angle_between,
    interior_angle,
    nearly_equal,
    segments_intersect,
    signed_area,
)
from quadrilateral_shape.geometry.bounds import Bounds, vertex_drag_area
from quadrilateral_shape.geometry.collision import (
    BlockedReason,
    CollisionBody,
    CollisionDetector,
    CollisionResult,
)

__all__ = [
    "Point",
    "angle_between",
    "interior_angle",
    "nearly_equal",
    "segments_intersect",
    "signed_area",
    "Bounds",
    "vertex_drag_area",
    "BlockedReason",
    "CollisionBody",
    "CollisionDetector",
    "CollisionResult",
]
