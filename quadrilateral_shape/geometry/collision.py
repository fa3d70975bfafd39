"""
Collision Detector Module
=========================

Stateless validity test for a proposed figure.

Design:
- Bodies are convex point lists rebuilt per query (no caching across moves)
- Separating-axis theorem for body/body and point/bounds overlap
- Orientation tests for side/side crossing
- Pure: returns a CollisionResult, callers apply the decision

Blocked reasons, in priority order:
- SHAPE_COLLISION: the figure would cross itself or a vertex would touch
  another vertex or a side it does not belong to
- BOUNDS_COLLISION: the moving vertex would leave the bounding region
- DEGENERATE: the figure would have too little area (or wrong winding)
  or a side shorter than the minimum
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from quadrilateral_shape.geometry.bounds import Bounds
from quadrilateral_shape.geometry.primitives import (
    Point,
    distance,
    dot,
    segments_intersect,
    signed_area,
    subtract,
)
from quadrilateral_shape.labels import SIDE_ORDER, VERTEX_ORDER, SideLabel, VertexLabel


class BlockedReason(str, Enum):
    """Why a proposed position cannot be committed."""

    NONE = "none"
    SHAPE_COLLISION = "shape_collision"
    BOUNDS_COLLISION = "bounds_collision"
    DEGENERATE = "degenerate"


@dataclass(frozen=True)
class CollisionBody:
    """
    Convex polygon used for separating-axis tests.

    A single point is a valid (degenerate) body.

    Attributes:
        points: Vertices in either winding order
    """

    points: Tuple[Point, ...]

    def __post_init__(self):
        """Validate body."""
        if len(self.points) == 0:
            raise ValueError("CollisionBody requires at least one point")

    @classmethod
    def square(cls, center: Point, size: float) -> "CollisionBody":
        """Axis-aligned square of side `size` centred on `center`."""
        half = size / 2
        x, y = center
        return cls(points=(
            (x - half, y - half),
            (x + half, y - half),
            (x + half, y + half),
            (x - half, y + half),
        ))

    @classmethod
    def segment(cls, start: Point, end: Point) -> "CollisionBody":
        return cls(points=(start, end))

    @classmethod
    def point(cls, position: Point) -> "CollisionBody":
        return cls(points=(position,))

    @classmethod
    def from_bounds(cls, bounds: Bounds) -> "CollisionBody":
        return cls(points=bounds.corners())

    def axes(self) -> List[Point]:
        """Edge normals (unnormalized; projections are only compared)."""
        count = len(self.points)
        if count < 2:
            return []

        axes = []
        edges = count if count > 2 else 1
        for i in range(edges):
            edge = subtract(self.points[(i + 1) % count], self.points[i])
            if edge != (0.0, 0.0):
                axes.append((-edge[1], edge[0]))
        return axes

    def project(self, axis: Point) -> Tuple[float, float]:
        values = [dot(p, axis) for p in self.points]
        return min(values), max(values)

    def overlaps(self, other: "CollisionBody") -> bool:
        """
        Separating-axis overlap test.

        Closed intervals: bodies that only touch are overlapping.
        """
        for axis in self.axes() + other.axes():
            min_a, max_a = self.project(axis)
            min_b, max_b = other.project(axis)
            if max_a < min_b or max_b < min_a:
                return False

        # Two points have no axes at all; fall back to coincidence
        if not self.axes() and not other.axes():
            return self.points[0] == other.points[0]
        return True


@dataclass(frozen=True)
class CollisionResult:
    """
    Outcome of a collision query.

    Attributes:
        blocked: True if the proposed figure must not be committed
        reason: Highest-priority blocked reason (NONE if not blocked)
        sides: Sides involved in a shape collision
        vertices: Vertices involved in a shape collision
    """

    blocked: bool
    reason: BlockedReason
    sides: Tuple[SideLabel, ...] = ()
    vertices: Tuple[VertexLabel, ...] = ()

    @classmethod
    def clear(cls) -> "CollisionResult":
        return cls(blocked=False, reason=BlockedReason.NONE)


class CollisionDetector:
    """
    Decides whether a proposed vertex position yields a valid figure.

    Design Philosophy:
    - Holds configuration only (bounds, thresholds), never figure state
    - Every query rebuilds its bodies from the positions it is given
    - Safe to call from anywhere without synchronization

    Usage:
        detector = CollisionDetector(bounds, min_side_length=0.025, min_area=1e-4)
        result = detector.check(positions, VertexLabel.C, (0.5, 1.0))
        if result.blocked:
            print(result.reason)
    """

    def __init__(self, bounds: Bounds, min_side_length: float, min_area: float):
        """
        Initialize detector.

        Args:
            bounds: Region every vertex must stay in
            min_side_length: Side length threshold, also the vertex body size
            min_area: Signed area threshold
        """
        self.bounds = bounds
        self.min_side_length = min_side_length
        self.min_area = min_area
        self._bounds_body = CollisionBody.from_bounds(bounds)

    def check(
        self,
        positions: Mapping[VertexLabel, Point],
        label: VertexLabel,
        proposed: Point
    ) -> CollisionResult:
        """
        Test moving one vertex to `proposed` with the others held fixed.

        Args:
            positions: Current positions of all four vertices
            label: Vertex being moved
            proposed: Candidate position for that vertex

        Returns:
            CollisionResult describing the first violated constraint
        """
        candidate = dict(positions)
        candidate[label] = proposed

        shape_result = self._check_shape(candidate, moving=(label,))
        if shape_result is not None:
            return shape_result

        if self.point_outside_bounds(proposed):
            return CollisionResult(blocked=True, reason=BlockedReason.BOUNDS_COLLISION)

        if self._is_degenerate(candidate):
            return CollisionResult(blocked=True, reason=BlockedReason.DEGENERATE)

        return CollisionResult.clear()

    def check_figure(self, positions: Mapping[VertexLabel, Point]) -> CollisionResult:
        """Validate a whole figure (all vertices treated as moving)."""
        shape_result = self._check_shape(positions, moving=VERTEX_ORDER)
        if shape_result is not None:
            return shape_result

        outside = tuple(label for label in VERTEX_ORDER if self.point_outside_bounds(positions[label]))
        if outside:
            return CollisionResult(
                blocked=True,
                reason=BlockedReason.BOUNDS_COLLISION,
                vertices=outside
            )

        if self._is_degenerate(positions):
            return CollisionResult(blocked=True, reason=BlockedReason.DEGENERATE)

        return CollisionResult.clear()

    def point_outside_bounds(self, point: Point) -> bool:
        """Separating-axis test between a point and the bounds polygon."""
        return not CollisionBody.point(point).overlaps(self._bounds_body)

    def vertex_body(self, position: Point) -> CollisionBody:
        return CollisionBody.square(position, self.min_side_length)

    def _check_shape(
        self,
        positions: Mapping[VertexLabel, Point],
        moving: Iterable[VertexLabel]
    ) -> Optional[CollisionResult]:
        moving = tuple(moving)

        # Sides touching a moving vertex against their non-adjacent side
        for side in SIDE_ORDER:
            if not any(label in side.vertices for label in moving):
                continue
            other = side.opposite
            if side.ordinal > other.ordinal and any(label in other.vertices for label in moving):
                continue
            if segments_intersect(*self._segment(positions, side), *self._segment(positions, other)):
                return CollisionResult(
                    blocked=True,
                    reason=BlockedReason.SHAPE_COLLISION,
                    sides=(side, other)
                )

        bodies: Dict[VertexLabel, CollisionBody] = {
            label: self.vertex_body(positions[label]) for label in VERTEX_ORDER
        }

        # Vertex bodies against each other
        for i, first in enumerate(VERTEX_ORDER):
            for second in VERTEX_ORDER[i + 1:]:
                if first not in moving and second not in moving:
                    continue
                if bodies[first].overlaps(bodies[second]):
                    sides: Tuple[SideLabel, ...] = ()
                    if second in (first.next, first.previous):
                        sides = (SideLabel.between(first, second),)
                    return CollisionResult(
                        blocked=True,
                        reason=BlockedReason.SHAPE_COLLISION,
                        sides=sides,
                        vertices=(first, second)
                    )

        # Vertex bodies against the sides they do not belong to
        for label in VERTEX_ORDER:
            for side in SIDE_ORDER:
                if label in side.vertices:
                    continue
                if label not in moving and not any(v in side.vertices for v in moving):
                    continue
                if bodies[label].overlaps(CollisionBody.segment(*self._segment(positions, side))):
                    return CollisionResult(
                        blocked=True,
                        reason=BlockedReason.SHAPE_COLLISION,
                        sides=(side,),
                        vertices=(label,)
                    )

        return None

    def _is_degenerate(self, positions: Mapping[VertexLabel, Point]) -> bool:
        area = signed_area(*(positions[label] for label in VERTEX_ORDER))
        if area <= self.min_area:
            return True

        return any(
            distance(*self._segment(positions, side)) <= self.min_side_length
            for side in SIDE_ORDER
        )

    @staticmethod
    def _segment(positions: Mapping[VertexLabel, Point], side: SideLabel) -> Sequence[Point]:
        start, end = side.vertices
        return positions[start], positions[end]
