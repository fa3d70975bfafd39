"""
Bounds Module
=============

Axis-aligned bounding region and vertex drag areas.

Design:
- Immutable rectangle (frozen dataclass)
- Boundary is walked counter-clockwise: bottom, right, top, left
- Drag area = region of the bounds a vertex can reach without crossing
  the rest of the figure; rebuilt from positions, never cached here
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from quadrilateral_shape.geometry.primitives import (
    Point,
    add,
    norm,
    scale,
    subtract,
)

# Boundary edge indices in counter-clockwise walk order
BOTTOM, RIGHT, TOP, LEFT = 0, 1, 2, 3


@dataclass(frozen=True)
class BoundaryHit:
    """Point where a ray leaves the bounds, located by edge and edge fraction."""

    point: Point
    edge: int
    t: float


@dataclass(frozen=True)
class Bounds:
    """
    Immutable axis-aligned bounding region.

    Attributes:
        min_x: Left edge
        min_y: Bottom edge
        max_x: Right edge
        max_y: Top edge

    Invariants:
        - max_x > min_x
        - max_y > min_y
    """

    min_x: float = -5.0
    min_y: float = -5.0
    max_x: float = 5.0
    max_y: float = 5.0

    def __post_init__(self):
        """Validate extents."""
        if self.max_x <= self.min_x:
            raise ValueError(f"Bounds max_x must be > min_x, got [{self.min_x}, {self.max_x}]")
        if self.max_y <= self.min_y:
            raise ValueError(f"Bounds max_y must be > min_y, got [{self.min_y}, {self.max_y}]")

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        """Corners in counter-clockwise order, starting bottom-left."""
        return (
            (self.min_x, self.min_y),
            (self.max_x, self.min_y),
            (self.max_x, self.max_y),
            (self.min_x, self.max_y),
        )

    def contains(self, point: Point) -> bool:
        """Closed containment test (points on the boundary are inside)."""
        return (
            self.min_x <= point[0] <= self.max_x
            and self.min_y <= point[1] <= self.max_y
        )

    def edge_end(self, edge: int) -> Point:
        """Corner reached at the end of `edge` when walking counter-clockwise."""
        return self.corners()[(edge + 1) % 4]

    def exit_point(self, origin: Point, direction: Point) -> Optional[BoundaryHit]:
        """
        Locate where a ray from an interior point leaves the bounds.

        Args:
            origin: Ray start (must be inside the bounds)
            direction: Ray direction (need not be normalized)

        Returns:
            BoundaryHit, or None for a zero direction or an origin outside
        """
        if not self.contains(origin) or norm(direction) == 0.0:
            return None

        dx, dy = direction
        candidates = []
        if dx > 0:
            candidates.append(((self.max_x - origin[0]) / dx, RIGHT))
        elif dx < 0:
            candidates.append(((self.min_x - origin[0]) / dx, LEFT))
        if dy > 0:
            candidates.append(((self.max_y - origin[1]) / dy, TOP))
        elif dy < 0:
            candidates.append(((self.min_y - origin[1]) / dy, BOTTOM))

        distance, edge = min(candidates, key=lambda item: item[0])
        x, y = add(origin, scale(direction, distance))

        # Snap onto the edge so rounding never leaves the point outside
        if edge == RIGHT:
            x = self.max_x
        elif edge == LEFT:
            x = self.min_x
        elif edge == TOP:
            y = self.max_y
        else:
            y = self.min_y
        x = min(max(x, self.min_x), self.max_x)
        y = min(max(y, self.min_y), self.max_y)

        return BoundaryHit(point=(x, y), edge=edge, t=self._edge_fraction(edge, (x, y)))

    def _edge_fraction(self, edge: int, point: Point) -> float:
        """Fraction along `edge` in the counter-clockwise walk direction."""
        if edge == BOTTOM:
            return (point[0] - self.min_x) / self.width
        elif edge == RIGHT:
            return (point[1] - self.min_y) / self.height
        elif edge == TOP:
            return (self.max_x - point[0]) / self.width
        else:
            return (self.max_y - point[1]) / self.height

    def walk(self, start: BoundaryHit, end: BoundaryHit) -> List[Point]:
        """
        Points along the boundary from `start` to `end`, counter-clockwise.

        Both hits are included; corners passed on the way are inserted
        between them.
        """
        points = [start.point]
        if not (start.edge == end.edge and end.t >= start.t):
            edge = start.edge
            while True:
                points.append(self.edge_end(edge))
                edge = (edge + 1) % 4
                if edge == end.edge:
                    break
        points.append(end.point)
        return points

    def to_dict(self) -> Dict[str, float]:
        return {
            'min_x': self.min_x,
            'min_y': self.min_y,
            'max_x': self.max_x,
            'max_y': self.max_y,
        }


def vertex_drag_area(
    bounds: Bounds,
    vertex: Point,
    following: Point,
    opposite: Point,
    previous: Point,
    opposite_is_reflex: bool
) -> List[Point]:
    """
    Build the region a vertex may be dragged in without twisting the figure.

    With a convex opposite vertex the region is bounded by the two
    neighbours and the continuation of the diagonal between them. With a
    reflex opposite vertex it narrows to the wedge beyond the opposite
    vertex, bounded by the continuations of the two sides meeting there.

    Args:
        bounds: Region all vertices live in
        vertex: Position of the vertex the area is for
        following: Next vertex (counter-clockwise)
        opposite: Opposite vertex
        previous: Previous vertex
        opposite_is_reflex: True if the interior angle at `opposite` exceeds pi

    Returns:
        Counter-clockwise polygon, or an empty list if any vertex is out of
        bounds or a ray direction is degenerate
    """
    if not all(bounds.contains(p) for p in (vertex, following, opposite, previous)):
        return []

    if opposite_is_reflex:
        # Rays from the neighbours through the opposite vertex
        first = bounds.exit_point(opposite, subtract(opposite, following))
        second = bounds.exit_point(opposite, subtract(opposite, previous))
        if first is None or second is None:
            return []
        return [opposite] + bounds.walk(first, second)

    first = bounds.exit_point(previous, subtract(previous, following))
    second = bounds.exit_point(following, subtract(following, previous))
    if first is None or second is None:
        return []
    return [opposite, previous] + bounds.walk(first, second) + [following]
