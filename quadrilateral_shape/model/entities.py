"""
Entities Module
===============

Vertex and Side entities of the four-sided figure.

Design:
- Vertex owns a mutable position; everything else is derived on demand
- Side references its two vertices by label and owns no position
- MovementState is composed into both (no shared base class)
- Derived values are recomputed on every call, there is no cache to invalidate
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

from quadrilateral_shape.geometry.primitives import (
    Point,
    distance,
    interior_angle,
    nearly_equal,
    polygon_contains_point,
    subtract,
)
from quadrilateral_shape.labels import SideLabel, VertexLabel

if TYPE_CHECKING:
    from quadrilateral_shape.model.shape import Shape


@dataclass
class MovementState:
    """
    Feedback flags describing why an entity cannot currently move.

    Attributes:
        blocked_by_bounds: Last move stopped at the bounding region
        blocked_by_shape: Last move stopped at the figure itself
        is_active: Entity is being moved by a user or device
    """

    blocked_by_bounds: bool = False
    blocked_by_shape: bool = False
    is_active: bool = False

    @property
    def blocked(self) -> bool:
        return self.blocked_by_bounds or self.blocked_by_shape

    def clear_blocks(self) -> None:
        self.blocked_by_bounds = False
        self.blocked_by_shape = False


class Vertex:
    """
    One labeled corner of the figure.

    A Vertex belongs to exactly one Shape and reads its neighbours through
    it. Only the movement solver writes `position`.

    Attributes:
        label: Fixed identifier
        position: Current (x, y)
        movement: Blocked/active feedback flags
        drag_area: Polygon the vertex may move in, rebuilt after each commit.
            Feedback for pointer and device front ends (see
            QuadrilateralEngine.drag_area). The movement solver does not read
            it; it enforces validity through collision checks.
    """

    def __init__(self, label: VertexLabel, position: Point, shape: "Shape"):
        self.label = label
        self.position: Point = (float(position[0]), float(position[1]))
        self.movement = MovementState()
        self.drag_area: List[Point] = []
        self._shape = shape

    def angle(self) -> Optional[float]:
        """
        Interior angle at this vertex in radians.

        Returns:
            Angle in [0, 2*pi), or None if a neighbour coincides with it
        """
        previous = self._shape.vertex(self.label.previous).position
        following = self._shape.vertex(self.label.next).position
        return interior_angle(previous, self.position, following)

    def can_reach(self, point: Point) -> bool:
        """True if `point` lies in the current drag area."""
        return polygon_contains_point(self.drag_area, point)

    def __repr__(self) -> str:
        """Human-readable representation."""
        return f"Vertex({self.label.value}, position=({self.position[0]:.4f}, {self.position[1]:.4f}))"


class Side:
    """
    Segment between two consecutive vertices.

    Attributes:
        label: Fixed identifier
        movement: Blocked/active feedback flags
        saved_length: Length captured by Shape.save_side_lengths(), if any
    """

    def __init__(self, label: SideLabel, shape: "Shape"):
        self.label = label
        self.movement = MovementState()
        self.saved_length: Optional[float] = None
        self._shape = shape

    @property
    def vertex_labels(self) -> Tuple[VertexLabel, VertexLabel]:
        return self.label.vertices

    def endpoints(self) -> Tuple[Point, Point]:
        start, end = self.label.vertices
        return self._shape.vertex(start).position, self._shape.vertex(end).position

    def length(self) -> float:
        return distance(*self.endpoints())

    def direction(self) -> Point:
        """Vector from the first vertex to the second."""
        start, end = self.endpoints()
        return subtract(end, start)

    def length_equals_saved(self, epsilon: float) -> bool:
        """False when no length has been saved."""
        if self.saved_length is None:
            return False
        return nearly_equal(self.length(), self.saved_length, epsilon)

    def __repr__(self) -> str:
        """Human-readable representation."""
        return f"Side({self.label.value}, length={self.length():.4f})"
