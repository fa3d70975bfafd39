"""
Shape Aggregate Module
======================

The four vertices and four sides of the figure, as one aggregate.

Design:
- Fail fast: construction validates every invariant
- Positions are written only through commit_position(s), which the
  movement solver calls after the collision detector has approved
- All measurements are derived from current positions on each call

Invariants (hold after construction and after every commit):
- simple (no two non-adjacent sides intersect)
- signed area > min_area (counter-clockwise, non-degenerate)
- interior angles sum to 2*pi
- every side longer than min_side_length
- every vertex inside the bounds
"""

import math
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from quadrilateral_shape.config import ToleranceConfig
from quadrilateral_shape.geometry.bounds import Bounds, vertex_drag_area
from quadrilateral_shape.geometry.collision import BlockedReason, CollisionDetector
from quadrilateral_shape.geometry.primitives import Point, nearly_equal, signed_area
from quadrilateral_shape.labels import SIDE_ORDER, VERTEX_ORDER, SideLabel, VertexLabel
from quadrilateral_shape.model.entities import Side, Vertex
from quadrilateral_shape.model.snapshot import ShapeSnapshot


class InvalidShapeError(ValueError):
    """Raised when a Shape would be constructed in violation of its invariants."""


class Shape:
    """
    Aggregate of vertices A, B, C, D and sides AB, BC, CD, DA.

    Attributes:
        bounds: Region every vertex stays in
        tolerances: Thresholds used for validation
        detector: Collision detector shared with the movement solver

    Example:
        >>> shape = Shape([(0, 0), (1, 0), (1, 1), (0, 1)], Bounds(), ToleranceConfig())
        >>> shape.side(SideLabel.AB).length()
        1.0
    """

    def __init__(
        self,
        positions: Union[Sequence[Point], Mapping[VertexLabel, Point]],
        bounds: Bounds,
        tolerances: ToleranceConfig,
        detector: Optional[CollisionDetector] = None
    ):
        """
        Build and validate a figure.

        Args:
            positions: Four points in A, B, C, D order, or a mapping by label
            bounds: Bounding region
            tolerances: Validation thresholds
            detector: Collision detector (built from bounds/tolerances if omitted)

        Raises:
            InvalidShapeError: If the positions do not form a valid figure
        """
        if isinstance(positions, Mapping):
            missing = [label.value for label in VERTEX_ORDER if label not in positions]
            if missing or len(positions) != 4:
                raise InvalidShapeError(
                    f"Shape requires exactly vertices A, B, C, D; missing {missing}"
                )
            points = [positions[label] for label in VERTEX_ORDER]
        else:
            points = list(positions)
            if len(points) != 4:
                raise InvalidShapeError(f"Shape requires exactly 4 vertices, got {len(points)}")

        self.bounds = bounds
        self.tolerances = tolerances
        self.detector = detector or CollisionDetector(
            bounds,
            min_side_length=tolerances.min_side_length,
            min_area=tolerances.min_area,
        )

        self._vertices: Dict[VertexLabel, Vertex] = {
            label: Vertex(label, point, self) for label, point in zip(VERTEX_ORDER, points)
        }
        self._sides: Dict[SideLabel, Side] = {
            label: Side(label, self) for label in SIDE_ORDER
        }

        self.validate()
        self.update_drag_areas()

    # ─────────────────────────────────────────────────────────────────────
    # Access
    # ─────────────────────────────────────────────────────────────────────

    def vertex(self, label: VertexLabel) -> Vertex:
        return self._vertices[label]

    def side(self, label: SideLabel) -> Side:
        return self._sides[label]

    @property
    def vertices(self) -> Tuple[Vertex, ...]:
        return tuple(self._vertices[label] for label in VERTEX_ORDER)

    @property
    def sides(self) -> Tuple[Side, ...]:
        return tuple(self._sides[label] for label in SIDE_ORDER)

    def positions(self) -> Dict[VertexLabel, Point]:
        return {label: self._vertices[label].position for label in VERTEX_ORDER}

    # ─────────────────────────────────────────────────────────────────────
    # Measurements
    # ─────────────────────────────────────────────────────────────────────

    def angles(self) -> Dict[VertexLabel, Optional[float]]:
        return {label: self._vertices[label].angle() for label in VERTEX_ORDER}

    def lengths(self) -> Dict[SideLabel, float]:
        return {label: self._sides[label].length() for label in SIDE_ORDER}

    def area(self) -> float:
        """Signed area (positive for a valid figure)."""
        return signed_area(*(self._vertices[label].position for label in VERTEX_ORDER))

    def angle_sum(self) -> Optional[float]:
        angles = list(self.angles().values())
        if any(angle is None for angle in angles):
            return None
        return math.fsum(angles)

    def snapshot(self) -> ShapeSnapshot:
        return ShapeSnapshot.from_positions(self.positions())

    # ─────────────────────────────────────────────────────────────────────
    # Validation
    # ─────────────────────────────────────────────────────────────────────

    def invariant_violations(self) -> List[str]:
        """
        Describe every invariant the current positions break.

        Returns:
            Human-readable violations (empty list when valid)
        """
        violations = []
        positions = self.positions()

        for label, point in positions.items():
            if not self.bounds.contains(point):
                violations.append(f"vertex {label.value} at {point} is outside bounds")

        snapshot = self.snapshot()
        if not snapshot.simple:
            violations.append("non-adjacent sides intersect")

        area = self.area()
        if area <= self.tolerances.min_area:
            violations.append(
                f"signed area {area:.6g} must be > {self.tolerances.min_area} "
                f"(counter-clockwise, non-degenerate)"
            )

        for label, length in self.lengths().items():
            if length <= self.tolerances.min_side_length:
                violations.append(
                    f"side {label.value} length {length:.6g} must be > "
                    f"{self.tolerances.min_side_length}"
                )

        angle_sum = self.angle_sum()
        if angle_sum is None:
            violations.append("interior angle undefined")
        elif not nearly_equal(angle_sum, 2 * math.pi, self.tolerances.angle_epsilon):
            violations.append(f"interior angles sum to {angle_sum:.6g}, expected 2*pi")

        collision = self.detector.check_figure(positions)
        if collision.reason == BlockedReason.SHAPE_COLLISION and not violations:
            involved = [label.value for label in collision.vertices + collision.sides]
            violations.append(f"vertices too close to the figure: {involved}")

        return violations

    def validate(self) -> None:
        """
        Raises:
            InvalidShapeError: If any invariant is violated
        """
        violations = self.invariant_violations()
        if violations:
            raise InvalidShapeError("Invalid quadrilateral: " + "; ".join(violations))

    def is_valid(self) -> bool:
        return not self.invariant_violations()

    # ─────────────────────────────────────────────────────────────────────
    # Mutation (movement solver only)
    # ─────────────────────────────────────────────────────────────────────

    def commit_position(self, label: VertexLabel, position: Point) -> None:
        """Write an already-approved position and refresh drag areas."""
        self._vertices[label].position = (float(position[0]), float(position[1]))
        self.update_drag_areas()

    def commit_positions(self, positions: Mapping[VertexLabel, Point]) -> None:
        """Write several already-approved positions at once."""
        for label, position in positions.items():
            self._vertices[label].position = (float(position[0]), float(position[1]))
        self.update_drag_areas()

    def update_drag_areas(self) -> None:
        """Rebuild every vertex's drag area from the current positions."""
        for label in VERTEX_ORDER:
            opposite_angle = self._vertices[label.opposite].angle()
            self._vertices[label].drag_area = vertex_drag_area(
                self.bounds,
                vertex=self._vertices[label].position,
                following=self._vertices[label.next].position,
                opposite=self._vertices[label.opposite].position,
                previous=self._vertices[label.previous].position,
                opposite_is_reflex=opposite_angle is not None and opposite_angle > math.pi,
            )

    # ─────────────────────────────────────────────────────────────────────
    # Saved side lengths
    # ─────────────────────────────────────────────────────────────────────

    def save_side_lengths(self) -> Dict[SideLabel, float]:
        """Remember the current side lengths (e.g. when locking lengths)."""
        for side in self._sides.values():
            side.saved_length = side.length()
        return {label: side.saved_length for label, side in self._sides.items()}

    def clear_saved_lengths(self) -> None:
        for side in self._sides.values():
            side.saved_length = None

    def lengths_equal_to_saved(self, epsilon: float) -> bool:
        """True if every side still matches its saved length."""
        return all(side.length_equals_saved(epsilon) for side in self._sides.values())

    def __repr__(self) -> str:
        """Human-readable representation."""
        points = ", ".join(
            f"{label.value}=({p[0]:.3f}, {p[1]:.3f})" for label, p in self.positions().items()
        )
        return f"Shape({points})"
