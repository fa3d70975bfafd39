"""
Shape Snapshot Module
=====================

Immutable capture of the figure's derived measurements at one instant.

Design:
- Frozen dataclass: created per commit, never mutated
- Built from raw positions, so it can classify any four points
- Winding-normalized: angles are interior angles whichever way the
  points are traversed, and `area` is unsigned
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from quadrilateral_shape.geometry.primitives import (
    Point,
    distance,
    interior_angle,
    segments_intersect,
    signed_area,
)
from quadrilateral_shape.labels import SIDE_ORDER, VERTEX_ORDER, SideLabel, VertexLabel


@dataclass(frozen=True)
class ShapeSnapshot:
    """
    Angles, lengths and area of a quadrilateral.

    Attributes:
        angles: Interior angles at A, B, C, D (None where undefined)
        lengths: Lengths of AB, BC, CD, DA
        area: Unsigned shoelace area
        simple: False if two non-adjacent sides cross

    Example:
        >>> snap = ShapeSnapshot.from_positions([(0, 0), (1, 0), (1, 1), (0, 1)])
        >>> snap.length(SideLabel.AB)
        1.0
    """

    angles: Tuple[Optional[float], Optional[float], Optional[float], Optional[float]]
    lengths: Tuple[float, float, float, float]
    area: float
    simple: bool = True

    def __post_init__(self):
        """Validate arity."""
        if len(self.angles) != 4:
            raise ValueError(f"ShapeSnapshot needs 4 angles, got {len(self.angles)}")
        if len(self.lengths) != 4:
            raise ValueError(f"ShapeSnapshot needs 4 lengths, got {len(self.lengths)}")

    @classmethod
    def from_positions(
        cls,
        positions: Union[Sequence[Point], Mapping[VertexLabel, Point]]
    ) -> "ShapeSnapshot":
        """
        Measure four points taken in A, B, C, D order.

        Args:
            positions: Sequence of 4 points or a mapping keyed by VertexLabel

        Returns:
            ShapeSnapshot

        Raises:
            ValueError: If not exactly four points are given
        """
        if isinstance(positions, Mapping):
            points = [positions[label] for label in VERTEX_ORDER]
        else:
            points = list(positions)
        if len(points) != 4:
            raise ValueError(f"A quadrilateral needs exactly 4 points, got {len(points)}")
        points = [(float(x), float(y)) for x, y in points]

        area = signed_area(*points)
        counter_clockwise = area >= 0

        angles = tuple(
            interior_angle(points[i - 1], points[i], points[(i + 1) % 4], counter_clockwise)
            for i in range(4)
        )
        lengths = tuple(distance(points[i], points[(i + 1) % 4]) for i in range(4))
        simple = not (
            segments_intersect(points[0], points[1], points[2], points[3])
            or segments_intersect(points[1], points[2], points[3], points[0])
        )

        return cls(angles=angles, lengths=lengths, area=abs(area), simple=simple)

    def angle(self, label: VertexLabel) -> Optional[float]:
        return self.angles[label.ordinal]

    def length(self, label: SideLabel) -> float:
        return self.lengths[label.ordinal]

    @property
    def has_undefined_angle(self) -> bool:
        return any(angle is None for angle in self.angles)

    def angle_sum(self) -> Optional[float]:
        """Sum of interior angles, or None if any angle is undefined."""
        if self.has_undefined_angle:
            return None
        return math.fsum(self.angles)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict keyed by label."""
        return {
            'angles': {label.value: self.angle(label) for label in VERTEX_ORDER},
            'lengths': {label.value: self.length(label) for label in SIDE_ORDER},
            'area': self.area,
            'simple': self.simple,
        }
