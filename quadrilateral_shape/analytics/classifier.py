"""
Shape Classifier Module
=======================

Maps a ShapeSnapshot to exactly one NamedQuadrilateral.

Design:
- Pure and total: never raises, never returns more than one category
- Every comparison goes through nearly_equal with one angle epsilon and
  one length epsilon, so predicates can never disagree with each other
- Specific-to-general resolution order:
  SQUARE -> RECTANGLE -> RHOMBUS -> PARALLELOGRAM -> KITE ->
  ISOSCELES_TRAPEZOID -> TRAPEZOID -> CONCAVE -> GENERIC

Parallel sides:
    Sides AB and CD are parallel when the interior angles at the two ends
    of a side joining them (B and C) sum to pi. The same holds for BC and
    DA through the angles at A and B.
"""

import math
from typing import List, Optional, Tuple

from quadrilateral_shape.config import ToleranceConfig
from quadrilateral_shape.geometry.primitives import nearly_equal
from quadrilateral_shape.labels import (
    OPPOSITE_SIDE_PAIRS,
    NamedQuadrilateral,
    SidePair,
)
from quadrilateral_shape.model.snapshot import ShapeSnapshot

RIGHT_ANGLE = math.pi / 2


class ShapeClassifier:
    """
    Stateless quadrilateral classifier.

    Design Philosophy:
    - Predicates are public so collaborators can ask narrower questions
      ("which sides are parallel?") with the same tolerances
    - Holds only its two epsilons

    Usage:
        classifier = ShapeClassifier(angle_epsilon=0.01, length_epsilon=0.01)
        snapshot = ShapeSnapshot.from_positions([(0, 0), (2, 0), (2, 1), (0, 1)])
        classifier.classify(snapshot)  # NamedQuadrilateral.RECTANGLE
    """

    def __init__(self, angle_epsilon: float = 0.01, length_epsilon: float = 0.01):
        """
        Initialize classifier.

        Args:
            angle_epsilon: Tolerance for angle comparisons (radians)
            length_epsilon: Tolerance for length comparisons
        """
        if angle_epsilon <= 0 or length_epsilon <= 0:
            raise ValueError(
                f"Epsilons must be > 0, got angle={angle_epsilon}, length={length_epsilon}"
            )
        self.angle_epsilon = angle_epsilon
        self.length_epsilon = length_epsilon

    @classmethod
    def from_tolerances(
        cls,
        tolerances: ToleranceConfig,
        device_connection: bool = False
    ) -> "ShapeClassifier":
        angle_epsilon, length_epsilon = tolerances.comparison_epsilons(device_connection)
        return cls(angle_epsilon=angle_epsilon, length_epsilon=length_epsilon)

    # ─────────────────────────────────────────────────────────────────────
    # Classification
    # ─────────────────────────────────────────────────────────────────────

    def classify(self, snapshot: ShapeSnapshot) -> NamedQuadrilateral:
        """
        Name the quadrilateral described by `snapshot`.

        Args:
            snapshot: Angles, lengths and area of the figure

        Returns:
            The most specific matching NamedQuadrilateral
        """
        if not self.is_convex(snapshot):
            return NamedQuadrilateral.CONCAVE

        parallel_pairs = self.parallel_side_pairs(snapshot)
        parallelogram = len(parallel_pairs) == 2
        rectangle = parallelogram and self.all_right_angles(snapshot)
        rhombus = parallelogram and self.all_sides_equal(snapshot)

        if rectangle and rhombus:
            return NamedQuadrilateral.SQUARE
        if rectangle:
            return NamedQuadrilateral.RECTANGLE
        if rhombus:
            return NamedQuadrilateral.RHOMBUS
        if parallelogram:
            return NamedQuadrilateral.PARALLELOGRAM
        if self.is_kite(snapshot):
            return NamedQuadrilateral.KITE
        if len(parallel_pairs) == 1:
            if self.is_isosceles_trapezoid(snapshot, parallel_pairs[0]):
                return NamedQuadrilateral.ISOSCELES_TRAPEZOID
            return NamedQuadrilateral.TRAPEZOID
        return NamedQuadrilateral.GENERIC

    # ─────────────────────────────────────────────────────────────────────
    # Predicates
    # ─────────────────────────────────────────────────────────────────────

    def angles_equal(self, a: Optional[float], b: Optional[float]) -> bool:
        if a is None or b is None:
            return False
        return nearly_equal(a, b, self.angle_epsilon)

    def lengths_equal(self, a: float, b: float) -> bool:
        return nearly_equal(a, b, self.length_epsilon)

    def is_convex(self, snapshot: ShapeSnapshot) -> bool:
        """No undefined or reflex angle, no crossing, non-zero area."""
        if snapshot.has_undefined_angle or not snapshot.simple:
            return False
        if snapshot.area <= 0:
            return False
        return all(angle <= math.pi for angle in snapshot.angles)

    def all_right_angles(self, snapshot: ShapeSnapshot) -> bool:
        return all(self.angles_equal(angle, RIGHT_ANGLE) for angle in snapshot.angles)

    def all_sides_equal(self, snapshot: ShapeSnapshot) -> bool:
        lengths = snapshot.lengths
        return all(
            self.lengths_equal(lengths[i], lengths[j])
            for i in range(4)
            for j in range(i + 1, 4)
        )

    def parallel_side_pairs(self, snapshot: ShapeSnapshot) -> List[SidePair]:
        """
        Opposite side pairs that are parallel.

        Returns:
            Subset of [AB|CD, BC|DA], in that order
        """
        if snapshot.has_undefined_angle:
            return []

        a, b, c, d = snapshot.angles
        parallel = []
        for pair, (first, second) in zip(OPPOSITE_SIDE_PAIRS, ((b, c), (a, b))):
            if self.angles_equal(first + second, math.pi):
                parallel.append(pair)
        return parallel

    def is_kite(self, snapshot: ShapeSnapshot) -> bool:
        """
        Two pairs of equal adjacent sides, with the angles between unequal
        sides equal (symmetry about one diagonal).
        """
        ab, bc, cd, da = snapshot.lengths
        a, b, c, d = snapshot.angles

        # Symmetric about diagonal AC
        if self.lengths_equal(da, ab) and self.lengths_equal(bc, cd) and self.angles_equal(b, d):
            return True
        # Symmetric about diagonal BD
        if self.lengths_equal(ab, bc) and self.lengths_equal(cd, da) and self.angles_equal(a, c):
            return True
        return False

    def is_isosceles_trapezoid(self, snapshot: ShapeSnapshot, bases: SidePair) -> bool:
        """
        Legs equal and base angles equal, given the parallel pair `bases`.
        """
        legs = [side for side in OPPOSITE_SIDE_PAIRS if side != bases][0]
        if not self.lengths_equal(snapshot.length(legs.first), snapshot.length(legs.second)):
            return False

        # Angles at the two ends of each base
        for base in (bases.first, bases.second):
            start, end = base.vertices
            if not self.angles_equal(snapshot.angle(start), snapshot.angle(end)):
                return False
        return True

    def __repr__(self) -> str:
        """Human-readable representation."""
        return (
            f"ShapeClassifier(angle_epsilon={self.angle_epsilon}, "
            f"length_epsilon={self.length_epsilon})"
        )


def classify_points(
    points,
    angle_epsilon: float = 0.01,
    length_epsilon: float = 0.01
) -> Tuple[NamedQuadrilateral, ShapeSnapshot]:
    """
    Convenience wrapper: measure four points and classify them.

    Args:
        points: Four (x, y) points in A, B, C, D order

    Returns:
        (category, snapshot)
    """
    snapshot = ShapeSnapshot.from_positions(points)
    classifier = ShapeClassifier(angle_epsilon=angle_epsilon, length_epsilon=length_epsilon)
    return classifier.classify(snapshot), snapshot
