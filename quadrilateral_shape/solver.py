"""
Movement Constraint Solver
==========================

Bounded Context: Deciding where a vertex actually goes.

Given a proposed vertex position, the solver walks the straight path from
the current position in fixed steps and commits the furthest sample that
the collision detector accepts. Because each sample is checked, a fast
move cannot tunnel through a side or a vertex.

Design:
- Sole writer of vertex positions (through Shape.commit_position)
- resolve() is pure; propose_*() resolve and then commit
- Blocked moves are recovered locally (clipped or rejected); the reason
  is reported, never raised
"""

import logging
import math
from dataclasses import dataclass
from typing import Mapping, Tuple

from quadrilateral_shape.geometry.collision import BlockedReason, CollisionDetector
from quadrilateral_shape.geometry.primitives import (
    Point,
    add,
    centroid,
    distance,
    lerp,
    rotate_about,
    scale,
    subtract,
)
from quadrilateral_shape.labels import VERTEX_ORDER, SideLabel, VertexLabel
from quadrilateral_shape.model.shape import Shape

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveResult:
    """
    Outcome of a vertex move.

    Attributes:
        vertex: Vertex that was asked to move
        start: Position before the move
        requested: Position that was asked for
        accepted_position: Position actually committed
        blocked_reason: Why the move stopped short (NONE if it did not)
        sides: Sides involved in a shape collision
    """

    vertex: VertexLabel
    start: Point
    requested: Point
    accepted_position: Point
    blocked_reason: BlockedReason = BlockedReason.NONE
    sides: Tuple[SideLabel, ...] = ()

    @property
    def moved(self) -> bool:
        return self.accepted_position != self.start

    @property
    def blocked(self) -> bool:
        return self.blocked_reason != BlockedReason.NONE

    @property
    def clipped(self) -> bool:
        """Moved part of the way before being blocked."""
        return self.blocked and self.moved

    @property
    def rejected(self) -> bool:
        """Blocked on the very first step."""
        return self.blocked and not self.moved


@dataclass(frozen=True)
class RotationResult:
    """
    Outcome of rotating the whole figure about its centroid.

    Attributes:
        requested: Rotation asked for (radians)
        applied: Rotation actually committed (0.0 or `requested`)
        blocked_reason: Why the rotation was refused
        vertices: Vertices that would have left the bounds
    """

    requested: float
    applied: float
    blocked_reason: BlockedReason = BlockedReason.NONE
    vertices: Tuple[VertexLabel, ...] = ()

    @property
    def blocked(self) -> bool:
        return self.blocked_reason != BlockedReason.NONE


class MovementSolver:
    """
    Clips proposed moves so the figure stays valid after every commit.

    Usage:
        solver = MovementSolver(detector, step_size=0.005)
        result = solver.propose_vertex_move(shape, VertexLabel.C, (-0.5, 1.0))
        result.accepted_position, result.blocked_reason
    """

    def __init__(self, detector: CollisionDetector, step_size: float = 0.005):
        """
        Initialize solver.

        Args:
            detector: Collision detector used for every sample
            step_size: Distance between path samples
        """
        if step_size <= 0:
            raise ValueError(f"step_size must be > 0, got {step_size}")
        self.detector = detector
        self.step_size = step_size

    def resolve(
        self,
        positions: Mapping[VertexLabel, Point],
        label: VertexLabel,
        desired: Point
    ) -> MoveResult:
        """
        Find the furthest valid position along the path to `desired`.

        Args:
            positions: Current positions of all vertices
            label: Vertex to move
            desired: Target position

        Returns:
            MoveResult (nothing is committed)
        """
        start = positions[label]
        desired = (float(desired[0]), float(desired[1]))
        if not all(math.isfinite(value) for value in desired):
            raise ValueError(f"Desired position must be finite, got {desired}")

        if desired == start:
            return MoveResult(vertex=label, start=start, requested=desired, accepted_position=start)

        # Only the part of the path inside the bounds needs sampling; one
        # extra sample just past the exit reports the blocking reason.
        path_end = desired
        overshoot = None
        bounds = self.detector.bounds
        if not bounds.contains(desired):
            hit = bounds.exit_point(start, subtract(desired, start))
            if hit is not None:
                path_end = hit.point
                direction = subtract(desired, start)
                overshoot = add(path_end, scale(direction, self.step_size / distance(start, desired)))

        samples = max(1, math.ceil(distance(start, path_end) / self.step_size))
        accepted = start
        for i in range(1, samples + 1):
            sample = path_end if i == samples else lerp(start, path_end, i / samples)
            result = self.detector.check(positions, label, sample)
            if result.blocked:
                return MoveResult(
                    vertex=label,
                    start=start,
                    requested=desired,
                    accepted_position=accepted,
                    blocked_reason=result.reason,
                    sides=result.sides,
                )
            accepted = sample

        if overshoot is not None:
            result = self.detector.check(positions, label, overshoot)
            return MoveResult(
                vertex=label,
                start=start,
                requested=desired,
                accepted_position=accepted,
                blocked_reason=result.reason if result.blocked else BlockedReason.BOUNDS_COLLISION,
                sides=result.sides,
            )

        return MoveResult(vertex=label, start=start, requested=desired, accepted_position=desired)

    def propose_vertex_move(self, shape: Shape, label: VertexLabel, desired: Point) -> MoveResult:
        """
        Resolve a move and commit it.

        Side effects:
            - Writes the accepted position to the vertex
            - Sets the vertex's blocked flags from the reason
            - Marks sides involved in a shape collision
            No other vertex is touched.
        """
        result = self.resolve(shape.positions(), label, desired)
        if result.requested == result.start:
            return result

        if result.moved:
            shape.commit_position(label, result.accepted_position)

        movement = shape.vertex(label).movement
        movement.blocked_by_bounds = result.blocked_reason == BlockedReason.BOUNDS_COLLISION
        movement.blocked_by_shape = result.blocked_reason in (
            BlockedReason.SHAPE_COLLISION,
            BlockedReason.DEGENERATE,
        )
        for side in shape.sides:
            side.movement.blocked_by_shape = side.label in result.sides

        if result.rejected:
            logger.debug(
                f"Move of {label.value} to {result.requested} rejected "
                f"({result.blocked_reason.value})"
            )
        elif result.clipped:
            logger.debug(
                f"Move of {label.value} to {result.requested} clipped at "
                f"{result.accepted_position} ({result.blocked_reason.value})"
            )

        return result

    def propose_delta(self, shape: Shape, label: VertexLabel, delta: Point) -> MoveResult:
        """Move a vertex by a relative displacement."""
        return self.propose_vertex_move(shape, label, add(shape.vertex(label).position, delta))

    def propose_rotation(self, shape: Shape, radians: float) -> RotationResult:
        """
        Rotate the whole figure about its centroid.

        Rotation keeps the figure congruent, so only the bounds can block
        it. It is applied entirely or not at all.
        """
        if radians == 0.0:
            return RotationResult(requested=radians, applied=0.0)

        positions = shape.positions()
        pivot = centroid(list(positions.values()))
        rotated = {
            label: rotate_about(point, pivot, radians) for label, point in positions.items()
        }

        outside = tuple(
            label for label in VERTEX_ORDER if self.detector.point_outside_bounds(rotated[label])
        )
        if outside:
            for label in outside:
                shape.vertex(label).movement.blocked_by_bounds = True
            logger.debug(
                f"Rotation by {radians:.4f} rad rejected "
                f"(vertices {[label.value for label in outside]} out of bounds)"
            )
            return RotationResult(
                requested=radians,
                applied=0.0,
                blocked_reason=BlockedReason.BOUNDS_COLLISION,
                vertices=outside,
            )

        check = self.detector.check_figure(rotated)
        if check.blocked:
            return RotationResult(requested=radians, applied=0.0, blocked_reason=check.reason)

        shape.commit_positions(rotated)
        for vertex in shape.vertices:
            vertex.movement.clear_blocks()
        return RotationResult(requested=radians, applied=radians)
