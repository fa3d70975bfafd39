"""
Movement Requests Module
========================

Normalized inputs accepted by the engine's request queue.

Design:
- Immutable value objects; producers on any thread build them
- Transport-agnostic: pointer, keyboard and device bridges all reduce
  their input to one of these three shapes
"""

import math
from dataclasses import dataclass
from typing import Dict, Union

from quadrilateral_shape.geometry.primitives import Point
from quadrilateral_shape.labels import VertexLabel

# Unit directions for discrete (key press) movement
KEY_DIRECTIONS: Dict[str, Point] = {
    "left": (-1.0, 0.0),
    "right": (1.0, 0.0),
    "up": (0.0, 1.0),
    "down": (0.0, -1.0),
}


def _validate_point(name: str, point: Point) -> None:
    if len(point) != 2:
        raise ValueError(f"{name} must be an (x, y) pair, got {point}")
    if not all(math.isfinite(value) for value in point):
        raise ValueError(f"{name} must be finite, got {point}")


@dataclass(frozen=True)
class VertexMoveRequest:
    """Move a vertex to an absolute position (pointer drag or device)."""

    vertex: VertexLabel
    position: Point
    from_device: bool = False

    def __post_init__(self):
        """Validate request."""
        if not isinstance(self.vertex, VertexLabel):
            raise TypeError(f"vertex must be VertexLabel, got {type(self.vertex)}")
        _validate_point("position", self.position)


@dataclass(frozen=True)
class VertexDeltaSample:
    """
    Move a vertex by a relative displacement.

    Produced by key presses and by device bridges.

    Attributes:
        vertex: Vertex to move
        delta: (dx, dy) displacement
        from_device: True if produced by a physical device (enables grid snapping)
    """

    vertex: VertexLabel
    delta: Point
    from_device: bool = False

    def __post_init__(self):
        """Validate sample."""
        if not isinstance(self.vertex, VertexLabel):
            raise TypeError(f"vertex must be VertexLabel, got {type(self.vertex)}")
        _validate_point("delta", self.delta)

    @classmethod
    def key_press(cls, vertex: VertexLabel, direction: str, step: float) -> "VertexDeltaSample":
        """
        Build a discrete move of `step` in a named direction.

        Raises:
            ValueError: If direction is not left, right, up or down
        """
        try:
            unit = KEY_DIRECTIONS[direction.lower()]
        except KeyError:
            raise ValueError(
                f"Invalid direction: {direction!r}. Must be one of {sorted(KEY_DIRECTIONS)}"
            )
        return cls(vertex=vertex, delta=(unit[0] * step, unit[1] * step))


@dataclass(frozen=True)
class RotationSample:
    """
    Absolute rotation of the whole figure reported by a device (radians).

    The engine rotates by the difference from the last applied sample.
    """

    rotation: float

    def __post_init__(self):
        """Validate sample."""
        if not math.isfinite(self.rotation):
            raise ValueError(f"rotation must be finite, got {self.rotation}")


MovementRequest = Union[VertexMoveRequest, VertexDeltaSample, RotationSample]
