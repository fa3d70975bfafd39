"""
Shape Event Message Schema
==========================

Bounded Context: Shape Change Data Structures

Published by the device bridge whenever the engine reports that the
figure's category changed.

Message Flow:
    Engine → ShapeChangedEvent → ShapeEventMessage → ShapeEventPublisher → MQTT
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .common import SIDE_NAMES, VERTEX_NAMES, Timestamp, Vector2

CATEGORY_NAMES = (
    "square",
    "rectangle",
    "rhombus",
    "parallelogram",
    "kite",
    "isosceles_trapezoid",
    "trapezoid",
    "concave",
    "generic",
)


@dataclass(frozen=True)
class ShapeEventMessage:
    """
    Category change notification.

    Attributes:
        schema_version: Message schema version
        timestamp: ISO 8601 timestamp of message creation
        service_id: Bridge instance that produced the event
        tick: Engine tick on which the change was observed
        previous: Category before the change
        current: Category after the change
        angles: Interior angle per vertex in radians (None where undefined)
        lengths: Length per side
        area: Figure area
        positions: Vertex positions after the change

    Invariants:
        - previous and current are known categories and differ
        - tick >= 0
    """
    schema_version: str
    timestamp: Timestamp
    service_id: str
    tick: int
    previous: str
    current: str
    angles: Dict[str, Optional[float]] = field(default_factory=dict)
    lengths: Dict[str, float] = field(default_factory=dict)
    area: float = 0.0
    positions: Dict[str, Vector2] = field(default_factory=dict)

    def __post_init__(self):
        """Validate invariants."""
        if self.tick < 0:
            raise ValueError(f"tick must be >= 0, got {self.tick}")
        for name in (self.previous, self.current):
            if name not in CATEGORY_NAMES:
                raise ValueError(f"Unknown shape category: {name!r}")
        if self.previous == self.current:
            raise ValueError(f"previous and current must differ, got {self.current!r} twice")

        unknown = (set(self.angles) | set(self.positions)) - set(VERTEX_NAMES)
        unknown |= set(self.lengths) - set(SIDE_NAMES)
        if unknown:
            raise ValueError(f"Unknown vertex/side names: {sorted(unknown)}")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            'schema_version': self.schema_version,
            'timestamp': self.timestamp.to_dict(),
            'service_id': self.service_id,
            'tick': self.tick,
            'previous': self.previous,
            'current': self.current,
            'angles': dict(self.angles),
            'lengths': dict(self.lengths),
            'area': self.area,
            'positions': {name: vector.to_dict() for name, vector in self.positions.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ShapeEventMessage':
        """Deserialize from dict.

        Raises:
            ValueError: If required fields missing or invalid
        """
        try:
            return cls(
                schema_version=str(data['schema_version']),
                timestamp=Timestamp(value=data['timestamp']),
                service_id=str(data['service_id']),
                tick=int(data['tick']),
                previous=str(data['previous']),
                current=str(data['current']),
                angles={
                    name: (float(value) if value is not None else None)
                    for name, value in data.get('angles', {}).items()
                },
                lengths={name: float(value) for name, value in data.get('lengths', {}).items()},
                area=float(data.get('area', 0.0)),
                positions={
                    name: Vector2.from_dict(value)
                    for name, value in data.get('positions', {}).items()
                }
            )
        except KeyError as e:
            raise ValueError(f"Missing required ShapeEventMessage field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid ShapeEventMessage data: {e}")

    @property
    def transition(self) -> str:
        return f"{self.previous} -> {self.current}"
