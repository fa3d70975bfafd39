"""
Common Schema Types
==================

Bounded Context: Shared Data Structures

Types shared by device sample and shape event messages.

Design Principles:
- Immutability: frozen=True prevents accidental mutation
- Serialization: to_dict() for JSON export, from_dict() for import
- Validation: Constructor validates invariants

Types:
- Vector2: Planar coordinate or displacement
- Timestamp: ISO 8601 timestamp wrapper
"""

import math
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Tuple

SCHEMA_VERSION = "1.0"

VERTEX_NAMES = ("A", "B", "C", "D")
SIDE_NAMES = ("AB", "BC", "CD", "DA")


@dataclass(frozen=True)
class Vector2:
    """
    Immutable planar vector in model units (y up).

    Used both for absolute positions and for displacements.

    Invariants:
        - x and y are finite

    Example:
        >>> Vector2(x=0.05, y=0.0).to_dict()
        {'x': 0.05, 'y': 0.0}
    """
    x: float
    y: float

    def __post_init__(self):
        """Validate invariants."""
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            raise ValueError(f"Vector2 components must be finite, got ({self.x}, {self.y})")

    def to_dict(self) -> Dict[str, float]:
        """Serialize to JSON-compatible dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Vector2':
        """Deserialize from dict.

        Raises:
            ValueError: If required keys missing or invalid values
        """
        try:
            return cls(x=float(data['x']), y=float(data['y']))
        except KeyError as e:
            raise ValueError(f"Missing required Vector2 field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid Vector2 data: {e}")

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Timestamp:
    """
    Immutable ISO 8601 timestamp wrapper.

    Example:
        >>> ts = Timestamp.now()
        >>> ts.value
        '2025-10-24T15:30:45.123456+00:00'
    """
    value: str

    @classmethod
    def now(cls) -> 'Timestamp':
        """Create timestamp from current UTC time."""
        return cls(value=datetime.now(timezone.utc).isoformat())

    @classmethod
    def from_datetime(cls, dt: datetime) -> 'Timestamp':
        return cls(value=dt.isoformat())

    def to_datetime(self) -> datetime:
        """Parse to datetime object.

        Raises:
            ValueError: If timestamp format invalid
        """
        try:
            return datetime.fromisoformat(self.value)
        except ValueError as e:
            raise ValueError(f"Invalid ISO timestamp: {self.value}") from e

    def to_dict(self) -> str:
        """Serialize to JSON (as string)."""
        return self.value
