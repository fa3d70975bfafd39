"""
Device Sample Message Schema
============================

Bounded Context: Device Input Data Structures

Normalized samples sent by device bridges (tangible controllers, marker
trackers, scripted senders). Decoding the raw device signal happens
before this point; the engine only ever sees these samples.

Message Flow:
    Device decoder → DeviceSampleMessage → MQTT → DeviceSampleSubscriber → Engine queue
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .common import SCHEMA_VERSION, VERTEX_NAMES, Timestamp, Vector2


class SampleKind(str, Enum):
    """Device sample kind."""
    VERTEX_DELTA = "vertex_delta"          # Relative displacement of one vertex
    VERTEX_POSITION = "vertex_position"    # Absolute position of one vertex
    ROTATION = "rotation"                  # Absolute rotation of the whole device


@dataclass(frozen=True)
class DeviceSampleMessage:
    """
    One normalized device sample.

    Attributes:
        schema_version: Message schema version
        timestamp: ISO 8601 timestamp of sample creation
        source_id: Device identifier
        kind: What the sample describes
        vertex: Vertex name (A-D) for vertex samples
        vector: Displacement or position for vertex samples
        rotation: Absolute rotation in radians for rotation samples
        sequence: Sender-side sequence number

    Invariants:
        - Vertex samples carry a valid vertex and a vector
        - Rotation samples carry a finite rotation

    Example:
        >>> msg = DeviceSampleMessage(
        ...     schema_version="1.0",
        ...     timestamp=Timestamp.now(),
        ...     source_id="tangible_01",
        ...     kind=SampleKind.VERTEX_DELTA,
        ...     vertex="A",
        ...     vector=Vector2(x=0.05, y=0.0)
        ... )
    """
    schema_version: str
    timestamp: Timestamp
    source_id: str
    kind: SampleKind
    vertex: Optional[str] = None
    vector: Optional[Vector2] = None
    rotation: Optional[float] = None
    sequence: int = 0

    def __post_init__(self):
        """Validate invariants."""
        if not self.source_id:
            raise ValueError("source_id cannot be empty")

        if self.sequence < 0:
            raise ValueError(f"sequence must be >= 0, got {self.sequence}")

        if self.kind == SampleKind.ROTATION:
            if self.rotation is None or not math.isfinite(self.rotation):
                raise ValueError(f"Rotation samples need a finite rotation, got {self.rotation}")
        else:
            if self.vertex not in VERTEX_NAMES:
                raise ValueError(
                    f"Vertex samples need vertex in {VERTEX_NAMES}, got {self.vertex!r}"
                )
            if self.vector is None:
                raise ValueError(f"{self.kind.value} samples need a vector")

    @classmethod
    def vertex_delta(cls, source_id: str, vertex: str, dx: float, dy: float, sequence: int = 0) -> 'DeviceSampleMessage':
        return cls(
            schema_version=SCHEMA_VERSION,
            timestamp=Timestamp.now(),
            source_id=source_id,
            kind=SampleKind.VERTEX_DELTA,
            vertex=vertex,
            vector=Vector2(x=dx, y=dy),
            sequence=sequence
        )

    @classmethod
    def vertex_position(cls, source_id: str, vertex: str, x: float, y: float, sequence: int = 0) -> 'DeviceSampleMessage':
        return cls(
            schema_version=SCHEMA_VERSION,
            timestamp=Timestamp.now(),
            source_id=source_id,
            kind=SampleKind.VERTEX_POSITION,
            vertex=vertex,
            vector=Vector2(x=x, y=y),
            sequence=sequence
        )

    @classmethod
    def rotation_sample(cls, source_id: str, rotation: float, sequence: int = 0) -> 'DeviceSampleMessage':
        return cls(
            schema_version=SCHEMA_VERSION,
            timestamp=Timestamp.now(),
            source_id=source_id,
            kind=SampleKind.ROTATION,
            rotation=rotation,
            sequence=sequence
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        result: Dict[str, Any] = {
            'schema_version': self.schema_version,
            'timestamp': self.timestamp.to_dict(),
            'source_id': self.source_id,
            'kind': self.kind.value,
            'sequence': self.sequence,
        }
        if self.vertex is not None:
            result['vertex'] = self.vertex
        if self.vector is not None:
            result['vector'] = self.vector.to_dict()
        if self.rotation is not None:
            result['rotation'] = self.rotation
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeviceSampleMessage':
        """Deserialize from dict.

        Raises:
            ValueError: If required fields missing or invalid
        """
        try:
            vector = None
            if data.get('vector') is not None:
                vector = Vector2.from_dict(data['vector'])

            rotation = data.get('rotation')
            vertex = data.get('vertex')

            return cls(
                schema_version=str(data['schema_version']),
                timestamp=Timestamp(value=data['timestamp']),
                source_id=str(data['source_id']),
                kind=SampleKind(data['kind']),
                vertex=str(vertex).upper() if vertex is not None else None,
                vector=vector,
                rotation=float(rotation) if rotation is not None else None,
                sequence=int(data.get('sequence', 0))
            )
        except KeyError as e:
            raise ValueError(f"Missing required DeviceSampleMessage field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid DeviceSampleMessage data: {e}")
