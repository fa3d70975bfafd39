"""
Quadrilateral MQTT Schemas
=========================

Bounded Context: Data Structures

Immutable, typed data structures for MQTT messages.

Design:
- Frozen dataclasses (immutability)
- to_dict() for JSON serialization
- from_dict() for deserialization (ValueError on bad input)
- Schema versioning for evolution

Public API
----------
Common Types:
    Vector2: Planar vector with validation
    Timestamp: ISO 8601 timestamp wrapper

Device Types:
    SampleKind: Enum (VERTEX_DELTA, VERTEX_POSITION, ROTATION)
    DeviceSampleMessage: Normalized device sample

Shape Event Types:
    ShapeEventMessage: Category change notification
"""

from .common import SCHEMA_VERSION, Timestamp, Vector2
from .device import DeviceSampleMessage, SampleKind
from .shape_event import CATEGORY_NAMES, ShapeEventMessage

__all__ = [
    # Common types
    'SCHEMA_VERSION',
    'Timestamp',
    'Vector2',
    # Device types
    'DeviceSampleMessage',
    'SampleKind',
    # Shape event types
    'CATEGORY_NAMES',
    'ShapeEventMessage',
]
