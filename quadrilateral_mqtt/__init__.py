"""
Quadrilateral MQTT Communication Package
========================================

Bounded Context: Communication Protocol for the Device Bridge

MQTT messaging between device decoders, the bridge service that owns a
QuadrilateralEngine, and any consumer of shape category changes.

Architecture:
- schemas/: Immutable message structures (DeviceSampleMessage, ShapeEventMessage)
- publishers/: Message producers (ShapeEventPublisher, DeviceSamplePublisher)
- subscriber.py: Message consumer (DeviceSampleSubscriber)
- logging/: Structured JSON logging for observability

Design Philosophy:
- Immutability: frozen dataclasses for message DTOs
- Validation at the boundary: from_dict() raises ValueError, the
  subscriber logs and drops
- Observability: structured logs (JSON) with typed event names

Example (device sender):
    >>> from quadrilateral_mqtt import DeviceSamplePublisher, DeviceSampleMessage, create_logger
    >>>
    >>> publisher = DeviceSamplePublisher(
    ...     broker_host="localhost",
    ...     topic="quadrilateral/devices/bridge_01/samples",
    ...     logger=create_logger("sender")
    ... )
    >>> publisher.connect()
    >>> publisher.publish_sample(DeviceSampleMessage.vertex_delta("tangible_01", "C", 0.05, 0.0))
"""

__version__ = "1.0.0"

# Schemas
from .schemas import (
    CATEGORY_NAMES,
    SCHEMA_VERSION,
    DeviceSampleMessage,
    SampleKind,
    ShapeEventMessage,
    Timestamp,
    Vector2,
)

# Publishers
from .publishers import (
    BasePublisher,
    DeviceSamplePublisher,
    ShapeEventPublisher,
)

# Subscriber
from .subscriber import DeviceSampleSubscriber

# Logging
from .logging import (
    LogEvent,
    StructuredLogger,
    create_logger,
)

__all__ = [
    '__version__',
    # Schemas
    'CATEGORY_NAMES',
    'SCHEMA_VERSION',
    'DeviceSampleMessage',
    'SampleKind',
    'ShapeEventMessage',
    'Timestamp',
    'Vector2',
    # Publishers
    'BasePublisher',
    'DeviceSamplePublisher',
    'ShapeEventPublisher',
    # Subscriber
    'DeviceSampleSubscriber',
    # Logging
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
