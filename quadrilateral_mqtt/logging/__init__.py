"""
Structured Logging for the Quadrilateral Device Bridge
======================================================

Bounded Context: Observability

JSON-structured logging for the MQTT side of the system.

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from quadrilateral_mqtt.logging import StructuredLogger, LogEvent
    >>> logger = StructuredLogger(component="bridge")
    >>> logger.info(
    ...     event=LogEvent.SHAPE_CATEGORY_CHANGED,
    ...     message="square -> rectangle",
    ...     metadata={'tick': 42, 'current': 'rectangle'}
    ... )

Output:
    {
        "timestamp": "2025-10-24T15:30:45.123456+00:00",
        "level": "INFO",
        "component": "bridge",
        "event": "shape.category_changed",
        "message": "square -> rectangle",
        "metadata": {"tick": 42, "current": "rectangle"}
    }
"""

from .events import LogEvent
from .structured import StructuredLogger, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
