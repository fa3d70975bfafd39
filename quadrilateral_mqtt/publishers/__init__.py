"""
MQTT Publishers
==============

Bounded Context: Message Production

Design:
- BasePublisher: Abstract base with connection management
- ShapeEventPublisher: Publishes shape category changes
- DeviceSamplePublisher: Publishes device samples
- Separation of concerns: publishers format, the broker client delivers

Public API
----------
    BasePublisher: Abstract publisher (for custom publishers)
    ShapeEventPublisher: Shape event message publisher
    DeviceSamplePublisher: Device sample message publisher
"""

from .base import BasePublisher
from .device import DeviceSamplePublisher
from .shape_event import ShapeEventPublisher

__all__ = [
    'BasePublisher',
    'DeviceSamplePublisher',
    'ShapeEventPublisher',
]
