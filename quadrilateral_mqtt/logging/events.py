"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy for the device bridge.

Design:
- Enum-based (prevents typos, enables autocomplete)
- Hierarchical naming (namespace.category.action)
- Searchable in log aggregators

Event Naming Convention:
    <component>.<category>.<action>

    component: mqtt, device, shape, error
    category: sample, event, category_changed
    action: received, serialized, success, failed

Example Log Query:
    fields @timestamp, event, message, metadata.tick
    | filter event = "shape.category_changed"
    | stats count() by metadata.current
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - mqtt.*: MQTT broker interactions
    - device.*: Device samples entering the bridge
    - shape.*: Shape events leaving the bridge
    - error.*: Error conditions
    """

    # ========== MQTT Events ==========
    MQTT_CONNECTED = "mqtt.connected"
    """MQTT broker connection established."""

    MQTT_DISCONNECTED = "mqtt.disconnected"
    """MQTT broker connection lost or closed."""

    MQTT_PUBLISH_SUCCESS = "mqtt.publish.success"
    """Message handed to the broker."""

    MQTT_PUBLISH_FAILED = "mqtt.publish.failed"
    """Message publication failed."""

    # ========== Device Events ==========
    DEVICE_SAMPLE_RECEIVED = "device.sample.received"
    """Device sample decoded by the subscriber."""

    DEVICE_SAMPLE_SERIALIZED = "device.sample.serialized"
    """Device sample serialized for sending."""

    # ========== Shape Events ==========
    SHAPE_CATEGORY_CHANGED = "shape.category_changed"
    """Engine reported a new shape category."""

    SHAPE_EVENT_SERIALIZED = "shape.event.serialized"
    """Shape event message serialized to JSON."""

    SHAPE_EVENT_RECEIVED = "shape.event.received"
    """Shape event message received by a subscriber."""

    # ========== Error Events ==========
    SERIALIZATION_ERROR = "error.serialization"
    """Failed to serialize message to JSON."""

    DESERIALIZATION_ERROR = "error.deserialization"
    """Failed to deserialize message from JSON."""

    SCHEMA_VALIDATION_ERROR = "error.schema_validation"
    """Message failed schema validation."""

    MQTT_CONNECTION_ERROR = "error.mqtt_connection"
    """Failed to connect to MQTT broker."""


# Event categories for filtering
MQTT_EVENTS = {
    LogEvent.MQTT_CONNECTED,
    LogEvent.MQTT_DISCONNECTED,
    LogEvent.MQTT_PUBLISH_SUCCESS,
    LogEvent.MQTT_PUBLISH_FAILED,
}

DEVICE_EVENTS = {
    LogEvent.DEVICE_SAMPLE_RECEIVED,
    LogEvent.DEVICE_SAMPLE_SERIALIZED,
}

SHAPE_EVENTS = {
    LogEvent.SHAPE_CATEGORY_CHANGED,
    LogEvent.SHAPE_EVENT_SERIALIZED,
    LogEvent.SHAPE_EVENT_RECEIVED,
}

ERROR_EVENTS = {
    LogEvent.SERIALIZATION_ERROR,
    LogEvent.DESERIALIZATION_ERROR,
    LogEvent.SCHEMA_VALIDATION_ERROR,
    LogEvent.MQTT_CONNECTION_ERROR,
}
