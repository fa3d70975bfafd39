"""
Shape Event Publisher
====================

Bounded Context: Shape Change Message Production

Message Flow:
    QuadrilateralEngine → ShapeChangedEvent → ShapeEventMessage → ShapeEventPublisher → MQTT Broker

Example:
    >>> from quadrilateral_mqtt.publishers import ShapeEventPublisher
    >>> from quadrilateral_mqtt.logging import create_logger
    >>>
    >>> publisher = ShapeEventPublisher(
    ...     broker_host="localhost",
    ...     topic="quadrilateral/shapes/bridge_01/events",
    ...     logger=create_logger("bridge")
    ... )
    >>> publisher.connect()
    >>> publisher.publish_shape_event(message)
"""

from typing import Any, Dict, Optional

from ..logging import LogEvent, StructuredLogger
from ..schemas import ShapeEventMessage
from .base import BasePublisher


class ShapeEventPublisher(BasePublisher):
    """
    Publisher for shape category change messages.

    Defaults to QoS 1 (at-least-once).
    """

    def __init__(
        self,
        broker_host: str,
        topic: str,
        logger: StructuredLogger,
        broker_port: int = 1883,
        client_id: str = "quadrilateral_shape_publisher",
        username: Optional[str] = None,
        password: Optional[str] = None,
        qos: int = 1
    ):
        super().__init__(
            broker_host=broker_host,
            broker_port=broker_port,
            topic=topic,
            client_id=client_id,
            logger=logger,
            username=username,
            password=password,
            qos=qos
        )

    def format_message(self, shape_event_msg: ShapeEventMessage) -> Dict[str, Any]:
        """
        Format ShapeEventMessage to JSON-compatible dict.

        Raises:
            ValueError: If the message cannot be serialized
        """
        try:
            formatted = shape_event_msg.to_dict()
        except (AttributeError, TypeError, ValueError) as e:
            self.logger.error(
                event=LogEvent.SERIALIZATION_ERROR,
                message="Failed to serialize shape event message",
                exc_info=e,
                metadata={'tick': getattr(shape_event_msg, 'tick', None)}
            )
            raise ValueError(f"Failed to format shape event message: {e}") from e

        self.logger.debug(
            event=LogEvent.SHAPE_EVENT_SERIALIZED,
            message="Serialized shape event message",
            metadata={
                'tick': shape_event_msg.tick,
                'transition': shape_event_msg.transition
            }
        )
        return formatted

    def publish_shape_event(self, shape_event_msg: ShapeEventMessage) -> bool:
        """
        Publish a category change.

        Returns:
            True if published successfully, False otherwise
        """
        try:
            message_data = self.format_message(shape_event_msg)
        except ValueError:
            return False

        success = self.publish(message_data)
        if success:
            self.logger.info(
                event=LogEvent.SHAPE_CATEGORY_CHANGED,
                message=f"Published shape change {shape_event_msg.transition}",
                metadata={
                    'tick': shape_event_msg.tick,
                    'previous': shape_event_msg.previous,
                    'current': shape_event_msg.current,
                    'service_id': shape_event_msg.service_id
                }
            )
        return success
