"""
Base MQTT Publisher
==================

Bounded Context: MQTT Infrastructure

Abstract base class for the bridge's MQTT publishers.

Design:
- Connection lifecycle (connect, disconnect) on paho-mqtt's callback API v2
- Network loop runs in paho's background thread (loop_start)
- QoS configurable per publisher
- Structured logging for every broker interaction

Architecture:
    BasePublisher (abstract)
        ↓
    ShapeEventPublisher, DeviceSamplePublisher (concrete)

Responsibilities:
- MQTT connection lifecycle
- JSON encoding and publication
- NOT responsible for: message formatting (delegated to subclasses)
"""

import json
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import paho.mqtt.client as mqtt

from ..logging import LogEvent, StructuredLogger


class BasePublisher(ABC):
    """
    Abstract base class for MQTT publishers.

    Attributes:
        broker_host: MQTT broker hostname
        broker_port: MQTT broker port
        topic: MQTT topic to publish to
        client_id: MQTT client identifier
        qos: Quality of Service
        logger: Structured logger instance

    Thread Safety:
        publish() may be called from any thread; paho-mqtt serializes
        access to the socket and the counters are lock-protected.
    """

    def __init__(
        self,
        broker_host: str,
        broker_port: int,
        topic: str,
        client_id: str,
        logger: StructuredLogger,
        username: Optional[str] = None,
        password: Optional[str] = None,
        qos: int = 0
    ):
        """
        Initialize MQTT publisher.

        Args:
            broker_host: MQTT broker hostname
            broker_port: MQTT broker port
            topic: Topic to publish to
            client_id: Unique client identifier
            logger: Structured logger for observability
            username: MQTT authentication username (optional)
            password: MQTT authentication password (optional)
            qos: Quality of Service (0=fire-and-forget, 1=at-least-once)
        """
        if qos not in (0, 1, 2):
            raise ValueError(f"qos must be 0, 1 or 2, got {qos}")

        self.broker_host = broker_host
        self.broker_port = broker_port
        self.topic = topic
        self.client_id = client_id
        self.logger = logger
        self.qos = qos

        self.client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=client_id)
        if username and password:
            self.client.username_pw_set(username, password)

        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect

        self._connected = threading.Event()
        self._message_count = 0
        self._failed_count = 0
        self._stats_lock = threading.Lock()

    @property
    def broker(self) -> str:
        return f"{self.broker_host}:{self.broker_port}"

    def _on_connect(self, client, userdata, flags, reason_code, properties) -> None:
        if reason_code.is_failure:
            self.logger.error(
                event=LogEvent.MQTT_CONNECTION_ERROR,
                message=f"Broker refused connection ({reason_code})",
                metadata={'broker': self.broker}
            )
            return

        self._connected.set()
        self.logger.info(
            event=LogEvent.MQTT_CONNECTED,
            message="Connected to MQTT broker",
            metadata={
                'broker': self.broker,
                'client_id': self.client_id,
                'topic': self.topic
            }
        )

    def _on_disconnect(self, client, userdata, flags, reason_code, properties) -> None:
        self._connected.clear()
        self.logger.warning(
            event=LogEvent.MQTT_DISCONNECTED,
            message="Disconnected from MQTT broker",
            metadata={
                'broker': self.broker,
                'reason_code': str(reason_code)
            }
        )

    def connect(self, timeout: float = 10.0) -> bool:
        """
        Connect to MQTT broker and start the network loop.

        Args:
            timeout: Seconds to wait for the broker's CONNACK

        Returns:
            True if connected, False otherwise (the reason is logged)
        """
        try:
            self.client.connect(self.broker_host, self.broker_port)
        except (OSError, ValueError) as e:
            self.logger.error(
                event=LogEvent.MQTT_CONNECTION_ERROR,
                message="Failed to connect to broker",
                exc_info=e,
                metadata={'broker': self.broker}
            )
            return False

        self.client.loop_start()
        if self._connected.wait(timeout=timeout):
            return True

        self.logger.error(
            event=LogEvent.MQTT_CONNECTION_ERROR,
            message="Connection timeout",
            metadata={'broker': self.broker, 'timeout': timeout}
        )
        self.client.loop_stop()
        return False

    def disconnect(self) -> None:
        """Stop the network loop and disconnect."""
        self.client.disconnect()
        self.client.loop_stop()
        self._connected.clear()
        self.logger.info(
            event=LogEvent.MQTT_DISCONNECTED,
            message="Publisher disconnected",
            metadata={'message_count': self._message_count}
        )

    def is_connected(self) -> bool:
        return self._connected.is_set()

    @abstractmethod
    def format_message(self, *args, **kwargs) -> Dict[str, Any]:
        """
        Format message for publication.

        Returns:
            Dictionary ready for JSON serialization
        """
        raise NotImplementedError("Subclasses must implement format_message()")

    def publish(self, message_data: Dict[str, Any], retain: bool = False) -> bool:
        """
        Publish a pre-formatted message.

        Args:
            message_data: Message dictionary (already formatted)
            retain: MQTT retain flag

        Returns:
            True if the broker client accepted the message
        """
        if not self._connected.is_set():
            self._record_failure()
            self.logger.warning(
                event=LogEvent.MQTT_PUBLISH_FAILED,
                message="Cannot publish: not connected to broker",
                metadata={'topic': self.topic}
            )
            return False

        try:
            payload = json.dumps(message_data)
        except (TypeError, ValueError) as e:
            self._record_failure()
            self.logger.error(
                event=LogEvent.SERIALIZATION_ERROR,
                message="Message is not JSON-serializable",
                exc_info=e,
                metadata={'topic': self.topic}
            )
            return False

        result = self.client.publish(
            topic=self.topic,
            payload=payload,
            qos=self.qos,
            retain=retain
        )

        if result.rc != mqtt.MQTT_ERR_SUCCESS:
            self._record_failure()
            self.logger.warning(
                event=LogEvent.MQTT_PUBLISH_FAILED,
                message=f"Publish failed ({mqtt.error_string(result.rc)})",
                metadata={'topic': self.topic}
            )
            return False

        with self._stats_lock:
            self._message_count += 1
            count = self._message_count

        self.logger.debug(
            event=LogEvent.MQTT_PUBLISH_SUCCESS,
            message="Published message",
            metadata={'topic': self.topic, 'message_count': count, 'qos': self.qos}
        )
        return True

    def _record_failure(self) -> None:
        with self._stats_lock:
            self._failed_count += 1

    def get_stats(self) -> Dict[str, Any]:
        """Message counters and connection status."""
        with self._stats_lock:
            return {
                'message_count': self._message_count,
                'failed_count': self._failed_count,
                'connected': self._connected.is_set(),
                'topic': self.topic,
                'broker': self.broker
            }
