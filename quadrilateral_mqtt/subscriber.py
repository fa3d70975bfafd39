"""
MQTT Subscriber
==============

Bounded Context: Message Consumption

Receives device samples (and, for monitoring tools, shape events) from
the broker and hands them to callbacks as typed messages.

Design:
- Callback-based (callbacks run in paho-mqtt's network thread)
- Automatic deserialization; malformed messages are logged and dropped
- Topics re-subscribed on every (re)connect

Message Flow:
    1. Subscriber receives JSON from MQTT
    2. Deserializes to DeviceSampleMessage or ShapeEventMessage
    3. Invokes the matching callback
    4. Continues listening

Example (device bridge):
    >>> subscriber = DeviceSampleSubscriber(
    ...     broker_host="localhost",
    ...     sample_topic="quadrilateral/devices/bridge_01/samples",
    ...     on_sample=lambda msg: print(msg.kind, msg.vertex),
    ...     logger=create_logger("bridge")
    ... )
    >>> subscriber.connect()
    >>> subscriber.start()
"""

import json
import threading
from typing import Any, Callable, Dict, Optional

import paho.mqtt.client as mqtt

from .logging import LogEvent, StructuredLogger
from .schemas import DeviceSampleMessage, ShapeEventMessage


class DeviceSampleSubscriber:
    """
    MQTT subscriber for device samples and shape events.

    Either topic may be omitted; at least one must be given.

    Attributes:
        broker_host: MQTT broker hostname
        broker_port: MQTT broker port
        sample_topic: Topic for device samples (optional)
        shape_event_topic: Topic for shape events (optional)
        client_id: MQTT client identifier
        logger: Structured logger instance

    Thread Safety:
        Callbacks are invoked in the MQTT thread. Keep them fast or
        hand the message to another thread (the bridge only queues it).
    """

    def __init__(
        self,
        broker_host: str,
        logger: StructuredLogger,
        sample_topic: Optional[str] = None,
        on_sample: Optional[Callable[[DeviceSampleMessage], None]] = None,
        shape_event_topic: Optional[str] = None,
        on_shape_event: Optional[Callable[[ShapeEventMessage], None]] = None,
        broker_port: int = 1883,
        client_id: str = "quadrilateral_subscriber",
        username: Optional[str] = None,
        password: Optional[str] = None,
        qos: int = 0
    ):
        if sample_topic is None and shape_event_topic is None:
            raise ValueError("At least one of sample_topic or shape_event_topic is required")
        if (sample_topic is None) != (on_sample is None):
            raise ValueError("sample_topic and on_sample must be given together")
        if (shape_event_topic is None) != (on_shape_event is None):
            raise ValueError("shape_event_topic and on_shape_event must be given together")

        self.broker_host = broker_host
        self.broker_port = broker_port
        self.sample_topic = sample_topic
        self.shape_event_topic = shape_event_topic
        self.client_id = client_id
        self.logger = logger
        self.qos = qos

        self.on_sample = on_sample
        self.on_shape_event = on_shape_event

        self.client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=client_id)
        if username and password:
            self.client.username_pw_set(username, password)

        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect
        self.client.on_message = self._on_message

        self._connected = threading.Event()
        self._running = False
        self._stats_lock = threading.Lock()
        self._message_count = {'samples': 0, 'shape_events': 0, 'rejected': 0}

    @property
    def topics(self) -> Dict[str, str]:
        topics = {}
        if self.sample_topic is not None:
            topics['sample_topic'] = self.sample_topic
        if self.shape_event_topic is not None:
            topics['shape_event_topic'] = self.shape_event_topic
        return topics

    def _on_connect(self, client, userdata, flags, reason_code, properties) -> None:
        if reason_code.is_failure:
            self.logger.error(
                event=LogEvent.MQTT_CONNECTION_ERROR,
                message=f"Broker refused connection ({reason_code})",
                metadata={'broker': f"{self.broker_host}:{self.broker_port}"}
            )
            return

        self._connected.set()
        for topic in self.topics.values():
            client.subscribe(topic, qos=self.qos)

        self.logger.info(
            event=LogEvent.MQTT_CONNECTED,
            message="Connected to MQTT broker and subscribed to topics",
            metadata={'broker': f"{self.broker_host}:{self.broker_port}", **self.topics}
        )

    def _on_disconnect(self, client, userdata, flags, reason_code, properties) -> None:
        self._connected.clear()
        self.logger.warning(
            event=LogEvent.MQTT_DISCONNECTED,
            message="Disconnected from MQTT broker",
            metadata={
                'broker': f"{self.broker_host}:{self.broker_port}",
                'reason_code': str(reason_code)
            }
        )

    def _on_message(self, client, userdata, msg) -> None:
        """
        Decode JSON and route by topic.

        Malformed payloads are logged and counted, never raised into
        the network thread.
        """
        try:
            data = json.loads(msg.payload.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            self._count('rejected')
            self.logger.error(
                event=LogEvent.DESERIALIZATION_ERROR,
                message="Failed to decode JSON message",
                exc_info=e,
                metadata={'topic': msg.topic}
            )
            return

        if not isinstance(data, dict):
            self._count('rejected')
            self.logger.error(
                event=LogEvent.SCHEMA_VALIDATION_ERROR,
                message=f"Expected a JSON object, got {type(data).__name__}",
                metadata={'topic': msg.topic}
            )
            return

        if msg.topic == self.sample_topic:
            self._handle_sample_message(data)
        elif msg.topic == self.shape_event_topic:
            self._handle_shape_event_message(data)
        else:
            self.logger.warning(
                event=LogEvent.DESERIALIZATION_ERROR,
                message=f"Received message from unknown topic: {msg.topic}"
            )

    def _handle_sample_message(self, data: Dict[str, Any]) -> None:
        try:
            sample = DeviceSampleMessage.from_dict(data)
        except ValueError as e:
            self._count('rejected')
            self.logger.error(
                event=LogEvent.SCHEMA_VALIDATION_ERROR,
                message="Device sample failed schema validation",
                exc_info=e,
                metadata={'data': data}
            )
            return

        self._count('samples')
        self.logger.debug(
            event=LogEvent.DEVICE_SAMPLE_RECEIVED,
            message=f"Received {sample.kind.value} sample",
            metadata={
                'source_id': sample.source_id,
                'vertex': sample.vertex,
                'sequence': sample.sequence
            }
        )
        self.on_sample(sample)

    def _handle_shape_event_message(self, data: Dict[str, Any]) -> None:
        try:
            shape_event = ShapeEventMessage.from_dict(data)
        except ValueError as e:
            self._count('rejected')
            self.logger.error(
                event=LogEvent.SCHEMA_VALIDATION_ERROR,
                message="Shape event failed schema validation",
                exc_info=e,
                metadata={'data': data}
            )
            return

        self._count('shape_events')
        self.logger.info(
            event=LogEvent.SHAPE_EVENT_RECEIVED,
            message=f"Received shape change {shape_event.transition}",
            metadata={'tick': shape_event.tick, 'service_id': shape_event.service_id}
        )
        self.on_shape_event(shape_event)

    def _count(self, key: str) -> None:
        with self._stats_lock:
            self._message_count[key] += 1

    def connect(self, timeout: float = 10.0) -> bool:
        """
        Connect to MQTT broker.

        The network loop starts here so the CONNACK can be received;
        start() only marks the subscriber as running.

        Returns:
            True if connected successfully, False otherwise
        """
        try:
            self.client.connect(self.broker_host, self.broker_port)
        except (OSError, ValueError) as e:
            self.logger.error(
                event=LogEvent.MQTT_CONNECTION_ERROR,
                message="Failed to connect to broker",
                exc_info=e,
                metadata={'broker': f"{self.broker_host}:{self.broker_port}"}
            )
            return False

        self.client.loop_start()
        if self._connected.wait(timeout=timeout):
            return True

        self.logger.error(
            event=LogEvent.MQTT_CONNECTION_ERROR,
            message="Connection timeout",
            metadata={'timeout': timeout}
        )
        self.client.loop_stop()
        return False

    def start(self) -> None:
        """Start delivering messages to callbacks (non-blocking)."""
        if not self._connected.is_set():
            self.logger.warning(
                event=LogEvent.MQTT_CONNECTION_ERROR,
                message="Cannot start: not connected to broker"
            )
            return

        self._running = True
        self.logger.info(
            event=LogEvent.MQTT_CONNECTED,
            message="Subscriber started (listening for messages)",
            metadata=self.topics
        )

    def stop(self) -> None:
        """Stop the network loop and disconnect."""
        self._running = False
        self.client.disconnect()
        self.client.loop_stop()

        self.logger.info(
            event=LogEvent.MQTT_DISCONNECTED,
            message="Subscriber stopped",
            metadata=self.get_stats()
        )

    def is_connected(self) -> bool:
        return self._connected.is_set()

    def is_running(self) -> bool:
        return self._running

    def get_stats(self) -> Dict[str, Any]:
        """Message counters and connection status."""
        with self._stats_lock:
            return {
                'samples_received': self._message_count['samples'],
                'shape_events_received': self._message_count['shape_events'],
                'rejected': self._message_count['rejected'],
                'connected': self._connected.is_set(),
                'running': self._running,
                'broker': f"{self.broker_host}:{self.broker_port}",
                **self.topics
            }
