"""
Device Bridge Service - connects device samples to the shape engine.

This module provides the DeviceBridgeService class, which owns one
QuadrilateralEngine, feeds it the device samples arriving over MQTT, ticks
it at a fixed rate and publishes a ShapeEventMessage whenever the figure's
category changes.

Threading Model:
- MQTT Network Thread (paho-mqtt internal, calls on_sample)
- Tick Thread (our thread, the only one that touches engine state)
- MQTT Publisher Thread (our thread, drains publish_queue)
"""

import logging
import queue
import threading
from typing import Any, Dict, Optional

from quadrilateral_mqtt.schemas import (
    SCHEMA_VERSION,
    DeviceSampleMessage,
    SampleKind,
    ShapeEventMessage,
    Timestamp,
    Vector2,
)
from quadrilateral_shape import QuadrilateralEngine, ShapeChangedEvent, TickResult, VertexLabel
from quadrilateral_shape.requests import (
    MovementRequest,
    RotationSample,
    VertexDeltaSample,
    VertexMoveRequest,
)
from quadrilateral_service.config import ServiceConfig

logger = logging.getLogger(__name__)


def sample_to_request(sample: DeviceSampleMessage) -> MovementRequest:
    """
    Convert a wire sample to an engine request.

    Raises:
        ValueError: If the sample cannot be expressed as a request
    """
    if sample.kind == SampleKind.ROTATION:
        return RotationSample(rotation=sample.rotation)

    vertex = VertexLabel.parse(sample.vertex)
    if sample.kind == SampleKind.VERTEX_DELTA:
        return VertexDeltaSample(vertex=vertex, delta=sample.vector.as_tuple(), from_device=True)
    return VertexMoveRequest(vertex=vertex, position=sample.vector.as_tuple(), from_device=True)


def build_shape_event_message(
    event: ShapeChangedEvent,
    positions: Dict[VertexLabel, Any],
    service_id: str
) -> ShapeEventMessage:
    """Build the wire message for a category change."""
    snapshot = event.snapshot.to_dict()
    return ShapeEventMessage(
        schema_version=SCHEMA_VERSION,
        timestamp=Timestamp.now(),
        service_id=service_id,
        tick=event.tick,
        previous=event.previous.value,
        current=event.current.value,
        angles=snapshot['angles'],
        lengths=snapshot['lengths'],
        area=snapshot['area'],
        positions={
            label.value: Vector2(x=point[0], y=point[1]) for label, point in positions.items()
        },
    )


class DeviceBridgeService:
    """
    Device bridge service.

    Pipeline:
    1. DeviceSampleSubscriber decodes samples (MQTT thread) → engine.submit()
    2. Tick thread calls engine.tick() every 1 / tick_hz seconds
    3. Engine listener turns ShapeChangedEvents into ShapeEventMessages
       and queues them
    4. Publisher thread sends queued messages

    Thread Safety:
    - engine.submit(): thread-safe (queue.Queue inside the engine)
    - engine.tick() and every other engine call: tick thread only
    - publish_queue: thread-safe queue.Queue

    Usage:
        config = ServiceConfig.from_yaml("config/bridge.yaml")
        service = DeviceBridgeService(config, subscriber, shape_event_publisher)
        service.start()
        service.wait()  # Blocks until stopped
    """

    def __init__(
        self,
        config: ServiceConfig,
        subscriber,  # DeviceSampleSubscriber
        shape_event_publisher,  # ShapeEventPublisher
        engine: Optional[QuadrilateralEngine] = None,
    ):
        """
        Initialize device bridge service.

        Args:
            config: Service configuration
            subscriber: Subscriber delivering device samples; its on_sample
                callback must be this service's on_sample
            shape_event_publisher: Publisher for shape events
            engine: Engine to drive (default: built from config.engine)
        """
        self.config = config
        self.subscriber = subscriber
        self.shape_event_publisher = shape_event_publisher

        self.engine = engine or QuadrilateralEngine(config.engine)
        self.engine.add_listener(self._on_shape_changed)

        # MQTT publishing
        self.publish_queue: "queue.Queue[ShapeEventMessage]" = queue.Queue(maxsize=256)
        self.publisher_thread: Optional[threading.Thread] = None
        self.tick_thread: Optional[threading.Thread] = None
        self.stop_event = threading.Event()

        # Stats (written from several threads)
        self._stats_lock = threading.Lock()
        self._samples_accepted = 0
        self._samples_rejected = 0
        self._events_dropped = 0
        self._tick_errors = 0

        # Lifecycle state
        self._running = False
        self._stopped_event = threading.Event()

        logger.info(
            f"DeviceBridgeService initialized for service_id={config.service_id} "
            f"(tick_hz={config.tick_hz})"
        )

    # ─────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────

    def start(self):
        """
        Start the bridge (non-blocking).

        Lifecycle:
        1. Connect shape event publisher
        2. Connect and start subscriber
        3. Start publisher and tick threads

        Raises:
            RuntimeError: If either MQTT client cannot connect
        """
        if self._running:
            logger.warning("Service already running")
            return

        logger.info("Starting device bridge service")

        if not self.shape_event_publisher.connect(timeout=5.0):
            raise RuntimeError("Failed to connect to MQTT broker (shape event publisher)")

        if not self.subscriber.connect(timeout=5.0):
            self.shape_event_publisher.disconnect()
            raise RuntimeError("Failed to connect to MQTT broker (device subscriber)")
        self.subscriber.start()

        self.stop_event.clear()
        self._stopped_event.clear()

        self.publisher_thread = threading.Thread(
            target=self._publish_loop,
            name="MQTTPublisherThread",
            daemon=True
        )
        self.publisher_thread.start()

        self.tick_thread = threading.Thread(
            target=self._tick_loop,
            name="EngineTickThread",
            daemon=True
        )
        self.tick_thread.start()

        self._running = True
        logger.info("✅ Device bridge service started")

    def wait(self):
        """Block until stop() is called."""
        if not self._running:
            logger.warning("Service not running")
            return

        try:
            while not self._stopped_event.wait(timeout=0.5):
                pass
        except KeyboardInterrupt:
            logger.info("Received KeyboardInterrupt, stopping...")
            self.stop()

    def stop(self):
        """
        Stop the bridge gracefully.

        Lifecycle:
        1. Stop subscriber (no new samples)
        2. Stop tick thread
        3. Flush and stop publisher thread
        4. Disconnect publisher
        """
        if not self._running:
            logger.warning("Service not running")
            return

        logger.info("Stopping device bridge service")

        self.subscriber.stop()

        self.stop_event.set()
        if self.tick_thread:
            self.tick_thread.join(timeout=5.0)
            logger.info("Tick thread stopped")
        if self.publisher_thread:
            self.publisher_thread.join(timeout=5.0)
            logger.info("MQTT publisher thread stopped")

        flushed = self.publish_pending()
        if flushed:
            logger.info(f"Flushed {flushed} pending shape events")

        self.shape_event_publisher.disconnect()

        self._running = False
        self._stopped_event.set()
        logger.info(f"✅ Device bridge service stopped ({self.get_stats()})")

    def is_running(self) -> bool:
        return self._running

    # ─────────────────────────────────────────────────────────────────────
    # Callbacks
    # ─────────────────────────────────────────────────────────────────────

    def on_sample(self, sample: DeviceSampleMessage) -> None:
        """
        Queue a device sample for the next tick.

        Thread: MQTT Network Thread (paho-mqtt internal)
        """
        try:
            request = sample_to_request(sample)
        except ValueError as e:
            with self._stats_lock:
                self._samples_rejected += 1
            logger.warning(f"Rejected sample from {sample.source_id}: {e}")
            return

        self.engine.submit(request)
        with self._stats_lock:
            self._samples_accepted += 1

    def _on_shape_changed(self, event: ShapeChangedEvent) -> None:
        """Engine listener (Tick Thread)."""
        message = build_shape_event_message(
            event, self.engine.positions(), self.config.service_id
        )
        logger.info(f"🔷 Shape changed {message.transition} (tick={event.tick})")

        try:
            self.publish_queue.put_nowait(message)
        except queue.Full:
            with self._stats_lock:
                self._events_dropped += 1
            logger.warning("Publish queue full, dropping shape event")

    # ─────────────────────────────────────────────────────────────────────
    # Threads
    # ─────────────────────────────────────────────────────────────────────

    def step(self) -> TickResult:
        """Run one engine tick (Tick Thread, or the caller in tests)."""
        return self.engine.tick()

    def _tick_loop(self):
        logger.info("Tick loop started")
        period = self.config.tick_period

        while not self.stop_event.is_set():
            try:
                self.step()
            except Exception as e:
                with self._stats_lock:
                    self._tick_errors += 1
                logger.error(f"Tick failed: {e}", exc_info=True)
            self.stop_event.wait(timeout=period)

        logger.info(f"Tick loop stopped (tick={self.engine.tick_count})")

    def _publish_loop(self):
        """
        MQTT publisher thread loop.

        Thread: MQTT Publisher Thread (our thread)
        """
        logger.info("MQTT publisher loop started")

        while not self.stop_event.is_set():
            try:
                message = self.publish_queue.get(timeout=0.1)
            except queue.Empty:
                continue
            self.shape_event_publisher.publish_shape_event(message)

        logger.info("MQTT publisher loop stopped")

    def publish_pending(self) -> int:
        """Publish everything currently queued; returns the number of messages sent."""
        sent = 0
        while True:
            try:
                message = self.publish_queue.get_nowait()
            except queue.Empty:
                return sent
            if self.shape_event_publisher.publish_shape_event(message):
                sent += 1

    def get_stats(self) -> Dict[str, Any]:
        """Counters for samples, ticks and published events."""
        with self._stats_lock:
            return {
                'service_id': self.config.service_id,
                'running': self._running,
                'tick': self.engine.tick_count,
                'samples_accepted': self._samples_accepted,
                'samples_rejected': self._samples_rejected,
                'events_dropped': self._events_dropped,
                'tick_errors': self._tick_errors,
                'pending_events': self.publish_queue.qsize(),
            }
