"""
Device Sample Publisher
======================

Bounded Context: Device Input Production

Used by device decoders and the CLI to feed samples to a running bridge.

Message Flow:
    Device decoder / CLI → DeviceSampleMessage → DeviceSamplePublisher → MQTT Broker
"""

from typing import Any, Dict, Optional

from ..logging import LogEvent, StructuredLogger
from ..schemas import DeviceSampleMessage
from .base import BasePublisher


class DeviceSamplePublisher(BasePublisher):
    """
    Publisher for device samples.

    Defaults to QoS 0; a lost sample is superseded by the next one.
    """

    def __init__(
        self,
        broker_host: str,
        topic: str,
        logger: StructuredLogger,
        broker_port: int = 1883,
        client_id: str = "quadrilateral_device_publisher",
        username: Optional[str] = None,
        password: Optional[str] = None,
        qos: int = 0
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
        self._sequence = 0

    def next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    def format_message(self, sample: DeviceSampleMessage) -> Dict[str, Any]:
        formatted = sample.to_dict()
        self.logger.debug(
            event=LogEvent.DEVICE_SAMPLE_SERIALIZED,
            message=f"Serialized {sample.kind.value} sample",
            metadata={
                'source_id': sample.source_id,
                'vertex': sample.vertex,
                'sequence': sample.sequence
            }
        )
        return formatted

    def publish_sample(self, sample: DeviceSampleMessage) -> bool:
        """Publish one device sample."""
        return self.publish(self.format_message(sample))
