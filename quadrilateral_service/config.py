"""
Configuration schema for the device bridge service.

This module defines the configuration structure for the bridge: service
identity, tick rate, MQTT broker settings and topic templates, plus the
engine configuration (tolerances, bounds, initial figure).
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from quadrilateral_shape.config import EngineConfig


@dataclass(frozen=True)
class MQTTConfig:
    """MQTT broker configuration."""

    broker: str = "localhost"
    port: int = 1883
    username: Optional[str] = None
    password: Optional[str] = None
    qos: int = 0          # Device samples (fire-and-forget)
    event_qos: int = 1    # Shape events (at-least-once)

    sample_topic: str = "quadrilateral/devices/{service_id}/samples"
    shape_event_topic: str = "quadrilateral/shapes/{service_id}/events"

    def __post_init__(self):
        """Validate MQTT configuration."""
        if not self.broker:
            raise ValueError("MQTT broker cannot be empty")

        if not 1 <= self.port <= 65535:
            raise ValueError(
                f"MQTT port must be in [1, 65535], got {self.port}"
            )

        for name in ("qos", "event_qos"):
            value = getattr(self, name)
            if value not in {0, 1, 2}:
                raise ValueError(
                    f"MQTT {name} must be 0, 1, or 2, got {value}"
                )

    def sample_topic_for(self, service_id: str) -> str:
        return self.sample_topic.format(service_id=service_id)

    def shape_event_topic_for(self, service_id: str) -> str:
        return self.shape_event_topic.format(service_id=service_id)


@dataclass(frozen=True)
class ServiceConfig:
    """
    Main configuration for DeviceBridgeService.

    Loaded from YAML and validated at startup.
    Immutable after construction (frozen dataclass).
    """

    service_id: str
    tick_hz: float = 60.0
    engine: EngineConfig = field(default_factory=EngineConfig)
    mqtt: MQTTConfig = field(default_factory=MQTTConfig)

    def __post_init__(self):
        """Validate service configuration."""
        if not self.service_id:
            raise ValueError("service_id cannot be empty")

        if not 1 <= self.tick_hz <= 1000:
            raise ValueError(f"tick_hz must be in [1, 1000], got {self.tick_hz}")

    @property
    def tick_period(self) -> float:
        return 1.0 / self.tick_hz

    @property
    def sample_topic(self) -> str:
        return self.mqtt.sample_topic_for(self.service_id)

    @property
    def shape_event_topic(self) -> str:
        return self.mqtt.shape_event_topic_for(self.service_id)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "ServiceConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            service_id: "bridge_01"
            tick_hz: 60

            engine:
              device_connection: true
              tolerances:
                device_grid_spacing: 0.05
              bounds:
                min_x: -5.0
                max_x: 5.0
              initial_positions: [[-0.25, -0.25], [0.25, -0.25], [0.25, 0.25], [-0.25, 0.25]]

            mqtt:
              broker: "localhost"
              port: 1883
        """
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        try:
            return cls(
                service_id=str(data["service_id"]),
                tick_hz=float(data.get("tick_hz", 60.0)),
                engine=EngineConfig.from_dict(data.get("engine", {})),
                mqtt=MQTTConfig(**data.get("mqtt", {})),
            )
        except KeyError as e:
            raise ValueError(f"Missing required service config field: {e}")
        except TypeError as e:
            raise ValueError(f"Invalid service config in {yaml_path}: {e}")
