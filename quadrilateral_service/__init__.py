"""
Quadrilateral Device Bridge Service.

Runs a QuadrilateralEngine behind MQTT: device samples in, shape category
changes out.

Usage:
    config = ServiceConfig.from_yaml("config/bridge.yaml")
    service = DeviceBridgeService(config, subscriber, shape_event_publisher)
    service.start()
    service.wait()
"""

from quadrilateral_service.config import MQTTConfig, ServiceConfig
from quadrilateral_service.service import (
    DeviceBridgeService,
    build_shape_event_message,
    sample_to_request,
)

__all__ = [
    "DeviceBridgeService",
    "MQTTConfig",
    "ServiceConfig",
    "build_shape_event_message",
    "sample_to_request",
]
