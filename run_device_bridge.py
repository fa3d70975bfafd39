#!/usr/bin/env python3
"""
Device Bridge Service - Entry Point
===================================

This script starts the quadrilateral device bridge, which:
- Subscribes to normalized device samples over MQTT
- Feeds them to a QuadrilateralEngine ticking at a fixed rate
- Publishes a shape event whenever the figure's category changes

Usage:
    python run_device_bridge.py --config config/bridge.yaml

Architecture:
    - DeviceBridgeService: Orchestrator (quadrilateral_service)
    - DeviceSampleSubscriber: Receives device samples (quadrilateral_mqtt)
    - ShapeEventPublisher: Publishes shape events (quadrilateral_mqtt)
    - QuadrilateralEngine: Constraint solving and classification (quadrilateral_shape)

Signals:
    - SIGTERM: Graceful shutdown
    - SIGINT (Ctrl+C): Graceful shutdown

Logs:
    - Console: INFO level
    - File: logs/bridge.log (INFO level)
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import Optional

from quadrilateral_mqtt import DeviceSampleSubscriber, ShapeEventPublisher, create_logger
from quadrilateral_service import DeviceBridgeService, ServiceConfig


# ─────────────────────────────────────────────────────────────────────────────
# Logging Setup
# ─────────────────────────────────────────────────────────────────────────────

def setup_logging(log_file: Optional[Path] = None, verbose: bool = False) -> logging.Logger:
    """
    Setup logging for the bridge.

    Args:
        log_file: Optional path to log file
        verbose: Log engine moves at DEBUG level
    """
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            *(
                [logging.FileHandler(log_file)]
                if log_file
                else []
            )
        ]
    )

    return logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Main Service
# ─────────────────────────────────────────────────────────────────────────────

class BridgeApp:
    """
    Application wrapper for DeviceBridgeService.

    Handles:
    - Configuration loading
    - MQTT client construction
    - Signal handling (SIGTERM, SIGINT)
    - Graceful shutdown
    """

    def __init__(self, config_path: Path, log_file: Optional[Path] = None, verbose: bool = False):
        self.config_path = config_path
        self.logger = setup_logging(log_file, verbose)

        self.config: Optional[ServiceConfig] = None
        self.service: Optional[DeviceBridgeService] = None

        self._shutdown_requested = False

    def setup(self):
        """
        Setup all components.

        Steps:
        1. Load configuration from YAML
        2. Create structured logger for the MQTT clients
        3. Create shape event publisher
        4. Create service and its device subscriber
        """
        self.logger.info("=" * 80)
        self.logger.info("🚀 Quadrilateral Device Bridge - Starting")
        self.logger.info("=" * 80)

        self.logger.info(f"📄 Loading configuration: {self.config_path}")
        self.config = ServiceConfig.from_yaml(self.config_path)
        self.logger.info(f"✅ Configuration loaded (service_id={self.config.service_id})")

        mqtt_logger = create_logger(component="bridge")
        mqtt = self.config.mqtt

        self.logger.info("📤 Creating MQTT clients")
        shape_event_publisher = ShapeEventPublisher(
            broker_host=mqtt.broker,
            broker_port=mqtt.port,
            topic=self.config.shape_event_topic,
            logger=mqtt_logger,
            client_id=f"bridge_events_{self.config.service_id}",
            username=mqtt.username,
            password=mqtt.password,
            qos=mqtt.event_qos,
        )

        # The subscriber callback is bound once the service exists
        subscriber = DeviceSampleSubscriber(
            broker_host=mqtt.broker,
            broker_port=mqtt.port,
            logger=mqtt_logger,
            sample_topic=self.config.sample_topic,
            on_sample=lambda sample: self.service.on_sample(sample),
            client_id=f"bridge_samples_{self.config.service_id}",
            username=mqtt.username,
            password=mqtt.password,
            qos=mqtt.qos,
        )
        self.logger.info(f"  - Sample topic: {self.config.sample_topic}")
        self.logger.info(f"  - Shape event topic: {self.config.shape_event_topic}")

        self.service = DeviceBridgeService(
            config=self.config,
            subscriber=subscriber,
            shape_event_publisher=shape_event_publisher,
        )
        self.logger.info(f"✅ Service created ({self.service.engine!r})")
        self.logger.info("=" * 80)

    def run(self):
        """Run the bridge until a signal arrives."""
        if not self.service:
            raise RuntimeError("Service not initialized. Call setup() first.")

        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

        self.service.start()
        self.logger.info("Press Ctrl+C to stop")
        self.service.wait()

    def shutdown(self):
        if self._shutdown_requested:
            self.logger.warning("⚠️  Shutdown already in progress")
            return
        self._shutdown_requested = True

        self.logger.info("🛑 Shutting down device bridge")
        if self.service and self.service.is_running():
            self.service.stop()
        self.logger.info("✅ Shutdown complete")

    def _signal_handler(self, signum, frame):
        self.logger.info(f"⚠️  Received signal {signal.Signals(signum).name} ({signum})")
        self.shutdown()


# ─────────────────────────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────────────────────────

def parse_args():
    parser = argparse.ArgumentParser(
        description="Quadrilateral Device Bridge - MQTT samples in, shape events out",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start with the example config
  python run_device_bridge.py --config config/bridge.yaml

  # Console only, with per-move debug logs
  python run_device_bridge.py --config config/bridge.yaml --no-log-file --verbose
        """
    )
    parser.add_argument(
        '--config',
        type=Path,
        required=True,
        help='Path to bridge configuration YAML file'
    )
    parser.add_argument(
        '--log-file',
        type=Path,
        default=Path('logs/bridge.log'),
        help='Path to log file (default: logs/bridge.log)'
    )
    parser.add_argument(
        '--no-log-file',
        action='store_true',
        help='Disable file logging (console only)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Log every clipped or rejected move'
    )
    return parser.parse_args()


def main():
    args = parse_args()

    if not args.config.exists():
        print(f"❌ Error: Configuration file not found: {args.config}", file=sys.stderr)
        sys.exit(1)

    app = BridgeApp(
        config_path=args.config,
        log_file=None if args.no_log_file else args.log_file,
        verbose=args.verbose,
    )

    try:
        app.setup()
        app.run()
    except (RuntimeError, ValueError, OSError) as e:
        print(f"❌ Fatal error: {e}", file=sys.stderr)
        app.shutdown()
        sys.exit(1)


if __name__ == '__main__':
    main()
