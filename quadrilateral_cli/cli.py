"""
Quadrilateral CLI - Main entry point.

Commands:
- classify: name the quadrilateral formed by four points
- simulate: replay a YAML script of moves against a local engine
- send-sample: publish one device sample to a running bridge
- watch: print shape events published by a running bridge
"""

import argparse
import json
import math
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from quadrilateral_mqtt import (
    DeviceSampleMessage,
    DeviceSamplePublisher,
    DeviceSampleSubscriber,
    ShapeEventMessage,
    create_logger,
)
from quadrilateral_service.config import MQTTConfig
from quadrilateral_shape import (
    EngineConfig,
    QuadrilateralEngine,
    RotationSample,
    ShapeClassifier,
    ShapeSnapshot,
    ToleranceConfig,
    VertexLabel,
    VertexMoveRequest,
)


def load_yaml_config(config_path: str) -> Dict[str, Any]:
    """
    Load YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the YAML is invalid or not a mapping
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(path) as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}")

    if not isinstance(config, dict):
        raise ValueError(f"Expected a mapping in {config_path}, got {type(config).__name__}")
    return config


def _format_angles(snapshot: ShapeSnapshot) -> str:
    parts = []
    for label in VertexLabel:
        angle = snapshot.angle(label)
        text = "undefined" if angle is None else f"{math.degrees(angle):.2f}°"
        parts.append(f"{label.value}={text}")
    return " ".join(parts)


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────

def cmd_classify(args: argparse.Namespace) -> int:
    values = args.coordinates
    points = [(values[i], values[i + 1]) for i in range(0, 8, 2)]

    snapshot = ShapeSnapshot.from_positions(points)
    classifier = ShapeClassifier.from_tolerances(ToleranceConfig(), device_connection=args.device)
    category = classifier.classify(snapshot)

    if args.json:
        print(json.dumps({'category': category.value, **snapshot.to_dict()}))
        return 0

    print(category.value)
    if args.verbose:
        print(f"  angles:  {_format_angles(snapshot)}")
        lengths = " ".join(
            f"{name}={length:.4f}" for name, length in zip(("AB", "BC", "CD", "DA"), snapshot.lengths)
        )
        print(f"  lengths: {lengths}")
        print(f"  area:    {snapshot.area:.4f}")
        parallel = classifier.parallel_side_pairs(snapshot)
        if parallel:
            print("  parallel: " + ", ".join(f"{p.first.value}|{p.second.value}" for p in parallel))
    return 0


def _parse_step(engine: QuadrilateralEngine, step: Any, index: int) -> int:
    """
    Apply one script step; returns the number of ticks it asks for.

    Raises:
        ValueError: If the step is malformed
    """
    if not isinstance(step, dict) or len(step) != 1:
        raise ValueError(f"Step {index}: expected a mapping with one key, got {step!r}")

    (kind, body), = step.items()
    try:
        if kind == "tick":
            return int(body)
        if kind == "move":
            target = body["to"]
            engine.submit(VertexMoveRequest(
                VertexLabel.parse(body["vertex"]), (float(target[0]), float(target[1]))
            ))
        elif kind == "nudge":
            for _ in range(int(body.get("times", 1))):
                engine.key_press(body["vertex"], body["direction"])
        elif kind == "rotate":
            engine.submit(RotationSample(rotation=float(body)))
        elif kind == "reset":
            engine.reset()
        else:
            raise ValueError(f"unknown step kind {kind!r}")
    except (KeyError, TypeError, IndexError) as e:
        raise ValueError(f"Step {index} ({kind}): malformed ({e!r})")
    except ValueError as e:
        raise ValueError(f"Step {index} ({kind}): {e}")
    return 0


def cmd_simulate(args: argparse.Namespace) -> int:
    script = load_yaml_config(args.script)
    steps = script.get("steps")
    if not isinstance(steps, list):
        raise ValueError(f"{args.script}: 'steps' must be a list")

    config = EngineConfig.from_yaml(Path(args.config)) if args.config else EngineConfig()
    engine = QuadrilateralEngine(config)

    events: List[Dict[str, Any]] = []
    blocked = 0

    def run_ticks(count: int) -> None:
        nonlocal blocked
        for _ in range(count):
            result = engine.tick()
            blocked += sum(1 for move in result.moves if move.blocked)
            blocked += sum(1 for rotation in result.rotations if rotation.blocked)
            if result.event is not None:
                events.append(result.event.to_dict())
                if not args.json:
                    print(
                        f"tick {result.tick}: {result.event.previous.value} -> "
                        f"{result.event.current.value}"
                    )

    for index, step in enumerate(steps, start=1):
        run_ticks(_parse_step(engine, step, index))

    if engine.pending_requests():
        run_ticks(1)

    category = engine.current_category()
    positions = {label.value: list(point) for label, point in engine.positions().items()}

    if args.json:
        print(json.dumps({
            'category': category.value,
            'ticks': engine.tick_count,
            'blocked': blocked,
            'events': events,
            'positions': positions,
        }))
        return 0

    print(f"final: {category.value} after {engine.tick_count} ticks ({blocked} blocked moves)")
    for name, point in positions.items():
        print(f"  {name}: ({point[0]:.4f}, {point[1]:.4f})")
    return 0


def cmd_send_sample(args: argparse.Namespace) -> int:
    mqtt_config = MQTTConfig(broker=args.broker, port=args.port)
    topic = mqtt_config.sample_topic_for(args.service_id)

    if args.rotation is not None:
        sample = DeviceSampleMessage.rotation_sample(args.source_id, args.rotation)
    elif args.vertex is None:
        raise ValueError("--vertex is required with --delta or --position")
    elif args.delta is not None:
        sample = DeviceSampleMessage.vertex_delta(args.source_id, args.vertex, *args.delta)
    else:
        sample = DeviceSampleMessage.vertex_position(args.source_id, args.vertex, *args.position)

    publisher = DeviceSamplePublisher(
        broker_host=mqtt_config.broker,
        broker_port=mqtt_config.port,
        topic=topic,
        logger=create_logger("cli"),
        client_id=f"cli_{args.source_id}",
        qos=1,
    )
    if not publisher.connect(timeout=args.timeout):
        raise ConnectionError(f"Cannot connect to MQTT broker at {args.broker}:{args.port}")

    try:
        if not publisher.publish_sample(sample):
            raise ConnectionError(f"Failed to publish sample to {topic}")
    finally:
        publisher.disconnect()

    print(f"✅ Sample sent to {topic}: {sample.kind.value}")
    return 0


def cmd_watch(args: argparse.Namespace) -> int:
    mqtt_config = MQTTConfig(broker=args.broker, port=args.port)
    topic = mqtt_config.shape_event_topic_for(args.service_id)

    def on_shape_event(msg: ShapeEventMessage) -> None:
        print(f"[{msg.timestamp.value}] tick {msg.tick}: {msg.transition}", flush=True)

    subscriber = DeviceSampleSubscriber(
        broker_host=mqtt_config.broker,
        broker_port=mqtt_config.port,
        logger=create_logger("cli"),
        shape_event_topic=topic,
        on_shape_event=on_shape_event,
        client_id=f"cli_watch_{args.service_id}",
        qos=1,
    )
    if not subscriber.connect(timeout=args.timeout):
        raise ConnectionError(f"Cannot connect to MQTT broker at {args.broker}:{args.port}")

    subscriber.start()
    print(f"Watching {topic} (Ctrl+C to stop)")
    try:
        while subscriber.is_running():
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass
    finally:
        subscriber.stop()
    return 0


# ─────────────────────────────────────────────────────────────────────────────
# Parser
# ─────────────────────────────────────────────────────────────────────────────

def _add_broker_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--service-id",
        default="bridge_01",
        help="Target bridge service ID (default: bridge_01)"
    )
    parser.add_argument(
        "--broker",
        default="localhost",
        help="MQTT broker host (default: localhost)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=1883,
        help="MQTT broker port (default: 1883)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=5.0,
        help="Connection timeout in seconds (default: 5)"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quadrilateral-cli",
        description="Quadrilateral CLI - classify figures, replay sessions, drive a device bridge",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Name a figure (A B C D as x y pairs)
  quadrilateral-cli classify 0 0 2 0 2 1 0 1

  # Replay a scripted session against a local engine
  quadrilateral-cli simulate config/square_to_rectangle.yaml --config config/engine.yaml

  # Nudge vertex C of a running bridge
  quadrilateral-cli send-sample --vertex C --delta 0.05 0

  # Print shape changes published by a running bridge
  quadrilateral-cli watch --service-id bridge_01
"""
    )
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # classify command
    classify = subparsers.add_parser('classify', help='Classify four points')
    classify.add_argument(
        'coordinates', type=float, nargs=8, metavar='COORD',
        help='AX AY BX BY CX CY DX DY'
    )
    classify.add_argument('--device', action='store_true', help='Use device tolerances')
    classify.add_argument('--json', action='store_true', help='Print JSON')
    classify.add_argument('-v', '--verbose', action='store_true', help='Print measurements')
    classify.set_defaults(handler=cmd_classify)

    # simulate command
    simulate = subparsers.add_parser('simulate', help='Replay a YAML script of moves')
    simulate.add_argument('script', help='Path to script YAML')
    simulate.add_argument('--config', help='Path to engine config YAML')
    simulate.add_argument('--json', action='store_true', help='Print JSON summary')
    simulate.set_defaults(handler=cmd_simulate)

    # send-sample command
    send = subparsers.add_parser('send-sample', help='Publish one device sample')
    _add_broker_arguments(send)
    send.add_argument('--source-id', default='cli', help='Device identifier (default: cli)')
    send.add_argument('--vertex', choices=[label.value for label in VertexLabel])
    payload = send.add_mutually_exclusive_group(required=True)
    payload.add_argument('--delta', type=float, nargs=2, metavar=('DX', 'DY'))
    payload.add_argument('--position', type=float, nargs=2, metavar=('X', 'Y'))
    payload.add_argument('--rotation', type=float, metavar='RADIANS')
    send.set_defaults(handler=cmd_send_sample)

    # watch command
    watch = subparsers.add_parser('watch', help='Print shape events from a bridge')
    _add_broker_arguments(watch)
    watch.set_defaults(handler=cmd_watch)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        return args.handler(args)
    except (ValueError, OSError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
