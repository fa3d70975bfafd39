"""Tests for engine and service configuration."""

from pathlib import Path

import pytest

from quadrilateral_service import MQTTConfig, ServiceConfig
from quadrilateral_shape import Bounds, EngineConfig, ToleranceConfig

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


def write(tmp_path, text, name="config.yaml"):
    path = tmp_path / name
    path.write_text(text)
    return path


# ─── ToleranceConfig ─────────────────────────────────────────────────────

def test_tolerance_defaults():
    tolerances = ToleranceConfig()
    assert tolerances.comparison_epsilons() == (0.01, 0.01)
    assert tolerances.comparison_epsilons(device_connection=True) == (0.02, 0.02)


@pytest.mark.parametrize("overrides", [
    {"angle_epsilon": 0},
    {"length_epsilon": -0.1},
    {"angle_epsilon": 1.0},
    {"device_grid_spacing": -0.05},
    {"step_size": 0.05},
])
def test_invalid_tolerances(overrides):
    with pytest.raises(ValueError):
        ToleranceConfig(**overrides)


# ─── EngineConfig ────────────────────────────────────────────────────────

def test_engine_yaml_matches_defaults():
    config = EngineConfig.from_yaml(CONFIG_DIR / "engine.yaml")
    assert config == EngineConfig()


def test_engine_config_partial_yaml(tmp_path):
    path = write(tmp_path, """
tolerances:
  angle_epsilon: 0.005
bounds:
  min_x: -2.0
  max_x: 2.0
initial_positions: [[0, 0], [1, 0], [1, 1], [0, 1]]
""")
    config = EngineConfig.from_yaml(path)
    assert config.tolerances.angle_epsilon == 0.005
    assert config.tolerances.length_epsilon == 0.01
    assert config.bounds == Bounds(min_x=-2.0, max_x=2.0)
    assert config.initial_positions[2] == (1.0, 1.0)


def test_engine_config_empty_yaml(tmp_path):
    assert EngineConfig.from_yaml(write(tmp_path, "")) == EngineConfig()


def test_initial_positions_must_be_in_bounds():
    with pytest.raises(ValueError):
        EngineConfig(initial_positions=((0, 0), (1, 0), (1, 9), (0, 1)))


def test_initial_positions_need_four_points():
    with pytest.raises(ValueError):
        EngineConfig(initial_positions=((0, 0), (1, 0), (1, 1)))


def test_bounds_must_have_extent():
    with pytest.raises(ValueError):
        Bounds(min_x=1.0, max_x=1.0)


# ─── ServiceConfig ───────────────────────────────────────────────────────

def test_bridge_yaml():
    config = ServiceConfig.from_yaml(CONFIG_DIR / "bridge.yaml")
    assert config.service_id == "bridge_01"
    assert config.engine.device_connection
    assert config.engine.tolerances.device_grid_spacing == 0.05
    assert config.sample_topic == "quadrilateral/devices/bridge_01/samples"
    assert config.shape_event_topic == "quadrilateral/shapes/bridge_01/events"
    assert config.tick_period == pytest.approx(1 / 60)


def test_service_config_missing_service_id(tmp_path):
    with pytest.raises(ValueError, match="service_id"):
        ServiceConfig.from_yaml(write(tmp_path, "tick_hz: 30\n"))


def test_service_config_unknown_mqtt_field(tmp_path):
    path = write(tmp_path, "service_id: s1\nmqtt:\n  hostname: broker\n")
    with pytest.raises(ValueError):
        ServiceConfig.from_yaml(path)


@pytest.mark.parametrize("tick_hz", [0, 5000])
def test_service_config_tick_rate(tick_hz):
    with pytest.raises(ValueError):
        ServiceConfig(service_id="s1", tick_hz=tick_hz)


@pytest.mark.parametrize("overrides", [
    {"broker": ""},
    {"port": 0},
    {"qos": 3},
    {"event_qos": -1},
])
def test_invalid_mqtt_config(overrides):
    with pytest.raises(ValueError):
        MQTTConfig(**overrides)
