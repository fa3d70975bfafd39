"""Tests for MQTT message schemas."""

import json
import math

import pytest

from quadrilateral_mqtt.schemas import (
    SCHEMA_VERSION,
    DeviceSampleMessage,
    SampleKind,
    ShapeEventMessage,
    Timestamp,
    Vector2,
)


def sample_payload(**overrides):
    payload = {
        'schema_version': SCHEMA_VERSION,
        'timestamp': "2026-01-05T10:00:00+00:00",
        'source_id': "tangible_01",
        'kind': "vertex_delta",
        'vertex': "b",
        'vector': {'x': 0.05, 'y': -0.05},
        'sequence': 7,
    }
    payload.update(overrides)
    return payload


def event_payload(**overrides):
    payload = {
        'schema_version': SCHEMA_VERSION,
        'timestamp': "2026-01-05T10:00:00+00:00",
        'service_id': "bridge_01",
        'tick': 12,
        'previous': "square",
        'current': "rectangle",
        'angles': {'A': math.pi / 2, 'B': math.pi / 2, 'C': math.pi / 2, 'D': None},
        'lengths': {'AB': 1.0, 'BC': 0.5, 'CD': 1.0, 'DA': 0.5},
        'area': 0.5,
        'positions': {'A': {'x': 0.0, 'y': 0.0}},
    }
    payload.update(overrides)
    return payload


# ─── Common ──────────────────────────────────────────────────────────────

def test_vector_rejects_non_finite():
    with pytest.raises(ValueError):
        Vector2(x=math.inf, y=0.0)


def test_vector_from_dict_errors():
    with pytest.raises(ValueError, match="Missing"):
        Vector2.from_dict({'x': 1.0})
    with pytest.raises(ValueError, match="Invalid"):
        Vector2.from_dict({'x': "left", 'y': 0.0})


def test_timestamp_parses():
    assert Timestamp.now().to_datetime().tzinfo is not None
    with pytest.raises(ValueError):
        Timestamp(value="yesterday").to_datetime()


# ─── DeviceSampleMessage ─────────────────────────────────────────────────

def test_sample_from_dict():
    sample = DeviceSampleMessage.from_dict(sample_payload())
    assert sample.kind == SampleKind.VERTEX_DELTA
    assert sample.vertex == "B"
    assert sample.vector == Vector2(x=0.05, y=-0.05)
    assert sample.sequence == 7


def test_sample_to_dict_omits_unused_fields():
    data = DeviceSampleMessage.rotation_sample("knob", 0.5, sequence=3).to_dict()
    assert data['kind'] == "rotation"
    assert data['rotation'] == 0.5
    assert 'vertex' not in data
    assert 'vector' not in data
    json.dumps(data)


def test_sample_survives_json():
    sample = DeviceSampleMessage.vertex_position("tangible_01", "C", 0.4, 0.2)
    assert DeviceSampleMessage.from_dict(json.loads(json.dumps(sample.to_dict()))) == sample


@pytest.mark.parametrize("overrides", [
    {'source_id': ""},
    {'kind': "teleport"},
    {'vertex': "E"},
    {'vector': None},
    {'vector': {'x': 1.0}},
    {'sequence': -1},
    {'kind': "rotation", 'rotation': None},
    {'kind': "rotation", 'rotation': "fast"},
])
def test_invalid_samples(overrides):
    with pytest.raises(ValueError):
        DeviceSampleMessage.from_dict(sample_payload(**overrides))


def test_sample_missing_field():
    payload = sample_payload()
    del payload['kind']
    with pytest.raises(ValueError, match="Missing required"):
        DeviceSampleMessage.from_dict(payload)


# ─── ShapeEventMessage ───────────────────────────────────────────────────

def test_event_from_dict():
    event = ShapeEventMessage.from_dict(event_payload())
    assert event.transition == "square -> rectangle"
    assert event.angles['D'] is None
    assert event.positions['A'] == Vector2(x=0.0, y=0.0)
    assert event.to_dict()['positions'] == {'A': {'x': 0.0, 'y': 0.0}}


@pytest.mark.parametrize("overrides", [
    {'previous': "rectangle"},
    {'current': "triangle"},
    {'tick': -1},
    {'angles': {'E': 1.0}},
    {'lengths': {'AC': 1.0}},
])
def test_invalid_events(overrides):
    with pytest.raises(ValueError):
        ShapeEventMessage.from_dict(event_payload(**overrides))


def test_event_missing_field():
    payload = event_payload()
    del payload['tick']
    with pytest.raises(ValueError, match="Missing required"):
        ShapeEventMessage.from_dict(payload)
