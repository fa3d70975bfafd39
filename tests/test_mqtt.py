"""Tests for MQTT publishers and the subscriber (no broker needed)."""

import json
from types import SimpleNamespace

import paho.mqtt.client as mqtt
import pytest

from quadrilateral_mqtt import (
    DeviceSampleMessage,
    DeviceSamplePublisher,
    DeviceSampleSubscriber,
    ShapeEventMessage,
    ShapeEventPublisher,
    create_logger,
)
from quadrilateral_mqtt.schemas import SCHEMA_VERSION, Timestamp

SAMPLE_TOPIC = "quadrilateral/devices/test/samples"
EVENT_TOPIC = "quadrilateral/shapes/test/events"


class RecordingClient:
    """Stands in for the paho client on the publish/subscribe path."""

    def __init__(self, rc=mqtt.MQTT_ERR_SUCCESS):
        self.rc = rc
        self.published = []
        self.subscribed = []

    def publish(self, topic, payload, qos, retain):
        self.published.append((topic, json.loads(payload), qos, retain))
        return SimpleNamespace(rc=self.rc)

    def subscribe(self, topic, qos):
        self.subscribed.append((topic, qos))


def shape_event():
    return ShapeEventMessage(
        schema_version=SCHEMA_VERSION,
        timestamp=Timestamp.now(),
        service_id="test",
        tick=3,
        previous="square",
        current="rectangle",
    )


@pytest.fixture
def logger():
    return create_logger("test")


@pytest.fixture
def connected_publisher(logger):
    publisher = ShapeEventPublisher(broker_host="localhost", topic=EVENT_TOPIC, logger=logger)
    publisher.client = RecordingClient()
    publisher._connected.set()
    return publisher


# ─── Publishers ──────────────────────────────────────────────────────────

def test_publish_requires_connection(logger):
    publisher = ShapeEventPublisher(broker_host="localhost", topic=EVENT_TOPIC, logger=logger)
    assert not publisher.publish_shape_event(shape_event())
    stats = publisher.get_stats()
    assert stats['failed_count'] == 1
    assert stats['connected'] is False
    assert stats['broker'] == "localhost:1883"


def test_publish_shape_event(connected_publisher):
    assert connected_publisher.publish_shape_event(shape_event())

    topic, payload, qos, retain = connected_publisher.client.published[0]
    assert topic == EVENT_TOPIC
    assert payload['previous'] == "square"
    assert payload['current'] == "rectangle"
    assert qos == 1
    assert retain is False
    assert connected_publisher.get_stats()['message_count'] == 1


def test_publish_reports_client_errors(connected_publisher):
    connected_publisher.client.rc = mqtt.MQTT_ERR_NO_CONN
    assert not connected_publisher.publish_shape_event(shape_event())
    assert connected_publisher.get_stats()['failed_count'] == 1


def test_publish_rejects_unserializable_data(connected_publisher):
    assert not connected_publisher.publish({'value': object()})
    assert connected_publisher.client.published == []


def test_format_message_rejects_wrong_type(connected_publisher):
    with pytest.raises(ValueError):
        connected_publisher.format_message("not a message")
    assert not connected_publisher.publish_shape_event("not a message")


def test_invalid_qos(logger):
    with pytest.raises(ValueError):
        DeviceSamplePublisher(broker_host="localhost", topic=SAMPLE_TOPIC, logger=logger, qos=5)


def test_device_publisher(logger):
    publisher = DeviceSamplePublisher(broker_host="localhost", topic=SAMPLE_TOPIC, logger=logger)
    publisher.client = RecordingClient()
    publisher._connected.set()

    assert publisher.next_sequence() == 1
    sample = DeviceSampleMessage.vertex_delta("knob", "A", 0.05, 0.0, sequence=publisher.next_sequence())
    assert publisher.publish_sample(sample)

    topic, payload, qos, _ = publisher.client.published[0]
    assert topic == SAMPLE_TOPIC
    assert payload['sequence'] == 2
    assert payload['vector'] == {'x': 0.05, 'y': 0.0}
    assert qos == 0


# ─── Subscriber ──────────────────────────────────────────────────────────

@pytest.fixture
def received():
    return {'samples': [], 'events': []}


@pytest.fixture
def subscriber(logger, received):
    return DeviceSampleSubscriber(
        broker_host="localhost",
        logger=logger,
        sample_topic=SAMPLE_TOPIC,
        on_sample=received['samples'].append,
        shape_event_topic=EVENT_TOPIC,
        on_shape_event=received['events'].append,
    )


def message(topic, data):
    payload = data if isinstance(data, bytes) else json.dumps(data).encode('utf-8')
    return SimpleNamespace(topic=topic, payload=payload)


def test_subscriber_requires_a_topic(logger):
    with pytest.raises(ValueError):
        DeviceSampleSubscriber(broker_host="localhost", logger=logger)


def test_subscriber_requires_callback_with_topic(logger):
    with pytest.raises(ValueError):
        DeviceSampleSubscriber(broker_host="localhost", logger=logger, sample_topic=SAMPLE_TOPIC)


def test_subscribes_on_connect(subscriber):
    client = RecordingClient()
    subscriber._on_connect(client, None, None, SimpleNamespace(is_failure=False), None)

    assert subscriber.is_connected()
    assert client.subscribed == [(SAMPLE_TOPIC, 0), (EVENT_TOPIC, 0)]


def test_refused_connection_does_not_subscribe(subscriber):
    client = RecordingClient()
    subscriber._on_connect(client, None, None, SimpleNamespace(is_failure=True), None)

    assert not subscriber.is_connected()
    assert client.subscribed == []


def test_routes_samples(subscriber, received):
    sample = DeviceSampleMessage.rotation_sample("knob", 0.25)
    subscriber._on_message(None, None, message(SAMPLE_TOPIC, sample.to_dict()))

    assert received['samples'] == [sample]
    assert subscriber.get_stats()['samples_received'] == 1


def test_routes_shape_events(subscriber, received):
    subscriber._on_message(None, None, message(EVENT_TOPIC, shape_event().to_dict()))

    assert received['events'][0].transition == "square -> rectangle"
    assert subscriber.get_stats()['shape_events_received'] == 1


@pytest.mark.parametrize("data", [
    b"\xff\xfe",
    b"{not json",
    [1, 2, 3],
    {'kind': "vertex_delta"},
])
def test_rejects_bad_payloads(subscriber, received, data):
    subscriber._on_message(None, None, message(SAMPLE_TOPIC, data))

    assert received['samples'] == []
    assert subscriber.get_stats()['rejected'] == 1


def test_ignores_unknown_topics(subscriber, received):
    subscriber._on_message(None, None, message("other/topic", {'x': 1}))

    stats = subscriber.get_stats()
    assert stats['samples_received'] == 0
    assert stats['rejected'] == 0
