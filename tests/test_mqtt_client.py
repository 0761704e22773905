from types import SimpleNamespace

import paho.mqtt.client as mqtt
import pytest

from voltage_relay.broker import Disconnection, Publish, QoS, Reconnection
from voltage_relay.errors import BrokerConnectionError, PublishError, SubscriptionError
from voltage_relay.mqtt_client import MqttClient

OK = SimpleNamespace(is_failure=False)
REFUSED = SimpleNamespace(is_failure=True)


@pytest.fixture
def client():
    return MqttClient(client_id="test-relay", host="127.0.0.1", port=1883)


def drain(client, n):
    stream = client.notifications()
    return [next(stream) for _ in range(n)]


def test_first_connect_is_not_a_reconnection(client):
    client._on_connect(client._client, None, {}, OK, None)
    assert client._connack.is_set()
    assert client._events.empty()


def test_later_connects_are_reconnections(client):
    client._on_connect(client._client, None, {}, OK, None)
    client._started = True
    client._on_disconnect(client._client, None, {}, OK, None)
    client._on_connect(client._client, None, {}, OK, None)
    assert drain(client, 2) == [Disconnection(), Reconnection()]


def test_refused_first_connect_is_recorded(client):
    client._on_connect(client._client, None, {}, REFUSED, None)
    assert client._connack.is_set()
    assert client._connect_error is not None
    assert client._events.empty()


def test_messages_become_publish_notifications(client):
    client._on_message(client._client, None, SimpleNamespace(topic="telemetry/voltage", payload=b"12.1"))
    client._on_message(client._client, None, SimpleNamespace(topic="chat/receive/1", payload="voltage"))
    assert drain(client, 2) == [
        Publish("telemetry/voltage", b"12.1"),
        Publish("chat/receive/1", b"voltage"),
    ]


def test_subscribe_failure_raises(client, monkeypatch):
    monkeypatch.setattr(client._client, "subscribe", lambda topic, qos: (mqtt.MQTT_ERR_NO_CONN, None))
    with pytest.raises(SubscriptionError, match="telemetry/voltage"):
        client.subscribe("telemetry/voltage", QoS.AT_MOST_ONCE)


def test_subscribe_passes_qos(client, monkeypatch):
    calls = []

    def fake_subscribe(topic, qos):
        calls.append((topic, qos))
        return mqtt.MQTT_ERR_SUCCESS, 1

    monkeypatch.setattr(client._client, "subscribe", fake_subscribe)
    client.subscribe("telemetry/voltage", QoS.AT_MOST_ONCE)
    assert calls == [("telemetry/voltage", 0)]


def test_publish_failure_raises(client, monkeypatch):
    monkeypatch.setattr(
        client._client,
        "publish",
        lambda topic, payload, qos, retain: SimpleNamespace(rc=mqtt.MQTT_ERR_NO_CONN),
    )
    with pytest.raises(PublishError):
        client.publish("chat/send", b"{}", qos=QoS.AT_LEAST_ONCE)


def test_unreachable_broker_raises_connection_error(client, monkeypatch):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("connection refused")

    monkeypatch.setattr(client._client, "connect", refuse)
    with pytest.raises(BrokerConnectionError, match="127.0.0.1:1883"):
        client.start()
