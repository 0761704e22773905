from voltage_relay.mqtt_topics import (
    DEFAULT_CHANNEL_ID,
    chat_receive,
    chat_send,
    subscription_topics,
    voltage,
    warning_voltage,
)


def test_topic_helpers():
    assert voltage() == "telemetry/voltage"
    assert warning_voltage() == "telemetry/warning_voltage"
    assert chat_receive(42) == "chat/receive/42"
    assert chat_send() == "chat/send"


def test_subscription_topics_use_default_channel():
    assert DEFAULT_CHANNEL_ID == 699300787746111528
    assert subscription_topics() == (
        "telemetry/voltage",
        "telemetry/warning_voltage",
        "chat/receive/699300787746111528",
    )
