"""MQTT topic helpers.

We keep topic construction in one place so the subscriber and the router agree
on naming.

Topic layout:

Telemetry (subscribed, QoS 0):
- `telemetry/voltage`
    Battery voltage readings, decimal text.
- `telemetry/warning_voltage`
    New warning threshold, decimal text.

Chat (bridged by a separate chat bot process):
- `chat/receive/<channel_id>`
    Free text typed into the chat channel (subscribed, QoS 0).
- `chat/send`
    JSON wire messages for the bot to post (published, QoS 1).
"""

from __future__ import annotations

DEFAULT_CHANNEL_ID = 699300787746111528


def voltage() -> str:
    return "telemetry/voltage"


def warning_voltage() -> str:
    return "telemetry/warning_voltage"


def chat_receive(channel_id: int = DEFAULT_CHANNEL_ID) -> str:
    return f"chat/receive/{channel_id}"


def chat_send() -> str:
    return "chat/send"


def subscription_topics(channel_id: int = DEFAULT_CHANNEL_ID) -> tuple[str, ...]:
    """Every topic the relay listens on.

    Resolved once at startup and re-subscribed after each reconnect.
    """
    return (voltage(), warning_voltage(), chat_receive(channel_id))
