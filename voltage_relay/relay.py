"""Chat side of the bridge.

Outbound: wrap text in a wire `Message` and publish it on `chat/send`.
Inbound: recognize the one supported chat command.
"""

from __future__ import annotations

import logging

from . import wire
from .broker import BrokerSession, QoS
from .errors import PublishError, WireFormatError
from .mqtt_topics import DEFAULT_CHANNEL_ID, chat_send

logger = logging.getLogger(__name__)

VOLTAGE_COMMAND = "voltage"


def is_voltage_command(text: str) -> bool:
    return text.strip().lower() == VOLTAGE_COMMAND


class ChatRelay:
    def __init__(self, *, session: BrokerSession, channel_id: int = DEFAULT_CHANNEL_ID) -> None:
        self.session = session
        self.channel_id = channel_id

    def send(self, text: str) -> None:
        """Post `text` to the chat channel.

        Failures are logged and the message is dropped; retrying is left to the
        broker's QoS 1 delivery.
        """
        logger.info("Sending message to chat")
        try:
            payload = wire.encode(wire.ContentMessage(channel_id=self.channel_id, content=text))
        except WireFormatError as e:
            logger.warning("failed to serialize message: %s", e)
            return
        try:
            self.session.publish(chat_send(), payload, qos=QoS.AT_LEAST_ONCE, retain=False)
        except PublishError as e:
            logger.warning("failed to send MQTT message: %s", e)
