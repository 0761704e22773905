from __future__ import annotations

# Event dispatch loop.
#
# `TelemetryDispatcher` consumes broker notifications one at a time on a single
# thread:
# - Publish       -> routed by topic to the alert state machine or chat relay
# - Disconnection -> logged only
# - Reconnection  -> every topic is subscribed again
#
# Per-message problems (bad UTF-8, bad numbers, unknown topics, failed sends)
# are logged and dropped. Only a failed subscription escapes the loop.

import logging
from typing import Callable, Iterable

from .alerts import AlertStateMachine
from .broker import BrokerSession, Disconnection, Notification, Publish, QoS, Reconnection
from .mqtt_topics import DEFAULT_CHANNEL_ID, chat_receive, subscription_topics, voltage, warning_voltage
from .relay import ChatRelay, is_voltage_command

logger = logging.getLogger(__name__)


class TelemetryDispatcher:
    def __init__(
        self,
        *,
        session: BrokerSession,
        channel_id: int = DEFAULT_CHANNEL_ID,
        alerts: AlertStateMachine | None = None,
    ) -> None:
        self.session = session
        self.alerts = alerts or AlertStateMachine()
        self.relay = ChatRelay(session=session, channel_id=channel_id)
        self.topics = subscription_topics(channel_id)

        self._routes: dict[str, Callable[[bytes], None]] = {
            voltage(): self._handle_voltage,
            warning_voltage(): self._handle_warning_voltage,
            chat_receive(channel_id): self._handle_chat,
        }

    def subscribe_all(self) -> None:
        """Subscribe to every relay topic. Raises SubscriptionError on failure."""
        for topic in self.topics:
            self.session.subscribe(topic, QoS.AT_MOST_ONCE)
            logger.debug("Subscribed to %s", topic)

    def run(self, notifications: Iterable[Notification] | None = None) -> None:
        """Process notifications until the stream ends (normally never)."""
        if notifications is None:
            notifications = self.session.notifications()
        for notification in notifications:
            self.handle(notification)

    def handle(self, notification: Notification) -> None:
        if isinstance(notification, Publish):
            self._route(notification)
        elif isinstance(notification, Disconnection):
            logger.warning("Client disconnected from MQTT")
        elif isinstance(notification, Reconnection):
            self.subscribe_all()
            logger.warning("Client reconnected to MQTT")

    # -------------------- routing --------------------

    def _route(self, message: Publish) -> None:
        logger.debug("New message on %s", message.topic)
        handler = self._routes.get(message.topic)
        if handler is None:
            logger.warning("Unknown topic %s", message.topic)
            return
        handler(message.payload)

    def _handle_voltage(self, payload: bytes) -> None:
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError:
            logger.error("Failed to parse MQTT payload on %s", voltage())
            return
        alert = self.alerts.on_voltage(text)
        if alert is not None:
            self.relay.send(alert)

    def _handle_warning_voltage(self, payload: bytes) -> None:
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Ignoring undecodable payload on %s", warning_voltage())
            return
        self.alerts.on_warning_voltage(text)

    def _handle_chat(self, payload: bytes) -> None:
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("failed to parse incoming chat message")
            return
        if is_voltage_command(text):
            self.relay.send(self.alerts.voltage_report())
