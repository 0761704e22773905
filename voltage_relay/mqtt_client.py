"""Broker session built on top of paho-mqtt.

Why this exists:
- paho-mqtt is callback-based and runs its network loop on a background thread.
- The relay wants a single blocking stream of notifications instead, so all
  session state is touched from one thread only.

Design:
- `MqttClient` manages connection + the background network loop.
- paho callbacks only translate events into `Publish` / `Disconnection` /
  `Reconnection` objects and put them on a queue.
- `notifications()` yields from that queue forever.
- Reconnecting is paho's job (`reconnect_delay_set` with a fixed delay).
  Subscriptions are not restored by paho, the consumer re-issues them when it
  sees `Reconnection`.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Iterator

import paho.mqtt.client as mqtt

from .broker import Disconnection, Notification, Publish, QoS, Reconnection
from .errors import BrokerConnectionError, PublishError, SubscriptionError

logger = logging.getLogger(__name__)


class MqttClient:
    """Thin wrapper around paho-mqtt implementing `BrokerSession`."""

    def __init__(
        self,
        *,
        client_id: str,
        host: str,
        port: int,
        keepalive: int = 30,
        reconnect_delay: int = 5,
    ) -> None:
        self.client_id = client_id
        self.host = host
        self.port = port
        self.keepalive = keepalive

        self._client = mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2,
            client_id=client_id,
            clean_session=True,
        )
        self._client.reconnect_delay_set(min_delay=reconnect_delay, max_delay=reconnect_delay)
        self._client.on_connect = self._on_connect
        self._client.on_disconnect = self._on_disconnect
        self._client.on_message = self._on_message

        self._events: "queue.Queue[Notification]" = queue.Queue()

        # Set once the first CONNACK arrives, successful or not.
        self._connack = threading.Event()
        self._connect_error: str | None = None
        self._connected_once = False

        self._started = False

    def start(self, *, timeout: float = 10.0) -> None:
        """Connect and start the background network loop.

        Raises BrokerConnectionError if the broker is unreachable or refuses us.
        """
        if self._started:
            return
        try:
            self._client.connect(self.host, self.port, keepalive=self.keepalive)
        except OSError as e:
            raise BrokerConnectionError(f"Failed to connect to MQTT host {self.host}:{self.port}: {e}") from e
        self._client.loop_start()
        self._started = True

        if not self._connack.wait(timeout):
            self.stop()
            raise BrokerConnectionError(f"No answer from MQTT host {self.host}:{self.port} after {timeout}s")
        if self._connect_error is not None:
            self.stop()
            raise BrokerConnectionError(f"MQTT host {self.host}:{self.port} refused connection: {self._connect_error}")

    def stop(self) -> None:
        """Stop and disconnect."""
        if not self._started:
            return
        self._started = False
        self._client.disconnect()
        self._client.loop_stop()

    def subscribe(self, topic: str, qos: QoS = QoS.AT_MOST_ONCE) -> None:
        result, _mid = self._client.subscribe(topic, qos=int(qos))
        if result != mqtt.MQTT_ERR_SUCCESS:
            raise SubscriptionError(topic, mqtt.error_string(result))

    def publish(self, topic: str, payload: bytes, *, qos: QoS = QoS.AT_MOST_ONCE, retain: bool = False) -> None:
        info = self._client.publish(topic, payload=payload, qos=int(qos), retain=retain)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise PublishError(topic, mqtt.error_string(info.rc))

    def notifications(self) -> Iterator[Notification]:
        """Block on the event queue and yield notifications forever."""
        while True:
            yield self._events.get()

    # -------------------- internal callbacks --------------------

    def _on_connect(self, client: mqtt.Client, userdata: Any, flags: Any, reason_code: Any, properties: Any) -> None:
        if reason_code.is_failure:
            if not self._connected_once:
                self._connect_error = str(reason_code)
                self._connack.set()
            else:
                logger.warning("MQTT reconnect refused: %s", reason_code)
            return

        if not self._connected_once:
            self._connected_once = True
            self._connack.set()
            logger.info("Connected to MQTT")
            return
        self._events.put(Reconnection())

    def _on_disconnect(
        self, client: mqtt.Client, userdata: Any, disconnect_flags: Any, reason_code: Any, properties: Any
    ) -> None:
        # Our own stop() also lands here; nobody is consuming events by then.
        if not self._started:
            return
        self._events.put(Disconnection())

    def _on_message(self, client: mqtt.Client, userdata: Any, msg: mqtt.MQTTMessage) -> None:
        # Depending on paho-mqtt version / type stubs, msg.payload may be `bytes`
        # (typical) or a `str`. The dispatcher always gets bytes.
        raw = msg.payload
        payload = raw if isinstance(raw, bytes) else str(raw).encode("utf-8")
        self._events.put(Publish(topic=msg.topic, payload=payload))
