"""Broker-facing types shared by the dispatcher and the paho adapter.

The dispatcher only depends on these, so it can be unit tested without
paho-mqtt or a running broker.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator, Protocol, Union


class QoS(enum.IntEnum):
    AT_MOST_ONCE = 0
    AT_LEAST_ONCE = 1


@dataclass(frozen=True)
class Publish:
    """An inbound message from a subscribed topic."""

    topic: str
    payload: bytes


@dataclass(frozen=True)
class Disconnection:
    """The connection to the broker was lost."""


@dataclass(frozen=True)
class Reconnection:
    """The connection came back. Subscriptions must be issued again."""


Notification = Union[Publish, Disconnection, Reconnection]


class BrokerSession(Protocol):
    def subscribe(self, topic: str, qos: QoS) -> None: ...

    def publish(self, topic: str, payload: bytes, *, qos: QoS, retain: bool = False) -> None: ...

    def notifications(self) -> Iterator[Notification]: ...
