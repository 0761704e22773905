from __future__ import annotations

import json

import pytest

from voltage_relay.broker import QoS
from voltage_relay.errors import PublishError, SubscriptionError


class FakeSession:
    """Records subscribe/publish calls instead of talking to a broker."""

    def __init__(self) -> None:
        self.subscriptions: list[tuple[str, QoS]] = []
        self.published: list[tuple[str, bytes, QoS, bool]] = []
        self.fail_subscribe: set[str] = set()
        self.fail_publish = False

    def subscribe(self, topic: str, qos: QoS) -> None:
        if topic in self.fail_subscribe:
            raise SubscriptionError(topic, "not authorized")
        self.subscriptions.append((topic, qos))

    def publish(self, topic: str, payload: bytes, *, qos: QoS, retain: bool = False) -> None:
        if self.fail_publish:
            raise PublishError(topic, "no connection")
        self.published.append((topic, payload, qos, retain))

    def notifications(self):
        return iter(())

    def sent_texts(self) -> list[str]:
        return [json.loads(p)["Message"]["content"] for _t, p, _q, _r in self.published]


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()
