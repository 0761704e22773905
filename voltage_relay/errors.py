"""Shared exception types.

Only `BrokerConnectionError` and `SubscriptionError` are meant to end the
process. The others are logged and dropped by the code that catches them.
"""

from __future__ import annotations


class RelayError(Exception):
    """Base class for all relay errors."""


class BrokerConnectionError(RelayError):
    """The initial connection to the broker could not be established."""


class SubscriptionError(RelayError):
    def __init__(self, topic: str, code: object) -> None:
        super().__init__(f"Failed to subscribe to topic {topic} ({code})")
        self.topic = topic
        self.code = code


class PublishError(RelayError):
    def __init__(self, topic: str, code: object) -> None:
        super().__init__(f"Failed to publish to topic {topic} ({code})")
        self.topic = topic
        self.code = code


class WireFormatError(RelayError):
    """A chat message could not be encoded or decoded."""
