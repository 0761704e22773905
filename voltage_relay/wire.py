"""Wire format for messages handed to the chat bot.

Each payload is a JSON object with exactly one key naming the variant:

    {"Message": {"channel_id": 699300787746111528, "content": "Voltage low: 9"}}
    {"KeepAlive": null}

The relay only ever produces `Message`. `KeepAlive` is part of the protocol
the bot speaks, so `decode()` accepts it too, both as above and as the bare
JSON string `"KeepAlive"`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

from .errors import WireFormatError

_U64_MAX = 2**64 - 1


@dataclass(frozen=True)
class ContentMessage:
    channel_id: int
    content: str

    def to_message(self) -> dict[str, Any]:
        return {"Message": {"channel_id": self.channel_id, "content": self.content}}


@dataclass(frozen=True)
class KeepAlive:
    def to_message(self) -> dict[str, Any]:
        return {"KeepAlive": None}


OutboundMessage = Union[ContentMessage, KeepAlive]


def _check_channel_id(value: Any) -> int:
    # bool is an int subclass but never a valid channel id.
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U64_MAX:
        raise WireFormatError(f"channel_id must be an unsigned 64-bit integer, got {value!r}")
    return value


def encode(message: OutboundMessage) -> bytes:
    if isinstance(message, ContentMessage):
        _check_channel_id(message.channel_id)
        if not isinstance(message.content, str):
            raise WireFormatError(f"content must be a string, got {type(message.content).__name__}")
    try:
        return json.dumps(message.to_message(), separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError, UnicodeEncodeError) as e:
        raise WireFormatError(f"cannot serialize {message!r}") from e


def decode(payload: bytes | str) -> OutboundMessage:
    """Parse a wire payload back into a message object.

    Raises `WireFormatError` for anything that is not one of the known variants.
    """
    try:
        text = payload.decode("utf-8") if isinstance(payload, bytes) else payload
        data = json.loads(text)
    except (UnicodeDecodeError, ValueError) as e:
        raise WireFormatError("payload is not valid JSON") from e

    # Unit variants may also arrive as a bare string.
    if data == "KeepAlive":
        return KeepAlive()
    if not isinstance(data, dict) or len(data) != 1:
        raise WireFormatError("expected an object with a single variant key")

    ((tag, body),) = data.items()
    if tag == "KeepAlive":
        if body is not None:
            raise WireFormatError("KeepAlive carries no payload")
        return KeepAlive()
    if tag == "Message":
        if not isinstance(body, dict):
            raise WireFormatError("Message body must be an object")
        content = body.get("content")
        if not isinstance(content, str):
            raise WireFormatError("Message content must be a string")
        return ContentMessage(channel_id=_check_channel_id(body.get("channel_id")), content=content)
    raise WireFormatError(f"unknown message variant {tag!r}")
