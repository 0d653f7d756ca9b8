"""JSON envelope codec for the HackCraft WebSocket protocol.

Every frame is a UTF-8 JSON object ``{"type": ..., "data": ...}``. Frames of
type ``event`` nest a second object ``{"name": ..., "data": ...}`` inside
``data``; servers send it either as an encoded JSON string or inline.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from hackcraft.errors import DecodeError, EncodeError

KEY_TYPE = "type"
KEY_DATA = "data"
KEY_NAME = "name"


class MessageType(str, Enum):
    """Envelope discriminators used by the client and the server."""

    # inbound
    RESULT = "result"
    ERROR = "error"
    LOGGED = "logged"
    ATTACH = "attach"
    EVENT = "event"
    # outbound
    LOGIN = "login"
    CALL = "call"
    HOOK = "hook"
    START = "start"


@dataclass(slots=True, frozen=True)
class Envelope:
    """One wire message."""

    type: str
    data: Any = None

    def __post_init__(self) -> None:
        if isinstance(self.type, MessageType):
            object.__setattr__(self, "type", self.type.value)

    def to_json(self) -> str:
        return encode_envelope(self)


@dataclass(slots=True, frozen=True)
class EventMessage:
    """Server-pushed notification carried inside an ``event`` envelope."""

    name: str
    data: Any = None


def encode_envelope(envelope: Envelope) -> str:
    """Serialize ``envelope``; raises :class:`EncodeError` for anything that is not strict JSON."""
    try:
        return json.dumps({KEY_TYPE: envelope.type, KEY_DATA: envelope.data}, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise EncodeError(envelope.type, exc) from exc


def decode_envelope(raw: str | bytes) -> Envelope:
    """Parse an inbound frame; raises :class:`DecodeError` on malformed input."""
    msg = _loads(raw, raw)
    if not isinstance(msg, dict):
        raise DecodeError(raw, "frame must be a JSON object")

    msg_type = msg.get(KEY_TYPE)
    if not isinstance(msg_type, str):
        raise DecodeError(raw, "frame missing string 'type'")
    return Envelope(type=msg_type, data=msg.get(KEY_DATA))


def decode_event(data: Any, *, frame: str | bytes | None = None) -> EventMessage:
    """Unpack the inner ``{name, data}`` object of an ``event`` envelope.

    ``frame`` is the outer frame, reported on :class:`DecodeError` when given.
    """
    raw = data if frame is None else frame
    inner = _loads(data, raw) if isinstance(data, (str, bytes)) else data
    if not isinstance(inner, dict):
        raise DecodeError(raw, "event payload must be a JSON object")

    name = inner.get(KEY_NAME)
    if not isinstance(name, str) or not name:
        raise DecodeError(raw, "event payload missing non-empty 'name'")
    return EventMessage(name=name, data=inner.get(KEY_DATA))


def login_envelope(player: str) -> Envelope:
    return Envelope(MessageType.LOGIN.value, {"player": player})


def call_envelope(entity: str, name: str, args: Sequence[Any] | None = None) -> Envelope:
    return Envelope(MessageType.CALL.value, _target(entity, name, args))


def hook_envelope(entity: str, name: str, args: Sequence[Any] | None = None) -> Envelope:
    return Envelope(MessageType.HOOK.value, _target(entity, name, args))


def attach_envelope(entity: str) -> Envelope:
    return Envelope(MessageType.ATTACH.value, {"entity": entity})


def start_envelope(entity: str) -> Envelope:
    return Envelope(MessageType.START.value, {"entity": entity})


def _target(entity: str, name: str, args: Sequence[Any] | None) -> dict[str, Any]:
    data: dict[str, Any] = {"entity": entity, "name": name}
    if args is not None:
        data["args"] = list(args)
    return data


def _loads(payload: str | bytes, raw: Any) -> Any:
    try:
        text = payload.decode("utf-8") if isinstance(payload, bytes) else payload
        return json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError(raw, exc) from exc


__all__ = [
    "Envelope",
    "EventMessage",
    "MessageType",
    "attach_envelope",
    "call_envelope",
    "decode_envelope",
    "decode_event",
    "encode_envelope",
    "hook_envelope",
    "login_envelope",
    "start_envelope",
]
