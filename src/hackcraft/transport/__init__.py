"""WebSocket transport: envelope codec, connection, correlation and events."""

from .client import HackCraftClient
from .connection import ConnectionManager, Connector, FrameSocket, open_websocket
from .correlator import PendingRequest, RequestCorrelator
from .envelope import Envelope, EventMessage, MessageType, decode_envelope, decode_event, encode_envelope
from .events import EventCallback, EventDispatcher

__all__ = [
    "ConnectionManager",
    "Connector",
    "Envelope",
    "EventCallback",
    "EventDispatcher",
    "EventMessage",
    "FrameSocket",
    "HackCraftClient",
    "MessageType",
    "PendingRequest",
    "RequestCorrelator",
    "decode_envelope",
    "decode_event",
    "encode_envelope",
    "open_websocket",
]
