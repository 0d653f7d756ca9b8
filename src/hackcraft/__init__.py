"""Python client for HackCraft servers."""

from .errors import (
    ConnectError,
    ConnectionLostError,
    DecodeError,
    EncodeError,
    HackCraftError,
    NotConnectedError,
    ProtocolViolationError,
    RequestTimeoutError,
    ServerError,
)
from .models import PlayerSession, ServerAddress
from .remote import Entity, Player
from .transport import Envelope, EventDispatcher, HackCraftClient, MessageType

__all__ = [
    "ConnectError",
    "ConnectionLostError",
    "DecodeError",
    "EncodeError",
    "Entity",
    "Envelope",
    "EventDispatcher",
    "HackCraftClient",
    "HackCraftError",
    "MessageType",
    "NotConnectedError",
    "Player",
    "PlayerSession",
    "ProtocolViolationError",
    "RequestTimeoutError",
    "ServerAddress",
    "ServerError",
]
