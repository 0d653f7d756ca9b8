"""Exception types raised by the HackCraft client transport."""

from __future__ import annotations

from typing import Any


class HackCraftError(Exception):
    """Base class for every failure surfaced by the client."""


class NotConnectedError(HackCraftError):
    """Raised when a request is attempted outside a live connection."""


class ConnectError(HackCraftError):
    """Raised when the WebSocket cannot be opened within the allowed time."""


class ConnectionLostError(HackCraftError):
    """Raised on the pending caller when the socket closes or fails underneath it."""

    def __init__(self, message: str, *, code: int | None = None, reason: str | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.reason = reason


class RequestTimeoutError(HackCraftError, TimeoutError):
    """Raised when no correlated reply arrives within the request timeout."""

    def __init__(self, message_type: str, timeout_seconds: float) -> None:
        super().__init__(f"No reply to '{message_type}' within {timeout_seconds}s")
        self.message_type = message_type
        self.timeout_seconds = timeout_seconds


class ServerError(HackCraftError):
    """The server answered with an explicit ``error`` envelope."""

    def __init__(self, type: str, data: Any) -> None:
        super().__init__(f'Server error: type="{type}", data="{data}"')
        self.type = type
        self.data = data


class DecodeError(HackCraftError):
    """An inbound frame could not be decoded into an envelope."""

    def __init__(self, raw: Any, cause: Exception | str) -> None:
        super().__init__(f"Invalid frame {raw!r}: {cause}")
        self.raw = raw
        self.cause = cause


class EncodeError(HackCraftError, ValueError):
    """An outbound envelope cannot be written as strict JSON (NaN, infinity, or non-serializable values)."""

    def __init__(self, message_type: str, cause: Exception) -> None:
        super().__init__(f"Cannot encode '{message_type}' envelope: {cause}")
        self.message_type = message_type
        self.cause = cause


class ProtocolViolationError(HackCraftError):
    """A well-formed reply did not carry what the protocol requires."""


__all__ = [
    "ConnectError",
    "ConnectionLostError",
    "DecodeError",
    "EncodeError",
    "HackCraftError",
    "NotConnectedError",
    "ProtocolViolationError",
    "RequestTimeoutError",
    "ServerError",
]
