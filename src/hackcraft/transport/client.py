"""HackCraft WebSocket client: RPC calls multiplexed with server events."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from hackcraft.errors import ConnectionLostError, DecodeError, ServerError
from hackcraft.models import DEFAULT_WS_PATH, ServerAddress
from hackcraft.transport.connection import ConnectionManager, Connector
from hackcraft.transport.correlator import RequestCorrelator
from hackcraft.transport.envelope import (
    Envelope,
    MessageType,
    attach_envelope,
    call_envelope,
    decode_envelope,
    decode_event,
    hook_envelope,
    login_envelope,
    start_envelope,
)
from hackcraft.transport.events import EventCallback, EventDispatcher


class HackCraftClient:
    """One connection to a HackCraft server.

    Requests are single-flight: concurrent callers queue on the correlator and
    each receives the reply that follows its own frame. Events are fanned out
    to callbacks registered with :meth:`on`.
    """

    def __init__(
        self,
        *,
        connect_timeout_seconds: float = 5.0,
        request_timeout_seconds: float = 30.0,
        connector: Connector | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._logger = logger or logging.getLogger("hackcraft.client")
        self._events = EventDispatcher(logger=self._logger.getChild("events"))
        self._connection = ConnectionManager(
            on_frame=self._handle_frame,
            on_lost=self._handle_connection_lost,
            connector=connector,
            connect_timeout_seconds=connect_timeout_seconds,
            logger=self._logger.getChild("connection"),
        )
        self._correlator = RequestCorrelator(
            is_connected=lambda: self._connection.connected,
            write=self._connection.send_frame,
            timeout_seconds=request_timeout_seconds,
            logger=self._logger.getChild("correlator"),
        )
        self._routes: dict[str, Callable[[Envelope, str | bytes], None]] = {
            MessageType.RESULT.value: self._route_result,
            MessageType.ERROR.value: self._route_error,
            MessageType.LOGGED.value: self._route_logged,
            MessageType.ATTACH.value: self._route_result,
            MessageType.EVENT.value: self._route_event,
        }

    async def __aenter__(self) -> HackCraftClient:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    @property
    def is_connected(self) -> bool:
        return self._connection.connected

    @property
    def is_established(self) -> bool:
        return self._connection.established

    @property
    def address(self) -> ServerAddress | None:
        return self._connection.address

    @property
    def events(self) -> EventDispatcher:
        return self._events

    async def connect(self, host: str, port: int, *, path: str = DEFAULT_WS_PATH) -> None:
        self._correlator.fail(ConnectionLostError("Connection replaced by a new connect()"))
        await self._connection.connect(ServerAddress(host=host, port=port, path=path))

    async def disconnect(self) -> None:
        self._correlator.fail(ConnectionLostError("Connection closed by client"))
        await self._connection.disconnect()

    async def close(self) -> None:
        self._correlator.fail(ConnectionLostError("Connection closed by client"))
        await self._connection.close()

    def on(self, event_name: str, callback: EventCallback) -> None:
        self._events.on(event_name, callback)

    def off(self, event_name: str, callback: EventCallback) -> bool:
        return self._events.off(event_name, callback)

    async def send(self, envelope: Envelope) -> Any:
        return await self._correlator.send(envelope)

    async def login(self, player: str) -> Any:
        return await self.send(login_envelope(player))

    async def call(self, entity: str, name: str, args: Sequence[Any] | None = None) -> Any:
        return await self.send(call_envelope(entity, name, args))

    async def hook(self, entity: str, name: str, args: Sequence[Any] | None = None) -> Any:
        """Wait server-side for ``name`` to fire on ``entity`` and return its payload."""
        return await self.send(hook_envelope(entity, name, args))

    async def attach(self, entity: str) -> Any:
        return await self.send(attach_envelope(entity))

    async def start(self, entity: str) -> Any:
        return await self.send(start_envelope(entity))

    def _handle_frame(self, raw: str | bytes) -> None:
        try:
            envelope = decode_envelope(raw)
            route = self._routes.get(envelope.type, self._route_unknown)
            route(envelope, raw)
        except DecodeError as exc:
            self._logger.error("frame_decode_failed", extra={"frame": raw, "error": str(exc.cause)})
            self._correlator.fail(exc)
        except Exception as exc:  # noqa: BLE001 - routing must never break the read loop.
            self._logger.exception("frame_routing_failed", extra={"frame": raw})
            self._correlator.fail(exc)

    def _handle_connection_lost(self, error: ConnectionLostError) -> None:
        self._logger.warning("connection_lost", extra={"code": error.code, "reason": error.reason})
        self._correlator.fail(error)

    def _route_result(self, envelope: Envelope, raw: str | bytes) -> None:
        self._correlator.resolve(envelope.data)

    def _route_unknown(self, envelope: Envelope, raw: str | bytes) -> None:
        self._logger.debug("unrecognized_message_type", extra={"message_type": envelope.type})
        self._correlator.resolve(envelope.data)

    def _route_error(self, envelope: Envelope, raw: str | bytes) -> None:
        self._correlator.fail(ServerError(envelope.type, envelope.data))

    def _route_logged(self, envelope: Envelope, raw: str | bytes) -> None:
        self._connection.mark_established()
        self._correlator.resolve(envelope.data)

    def _route_event(self, envelope: Envelope, raw: str | bytes) -> None:
        event = decode_event(envelope.data, frame=raw)
        self._logger.debug("event_received", extra={"event_name": event.name})
        if self._events.dispatch(event.name, event.data):
            return

        # Some servers answer calls through the event channel.
        if event.data is not None:
            self._correlator.resolve(event.data)


__all__ = ["HackCraftClient"]
