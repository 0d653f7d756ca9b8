"""WebSocket connection lifecycle and the background read loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from websockets.asyncio.client import connect as ws_connect
from websockets.exceptions import ConnectionClosed

from hackcraft.errors import ConnectError, ConnectionLostError, NotConnectedError
from hackcraft.models import ServerAddress


class FrameSocket(Protocol):
    """The subset of a websockets client connection the manager relies on."""

    async def send(self, message: str) -> None: ...

    async def recv(self) -> str | bytes: ...

    async def close(self) -> None: ...


Connector = Callable[[str], Awaitable[FrameSocket]]


async def open_websocket(url: str) -> FrameSocket:
    # The manager bounds the opening handshake itself.
    return await ws_connect(url, open_timeout=None)


class ConnectionManager:
    """Owns the socket and its read loop for one logical session.

    Inbound frames are handed to ``on_frame``, which must not raise. A socket
    close or error ends the session and is reported once through ``on_lost``.
    A closed manager can be connected again; each ``connect`` opens a fresh
    socket and read loop.
    """

    def __init__(
        self,
        *,
        on_frame: Callable[[str | bytes], None],
        on_lost: Callable[[ConnectionLostError], None],
        connector: Connector | None = None,
        connect_timeout_seconds: float = 5.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self._on_frame = on_frame
        self._on_lost = on_lost
        self._connector = connector or open_websocket
        self._connect_timeout_seconds = connect_timeout_seconds
        self._logger = logger or logging.getLogger("hackcraft.transport.connection")

        self._address: ServerAddress | None = None
        self._socket: FrameSocket | None = None
        self._reader_task: asyncio.Task[None] | None = None
        self._connected = False
        self._established = False

    @property
    def address(self) -> ServerAddress | None:
        return self._address

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def established(self) -> bool:
        """True once the server acknowledged a login on this socket."""
        return self._established

    async def connect(self, address: ServerAddress) -> None:
        await self.close()
        self._address = address
        self._logger.info("connect_attempt", extra={"url": address.url})

        try:
            socket = await asyncio.wait_for(self._connector(address.url), timeout=self._connect_timeout_seconds)
        except asyncio.TimeoutError as exc:
            await self.close()
            self._logger.error(
                "connect_timeout",
                extra={"url": address.url, "timeout_seconds": self._connect_timeout_seconds},
            )
            raise ConnectError(
                f"Connection to {address.url} timed out after {self._connect_timeout_seconds}s"
            ) from exc
        except Exception as exc:  # noqa: BLE001 - any open failure is a connect failure.
            await self.close()
            self._logger.error("connect_failed", extra={"url": address.url, "error": repr(exc)})
            raise ConnectError(f"Failed to connect to {address.url}: {exc}") from exc

        self._socket = socket
        self._connected = True
        self._reader_task = asyncio.create_task(self._read_loop(socket), name="hackcraft-read-loop")
        self._logger.info("connected", extra={"url": address.url})

    async def disconnect(self) -> None:
        was_connected = self._connected
        await self.close()
        self._address = None
        if was_connected:
            self._logger.info("disconnected")
        else:
            self._logger.info("disconnect_noop")

    async def close(self) -> None:
        """Cancel the read loop and close the socket; safe to call repeatedly."""
        task, socket = self._reader_task, self._socket
        self._reader_task = None
        self._socket = None
        self._connected = False
        self._established = False

        if task is not None and task is not asyncio.current_task():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        if socket is not None:
            await self._close_socket(socket)

    def mark_established(self) -> None:
        if self._socket is None:
            return
        self._connected = True
        self._established = True

    async def send_frame(self, frame: str) -> None:
        socket = self._socket
        if socket is None or not self._connected:
            raise NotConnectedError("Client not connected. Call connect() first.")
        try:
            await socket.send(frame)
        except ConnectionClosed as exc:
            raise ConnectionLostError(f"WebSocket closed while sending: {exc}", **_close_details(exc)) from exc

    async def _read_loop(self, socket: FrameSocket) -> None:
        try:
            while True:
                raw = await socket.recv()
                self._logger.debug("frame_received", extra={"frame": raw})
                self._on_frame(raw)
        except ConnectionClosed as exc:
            details = _close_details(exc)
            self._logger.info("connection_closed", extra=details)
            await self._handle_lost(
                socket,
                ConnectionLostError(
                    f"WebSocket connection closed. Code: {details['code']}, Reason: {details['reason']}",
                    **details,
                ),
            )
        except Exception as exc:  # noqa: BLE001 - socket errors end the session, not the caller.
            self._logger.warning("connection_error", extra={"error": repr(exc)})
            error = ConnectionLostError(f"WebSocket connection dropped: {exc}")
            error.__cause__ = exc
            await self._handle_lost(socket, error)

    async def _handle_lost(self, socket: FrameSocket, error: ConnectionLostError) -> None:
        if socket is not self._socket:
            return
        self._socket = None
        self._reader_task = None
        self._connected = False
        self._established = False
        self._on_lost(error)
        await self._close_socket(socket)

    async def _close_socket(self, socket: FrameSocket) -> None:
        try:
            await socket.close()
        except Exception:  # noqa: BLE001
            self._logger.warning("socket_close_failed", exc_info=True)


def _close_details(exc: ConnectionClosed) -> dict[str, Any]:
    frame = exc.rcvd or exc.sent
    if frame is None:
        return {"code": None, "reason": None}
    return {"code": frame.code, "reason": frame.reason}


__all__ = ["Connector", "ConnectionManager", "FrameSocket", "open_websocket"]
