from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from typing import Any

import pytest
from websockets.exceptions import ConnectionClosedOK

Responder = Callable[[dict[str, Any]], "list[Any] | None"]

_CLOSED = object()


def fake_server(message: dict[str, Any]) -> list[Any]:
    """Answers the way a HackCraft server does for the calls the tests use."""
    kind = message["type"]
    data = message["data"]
    if kind == "login":
        return [{"type": "logged", "data": {"playerUUID": "u-1", "world": "world"}}]
    if kind == "attach":
        return [{"type": "attach", "data": f"uuid-{data['entity']}"}]
    if kind == "start":
        return [{"type": "result", "data": None}]
    if kind in {"call", "hook"}:
        name = data["name"]
        if name == "echo":
            return [{"type": "result", "data": data.get("args")}]
        if name == "missing":
            return [{"type": "error", "data": {"reason": "not_found"}}]
        if name == "silent":
            return []
        return [{"type": "result", "data": True}]
    return [{"type": "result", "data": None}]


class FakeSocket:
    """In-memory stand-in for a websockets client connection."""

    def __init__(self, responder: Responder | None = None, *, reply_delay: float = 0.0) -> None:
        self.responder = responder
        self.reply_delay = reply_delay
        self.sent: list[str] = []
        self.closed = False
        self._incoming: asyncio.Queue[Any] = asyncio.Queue()

    @property
    def messages(self) -> list[dict[str, Any]]:
        return [json.loads(frame) for frame in self.sent]

    async def send(self, message: str) -> None:
        if self.closed:
            raise ConnectionClosedOK(None, None)
        self.sent.append(message)
        if self.responder is None:
            return
        for reply in self.responder(json.loads(message)) or []:
            if self.reply_delay:
                asyncio.get_running_loop().call_later(self.reply_delay, self.push, reply)
            else:
                self.push(reply)

    async def recv(self) -> str | bytes:
        item = await self._incoming.get()
        if item is _CLOSED:
            self.closed = True
            raise ConnectionClosedOK(None, None)
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._incoming.put_nowait(_CLOSED)

    def push(self, frame: Any) -> None:
        if not isinstance(frame, (str, bytes)):
            frame = json.dumps(frame)
        self._incoming.put_nowait(frame)

    def push_event(self, name: str, data: Any, *, inline: bool = False) -> None:
        inner = {"name": name, "data": data}
        self.push({"type": "event", "data": inner if inline else json.dumps(inner)})

    def drop(self, error: Exception | None = None) -> None:
        """Simulate the server closing the socket, or a socket-level error."""
        self._incoming.put_nowait(_CLOSED if error is None else error)


class FakeConnector:
    def __init__(
        self,
        responder: Responder | None = fake_server,
        *,
        reply_delay: float = 0.0,
        open_delay: float = 0.0,
        error: Exception | None = None,
    ) -> None:
        self.responder = responder
        self.reply_delay = reply_delay
        self.open_delay = open_delay
        self.error = error
        self.urls: list[str] = []
        self.sockets: list[FakeSocket] = []

    async def __call__(self, url: str) -> FakeSocket:
        self.urls.append(url)
        if self.open_delay:
            await asyncio.sleep(self.open_delay)
        if self.error is not None:
            raise self.error
        socket = FakeSocket(self.responder, reply_delay=self.reply_delay)
        self.sockets.append(socket)
        return socket

    @property
    def socket(self) -> FakeSocket:
        return self.sockets[-1]


async def settle(seconds: float = 0.01) -> None:
    """Give the read loop and callback tasks a chance to run."""
    await asyncio.sleep(seconds)


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
def fake_connector() -> type[FakeConnector]:
    return FakeConnector


@pytest.fixture
def connector_with() -> Callable[..., FakeConnector]:
    """Build a connector whose server answers ``overrides[type]`` for the listed message types."""

    def build(overrides: dict[str, list[Any]], **kwargs: Any) -> FakeConnector:
        def respond(message: dict[str, Any]) -> list[Any]:
            if message["type"] in overrides:
                return overrides[message["type"]]
            return fake_server(message)

        return FakeConnector(respond, **kwargs)

    return build


@pytest.fixture
def wait_a_moment() -> Callable[..., Any]:
    return settle
