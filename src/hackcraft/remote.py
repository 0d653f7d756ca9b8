"""Player and entity proxies built on :class:`HackCraftClient`."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from hackcraft.errors import NotConnectedError, ProtocolViolationError
from hackcraft.models import DEFAULT_WS_PATH, PlayerSession
from hackcraft.transport.client import HackCraftClient

EntityEventCallback = Callable[["Entity", Any], Awaitable[None] | None]


class Player:
    """A named player session on the server."""

    def __init__(
        self,
        name: str,
        *,
        client: HackCraftClient | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.name = name
        self._client = client or HackCraftClient()
        self._session: PlayerSession | None = None
        self._logger = logger or logging.getLogger("hackcraft.remote")

    @property
    def client(self) -> HackCraftClient:
        return self._client

    @property
    def session(self) -> PlayerSession | None:
        return self._session

    @property
    def uuid(self) -> str | None:
        return self._session.uuid if self._session else None

    @property
    def world(self) -> str | None:
        return self._session.world if self._session else None

    async def login(self, host: str, port: int, *, path: str = DEFAULT_WS_PATH) -> Player:
        await self._client.connect(host, port, path=path)
        try:
            result = await self._client.login(self.name)
            self._session = PlayerSession.from_login_result(self.name, result)
        except Exception:
            await self._client.disconnect()
            raise

        self._logger.info("player_logged_in", extra={"player": self.name, "uuid": self.uuid, "world": self.world})
        return self

    async def logout(self) -> None:
        await self._client.disconnect()
        self._session = None
        self._logger.info("player_logged_out", extra={"player": self.name})

    async def get_entity(self, entity_name: str) -> Entity:
        """Attach to the entity called ``entity_name`` and signal it to start."""
        if not self._client.is_connected or self._session is None:
            raise NotConnectedError("Client is not connected or world is unknown. Cannot get entity.")

        result = await self._client.attach(entity_name)
        entity = Entity(
            self._client, self._session.world, _entity_uuid(entity_name, result), logger=self._logger
        )
        await self._client.start(entity.uuid)
        self._logger.debug("entity_attached", extra={"entity": entity_name, "uuid": entity.uuid})
        return entity


class Entity:
    """A remote object that accepts named calls."""

    def __init__(
        self, client: HackCraftClient, world: str, uuid: str, *, logger: logging.Logger | None = None
    ) -> None:
        self._client = client
        self.world = world
        self.uuid = uuid
        self._logger = logger or logging.getLogger("hackcraft.remote")

    def __repr__(self) -> str:
        return f"Entity(uuid={self.uuid!r}, world={self.world!r})"

    async def call(self, name: str, *args: Any) -> Any:
        return await self._client.call(self.uuid, name, list(args) if args else None)

    async def wait_for(self, event_name: str, *args: Any) -> Any:
        """Block until the server reports ``event_name`` for this entity."""
        return await self._client.hook(self.uuid, event_name, list(args) if args else None)

    def on_event(self, event_name: str, callback: EntityEventCallback) -> None:
        """Receive ``event_name`` payloads addressed to this entity.

        Payloads whose ``entityUuid`` names another entity are skipped.
        """

        def forward(payload: Any) -> Awaitable[None] | None:
            if not isinstance(payload, dict) or payload.get("entityUuid") != self.uuid:
                self._logger.debug("entity_event_skipped", extra={"event_name": event_name, "uuid": self.uuid})
                return None
            return callback(self, payload)

        self._client.on(event_name, forward)


def _entity_uuid(entity_name: str, result: Any) -> str:
    if result is None:
        raise ProtocolViolationError(f"Entity '{entity_name}' not found or attach failed (received null result).")
    if isinstance(result, str) and result:
        return result
    if isinstance(result, dict) and isinstance(result.get("uuid"), str):
        return result["uuid"]
    raise ProtocolViolationError(f"Attach response for '{entity_name}' carries no entity uuid: {result!r}")


__all__ = ["Entity", "EntityEventCallback", "Player"]
