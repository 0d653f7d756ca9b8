from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from hackcraft.errors import ProtocolViolationError

DEFAULT_WS_PATH = "/ws"


@dataclass(slots=True, frozen=True)
class ServerAddress:
    host: str
    port: int
    path: str = DEFAULT_WS_PATH

    @property
    def url(self) -> str:
        return f"ws://{self.host}:{self.port}{self.path}"


@dataclass(slots=True, frozen=True)
class PlayerSession:
    """Identity the server assigned to a logged-in player."""

    player: str
    uuid: str
    world: str

    @classmethod
    def from_login_result(cls, player: str, result: Any) -> PlayerSession:
        if not isinstance(result, dict):
            raise ProtocolViolationError(f"Login failed or returned unexpected data: {result!r}. Expected an object.")

        uuid = result.get("playerUUID")
        world = result.get("world")
        if not isinstance(uuid, str) or not isinstance(world, str):
            raise ProtocolViolationError(f"Login response missing playerUUID or world: {result!r}")
        return cls(player=player, uuid=uuid, world=world)
