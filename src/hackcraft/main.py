"""CLI entrypoint for the HackCraft client."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import typer
from rich import print

from hackcraft.config import settings
from hackcraft.errors import HackCraftError
from hackcraft.remote import Entity, Player
from hackcraft.telemetry.logging import configure_logging
from hackcraft.transport.client import HackCraftClient

app = typer.Typer(help="HackCraft WebSocket client")


def _build_client() -> HackCraftClient:
    return HackCraftClient(
        connect_timeout_seconds=settings.connect_timeout_seconds,
        request_timeout_seconds=settings.request_timeout_seconds,
    )


def _parse_arg(raw: str) -> Any:
    """Read ``3`` as an int and ``true`` as a bool; anything else stays a string."""
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return raw
    return value if isinstance(value, (int, float, bool)) or value is None else raw


def _player_name(player: str | None) -> str:
    name = player or settings.player_name
    if not name:
        raise typer.BadParameter("Provide --player or set HACKCRAFT_PLAYER_NAME")
    return name


def _run(coro) -> Any:
    try:
        return asyncio.run(coro)
    except HackCraftError as exc:
        print({"error": f"{type(exc).__name__}: {exc}"})
        raise typer.Exit(code=1)


@app.callback()
def main(log_level: str = typer.Option(None, help="Override HACKCRAFT_LOG_LEVEL")) -> None:
    configure_logging(log_level or settings.log_level)


@app.command("config")
def show_config() -> None:
    """Show the effective connection settings."""
    print(settings.model_dump())


@app.command()
def login(
    player: str = typer.Option(None, help="Player name"),
    host: str = typer.Option(None, help="Server host"),
    port: int = typer.Option(None, help="Server port"),
) -> None:
    """Log in, print the session, and log out."""
    name = _player_name(player)

    async def _login() -> dict[str, str]:
        session_player = Player(name, client=_build_client())
        await session_player.login(host or settings.host, port or settings.port, path=settings.ws_path)
        try:
            return {"player": name, "uuid": session_player.uuid, "world": session_player.world}
        finally:
            await session_player.logout()

    print({"session": _run(_login())})


@app.command()
def call(
    entity: str = typer.Argument(..., help="Entity to attach to"),
    name: str = typer.Argument(..., help="Remote call name"),
    args: list[str] = typer.Argument(None, help="Call arguments; JSON scalars are decoded"),
    player: str = typer.Option(None, help="Player name"),
    host: str = typer.Option(None, help="Server host"),
    port: int = typer.Option(None, help="Server port"),
) -> None:
    """Issue one remote call on an entity and print the result."""
    player_name = _player_name(player)
    call_args = [_parse_arg(arg) for arg in args or []]

    async def _call() -> Any:
        session_player = Player(player_name, client=_build_client())
        await session_player.login(host or settings.host, port or settings.port, path=settings.ws_path)
        try:
            target = await session_player.get_entity(entity)
            return await target.call(name, *call_args)
        finally:
            await session_player.logout()

    print({"entity": entity, "call": name, "args": call_args, "result": _run(_call())})


@app.command()
def listen(
    event: str = typer.Argument(..., help="Event name, e.g. onPlayerChat"),
    entity: str = typer.Option(None, help="Only show events addressed to this entity"),
    seconds: float = typer.Option(30.0, help="How long to listen"),
    player: str = typer.Option(None, help="Player name"),
    host: str = typer.Option(None, help="Server host"),
    port: int = typer.Option(None, help="Server port"),
) -> None:
    """Print every payload of a server event for a while."""
    player_name = _player_name(player)

    def _show(payload: Any) -> None:
        print({"event": event, "data": payload})

    def _show_for_entity(target: Entity, payload: Any) -> None:
        print({"event": event, "entity": target.uuid, "data": payload})

    async def _listen() -> None:
        session_player = Player(player_name, client=_build_client())
        await session_player.login(host or settings.host, port or settings.port, path=settings.ws_path)
        try:
            if entity:
                target = await session_player.get_entity(entity)
                target.on_event(event, _show_for_entity)
            else:
                session_player.client.on(event, _show)
            await asyncio.sleep(seconds)
        finally:
            await session_player.logout()

    _run(_listen())
    print({"listen": "stopped", "event": event})


if __name__ == "__main__":
    app()
