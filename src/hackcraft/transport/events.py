"""Named-event callback registry with fire-and-forget fan-out."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

EventCallback = Callable[[Any], Awaitable[None] | None]


class EventDispatcher:
    """Maps event names to ordered callbacks and invokes them off the read path.

    Each callback runs in its own task so a slow or failing callback cannot
    delay the next inbound frame. Tasks are started in registration order.
    """

    def __init__(self, *, logger: logging.Logger | None = None) -> None:
        self._callbacks: dict[str, list[EventCallback]] = {}
        self._tasks: set[asyncio.Task[None]] = set()
        self._logger = logger or logging.getLogger("hackcraft.transport.events")

    def on(self, event_name: str, callback: EventCallback) -> None:
        self._callbacks.setdefault(event_name, []).append(callback)
        self._logger.debug(
            "event_callback_registered",
            extra={"event_name": event_name, "callbacks": len(self._callbacks[event_name])},
        )

    def off(self, event_name: str, callback: EventCallback) -> bool:
        """Remove one registration of ``callback``; returns whether it was found."""
        callbacks = self._callbacks.get(event_name)
        if not callbacks or callback not in callbacks:
            return False
        callbacks.remove(callback)
        if not callbacks:
            del self._callbacks[event_name]
        return True

    def has_callbacks(self, event_name: str) -> bool:
        return bool(self._callbacks.get(event_name))

    def callbacks(self, event_name: str) -> list[EventCallback]:
        return list(self._callbacks.get(event_name, ()))

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    def dispatch(self, event_name: str, payload: Any) -> bool:
        """Schedule every callback for ``event_name``; returns False when none is registered."""
        callbacks = self.callbacks(event_name)
        if not callbacks:
            return False

        loop = asyncio.get_running_loop()
        for callback in callbacks:
            task = loop.create_task(self._invoke(event_name, callback, payload), name=f"hackcraft-event-{event_name}")
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        return True

    async def drain(self) -> None:
        """Wait until every callback scheduled so far has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _invoke(self, event_name: str, callback: EventCallback, payload: Any) -> None:
        try:
            result = callback(payload)
            if inspect.isawaitable(result):
                await result
        except Exception:  # noqa: BLE001 - callback failures must not reach the read loop.
            self._logger.exception("event_callback_failed", extra={"event_name": event_name})


__all__ = ["EventCallback", "EventDispatcher"]
