"""Single-flight request/response correlation.

The protocol carries no request ids: a reply belongs to whichever request is
currently waiting. That is only sound while at most one request is in flight,
so every send holds an exclusive gate from the moment it writes its frame
until its reply, failure or timeout.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from hackcraft.errors import NotConnectedError, RequestTimeoutError
from hackcraft.transport.envelope import Envelope, encode_envelope


def _mark_retrieved(future: asyncio.Future[Any]) -> None:
    # The caller may have stopped waiting already (timeout).
    if not future.cancelled():
        future.exception()


class PendingRequest:
    """Completion slot for the request currently awaiting a reply."""

    __slots__ = ("message_type", "sent_at", "future")

    def __init__(self, message_type: str) -> None:
        self.message_type = message_type
        self.sent_at = time.monotonic()
        self.future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self.future.add_done_callback(_mark_retrieved)

    @property
    def done(self) -> bool:
        return self.future.done()

    def resolve(self, value: Any) -> bool:
        if self.future.done():
            return False
        self.future.set_result(value)
        return True

    def fail(self, error: BaseException) -> bool:
        if self.future.done():
            return False
        self.future.set_exception(error)
        return True

    def cancel(self) -> bool:
        return self.future.cancel()


class RequestCorrelator:
    """Serializes callers and matches each inbound reply to the waiting request."""

    def __init__(
        self,
        *,
        is_connected: Callable[[], bool],
        write: Callable[[str], Awaitable[None]],
        timeout_seconds: float = 30.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self._is_connected = is_connected
        self._write = write
        self._timeout_seconds = timeout_seconds
        self._logger = logger or logging.getLogger("hackcraft.transport.correlator")

        self._gate = asyncio.Lock()
        self._pending: PendingRequest | None = None

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    @property
    def pending(self) -> PendingRequest | None:
        return self._pending

    @property
    def in_flight(self) -> bool:
        return self._pending is not None and not self._pending.done

    async def send(self, envelope: Envelope) -> Any:
        """Write ``envelope`` and wait for its reply while holding the gate."""
        frame = encode_envelope(envelope)
        if not self._is_connected():
            raise NotConnectedError("Client not connected. Call connect() first.")

        async with self._gate:
            if not self._is_connected():
                raise NotConnectedError("Client disconnected while the request was queued.")

            pending = PendingRequest(envelope.type)
            self._pending = pending
            try:
                self._logger.debug("request_sent", extra={"message_type": envelope.type, "frame": frame})
                await self._write(frame)
                try:
                    result = await asyncio.wait_for(asyncio.shield(pending.future), timeout=self._timeout_seconds)
                except asyncio.TimeoutError:
                    error = RequestTimeoutError(envelope.type, self._timeout_seconds)
                    pending.fail(error)
                    self._logger.warning(
                        "request_timeout",
                        extra={"message_type": envelope.type, "timeout_seconds": self._timeout_seconds},
                    )
                    raise error from None
            except Exception:
                self._logger.debug("request_failed", extra={"message_type": envelope.type}, exc_info=True)
                raise
            finally:
                if not pending.done:
                    pending.cancel()

            self._logger.debug(
                "request_completed",
                extra={"message_type": envelope.type, "elapsed_s": round(time.monotonic() - pending.sent_at, 4)},
            )
            return result

    def resolve(self, value: Any) -> bool:
        """Complete the waiting request with ``value``; False if none is waiting."""
        pending = self._pending
        if pending is None or not pending.resolve(value):
            self._logger.debug("reply_without_pending_request", extra={"value": value})
            return False
        return True

    def fail(self, error: BaseException) -> bool:
        """Complete the waiting request with ``error``; False if none is waiting."""
        pending = self._pending
        if pending is None or not pending.fail(error):
            self._logger.debug("failure_without_pending_request", extra={"error": repr(error)})
            return False
        return True


__all__ = ["PendingRequest", "RequestCorrelator"]
