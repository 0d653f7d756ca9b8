"""Structured log output for command-line use."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class KeyValueFormatter(logging.Formatter):
    """Appends ``extra`` fields to the message as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        fields = {key: value for key, value in vars(record).items() if key not in _RESERVED}
        if not fields:
            return message
        pairs = " ".join(f"{key}={value!r}" for key, value in sorted(fields.items()))
        return f"{message} {pairs}"


def configure_logging(level: str = "INFO", *, logger_name: str = "hackcraft") -> logging.Logger:
    """Attach a rich handler to the ``hackcraft`` logger tree and return it."""
    handler = RichHandler(show_path=False, rich_tracebacks=True)
    handler.setFormatter(KeyValueFormatter("%(message)s"))

    logger = logging.getLogger(logger_name)
    logger.handlers = [handler]
    logger.setLevel(level.upper())
    return logger
