from __future__ import annotations

import logging

from rich.logging import RichHandler

from hackcraft.telemetry import KeyValueFormatter, configure_logging


def test_formatter_appends_extra_fields_sorted() -> None:
    record = logging.makeLogRecord({"msg": "request_timeout", "timeout_seconds": 30.0, "message_type": "call"})

    assert KeyValueFormatter("%(message)s").format(record) == "request_timeout message_type='call' timeout_seconds=30.0"


def test_formatter_leaves_plain_messages_alone() -> None:
    record = logging.makeLogRecord({"msg": "disconnected"})

    assert KeyValueFormatter("%(message)s").format(record) == "disconnected"


def test_configure_logging_installs_single_rich_handler() -> None:
    name = "hackcraft.tests.telemetry"
    logger = configure_logging("debug", logger_name=name)
    configure_logging("warning", logger_name=name)

    try:
        assert logger is logging.getLogger(name)
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        assert isinstance(logger.handlers[0].formatter, KeyValueFormatter)
    finally:
        logger.handlers = []
        logger.setLevel(logging.NOTSET)
