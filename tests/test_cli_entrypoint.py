from __future__ import annotations

import importlib
import logging

import pytest
from typer.testing import CliRunner

from hackcraft import main
from hackcraft.transport.client import HackCraftClient

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_hackcraft_logger():
    logger = logging.getLogger("hackcraft")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)


@pytest.fixture
def use_connector(monkeypatch):
    def install(connector) -> None:
        monkeypatch.setattr(main, "_build_client", lambda: HackCraftClient(connector=connector))

    return install


def test_console_entrypoint_exposes_app() -> None:
    module = importlib.import_module("hackcraft.main")

    assert hasattr(module, "app")
    assert module.app is not None


def test_config_prints_effective_settings() -> None:
    result = runner.invoke(main.app, ["config"])

    assert result.exit_code == 0
    assert "'port': 25570" in result.output
    assert "request_timeout_seconds" in result.output


def test_log_level_option_configures_logger() -> None:
    result = runner.invoke(main.app, ["--log-level", "debug", "config"])

    assert result.exit_code == 0
    assert logging.getLogger("hackcraft").level == logging.DEBUG


def test_login_prints_session(use_connector, connector) -> None:
    use_connector(connector)

    result = runner.invoke(main.app, ["login", "--player", "Ada"])

    assert result.exit_code == 0, result.output
    assert "'uuid': 'u-1'" in result.output
    assert connector.urls == ["ws://localhost:25570/ws"]
    assert connector.socket.closed is True


def test_call_decodes_scalar_arguments(use_connector, connector) -> None:
    use_connector(connector)

    result = runner.invoke(main.app, ["call", "pet", "echo", "1", "true", "north", "--player", "Ada"])

    assert result.exit_code == 0, result.output
    assert connector.socket.messages[-1]["data"] == {"entity": "uuid-pet", "name": "echo", "args": [1, True, "north"]}


def test_listen_logs_out_when_time_is_up(use_connector, connector) -> None:
    use_connector(connector)

    result = runner.invoke(main.app, ["listen", "onPlayerChat", "--seconds", "0.01", "--player", "Ada"])

    assert result.exit_code == 0, result.output
    assert "stopped" in result.output
    assert connector.socket.closed is True


def test_connect_failure_prints_error_and_exits_nonzero(use_connector, fake_connector) -> None:
    use_connector(fake_connector(error=OSError("connection refused")))

    result = runner.invoke(main.app, ["login", "--player", "Ada"])

    assert result.exit_code == 1
    assert "ConnectError" in result.output


def test_login_requires_a_player_name(monkeypatch) -> None:
    monkeypatch.setattr(main.settings, "player_name", None)

    result = runner.invoke(main.app, ["login"])

    assert result.exit_code != 0
    assert "HACKCRAFT_PLAYER_NAME" in result.output


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("3", 3), ("-1.5", -1.5), ("false", False), ("null", None), ("^", "^"), ('"x"', '"x"'), ("[1]", "[1]")],
)
def test_parse_arg(raw, expected) -> None:
    assert main._parse_arg(raw) == expected
