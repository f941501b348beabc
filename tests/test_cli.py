"""Tests for the command-line entry point and server helpers."""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

from click.testing import CliRunner
import pytest

from adbmcp import server
from adbmcp.errors import ServerUnavailable


@pytest.fixture
def patched_startup():
    """Patch everything main() does that touches the process or the network."""
    with (
        patch("adbmcp.server.install_excepthook"),
        patch("adbmcp.server.setup_logging") as mock_setup_logging,
        patch("adbmcp.server.set_device_manager") as mock_set_manager,
        patch("adbmcp.server.start_adb_server") as mock_start,
        patch("adbmcp.server.run_stdio_server") as mock_stdio,
        patch("adbmcp.server.run_sse_server") as mock_sse,
    ):
        yield {
            "setup_logging": mock_setup_logging,
            "set_device_manager": mock_set_manager,
            "start_adb_server": mock_start,
            "run_stdio_server": mock_stdio,
            "run_sse_server": mock_sse,
        }


def _registered_config(mocks):
    manager = mocks["set_device_manager"].call_args.args[0]
    return manager.client.config


def test_defaults_run_stdio(patched_startup):
    result = CliRunner().invoke(server.main, [])

    assert result.exit_code == 0, result.output
    config = _registered_config(patched_startup)
    assert config.adb_path == "adb"
    assert config.timeout_seconds is None
    assert config.controller_cache_size == 64
    patched_startup["start_adb_server"].assert_called_once()
    patched_startup["run_stdio_server"].assert_called_once()
    patched_startup["run_sse_server"].assert_not_called()
    assert patched_startup["setup_logging"].call_args.kwargs["disable_console_logging"] is True


def test_adb_options(patched_startup):
    result = CliRunner().invoke(server.main, ["--adb-path", "/opt/adb", "--timeout", "2.5", "--cache-size", "8"])

    assert result.exit_code == 0, result.output
    config = _registered_config(patched_startup)
    assert config.adb_path == "/opt/adb"
    assert config.timeout_seconds == 2.5
    assert config.controller_cache_size == 8


def test_adb_options_from_environment(patched_startup):
    env = {"ADB_PATH": "/env/adb", "ADB_MCP_TIMEOUT": "10", "ADB_MCP_CACHE_SIZE": "3"}
    result = CliRunner().invoke(server.main, [], env=env)

    assert result.exit_code == 0, result.output
    config = _registered_config(patched_startup)
    assert (config.adb_path, config.timeout_seconds, config.controller_cache_size) == ("/env/adb", 10.0, 3)


@pytest.mark.parametrize("args", [["--timeout", "0"], ["--cache-size", "0"]])
def test_invalid_adb_options_are_rejected(patched_startup, args):
    result = CliRunner().invoke(server.main, args)

    assert result.exit_code == 2
    patched_startup["start_adb_server"].assert_not_called()


def test_sse_transport(patched_startup):
    with patch("adbmcp.server.console") as mock_console:
        result = CliRunner().invoke(server.main, ["--transport", "sse", "--host", "not-an-ip", "--port", "9000"])

    assert result.exit_code == 0, result.output
    patched_startup["run_sse_server"].assert_called_once_with("127.0.0.1", 9000, False)
    settings = mock_console.display_system_info.call_args.args[0]
    assert settings["host_note"] == "(Changed from not-an-ip - invalid address)"


def test_start_adb_server_failure_exits_1():
    manager = MagicMock()
    manager.start_server = AsyncMock(side_effect=ServerUnavailable("Failed to start ADB server: daemon not running"))

    with patch("adbmcp.server.get_device_manager", return_value=manager):
        with pytest.raises(SystemExit) as exc_info:
            server.start_adb_server()

    assert exc_info.value.code == 1


def test_start_adb_server_success():
    manager = MagicMock()
    manager.start_server = AsyncMock()

    with patch("adbmcp.server.get_device_manager", return_value=manager):
        server.start_adb_server()

    manager.start_server.assert_awaited_once()


@pytest.mark.parametrize(
    ("host", "expected"),
    [
        ("127.0.0.1", ("127.0.0.1", None)),
        ("0.0.0.0", ("0.0.0.0", None)),
        ("localhost", ("localhost", None)),
        ("::1", ("::1", None)),
        ("bad host", ("127.0.0.1", "(Changed from bad host - invalid address)")),
    ],
)
def test_resolve_bind_host(host, expected):
    assert server.resolve_bind_host(host) == expected


def test_sse_app_routes():
    app = server.create_sse_app()
    paths = {route.path for route in app.routes}
    assert "/sse" in paths
    assert "/messages" in paths


def test_log_exception_tree_walks_groups(caplog):
    caplog.set_level(logging.ERROR, logger="adbmcp")
    group = ExceptionGroup("session failed", [ValueError("first"), RuntimeError("second")])

    server.log_exception_tree(group)

    messages = [record.getMessage() for record in caplog.records]
    assert any("session failed" in message for message in messages)
    assert "  ValueError: first" in messages
    assert "  RuntimeError: second" in messages
