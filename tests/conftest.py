"""Pytest configuration and fixtures for adb-mcp tests."""

from unittest.mock import AsyncMock, MagicMock

from mcp.server.fastmcp import Context
import pytest

from adbmcp.adb import ADBClient
from adbmcp.config import ADBConfig
from adbmcp.devices import DeviceManager, set_device_manager


@pytest.fixture(scope="session", autouse=True)
def _initialize_device_manager():
    """Register a DeviceManager before any MCP handler is imported and called.

    The client never reaches a real adb binary; tests that need adb output
    patch ``get_device_manager`` or the client's ``execute``.
    """
    client = MagicMock(spec=ADBClient)
    client.execute = AsyncMock(return_value="")
    set_device_manager(DeviceManager(client=client, config=ADBConfig()))
    yield


@pytest.fixture
def mock_context():
    """Create a mock MCP context."""
    ctx = MagicMock(spec=Context)
    ctx.info = AsyncMock()
    ctx.error = AsyncMock()
    return ctx


@pytest.fixture
def mock_client():
    """An ADBClient stand-in whose execute is an AsyncMock."""
    client = MagicMock(spec=ADBClient)
    client.config = ADBConfig()
    client.execute = AsyncMock(return_value="")
    return client
