"""Tests for the DeviceManager and its controller cache."""

from unittest.mock import AsyncMock

import pytest

from adbmcp.config import ADBConfig
from adbmcp.devices import ControllerCache, DeviceManager
from adbmcp.errors import DeviceNotFound
from adbmcp.models import Device

DEVICES_OUTPUT = "List of devices attached\nA\tdevice\nB\tdevice\n"


def test_cache_returns_same_controllers(mock_client):
    cache = ControllerCache(mock_client, max_size=4)
    first = cache.get("A")
    assert cache.get("A") is first
    assert first[0].serial == first[1].serial == "A"


def test_cache_evicts_least_recently_used(mock_client):
    cache = ControllerCache(mock_client, max_size=2)
    cache.get("A")
    cache.get("B")
    cache.get("A")  # A is now most recent
    cache.get("C")

    assert len(cache) == 2
    assert "A" in cache
    assert "B" not in cache
    assert "C" in cache


def test_cache_discard(mock_client):
    cache = ControllerCache(mock_client, max_size=2)
    cache.get("A")
    cache.discard("A")
    cache.discard("missing")
    assert "A" not in cache


def test_manager_uses_configured_cache_size(mock_client):
    manager = DeviceManager(client=mock_client, config=ADBConfig(controller_cache_size=1))
    first = manager.device("A")
    manager.device("B")
    assert manager.device("A") is not first


def test_manager_unquotes_serials(mock_client):
    manager = DeviceManager(client=mock_client)
    assert manager.device("10.0.0.2%3A5555").serial == "10.0.0.2:5555"
    assert manager.input("10.0.0.2%3A5555").serial == "10.0.0.2:5555"


def test_input_and_device_share_cache_entry(mock_client):
    manager = DeviceManager(client=mock_client)
    assert manager.input("A").serial == manager.device("A").serial


@pytest.mark.asyncio
class TestDeviceManagerAsync:
    """Operations that reach the client."""

    async def test_list_devices(self, mock_client):
        mock_client.get_devices = AsyncMock(return_value=[Device("A", "device")])
        manager = DeviceManager(client=mock_client)
        assert await manager.list_devices() == [Device("A", "device")]

    async def test_describe_all(self, mock_client):
        mock_client.get_devices = AsyncMock(return_value=[Device("A", "device"), Device("B", "offline")])

        async def execute(args):
            return f"[ro.serialno]: [{args[1]}]"

        mock_client.execute = AsyncMock(side_effect=execute)
        manager = DeviceManager(client=mock_client)

        reports = await manager.describe_all()

        assert [r.to_dict() for r in reports] == [
            {"serial": "A", "state": "device", "properties": {"ro.serialno": "A"}},
            {"serial": "B", "state": "offline", "properties": {"ro.serialno": "B"}},
        ]

    async def test_describe_all_no_devices(self, mock_client):
        mock_client.get_devices = AsyncMock(return_value=[])
        assert await DeviceManager(client=mock_client).describe_all() == []

    async def test_describe_all_fails_on_first_error(self, mock_client):
        mock_client.get_devices = AsyncMock(return_value=[Device("A", "device"), Device("B", "device")])

        async def execute(args):
            if args[1] == "B":
                raise DeviceNotFound("ADB command failed: device offline")
            return "[k]: [v]"

        mock_client.execute = AsyncMock(side_effect=execute)

        with pytest.raises(DeviceNotFound):
            await DeviceManager(client=mock_client).describe_all()

    async def test_describe_all_isolates_failures(self, mock_client):
        mock_client.get_devices = AsyncMock(return_value=[Device("A", "device"), Device("B", "device")])

        async def execute(args):
            if args[1] == "B":
                raise DeviceNotFound("ADB command failed: device offline")
            return "[k]: [v]"

        mock_client.execute = AsyncMock(side_effect=execute)

        reports = await DeviceManager(client=mock_client).describe_all(isolate_failures=True)

        assert reports[0].ok
        assert reports[0].properties == {"k": "v"}
        assert not reports[1].ok
        assert reports[1].error == "ADB command failed: device offline"
        assert reports[1].to_dict()["error"] == "ADB command failed: device offline"

    async def test_disconnect_drops_cached_controllers(self, mock_client):
        mock_client.disconnect = AsyncMock(return_value="disconnected 10.0.0.2:5555")
        manager = DeviceManager(client=mock_client)
        first = manager.device("10.0.0.2:5555")

        await manager.disconnect("10.0.0.2:5555")

        mock_client.disconnect.assert_awaited_once_with("10.0.0.2:5555")
        assert manager.device("10.0.0.2:5555") is not first

    async def test_disconnect_without_port_drops_default_port_serial(self, mock_client):
        mock_client.disconnect = AsyncMock(return_value="disconnected 10.0.0.2")
        manager = DeviceManager(client=mock_client)
        default_port = manager.device("10.0.0.2:5555")
        other_port = manager.device("10.0.0.2:5556")
        usb = manager.device("R58M123ABC")

        await manager.disconnect("10.0.0.2")

        assert manager.device("10.0.0.2:5555") is not default_port
        assert manager.device("10.0.0.2:5556") is other_port
        assert manager.device("R58M123ABC") is usb

    async def test_server_operations_delegate(self, mock_client):
        mock_client.start_server = AsyncMock()
        mock_client.kill_server = AsyncMock()
        manager = DeviceManager(client=mock_client)

        await manager.start_server()
        await manager.kill_server()

        mock_client.start_server.assert_awaited_once()
        mock_client.kill_server.assert_awaited_once()
