"""
Device management for adb-mcp.

The DeviceManager owns the ADB client and hands out per-serial controllers.
Controllers are created on first use and kept in a bounded LRU cache, so a
long-running server that sees many short-lived emulators does not grow
without limit.
"""

import asyncio
from collections import OrderedDict
from urllib.parse import unquote

from adbmcp.adb import ADBClient
from adbmcp.config import ADBConfig
from adbmcp.controllers import DeviceController, InputController
from adbmcp.log import logger
from adbmcp.models import Device, DeviceReport

# Port adb assumes for connect/disconnect when the host has none
DEFAULT_TCP_PORT = 5555


class ControllerCache:
    """LRU mapping of serial to its (InputController, DeviceController) pair."""

    def __init__(self, client: ADBClient, max_size: int) -> None:
        self._client = client
        self._max_size = max_size
        self._entries: OrderedDict[str, tuple[InputController, DeviceController]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, serial: object) -> bool:
        return serial in self._entries

    def get(self, serial: str) -> tuple[InputController, DeviceController]:
        """Return the controllers for a serial, creating them if needed.

        Args:
            serial: Device serial number

        Returns:
            The cached or newly created controller pair
        """
        entry = self._entries.get(serial)
        if entry is not None:
            self._entries.move_to_end(serial)
            return entry

        entry = (InputController(serial, client=self._client), DeviceController(serial, client=self._client))
        self._entries[serial] = entry
        if len(self._entries) > self._max_size:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted controllers for %s", evicted)
        return entry

    def discard(self, serial: str) -> None:
        self._entries.pop(serial, None)

    def discard_host(self, host: str) -> None:
        """Drop every serial a disconnect of ``host`` takes offline.

        adb fills in port 5555 when ``host`` has none, so that serial goes too.
        """
        self.discard(host)
        if ":" not in host:
            self.discard(f"{host}:{DEFAULT_TCP_PORT}")


class DeviceManager:
    """Manages Android device discovery and per-device controllers.

    This class provides methods for listing devices, connecting to devices,
    and retrieving controller instances.
    """

    def __init__(self, client: ADBClient | None = None, config: ADBConfig | None = None):
        """Initialize the DeviceManager.

        Args:
            client: The ADBClient to run commands with (built from config if omitted)
            config: Settings used when no client is given, and for the cache size
        """
        if client is None:
            client = ADBClient(config)
        self._client = client
        cache_size = (config or client.config).controller_cache_size
        self._controllers = ControllerCache(client, cache_size)

    @property
    def client(self) -> ADBClient:
        return self._client

    async def start_server(self) -> None:
        await self._client.start_server()

    async def kill_server(self) -> None:
        await self._client.kill_server()

    async def list_devices(self) -> list[Device]:
        """List the devices adb reports, in every state.

        Returns:
            Device entries, recomputed on every call
        """
        return await self._client.get_devices()

    def input(self, serial: str) -> InputController:
        """Get the InputController for a serial.

        Args:
            serial: Device serial number (URL-encoded if from resource path)
        """
        return self._controllers.get(unquote(serial))[0]

    def device(self, serial: str) -> DeviceController:
        """Get the DeviceController for a serial.

        Args:
            serial: Device serial number (URL-encoded if from resource path)
        """
        return self._controllers.get(unquote(serial))[1]

    async def get_properties(self, serial: str) -> dict[str, str]:
        return await self.device(serial).get_properties()

    async def describe_all(self, isolate_failures: bool = False) -> list[DeviceReport]:
        """Read the properties of every listed device concurrently.

        By default the query is all-or-nothing: the first device whose read
        fails makes the whole call raise. With ``isolate_failures`` each
        failing device gets a report with ``error`` set instead.

        Args:
            isolate_failures: Whether to report per-device errors instead of raising

        Returns:
            One report per device, in ``adb devices`` order
        """
        devices = await self.list_devices()
        results = await asyncio.gather(
            *(self.get_properties(device.serial) for device in devices),
            return_exceptions=isolate_failures,
        )

        reports = []
        for device, result in zip(devices, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning("Could not read properties for %s: %s", device.serial, result)
                reports.append(DeviceReport(serial=device.serial, state=device.state, error=str(result)))
                continue
            reports.append(DeviceReport(serial=device.serial, state=device.state, properties=result))
        return reports

    async def connect(self, host: str) -> str:
        """Connect to a device over TCP/IP.

        Args:
            host: ``host`` or ``host:port``

        Returns:
            adb's confirmation text
        """
        return await self._client.connect(host)

    async def disconnect(self, host: str) -> str:
        """Disconnect a TCP/IP device and drop its cached controllers.

        Args:
            host: ``host`` or ``host:port``

        Returns:
            adb's confirmation text
        """
        result = await self._client.disconnect(host)
        self._controllers.discard_host(host)
        return result


# Module-level variable for the DeviceManager the MCP handlers use
_device_manager_instance: DeviceManager | None = None


def set_device_manager(device_manager: DeviceManager) -> None:
    """Set the device manager instance used by the MCP handlers.

    Args:
        device_manager: The DeviceManager instance to use
    """
    global _device_manager_instance  # pylint: disable=global-statement
    _device_manager_instance = device_manager


def get_device_manager() -> DeviceManager:
    """Get the device manager instance used by the MCP handlers.

    Returns:
        The registered DeviceManager instance

    Raises:
        RuntimeError: If the device manager instance hasn't been set
    """
    if _device_manager_instance is None:
        raise RuntimeError("DeviceManager instance hasn't been initialized")
    return _device_manager_instance
