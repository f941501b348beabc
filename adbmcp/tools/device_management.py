"""
Device Management Tools - MCP tools for the adb server and device connections.

This module provides MCP tools for connecting to and disconnecting from
network devices, listing devices, reading device information, and starting
or stopping the adb server.
"""

from enum import Enum

from mcp.server.fastmcp import Context

from adbmcp.context import mcp
from adbmcp.devices import get_device_manager
from adbmcp.log import logger
from adbmcp.security import is_valid_host
from adbmcp.tools.common import check_serial, format_error


class DeviceAction(str, Enum):
    """Defines the available sub-actions for the 'android-device' tool."""

    LIST_DEVICES = "list_devices"
    DEVICE_INFO = "device_info"
    DEVICE_PROPERTIES = "device_properties"
    START_SERVER = "start_server"
    KILL_SERVER = "kill_server"


@mcp.tool(name="connect_device")
async def connect_device(host: str, ctx: Context) -> str:
    """
    Connect to an Android device over the network.

    Args:
        host: Host address of the device (e.g. 192.168.1.100:5555)
        ctx: MCP context

    Returns:
        Confirmation message
    """
    if not is_valid_host(host):
        return f"Error: Invalid host address '{host}'. Use host or host:port."
    try:
        await ctx.info(f"Connecting to {host}...")
        await get_device_manager().connect(host)
        return f"Connected to device at {host}"
    except Exception as e:
        logger.exception("Error connecting to %s: %s", host, e)
        await ctx.error(f"Error connecting to {host}: {e!s}")
        return format_error(e)


@mcp.tool(name="disconnect_device")
async def disconnect_device(host: str, ctx: Context) -> str:
    """
    Disconnect from an Android device.

    Args:
        host: Host address of the device to disconnect
        ctx: MCP context

    Returns:
        Confirmation message
    """
    if not is_valid_host(host):
        return f"Error: Invalid host address '{host}'. Use host or host:port."
    try:
        await ctx.info(f"Disconnecting from {host}...")
        await get_device_manager().disconnect(host)
        return f"Disconnected from device at {host}"
    except Exception as e:
        logger.exception("Error disconnecting from %s: %s", host, e)
        await ctx.error(f"Error disconnecting from {host}: {e!s}")
        return format_error(e)


async def _list_devices_impl() -> str:
    devices = await get_device_manager().list_devices()
    if not devices:
        return "No devices connected. Use the connect_device tool to connect to a device."

    result = f"# Connected Android Devices ({len(devices)})\n\n"
    for device in devices:
        result += f"- `{device.serial}`: {device.state or 'unknown'}\n"
    return result


async def _device_info_impl(serial: str) -> str:
    info = await get_device_manager().device(serial).get_device_info()
    return f"# Device {serial}\n\n**Model**: {info.model}\n**Android Version**: {info.android_version}\n"


async def _device_properties_impl(serial: str) -> str:
    properties = await get_device_manager().get_properties(serial)

    result = f"# Device Properties for {serial}\n\n```properties\n"
    for key in sorted(properties):
        result += f"{key}={properties[key]}\n"
    result += "```"
    return result


@mcp.tool(name="android-device")
async def android_device(action: DeviceAction, ctx: Context, serial: str | None = None) -> str:
    """
    Perform device and adb server operations.

    Args:
        action: The specific device operation to perform.
        ctx: MCP Context for logging and interaction.
        serial (Optional[str]): Device serial number. Required by device_info and device_properties.

    Returns:
        A string message indicating the result or status of the operation.

    ---
    Available Actions and their specific argument usage:

    1.  `action="list_devices"`
    2.  `action="device_info"` - requires `serial`
    3.  `action="device_properties"` - requires `serial`
    4.  `action="start_server"`
    5.  `action="kill_server"`
    ---
    """
    try:
        if action in (DeviceAction.DEVICE_INFO, DeviceAction.DEVICE_PROPERTIES):
            if (error := await check_serial(serial, ctx)) is not None:
                return error

        if action == DeviceAction.LIST_DEVICES:
            return await _list_devices_impl()
        if action == DeviceAction.DEVICE_INFO:
            return await _device_info_impl(serial)  # type: ignore[arg-type]
        if action == DeviceAction.DEVICE_PROPERTIES:
            return await _device_properties_impl(serial)  # type: ignore[arg-type]
        if action == DeviceAction.START_SERVER:
            await get_device_manager().start_server()
            return "ADB server started"
        if action == DeviceAction.KILL_SERVER:
            await get_device_manager().kill_server()
            return "ADB server stopped"

        valid_actions = ", ".join(act.value for act in DeviceAction)
        logger.error("Invalid device action '%s' received. Valid actions are: %s", action, valid_actions)
        return f"Error: Unknown device action '{action}'. Valid actions are: {valid_actions}."

    except Exception as e:
        logger.exception("Error during device operation %s for serial '%s': %s", action, serial, e)
        await ctx.error(f"Error during '{action.value}': {e!s}")
        return format_error(e)
