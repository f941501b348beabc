"""
Device Resources - read-only MCP resources describing attached devices.

Two resources are exposed:

1. ``device://list``: every device adb reports, with its state.
2. ``device://{serial}/info``: all properties of one device.
"""

import json

from adbmcp.context import mcp
from adbmcp.devices import get_device_manager
from adbmcp.security import is_valid_serial


@mcp.resource(
    "device://list",
    name="Connected Devices",
    description="List of all connected Android devices",
    mime_type="application/json",
)
async def device_list() -> str:
    """List connected devices as JSON."""
    devices = await get_device_manager().list_devices()
    return json.dumps([device.to_dict() for device in devices], indent=2)


@mcp.resource(
    "device://{serial}/info",
    name="Device Info",
    description="Properties of a connected Android device",
    mime_type="application/json",
)
async def device_info(serial: str) -> str:
    """Get all properties of one device as JSON.

    Args:
        serial: Device serial number

    Raises:
        ValueError: If the serial is not a plausible device serial
    """
    if not is_valid_serial(serial):
        raise ValueError(f"Invalid device serial: {serial}")
    properties = await get_device_manager().get_properties(serial)
    return json.dumps(properties, indent=2)
