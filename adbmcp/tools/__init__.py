"""
adb-mcp Tools Package - MCP tools for controlling Android devices.

Importing this package registers every tool with the shared FastMCP instance.
Tools are organized by functionality into separate modules.
"""

from adbmcp.tools.app_management import app_operations
from adbmcp.tools.device_management import android_device, connect_device, disconnect_device
from adbmcp.tools.media import screenshot
from adbmcp.tools.ui import android_ui

__all__ = [
    "android_device",
    "android_ui",
    "app_operations",
    "connect_device",
    "disconnect_device",
    "screenshot",
]
