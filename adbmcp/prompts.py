"""
adb-mcp Prompts - Prompt implementations for the MCP server.

The analyze_device prompt embeds a live snapshot of every attached device so
the assistant can reason about them without further tool calls.
"""

import json

from mcp.server.fastmcp.prompts import base

from adbmcp.context import mcp
from adbmcp.devices import get_device_manager


@mcp.prompt(name="analyze_device", description="Analyze device status and information")
async def analyze_device() -> list[base.Message]:
    """Build a prompt describing every listed device and its properties."""
    reports = await get_device_manager().describe_all()
    snapshot = json.dumps([report.to_dict() for report in reports], indent=2)

    return [
        base.UserMessage("Please analyze the following Android devices:"),
        base.UserMessage(snapshot),
        base.UserMessage(
            "Provide a detailed analysis of the connected devices, including their status, "
            "Android version, and key specifications."
        ),
    ]
