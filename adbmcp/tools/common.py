"""Shared helpers for adb-mcp tools."""

from __future__ import annotations

from mcp.server.fastmcp import Context

from adbmcp.errors import ADBError
from adbmcp.security import is_valid_serial


def format_error(error: Exception) -> str:
    """Render an exception as a tool result, tagging adb failures with their code."""
    if isinstance(error, ADBError):
        return f"Error ({error.code}): {error}"
    return f"Error: {error!s}"


async def check_serial(serial: str | None, ctx: Context) -> str | None:
    """Validate a serial before it reaches adb.

    Returns:
        An error message to return from the tool, or None if the serial is usable
    """
    if not serial:
        msg = "Error: 'serial' is required."
    elif not is_valid_serial(serial):
        msg = f"Error: Invalid device serial '{serial}'."
    else:
        return None
    await ctx.error(msg)
    return msg
