"""
UI Automation Tools - MCP tools for interacting with Android device UI.

This module provides MCP tools for touch interaction, text input and key presses.
"""

from enum import Enum

from mcp.server.fastmcp import Context

from adbmcp.context import mcp
from adbmcp.devices import get_device_manager
from adbmcp.log import logger
from adbmcp.tools.common import check_serial, format_error


class UIAction(str, Enum):
    """Actions available for UI automation."""

    TAP = "tap"
    SWIPE = "swipe"
    INPUT_TEXT = "input_text"
    PRESS_KEY = "press_key"


# Human-readable names for the keycodes assistants use most
KEY_NAMES = {
    "3": "HOME",
    "4": "BACK",
    "24": "VOLUME UP",
    "25": "VOLUME DOWN",
    "26": "POWER",
    "66": "ENTER",
    "82": "MENU",
}


async def _tap_impl(serial: str, x: int, y: int, ctx: Context) -> str:
    await ctx.info(f"Tapping at coordinates ({x}, {y}) on device {serial}...")
    await get_device_manager().input(serial).tap(x, y)
    return f"Successfully tapped at ({x}, {y})"


async def _swipe_impl(serial: str, start_x: int, start_y: int, end_x: int, end_y: int, ctx: Context) -> str:
    await ctx.info(f"Swiping from ({start_x}, {start_y}) to ({end_x}, {end_y}) on device {serial}...")
    await get_device_manager().input(serial).swipe(start_x, start_y, end_x, end_y)
    return f"Successfully swiped from ({start_x}, {start_y}) to ({end_x}, {end_y})"


async def _input_text_impl(serial: str, text: str, ctx: Context) -> str:
    await ctx.info(f"Inputting text on device {serial}...")
    await get_device_manager().input(serial).input_text(text)
    return "Successfully input text on device"


async def _press_key_impl(serial: str, keycode: str, ctx: Context) -> str:
    key_name = KEY_NAMES.get(keycode, keycode)
    await ctx.info(f"Pressing key {key_name} on device {serial}...")
    await get_device_manager().input(serial).press_key(keycode)
    return f"Successfully pressed key {key_name}"


@mcp.tool(name="android-ui")
async def android_ui(  # pylint: disable=too-many-arguments
    ctx: Context,
    serial: str,
    action: UIAction,
    x: int | None = None,
    y: int | None = None,
    start_x: int | None = None,
    start_y: int | None = None,
    end_x: int | None = None,
    end_y: int | None = None,
    text: str | None = None,
    keycode: str | None = None,
) -> str:
    """
    Perform UI interaction operations on an Android device.

    Args:
        ctx: MCP Context.
        serial: Device serial number.
        action: The UI action to perform.
        x: X coordinate (for tap).
        y: Y coordinate (for tap).
        start_x: Starting X coordinate (for swipe).
        start_y: Starting Y coordinate (for swipe).
        end_x: Ending X coordinate (for swipe).
        end_y: Ending Y coordinate (for swipe).
        text: Text to input (for input_text).
        keycode: Android keycode, numeric or symbolic such as KEYCODE_HOME (for press_key).

    Returns:
        A string message indicating the result of the operation.
    """
    if (error := await check_serial(serial, ctx)) is not None:
        return error

    try:
        if action == UIAction.TAP:
            if x is None or y is None:
                msg = "Error: 'x' and 'y' coordinates are required for tap action."
                await ctx.error(msg)
                return msg
            return await _tap_impl(serial, x, y, ctx)

        if action == UIAction.SWIPE:
            if start_x is None or start_y is None or end_x is None or end_y is None:
                msg = "Error: 'start_x', 'start_y', 'end_x', and 'end_y' are required for swipe action."
                await ctx.error(msg)
                return msg
            return await _swipe_impl(serial, start_x, start_y, end_x, end_y, ctx)

        if action == UIAction.INPUT_TEXT:
            if text is None:
                msg = "Error: 'text' is required for input_text action."
                await ctx.error(msg)
                return msg
            return await _input_text_impl(serial, text, ctx)

        if action == UIAction.PRESS_KEY:
            if not keycode:
                msg = "Error: 'keycode' is required for press_key action."
                await ctx.error(msg)
                return msg
            return await _press_key_impl(serial, keycode, ctx)

    except Exception as e:
        logger.exception("Error executing %s operation: %s", action.value, e)
        await ctx.error(f"Error executing {action.value} operation: {e!s}")
        return format_error(e)

    unhandled_action_msg = f"Error: Unhandled UI action '{action}'."
    logger.error(unhandled_action_msg)
    await ctx.error(unhandled_action_msg)
    return unhandled_action_msg
