"""
Media Tools - MCP tools for capturing media from Android devices.

This module provides the screenshot tool. With an output path the PNG is saved
on the server; without one it is returned inline, converted to JPEG.
"""

import io
import os
import tempfile

import aiofiles
from mcp.server.fastmcp import Context, Image
from PIL import Image as PILImage, UnidentifiedImageError

from adbmcp.context import mcp
from adbmcp.devices import get_device_manager
from adbmcp.log import logger
from adbmcp.tools.common import check_serial, format_error


def _to_jpeg(png_data: bytes, quality: int) -> bytes:
    buffer = io.BytesIO()
    with PILImage.open(io.BytesIO(png_data)) as img:
        converted_img = img.convert("RGB") if img.mode in ("RGBA", "P", "LA") else img
        converted_img.save(buffer, format="JPEG", quality=quality, optimize=True)
    return buffer.getvalue()


async def _capture_inline(serial: str, quality: int, ctx: Context) -> Image:
    fd, temp_path = tempfile.mkstemp(prefix="adbmcp-", suffix=".png")
    os.close(fd)
    try:
        await get_device_manager().device(serial).take_screenshot(temp_path)
        async with aiofiles.open(temp_path, "rb") as f:
            screenshot_data = await f.read()
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)

    if not screenshot_data:
        await ctx.error("Empty screenshot data received")
        return Image(data=screenshot_data, format="png")

    try:
        await ctx.info(f"Converting screenshot to JPEG (quality: {quality})...")
        jpeg_data = _to_jpeg(screenshot_data, quality)
    except UnidentifiedImageError:
        logger.warning("Could not identify image data, returning unprocessed")
        return Image(data=screenshot_data, format="png")

    png_size = len(screenshot_data) / 1024
    jpg_size = len(jpeg_data) / 1024
    await ctx.info(f"Screenshot converted: {png_size:.1f}KB -> {jpg_size:.1f}KB")
    return Image(data=jpeg_data, format="jpeg")


@mcp.tool(name="android-screenshot", structured_output=False)
async def screenshot(serial: str, ctx: Context, output_path: str | None = None, quality: int = 75) -> Image | str:
    """
    Get a screenshot from a device.

    Args:
        serial: Device serial number
        ctx: MCP context
        output_path: Local file to save the PNG to. When omitted the image is returned.
        quality: JPEG quality for returned images (1-100, lower means smaller file size)

    Returns:
        The device screenshot as an image, or a message naming the saved file
    """
    if (error := await check_serial(serial, ctx)) is not None:
        return error

    quality = max(1, min(quality, 100))

    try:
        await ctx.info(f"Capturing screenshot from device {serial}...")
        if output_path:
            saved = await get_device_manager().device(serial).take_screenshot(output_path)
            return f"Screenshot saved to {saved}"
        return await _capture_inline(serial, quality, ctx)
    except Exception as e:
        logger.exception("Error capturing screenshot: %s", e)
        await ctx.error(f"Error capturing screenshot: {e!s}")
        return format_error(e)
