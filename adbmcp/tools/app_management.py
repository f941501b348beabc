"""
App Management Tools - MCP tools for installing and controlling Android applications.

This module provides the 'android-app' tool for listing, installing,
uninstalling, starting and stopping packages.
"""

from enum import Enum
import os

from mcp.server.fastmcp import Context

from adbmcp.context import mcp
from adbmcp.devices import get_device_manager
from adbmcp.log import logger
from adbmcp.tools.common import check_serial, format_error


class AppAction(str, Enum):
    """Defines the available sub-actions for the 'android-app' tool."""

    LIST_PACKAGES = "list_packages"
    INSTALL_APP = "install_app"
    UNINSTALL_APP = "uninstall_app"
    START_APP = "start_app"
    STOP_APP = "stop_app"


_PACKAGE_ACTIONS = (AppAction.UNINSTALL_APP, AppAction.START_APP, AppAction.STOP_APP)


async def _list_packages_impl(serial: str, max_packages: int | None) -> str:
    packages = await get_device_manager().device(serial).list_packages()
    if not packages:
        return f"No packages found on device {serial}."

    shown = packages if max_packages is None or max_packages <= 0 else packages[:max_packages]
    result = f"# Installed Packages on {serial} ({len(packages)})\n\n"
    result += "".join(f"- `{package}`\n" for package in shown)
    if len(shown) < len(packages):
        result += f"\n... {len(packages) - len(shown)} more not shown\n"
    return result


async def _install_app_impl(serial: str, apk_path: str, ctx: Context) -> str:
    if not os.path.exists(apk_path):
        return f"Error: APK file not found: {apk_path}"

    await ctx.info(f"Installing {os.path.basename(apk_path)} on {serial}...")
    output = await get_device_manager().device(serial).install_app(apk_path)
    return f"Installed {os.path.basename(apk_path)} on {serial}\n\n```\n{output}\n```"


@mcp.tool(name="android-app")
async def app_operations(
    serial: str,
    action: AppAction,
    ctx: Context,
    package: str | None = None,
    apk_path: str | None = None,
    max_packages: int | None = 200,
) -> str:
    """
    Perform application management operations on an Android device.

    Args:
        serial: Device serial number.
        action: The specific app operation to perform.
        ctx: MCP Context for logging and interaction.
        package (Optional[str]): Package name. Required by uninstall_app, start_app and stop_app.
        apk_path (Optional[str]): Path to the APK file (local to the server). Used by `install_app`.
        max_packages (Optional[int]): Max packages to return. Used by `list_packages`.

    Returns:
        A string message indicating the result or status of the operation.

    ---
    Available Actions and their specific argument usage:

    1.  `action="list_packages"` - optional `max_packages`
    2.  `action="install_app"` - requires `apk_path`
    3.  `action="uninstall_app"` - requires `package`
    4.  `action="start_app"` - requires `package`
    5.  `action="stop_app"` - requires `package`
    ---
    """
    try:
        if (error := await check_serial(serial, ctx)) is not None:
            return error

        if action in _PACKAGE_ACTIONS and not package:
            return f"Error: 'package' is required for action '{action.value}'."

        if action == AppAction.INSTALL_APP and not apk_path:
            return "Error: 'apk_path' is required for action 'install_app'."

        controller = get_device_manager().device(serial)

        if action == AppAction.LIST_PACKAGES:
            return await _list_packages_impl(serial, max_packages)
        if action == AppAction.INSTALL_APP:
            return await _install_app_impl(serial, apk_path, ctx)  # type: ignore[arg-type]
        if action == AppAction.UNINSTALL_APP:
            await ctx.info(f"Uninstalling {package} from {serial}...")
            output = await controller.uninstall_app(package)  # type: ignore[arg-type]
            return f"Uninstalled {package} from {serial}: {output}"
        if action == AppAction.START_APP:
            await controller.start_app(package)  # type: ignore[arg-type]
            return f"Started package {package}"
        if action == AppAction.STOP_APP:
            await controller.stop_app(package)  # type: ignore[arg-type]
            return f"Stopped package {package}"

        valid_actions = ", ".join(act.value for act in AppAction)
        logger.error("Invalid app action '%s' received. Valid actions are: %s", action, valid_actions)
        return f"Error: Unknown app action '{action}'. Valid actions are: {valid_actions}."

    except Exception as e:
        logger.exception("Error during app operation %s on %s for package '%s': %s", action, serial, package, e)
        await ctx.error(f"Error during '{action.value}': {e!s}")
        return format_error(e)
