"""
Per-device controllers.

Two role-split objects bind a device serial to an :class:`ADBClient`:

1. InputController: taps, swipes, text input and key presses.
2. DeviceController: screenshots, device info, properties and app management.

Both are thin: they build the command, run it through the client and parse
what comes back. Neither checks that the device is attached; adb reports
that itself and the client raises ``DeviceNotFound``.
"""

import os

from adbmcp import commands
from adbmcp.adb import ADBClient
from adbmcp.errors import ADBError
from adbmcp.log import logger
from adbmcp.models import DeviceInfo
from adbmcp.parsers import parse_device_properties, parse_package_list


class _SerialBound:
    def __init__(self, serial: str, *, client: ADBClient) -> None:
        self._serial = serial
        self._client = client

    @property
    def serial(self) -> str:
        """Get the device serial number."""
        return self._serial

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._serial!r})"


class InputController(_SerialBound):
    """Sends input events to one device."""

    async def tap(self, x: int, y: int) -> None:
        """Simulate a tap at the specified coordinates.

        Args:
            x: X coordinate
            y: Y coordinate
        """
        await self._client.execute(commands.tap(self._serial, x, y))

    async def swipe(self, start_x: int, start_y: int, end_x: int, end_y: int) -> None:
        """Simulate a swipe gesture from one point to another.

        Args:
            start_x: Starting X coordinate
            start_y: Starting Y coordinate
            end_x: Ending X coordinate
            end_y: Ending Y coordinate
        """
        await self._client.execute(commands.swipe(self._serial, start_x, start_y, end_x, end_y))

    async def input_text(self, text: str) -> None:
        """Type text into the focused field.

        Args:
            text: Text to input; quoted as one word for the device shell
        """
        await self._client.execute(commands.input_text(self._serial, text))

    async def press_key(self, keycode: str | int) -> None:
        """Simulate pressing a key.

        Common keycodes:
        - 3 / KEYCODE_HOME
        - 4 / KEYCODE_BACK
        - 26 / KEYCODE_POWER
        - 66 / KEYCODE_ENTER

        Args:
            keycode: Android keycode, numeric or symbolic
        """
        await self._client.execute(commands.press_key(self._serial, keycode))


class DeviceController(_SerialBound):
    """Device-level operations for one device."""

    async def take_screenshot(self, output_path: str) -> str:
        """Capture the screen and save it locally.

        The capture goes to a fixed file on the device, is pulled to
        ``output_path`` and then removed from the device. A failing step stops
        the sequence; earlier steps are not undone.

        Args:
            output_path: Local file to write the PNG to

        Returns:
            The path the screenshot was saved to

        Raises:
            ADBError: The failing step's error, prefixed with "Failed to take screenshot"
        """
        device_path = commands.SCREENSHOT_DEVICE_PATH
        try:
            logger.info("Taking screenshot on %s", self._serial)
            await self._client.execute(commands.take_screenshot(self._serial, device_path))

            output_dir = os.path.dirname(output_path)
            if output_dir:
                os.makedirs(output_dir, exist_ok=True)

            await self._client.execute(commands.pull_file(self._serial, device_path, output_path))
            await self._client.execute(commands.remove_file(self._serial, device_path))
        except ADBError as e:
            raise e.wrap("Failed to take screenshot") from e

        return output_path

    async def get_device_info(self) -> DeviceInfo:
        """Get the model name and Android release."""
        model = await self._client.execute(commands.get_model(self._serial))
        android_version = await self._client.execute(commands.get_android_version(self._serial))
        return DeviceInfo(model=model, android_version=android_version)

    async def get_properties(self) -> dict[str, str]:
        """Get all device properties.

        Returns:
            Dictionary of device properties
        """
        output = await self._client.execute(commands.get_properties(self._serial))
        return parse_device_properties(output)

    async def list_packages(self) -> list[str]:
        """List installed package names."""
        output = await self._client.execute(commands.list_packages(self._serial))
        return parse_package_list(output)

    async def install_app(self, apk_path: str) -> str:
        """Install an APK from the local machine.

        Args:
            apk_path: Path to the APK file

        Returns:
            adb's installation output
        """
        logger.info("Installing %s on %s", apk_path, self._serial)
        return await self._client.execute(commands.install_app(self._serial, apk_path))

    async def uninstall_app(self, package: str) -> str:
        """Uninstall a package.

        Args:
            package: Package name to uninstall

        Returns:
            adb's uninstall output
        """
        logger.info("Uninstalling %s from %s", package, self._serial)
        return await self._client.execute(commands.uninstall_app(self._serial, package))

    async def start_app(self, package: str) -> None:
        """Launch a package's default activity via monkey."""
        await self._client.execute(commands.start_app(self._serial, package))

    async def stop_app(self, package: str) -> None:
        """Force stop a package."""
        await self._client.execute(commands.stop_app(self._serial, package))
