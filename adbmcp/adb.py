"""
ADB client for adb-mcp.

This module runs the system's adb binary and turns its output into text or
errors. Failure is decided by stderr: any output there fails the command,
whatever the exit code.
"""

import asyncio
from contextlib import AsyncExitStack

from adbmcp import commands
from adbmcp.config import ADBConfig
from adbmcp.errors import ADBError, CommandFailed, CommandTimeout, SpawnFailed, classify_failure
from adbmcp.log import logger
from adbmcp.models import Device
from adbmcp.parsers import parse_device_list
from adbmcp.security import log_command_execution


class ADBClient:
    """Runs adb commands for every device the server talks to.

    One client is built at startup from an :class:`ADBConfig` and handed to
    whatever needs it; tests pass a stand-in with the same ``execute``.
    """

    def __init__(self, config: ADBConfig | None = None):
        """Initialize the ADB client.

        Args:
            config: adb binary path and timeout settings (defaults if omitted)
        """
        self.config = config or ADBConfig()
        logger.debug("ADBClient initialized with binary path: %s", self.adb_path)

    @property
    def adb_path(self) -> str:
        return self.config.adb_path

    async def execute(self, args: list[str]) -> str:
        """Run one adb command and return its stdout.

        Args:
            args: Arguments to pass to adb, as built by :mod:`adbmcp.commands`

        Returns:
            stdout with trailing whitespace removed

        Raises:
            SpawnFailed: If the adb binary could not be started
            CommandFailed: If adb wrote to stderr or exited non-zero
            CommandTimeout: If a timeout is configured and expired
        """
        command_line = commands.render_command(args)
        log_command_execution(args, command_line)

        try:
            process = await asyncio.create_subprocess_exec(
                self.adb_path,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            error_msg = f"ADB binary not found at path: {self.adb_path}. Please ensure ADB is installed and in your PATH."
            logger.error(error_msg)
            raise SpawnFailed(error_msg, command=command_line) from e
        except PermissionError as e:
            error_msg = f"Permission denied when executing ADB binary: {self.adb_path}. Check file permissions."
            logger.error(error_msg)
            raise SpawnFailed(error_msg, command=command_line) from e
        except OSError as e:
            error_msg = f"OS error when launching ADB command: {command_line}. Error: {e}"
            logger.error(error_msg)
            raise SpawnFailed(error_msg, command=command_line) from e

        timeout_seconds = self.config.timeout_seconds
        try:
            async with AsyncExitStack() as stack:
                if timeout_seconds is not None:
                    await stack.enter_async_context(asyncio.timeout(timeout_seconds))
                stdout_bytes, stderr_bytes = await process.communicate()
        except TimeoutError as exc:
            process.kill()
            await process.wait()
            logger.error("ADB command timed out after %ss: %s", timeout_seconds, command_line)
            raise CommandTimeout(f"ADB command timed out: {command_line}", command=command_line) from exc

        stdout = stdout_bytes.decode("utf-8", errors="replace")
        stderr = stderr_bytes.decode("utf-8", errors="replace")

        if stderr:
            error_cls = classify_failure(stderr)
            error_msg = f"ADB command failed: {stderr.strip()}"
            logger.error("%s (%s)", error_msg, command_line)
            raise error_cls(error_msg, command=command_line, stderr=stderr)

        if process.returncode != 0:
            error_msg = f"ADB command failed with code {process.returncode}: {stdout.strip()}"
            logger.error("%s (%s)", error_msg, command_line)
            raise CommandFailed(error_msg, command=command_line, stderr=stderr)

        return stdout.rstrip()

    async def _execute_as(self, operation: str, args: list[str]) -> str:
        """Run a command, prefixing any failure with the operation it belongs to."""
        try:
            return await self.execute(args)
        except ADBError as e:
            raise e.wrap(operation) from e

    async def start_server(self) -> None:
        """Start the adb server. Safe to repeat when it is already running."""
        await self._execute_as("Failed to start ADB server", commands.START_SERVER)

    async def kill_server(self) -> None:
        """Stop the adb server."""
        await self._execute_as("Failed to kill ADB server", commands.KILL_SERVER)

    async def get_devices(self) -> list[Device]:
        """Get the devices adb currently knows about.

        Returns:
            Parsed ``adb devices`` entries
        """
        output = await self._execute_as("Failed to get device list", commands.DEVICES)
        devices = parse_device_list(output)
        if not devices:
            logger.info("No devices connected")
        return devices

    async def connect(self, host: str) -> str:
        """Connect to a device over TCP/IP.

        Args:
            host: ``host`` or ``host:port`` of the device

        Returns:
            adb's confirmation text
        """
        logger.info("Connecting to device at %s", host)
        return await self._execute_as(f"Failed to connect to {host}", commands.connect(host))

    async def disconnect(self, host: str) -> str:
        """Disconnect a TCP/IP device.

        Args:
            host: ``host`` or ``host:port`` of the device

        Returns:
            adb's confirmation text
        """
        logger.info("Disconnecting from device at %s", host)
        return await self._execute_as(f"Failed to disconnect from {host}", commands.disconnect(host))
