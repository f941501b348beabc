"""
Error types raised by the ADB layer.

Every failure that leaves :mod:`adbmcp.adb` is an :class:`ADBError`. Each kind
carries a stable ``code`` so callers can tell a missing device from a dead
server from a rejected command without matching on message text.
"""

import re


class ADBError(RuntimeError):
    """Base class for all ADB failures."""

    code = "adb_error"

    def __init__(self, message: str, *, command: str | None = None, stderr: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.command = command
        self.stderr = stderr

    def wrap(self, prefix: str) -> "ADBError":
        """Return an error of the same kind whose message names the failing operation.

        Args:
            prefix: Description of the high-level operation, e.g. "Failed to take screenshot"

        Returns:
            A new exception of the same class with the prefixed message
        """
        return type(self)(f"{prefix}: {self.message}", command=self.command, stderr=self.stderr)


class SpawnFailed(ADBError):
    """The adb executable could not be launched."""

    code = "spawn_failed"


class CommandFailed(ADBError):
    """adb ran but wrote to stderr or exited non-zero."""

    code = "command_failed"


class DeviceNotFound(CommandFailed):
    """adb reported that the target device is missing or offline."""

    code = "device_not_found"


class ServerUnavailable(CommandFailed):
    """adb could not reach its daemon."""

    code = "server_unavailable"


class CommandTimeout(ADBError):
    """The configured command timeout expired."""

    code = "timeout"


_DEVICE_NOT_FOUND = re.compile(
    r"device '.*' not found|device not found|no devices/emulators found|device offline|device unauthorized"
)
_SERVER_UNAVAILABLE = re.compile(r"cannot connect to daemon|daemon not running|failed to start daemon")


def classify_failure(stderr: str) -> type[CommandFailed]:
    """Pick the most specific CommandFailed subclass for a stderr text.

    Args:
        stderr: Text adb wrote to stderr

    Returns:
        The exception class to raise
    """
    lowered = stderr.lower()
    if _DEVICE_NOT_FOUND.search(lowered):
        return DeviceNotFound
    if _SERVER_UNAVAILABLE.search(lowered):
        return ServerUnavailable
    return CommandFailed
