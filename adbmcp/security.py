"""
Security helpers for adb-mcp.

This module covers the places where caller-supplied strings meet adb:
- Quoting for text that ends up on the device-side shell line
- Serial and host validation for the tool layer
- Risk-aware logging of every adb invocation

adb re-joins everything after ``shell`` into one line for the device's
``sh``, so executing adb without a local shell is not enough on its own:
text that reaches ``input text`` must still be quoted.
"""

from enum import Enum, auto
import re
import shlex

from adbmcp.log import logger


class RiskLevel(Enum):
    """Risk level for adb invocations."""

    SAFE = auto()
    LOW = auto()
    MEDIUM = auto()


_SERIAL_PATTERN = re.compile(r"^[A-Za-z0-9._:-]+$")
_HOST_PATTERN = re.compile(r"^[A-Za-z0-9.-]+(:\d{1,5})?$")

# Subcommands that change device or server state
_MEDIUM_RISK_SUBCOMMANDS = {"install", "uninstall"}
_MEDIUM_RISK_SHELL_COMMANDS = {"rm", "am", "pm"}
_LOW_RISK_SUBCOMMANDS = {"kill-server", "disconnect", "connect"}


def quote_for_device_shell(word: str) -> str:
    """
    Quote one word so the device shell passes it through unchanged.

    Newlines, tabs, globs and every other shell metacharacter lose their
    meaning inside the single quotes.

    Args:
        word: Arbitrary text

    Returns:
        A single ``sh`` word that expands back to ``word``
    """
    return shlex.quote(word)


def is_valid_serial(serial: str) -> bool:
    """Check that a serial only uses characters adb assigns (letters, digits, ``._:-``)."""
    return bool(_SERIAL_PATTERN.match(serial))


def is_valid_host(host: str) -> bool:
    """
    Check a ``host`` or ``host:port`` string for connect/disconnect.

    Args:
        host: Hostname or IP address with optional port

    Returns:
        True if the value is well formed and the port (if any) is in range
    """
    if not _HOST_PATTERN.match(host):
        return False
    if ":" in host:
        port = int(host.rsplit(":", 1)[1])
        return 1 <= port <= 65535
    return True


def assess_command_risk(args: list[str]) -> RiskLevel:
    """
    Assess the risk level of an adb argument vector.

    Args:
        args: adb arguments, without the binary itself

    Returns:
        RiskLevel enum indicating the risk level
    """
    remaining = list(args)
    if remaining[:1] == ["-s"]:
        remaining = remaining[2:]
    if not remaining:
        return RiskLevel.SAFE

    subcommand = remaining[0]
    if subcommand in _MEDIUM_RISK_SUBCOMMANDS:
        return RiskLevel.MEDIUM
    if subcommand in _LOW_RISK_SUBCOMMANDS:
        return RiskLevel.LOW
    if subcommand == "shell" and len(remaining) > 1 and remaining[1] in _MEDIUM_RISK_SHELL_COMMANDS:
        return RiskLevel.MEDIUM
    return RiskLevel.SAFE


def log_command_execution(args: list[str], command_line: str) -> None:
    """
    Log command execution with appropriate level based on risk.

    Args:
        args: The adb argument vector used for risk assessment
        command_line: Rendered form of the command for the log record
    """
    risk_level = assess_command_risk(args)

    if risk_level == RiskLevel.MEDIUM:
        logger.info("MEDIUM RISK COMMAND EXECUTION: %s", command_line)
    elif risk_level == RiskLevel.LOW:
        logger.info("LOW RISK COMMAND EXECUTION: %s", command_line)
    else:
        logger.debug("Command execution: %s", command_line)
