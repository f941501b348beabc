"""Parsers for adb command output.

All parsers are total: empty or ragged input gives empty results, and lines
that do not fit the expected shape are skipped rather than reported.
"""

import re

from adbmcp.log import logger
from adbmcp.models import Device

PACKAGE_PREFIX = "package:"

_PROPERTY_PATTERN = re.compile(r"\[([^\]]+)\]: \[([^\]]*)\]")


def parse_device_list(output: str) -> list[Device]:
    """Parse the output of 'adb devices'.

    Args:
        output: Raw output, starting with the "List of devices attached" header

    Returns:
        One Device per non-blank line after the header
    """
    devices = []
    for line in output.splitlines()[1:]:  # Skip the header line
        if not line.strip():
            continue

        serial, tab, state = line.partition("\t")
        if not tab:
            # No state column; keep the serial and leave the state unknown
            logger.debug("Device line without state: %r", line)
            devices.append(Device(serial=serial.strip()))
            continue

        devices.append(Device(serial=serial, state=state.strip()))
    return devices


def parse_device_properties(output: str) -> dict[str, str]:
    """Parse the output of 'getprop' into a property mapping.

    Each property appears as ``[key]: [value]``. Properties with an empty
    value are left out; a repeated key keeps its last value.

    Args:
        output: Raw command output from 'getprop'

    Returns:
        Dictionary of property names to values, in first-seen order
    """
    properties: dict[str, str] = {}
    for match in _PROPERTY_PATTERN.finditer(output):
        key, value = match.groups()
        if value:
            properties[key] = value
    return properties


def parse_package_list(output: str) -> list[str]:
    """Parse the output of 'pm list packages'.

    Args:
        output: Raw command output, one "package:<name>" per line

    Returns:
        Package names in output order
    """
    return [line[len(PACKAGE_PREFIX) :].strip() for line in output.splitlines() if line.startswith(PACKAGE_PREFIX)]
