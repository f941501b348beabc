"""
ADB data models.
Data classes for values parsed out of adb output.
"""

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class Device:
    """A device line from ``adb devices``."""

    serial: str
    state: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DeviceInfo:
    """Model name and Android release of a device."""

    model: str
    android_version: str


@dataclass
class DeviceReport:
    """One device's entry in a bulk property query.

    ``error`` is only set when the query isolates per-device failures.
    """

    serial: str
    state: str | None
    properties: dict[str, str] = field(default_factory=dict)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"serial": self.serial, "state": self.state, "properties": self.properties}
        if self.error is not None:
            result["error"] = self.error
        return result
