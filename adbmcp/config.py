"""Runtime configuration for the ADB layer."""

from dataclasses import dataclass

DEFAULT_CONTROLLER_CACHE_SIZE = 64


@dataclass(frozen=True)
class ADBConfig:
    """Settings shared by the client and the device manager.

    Attributes:
        adb_path: Path to the adb binary (resolved on PATH when bare)
        timeout_seconds: Per-command timeout, None waits forever
        controller_cache_size: How many serials keep cached controllers
    """

    adb_path: str = "adb"
    timeout_seconds: float | None = None
    controller_cache_size: int = DEFAULT_CONTROLLER_CACHE_SIZE

    def __post_init__(self) -> None:
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive or None")
        if self.controller_cache_size < 1:
            raise ValueError("controller_cache_size must be at least 1")
