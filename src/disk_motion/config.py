"""Disk geometry configuration.

The engine never hard-codes the size of the disk.  Every entry point
takes a ``DiskConfig`` whose ``disk_max`` is the highest addressable
track; the classic textbook disk has tracks ``0..199``.

A configuration can be loaded from a small JSON file::

    {"disk_max": 499}

Missing keys fall back to the defaults.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

DEFAULT_DISK_MAX = 199


class ConfigError(RuntimeError):
    """Raise when a disk configuration is invalid or cannot be loaded."""


@dataclass(frozen=True)
class DiskConfig:
    """Geometry of the simulated disk.

    Attributes:
        disk_max: Highest track address.  Valid addresses are
            ``0..disk_max`` inclusive.

    """

    disk_max: int = DEFAULT_DISK_MAX

    def __post_init__(self) -> None:
        """Reject geometries with no room for a head to move."""
        if isinstance(self.disk_max, bool) or not isinstance(self.disk_max, int):
            msg = f"disk_max must be an integer, got {self.disk_max!r}"
            raise ConfigError(msg)
        if self.disk_max < 1:
            msg = f"disk_max must be at least 1, got {self.disk_max}"
            raise ConfigError(msg)

    def contains(self, address: int) -> bool:
        """Return True if *address* is a track on this disk."""
        return 0 <= address <= self.disk_max


DEFAULT_CONFIG = DiskConfig()


def load_config(path: Path | None = None) -> DiskConfig:
    """Load a disk configuration from a JSON file, or return defaults.

    Args:
        path: JSON file holding an object with an optional
            ``disk_max`` key.  ``None`` means "use the defaults".

    Raises:
        ConfigError: If the file cannot be read, is not valid JSON, or
            describes an invalid geometry.

    """
    if path is None:
        return DEFAULT_CONFIG
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        msg = f"Cannot load disk configuration: {e}"
        raise ConfigError(msg) from e
    if not isinstance(data, dict):
        msg = f"Disk configuration must be a JSON object, got {type(data).__name__}"
        raise ConfigError(msg)
    return DiskConfig(disk_max=data.get("disk_max", DEFAULT_DISK_MAX))
