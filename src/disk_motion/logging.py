"""Service log — a structured record of what the simulator was asked.

The scheduling engine itself is pure and never logs.  The layers that
serve it (the web API) record an entry for every simulation, every
comparison, and every rejected input:

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry** — a single immutable record (level, message, source).
- **Logger** — a bounded buffer with filtering and clearing.  Once full,
  the oldest entry is dropped for each new one.
"""

from collections import deque
from dataclasses import dataclass
from enum import IntEnum

DEFAULT_CAPACITY = 1000


class LogLevel(IntEnum):
    """Severity levels for log entries, comparable with ``<``."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The component that generated the event (e.g. "simulate").

    """

    level: LogLevel
    message: str
    source: str

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message``."""
        return f"[{self.level.name}] {self.source}: {self.message}"


class Logger:
    """Bounded log buffer with filtering.

    Args:
        capacity: Maximum number of entries kept; older entries are
            discarded first.

    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        """Create an empty logger holding at most *capacity* entries."""
        self._entries: deque[LogEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int | None:
        """Return the maximum number of entries kept."""
        return self._entries.maxlen

    @property
    def entries(self) -> list[LogEntry]:
        """Return all log entries in chronological order."""
        return list(self._entries)

    def log(self, level: LogLevel, message: str, *, source: str) -> None:
        """Append a new entry to the log."""
        self._entries.append(LogEntry(level=level, message=message, source=source))

    def info(self, message: str, *, source: str) -> None:
        """Append an INFO entry."""
        self.log(LogLevel.INFO, message, source=source)

    def warning(self, message: str, *, source: str) -> None:
        """Append a WARNING entry."""
        self.log(LogLevel.WARNING, message, source=source)

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching the given criteria.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.

        """
        result = list(self._entries)
        if min_level is not None:
            result = [e for e in result if e.level >= min_level]
        if source is not None:
            result = [e for e in result if e.source == source]
        return result

    def clear(self) -> None:
        """Remove all log entries."""
        self._entries.clear()


def parse_level(name: str) -> LogLevel:
    """Return the ``LogLevel`` called *name* (case-insensitive).

    Raises:
        ValueError: If no level has that name.

    """
    try:
        return LogLevel[name.strip().upper()]
    except KeyError as e:
        known = ", ".join(level.name.lower() for level in LogLevel)
        msg = f"Unknown log level {name!r} (expected one of: {known})"
        raise ValueError(msg) from e
