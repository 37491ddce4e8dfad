"""Request normalization — turning raw input into the unit of work.

Every policy except FCFS treats the *set* of distinct addresses as the
work to do, so the raw list is deduplicated and sorted once per run.
FCFS is the exception: it replays the raw list exactly (order and
repeats included) and only needs the distinct values to decide what
counts as "served".

This module also owns the checks that run before any simulation:

- ``validate_run_inputs`` — fail fast on empty input, out-of-range
  addresses, or an unknown direction.
- ``parse_request_list`` — lenient parsing of ``"98, 183, 37"`` text.
- ``random_workload`` — random requests, start head and direction.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

from disk_motion.algorithms import Algorithm, Direction, SchedulingError, parse_direction
from disk_motion.config import DEFAULT_CONFIG, DiskConfig

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

MIN_RANDOM_REQUESTS = 5
MAX_RANDOM_REQUESTS = 50


@dataclass(frozen=True)
class RequestSet:
    """The canonical requests one run must serve.

    Attributes:
        order: Addresses in walk order — the raw list for FCFS, the
            distinct addresses in ascending order for everything else.
        members: The distinct addresses, for "is this part of the
            original ask" checks.

    """

    order: tuple[int, ...]
    members: frozenset[int]

    def __len__(self) -> int:
        """Return the number of distinct requests."""
        return len(self.members)

    def __iter__(self) -> Iterator[int]:
        """Iterate over the addresses in walk order."""
        return iter(self.order)

    def __contains__(self, address: object) -> bool:
        """Return True if *address* is one of the distinct requests."""
        return address in self.members


def normalize(raw_requests: Iterable[int], algorithm: Algorithm) -> RequestSet:
    """Build the ``RequestSet`` *algorithm* walks for *raw_requests*."""
    raw = tuple(raw_requests)
    members = frozenset(raw)
    if algorithm is Algorithm.FCFS:
        return RequestSet(order=raw, members=members)
    return RequestSet(order=tuple(sorted(members)), members=members)


def partition(request_set: RequestSet, start_head: int) -> tuple[list[int], list[int]]:
    """Split the distinct requests around the start head.

    Returns:
        ``(below, above)`` where *below* holds the requests left of the
        head nearest-first (descending) and *above* the requests right
        of the head nearest-first (ascending).  A request sitting at the
        head itself is in neither list.

    """
    distinct = sorted(request_set.members)
    below = [r for r in reversed(distinct) if r < start_head]
    above = [r for r in distinct if r > start_head]
    return below, above


def _check_address(value: object, what: str, config: DiskConfig) -> None:
    """Raise unless *value* is an integer track on the disk."""
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{what} must be an integer, got {value!r}"
        raise SchedulingError(msg)
    if not config.contains(value):
        msg = f"{what} {value} is outside the disk (0-{config.disk_max})"
        raise SchedulingError(msg)


def validate_run_inputs(
    requests: Sequence[int],
    start_head: int,
    direction: Direction | str,
    *,
    config: DiskConfig = DEFAULT_CONFIG,
) -> Direction:
    """Check the inputs of one simulation and return the parsed direction.

    Raises:
        SchedulingError: If there are no requests, any address is not
            an integer in ``0..disk_max``, or the direction is unknown.

    """
    if len(requests) == 0:
        msg = "At least one request is required"
        raise SchedulingError(msg)
    for request in requests:
        _check_address(request, "Request", config)
    _check_address(start_head, "Start head", config)
    return parse_direction(direction)


def parse_request_list(text: str, *, config: DiskConfig = DEFAULT_CONFIG) -> list[int]:
    """Parse comma-separated addresses, dropping anything unusable.

    Blank, non-numeric, and out-of-range tokens are skipped so that a
    sloppy ``"98, 183,, x, 500"`` still yields ``[98, 183]``.

    Raises:
        SchedulingError: If no valid address remains.

    """
    requests: list[int] = []
    for token in text.split(","):
        try:
            value = int(token.strip())
        except ValueError:
            continue
        if config.contains(value):
            requests.append(value)
    if not requests:
        msg = f"No valid requests. Enter numbers between 0 and {config.disk_max}."
        raise SchedulingError(msg)
    return requests


def random_workload(
    count: int,
    *,
    rng: random.Random | None = None,
    config: DiskConfig = DEFAULT_CONFIG,
) -> tuple[list[int], int, Direction]:
    """Generate *count* distinct random requests, a start head and a direction.

    Args:
        count: Number of requests, between ``MIN_RANDOM_REQUESTS`` and
            ``MAX_RANDOM_REQUESTS``.
        rng: Source of randomness (a fresh ``random.Random`` if None).
        config: Disk geometry the addresses must fit.

    Raises:
        SchedulingError: If *count* is out of range or larger than the
            number of tracks on the disk.

    """
    if not MIN_RANDOM_REQUESTS <= count <= MAX_RANDOM_REQUESTS:
        msg = f"Count must be between {MIN_RANDOM_REQUESTS} and {MAX_RANDOM_REQUESTS}, got {count}"
        raise SchedulingError(msg)
    if count > config.disk_max + 1:
        msg = f"Cannot pick {count} distinct requests on a disk of {config.disk_max + 1} tracks"
        raise SchedulingError(msg)
    rng = rng if rng is not None else random.Random()  # noqa: S311
    requests = rng.sample(range(config.disk_max + 1), count)
    start_head = rng.randint(0, config.disk_max)
    direction = rng.choice(list(Direction))
    return requests, start_head, direction
