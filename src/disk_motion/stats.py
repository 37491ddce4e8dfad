"""Stats calculator — total seek time without building a trace.

For a side-by-side comparison we only need one number per policy, so
each policy's total is computed directly from the sorted requests:
how far the head travels to the end of its first sweep, plus how far
it travels to cover the other side.  None of this goes through
``history``; the two modules agree because they apply the same rules,
and the test suite checks that they do.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from disk_motion.algorithms import Algorithm, Direction, parse_algorithm
from disk_motion.config import DEFAULT_CONFIG, DiskConfig
from disk_motion.requests import validate_run_inputs

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True)
class AlgorithmResult:
    """One row of a comparison: a policy and its total seek."""

    algorithm: Algorithm
    total_seek: int


def _fcfs(requests: Sequence[int], head: int) -> int:
    total = 0
    for request in requests:
        total += abs(request - head)
        head = request
    return total


def _sstf(requests: Sequence[int], head: int) -> int:
    remaining = sorted(set(requests) - {head})
    total = 0
    while remaining:
        current = head
        head = min(remaining, key=lambda r: abs(r - current))
        total += abs(head - current)
        remaining.remove(head)
    return total


def _sweep(
    requests: Sequence[int],
    head: int,
    direction: Direction,
    disk_max: int,
    *,
    stop_at_boundary: bool,
    circular: bool,
) -> int:
    """Return the total seek of the SCAN family in closed form.

    The problem is mirrored so that the first sweep always runs towards
    the high end: for a leftward start every address ``a`` becomes
    ``disk_max - a``.  Distances are unchanged by the reflection.
    """
    if direction is Direction.LEFT:
        requests = [disk_max - r for r in requests]
        head = disk_max - head
    ahead = [r for r in requests if r > head]
    behind = [r for r in requests if r < head]

    turn = disk_max if stop_at_boundary else max(ahead, default=head)
    total = turn - head
    if circular and stop_at_boundary:
        # Jump from the edge to address 0, then climb to the highest behind.
        total += disk_max + max(behind, default=0)
    elif circular:
        if behind:
            total += (turn - min(behind)) + (max(behind) - min(behind))
    elif behind:
        total += turn - min(behind)
    return total


def compute_total_seek(
    algorithm: Algorithm | str,
    raw_requests: Sequence[int],
    start_head: int,
    direction: Direction | str = Direction.RIGHT,
    *,
    config: DiskConfig = DEFAULT_CONFIG,
) -> int:
    """Return the total seek *algorithm* would produce for these inputs.

    Agrees with ``generate(...).total_seek`` for identical arguments.

    Raises:
        SchedulingError: If any input violates a precondition.

    """
    algo = parse_algorithm(algorithm)
    parsed_direction = validate_run_inputs(raw_requests, start_head, direction, config=config)

    if algo is Algorithm.FCFS:
        return _fcfs(raw_requests, start_head)
    if algo is Algorithm.SSTF:
        return _sstf(raw_requests, start_head)
    return _sweep(
        raw_requests,
        start_head,
        parsed_direction,
        config.disk_max,
        stop_at_boundary=algo in {Algorithm.SCAN, Algorithm.C_SCAN},
        circular=algo in {Algorithm.C_SCAN, Algorithm.C_LOOK},
    )


def compare_all(
    raw_requests: Sequence[int],
    start_head: int,
    direction: Direction | str = Direction.RIGHT,
    *,
    config: DiskConfig = DEFAULT_CONFIG,
) -> list[AlgorithmResult]:
    """Rank every algorithm by total seek, best first.

    Ties keep the canonical ``Algorithm`` declaration order (the sort
    is stable).
    """
    results = [
        AlgorithmResult(
            algorithm=algo,
            total_seek=compute_total_seek(algo, raw_requests, start_head, direction, config=config),
        )
        for algo in Algorithm
    ]
    return sorted(results, key=lambda r: r.total_seek)


def average_seek(total_seek: int, request_count: int) -> float:
    """Return the mean seek per request (0.0 when there are none)."""
    if request_count <= 0:
        return 0.0
    return total_seek / request_count
