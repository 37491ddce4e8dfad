"""History generator — the step-by-step trace of a scheduling run.

Given pending requests, a start head, and a direction, each policy
walks the head across the disk and records a ``Step`` after every
movement or service:

- **FCFS** — visit requests exactly in arrival order, repeats included.
- **SSTF** — always go to the nearest unserved request.
- **SCAN** — sweep to the disk edge, then reverse (the elevator).
- **C-SCAN** — sweep to the edge, jump to the opposite edge, sweep on.
- **LOOK** — like SCAN, but turn around at the last request.
- **C-LOOK** — like C-SCAN, but jump straight to the farthest request.

The four sweeping policies share one routine, ``SweepPolicy``,
parameterized by where a sweep ends (disk edge or last request) and how
the return leg is travelled (served on the way back, or one jump).

A ``SimulationRun`` always opens with a zero-cost Step at the start
head and closes with a copy of its last Step, so a consumer stepping
through it has a stable "done" frame to show.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from disk_motion.algorithms import Algorithm, Direction, parse_algorithm
from disk_motion.config import DEFAULT_CONFIG, DiskConfig
from disk_motion.requests import RequestSet, normalize, partition, validate_run_inputs

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


@dataclass(frozen=True)
class Step:
    """One frame of a run: where the head is and what has been served.

    Attributes:
        head: Head position after this step.
        cumulative_seek: Total head travel since the start of the run.
        served: Requests served so far.
        served_order: The same requests, in the order first served.

    """

    head: int
    cumulative_seek: int
    served: frozenset[int]
    served_order: tuple[int, ...]


@dataclass(frozen=True)
class SimulationRun:
    """The complete trace of one ``generate`` call."""

    algorithm: Algorithm
    start_head: int
    direction: Direction
    request_set: RequestSet
    steps: tuple[Step, ...]

    @property
    def final(self) -> Step:
        """Return the terminal (sentinel) step."""
        return self.steps[-1]

    @property
    def total_seek(self) -> int:
        """Return the total head travel of the run."""
        return self.final.cumulative_seek

    @property
    def served_order(self) -> tuple[int, ...]:
        """Return every request in the order it was served."""
        return self.final.served_order

    @property
    def head_path(self) -> list[int]:
        """Return the head position of every step, sentinel included."""
        return [step.head for step in self.steps]

    @property
    def average_seek(self) -> float:
        """Return total seek divided by the number of distinct requests."""
        return self.total_seek / len(self.request_set)

    def __len__(self) -> int:
        """Return the number of steps."""
        return len(self.steps)

    def __iter__(self) -> Iterator[Step]:
        """Iterate over the steps in order."""
        return iter(self.steps)

    def __getitem__(self, index: int) -> Step:
        """Return the step at *index*."""
        return self.steps[index]


class _RunBuilder:
    """Append-only accumulator the policies drive while walking."""

    def __init__(self, request_set: RequestSet, start_head: int) -> None:
        """Start a run at *start_head* with nothing served."""
        self._request_set = request_set
        self._head = start_head
        self._seek = 0
        self._served: set[int] = set()
        self._served_order: list[int] = []
        self._steps: list[Step] = []
        self._record()

    @property
    def head(self) -> int:
        """Return the current head position."""
        return self._head

    def _record(self) -> None:
        """Snapshot the current state as a new step."""
        self._steps.append(
            Step(
                head=self._head,
                cumulative_seek=self._seek,
                served=frozenset(self._served),
                served_order=tuple(self._served_order),
            )
        )

    def _mark_served(self, address: int) -> None:
        if address in self._request_set and address not in self._served:
            self._served.add(address)
            self._served_order.append(address)

    def serve_in_place(self) -> None:
        """Serve the request under the head at zero cost."""
        self._mark_served(self._head)
        self._record()

    def visit(self, address: int) -> None:
        """Move to *address* and serve it."""
        self._seek += abs(address - self._head)
        self._head = address
        self._mark_served(address)
        self._record()

    def move_to(self, address: int) -> None:
        """Move to *address* without serving anything (edges, jumps)."""
        self._seek += abs(address - self._head)
        self._head = address
        self._record()

    def finish(self) -> tuple[Step, ...]:
        """Append the sentinel copy of the last step and freeze the run."""
        self._steps.append(self._steps[-1])
        return tuple(self._steps)


class HistoryPolicy(Protocol):
    """Interface every history-generating policy satisfies (Strategy pattern)."""

    def walk(
        self,
        builder: _RunBuilder,
        request_set: RequestSet,
        start_head: int,
        direction: Direction,
        config: DiskConfig,
    ) -> None:
        """Drive *builder* through the policy's head movements."""
        ...  # pragma: no cover


class FCFSPolicy:
    """First Come, First Served — replay the requests in arrival order.

    Every visit costs seek, including a repeat of an address already
    served, but a repeated address is only listed as served once.
    """

    def walk(
        self,
        builder: _RunBuilder,
        request_set: RequestSet,
        start_head: int,  # noqa: ARG002
        direction: Direction,  # noqa: ARG002
        config: DiskConfig,  # noqa: ARG002
    ) -> None:
        """Visit each raw request in turn."""
        for request in request_set:
            builder.visit(request)


class SSTFPolicy:
    """Shortest Seek Time First — always go to the nearest request.

    Equidistant candidates are resolved in favour of the lower address:
    the remaining requests are kept sorted and ``min`` returns the first
    of several equal keys.
    """

    def walk(
        self,
        builder: _RunBuilder,
        request_set: RequestSet,
        start_head: int,
        direction: Direction,  # noqa: ARG002
        config: DiskConfig,  # noqa: ARG002
    ) -> None:
        """Serve greedily by distance from the current head."""
        remaining = list(request_set)
        if start_head in remaining:
            remaining.remove(start_head)
            builder.serve_in_place()
        while remaining:
            current = builder.head
            nearest = min(remaining, key=lambda r: abs(r - current))
            remaining.remove(nearest)
            builder.visit(nearest)


class SweepPolicy:
    """The SCAN family — sweep one way, then deal with the other side.

    Args:
        stop_at_boundary: Travel to the disk edge at the end of the
            first sweep (SCAN, C-SCAN) instead of turning at the last
            request (LOOK, C-LOOK).
        circular: Reach the far side with a single jump and serve it in
            the original sweep direction (C-SCAN, C-LOOK) instead of
            serving it on the way back (SCAN, LOOK).

    """

    def __init__(self, *, stop_at_boundary: bool, circular: bool) -> None:
        """Create a sweep policy with the given boundary and return rules."""
        self._stop_at_boundary = stop_at_boundary
        self._circular = circular

    def walk(
        self,
        builder: _RunBuilder,
        request_set: RequestSet,
        start_head: int,
        direction: Direction,
        config: DiskConfig,
    ) -> None:
        """Serve the near side, turn or wrap, then serve the far side."""
        below, above = partition(request_set, start_head)
        if start_head in request_set:
            builder.serve_in_place()

        if direction is Direction.RIGHT:
            near, far = above, below
            edge, opposite_edge = config.disk_max, 0
        else:
            near, far = below, above
            edge, opposite_edge = 0, config.disk_max

        for request in near:
            builder.visit(request)

        if self._stop_at_boundary and builder.head != edge:
            builder.move_to(edge)

        if not self._circular:
            for request in far:
                builder.visit(request)
            return

        # Circular: resume from the far end of the other side.
        if self._stop_at_boundary:
            builder.move_to(opposite_edge)
        for request in reversed(far):
            builder.visit(request)


POLICIES: dict[Algorithm, HistoryPolicy] = {
    Algorithm.FCFS: FCFSPolicy(),
    Algorithm.SSTF: SSTFPolicy(),
    Algorithm.SCAN: SweepPolicy(stop_at_boundary=True, circular=False),
    Algorithm.C_SCAN: SweepPolicy(stop_at_boundary=True, circular=True),
    Algorithm.LOOK: SweepPolicy(stop_at_boundary=False, circular=False),
    Algorithm.C_LOOK: SweepPolicy(stop_at_boundary=False, circular=True),
}


def generate(
    algorithm: Algorithm | str,
    requests: Sequence[int],
    start_head: int,
    direction: Direction | str = Direction.RIGHT,
    *,
    config: DiskConfig = DEFAULT_CONFIG,
) -> SimulationRun:
    """Simulate *algorithm* and return its full step-by-step trace.

    Args:
        algorithm: Policy token (``"fcfs"``, ``"sstf"``, ``"scan"``,
            ``"c-scan"``, ``"look"``, ``"c-look"``).
        requests: Raw request addresses; repeats allowed.
        start_head: Initial head position.
        direction: Initial sweep direction (ignored by FCFS and SSTF,
            but still validated).
        config: Disk geometry.

    Returns:
        A fresh ``SimulationRun``; nothing is shared between calls.

    Raises:
        SchedulingError: If any input violates a precondition.

    """
    algo = parse_algorithm(algorithm)
    parsed_direction = validate_run_inputs(requests, start_head, direction, config=config)
    request_set = normalize(requests, algo)

    builder = _RunBuilder(request_set, start_head)
    POLICIES[algo].walk(builder, request_set, start_head, parsed_direction, config)
    return SimulationRun(
        algorithm=algo,
        start_head=start_head,
        direction=parsed_direction,
        request_set=request_set,
        steps=builder.finish(),
    )
