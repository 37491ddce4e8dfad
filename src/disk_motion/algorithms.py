"""Algorithm and direction tokens shared by every part of the engine.

Callers name a scheduling policy with a short token (``"fcfs"``,
``"c-look"``) and, for the sweeping policies, an initial direction
(``"left"`` towards address 0, ``"right"`` towards the last address).

Tokens are ``StrEnum`` members so they compare equal to the plain
strings a web form or JSON body delivers, while still giving the rest
of the engine a closed set of values to branch on.
"""

from enum import StrEnum


class SchedulingError(ValueError):
    """Raise when a simulation precondition is violated.

    Examples: an empty request list, an address outside the disk, an
    unknown algorithm or direction token.  The engine never tries to
    repair bad input; it rejects it before any work is done.
    """


class Algorithm(StrEnum):
    """The six disk-head scheduling policies the engine can simulate.

    Declaration order is the canonical order used when results are
    listed side by side (and for breaking ties in a ranking).
    """

    FCFS = "fcfs"
    SSTF = "sstf"
    SCAN = "scan"
    C_SCAN = "c-scan"
    LOOK = "look"
    C_LOOK = "c-look"

    @property
    def is_directional(self) -> bool:
        """Return True if the policy sweeps and needs a start direction."""
        return self not in {Algorithm.FCFS, Algorithm.SSTF}

    @property
    def label(self) -> str:
        """Return the display name (``"C-SCAN"``)."""
        return self.value.upper()


class Direction(StrEnum):
    """Initial sweep direction of the disk head."""

    LEFT = "left"
    RIGHT = "right"


def parse_algorithm(token: Algorithm | str) -> Algorithm:
    """Return the ``Algorithm`` named by *token*.

    Raises:
        SchedulingError: If the token names no known algorithm.

    """
    if isinstance(token, Algorithm):
        return token
    try:
        return Algorithm(str(token).strip().lower())
    except ValueError as e:
        known = ", ".join(a.value for a in Algorithm)
        msg = f"Unknown algorithm {token!r} (expected one of: {known})"
        raise SchedulingError(msg) from e


def parse_direction(token: Direction | str) -> Direction:
    """Return the ``Direction`` named by *token*.

    Raises:
        SchedulingError: If the token is neither ``left`` nor ``right``.

    """
    if isinstance(token, Direction):
        return token
    try:
        return Direction(str(token).strip().lower())
    except ValueError as e:
        msg = f"Unknown direction {token!r} (expected 'left' or 'right')"
        raise SchedulingError(msg) from e
