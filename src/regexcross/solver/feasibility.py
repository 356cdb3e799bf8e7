"""Brute-force feasibility checks for a single row or column."""

from collections.abc import Iterator, Sequence
from itertools import product

from regexcross.hints import Matcher, line_matches


def line_assignments(candidates: Sequence[bytes], pivot: int, value: int) -> Iterator[bytes]:
    """Enumerate every full assignment of a line with the pivot cell fixed.

    This is a mixed-radix counter: each open position (not the pivot, more than one
    candidate) is a digit whose radix is the size of its candidate set.  Decided
    positions keep their single byte.  Assignments are produced lazily, so callers can
    stop at the first one they like.

    Args:
        candidates: Candidate byte set of every cell on the line, in order.
        pivot: Index of the cell being tested.
        value: The byte the pivot cell is fixed to.
    """
    digits = [
        bytes([value]) if i == pivot else cell_candidates
        for i, cell_candidates in enumerate(candidates)
    ]
    for combination in product(*digits):
        yield bytes(combination)


def line_is_feasible(
    candidates: Sequence[bytes],
    pivot: int,
    value: int,
    matchers: list[Matcher],
) -> bool:
    """Whether some assignment of the line with `pivot` fixed to `value` matches.

    Only this one line is checked: the crossing lines of the tentative cells are not.
    """
    return any(
        line_matches(line.decode("ascii"), matchers)
        for line in line_assignments(candidates, pivot, value)
    )
