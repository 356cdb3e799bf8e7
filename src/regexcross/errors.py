"""Exception types raised while loading and solving a regex crossword.

Every error is terminal: the solver never retries after one of these.
"""

from regexcross.solver.utils import chars


class SolverError(Exception):
    """Base class for all regex crossword solver errors."""


class ConfigurationError(SolverError):
    """The puzzle descriptor is unusable, e.g. a row or column has no hint."""


class PatternError(SolverError):
    """A hint uses a construct outside the supported regex subset."""

    def __init__(self, message: str, pattern: str | None = None) -> None:
        if pattern is not None:
            message = f"{message} (in pattern {pattern!r})"
        super().__init__(message)
        self.pattern = pattern


class ContradictionError(SolverError):
    """A cell ran out of candidate characters; the puzzle cannot be solved as given."""

    def __init__(
        self,
        x: int,
        y: int,
        *,
        axis: str | None = None,
        candidates: bytes = b"",
        row_allowed: bytes | None = None,
        col_allowed: bytes | None = None,
    ) -> None:
        self.x = x
        self.y = y
        self.axis = axis
        """'row' or 'column' when found during refinement, None at initialization."""
        self.candidates = candidates
        self.row_allowed = row_allowed
        self.col_allowed = col_allowed

        # Coordinates are reported 1-based
        if axis is None:
            message = (
                f"Cell {x + 1},{y + 1} had no possibilities! "
                f"Row: {chars(row_allowed or b'')!r} Col: {chars(col_allowed or b'')!r}"
            )
        else:
            message = (
                f"Cell {x + 1},{y + 1} by {axis} ran out of possibilities! "
                f"Started with: {chars(candidates)!r}"
            )
        super().__init__(message)


class SearchExhausted(SolverError):
    """No refinement target is left but some cells are still undecided.

    This is a limit of line-local search, not a proof that the puzzle has no solution.
    """

    def __init__(self, undecided: int) -> None:
        super().__init__(
            f"We couldn't make any more progress. Stumped with {undecided} undecided cell(s)!"
        )
        self.undecided = undecided
