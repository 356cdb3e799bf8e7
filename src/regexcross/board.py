"""Board of candidate sets and the propagation engine that narrows them."""

from collections.abc import Sequence
from typing import NamedTuple, TextIO

import numpy as np
from sortedcontainers import SortedSet

from regexcross.allowed import intersect
from regexcross.errors import ContradictionError, SearchExhausted
from regexcross.hints import LineHints, Matcher
from regexcross.solver.feasibility import line_is_feasible
from regexcross.solver.utils import Axis, BoardEvent, EventHandler, chars


class RefinementTarget(NamedTuple):
    """A line through an undecided cell that could be brute-forced next.

    Field order is the selection order: lowest complexity first, then rows before
    columns, then top to bottom, then left to right.
    """

    complexity: float
    axis: Axis
    y: int
    x: int


class Board:
    """Store the candidate set of every cell as a 1D list in row-major order.

    Cells are addressed as (x, y), x being the column and y the row.  Three views are
    derived from the candidate sets: the list of undecided cells, the per-cell
    (row, column) complexity cache and the blacklist of targets that were tried
    without progress.  They only change through `replace_candidates`.
    """

    def __init__(
        self,
        width: int,
        height: int,
        row_allowed: Sequence[bytes],
        col_allowed: Sequence[bytes],
        *,
        on_event: EventHandler | None = None,
    ) -> None:
        if len(row_allowed) != height or len(col_allowed) != width:
            raise ValueError("Allowed sets must cover every row and column of the board.")
        self.width = width
        self.height = height
        self.on_event = on_event

        self.data: list[bytes] = []
        """Candidate byte set of every cell, row-major."""

        self.undecided: list[tuple[int, int]] = []
        """(x, y) of every cell with more than one candidate, in scan order."""

        self.blacklist: SortedSet = SortedSet()
        """(axis, x, y) targets known to yield no pruning since the last change."""

        # Each cell starts out with what both its row and its column allow
        for y in range(height):
            for x in range(width):
                allowed = intersect(row_allowed[y], col_allowed[x])
                if not allowed:
                    self._emit("contradiction", x, y)
                    raise ContradictionError(
                        x, y, row_allowed=row_allowed[y], col_allowed=col_allowed[x]
                    )
                if len(allowed) == 1:
                    self._emit("decided", x, y, char=chars(allowed))
                else:
                    self.undecided.append((x, y))
                self.data.append(allowed)

        self.sizes = np.array([len(c) for c in self.data], dtype=np.int64).reshape(height, width)
        """Candidate-set size of every cell, indexed [y, x]."""

        # Complexity of a line is the number of combinations brute-forcing it may visit
        self.row_complexity = np.empty((height, width), dtype=np.float64)
        self.col_complexity = np.empty((height, width), dtype=np.float64)
        self.row_complexity[:, :] = np.prod(self.sizes, axis=1, dtype=np.float64)[:, np.newaxis]
        self.col_complexity[:, :] = np.prod(self.sizes, axis=0, dtype=np.float64)[np.newaxis, :]

    def __str__(self) -> str:
        """Returns the grid, with '?' for undecided cells."""
        return "\n".join(self.grid())

    def print(self, file: TextIO | None = None) -> None:
        """Print the board, one row per line."""
        for row in self.grid():
            print(row, file=file)

    def __getitem__(self, idx: int | tuple[int, int]) -> bytes:
        """Get a cell's candidates by 1D (row-major order) or (x, y) index."""
        if isinstance(idx, int):
            return self.data[idx]
        if isinstance(idx, tuple) and len(idx) == 2:
            x, y = idx
            return self.candidates(x, y)
        raise IndexError("Invalid index type for Board.")

    def get_2d_idx(self, one_d_idx: int) -> tuple[int, int]:
        """Convert a 1D index to an (x, y) tuple."""
        y, x = divmod(one_d_idx, self.width)
        return x, y

    def get_1d_idx(self, x: int, y: int) -> int:
        """Convert an (x, y) tuple to a 1D index."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Cell {x},{y} is outside the {self.width}x{self.height} board.")
        return y * self.width + x

    def candidates(self, x: int, y: int) -> bytes:
        """The candidate byte set of cell (x, y)."""
        return self.data[self.get_1d_idx(x, y)]

    def complexity(self, x: int, y: int) -> tuple[float, float]:
        """The cached (row, column) complexity of cell (x, y)."""
        return float(self.row_complexity[y, x]), float(self.col_complexity[y, x])

    def line_candidates(self, axis: Axis, x: int, y: int) -> list[bytes]:
        """Candidate sets along the row or column through (x, y)."""
        if axis is Axis.COLUMN:
            return [self.candidates(x, row) for row in range(self.height)]
        return [self.candidates(col, y) for col in range(self.width)]

    def grid(self) -> list[str]:
        """The board as one string per row, '?' marking undecided cells."""
        return [
            "".join(
                chars(cell) if len(cell) == 1 else "?"
                for cell in self.data[y * self.width : (y + 1) * self.width]
            )
            for y in range(self.height)
        ]

    @property
    def is_solved(self) -> bool:
        """Whether every cell is decided."""
        return not self.undecided

    def _emit(self, kind: str, x: int, y: int, **kwargs) -> None:
        if self.on_event is not None:
            self.on_event(BoardEvent(kind, x, y, **kwargs))

    def replace_candidates(self, x: int, y: int, candidates: bytes, axis: Axis) -> None:
        """Narrow the candidate set of a cell after refining it along `axis`.

        Updates the undecided list and recomputes the cached complexities of every cell
        on the refined line.  Cells off that line keep their cached values; complexity
        only orders the search.
        """
        idx = self.get_1d_idx(x, y)
        old = self.data[idx]
        if not candidates or not set(candidates) <= set(old):
            raise ValueError(
                f"Cell {x},{y} may only shrink: {chars(old)!r} -> {chars(candidates)!r}"
            )
        self.data[idx] = candidates
        self.sizes[y, x] = len(candidates)
        if len(candidates) == 1 and len(old) > 1:
            self.undecided.remove((x, y))

        if axis is Axis.COLUMN:
            self.col_complexity[:, x] = np.prod(self.sizes[:, x], dtype=np.float64)
            self.row_complexity[:, x] = np.prod(self.sizes, axis=1, dtype=np.float64)
        else:
            self.row_complexity[y, :] = np.prod(self.sizes[y, :], dtype=np.float64)
            self.col_complexity[y, :] = np.prod(self.sizes, axis=0, dtype=np.float64)

    def choose_target(self) -> RefinementTarget | None:
        """Find the least complex line through an undecided cell that isn't blacklisted."""
        best: RefinementTarget | None = None
        for x, y in self.undecided:
            row_complexity, col_complexity = self.complexity(x, y)
            for candidate in (
                RefinementTarget(row_complexity, Axis.ROW, y, x),
                RefinementTarget(col_complexity, Axis.COLUMN, y, x),
            ):
                if (candidate.axis, x, y) in self.blacklist:
                    continue
                if best is None or candidate < best:
                    best = candidate
        return best

    def make_progress(self, hints: LineHints) -> bool:
        """Brute-force the best refinement target.

        Returns:
            False if no target is left, True otherwise (even when nothing was pruned).

        Raises:
            ContradictionError: If no candidate of the pivot cell survives.
        """
        target = self.choose_target()
        if target is None:
            return False
        axis, x, y = target.axis, target.x, target.y
        self._emit("trying", x, y, axis=axis)

        matchers: list[Matcher]
        if axis is Axis.COLUMN:
            matchers, pivot = hints.column(x), y
        else:
            matchers, pivot = hints.row(y), x
        line = self.line_candidates(axis, x, y)

        # Find out all ACTUALLY possible characters
        possible = self.candidates(x, y)
        really_possible = bytes(
            ch for ch in possible if line_is_feasible(line, pivot, ch, matchers)
        )

        if len(really_possible) == len(possible):
            # Next time, try the next most complex thing
            self.blacklist.add((axis, x, y))
            self._emit("stuck", x, y, axis=axis)
            return True

        self.blacklist.clear()
        if not really_possible:
            self._emit("contradiction", x, y, axis=axis)
            raise ContradictionError(x, y, axis=str(axis), candidates=possible)

        self.replace_candidates(x, y, really_possible, axis)
        if len(really_possible) == 1:
            self._emit("decided", x, y, char=chars(really_possible))
        else:
            self._emit("narrowed", x, y, axis=axis)
        return True

    def solve(self, hints: LineHints) -> list[str]:
        """Refine until every cell is decided.

        Returns:
            The solved grid, one string per row.

        Raises:
            ContradictionError: If some cell runs out of candidates.
            SearchExhausted: If cells remain undecided but no target is left.
        """
        while self.undecided:
            if not self.make_progress(hints):
                raise SearchExhausted(len(self.undecided))
        return self.grid()
