"""Main solver module for regex crossword puzzles."""

import os
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from pprint import pprint
from time import time
from typing import TextIO

from regexcross.allowed import column_allowed, row_allowed, universe
from regexcross.board import Board
from regexcross.errors import SolverError
from regexcross.hints import LineHints
from regexcross.puzzle_config import PuzzleConfig
from regexcross.solver.config import config as solver_config
from regexcross.solver.display import ProgressReporter
from regexcross.solver.utils import TIMESTAMP_FMT, EventHandler, chars, time_str


@dataclass
class SolveResult:
    """Outcome of one solver run."""

    puzzle: PuzzleConfig
    """The puzzle that was attempted."""

    grid: list[str] | None = None
    """The solved grid, one string per row, or None if solving failed."""

    board: Board | None = None
    """The board in its final state; None if it could not even be set up."""

    error: SolverError | None = None
    """Why solving failed, or None."""

    elapsed: float = 0.0
    """Seconds spent on the puzzle, from compiling hints to the final step."""

    events: int = 0
    """Number of board events reported."""

    @property
    def solved(self) -> bool:
        return self.error is None and self.grid is not None


def build_board(
    puzzle: PuzzleConfig,
    *,
    on_event: EventHandler | None = None,
    logf: TextIO | None = None,
) -> tuple[Board, LineHints]:
    """Compile the hints and set up the initial board for a puzzle.

    Pattern and configuration errors are raised here, before any search work.

    Args:
        puzzle (PuzzleConfig): The puzzle to set up.
        on_event: Callback for board events.
        logf: Optional file object to log the allowed characters to.
    """
    hints = LineHints.from_puzzle(puzzle)
    all_allowed = universe(puzzle)
    rows = row_allowed(puzzle, all_allowed)
    cols = column_allowed(puzzle, all_allowed)

    if logf is not None and solver_config.show_allowed_chars:
        print(
            f"Here are all the allowed chars we found: {chars(all_allowed)!r}",
            file=logf,
            flush=True,
        )
        print("More finely:", file=logf, flush=True)
        for y, allowed in enumerate(rows):
            print(f"  Row #{y + 1}: {chars(allowed)!r}", file=logf, flush=True)
        for x, allowed in enumerate(cols):
            print(f"  Col #{x + 1}: {chars(allowed)!r}", file=logf, flush=True)

    board = Board(puzzle.width, puzzle.height, rows, cols, on_event=on_event)
    return board, hints


def solve_puzzle(puzzle: PuzzleConfig, *, on_event: EventHandler | None = None) -> list[str]:
    """Solve a puzzle without any logging.

    Returns:
        The solved grid, one string per row.

    Raises:
        SolverError: The typed failure that ended the run.
    """
    board, hints = build_board(puzzle, on_event=on_event)
    return board.solve(hints)


def run(puzzle: PuzzleConfig) -> SolveResult:
    """Run the solver on the given puzzle, logging to a per-puzzle log file.

    Args:
        puzzle (PuzzleConfig): The puzzle to solve.
    """
    print(f"puzzle: {puzzle.name} ({puzzle.width}x{puzzle.height})")

    if solver_config.write_log_file:
        logfile = Path(solver_config.log_dir) / f"{puzzle.name}-{puzzle.width}x{puzzle.height}.log"
        print(f"Log file: {logfile}")
        logfile.parent.mkdir(parents=True, exist_ok=True)
    else:
        logfile = Path(os.devnull)

    with open(logfile, "w", encoding="utf-8") as logf:
        try:
            result = solve_one(puzzle, logf=logf)
        except KeyboardInterrupt:
            print("Solver interrupted by user.", file=logf, flush=True)
            print("Solver interrupted by user.")
            sys.exit(1)

    if result.solved:
        print(f"Solved it! In {time_str(result.elapsed)}!")
        for row in result.grid or []:
            print(row)
    else:
        print(f"No solution found. Reason: {result.error}")
        if result.board is not None:
            print("Final board state:")
            result.board.print()
    print()
    return result


def solve_one(
    puzzle: PuzzleConfig,
    *,
    logf: TextIO,
    reporter: ProgressReporter | None = None,
) -> SolveResult:
    """Attempt to solve a regex crossword.

    Typed solver failures are logged and returned in the result, not raised.

    Args:
        puzzle (PuzzleConfig): The puzzle to solve.
        logf: File object to log the solving process.
        reporter (ProgressReporter | None): Receiver of board events.  By default one is
            created from the solver configuration.
    """
    print(f"Selected puzzle: {puzzle.name}", file=logf, flush=True)
    print(f"Dimensions: {puzzle.width}x{puzzle.height}", file=logf, flush=True)
    print("Hints:", file=logf, flush=True)
    pprint(puzzle.to_dict(), stream=logf, width=120)
    print("Solver config:", file=logf, flush=True)
    pprint(solver_config.model_dump(), stream=logf, width=120)

    if reporter is None:
        reporter = ProgressReporter(
            puzzle.width,
            puzzle.height,
            logf=logf if solver_config.log_events else None,
            live=solver_config.live_display,
        )

    # This is the moment we decide we started working "on the puzzle"
    start_time = time()
    start_time_str = datetime.fromtimestamp(start_time).astimezone().strftime(TIMESTAMP_FMT)
    print(f"Start time: {start_time_str}", file=logf, flush=True)

    result = SolveResult(puzzle=puzzle)
    try:
        reporter.draw_frame()
        result.board, hints = build_board(puzzle, on_event=reporter, logf=logf)
        result.grid = result.board.solve(hints)
    except SolverError as e:
        result.error = e
    result.elapsed = time() - start_time
    result.events = reporter.n_events

    if result.solved:
        print("Solution found!", file=logf, flush=True)
        for row in result.grid or []:
            print(row, file=logf, flush=True)
    else:
        print(f"No solution found: {type(result.error).__name__}: {result.error}", file=logf, flush=True)
        if result.board is not None:
            print("Final board state:", file=logf, flush=True)
            result.board.print(file=logf)
    print(f"Time taken: {time_str(result.elapsed)}", file=logf, flush=True)
    return result
