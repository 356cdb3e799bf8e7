"""Progress output: turns board events into log lines and a live terminal grid."""

import sys
from typing import TextIO

from regexcross.solver.utils import Axis, BoardEvent

DIM = "\x1b[2m"
GREEN = "\x1b[1;32m"
ALERT = "\x1b[33;7m"
RESET = "\x1b[0m"


class ProgressReporter:
    """Consumes `BoardEvent`s from a `Board`.

    Every event can be written to a log file.  With `live` set, an empty grid is drawn
    on `stream` first and each event then updates one cell in place using ANSI cursor
    movement: '-' or '|' while a row or column is brute-forced, '?' once it has been
    tried, the character (green) once decided, and a highlighted '0' on contradiction.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        logf: TextIO | None = None,
        live: bool = False,
        stream: TextIO | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self.logf = logf
        self.live = live
        self.stream = stream if stream is not None else sys.stdout
        self.n_events = 0
        self.n_decided = 0

    def draw_frame(self) -> None:
        """Print a board to put characters on.  Leaves the cursor on the line after it."""
        if not self.live:
            return
        out = self.stream
        out.write("╔" + "═" * self.width + "╗\n")
        for _ in range(self.height):
            out.write("║" + DIM + "?" * self.width + RESET + "║\n")
        out.write("╚" + "═" * self.width + "╝\n")
        out.flush()

    def __call__(self, event: BoardEvent) -> None:
        self.n_events += 1
        if event.kind == "decided":
            self.n_decided += 1
        if self.logf is not None:
            print(self.describe(event), file=self.logf, flush=True)
        if self.live:
            self.render(event)

    @staticmethod
    def describe(event: BoardEvent) -> str:
        """A one-line, 1-based description of an event."""
        where = f"Cell {event.x + 1},{event.y + 1}"
        match event.kind:
            case "decided":
                return f"{where} decided: {event.char!r}"
            case "trying":
                return f"{where} trying by {event.axis}"
            case "narrowed":
                return f"{where} narrowed by {event.axis}"
            case "stuck":
                return f"{where} no progress by {event.axis}"
            case "contradiction":
                by = f" by {event.axis}" if event.axis is not None else ""
                return f"{where} ran out of possibilities{by}!"
            case _:
                return f"{where} {event.kind}"

    def render(self, event: BoardEvent) -> None:
        match event.kind:
            case "decided":
                self.print_cell(event.x, event.y, event.char or "?", GREEN)
            case "trying":
                self.print_cell(event.x, event.y, "|" if event.axis is Axis.COLUMN else "-")
            case "narrowed" | "stuck":
                self.print_cell(event.x, event.y, "?")
            case "contradiction":
                self.print_cell(event.x, event.y, "0", ALERT)

    def print_cell(self, x: int, y: int, wat: str, style: str = "") -> None:
        """Overwrite one cell of the drawn grid (assumes the cursor is right below it)."""
        out = self.stream
        # Save cursor, go up to row y and right to column x, write, restore
        out.write("\x1b[s")
        out.write(f"\x1b[{(self.height - y) + 1}A")
        out.write(f"\x1b[{x + 1}C")
        out.write(f"{style}{wat}{RESET if style else ''}")
        out.write("\x1b[u")
        out.flush()
