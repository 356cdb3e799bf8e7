"""Compiled row and column matchers for a puzzle."""

import re
from dataclasses import dataclass

from regexcross.errors import PatternError
from regexcross.puzzle_config import Edge, PuzzleConfig

Matcher = re.Pattern[str]


def compile_hint(edge: Edge, index: int, pattern: str) -> Matcher:
    """Compile one hint for whole-line matching.

    The pattern is compiled as written, backreferences included; callers match with
    `fullmatch` so the hint always has to cover the entire line.

    Raises:
        PatternError: If `re` cannot compile the pattern.
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternError(f"Couldn't compile {edge} hint #{index + 1}: {e}", pattern) from e


def line_matches(line: str, matchers: list[Matcher]) -> bool:
    """Whether the full line string satisfies every matcher."""
    return all(m.fullmatch(line) is not None for m in matchers)


@dataclass(frozen=True)
class LineHints:
    """Matchers for every line, grouped by edge.  Read-only once built."""

    top: list[Matcher | None]
    bottom: list[Matcher | None]
    left: list[Matcher | None]
    right: list[Matcher | None]

    @classmethod
    def from_puzzle(cls, puzzle: PuzzleConfig) -> "LineHints":
        """Compile every hint of the puzzle."""
        compiled: dict[str, list[Matcher | None]] = {}
        for edge, length in (
            ("top", puzzle.width),
            ("bottom", puzzle.width),
            ("left", puzzle.height),
            ("right", puzzle.height),
        ):
            matchers: list[Matcher | None] = [None] * length
            for index, hint in enumerate(puzzle.edge_hints(edge) or []):
                if hint is not None:
                    matchers[index] = compile_hint(edge, index, hint)
            compiled[edge] = matchers
        return cls(**compiled)

    def row(self, y: int) -> list[Matcher]:
        """The matchers a row must satisfy (left and/or right)."""
        return [m for m in (self.left[y], self.right[y]) if m is not None]

    def column(self, x: int) -> list[Matcher]:
        """The matchers a column must satisfy (top and/or bottom)."""
        return [m for m in (self.top[x], self.bottom[x]) if m is not None]
