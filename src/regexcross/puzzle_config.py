"""Loader for regex crossword puzzle files."""

import json
from collections.abc import Iterator
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Literal

from regexcross.errors import ConfigurationError

Edge = Literal["top", "bottom", "left", "right"]
Hints = list[str | None]


@dataclass
class PuzzleConfig:
    """A puzzle configuration."""

    width: int
    """Number of columns in the grid."""

    height: int
    """Number of rows in the grid."""

    top_hints: Hints | None = None
    """One pattern (or None) per column, shown above the grid."""

    bottom_hints: Hints | None = None
    """One pattern (or None) per column, shown below the grid."""

    left_hints: Hints | None = None
    """One pattern (or None) per row, shown left of the grid."""

    right_hints: Hints | None = None
    """One pattern (or None) per row, shown right of the grid."""

    name: str = "puzzle"
    """A label for logs, usually the puzzle file's stem."""

    def __post_init__(self) -> None:
        """Validate the hint layout.

        Every column needs a top or bottom hint, and every row a left or right hint.
        Hint arrays shorter than the side they cover are padded with None.
        """
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                f"Puzzle dimensions must be positive, got {self.width}x{self.height}."
            )

        for edge, length in (
            ("top", self.width),
            ("bottom", self.width),
            ("left", self.height),
            ("right", self.height),
        ):
            hints = self.edge_hints(edge)
            if hints is None:
                continue
            if len(hints) > length:
                raise ConfigurationError(
                    f"Puzzle has {len(hints)} {edge} hints but only {length} lines on that side."
                )
            for index, hint in enumerate(hints):
                if hint is not None and not isinstance(hint, str):
                    raise ConfigurationError(f"{edge.capitalize()} hint #{index + 1} is not a string.")
            setattr(self, f"{edge}_hints", list(hints) + [None] * (length - len(hints)))

        for x in range(self.width):
            if self.column_hints(x) == (None, None):
                raise ConfigurationError(
                    f"Puzzle does not have a vertical hint for every column! (column {x + 1})"
                )
        for y in range(self.height):
            if self.row_hints(y) == (None, None):
                raise ConfigurationError(
                    f"Puzzle does not have a horizontal hint for every row! (row {y + 1})"
                )

    def __str__(self) -> str:
        """Return a string representation of the puzzle."""
        lines = [f"{self.name} ({self.width}x{self.height})"]
        for x in range(self.width):
            lines.append(f"  Col #{x + 1}: {' / '.join(h for h in self.column_hints(x) if h)}")
        for y in range(self.height):
            lines.append(f"  Row #{y + 1}: {' / '.join(h for h in self.row_hints(y) if h)}")
        return "\n".join(lines)

    def edge_hints(self, edge: Edge) -> Hints | None:
        """Get the hint list for one side of the grid."""
        return getattr(self, f"{edge}_hints")

    def row_hints(self, y: int) -> tuple[str | None, str | None]:
        """Get the (left, right) hints of row y."""
        return _hint_at(self.left_hints, y), _hint_at(self.right_hints, y)

    def column_hints(self, x: int) -> tuple[str | None, str | None]:
        """Get the (top, bottom) hints of column x."""
        return _hint_at(self.top_hints, x), _hint_at(self.bottom_hints, x)

    def all_hints(self) -> Iterator[tuple[Edge, int, str]]:
        """Iterate over every present hint as (edge, index, pattern)."""
        for edge in ("top", "bottom", "left", "right"):
            for index, hint in enumerate(self.edge_hints(edge) or []):
                if hint is not None:
                    yield edge, index, hint

    def to_dict(self) -> dict:
        """Return a dictionary representation, in the layout of the puzzle file."""
        data: dict = {"width": self.width, "height": self.height}
        for edge in ("top", "bottom", "left", "right"):
            hints = self.edge_hints(edge)
            if hints is not None:
                data[f"{edge}_hints"] = list(hints)
        return data

    @classmethod
    def from_dict(cls, data: dict, *, name: str = "puzzle") -> "PuzzleConfig":
        """Create a PuzzleConfig from its dictionary (puzzle file) representation."""
        if not isinstance(data, dict):
            raise ConfigurationError("Puzzle file must contain a JSON object.")
        try:
            width = int(data["width"])
            height = int(data["height"])
        except KeyError as e:
            raise ConfigurationError(f"Puzzle is missing the {e.args[0]!r} field.") from None
        except (TypeError, ValueError):
            raise ConfigurationError("Puzzle width and height must be integers.") from None

        edges = {}
        for edge in ("top", "bottom", "left", "right"):
            hints = data.get(f"{edge}_hints")
            if hints is not None and not isinstance(hints, list):
                raise ConfigurationError(f"{edge}_hints must be a list.")
            edges[f"{edge}_hints"] = hints

        return cls(width=width, height=height, name=name, **edges)


def _hint_at(hints: Hints | None, index: int) -> str | None:
    if hints is None or index >= len(hints):
        return None
    return hints[index]


def load_puzzle(puzzle_path: PathLike | str) -> PuzzleConfig:
    """Load a puzzle from a JSON file.

    The file holds an object with integer `width` and `height` and up to four optional
    arrays `top_hints`, `bottom_hints` (one entry per column) and `left_hints`,
    `right_hints` (one entry per row).  Each entry is a pattern string or null.

    Args:
        puzzle_path (PathLike): Path to the puzzle file.

    Raises:
        ConfigurationError: If the file cannot be read or does not describe a valid puzzle.
    """
    path = Path(puzzle_path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Couldn't read puzzle file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Couldn't parse puzzle file {path}: {e}") from e

    return PuzzleConfig.from_dict(data, name=path.stem)
