"""Utility types and functions for the regex crossword solver."""

from collections.abc import Callable
from enum import IntEnum
from typing import NamedTuple, TypeAlias

TIMESTAMP_FMT = "%Y-%m-%d %H:%M:%S.%f %Z%z"


class Axis(IntEnum):
    """Enumeration for the two kinds of line through a cell."""

    ROW = 0
    COLUMN = 1

    def __str__(self) -> str:
        return "column" if self is Axis.COLUMN else "row"

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)


class BoardEvent(NamedTuple):
    """Something that happened to a cell while solving, for progress display."""

    kind: str
    """One of 'decided', 'narrowed', 'trying', 'stuck' or 'contradiction'."""

    x: int
    y: int

    char: str | None = None
    """The decided character, or None."""

    axis: Axis | None = None
    """The line being refined, for 'trying' and 'stuck' events."""


EventHandler: TypeAlias = Callable[[BoardEvent], None]


def chars(byte_set: bytes) -> str:
    """Render a byte set as a string of its characters."""
    return byte_set.decode("ascii", errors="replace")


def time_str(seconds: float) -> str:
    """Convert a time duration in seconds to a human-readable string.

    Args:
        seconds: Time duration in seconds.

    Returns:
        A string formatted as "HH:MM:SS.ss".
    """
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{int(hours):02}:{int(minutes):02}:{secs:05.2f}"
