"""Find out which characters a hint allows, by walking its parsed pattern.

A byte set is a `bytes` object holding sorted, deduplicated printable ASCII values.
"""

import re

from regexcross.errors import ConfigurationError, PatternError
from regexcross.puzzle_config import PuzzleConfig
from regexcross.syntax import (
    Alternation,
    Assertion,
    Ast,
    Bracketed,
    ClassSetItem,
    ClassUnion,
    Concat,
    Dot,
    Empty,
    Group,
    Literal,
    PerlClass,
    PerlKind,
    Range,
    Repetition,
    parse,
)

BACKREFERENCE_PATTERN = re.compile(r"\\[0-9]")
"""Backreferences, which the restricted parser does not understand."""

PERL_CLASS_CHARS: dict[PerlKind, bytes] = {
    PerlKind.DIGIT: b"0123456789",
    PerlKind.SPACE: b" ",
    # Regex crosswords only ever use capital letters as word characters
    PerlKind.WORD: b"ABCDEFGHIJKLMNOPQRSTUVWXYZ",
}


def strip_backreferences(pattern: str) -> str:
    """Remove backreferences from a pattern.

    A backreference can only restrict what a pattern matches, never add to the set of
    characters it allows, so dropping it keeps the character analysis sound.
    """
    return BACKREFERENCE_PATTERN.sub("", pattern)


def byte_from_literal(literal: Literal) -> int:
    """Get the byte value of a literal, which must be printable ASCII."""
    c = literal.c
    if c < " ":
        raise PatternError(f"ASCII control character {c!r} in regex")
    if c >= "\x7f":
        raise PatternError(f"Non-ASCII-printable character {c!r} in regex")
    return ord(c)


def _range_bytes(item: Range) -> range:
    start = byte_from_literal(item.start)
    end = byte_from_literal(item.end)
    if end < start:
        raise PatternError(f"Reversed range {item.start.c!r}-{item.end.c!r} in regex")
    return range(start, end + 1)


def _add_all_class_item(result: set[int], item: ClassSetItem) -> None:
    match item:
        case Literal():
            result.add(byte_from_literal(item))
        case Range():
            result.update(_range_bytes(item))
        case PerlClass(kind=kind, negated=False):
            result.update(PERL_CLASS_CHARS[kind])
        case PerlClass(negated=True):
            pass
        case ClassUnion(items=items):
            for sub in items:
                _add_all_class_item(result, sub)
        case _:
            raise PatternError(f"Unsupported bracket item {item!r}")


def _add_class_item(result: set[int], item: ClassSetItem, universe: bytes) -> None:
    match item:
        case Literal():
            b = byte_from_literal(item)
            if b in universe:
                result.add(b)
        case Range():
            result.update(b for b in _range_bytes(item) if b in universe)
        case PerlClass(kind=kind, negated=False):
            result.update(b for b in PERL_CLASS_CHARS[kind] if b in universe)
        case PerlClass(negated=True):
            result.clear()
            result.update(universe)
        case ClassUnion(items=items):
            for sub in items:
                _add_class_item(result, sub, universe)
        case _:
            raise PatternError(f"Unsupported bracket item {item!r}")


def _add_all_allowed(result: set[int], ast: Ast) -> None:
    match ast:
        # "a|b"
        case Alternation(asts=asts) | Concat(asts=asts):
            for sub in asts:
                _add_all_allowed(result, sub)
        # "(a)", "a{1,3}", "a?", "a*", "a+"
        case Group(ast=sub) | Repetition(ast=sub):
            _add_all_allowed(result, sub)
        case Literal():
            result.add(byte_from_literal(ast))
        # "\s" is only space, "\S" is anything but space
        case PerlClass(kind=kind, negated=False):
            result.update(PERL_CLASS_CHARS[kind])
        case Bracketed(kind=items, negated=False):
            _add_all_class_item(result, items)
        # With no universe yet, "." and negated classes add nothing
        case PerlClass(negated=True) | Bracketed(negated=True) | Dot():
            pass
        case Empty() | Assertion():
            pass
        case _:
            raise PatternError(f"Unsupported regex construct {ast!r}")


def _add_allowed(result: set[int], ast: Ast, universe: bytes) -> None:
    match ast:
        case Alternation(asts=asts) | Concat(asts=asts):
            for sub in asts:
                _add_allowed(result, sub, universe)
        case Group(ast=sub) | Repetition(ast=sub):
            _add_allowed(result, sub, universe)
        case Literal():
            b = byte_from_literal(ast)
            if b in universe:
                result.add(b)
        case PerlClass(kind=kind, negated=False):
            result.update(b for b in PERL_CLASS_CHARS[kind] if b in universe)
        case Bracketed(kind=items, negated=False):
            _add_class_item(result, items, universe)
        # These could match anything, so this pattern restricts nothing
        case PerlClass(negated=True) | Bracketed(negated=True) | Dot():
            result.clear()
            result.update(universe)
        case Empty() | Assertion():
            pass
        case _:
            raise PatternError(f"Unsupported regex construct {ast!r}")


def unrestricted(ast: Ast) -> bytes:
    """Every byte any literal, range or positive class in the pattern can produce."""
    result: set[int] = set()
    _add_all_allowed(result, ast)
    return bytes(sorted(result))


def restricted(ast: Ast, universe: bytes) -> bytes:
    """The bytes of `universe` the pattern could produce at a single position."""
    result: set[int] = set()
    _add_allowed(result, ast, universe)
    return bytes(sorted(result))


def analyze_pattern(pattern: str, universe: bytes | None = None) -> bytes:
    """Parse a hint (ignoring backreferences) and compute the bytes it allows.

    Args:
        pattern (str): The hint pattern, as written in the puzzle.
        universe (bytes | None): The puzzle's universe, or None for an unrestricted
            analysis.

    Raises:
        PatternError: If the pattern is outside the supported regex subset.
    """
    ast = parse(strip_backreferences(pattern))
    try:
        if universe is None:
            return unrestricted(ast)
        return restricted(ast, universe)
    except PatternError as e:
        if e.pattern is not None:
            raise
        raise PatternError(str(e), pattern) from None


def intersect(a: bytes, b: bytes) -> bytes:
    """Intersect two sorted byte sets with a linear merge."""
    result = bytearray()
    i = j = 0
    while i < len(a) and j < len(b):
        ac, bc = a[i], b[j]
        if ac == bc:
            result.append(ac)
            i += 1
            j += 1
        elif ac < bc:
            i += 1
        else:
            j += 1
    return bytes(result)


def universe(puzzle: PuzzleConfig) -> bytes:
    """Union of the unrestricted analysis of every hint on all four edges."""
    result: set[int] = set()
    for _edge, _index, hint in puzzle.all_hints():
        result.update(analyze_pattern(hint))
    return bytes(sorted(result))


def line_allowed(hint_a: str | None, hint_b: str | None, all_allowed: bytes) -> bytes:
    """The bytes allowed on a line with one or two (redundant) hints.

    Raises:
        ConfigurationError: If the line has no hint at all.
    """
    if hint_a is None and hint_b is None:
        raise ConfigurationError("No hint for this row/column!")
    if hint_b is None:
        return analyze_pattern(hint_a, all_allowed)
    if hint_a is None:
        return analyze_pattern(hint_b, all_allowed)
    return intersect(analyze_pattern(hint_a, all_allowed), analyze_pattern(hint_b, all_allowed))


def row_allowed(puzzle: PuzzleConfig, all_allowed: bytes) -> list[bytes]:
    """Allowed bytes for every row, from its left and right hints."""
    return [line_allowed(*puzzle.row_hints(y), all_allowed) for y in range(puzzle.height)]


def column_allowed(puzzle: PuzzleConfig, all_allowed: bytes) -> list[bytes]:
    """Allowed bytes for every column, from its top and bottom hints."""
    return [line_allowed(*puzzle.column_hints(x), all_allowed) for x in range(puzzle.width)]
