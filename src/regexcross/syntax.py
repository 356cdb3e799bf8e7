"""Parser for the restricted regex dialect used by regex crossword hints.

The parser produces a small, closed abstract syntax tree.  It only understands the
constructs a regex crossword hint needs; anything else raises `PatternError` so that
an unsupported hint is reported before solving starts instead of being silently
ignored.

Supported:
    literals, escaped punctuation, `\\xHH`, `.`, `^`, `$`, `\\b`, `\\B`, `\\A`, `\\Z`,
    `\\d`, `\\s`, `\\w` (and their negated upper-case forms), bracket expressions
    `[...]` / `[^...]` built from literals, ranges and Perl classes, groups `(...)`,
    `(?:...)`, `(?P<name>...)`, alternation `|`, and the repetitions `*`, `+`, `?`,
    `{n}`, `{n,}`, `{,m}`, `{n,m}` (optionally lazy).

Rejected:
    inline flags, lookaround, backreferences (strip them first, see
    `allowed.strip_backreferences`), Unicode classes, POSIX classes, nested brackets,
    set operators inside brackets and any unknown escape.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias, Union

from regexcross.errors import PatternError


class PerlKind(Enum):
    """The three Perl character classes a hint may use."""

    DIGIT = "d"
    SPACE = "s"
    WORD = "w"


@dataclass(frozen=True)
class Empty:
    """The empty pattern, e.g. one side of `a|`."""


@dataclass(frozen=True)
class Literal:
    """A single literal character."""

    c: str


@dataclass(frozen=True)
class Range:
    """A character range inside a bracket expression, e.g. `a-z`."""

    start: Literal
    end: Literal


@dataclass(frozen=True)
class PerlClass:
    """`\\d`, `\\s` or `\\w`; the upper-case escapes are the negated forms."""

    kind: PerlKind
    negated: bool = False


@dataclass(frozen=True)
class ClassUnion:
    """The items of a bracket expression: `[ab-dz]` is `a`, `b-d` and `z`."""

    items: tuple["ClassSetItem", ...]


@dataclass(frozen=True)
class Bracketed:
    """A bracket expression `[...]`, negated for `[^...]`."""

    kind: ClassUnion
    negated: bool = False


@dataclass(frozen=True)
class Dot:
    """`.`"""


@dataclass(frozen=True)
class Assertion:
    """A zero-width assertion such as `^`, `$` or `\\b`."""

    kind: str


@dataclass(frozen=True)
class Group:
    """A parenthesized group; `name` is set for `(?P<name>...)`."""

    ast: "Ast"
    capturing: bool = True
    name: str | None = None


@dataclass(frozen=True)
class Repetition:
    """`ast` repeated between `min` and `max` times (`max` is None when unbounded)."""

    ast: "Ast"
    min: int
    max: int | None
    greedy: bool = True


@dataclass(frozen=True)
class Concat:
    """A sequence of patterns matched one after another."""

    asts: tuple["Ast", ...]


@dataclass(frozen=True)
class Alternation:
    """`a|b|c`"""

    asts: tuple["Ast", ...]


ClassSetItem: TypeAlias = Union[Literal, Range, PerlClass, ClassUnion]
"""Anything that may appear between the brackets of a bracket expression."""

Ast: TypeAlias = Union[
    Empty,
    Literal,
    PerlClass,
    Bracketed,
    Dot,
    Assertion,
    Group,
    Repetition,
    Concat,
    Alternation,
]
"""A node of the restricted regex syntax tree."""

_PERL_ESCAPES = {
    "d": PerlClass(PerlKind.DIGIT),
    "s": PerlClass(PerlKind.SPACE),
    "w": PerlClass(PerlKind.WORD),
    "D": PerlClass(PerlKind.DIGIT, negated=True),
    "S": PerlClass(PerlKind.SPACE, negated=True),
    "W": PerlClass(PerlKind.WORD, negated=True),
}

_ASSERTION_ESCAPES = {"b", "B", "A", "Z"}

# Escapes that stand for a single (control) character; they parse, and the analyzer
# then rejects them for not being printable.
_CONTROL_ESCAPES = {"a": "\a", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v"}

_REPETITION_CHARS = "*+?"


def _is_number(text: str) -> bool:
    return text.isascii() and text.isdigit()


class _Parser:
    """Recursive-descent parser over a single pattern string."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self.pos = 0

    def error(self, message: str) -> PatternError:
        return PatternError(f"{message} at offset {self.pos}", self.pattern)

    def peek(self, offset: int = 0) -> str | None:
        idx = self.pos + offset
        return self.pattern[idx] if idx < len(self.pattern) else None

    def next(self) -> str:
        ch = self.peek()
        if ch is None:
            raise self.error("Unexpected end of pattern")
        self.pos += 1
        return ch

    def at_end(self) -> bool:
        return self.pos >= len(self.pattern)

    def parse(self) -> Ast:
        ast = self.parse_alternation()
        if not self.at_end():
            # Only an unbalanced ')' can stop the top-level alternation early
            raise self.error("Unbalanced ')'")
        return ast

    def parse_alternation(self) -> Ast:
        branches = [self.parse_concat()]
        while self.peek() == "|":
            self.pos += 1
            branches.append(self.parse_concat())
        if len(branches) == 1:
            return branches[0]
        return Alternation(tuple(branches))

    def parse_concat(self) -> Ast:
        items: list[Ast] = []
        while not self.at_end() and self.peek() not in ("|", ")"):
            atom = self.parse_atom()
            items.append(self.parse_repetitions(atom))
        if not items:
            return Empty()
        if len(items) == 1:
            return items[0]
        return Concat(tuple(items))

    def parse_repetitions(self, atom: Ast) -> Ast:
        bounds = self.parse_repetition_bounds()
        if bounds is None:
            return atom
        if isinstance(atom, (Assertion, Empty)):
            raise self.error("Repetition operator applied to nothing repeatable")
        lo, hi = bounds
        greedy = True
        if self.peek() == "?":
            self.pos += 1
            greedy = False
        if self.parse_repetition_bounds() is not None:
            raise self.error("Multiple repetition operators in a row")
        return Repetition(atom, lo, hi, greedy)

    def parse_repetition_bounds(self) -> tuple[int, int | None] | None:
        ch = self.peek()
        if ch == "*":
            self.pos += 1
            return 0, None
        if ch == "+":
            self.pos += 1
            return 1, None
        if ch == "?":
            self.pos += 1
            return 0, 1
        if ch == "{":
            return self.parse_counted_repetition()
        return None

    def parse_counted_repetition(self) -> tuple[int, int | None] | None:
        """Parse `{n}`, `{n,}`, `{,m}` or `{n,m}`.

        A brace that does not open a well-formed count is an ordinary literal, as it
        is for the `re` module that matches the same pattern.
        """
        end = self.pattern.find("}", self.pos)
        if end == -1:
            return None
        body = self.pattern[self.pos + 1 : end]
        lo_str, comma, hi_str = body.partition(",")
        if not (_is_number(lo_str) or (comma and lo_str == "")):
            return None
        if hi_str and not _is_number(hi_str):
            return None
        lo = int(lo_str) if lo_str else 0
        if comma:
            hi = int(hi_str) if hi_str else None
        else:
            hi = lo
        if hi is not None and hi < lo:
            raise self.error(f"Invalid repetition range {{{body}}}")
        self.pos = end + 1
        return lo, hi

    def parse_atom(self) -> Ast:
        ch = self.next()
        if ch == "(":
            return self.parse_group()
        if ch == "[":
            return self.parse_bracketed()
        if ch == ".":
            return Dot()
        if ch == "^":
            return Assertion("^")
        if ch == "$":
            return Assertion("$")
        if ch == "\\":
            return self.parse_escape()
        if ch in _REPETITION_CHARS:
            self.pos -= 1
            raise self.error(f"Repetition operator {ch!r} without an expression")
        if ch == "{":
            self.pos -= 1
            if self.parse_counted_repetition() is not None:
                raise self.error("Repetition operator '{' without an expression")
            self.pos += 1
        return Literal(ch)

    def parse_group(self) -> Ast:
        capturing = True
        name = None
        if self.peek() == "?":
            self.pos += 1
            marker = self.next()
            if marker == ":":
                capturing = False
            elif marker == "P" and self.peek() == "<":
                self.pos += 1
                end = self.pattern.find(">", self.pos)
                if end == -1:
                    raise self.error("Unterminated group name")
                name = self.pattern[self.pos : end]
                if not name.isidentifier():
                    raise self.error(f"Invalid group name {name!r}")
                self.pos = end + 1
            else:
                # Inline flags, lookaround, comments, conditionals, ...
                raise self.error(f"Unsupported group construct '(?{marker}'")
        ast = self.parse_alternation()
        if self.peek() != ")":
            raise self.error("Missing ')'")
        self.pos += 1
        return Group(ast, capturing=capturing, name=name)

    def parse_escape(self) -> Ast:
        ch = self.next()
        if ch in _PERL_ESCAPES:
            return _PERL_ESCAPES[ch]
        if ch in _ASSERTION_ESCAPES:
            return Assertion("\\" + ch)
        return self.parse_escaped_literal(ch)

    def parse_escaped_literal(self, ch: str) -> Literal:
        """Parse the character following a backslash as a literal."""
        if ch in _CONTROL_ESCAPES:
            return Literal(_CONTROL_ESCAPES[ch])
        if ch == "x":
            digits = self.pattern[self.pos : self.pos + 2]
            if len(digits) != 2 or any(d not in "0123456789abcdefABCDEF" for d in digits):
                raise self.error("Malformed \\x escape")
            self.pos += 2
            return Literal(chr(int(digits, 16)))
        if ch.isdigit():
            raise self.error(f"Backreference \\{ch} is not supported here")
        if ch.isalnum() or ch == "_":
            # \p{..}, \P{..}, \u...., \N{...} and friends
            raise self.error(f"Unsupported escape \\{ch}")
        return Literal(ch)

    def parse_bracketed(self) -> Bracketed:
        negated = False
        if self.peek() == "^":
            self.pos += 1
            negated = True
        items: list[ClassSetItem] = []
        first = True
        while True:
            ch = self.peek()
            if ch is None:
                raise self.error("Unterminated bracket expression")
            if ch == "]" and not first:
                self.pos += 1
                break
            first = False
            items.append(self.parse_class_item())
        return Bracketed(ClassUnion(tuple(items)), negated)

    def parse_class_item(self) -> ClassSetItem:
        ch = self.next()
        nxt = self.peek()
        if ch == "[":
            if nxt == ":":
                raise self.error("POSIX character classes are not supported")
            raise self.error("Nested bracket expressions are not supported")
        if ch in "&-~|" and nxt == ch:
            raise self.error(f"Set operator {ch * 2!r} is not supported")
        start = self.parse_class_atom(ch)
        if isinstance(start, PerlClass):
            return start
        if self.peek() == "-" and self.peek(1) not in (None, "]"):
            self.pos += 1
            end = self.parse_class_atom(self.next())
            if isinstance(end, PerlClass):
                raise self.error("A character class cannot end a range")
            if end.c < start.c:
                raise self.error(f"Invalid range {start.c!r}-{end.c!r}")
            return Range(start, end)
        return start

    def parse_class_atom(self, ch: str) -> Literal | PerlClass:
        if ch != "\\":
            return Literal(ch)
        esc = self.next()
        if esc in _PERL_ESCAPES:
            return _PERL_ESCAPES[esc]
        if esc == "b":
            # Backspace inside brackets; rejected later as non-printable
            return Literal("\b")
        return self.parse_escaped_literal(esc)


def parse(pattern: str) -> Ast:
    """Parse a hint pattern into the restricted syntax tree.

    Raises:
        PatternError: If the pattern uses anything outside the supported subset.
    """
    return _Parser(pattern).parse()
