"""Tests for the restricted regex parser."""

import pytest

from regexcross.errors import PatternError
from regexcross.syntax import (
    Alternation,
    Assertion,
    Bracketed,
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


def test_literal_sequence_with_anchors():
    assert parse("^AB$") == Concat(
        (Assertion("^"), Literal("A"), Literal("B"), Assertion("$"))
    )


def test_alternation_with_empty_branch():
    assert parse("a|") == Alternation((Literal("a"), Empty()))


def test_empty_pattern():
    assert parse("") == Empty()


def test_bracket_expression_items():
    assert parse(r"[^a-c\dX]") == Bracketed(
        ClassUnion((Range(Literal("a"), Literal("c")), PerlClass(PerlKind.DIGIT), Literal("X"))),
        negated=True,
    )


def test_bracket_special_positions_are_literal():
    # ']' first and '-' last are ordinary characters
    assert parse("[]-]") == Bracketed(ClassUnion((Literal("]"), Literal("-"))))


def test_perl_classes_and_negations():
    assert parse(r"\d\S") == Concat(
        (PerlClass(PerlKind.DIGIT), PerlClass(PerlKind.SPACE, negated=True))
    )


def test_groups():
    assert parse("(?:ab)") == Group(Concat((Literal("a"), Literal("b"))), capturing=False)
    assert parse("(?P<x>a)") == Group(Literal("a"), name="x")
    assert parse("(a|b)") == Group(Alternation((Literal("a"), Literal("b"))))


@pytest.mark.parametrize(
    ("pattern", "lo", "hi", "greedy"),
    [
        ("a*", 0, None, True),
        ("a+", 1, None, True),
        ("a?", 0, 1, True),
        ("a{3}", 3, 3, True),
        ("a{2,}", 2, None, True),
        ("a{,4}", 0, 4, True),
        ("a{2,3}?", 2, 3, False),
    ],
)
def test_repetitions(pattern, lo, hi, greedy):
    assert parse(pattern) == Repetition(Literal("a"), lo, hi, greedy)


def test_brace_without_count_is_literal():
    assert parse("x{") == Concat((Literal("x"), Literal("{")))
    assert parse("x{a}") == Concat(
        (Literal("x"), Literal("{"), Literal("a"), Literal("}"))
    )


def test_escaped_punctuation_and_hex():
    assert parse(r"\.\x41") == Concat((Literal("."), Literal("A")))


def test_dot():
    assert parse(".") == Dot()


@pytest.mark.parametrize(
    "pattern",
    [
        "(?i)abc",  # inline flags
        "(?=a)b",  # lookahead
        "(?<!a)b",  # lookbehind
        r"\p{L}",  # Unicode class
        r"\P{Greek}",
        "\\" + "u0041",  # \u escape
        "[[:alpha:]]",  # POSIX class
        "[a[b]]",  # nested brackets
        "[a&&b]",  # set operators
        "[a--b]",
        "[a~~b]",
        "a**",
        "*a",
        "a|+",
        "^*",
        "(ab",
        "ab)",
        "[z-a]",
        "[abc",
        r"[a-\d]",
        "a{3,2}",
        r"\1",
        r"\x4",
    ],
)
def test_rejects_unsupported_constructs(pattern):
    with pytest.raises(PatternError):
        parse(pattern)


def test_error_names_the_pattern():
    with pytest.raises(PatternError, match="abc\\(") as excinfo:
        parse("abc(")
    assert excinfo.value.pattern == "abc("
