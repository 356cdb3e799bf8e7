"""Shared fixtures for the regex crossword solver tests."""

import json

import pytest

from regexcross.puzzle_config import PuzzleConfig
from regexcross.solver.config import config as solver_config


@pytest.fixture
def two_by_one() -> PuzzleConfig:
    """Decided at initialization: the row allows A and B, each column only one of them."""
    return PuzzleConfig(width=2, height=1, left_hints=["^A.$"], top_hints=["^A$", "^B$"])


@pytest.fixture
def ambiguous_cell() -> PuzzleConfig:
    """One cell that both lines allow to be A or B."""
    return PuzzleConfig(width=1, height=1, top_hints=["^[AB]$"], left_hints=["^[AB]$"])


@pytest.fixture
def two_by_two() -> PuzzleConfig:
    """Needs several refinement steps, including ones that make no progress.

    Solution:
        AB
        BB
    """
    return PuzzleConfig(
        width=2,
        height=2,
        top_hints=["AB", "BB|AA"],
        left_hints=["AB|BA", "BB|AA"],
    )


@pytest.fixture
def tutorial() -> PuzzleConfig:
    """A classic beginner puzzle using a negated class and alternations.

    Solution:
        HE
        LP
    """
    return PuzzleConfig(
        width=2,
        height=2,
        top_hints=["[^SPEAK]+", "EP|IP|EF"],
        left_hints=["HE|LL|O+", "[PLEASE]+"],
        name="tutorial",
    )


@pytest.fixture
def puzzle_file(tmp_path, tutorial):
    """The tutorial puzzle written to a JSON file."""
    path = tmp_path / "tutorial.json"
    path.write_text(json.dumps(tutorial.to_dict()), encoding="utf-8")
    return path


@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    """Send solver log files to a temporary directory, with no live display."""
    logs = tmp_path / "logs"
    monkeypatch.setattr(solver_config, "log_dir", str(logs))
    monkeypatch.setattr(solver_config, "write_log_file", True)
    monkeypatch.setattr(solver_config, "live_display", False)
    return logs
