"""Tests for the solver runner, progress output and command line entry point."""

import io
import json

import pytest

import regexcross
from regexcross.errors import (
    ConfigurationError,
    ContradictionError,
    PatternError,
    SearchExhausted,
)
from regexcross.hints import LineHints
from regexcross.puzzle_config import PuzzleConfig
from regexcross.solver import solver
from regexcross.solver.display import ProgressReporter
from regexcross.solver.utils import Axis, BoardEvent, time_str


class TestSolvePuzzle:
    def test_two_by_one(self, two_by_one):
        assert solver.solve_puzzle(two_by_one) == ["AB"]

    def test_single_ambiguous_cell_exhausts_search(self, ambiguous_cell):
        board, hints = solver.build_board(ambiguous_cell)
        assert board.candidates(0, 0) == b"AB"
        with pytest.raises(SearchExhausted):
            board.solve(hints)
        assert board.candidates(0, 0) == b"AB"

    def test_disjoint_row_and_column_sets(self):
        puzzle = PuzzleConfig(width=1, height=1, left_hints=[r"\d"], top_hints=["[A-Z]"])
        events = []
        with pytest.raises(ContradictionError) as excinfo:
            solver.solve_puzzle(puzzle, on_event=events.append)
        assert (excinfo.value.x, excinfo.value.y) == (0, 0)
        assert excinfo.value.row_allowed == b"0123456789"
        assert [e.kind for e in events] == ["contradiction"]

    @pytest.mark.parametrize("hint", [r"\p{Greek}", "[Ä-Ö]", "A\x01"])
    def test_pattern_errors_stop_before_solving(self, hint):
        puzzle = PuzzleConfig(width=1, height=1, left_hints=[hint], top_hints=["A"])
        events = []
        with pytest.raises(PatternError):
            solver.solve_puzzle(puzzle, on_event=events.append)
        assert events == []

    def test_backreference_hint_is_matched_as_written(self):
        # The row must repeat its first letter; analysis alone allows A and B anywhere
        puzzle = PuzzleConfig(
            width=2,
            height=1,
            left_hints=[r"(A|B)\1"],
            top_hints=["B", "[AB]"],
        )
        assert solver.solve_puzzle(puzzle) == ["BB"]

    def test_missing_hint_fails_before_any_step(self):
        with pytest.raises(ConfigurationError):
            PuzzleConfig(width=2, height=1, left_hints=["AB"], top_hints=["A"])


class TestLineHints:
    def test_lines_use_both_edges(self):
        puzzle = PuzzleConfig(
            width=1, height=1, top_hints=["A"], bottom_hints=["."], left_hints=["A"]
        )
        hints = LineHints.from_puzzle(puzzle)
        assert [m.pattern for m in hints.column(0)] == ["A", "."]
        assert [m.pattern for m in hints.row(0)] == ["A"]

    def test_compile_error_names_the_hint(self):
        puzzle = PuzzleConfig(width=1, height=2, top_hints=["AB"], right_hints=["A", "(B"])
        with pytest.raises(PatternError, match="right hint #2"):
            LineHints.from_puzzle(puzzle)


class TestRun:
    def test_solved_puzzle_writes_log(self, tutorial, log_dir, capsys):
        result = solver.run(tutorial)
        assert result.solved
        assert result.grid == ["HE", "LP"]
        assert result.events > 0

        log = (log_dir / "tutorial-2x2.log").read_text(encoding="utf-8")
        assert "Solution found!" in log
        assert "Here are all the allowed chars we found: 'AEFHILOPS'" in log
        assert "Cell 1,2 decided: 'L'" in log
        assert "Solved it!" in capsys.readouterr().out

    def test_failure_is_logged_and_returned(self, ambiguous_cell, log_dir):
        result = solver.run(ambiguous_cell)
        assert not result.solved
        assert isinstance(result.error, SearchExhausted)
        assert result.board is not None
        log = (log_dir / "puzzle-1x1.log").read_text(encoding="utf-8")
        assert "No solution found: SearchExhausted" in log
        assert "Final board state:" in log

    def test_initial_contradiction_has_no_board(self, log_dir):
        puzzle = PuzzleConfig(width=1, height=1, left_hints=[r"\d"], top_hints=["[A-Z]"])
        result = solver.run(puzzle)
        assert isinstance(result.error, ContradictionError)
        assert result.board is None

    def test_without_log_file(self, two_by_one, log_dir, monkeypatch):
        monkeypatch.setattr(solver.solver_config, "write_log_file", False)
        assert solver.run(two_by_one).solved
        assert not log_dir.exists()

    def test_solve_one_with_custom_reporter(self, two_by_two):
        logf = io.StringIO()
        screen = io.StringIO()
        reporter = ProgressReporter(2, 2, live=True, stream=screen)
        result = solver.solve_one(two_by_two, logf=logf, reporter=reporter)
        assert result.grid == ["AB", "BB"]
        assert reporter.n_decided == 4
        assert screen.getvalue().startswith("╔══╗\n")
        assert "Time taken:" in logf.getvalue()


class TestProgressReporter:
    def test_describe(self):
        describe = ProgressReporter.describe
        assert describe(BoardEvent("decided", 0, 1, char="Q")) == "Cell 1,2 decided: 'Q'"
        assert describe(BoardEvent("trying", 2, 0, axis=Axis.COLUMN)) == "Cell 3,1 trying by column"
        assert describe(BoardEvent("stuck", 0, 0, axis=Axis.ROW)) == "Cell 1,1 no progress by row"
        assert describe(BoardEvent("contradiction", 0, 0)) == "Cell 1,1 ran out of possibilities!"

    def test_logs_events(self):
        logf = io.StringIO()
        reporter = ProgressReporter(1, 1, logf=logf)
        reporter(BoardEvent("narrowed", 0, 0, axis=Axis.ROW))
        assert logf.getvalue() == "Cell 1,1 narrowed by row\n"
        assert reporter.n_events == 1

    def test_live_render_moves_cursor(self):
        screen = io.StringIO()
        reporter = ProgressReporter(3, 2, live=True, stream=screen)
        reporter(BoardEvent("decided", 1, 0, char="Z"))
        # Row 0 of a 2-row grid is three lines above the cursor, column 1 two steps right
        assert screen.getvalue() == "\x1b[s\x1b[3A\x1b[2C\x1b[1;32mZ\x1b[0m\x1b[u"

    def test_no_output_when_not_live(self):
        screen = io.StringIO()
        reporter = ProgressReporter(1, 1, stream=screen)
        reporter.draw_frame()
        reporter(BoardEvent("decided", 0, 0, char="A"))
        assert screen.getvalue() == ""


def test_time_str():
    assert time_str(3723.5) == "01:02:03.50"


def test_axis_formatting():
    assert f"{Axis.ROW}" == "row"
    assert str(Axis.COLUMN) == "column"
    assert Axis.ROW < Axis.COLUMN


class TestMain:
    def test_usage(self, monkeypatch, capsys):
        monkeypatch.setattr(regexcross, "argv", ["regexcross"])
        with pytest.raises(SystemExit) as excinfo:
            regexcross.main()
        assert excinfo.value.code == 1
        assert "Usage" in capsys.readouterr().out

    def test_solves_puzzle_file(self, puzzle_file, log_dir, monkeypatch, capsys):
        monkeypatch.setattr(regexcross, "argv", ["regexcross", str(puzzle_file)])
        with pytest.raises(SystemExit) as excinfo:
            regexcross.main()
        assert excinfo.value.code == 0
        out = capsys.readouterr().out
        assert "HE\nLP" in out

    def test_bad_and_unsolvable_puzzles_fail(self, tmp_path, log_dir, monkeypatch, capsys):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"width": 2, "height": 1, "left_hints": ["AB"]}))
        stuck = tmp_path / "stuck.json"
        stuck.write_text(
            json.dumps({"width": 1, "height": 1, "top_hints": ["[AB]"], "left_hints": ["[AB]"]})
        )
        monkeypatch.setattr(regexcross, "argv", ["regexcross", str(bad), str(stuck)])
        with pytest.raises(SystemExit) as excinfo:
            regexcross.main()
        assert excinfo.value.code == 1
        out = capsys.readouterr().out
        assert "vertical hint for every column" in out
        assert "No solution found" in out
