"""Regex Crossword Solver.

Finds the character of every cell in a rectangular grid whose rows and columns must
each match a regular expression.  The characters a hint could produce are derived
from its parsed pattern, then each cell's candidates are narrowed by brute-forcing
one row or column at a time, cheapest line first.
"""

from sys import argv, exit

from .errors import ConfigurationError
from .puzzle_config import load_puzzle
from .solver import solver


def main() -> None:
    """Main entry point for the regex crossword solver."""
    # Expect one or more puzzle files
    if len(argv) < 2:
        print("Usage: python -m regexcross <puzzle.json> [<puzzle.json> ...]")
        exit(1)

    all_solved = True
    for puzzle_path in argv[1:]:
        try:
            puzzle = load_puzzle(puzzle_path)
        except ConfigurationError as e:
            print(f"{puzzle_path}: {e}")
            all_solved = False
            continue
        result = solver.run(puzzle)
        all_solved = all_solved and result.solved

    exit(0 if all_solved else 1)
