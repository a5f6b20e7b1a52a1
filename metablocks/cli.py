"""Command line entry: generate a board, anneal it, print its solutions and play it."""

from __future__ import annotations

import argparse
import random
import sys

from .generator import MonteCarloGenerator
from .puzzle import MetaBlocks
from .solver import find_optimal_solutions, format_solutions
from .viewer import view

ROWS = 15
COLUMNS = 25
BLOCK_LENGTH = 3


def format_grid(grid):
    """Render a grid as rows of space-terminated values."""
    return "\n".join("".join(f"{value} " for value in row) for row in grid)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="metablocks", description="Generate and play a block puzzle.")
    parser.add_argument("level", nargs="?", type=int, choices=range(1, 6),
                        help="element intensity 1-5 (read from standard input if omitted)")
    parser.add_argument("--steps", type=int, default=10000)
    parser.add_argument("--threshold", type=float, default=-100.0)
    parser.add_argument("--temperature", type=float, default=0.001)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--cell-size", type=int, default=None)
    parser.add_argument("--no-view", action="store_true", help="do not open the game window")
    return parser


def main(argv=None):
    parser = _parser()
    args = parser.parse_args(argv)
    level = args.level
    if level is None:
        text = sys.stdin.readline().strip()
        try:
            level = int(text)
        except ValueError:
            parser.error(f"invalid level {text!r}")
        if not 1 <= level <= 5:
            parser.error(f"level must be 1 to 5, not {level}")

    rng = random.Random(args.seed)
    puzzle = MetaBlocks(ROWS, COLUMNS, BLOCK_LENGTH, level, rng)
    puzzle.initialize()
    print(" ".join(str(kind) for kind in puzzle.puzzle_type))

    MonteCarloGenerator(puzzle, rng).simulate(args.steps, args.threshold, args.temperature)
    best_time, move_sets = find_optimal_solutions(puzzle)
    print(format_solutions(best_time, move_sets))
    print()
    print(format_grid(puzzle.grid))
    print()

    if not args.no_view:
        if args.cell_size is None:
            view(puzzle)
        else:
            view(puzzle, args.cell_size)
    return 0


if __name__ == "__main__":
    sys.exit(main())