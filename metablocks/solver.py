"""Shortest-solution search over block orientation, position and button states."""

from __future__ import annotations

import heapq

from .puzzle import MetaBlocks, Move


def _in_bounds(puzzle: MetaBlocks) -> bool:
    x, y = puzzle.curr_pos
    return 0 <= x < len(puzzle.grid) and 0 <= y < len(puzzle.grid[x])


def _explore(puzzle: MetaBlocks, keep_paths: bool):
    """Run Dijkstra from the start; return (best_time, count, paths)."""
    puzzle.reset_puzzle()
    origin = puzzle.get_state()
    distances = {origin: 0}
    queue: list[tuple[int, str, tuple[Move, ...]]] = [(0, origin, ())]
    best_time: int | None = None
    count = 0
    paths: list[list[Move]] = []

    while queue and (best_time is None or queue[0][0] <= best_time):
        elapsed, state, path = heapq.heappop(queue)
        puzzle.load_state(state)
        step = elapsed + 1
        for move in Move:
            puzzle.move(move)
            if _in_bounds(puzzle):
                puzzle.activate_button()
                puzzle.transport()
            new_path = path + (move,) if keep_paths else ()
            if puzzle.check_win():
                if best_time is None or step < best_time:
                    best_time = step
                    count = 1
                    paths = [list(new_path)]
                elif step == best_time:
                    count += 1
                    paths.append(list(new_path))
            if puzzle.check_valid():
                new_state = puzzle.get_state()
                if distances.get(new_state, step) >= step:
                    distances[new_state] = step
                    heapq.heappush(queue, (step, new_state, new_path))
            puzzle.load_state(state)

    puzzle.reset_puzzle()
    return best_time, count, paths


def count_optimal_solutions(puzzle):
    """Return ``(moves, solutions)`` for the shortest solutions, or ``(-1, -1)``."""
    best_time, count, _ = _explore(puzzle, keep_paths=False)
    if best_time is None:
        return -1, -1
    return best_time, count


def find_optimal_solutions(puzzle):
    """Return ``(moves, move_sets)`` listing every shortest solution.

    ``moves`` is ``-1`` and ``move_sets`` empty when the board cannot be solved.
    """
    best_time, _, paths = _explore(puzzle, keep_paths=True)
    if best_time is None:
        return -1, []
    return best_time, paths


def format_solutions(best_time, move_sets):
    """Describe the optimal solutions, one line of moves per solution."""
    lines = [f"Found {len(move_sets)} optimal solutions in {best_time} moves:"]
    for moves in move_sets:
        lines.append(" ".join(Move(move).name.lower() for move in moves))
    return "\n".join(lines)