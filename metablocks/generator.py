"""Monte Carlo search that reshapes a board towards longer optimal solutions."""

from __future__ import annotations

import math

from .puzzle import EMPTY, END, FLOOR, START, MetaBlocks
from .solver import count_optimal_solutions

Change = tuple[int, int, int, int]


def _partner(value: int) -> int:
    pad = value % 100
    return pad - 1 if pad % 2 else pad + 1


class MonteCarloGenerator:
    """Randomly edits a puzzle's interior, keeping edits that raise its difficulty.

    Every edit is recorded as ``(x, y, old_value, new_value)`` so it can be undone.
    """

    def __init__(self, puzzle: MetaBlocks, rng=None):
        self.puzzle = puzzle
        self.rng = rng if rng is not None else puzzle.rng

    # ------------------------------------------------------------------
    # Bookkeeping

    def update_indices(self):
        """Rebuild the empty, floor and element index sets from the interior."""
        p = self.puzzle
        b = p.b
        p.zero_indices = set()
        p.one_indices = set()
        p.other_indices = set()
        rows = len(p.grid)
        cols = len(p.grid[0]) if rows else 0
        for i in range(b, rows - b):
            for j in range(b, cols - b):
                self._index(i, j, p.grid[i][j])

    def _index(self, x: int, y: int, value: int) -> None:
        p = self.puzzle
        if value == EMPTY:
            p.zero_indices.add((x, y))
        elif value == FLOOR:
            p.one_indices.add((x, y))
        else:
            p.other_indices.add((x, y, value))

    def _unindex(self, x: int, y: int, value: int) -> None:
        p = self.puzzle
        if value == EMPTY:
            p.zero_indices.discard((x, y))
        elif value == FLOOR:
            p.one_indices.discard((x, y))
        else:
            p.other_indices.discard((x, y, value))

    def _place(self, x: int, y: int, value: int) -> None:
        p = self.puzzle
        p.grid[x][y] = value
        if value == START:
            p.start = (x, y)
            p.curr_pos = p.start
        elif value == END:
            p.end = (x, y)
        if 100 <= value < 200:
            p.transporters[_partner(value)] = (x, y)

    def _set_cell(self, cell: tuple[int, int, int], new: int, changes: list) -> None:
        x, y, old = cell
        changes.append((x, y, old, new))
        self._unindex(x, y, old)
        self._index(x, y, new)
        self.puzzle.grid[x][y] = new

    # ------------------------------------------------------------------
    # Moves

    def swap_blocks(self, p1, p2, changes):
        """Exchange the contents of two cells given as ``(x, y, value)``."""
        x1, y1, v1 = p1
        x2, y2, v2 = p2
        changes.append((x1, y1, v1, v2))
        changes.append((x2, y2, v2, v1))
        self._unindex(x1, y1, v1)
        self._unindex(x2, y2, v2)
        self._place(x1, y1, v2)
        self._place(x2, y2, v1)
        self._index(x2, y2, v1)
        self._index(x1, y1, v2)

    def reset_block(self, change):
        """Put a cell back to the value it had before ``change``."""
        x, y, old, new = change
        self._unindex(x, y, new)
        self._place(x, y, old)
        self._index(x, y, old)

    def basic_move(self):
        """Make one random edit of two interior cells and return its changes."""
        p = self.puzzle
        zeros = sorted(p.zero_indices)
        ones = sorted(p.one_indices)
        others = sorted(p.other_indices)
        cells = (
            [(x, y, p.grid[x][y]) for x, y in zeros]
            + [(x, y, p.grid[x][y]) for x, y in ones]
            + others
        )
        kinds = [0] * len(zeros) + [1] * len(ones) + [2] * len(others)
        total = len(cells)
        if total < 2:
            raise ValueError("at least two interior cells are needed for a move")

        first = self.rng.randrange(total)
        second = self.rng.randrange(total)
        while second == first:
            second = self.rng.randrange(total)
        if kinds[second] < kinds[first]:
            first, second = second, first
        c1, c2 = cells[first], cells[second]
        kind = (kinds[first], kinds[second])

        changes: list[Change] = []
        pick = self.rng.random()
        if kind == (0, 0):
            if pick < 1 / 3:
                self._set_cell(c2, FLOOR, changes)
            elif pick < 2 / 3:
                self._set_cell(c1, FLOOR, changes)
            else:
                self._set_cell(c1, FLOOR, changes)
                self._set_cell(c2, FLOOR, changes)
        elif kind == (0, 1):
            if pick < 1 / 3:
                self._set_cell(c2, EMPTY, changes)
            elif pick < 2 / 3:
                self._set_cell(c1, FLOOR, changes)
            else:
                self._set_cell(c1, FLOOR, changes)
                self._set_cell(c2, EMPTY, changes)
        elif kind == (1, 1):
            if pick < 1 / 3:
                self._set_cell(c1, EMPTY, changes)
            elif pick < 2 / 3:
                self._set_cell(c2, EMPTY, changes)
            else:
                self._set_cell(c1, EMPTY, changes)
                self._set_cell(c2, EMPTY, changes)
        else:
            self.swap_blocks(c1, c2, changes)
        return changes

    def undo_move(self, changes):
        """Revert the changes returned by :meth:`basic_move`."""
        for change in changes:
            self.reset_block(change)

    # ------------------------------------------------------------------
    # Annealing

    def energy(self):
        """Minus the length of the shortest solution (``1`` when unsolvable)."""
        best_time, _ = count_optimal_solutions(self.puzzle)
        return -float(best_time)

    def step(self, energy, temperature):
        """Try one edit with the Metropolis rule; return the resulting energy."""
        changes = self.basic_move()
        delta = self.energy() - energy
        if delta < 0:
            return energy + delta
        if temperature > 0:
            probability = math.exp(-delta / temperature)
        else:
            probability = 1.0 if delta == 0 else 0.0
        if self.rng.random() > probability:
            self.undo_move(changes)
            return energy
        return energy + delta

    def simulate(self, num_steps, energy_threshold, temperature):
        """Anneal until ``num_steps`` edits or the energy reaches the threshold."""
        self.update_indices()
        energy = self.energy()
        steps = 0
        while steps < num_steps and energy > energy_threshold:
            energy = self.step(energy, temperature)
            steps += 1
        return energy