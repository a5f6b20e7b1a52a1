"""Board model for the rolling-block puzzle: cells, moves, buttons and teleporters.

Cell values on the board:

* ``0`` empty, ``1`` floor, ``2`` start, ``3`` goal, ``4`` dead cell
* ``1xx`` teleporter pads, paired ``100/101``, ``102/103`` and so on
* ``2xx`` buttons; button ``k`` has value ``200 + k``
* ``-k`` a bridge that is solid while button ``k`` is pressed
* ``-(200 + k)`` a bridge that is solid while button ``k`` is released
"""

from __future__ import annotations

import itertools
import os
import random
import re
from enum import IntEnum
from typing import Union

CELL_SIZE = 300

EMPTY = 0
FLOOR = 1
START = 2
END = 3
DEAD = 4

Position = tuple[int, int]
PathLike = Union[str, "os.PathLike[str]"]

# Element kinds used when generating a board from an intensity level.
_BUTTONS_ON = 1
_BUTTONS_ON_OFF = 2
_DEAD_CELLS = 3
_TRANSPORTERS = 4

_INTENSITY_OPTIONS: dict[int, tuple[tuple[int, ...], ...]] = {
    1: ((1,), (2,), (3,), (4,)),
    2: ((2,), (1, 3), (3, 4)),
    3: ((1, 3, 4), (1, 3), (1, 4), (2,)),
    4: ((2, 3, 4), (1, 3, 4), (2, 3), (2, 4)),
    5: ((2, 3, 4),),
}
_NUM_BUTTONS = (1, 1, 1, 2, 3)
_NUM_BUTTON_ON_CELLS = (1, 2, 2, 5, 7)
_NUM_BUTTON_OFF_CELLS = (1, 1, 2, 5, 7)
_NUM_DEAD_CELLS = (1, 2, 3, 4, 5)
_NUM_TRANSPORTER_PAIRS = (1, 1, 2, 3, 3)

# Which transition slot of the current block state a move uses.
_MOVE_SLOT = {0: 2, 1: 3, 2: 1, 3: 0}
_OPPOSITE = {0: 1, 1: 0, 2: 3, 3: 2}

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


class Move(IntEnum):
    """A move the player can make."""

    RIGHT = 0
    LEFT = 1
    UP = 2
    DOWN = 3


class GridError(ValueError):
    """A board file or a generated board is malformed."""


def _is_transporter(value: int) -> bool:
    return 100 <= value < 200


def _is_button(value: int) -> bool:
    return 200 <= value < 300


def _parse_cell(text: str) -> int:
    match = _INT_PREFIX.match(text)
    if match is None:
        raise GridError(f"invalid cell value {text!r}")
    return int(match.group(1))


class MetaBlocks:
    """A board of side-padded cells and a ``b``-long block rolling on it."""

    def __init__(self, n, m, b, element_intensity, rng=None):
        self.n = n
        self.m = m
        self.b = b
        self.element_intensity = element_intensity
        self.rng = rng if rng is not None else random.Random()
        self.line_width = 4.0
        self.start: Position = (0, 0)
        self.curr_pos: Position = (0, 0)
        self.end: Position = (0, 0)
        self.state = 0
        self.grid: list[list[int]] = []
        self.transporters: list[Position] = []
        self.buttons: list[bool] = []
        self.button_map: list[list[tuple[int, int, bool]]] = []
        self.zero_indices: set[Position] = set()
        self.one_indices: set[Position] = set()
        self.other_indices: set[tuple[int, int, int]] = set()
        self.puzzle_type: tuple[int, ...] = ()

        # Block orientations: 0 upright, 1 lying along x, 2 lying along y.
        # states[s][layer][x][y] tells whether the block fills that cube.
        self.states = [
            [
                [
                    [
                        (s == 0 and x == 0 and y == 0)
                        or (s == 1 and layer == 0 and y == 0)
                        or (s == 2 and layer == 0 and x == 0)
                        for y in range(b)
                    ]
                    for x in range(b)
                ]
                for layer in range(b)
            ]
            for s in range(3)
        ]
        # For each state, four (next_state, offset index) pairs in the
        # order down, up, right, left.
        self.transitions: dict[int, list[tuple[int, int]]] = {
            0: [(1, 0), (1, 1), (2, 2), (2, 3)],
            1: [(0, 4), (0, 5), (1, 6), (1, 7)],
            2: [(2, 8), (2, 9), (0, 10), (0, 11)],
        }
        self.offsets: list[Position] = [
            (1, 0), (-b, 0), (0, 1), (0, -b),
            (b, 0), (-1, 0), (0, 1), (0, -1),
            (1, 0), (-1, 0), (0, b), (0, -1),
        ]

    # ------------------------------------------------------------------
    # Board generation

    def initialize(self):
        """Generate a fresh board from the size and intensity level."""
        self.grid = [[FLOOR] * self.m for _ in range(self.n)]
        self.transporters = []
        self.buttons = []
        self.button_map = []
        self.one_indices = set()
        self.other_indices = set()
        self.apply_intensity()

    def apply_intensity(self):
        """Pick a random mix of elements for the intensity level and lay them out."""
        level = self.element_intensity
        options = _INTENSITY_OPTIONS.get(level)
        if options is None:
            raise ValueError(f"element intensity must be 1 to 5, not {level!r}")
        self.puzzle_type = options[self.rng.randrange(len(options))]
        slot = level - 1
        b, m = self.b, self.m
        cells = ((i // m + b, i % m + b) for i in itertools.count(b + 2))

        self.start = (b, b)
        self.curr_pos = self.start
        self.end = (b, 2 * b + 1)
        self.other_indices.add((*self.start, START))
        self.other_indices.add((*self.end, END))

        for key in self.puzzle_type:
            if key in (_BUTTONS_ON, _BUTTONS_ON_OFF):
                count = _NUM_BUTTONS[slot]
                self.buttons = (self.buttons + [False] * (count + 1))[: count + 1]
                for button in range(count):
                    self.other_indices.add((*next(cells), 201 + button))
                    entry = []
                    for _ in range(_NUM_BUTTON_ON_CELLS[slot]):
                        x, y = next(cells)
                        entry.append((x, y, False))
                        self.other_indices.add((x, y, -1 - button))
                    if key == _BUTTONS_ON_OFF:
                        for _ in range(_NUM_BUTTON_OFF_CELLS[slot]):
                            x, y = next(cells)
                            entry.append((x, y, True))
                            self.other_indices.add((x, y, -201 - button))
                    self.button_map.append(entry)
            elif key == _DEAD_CELLS:
                for _ in range(_NUM_DEAD_CELLS[slot]):
                    self.other_indices.add((*next(cells), DEAD))
            elif key == _TRANSPORTERS:
                for pair in range(_NUM_TRANSPORTER_PAIRS[slot]):
                    first = next(cells)
                    self.other_indices.add((*first, 100 + 2 * pair))
                    second = next(cells)
                    self.other_indices.add((*second, 101 + 2 * pair))
                    self.transporters.extend([second, first])

        self.initialize_grid_and_furniture()

    def initialize_grid_and_furniture(self):
        """Pad the board by ``b`` empty cells on each side and place the elements."""
        b = self.b
        self.n += 2 * b
        self.m += 2 * b
        n, m = self.n, self.m
        self.grid = [
            [FLOOR if b <= i < n - b and b <= j < m - b else EMPTY for j in range(m)]
            for i in range(n)
        ]
        self.one_indices = {(i, j) for i in range(b, n - b) for j in range(b, m - b)}
        for x, y, value in sorted(self.other_indices):
            if not (0 <= x < n and 0 <= y < m):
                raise GridError(f"board too small to place element at ({x}, {y})")
            self.grid[x][y] = value
            self.one_indices.discard((x, y))

    # ------------------------------------------------------------------
    # State

    def get_state(self):
        """Encode orientation, position and pressed buttons as a string."""
        x, y = self.curr_pos
        pressed = "".join(f"{i}/" for i, on in enumerate(self.buttons) if on)
        return f"{self.state}/{x},{y}/{pressed}"

    def load_state(self, state_string):
        """Restore orientation, position and buttons from :meth:`get_state` output."""
        parts = re.split(r"[/,]", state_string)[:-1]
        try:
            values = [int(part) if part else 0 for part in parts]
        except ValueError as exc:
            raise ValueError(f"malformed state string {state_string!r}") from exc
        if len(values) < 3:
            raise ValueError(f"malformed state string {state_string!r}")
        self.state = values[0]
        self.curr_pos = (values[1], values[2])
        self.buttons = [False] * len(self.buttons)
        for button in values[3:]:
            self.buttons[button] = True

    def reset_puzzle(self):
        """Put the block back upright on the start cell with all buttons released."""
        self.state = 0
        self.curr_pos = self.start
        self.buttons = [False] * len(self.buttons)

    def check_win(self):
        """True when the block stands upright on the goal."""
        return self.state == 0 and self.curr_pos == self.end

    # ------------------------------------------------------------------
    # Validity

    def _pressed(self, button: int) -> bool:
        return 0 <= button < len(self.buttons) and self.buttons[button]

    def _cell(self, x: int, y: int) -> int:
        if 0 <= x < self.n and 0 <= y < self.m:
            return self.grid[x][y]
        return EMPTY

    def _upright_valid(self) -> bool:
        x, y = self.curr_pos
        value = self.grid[x][y]
        if value in (DEAD, EMPTY):
            return False
        if value < -200 and self._pressed(-value % 200):
            return False
        if -200 < value < 0 and not self._pressed(-value):
            return False
        return True

    def _supports(self, value: int) -> bool:
        if value in (FLOOR, START, END) or value > 99:
            return True
        if value < -200:
            return not self._pressed(-value % 200)
        if value == -200:
            return False
        return self._pressed(-value)

    def _lying_valid(self, along_x: bool) -> bool:
        x, y = self.curr_pos
        half = self.b // 2
        odd = self.b % 2 == 1
        first_half = second_half = False
        for i in range(self.b):
            if first_half and second_half:
                break
            value = self._cell(x + i, y) if along_x else self._cell(x, y + i)
            if value == DEAD:
                return False
            if self._supports(value):
                if i < half:
                    first_half = True
                else:
                    second_half = True
                if odd and i == half:
                    first_half = second_half = True
                    break
        return first_half and second_half

    def check_valid(self):
        """True when the block rests on the board without tipping over."""
        x, y = self.curr_pos
        if not (0 <= x < self.n and 0 <= y < self.m):
            return False
        if self.state == 0:
            return self._upright_valid()
        if self.state == 1:
            return self._lying_valid(along_x=True)
        if self.state == 2:
            return self._lying_valid(along_x=False)
        return False

    # ------------------------------------------------------------------
    # Files

    def load_grid(self, filename):
        """Read a comma-separated board file and pad it by ``b`` on each side."""
        b = self.b
        with open(filename, encoding="utf-8") as handle:
            lines = handle.read().splitlines()

        rows: list[list[int]] = []
        start, end = self.start, self.end
        for row_number, line in enumerate(lines):
            tokens = line.split(",")
            if tokens[-1] == "":
                tokens.pop()
            row = []
            for column, token in enumerate(tokens):
                value = _parse_cell(token)
                if value == START:
                    start = (row_number + b, column + b)
                elif value == END:
                    end = (row_number + b, column + b)
                row.append(value)
            rows.append(row)

        width = len(rows[0]) if rows else 0
        if any(len(row) != width for row in rows):
            raise GridError(f"inconsistent row sizes in {filename}")

        self.start = start
        self.curr_pos = start
        self.end = end
        self.n = len(rows) + 2 * b
        self.m = width + 2 * b
        self.grid = [[EMPTY] * self.m for _ in range(self.n)]
        for i, row in enumerate(rows, start=b):
            self.grid[i][b : b + width] = row

        transporter_cells: list[tuple[int, int, int]] = []
        bridges: list[tuple[int, int, int, bool]] = []
        num_buttons = 0
        for i, row in enumerate(self.grid):
            for j, value in enumerate(row):
                if _is_transporter(value):
                    transporter_cells.append((i, j, value))
                elif _is_button(value):
                    num_buttons += 1
                elif value < 0:
                    bridges.append((-value % 200, i, j, value < -200))

        self.buttons = [False] * (num_buttons + 1)
        self.button_map = [[] for _ in range(num_buttons + 1)]
        for button, i, j, released in bridges:
            if button >= len(self.button_map):
                raise GridError(f"bridge at ({i}, {j}) refers to unknown button {button}")
            self.button_map[button].append((i, j, released))

        slots: list[Position | None] = [None] * len(transporter_cells)
        for i, j, value in transporter_cells:
            pad = value % 100
            partner = pad - 1 if pad % 2 else pad + 1
            if partner >= len(slots):
                raise GridError(f"teleporter {value} at ({i}, {j}) has no partner")
            slots[partner] = (i, j)
        if any(slot is None for slot in slots):
            raise GridError("teleporters are not properly paired")
        self.transporters = [slot for slot in slots if slot is not None]

    def save_grid(self, filename):
        """Write the padded board, one space-separated row per line."""
        with open(filename, "w", encoding="utf-8") as handle:
            for row in self.grid:
                handle.write("".join(f"{value} " for value in row) + "\n")

    # ------------------------------------------------------------------
    # Play

    def move(self, move_id, undo=False):
        """Roll the block; with ``undo`` roll it the opposite way."""
        move_id = int(move_id)
        if undo:
            move_id = _OPPOSITE.get(move_id, move_id)
        slot = _MOVE_SLOT.get(move_id)
        if slot is None:
            return
        self.state, offset_index = self.transitions[self.state][slot]
        dx, dy = self.offsets[offset_index]
        x, y = self.curr_pos
        self.curr_pos = (x + dx, y + dy)

    def activate_button(self, deactivate=False):
        """Press (or release) the button under an upright block."""
        if self.state != 0:
            return
        x, y = self.curr_pos
        value = self.grid[x][y]
        if _is_button(value):
            self.buttons[value % 100] = not deactivate

    def transport(self):
        """Teleport an upright block standing on a pad to its partner pad."""
        if self.state != 0:
            return
        x, y = self.curr_pos
        value = self.grid[x][y]
        if _is_transporter(value):
            self.curr_pos = self.transporters[value % 100]