# metablocks

A puzzle game about rolling a long block across a grid of tiles. The block is
`b` cells long and either stands upright on a single cell or lies flat along
one of the two grid axes. Each move tips it over. The goal is to stand the
block upright on the goal tile without letting it tip off the board or touch
a dead tile.

Levels can also contain:

- **buttons**: an upright block standing on one presses it;
- **bridges**: tiles that are solid only while their button is pressed, or
  only while it is released;
- **dead tiles**: never safe to touch;
- **transporters**: paired pads that move an upright block from one pad to
  its partner.

The package includes a shortest-path solver that counts every optimal
solution, and a Monte Carlo generator that edits a level to make its shortest
solution longer.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## The `metablocks` command

```
metablocks [level] [--steps N] [--threshold E] [--temperature T]
           [--seed S] [--cell-size PIXELS] [--no-view]
```

`level` is the element intensity, 1 to 5; higher levels place more buttons,
bridges, dead tiles and transporters. If it is left out, it is read from the
first line of standard input.

The command builds a 15 × 25 board for a block of length 3, prints the element
kinds it chose, runs the generator (`--steps`, default 10000; `--threshold`,
default -100; `--temperature`, default 0.001), then prints the optimal
solutions and the final padded grid. `--seed` makes the run repeatable.

Unless `--no-view` is given it then opens a window to play the level: the
arrow keys roll the block, falling off sends it back to the start with all
buttons released, standing upright on a button toggles it, and standing on a
transporter pad moves the block to the partner pad. `--cell-size` sets the
size of a tile in pixels (default 300). Reaching the goal prints `Winner!`.

## Using the library

```python
import random

from metablocks.puzzle import MetaBlocks, Move
from metablocks.solver import count_optimal_solutions, find_optimal_solutions, format_solutions
from metablocks.generator import MonteCarloGenerator

rng = random.Random(1)
puzzle = MetaBlocks(15, 25, 3, 2, rng)
puzzle.initialize()

best_time, count = count_optimal_solutions(puzzle)

generator = MonteCarloGenerator(puzzle, rng)
energy = generator.simulate(1000, -100, 0.001)

best_time, move_sets = find_optimal_solutions(puzzle)
print(format_solutions(best_time, move_sets))
```

- `metablocks.puzzle.MetaBlocks` holds the board (`grid`, padded by `b` empty
  cells on every side), the block's orientation (`state`) and position
  (`curr_pos`), and the buttons. `initialize()` generates a board for the
  intensity level (a `ValueError` for a level outside 1 to 5). `move(move_id,
  undo=False)` rolls the block by a `Move` (`RIGHT`, `LEFT`, `UP`, `DOWN`);
  `activate_button()`, `transport()`, `check_valid()`, `check_win()` and
  `reset_puzzle()` do what their names say. `get_state()` and
  `load_state()` save and restore orientation, position and pressed buttons
  as a string.
- `metablocks.solver.count_optimal_solutions(puzzle)` returns the length of
  the shortest solution and the number of distinct solutions of that length,
  or `(-1, -1)` when there is none. `find_optimal_solutions(puzzle)` returns
  the length and the move lists (`-1` and an empty list when unsolvable), and
  `format_solutions` turns them into text.
- `metablocks.generator.MonteCarloGenerator` randomly edits the interior of
  a board and keeps edits by the Metropolis rule. Its energy is minus the
  length of the shortest solution; `simulate` returns the final energy.
- `metablocks.viewer.view(puzzle, cell_size)` opens the game window;
  `apply_player_move(puzzle, move_id)` applies one move with the window's
  rules and returns whether it won.

### Board files

`MetaBlocks.load_grid(filename)` reads a board of comma-separated integer tile
codes, one row per line, and pads it by `b` on each side. It raises
`metablocks.puzzle.GridError` for a bad value, uneven rows, a bridge for a
button that does not exist or an unpaired transporter pad.
`MetaBlocks.save_grid(filename)` writes the padded board with values separated
by spaces, which is a dump for reading rather than a file `load_grid` accepts.

### Tile codes

| Code        | Tile                                                |
|-------------|-----------------------------------------------------|
| `0`         | empty                                               |
| `1`         | floor                                               |
| `2`         | start                                               |
| `3`         | goal                                                |
| `4`         | dead tile                                           |
| `100`–`199` | transporter pads; `100+2k` and `101+2k` are a pair  |
| `200+k`     | button `k`                                          |
| `-k`        | bridge solid while button `k` is pressed            |
| `-200-k`    | bridge solid while button `k` is released           |

## Limitations

The game window draws the board from above in flat colours: tiles as squares,
buttons with a disk, transporter pads labelled `t1`, `t2`, … and the block as
the squares it covers. There is no three-dimensional view, no menu for
choosing the board size or block length, and no move counter or score.