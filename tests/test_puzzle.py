import random

import pytest

from metablocks.puzzle import GridError, MetaBlocks, Move

ALLOWED_TYPES = {
    1: [(1,), (2,), (3,), (4,)],
    2: [(2,), (1, 3), (3, 4)],
    3: [(1, 3, 4), (1, 3), (1, 4), (2,)],
    4: [(2, 3, 4), (1, 3, 4), (2, 3), (2, 4)],
    5: [(2, 3, 4)],
}


def load(tmp_path, text, b=2):
    path = tmp_path / "level.csv"
    path.write_text(text)
    puzzle = MetaBlocks(0, 0, b, 1, rng=random.Random(0))
    puzzle.load_grid(path)
    return puzzle


def generated(n=15, m=25, b=3, level=3, seed=0):
    puzzle = MetaBlocks(n, m, b, level, rng=random.Random(seed))
    puzzle.initialize()
    return puzzle


def test_initialize_pads_board():
    puzzle = generated(5, 9, 2, 1)
    assert (puzzle.n, puzzle.m) == (5 + 4, 9 + 4)
    assert len(puzzle.grid) == puzzle.n
    assert all(len(row) == puzzle.m for row in puzzle.grid)
    border = puzzle.grid[0] + puzzle.grid[1] + puzzle.grid[-1] + puzzle.grid[-2]
    assert set(border) == {0}
    assert all(row[0] == 0 and row[-1] == 0 for row in puzzle.grid)


def test_initialize_places_start_and_end():
    puzzle = generated(5, 9, 2, 1)
    assert puzzle.start == (2, 2)
    assert puzzle.end == (2, 5)
    assert puzzle.curr_pos == puzzle.start
    assert puzzle.grid[2][2] == 2
    assert puzzle.grid[2][5] == 3


def test_initialize_reproducible_with_seed():
    first = generated(seed=7, level=4)
    second = generated(seed=7, level=4)
    assert first.grid == second.grid
    assert first.puzzle_type == second.puzzle_type


@pytest.mark.parametrize("level", [1, 2, 3, 4, 5])
@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_generated_board_invariants(level, seed):
    puzzle = generated(level=level, seed=seed)
    assert puzzle.puzzle_type in ALLOWED_TYPES[level]
    for x, y in puzzle.one_indices:
        assert puzzle.grid[x][y] == 1
    ones = sum(row.count(1) for row in puzzle.grid)
    assert ones == len(puzzle.one_indices)
    for x, y, value in puzzle.other_indices:
        assert puzzle.grid[x][y] == value
    for x, row in enumerate(puzzle.grid):
        for y, value in enumerate(row):
            if 100 <= value < 200:
                px, py = puzzle.transporters[value % 100]
                assert puzzle.grid[px][py] == value ^ 1
    for index, entry in enumerate(puzzle.button_map):
        for x, y, released in entry:
            expected = -201 - index if released else -1 - index
            assert puzzle.grid[x][y] == expected
    if 1 in puzzle.puzzle_type or 2 in puzzle.puzzle_type:
        assert len(puzzle.buttons) == len(puzzle.button_map) + 1


@pytest.mark.parametrize("level", [0, 6, -1])
def test_invalid_intensity_raises(level):
    puzzle = MetaBlocks(15, 25, 3, level, rng=random.Random(0))
    with pytest.raises(ValueError):
        puzzle.initialize()


def test_load_grid_dimensions_and_start(tmp_path):
    puzzle = load(tmp_path, "2,1,1,3\n")
    assert (puzzle.n, puzzle.m) == (1 + 4, 4 + 4)
    assert puzzle.start == (2, 2)
    assert puzzle.curr_pos == (2, 2)
    assert puzzle.end == (2, 5)
    assert puzzle.grid[2][2:6] == [2, 1, 1, 3]
    assert puzzle.buttons == [False]


def test_load_grid_buttons(tmp_path):
    puzzle = load(tmp_path, "2,201,-1,-201,3\n")
    assert puzzle.buttons == [False, False]
    assert puzzle.button_map[1] == [(2, 4, False), (2, 5, True)]
    assert puzzle.button_map[0] == []


def test_load_grid_transporters(tmp_path):
    puzzle = load(tmp_path, "2,100,1,101,3\n")
    assert puzzle.transporters == [(2, 5), (2, 3)]


def test_load_grid_invalid_value(tmp_path):
    with pytest.raises(GridError):
        load(tmp_path, "2,x,3\n")


def test_load_grid_empty_field(tmp_path):
    with pytest.raises(GridError):
        load(tmp_path, "2,,3\n")


def test_load_grid_inconsistent_rows(tmp_path):
    with pytest.raises(GridError):
        load(tmp_path, "2,1,1\n1,3\n")


def test_load_grid_unpaired_transporter(tmp_path):
    with pytest.raises(GridError):
        load(tmp_path, "2,100,3\n")


def test_load_grid_missing_file(tmp_path):
    puzzle = MetaBlocks(0, 0, 2, 1)
    with pytest.raises(OSError):
        puzzle.load_grid(tmp_path / "missing.csv")


def test_save_grid_round_trip(tmp_path):
    puzzle = load(tmp_path, "2,1,1\n1,4,3\n")
    out = tmp_path / "saved.txt"
    puzzle.save_grid(out)
    lines = out.read_text().splitlines()
    assert all(line.endswith(" ") for line in lines)
    assert [[int(t) for t in line.split()] for line in lines] == puzzle.grid


def test_state_round_trip(tmp_path):
    puzzle = load(tmp_path, "2,201,-1,-201,3\n")
    puzzle.load_state("0/2,3/1/")
    assert puzzle.state == 0
    assert puzzle.curr_pos == (2, 3)
    assert puzzle.buttons[1] is True
    assert puzzle.get_state() == "0/2,3/1/"


def test_load_state_clears_buttons(tmp_path):
    puzzle = load(tmp_path, "2,201,-1,3\n")
    puzzle.buttons[1] = True
    puzzle.load_state("2/4,5/")
    assert puzzle.buttons == [False, False]
    assert (puzzle.state, puzzle.curr_pos) == (2, (4, 5))


@pytest.mark.parametrize("text", ["x/1,2/", "0/"])
def test_load_state_malformed(tmp_path, text):
    puzzle = load(tmp_path, "2,1,1,3\n")
    with pytest.raises(ValueError):
        puzzle.load_state(text)


def test_reset_puzzle(tmp_path):
    puzzle = load(tmp_path, "2,201,-1,3\n")
    initial = puzzle.get_state()
    puzzle.move(Move.RIGHT)
    puzzle.buttons[1] = True
    puzzle.reset_puzzle()
    assert puzzle.get_state() == initial
    assert puzzle.curr_pos == puzzle.start


@pytest.mark.parametrize("move", list(Move))
def test_move_then_undo(tmp_path, move):
    puzzle = load(tmp_path, "1,1,1,1,1\n1,1,2,1,1\n1,1,1,1,3\n")
    before = puzzle.get_state()
    puzzle.move(move)
    assert puzzle.get_state() != before
    puzzle.move(move, undo=True)
    assert puzzle.get_state() == before


def test_unknown_move_is_ignored(tmp_path):
    puzzle = load(tmp_path, "2,1,1,3\n")
    before = puzzle.get_state()
    puzzle.move(7)
    assert puzzle.get_state() == before


def test_rolling_to_goal_wins(tmp_path):
    puzzle = load(tmp_path, "2,1,1,3\n")
    assert not puzzle.check_win()
    puzzle.move(Move.RIGHT)
    assert puzzle.check_valid()
    assert not puzzle.check_win()
    puzzle.move(Move.RIGHT)
    assert puzzle.check_valid()
    assert puzzle.check_win()
    assert puzzle.curr_pos == puzzle.end


def test_rolling_to_goal_odd_length(tmp_path):
    puzzle = load(tmp_path, "2,1,1,1,3\n", b=3)
    puzzle.move(Move.RIGHT)
    assert puzzle.check_valid()
    puzzle.move(Move.RIGHT)
    assert puzzle.check_win()


def test_move_off_board_is_invalid(tmp_path):
    puzzle = load(tmp_path, "2,1,1,3\n")
    puzzle.move(Move.UP)
    assert not puzzle.check_valid()


def test_out_of_bounds_position_is_invalid(tmp_path):
    puzzle = load(tmp_path, "2,1,1,3\n")
    puzzle.curr_pos = (-1, 0)
    assert not puzzle.check_valid()


def test_dead_cell_is_invalid(tmp_path):
    puzzle = load(tmp_path, "2,4,1,3\n")
    puzzle.move(Move.RIGHT)
    assert not puzzle.check_valid()


def test_centre_support_with_odd_length(tmp_path):
    puzzle = load(tmp_path, "2,0,1,0,3\n", b=3)
    puzzle.move(Move.RIGHT)
    assert puzzle.check_valid()


def test_one_sided_support_is_invalid(tmp_path):
    puzzle = load(tmp_path, "2,1,0,0,3\n", b=3)
    puzzle.move(Move.RIGHT)
    assert not puzzle.check_valid()


def test_bridges_follow_buttons(tmp_path):
    puzzle = load(tmp_path, "2,201,-1,-201,3\n")
    puzzle.curr_pos = (2, 4)
    assert not puzzle.check_valid()
    puzzle.buttons[1] = True
    assert puzzle.check_valid()
    puzzle.curr_pos = (2, 5)
    assert not puzzle.check_valid()
    puzzle.buttons[1] = False
    assert puzzle.check_valid()


def test_activate_and_deactivate_button(tmp_path):
    puzzle = load(tmp_path, "2,201,-1,3\n")
    puzzle.curr_pos = (2, 3)
    puzzle.activate_button()
    assert puzzle.buttons[1] is True
    puzzle.activate_button(deactivate=True)
    assert puzzle.buttons[1] is False


def test_button_ignored_when_lying(tmp_path):
    puzzle = load(tmp_path, "2,201,-1,3\n")
    puzzle.curr_pos = (2, 3)
    puzzle.state = 1
    puzzle.activate_button()
    assert puzzle.buttons == [False, False]


def test_transport_both_ways(tmp_path):
    puzzle = load(tmp_path, "2,100,1,101,3\n")
    puzzle.curr_pos = (2, 3)
    puzzle.transport()
    assert puzzle.curr_pos == (2, 5)
    puzzle.transport()
    assert puzzle.curr_pos == (2, 3)


def test_transport_ignored_when_lying(tmp_path):
    puzzle = load(tmp_path, "2,100,1,101,3\n")
    puzzle.curr_pos = (2, 3)
    puzzle.state = 2
    puzzle.transport()
    assert puzzle.curr_pos == (2, 3)