"""Interactive top-down view of a board, played with the arrow keys."""

from __future__ import annotations

from .puzzle import CELL_SIZE, DEAD, END, FLOOR, START, MetaBlocks, Move

Colour = tuple[float, float, float]

RED: Colour = (0.8, 0.1, 0.1)
WHITE: Colour = (1.0, 1.0, 1.0)
GREEN: Colour = (0.1, 0.8, 0.1)
BLUE: Colour = (0.1, 0.1, 0.8)
BACKGROUND: Colour = (0.1, 0.1, 0.1)

_KEY_MOVES = {
    "K_RIGHT": Move.RIGHT,
    "K_LEFT": Move.LEFT,
    "K_UP": Move.UP,
    "K_DOWN": Move.DOWN,
}


def _pressed(puzzle: MetaBlocks, button: int) -> bool:
    return 0 <= button < len(puzzle.buttons) and puzzle.buttons[button]


def apply_player_move(puzzle, move_id):
    """Make a player's move: reset on a fall, then teleport or toggle a button.

    Returns True when the move lands the block upright on the goal.
    """
    puzzle.move(move_id)
    if not puzzle.check_valid():
        puzzle.curr_pos = puzzle.start
        puzzle.state = 0
        puzzle.buttons = [False] * len(puzzle.buttons)
    won = puzzle.check_win()
    x, y = puzzle.curr_pos
    value = puzzle.grid[x][y]
    if puzzle.state == 0 and 100 <= value < 200:
        puzzle.curr_pos = puzzle.transporters[value % 100]
    if puzzle.state == 0 and 200 <= value < 300:
        button = value % 100
        puzzle.buttons[button] = not puzzle.buttons[button]
    return won


def cell_colour(puzzle, value):
    """Colour a cell value is drawn in, or None when nothing is drawn."""
    if value in (FLOOR, START):
        return RED
    if -200 < value < 0 and _pressed(puzzle, -value):
        return RED
    if value < -200 and not _pressed(puzzle, -value % 200):
        return RED
    if value == DEAD:
        return WHITE
    if value == END:
        return GREEN
    if 100 <= value < 300:
        return RED
    return None


def _label(value: int) -> str | None:
    if 100 <= value < 200:
        return f"t{(value % 100) // 2 + 1}"
    return None


def _block_cells(puzzle: MetaBlocks):
    x, y = puzzle.curr_pos
    layers = puzzle.states[puzzle.state]
    for i in range(puzzle.b):
        for j in range(puzzle.b):
            if any(layer[i][j] for layer in layers):
                yield x + i, y + j


def _rgb(colour: Colour) -> tuple[int, int, int]:
    return tuple(round(channel * 255) for channel in colour)


def view(puzzle, cell_size=CELL_SIZE):
    """Open a window showing the board and play it until the window is closed."""
    import pygame

    b = puzzle.b
    rows = puzzle.n - 2 * b
    cols = puzzle.m - 2 * b
    pygame.init()
    try:
        screen = pygame.display.set_mode((cell_size * cols, cell_size * rows))
        pygame.display.set_caption("3D Block Placer")
        font = pygame.font.Font(None, max(12, cell_size // 3))
        clock = pygame.time.Clock()
        key_moves = {getattr(pygame, name): move for name, move in _KEY_MOVES.items()}
        puzzle.state = 0

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key in key_moves:
                    if apply_player_move(puzzle, key_moves[event.key]):
                        print("Winner!")

            screen.fill(_rgb(BACKGROUND))
            for i in range(b, puzzle.n - b):
                for j in range(b, puzzle.m - b):
                    value = puzzle.grid[i][j]
                    colour = cell_colour(puzzle, value)
                    if colour is None:
                        continue
                    rect = pygame.Rect((j - b) * cell_size, (i - b) * cell_size, cell_size, cell_size)
                    pygame.draw.rect(screen, _rgb(colour), rect)
                    pygame.draw.rect(screen, _rgb(WHITE), rect, 2)
                    if 200 <= value < 300:
                        pygame.draw.circle(screen, _rgb(GREEN), rect.center, cell_size // 4)
                    label = _label(value)
                    if label is not None:
                        text = font.render(label, True, _rgb(WHITE))
                        screen.blit(text, text.get_rect(center=rect.center))

            for x, y in _block_cells(puzzle):
                rect = pygame.Rect((y - b) * cell_size, (x - b) * cell_size, cell_size, cell_size)
                pygame.draw.rect(screen, _rgb(BLUE), rect.inflate(-cell_size // 5, -cell_size // 5))

            pygame.display.flip()
            clock.tick(60)
    finally:
        pygame.quit()
    return 0