"""Pure 3x3 grid rules.

A grid is a tuple of three row tuples holding marks: 0 for an empty cell,
1 for the first seated player, 2 for the second. Grids are immutable, so a
snapshot taken before a move can never be altered by the move itself.
"""

import json
from typing import Iterable, Optional, Sequence, Tuple

EMPTY = 0
FIRST_MARK = 1
SECOND_MARK = 2
SIZE = 3

Grid = Tuple[Tuple[int, ...], ...]
Cell = Tuple[int, int]

LINES: Tuple[Tuple[Cell, Cell, Cell], ...] = (
    # rows
    ((0, 0), (0, 1), (0, 2)),
    ((1, 0), (1, 1), (1, 2)),
    ((2, 0), (2, 1), (2, 2)),
    # columns
    ((0, 0), (1, 0), (2, 0)),
    ((0, 1), (1, 1), (2, 1)),
    ((0, 2), (1, 2), (2, 2)),
    # diagonals
    ((0, 0), (1, 1), (2, 2)),
    ((0, 2), (1, 1), (2, 0)),
)


def empty_grid() -> Grid:
    return tuple(tuple(EMPTY for _ in range(SIZE)) for _ in range(SIZE))


def is_in_bounds(row: int, col: int) -> bool:
    return 0 <= row < SIZE and 0 <= col < SIZE


def is_legal_move(grid: Grid, row: int, col: int) -> bool:
    """True when (row, col) is on the board and still empty."""
    if not is_in_bounds(row, col):
        return False
    return grid[row][col] == EMPTY


def apply_mark(grid: Grid, row: int, col: int, mark: int) -> Grid:
    """Return a new grid with (row, col) set to mark.

    Legality is the caller's responsibility.
    """
    return tuple(
        tuple(mark if (r, c) == (row, col) else value for c, value in enumerate(cells))
        for r, cells in enumerate(grid)
    )


def winning_line(grid: Grid, mark: int) -> Optional[Tuple[Cell, Cell, Cell]]:
    """First completed line for mark in LINES order, or None."""
    for line in LINES:
        if all(grid[r][c] == mark for r, c in line):
            return line
    return None


def has_winning_line(grid: Grid, mark: int) -> bool:
    return winning_line(grid, mark) is not None


def is_board_full(grid: Grid) -> bool:
    return all(value != EMPTY for cells in grid for value in cells)


def count_marks(grid: Grid) -> int:
    return sum(1 for cells in grid for value in cells if value != EMPTY)


def grid_from_rows(rows: Iterable[Sequence[int]]) -> Grid:
    """Build a grid from nested sequences, checking shape and marks."""
    grid = tuple(tuple(int(v) for v in cells) for cells in rows)
    if len(grid) != SIZE or any(len(cells) != SIZE for cells in grid):
        raise ValueError(f'grid must be {SIZE}x{SIZE}')
    if any(v not in (EMPTY, FIRST_MARK, SECOND_MARK) for cells in grid for v in cells):
        raise ValueError('grid cells must be 0, 1 or 2')
    return grid


def grid_to_rows(grid: Grid) -> list:
    return [list(cells) for cells in grid]


def dumps(grid: Grid) -> str:
    return json.dumps(grid_to_rows(grid))


def loads(text: Optional[str]) -> Grid:
    if not text:
        return empty_grid()
    return grid_from_rows(json.loads(text))
