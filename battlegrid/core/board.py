"""Board grid representation and copy-on-write helpers."""

from __future__ import annotations

import numpy as np

from battlegrid.core.models import BOARD_SIZE, EMPTY_CELL, CellState, Grid, Position


def create_empty_board(size: int = BOARD_SIZE) -> Grid:
    """Create a size x size grid where no cell has been attacked."""
    return tuple(tuple(EMPTY_CELL for _ in range(size)) for _ in range(size))


def in_bounds(row: int, col: int, size: int = BOARD_SIZE) -> bool:
    """Return whether the coordinate is in board bounds."""
    return 0 <= row < size and 0 <= col < size


def with_cell(grid: Grid, row: int, col: int, cell: CellState) -> Grid:
    """Return a new grid with one cell replaced; untouched rows are shared."""
    updated_row = grid[row][:col] + (cell,) + grid[row][col + 1 :]
    return grid[:row] + (updated_row,) + grid[row + 1 :]


def attacked_mask(grid: Grid) -> np.ndarray:
    """Boolean matrix of attacked cells."""
    return np.array([[cell.is_attacked for cell in row] for row in grid], dtype=bool)


def unattacked_positions(grid: Grid, *, parity: int | None = None) -> list[Position]:
    """List cells not attacked yet in row-major order.

    With `parity` set, only cells where (row + col) % 2 == parity are kept.
    """
    free = ~attacked_mask(grid)
    if parity is not None:
        rows, cols = np.indices(free.shape)
        free &= (rows + cols) % 2 == parity
    return [Position(int(row), int(col)) for row, col in np.argwhere(free)]
