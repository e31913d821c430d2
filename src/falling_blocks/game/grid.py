from __future__ import annotations

import logging

import numpy as np

from .pieces import ActivePiece


logger = logging.getLogger(__name__)


def empty_grid(rows: int, cols: int) -> np.ndarray:
    return np.zeros((rows, cols), dtype=np.int8)


class GameGrid:
    """Fixed-size playfield.

    The grid uses 0 for empty cells and the color index (1..7) of the piece
    that filled a cell otherwise. Row 0 is the top of the well.
    """

    def __init__(self, rows: int, cols: int) -> None:
        self.rows = int(rows)
        self.cols = int(cols)
        self.grid = empty_grid(self.rows, self.cols)

    def reset(self) -> None:
        self.grid = empty_grid(self.rows, self.cols)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.cols and 0 <= y < self.rows

    def collides(self, piece: ActivePiece) -> bool:
        for x, y in piece.cells():
            # Bounds first so walls and floor never index outside the array
            if not self.is_inside(x, y):
                return True
            if self.grid[y, x] != 0:
                return True
        return False

    def merge(self, piece: ActivePiece) -> None:
        """Stamp the piece's color index into the grid.

        Assumes the piece does not collide; overlapping cells are overwritten.
        """
        merged = self.grid.copy()
        for x, y in piece.cells():
            merged[y, x] = piece.color_index
        self.grid = merged

    def clear_full_rows(self) -> int:
        """Remove full rows bottom-up, dropping everything above, and count them."""
        grid = self.grid
        cleared = 0
        y = self.rows - 1
        while y >= 0:
            if np.all(grid[y] != 0):
                grid = np.vstack((np.zeros((1, self.cols), dtype=np.int8), np.delete(grid, y, axis=0)))
                cleared += 1
                # Same index again: it now holds the row that was above
                continue
            y -= 1
        if cleared:
            logger.debug("cleared %d row(s)", cleared)
        self.grid = grid
        return cleared

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != 0, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        return self.rows - int(non_empty_rows[0])

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
