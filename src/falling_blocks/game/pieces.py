from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import List, Tuple

import numpy as np


class TetrominoType(IntEnum):
    """Piece kinds; the value doubles as the color index stored in the grid."""

    I = 1
    O = 2
    T = 3
    Z = 4
    S = 5
    J = 6
    L = 7


Shape = np.ndarray


def _template(rows: List[List[int]]) -> Shape:
    shape = np.array(rows, dtype=np.int8)
    shape.setflags(write=False)
    return shape


BASE_SHAPES = {
    TetrominoType.I: _template([[1, 1, 1, 1]]),
    TetrominoType.O: _template([[1, 1], [1, 1]]),
    TetrominoType.T: _template([[0, 1, 0], [1, 1, 1]]),
    TetrominoType.Z: _template([[1, 1, 0], [0, 1, 1]]),
    TetrominoType.S: _template([[0, 1, 1], [1, 1, 0]]),
    TetrominoType.J: _template([[1, 0, 0], [1, 1, 1]]),
    TetrominoType.L: _template([[0, 0, 1], [1, 1, 1]]),
}

# Spawn order used by the randomizer: index i produces color index i + 1.
TEMPLATE_ORDER: Tuple[TetrominoType, ...] = tuple(TetrominoType)


def rotate_shape(shape: Shape) -> Shape:
    """Rotate 90 degrees clockwise: transpose, then reverse each row."""
    rotated = shape.T[:, ::-1].copy()
    rotated.setflags(write=False)
    return rotated


@dataclass(frozen=True, eq=False)
class ActivePiece:
    shape: Shape
    x: int
    y: int
    color_index: int

    @classmethod
    def from_template(cls, index: int, cols: int) -> "ActivePiece":
        kind = TEMPLATE_ORDER[index]
        shape = BASE_SHAPES[kind]
        width = shape.shape[1]
        # cols // 2 - ceil(width / 2)
        x = cols // 2 - (-(-width // 2))
        return cls(shape=shape, x=x, y=0, color_index=index + 1)

    @property
    def kind(self) -> TetrominoType:
        return TetrominoType(self.color_index)

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    def moved(self, dx: int = 0, dy: int = 0) -> "ActivePiece":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def rotated(self) -> "ActivePiece":
        return replace(self, shape=rotate_shape(self.shape))

    def cells(self) -> List[Tuple[int, int]]:
        """Grid coordinates (x, y) of every occupied cell."""
        cells: List[Tuple[int, int]] = []
        for dy, dx in zip(*np.nonzero(self.shape)):
            cells.append((self.x + int(dx), self.y + int(dy)))
        return cells
