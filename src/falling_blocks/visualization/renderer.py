from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pygame

from falling_blocks.game import GameState


BACKGROUND = (0, 0, 0)

# Color index -> RGB; index 0 is the empty background
PALETTE = {
    1: (255, 13, 114),
    2: (13, 194, 255),
    3: (13, 255, 114),
    4: (245, 56, 255),
    5: (255, 142, 13),
    6: (255, 225, 56),
    7: (56, 119, 255),
}


def color_for_value(v: int) -> Tuple[int, int, int]:
    # Falling-piece overlays are stored as negative indices
    return PALETTE.get(abs(int(v)), BACKGROUND)


def compose(state: GameState) -> np.ndarray:
    """Grid with the active piece stamped in, as positive color indices."""
    board = state.grid.copy()
    if not state.game_over:
        for x, y in state.piece.cells():
            board[y, x] = state.piece.color_index
    return board


def rgb_array(board: np.ndarray, cell_size: int = 12) -> np.ndarray:
    h, w = board.shape
    img = np.zeros((h * cell_size, w * cell_size, 3), dtype=np.uint8)
    img[:, :] = BACKGROUND
    for y in range(h):
        for x in range(w):
            if board[y, x]:
                img[y * cell_size : (y + 1) * cell_size, x * cell_size : (x + 1) * cell_size, :] = color_for_value(board[y, x])
    return img


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, font: Optional[pygame.font.Font] = None) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.font = font

    def window_size(self, rows: int, cols: int) -> Tuple[int, int]:
        return cols * self.cell_size + self.margin * 2, rows * self.cell_size + self.margin * 2

    def draw(self, screen: pygame.Surface, state: GameState) -> None:
        # Full repaint every frame
        screen.fill(BACKGROUND)
        board = compose(state)
        h, w = board.shape
        frame = pygame.Rect(self.margin - 1, self.margin - 1, w * self.cell_size + 2, h * self.cell_size + 2)
        pygame.draw.rect(screen, (60, 60, 70), frame, 1)
        for y in range(h):
            for x in range(w):
                v = int(board[y, x])
                if v == 0:
                    continue
                rect = pygame.Rect(
                    self.margin + x * self.cell_size,
                    self.margin + y * self.cell_size,
                    self.cell_size,
                    self.cell_size,
                )
                pygame.draw.rect(screen, color_for_value(v), rect)
        if self.font is not None:
            label = self.font.render(f"Score: {state.score}", True, (230, 230, 230))
            screen.blit(label, (self.margin, 2))

    def draw_game_over(self, screen: pygame.Surface, state: GameState) -> None:
        if self.font is None:
            return
        lines = [f"Game over! Score: {state.score}", "R to restart, ESC to quit"]
        cy = screen.get_height() // 2 - 12 * len(lines)
        for i, line in enumerate(lines):
            text = self.font.render(line, True, (255, 255, 255))
            rect = text.get_rect(center=(screen.get_width() // 2, cy + i * 28))
            screen.fill((20, 20, 26), rect.inflate(12, 6))
            screen.blit(text, rect)
