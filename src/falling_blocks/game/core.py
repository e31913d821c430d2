from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple

import numpy as np

from .grid import GameGrid
from .pieces import BASE_SHAPES, TEMPLATE_ORDER, ActivePiece
from .randomizer import PieceRandomizer, UniformRandomizer
from .rules import ScoringRules


logger = logging.getLogger(__name__)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    DROP = 3
    NONE = 4


@dataclass
class GameConfig:
    rows: int = 20
    cols: int = 10
    random_seed: Optional[int] = None
    initial_drop_interval_ms: int = 1000
    min_drop_interval_ms: int = 100
    drop_interval_step_ms: int = 100

    def __post_init__(self) -> None:
        widest = max(shape.shape[1] for shape in BASE_SHAPES.values())
        tallest = max(shape.shape[0] for shape in BASE_SHAPES.values())
        if self.cols < widest or self.rows < tallest:
            raise ValueError(f"a {self.rows}x{self.cols} grid cannot hold every piece")
        if self.min_drop_interval_ms <= 0:
            raise ValueError("min_drop_interval_ms must be positive")
        if self.initial_drop_interval_ms < self.min_drop_interval_ms:
            raise ValueError("initial_drop_interval_ms is below min_drop_interval_ms")
        if self.drop_interval_step_ms < 0:
            raise ValueError("drop_interval_step_ms must not be negative")


@dataclass(frozen=True, eq=False)
class GameState:
    """Read-only snapshot handed to renderers and frame-loop drivers."""

    grid: np.ndarray
    piece: ActivePiece
    score: int
    drop_interval_ms: int
    game_over: bool
    lines_cleared_total: int = 0
    pieces_locked: int = 0


class GameEngine:
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        randomizer: Optional[PieceRandomizer] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.randomizer = randomizer or UniformRandomizer(self.config.random_seed)
        self.grid = GameGrid(self.config.rows, self.config.cols)
        self.score = 0
        self.drop_interval_ms = self.config.initial_drop_interval_ms
        self.game_over = False
        self.lines_cleared_total = 0
        self.pieces_locked = 0
        self.drop_counter_ms = 0
        self.last_time_ms: Optional[float] = None
        self.reset()

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.randomizer = UniformRandomizer(seed)
        self.grid.reset()
        self.score = 0
        self.drop_interval_ms = self.config.initial_drop_interval_ms
        self.game_over = False
        self.lines_cleared_total = 0
        self.pieces_locked = 0
        self.drop_counter_ms = 0
        self.last_time_ms = None
        self.piece = self.spawn_piece()
        self.update_score(0)

    def spawn_piece(self) -> ActivePiece:
        index = self.randomizer.next_index(len(TEMPLATE_ORDER))
        return ActivePiece.from_template(index, self.config.cols)

    def move(self, direction: int) -> bool:
        if direction not in (-1, 1):
            raise ValueError(f"direction must be -1 or +1, got {direction!r}")
        if self.game_over:
            return False
        candidate = self.piece.moved(dx=direction)
        if self.grid.collides(candidate):
            return False
        self.piece = candidate
        return True

    def rotate(self) -> bool:
        if self.game_over:
            return False
        candidate = self.piece.rotated()
        if self.grid.collides(candidate):
            return False
        self.piece = candidate
        return True

    def drop(self) -> int:
        """Let the piece fall one row, locking it if it cannot.

        Returns the number of rows cleared by a lock, 0 otherwise.
        """
        if self.game_over:
            return 0
        rows_cleared = 0
        candidate = self.piece.moved(dy=1)
        if self.grid.collides(candidate):
            rows_cleared = self._lock_piece()
        else:
            self.piece = candidate
        self.drop_counter_ms = 0
        return rows_cleared

    def _lock_piece(self) -> int:
        self.grid.merge(self.piece)
        self.pieces_locked += 1
        logger.debug("locked %s at x=%d y=%d", self.piece.kind.name, self.piece.x, self.piece.y)
        rows_cleared = self.grid.clear_full_rows()
        self.lines_cleared_total += rows_cleared
        self.update_score(rows_cleared)
        self.piece = self.spawn_piece()
        if self.grid.collides(self.piece):
            self.game_over = True
            logger.info("game over with score %d after %d pieces", self.score, self.pieces_locked)
        return rows_cleared

    def update_score(self, rows_cleared: int = 0) -> int:
        points = self.rules.score_for_lines(rows_cleared)
        self.score += points
        if self.rules.should_speed_up(self.score):
            interval = max(
                self.config.min_drop_interval_ms,
                self.drop_interval_ms - self.config.drop_interval_step_ms,
            )
            if interval != self.drop_interval_ms:
                logger.debug("score %d: drop interval %d -> %d ms", self.score, self.drop_interval_ms, interval)
            self.drop_interval_ms = interval
        return points

    def tick(self, timestamp_ms: float) -> GameState:
        """Advance the gravity timer to ``timestamp_ms``.

        The first tick after a reset only sets the time base. The caller keeps
        scheduling ticks until the returned state reports game over.
        """
        if self.game_over:
            return self.state
        if self.last_time_ms is None:
            delta = 0.0
        else:
            delta = timestamp_ms - self.last_time_ms
        self.last_time_ms = timestamp_ms
        self.drop_counter_ms += delta
        if self.drop_counter_ms > self.drop_interval_ms:
            self.drop()
        return self.state

    def step(self, action: Action) -> Tuple[np.ndarray, int, bool, dict]:
        if self.game_over:
            return self.get_observation(), 0, True, self._info()

        score_before = self.score
        if action == Action.LEFT:
            self.move(-1)
        elif action == Action.RIGHT:
            self.move(1)
        elif action == Action.ROTATE:
            self.rotate()
        elif action == Action.DROP:
            self.drop()
        elif action == Action.NONE:
            pass

        return self.get_observation(), self.score - score_before, self.game_over, self._info()

    def _info(self) -> dict:
        return {
            "score": self.score,
            "lines_cleared_total": self.lines_cleared_total,
            "pieces_locked": self.pieces_locked,
            "drop_interval_ms": self.drop_interval_ms,
        }

    @property
    def state(self) -> GameState:
        return GameState(
            grid=self.grid.clone_state(),
            piece=self.piece,
            score=self.score,
            drop_interval_ms=self.drop_interval_ms,
            game_over=self.game_over,
            lines_cleared_total=self.lines_cleared_total,
            pieces_locked=self.pieces_locked,
        )

    def get_observation(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        obs = self.grid.clone_state()
        if not self.game_over:
            for x, y in self.piece.cells():
                # Negative values mark the falling piece
                obs[y, x] = -self.piece.color_index
        return obs
