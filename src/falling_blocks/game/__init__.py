"""Game module for Falling Blocks.

Exports the engine and supporting classes:
- GameGrid: Grid representation, collision and row clearing
- ActivePiece: Falling piece with rotation
- TetrominoType: Enum of available piece types
- ScoringRules: Line-clear table and speed-up threshold
- GameEngine: Drop loop and state management
"""

from .grid import GameGrid, empty_grid
from .pieces import ActivePiece, TetrominoType, BASE_SHAPES, rotate_shape
from .randomizer import PieceRandomizer, SequenceRandomizer, UniformRandomizer
from .rules import ScoringRules
from .core import Action, GameConfig, GameEngine, GameState

__all__ = [
    "GameGrid",
    "empty_grid",
    "ActivePiece",
    "TetrominoType",
    "BASE_SHAPES",
    "rotate_shape",
    "PieceRandomizer",
    "SequenceRandomizer",
    "UniformRandomizer",
    "ScoringRules",
    "Action",
    "GameConfig",
    "GameEngine",
    "GameState",
]
