"""Falling Blocks: a falling-block puzzle game engine with a pygame front end."""

from falling_blocks.game import GameConfig, GameEngine, GameState

__version__ = "0.1.0"

__all__ = ["GameConfig", "GameEngine", "GameState", "__version__"]
