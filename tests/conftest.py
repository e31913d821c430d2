import os

# Headless pygame for renderer and controls tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from falling_blocks.game import GameConfig, GameEngine, SequenceRandomizer, TetrominoType


def template_index(kind: TetrominoType) -> int:
    return int(kind) - 1


@pytest.fixture
def o_engine() -> GameEngine:
    """Engine that only ever spawns O pieces."""
    return GameEngine(GameConfig(), randomizer=SequenceRandomizer([template_index(TetrominoType.O)]))


@pytest.fixture
def i_engine() -> GameEngine:
    return GameEngine(GameConfig(), randomizer=SequenceRandomizer([template_index(TetrominoType.I)]))
