from __future__ import annotations

from typing import Dict, Optional

import pygame

from falling_blocks.game import Action, GameEngine


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_DOWN: Action.DROP,
    pygame.K_UP: Action.ROTATE,
}


class InputController:
    """Applies arrow-key presses to an engine the moment they arrive."""

    def __init__(self, engine: GameEngine) -> None:
        self.engine = engine

    def handle_key(self, key: int) -> Optional[Action]:
        if self.engine.game_over:
            return None
        action = KEY_TO_ACTION.get(key)
        if action is not None:
            self.engine.step(action)
        return action
