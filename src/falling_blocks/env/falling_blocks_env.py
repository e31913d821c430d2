from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import Action, GameConfig, GameEngine
from falling_blocks.visualization.renderer import rgb_array


class FallingBlocksEnv(gym.Env):
    """One engine call per step: left, right, rotate, drop or nothing.

    Gravity is not simulated; the agent drops pieces itself. The reward is
    the engine's score gain for the step.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 max_episode_steps: int = 10000,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.game = GameEngine(config)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)
        self.terminal_penalty = float(terminal_penalty)

        rows, cols = self.game.config.rows, self.game.config.cols
        # Locked cells are positive color indices, the falling piece negative
        self.observation_space = spaces.Box(low=-7, high=7, shape=(rows, cols), dtype=np.int8)
        self.action_space = spaces.Discrete(len(Action))

        self._steps = 0

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines_cleared_total": self.game.lines_cleared_total,
            "pieces_locked": self.game.pieces_locked,
            "max_height": self.game.grid.get_max_height(),
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        return self.game.get_observation(), self._get_info()

    def step(self, action: int):
        obs, gained, terminated, _ = self.game.step(Action(int(action)))
        self._steps += 1
        reward = float(gained)
        if terminated:
            reward += self.terminal_penalty
        truncated = not terminated and self._steps >= self.max_episode_steps
        return obs, reward, bool(terminated), truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            return rgb_array(np.abs(self.game.get_observation()))
        return None

    def close(self) -> None:
        pass
