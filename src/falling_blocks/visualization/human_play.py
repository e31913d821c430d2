from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import pygame

from falling_blocks.game import GameConfig, GameEngine, GameState
from .controls import InputController
from .renderer import Renderer


def wait_for_restart(screen: pygame.Surface, renderer: Renderer, state: GameState, clock: pygame.time.Clock) -> bool:
    """Block on the game-over screen. True means restart, False means quit."""
    renderer.draw(screen, state)
    renderer.draw_game_over(screen, state)
    pygame.display.flip()
    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    return False
                if event.key == pygame.K_r:
                    return True
        clock.tick(30)


def run(seed: Optional[int] = None, cell_size: int = 30, fps: int = 60) -> int:
    """Play until the window is closed; returns the last game's score."""
    pygame.init()
    try:
        clock = pygame.time.Clock()
        engine = GameEngine(GameConfig(random_seed=seed))
        controller = InputController(engine)
        font = pygame.font.SysFont(None, 24)
        renderer = Renderer(cell_size=cell_size, font=font)

        screen = pygame.display.set_mode(renderer.window_size(engine.config.rows, engine.config.cols))
        pygame.display.set_caption("Falling Blocks")

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        controller.handle_key(event.key)

            state = engine.tick(pygame.time.get_ticks())
            if state.game_over:
                if not wait_for_restart(screen, renderer, state, clock):
                    break
                engine.reset()
                continue

            renderer.draw(screen, state)
            pygame.display.flip()
            clock.tick(fps)
        return engine.score
    finally:
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Falling Blocks with the arrow keys.")
    p.add_argument("--seed", type=int, default=None, help="Seed for the piece sequence")
    p.add_argument("--cell-size", type=int, default=30)
    p.add_argument("--fps", type=int, default=60)
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    score = run(seed=args.seed, cell_size=args.cell_size, fps=args.fps)
    print(f"Final score: {score}")


if __name__ == "__main__":  # pragma: no cover
    main()
