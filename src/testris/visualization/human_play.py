from __future__ import annotations

import argparse
import logging
from typing import Callable, Dict

import pygame

from testris.game import GameConfig, GameLoop, PieceKind, TetrisGame
from .renderer import Renderer


def _key_commands(game: TetrisGame) -> Dict[int, Callable[[], object]]:
    return {
        pygame.K_LEFT: game.move_left,
        pygame.K_RIGHT: game.move_right,
        pygame.K_UP: game.rotate,
        pygame.K_z: lambda: game.rotate(clockwise=False),
        pygame.K_DOWN: game.move_down,
        pygame.K_SPACE: game.hard_drop,
        pygame.K_p: game.toggle_pause,
        pygame.K_r: game.start,
        pygame.K_a: lambda: game.set_autoplay(not game.autoplay),
        pygame.K_0: lambda: game.force_next_kind(None),
    }


# Number keys 1-7 force the next piece kind
KIND_KEYS: Dict[int, PieceKind] = {pygame.K_1 + i: kind for i, kind in enumerate(PieceKind)}


def run(config: GameConfig) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = TetrisGame(config)
        renderer = Renderer()
        screen = pygame.display.set_mode(renderer.window_size(game.board.width, game.board.height))
        pygame.display.set_caption("Testris")

        loop = GameLoop(game, now_ms=pygame.time.get_ticks())
        game.start()
        commands = _key_commands(game)

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key in KIND_KEYS:
                        game.force_next_kind(KIND_KEYS[event.key])
                    elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_MINUS):
                        faster = event.key != pygame.K_MINUS
                        interval = game.autoplay_interval_ms + (-25 if faster else 25)
                        game.set_autoplay_speed(max(25, interval))
                    else:
                        command = commands.get(event.key)
                        if command is not None:
                            command()

            loop.advance(pygame.time.get_ticks())
            renderer.draw(screen, game.snapshot())
            clock.tick(60)
        loop.close()
    finally:
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Testris")
    p.add_argument("--width", type=int, default=10)
    p.add_argument("--height", type=int, default=20)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--autoplay", action="store_true", help="Start in demo mode")
    p.add_argument("--autoplay-ms", type=int, default=100, help="Milliseconds between autopilot moves")
    p.add_argument("--verbose", action="store_true")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    config = GameConfig(
        width=args.width,
        height=args.height,
        random_seed=args.seed,
        autoplay=args.autoplay,
        autoplay_interval_ms=args.autoplay_ms,
    )
    run(config)


if __name__ == "__main__":  # pragma: no cover
    main()
