from __future__ import annotations

import argparse
import logging
from typing import Dict, List

from testris.game import GameConfig, GameLoop, TetrisGame

logger = logging.getLogger(__name__)


def play_game(config: GameConfig, max_pieces: int = 500, step_ms: int = 10) -> Dict[str, int]:
    """Run one autoplay game on a simulated clock until game over or ``max_pieces``."""
    game = TetrisGame(config)
    game.set_autoplay(True)
    loop = GameLoop(game)
    game.start()
    now = 0
    try:
        while not game.is_game_over and game.pieces_spawned <= max_pieces:
            now += step_ms
            loop.advance(now)
    finally:
        loop.close()
    return {
        "score": game.score,
        "lines": game.lines,
        "level": game.level,
        "pieces": game.pieces_spawned,
        "game_over": int(game.is_game_over),
        "elapsed_ms": now,
    }


def run(games: int, seed: int, max_pieces: int, width: int, height: int) -> List[Dict[str, int]]:
    results: List[Dict[str, int]] = []
    for i in range(games):
        config = GameConfig(width=width, height=height, random_seed=seed + i, autoplay=True)
        result = play_game(config, max_pieces=max_pieces)
        logger.info(
            "Game %d/%d: score=%d lines=%d level=%d pieces=%d",
            i + 1, games, result["score"], result["lines"], result["level"], result["pieces"],
        )
        results.append(result)
    return results


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play headless autoplay games")
    p.add_argument("--games", type=int, default=5)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--max-pieces", type=int, default=500)
    p.add_argument("--width", type=int, default=10)
    p.add_argument("--height", type=int, default=20)
    p.add_argument("--verbose", action="store_true", help="Log engine and autopilot details")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    results = run(args.games, args.seed, args.max_pieces, args.width, args.height)
    if results:
        avg_score = sum(r["score"] for r in results) / len(results)
        avg_lines = sum(r["lines"] for r in results) / len(results)
        logger.info("Average over %d games: score=%.1f lines=%.1f", len(results), avg_score, avg_lines)


if __name__ == "__main__":  # pragma: no cover
    main()
