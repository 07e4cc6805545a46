"""Gymnasium environments for Testris."""

from __future__ import annotations

from gymnasium.envs.registration import register

# One engine command per step on the standard 10x20 board
register(
    id="Testris-10x20-v0",
    entry_point="testris.env.tetris_env:TetrisEnv",
)

__all__ = ["Testris-10x20-v0"]
