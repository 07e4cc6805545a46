from __future__ import annotations

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from testris.ai.move_finder import MoveFinder
from testris.game import Action


class PlacementActionWrapper(gym.Wrapper):
    """Replaces primitive moves with whole placements: Discrete(4 * width).

    Action ``a`` means rotation ``a // width`` (clockwise turns from the spawn
    orientation) at anchor column ``a % width``, followed by a hard drop.
    ``action_masks()`` marks the placements reachable by straight rotation
    and drop.
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        self.width = int(env.unwrapped.game.board.width)
        self.n = 4 * self.width
        self.action_space = spaces.Discrete(self.n)
        self.finder = MoveFinder(evaluate=lambda board, piece: 0.0)

    def _unflatten(self, idx: int) -> tuple[int, int]:
        return idx // self.width, idx % self.width

    def action_masks(self) -> np.ndarray:
        game = self.env.unwrapped.game
        mask = np.zeros((self.n,), dtype=np.bool_)
        piece = game.current_piece
        if piece is None or game.is_game_over:
            return mask
        for candidate in self.finder.candidates(game.board, piece):
            turns = (candidate.rotation - piece.rotation) % 4
            mask[turns * self.width + candidate.column] = True
        return mask

    def step(self, action):  # type: ignore[override]
        game = self.env.unwrapped.game
        turns, column = self._unflatten(int(action))
        score_before = game.score
        for _ in range(turns):
            if not game.rotate():
                break
        while game.current_piece is not None and game.current_piece.x != column:
            moved = game.move_right() if game.current_piece.x < column else game.move_left()
            if not moved:
                break
        # The hard drop is the primitive step so the inner env reports the outcome
        obs, _, terminated, truncated, info = self.env.step(int(Action.HARD_DROP))
        reward = float(game.score - score_before)
        return obs, reward, terminated, truncated, info
