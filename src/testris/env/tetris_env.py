from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from testris.game import Action, GameConfig, PieceKind, TetrisGame


PALETTE = {
    0: (20, 20, 26),
    int(PieceKind.I): (0, 240, 240),
    int(PieceKind.J): (0, 0, 240),
    int(PieceKind.L): (240, 160, 0),
    int(PieceKind.O): (240, 240, 0),
    int(PieceKind.S): (0, 240, 0),
    int(PieceKind.T): (160, 0, 240),
    int(PieceKind.Z): (240, 0, 0),
}


class TetrisEnv(gym.Env):
    """One engine command per step; reward is the score gained by it.

    ``gravity_every`` applies a gravity tick after every N actions so agents
    cannot stall forever; 0 disables it.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        max_episode_steps: int = 10_000,
        gravity_every: int = 0,
    ) -> None:
        super().__init__()
        self.game = TetrisGame(config)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)
        self.gravity_every = int(gravity_every)

        h, w = self.game.board.height, self.game.board.width
        n_kinds = len(PieceKind)
        self.observation_space = spaces.Box(low=-n_kinds, high=n_kinds, shape=(h, w), dtype=np.int8)
        self.action_space = spaces.Discrete(len(Action))

        self._steps = 0

    def _get_obs(self) -> np.ndarray:
        return self.game.get_state().astype(np.int8)

    def _get_info(self) -> Dict[str, Any]:
        game = self.game
        return {
            "score": game.score,
            "lines": game.lines,
            "level": game.level,
            "pieces": game.pieces_spawned,
            "next_kind": int(game.next_piece.kind) if game.next_piece else 0,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action):
        score_before = self.game.score
        moved = self.game.apply(int(action))
        self._steps += 1
        if self.gravity_every > 0 and self._steps % self.gravity_every == 0:
            self.game.tick()

        reward = float(self.game.score - score_before)
        terminated = self.game.is_game_over
        truncated = self._steps >= self.max_episode_steps and not terminated
        info = self._get_info()
        info["moved"] = moved
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        state = self.game.get_state()
        cell = 12
        h, w = state.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                color = PALETTE.get(abs(int(state[y, x])), (200, 200, 200))
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass
