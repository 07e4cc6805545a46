from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from .move_finder import MoveCandidate, MoveFinder

if TYPE_CHECKING:
    from testris.game.core import TetrisGame

logger = logging.getLogger(__name__)


class Autopilot:
    """Plays the current piece one command per step.

    A target placement is chosen once per piece. Each step then issues a single
    command through the same API a player uses: rotate until the target
    rotation, shift one column toward the target column, soft drop a few rows,
    and finally hard drop. The pacing is for watching, not for correctness.
    """

    def __init__(self, game: "TetrisGame", finder: Optional[MoveFinder] = None) -> None:
        self.game = game
        self.finder = finder or MoveFinder()
        self.target: Optional[MoveCandidate] = None
        self._planned_for = -1
        self._start_row = 0
        self._soft_drops = 0
        self._blocked = False

    def reset(self) -> None:
        self.target = None
        self._planned_for = -1
        self._soft_drops = 0
        self._blocked = False

    def _plan(self) -> None:
        piece = self.game.current_piece
        self.target = self.finder.find_best_move(self.game.board, piece)
        self._planned_for = self.game.pieces_spawned
        self._start_row = piece.y
        self._soft_drops = 0
        self._blocked = self.target is None
        if self.target is not None:
            logger.debug(
                "Target for %s: rotation=%d column=%d score=%.2f",
                piece.kind.name, self.target.rotation, self.target.column, self.target.score,
            )

    def step(self) -> bool:
        game = self.game
        piece = game.current_piece
        if piece is None:
            return False
        if self._planned_for != game.pieces_spawned:
            self._plan()

        if not self._blocked:
            target = self.target
            if piece.rotation != target.rotation:
                self._blocked = not game.rotate()
                return True
            if piece.x < target.column:
                self._blocked = not game.move_right()
                return True
            if piece.x > target.column:
                self._blocked = not game.move_left()
                return True

        fallen = piece.y - self._start_row
        if self._soft_drops < game.config.autoplay_soft_drops and fallen < game.config.autoplay_min_fall:
            self._soft_drops += 1
            game.move_down()
            return True
        game.hard_drop()
        return True
