from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Union

import numpy as np

from .grid import Board
from .pieces import PieceKind, Tetromino
from .rules import ScoringRules

if TYPE_CHECKING:
    from testris.ai.autopilot import Autopilot

logger = logging.getLogger(__name__)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    NONE = 6


class GameStatus(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class GameEvent(Enum):
    STARTED = "started"
    PIECE_SPAWNED = "piece_spawned"
    PIECE_SETTLED = "piece_settled"
    LINES_CLEARED = "lines_cleared"
    LEVEL_UP = "level_up"
    PAUSED = "paused"
    RESUMED = "resumed"
    GAME_OVER = "game_over"
    STOPPED = "stopped"
    AUTOPLAY_CHANGED = "autoplay_changed"


Listener = Callable[[GameEvent, "TetrisGame"], None]


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    autoplay: bool = False
    autoplay_interval_ms: int = 100
    # Pacing of the autopilot once the piece is lined up
    autoplay_soft_drops: int = 3
    autoplay_min_fall: int = 2

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Board dimensions must be positive, got {self.width}x{self.height}")
        if self.autoplay_interval_ms <= 0:
            raise ValueError(f"autoplay_interval_ms must be positive, got {self.autoplay_interval_ms}")
        if self.autoplay_soft_drops < 0 or self.autoplay_min_fall < 0:
            raise ValueError("Autoplay drop settings must not be negative")


class TetrisGame:
    """Falling-block game engine.

    The engine is synchronous and timer-agnostic: gravity arrives as ``tick()``
    and autoplay as ``autoplay_step()``, both called by whatever host owns the
    clock. State changes are announced to listeners as ``GameEvent`` values.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = random.Random(self.config.random_seed)
        self.board = Board(self.config.width, self.config.height)
        self.status = GameStatus.NOT_STARTED
        self.score = 0
        self.lines = 0
        self.level = 1
        self.gravity_interval_ms = self.rules.gravity_interval_ms(self.level)
        self.current_piece: Optional[Tetromino] = None
        self.next_piece: Optional[Tetromino] = None
        self.pieces_spawned = 0
        self.piece_counts: Dict[PieceKind, int] = {kind: 0 for kind in PieceKind}
        self.autoplay = self.config.autoplay
        self.autoplay_interval_ms = self.config.autoplay_interval_ms
        self.forced_kind: Optional[PieceKind] = None
        self._listeners: List[Listener] = []
        self._autopilot: Optional["Autopilot"] = None

    # -- events -----------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: GameEvent) -> None:
        for listener in list(self._listeners):
            listener(event, self)

    # -- state queries ----------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self.status is GameStatus.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.status is GameStatus.PAUSED

    @property
    def is_game_over(self) -> bool:
        return self.status is GameStatus.GAME_OVER

    def _accepting_moves(self) -> bool:
        return self.status is GameStatus.RUNNING and self.current_piece is not None

    # -- lifecycle --------------------------------------------------------

    def start(self) -> None:
        self.reset()

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self._clear_state()
        self.status = GameStatus.RUNNING
        if self.spawn():
            logger.debug("Game started on a %dx%d board", self.board.width, self.board.height)
            self._emit(GameEvent.STARTED)

    def stop(self) -> None:
        """Abandon the current game and return to NOT_STARTED with an empty board."""
        self._clear_state()
        self.status = GameStatus.NOT_STARTED
        self._emit(GameEvent.STOPPED)

    def _clear_state(self) -> None:
        self.board.reset()
        self.score = 0
        self.lines = 0
        self.level = 1
        self.gravity_interval_ms = self.rules.gravity_interval_ms(self.level)
        self.current_piece = None
        self.next_piece = None
        self.pieces_spawned = 0
        self.piece_counts = {kind: 0 for kind in PieceKind}
        if self._autopilot is not None:
            self._autopilot.reset()

    def _new_piece(self) -> Tetromino:
        return Tetromino.create(self.forced_kind, board_width=self.board.width, rng=self.rng)

    def spawn(self) -> bool:
        """Promote the next piece, draw a new one and check for a blocked spawn."""
        if self.status is not GameStatus.RUNNING:
            return False
        if self.next_piece is None:
            self.next_piece = self._new_piece()
        self.current_piece = self.next_piece
        self.next_piece = self._new_piece()
        self.pieces_spawned += 1
        self.piece_counts[self.current_piece.kind] += 1

        if self.current_piece.has_collision(self.board) or self.board.is_game_over():
            self._game_over()
            return False
        logger.debug("Spawned %s, next %s", self.current_piece.kind.name, self.next_piece.kind.name)
        self._emit(GameEvent.PIECE_SPAWNED)
        return True

    def _game_over(self) -> None:
        self.status = GameStatus.GAME_OVER
        logger.info("Game over: score=%d lines=%d level=%d", self.score, self.lines, self.level)
        self._emit(GameEvent.GAME_OVER)

    def pause(self) -> bool:
        if self.status is not GameStatus.RUNNING:
            return False
        self.status = GameStatus.PAUSED
        self._emit(GameEvent.PAUSED)
        return True

    def resume(self) -> bool:
        if self.status is not GameStatus.PAUSED:
            return False
        self.status = GameStatus.RUNNING
        self._emit(GameEvent.RESUMED)
        return True

    def toggle_pause(self) -> bool:
        if self.is_paused:
            return self.resume()
        return self.pause()

    # -- movement ---------------------------------------------------------

    def move_left(self) -> bool:
        if not self._accepting_moves():
            return False
        return self.current_piece.move_left(self.board)

    def move_right(self) -> bool:
        if not self._accepting_moves():
            return False
        return self.current_piece.move_right(self.board)

    def rotate(self, clockwise: bool = True) -> bool:
        if not self._accepting_moves():
            return False
        return self.current_piece.rotate(self.board, clockwise)

    def move_down(self) -> bool:
        """Manual soft drop: scores per cell, settles the piece when blocked."""
        if not self._accepting_moves():
            return False
        if self.current_piece.move_down(self.board):
            self.score += self.rules.soft_drop_points
            return True
        self.settle_piece()
        return False

    def hard_drop(self) -> int:
        if not self._accepting_moves():
            return 0
        cells = self.current_piece.hard_drop(self.board)
        self.score += cells * self.rules.hard_drop_points
        self.settle_piece()
        return cells

    def tick(self) -> bool:
        """Gravity step. Returns True when the piece moved down."""
        if not self._accepting_moves():
            return False
        if self.current_piece.move_down(self.board):
            return True
        self.settle_piece()
        return False

    update = tick

    def apply(self, action: Union[Action, int]) -> bool:
        action = Action(action)
        if action == Action.LEFT:
            return self.move_left()
        if action == Action.RIGHT:
            return self.move_right()
        if action == Action.ROTATE_CW:
            return self.rotate(True)
        if action == Action.ROTATE_CCW:
            return self.rotate(False)
        if action == Action.SOFT_DROP:
            return self.move_down()
        if action == Action.HARD_DROP:
            self.hard_drop()
            return True
        return False

    # -- settling & scoring -----------------------------------------------

    def settle_piece(self) -> int:
        if not self._accepting_moves():
            return 0
        lines = self.board.settle(self.current_piece)
        logger.debug("Settled %s at (%d, %d)", self.current_piece.kind.name, self.current_piece.x, self.current_piece.y)
        self._emit(GameEvent.PIECE_SETTLED)
        if lines:
            self._apply_line_clear(lines)
        self.spawn()
        return lines

    def _apply_line_clear(self, lines: int) -> None:
        self.score += self.rules.score_for_lines(lines, self.level)
        self.lines += lines
        self._emit(GameEvent.LINES_CLEARED)
        new_level = self.rules.level_for_lines(self.lines)
        if new_level > self.level:
            self.level = new_level
            self.gravity_interval_ms = self.rules.gravity_interval_ms(self.level)
            logger.debug("Level %d, gravity %d ms", self.level, self.gravity_interval_ms)
            self._emit(GameEvent.LEVEL_UP)

    # -- autoplay ---------------------------------------------------------

    def set_autoplay(self, enabled: bool) -> None:
        self.autoplay = bool(enabled)
        if self._autopilot is not None:
            self._autopilot.reset()
        self._emit(GameEvent.AUTOPLAY_CHANGED)

    def set_autoplay_speed(self, interval_ms: int) -> None:
        if interval_ms <= 0:
            raise ValueError(f"Autoplay interval must be positive, got {interval_ms}")
        self.autoplay_interval_ms = int(interval_ms)
        self._emit(GameEvent.AUTOPLAY_CHANGED)

    def force_next_kind(self, kind: Optional[Union[PieceKind, int, str]]) -> None:
        """Force every following piece to ``kind``; ``None`` restores random draws.

        The already drawn next piece is replaced so the override shows up on the
        very next spawn.
        """
        self.forced_kind = None if kind is None else PieceKind.parse(kind)
        if self.forced_kind is not None and self.next_piece is not None:
            self.next_piece = self._new_piece()

    def autoplay_step(self) -> bool:
        if not self.autoplay or not self._accepting_moves():
            return False
        if self._autopilot is None:
            from testris.ai.autopilot import Autopilot

            self._autopilot = Autopilot(self)
        return self._autopilot.step()

    # -- snapshots --------------------------------------------------------

    def ghost_piece(self) -> Optional[Tetromino]:
        if self.current_piece is None:
            return None
        return self.current_piece.ghost(self.board)

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.board.grid.copy()
        if self.current_piece is not None and not self.is_game_over:
            for x, y in self.current_piece.absolute_coordinates():
                if 0 <= y < self.board.height and 0 <= x < self.board.width:
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -int(self.current_piece.kind)
        return state

    def snapshot(self) -> Dict[str, Any]:
        current = self.current_piece
        ghost = self.ghost_piece()
        return {
            "board": self.board.rows(),
            "current_kind": current.kind if current else None,
            "current_cells": current.absolute_coordinates() if current else [],
            "ghost_cells": ghost.absolute_coordinates() if ghost else [],
            "next_kind": self.next_piece.kind if self.next_piece else None,
            "next_blocks": list(self.next_piece.blocks) if self.next_piece else [],
            "score": self.score,
            "lines": self.lines,
            "level": self.level,
            "paused": self.is_paused,
            "game_over": self.is_game_over,
            "piece_counts": dict(self.piece_counts),
        }
