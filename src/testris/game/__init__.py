"""Game module for Testris.

Exports the core game engine and supporting classes:
- Board: Grid representation, collision and line clearing
- Tetromino: Falling piece with rotation mechanics
- PieceKind: Enum of available piece types
- ScoringRules: Scoring table, levels and gravity speed
- TetrisGame: Piece lifecycle and state management
- GameLoop: Host-side gravity and autoplay timers
"""

from .grid import Board
from .pieces import PieceKind, Tetromino
from .rules import ScoringRules
from .core import Action, GameConfig, GameEvent, GameStatus, TetrisGame
from .scheduler import GameLoop, IntervalTask

__all__ = [
    "Board",
    "Tetromino",
    "PieceKind",
    "ScoringRules",
    "TetrisGame",
    "GameConfig",
    "GameEvent",
    "GameStatus",
    "Action",
    "GameLoop",
    "IntervalTask",
]
