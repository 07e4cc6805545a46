from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from testris.game.grid import Board
from testris.game.pieces import Tetromino

from .heuristic import evaluate_position


Evaluator = Callable[[Board, Tetromino], float]


@dataclass(frozen=True)
class MoveCandidate:
    rotation: int  # rotation index the piece must reach
    column: int  # anchor column
    score: float
    landing_row: int  # anchor row after the drop


class MoveFinder:
    """Exhaustive rotation x column search over hard-drop placements.

    Every placement is simulated on copies of the piece; neither the board nor
    the piece passed in is modified.
    """

    def __init__(self, evaluate: Evaluator = evaluate_position) -> None:
        self.evaluate = evaluate

    def candidates(self, board: Board, piece: Tetromino) -> List[MoveCandidate]:
        found: List[MoveCandidate] = []
        rotated = piece.copy()
        for turn in range(4):
            if turn > 0 and not rotated.rotate(board):
                break
            for column in range(board.width):
                trial = rotated.copy()
                trial.x = column
                trial.y = piece.y
                if trial.has_collision(board):
                    continue
                trial.hard_drop(board)
                found.append(
                    MoveCandidate(
                        rotation=trial.rotation,
                        column=column,
                        score=self.evaluate(board, trial),
                        landing_row=trial.y,
                    )
                )
        return found

    def find_best_move(self, board: Board, piece: Tetromino) -> Optional[MoveCandidate]:
        best: Optional[MoveCandidate] = None
        for candidate in self.candidates(board, piece):
            # Strict comparison keeps the first-found candidate on ties
            if best is None or candidate.score > best.score:
                best = candidate
        return best
