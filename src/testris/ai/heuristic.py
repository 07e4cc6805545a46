from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np

from testris.game.grid import Board
from testris.game.pieces import Tetromino


@dataclass
class HeuristicWeights:
    height: float = 1.5
    smoothness: float = 2.5
    holes: float = -7.5
    lines: float = 20.0
    max_height: float = 0.8
    center_columns: float = 2.0


DEFAULT_WEIGHTS = HeuristicWeights()


def edge_columns(width: int) -> List[int]:
    return sorted({0, 1, width - 2, width - 1})


def center_columns(width: int) -> List[int]:
    return list(range(width // 2 - 2, width // 2 + 2))


@dataclass
class BoardFeatures:
    heights: np.ndarray
    holes: int
    complete_lines: int
    bumpiness: int
    max_height: int
    edge_height: float
    center_height: float

    @classmethod
    def from_board(cls, board: Board) -> "BoardFeatures":
        heights = board.column_heights()
        return cls(
            heights=heights,
            holes=board.count_holes(),
            complete_lines=board.complete_lines(),
            bumpiness=int(np.sum(np.abs(np.diff(heights)))),
            max_height=int(heights.max()),
            edge_height=float(np.mean(heights[edge_columns(board.width)])),
            center_height=float(np.mean(heights[center_columns(board.width)])),
        )


def evaluate_position(board: Board, piece: Tetromino, weights: HeuristicWeights = DEFAULT_WEIGHTS) -> float:
    """Score a landed piece against a scratch copy of ``board``.

    Higher is better. Lines are counted before any clearing so that a
    completing placement is rewarded.
    """
    scratch = board.copy()
    cells = piece.absolute_coordinates()
    scratch.place_cells(cells, piece.kind)
    features = BoardFeatures.from_board(scratch)

    rows = [y for _, y in cells]
    landing_row = min(rows)
    row_span = max(rows) - landing_row + 1

    height_score = (board.height - (landing_row + row_span)) * weights.height
    smoothness_score = -features.bumpiness
    max_height_score = -(features.max_height ** 2) * weights.max_height
    center_score = features.edge_height - features.center_height

    return (
        height_score
        + smoothness_score * weights.smoothness
        + features.holes * weights.holes
        + features.complete_lines * weights.lines
        + max_height_score
        + center_score * weights.center_columns
    )
