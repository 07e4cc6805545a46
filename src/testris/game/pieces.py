from __future__ import annotations

import math
import numbers
import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple, Union

if TYPE_CHECKING:
    from .grid import Board


Offset = Tuple[float, float]
Coordinate = Tuple[int, int]


class PieceKind(IntEnum):
    I = 1
    J = 2
    L = 3
    O = 4
    S = 5
    T = 6
    Z = 7

    @classmethod
    def parse(cls, value: Union["PieceKind", int, str]) -> "PieceKind":
        """Accept a kind, its board value or its letter (any case)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.upper()]
            except KeyError:
                raise ValueError(f"Unknown piece kind: {value!r}") from None
        # Board cells come back as numpy integers
        if isinstance(value, numbers.Integral) and not isinstance(value, bool):
            try:
                return cls(int(value))
            except ValueError:
                raise ValueError(f"Unknown piece kind: {value!r}") from None
        raise ValueError(f"Unknown piece kind: {value!r}")


# Offsets are relative to the anchor, y grows downward.
BASE_BLOCKS: Dict[PieceKind, Tuple[Offset, ...]] = {
    PieceKind.I: ((-1, 0), (0, 0), (1, 0), (2, 0)),
    PieceKind.J: ((-1, -1), (-1, 0), (0, 0), (1, 0)),
    PieceKind.L: ((-1, 0), (0, 0), (1, 0), (1, -1)),
    PieceKind.O: ((0, 0), (0, -1), (1, 0), (1, -1)),
    PieceKind.S: ((-1, 0), (0, 0), (0, -1), (1, -1)),
    PieceKind.T: ((-1, 0), (0, 0), (1, 0), (0, -1)),
    PieceKind.Z: ((-1, -1), (0, -1), (0, 0), (1, 0)),
}

CENTERS: Dict[PieceKind, Offset] = {
    PieceKind.I: (0, 0),
    PieceKind.J: (0, 0),
    PieceKind.L: (0, 0),
    PieceKind.O: (0.5, -0.5),
    PieceKind.S: (0, 0),
    PieceKind.T: (0, 0),
    PieceKind.Z: (0, 0),
}


def _rotate_offset(offset: Offset, center: Offset, clockwise: bool) -> Offset:
    dx = offset[0] - center[0]
    dy = offset[1] - center[1]
    if clockwise:
        rx, ry = -dy, dx
    else:
        rx, ry = dy, -dx
    return rx + center[0], ry + center[1]


@dataclass
class Tetromino:
    """The falling piece: block offsets around a center plus a board anchor.

    All geometry operations consult the board for legality and roll back on
    collision, returning ``False`` instead of raising.
    """

    kind: PieceKind
    blocks: Tuple[Offset, ...]
    center: Offset
    rotation: int = 0
    x: int = 0
    y: int = 0

    @classmethod
    def create(
        cls,
        kind: Optional[Union[PieceKind, int, str]] = None,
        *,
        board_width: int = 10,
        rng: Optional[random.Random] = None,
    ) -> "Tetromino":
        if kind is None:
            kind = (rng or random).choice(list(PieceKind))
        kind = PieceKind.parse(kind)
        return cls(
            kind=kind,
            blocks=BASE_BLOCKS[kind],
            center=CENTERS[kind],
            rotation=0,
            x=(board_width - 1) // 2,
            y=0,
        )

    def copy(self) -> "Tetromino":
        return replace(self)

    def absolute_coordinates(self) -> List[Coordinate]:
        return [(math.floor(bx + self.x), math.floor(by + self.y)) for bx, by in self.blocks]

    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) of the shape-local offsets."""
        xs = [bx for bx, _ in self.blocks]
        ys = [by for _, by in self.blocks]
        return min(xs), min(ys), max(xs), max(ys)

    def has_collision(self, board: "Board") -> bool:
        return board.has_collision(self)

    def rotate(self, board: "Board", clockwise: bool = True) -> bool:
        if self.kind == PieceKind.O:
            self.rotation = (self.rotation + 1) % 4
            return True

        original_blocks = self.blocks
        original_rotation = self.rotation
        self.blocks = tuple(_rotate_offset(b, self.center, clockwise) for b in self.blocks)
        self.rotation = (self.rotation + 1) % 4
        if self.has_collision(board):
            self.blocks = original_blocks
            self.rotation = original_rotation
            return False
        return True

    def move(self, dx: int, dy: int, board: "Board") -> bool:
        original_x, original_y = self.x, self.y
        self.x += dx
        self.y += dy
        if self.has_collision(board):
            self.x, self.y = original_x, original_y
            return False
        return True

    def move_down(self, board: "Board") -> bool:
        return self.move(0, 1, board)

    def move_left(self, board: "Board") -> bool:
        return self.move(-1, 0, board)

    def move_right(self, board: "Board") -> bool:
        return self.move(1, 0, board)

    def hard_drop(self, board: "Board") -> int:
        """Drop until blocked; returns the number of cells moved."""
        cells = 0
        while self.move_down(board):
            cells += 1
        return cells

    def ghost(self, board: "Board") -> "Tetromino":
        """Landing position of this piece, computed on a copy."""
        ghost = self.copy()
        ghost.hard_drop(board)
        return ghost
