from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

import numpy as np

from .pieces import PieceKind

if TYPE_CHECKING:
    from .pieces import Tetromino


Coordinate = Tuple[int, int]

MIN_WIDTH = 4
MIN_HEIGHT = 4


class Board:
    """Fixed-size grid of settled cells.

    The grid uses 0 for empty cells and ``PieceKind`` values for occupied ones.
    Row 0 is the top. Coordinates above the board (negative ``y``) are legal for
    a falling piece and never collide with settled content.
    """

    def __init__(self, width: int = 10, height: int = 20) -> None:
        if int(width) < MIN_WIDTH or int(height) < MIN_HEIGHT:
            raise ValueError(
                f"Board must be at least {MIN_WIDTH}x{MIN_HEIGHT}, got {width}x{height}"
            )
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def copy(self) -> "Board":
        new_board = Board(self.width, self.height)
        new_board.grid = self.grid.copy()
        return new_board

    def cell(self, x: int, y: int) -> Optional[PieceKind]:
        value = int(self.grid[y, x])
        return PieceKind(value) if value else None

    def rows(self) -> List[List[Optional[PieceKind]]]:
        return [[self.cell(x, y) for x in range(self.width)] for y in range(self.height)]

    def is_within_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and y < self.height

    def has_collision(self, tetromino: "Tetromino") -> bool:
        return self.collides(tetromino.absolute_coordinates())

    def collides(self, cells: Iterable[Coordinate]) -> bool:
        for x, y in cells:
            if not self.is_within_bounds(x, y):
                return True
            if y >= 0 and self.grid[y, x] != 0:
                return True
        return False

    def place_cells(self, cells: Iterable[Coordinate], kind: PieceKind) -> None:
        """Write ``kind`` into every visible cell, without clearing lines."""
        for x, y in cells:
            if y >= 0 and self.is_within_bounds(x, y):
                self.grid[y, x] = int(kind)

    def settle(self, tetromino: "Tetromino") -> int:
        self.place_cells(tetromino.absolute_coordinates(), tetromino.kind)
        return self.clear_lines()

    def clear_lines(self) -> int:
        cleared = 0
        y = self.height - 1
        # Bottom-up; the same index is tested again after a removal.
        while y >= 0:
            if np.all(self.grid[y] != 0):
                self.grid[1 : y + 1] = self.grid[0:y].copy()
                self.grid[0] = 0
                cleared += 1
            else:
                y -= 1
        return cleared

    def is_game_over(self) -> bool:
        return bool(np.any(self.grid[0] != 0))

    def complete_lines(self) -> int:
        return int(np.sum(np.all(self.grid != 0, axis=1)))

    def column_heights(self) -> np.ndarray:
        occupied = self.grid != 0
        any_col = occupied.any(axis=0)
        first = np.where(any_col, np.argmax(occupied, axis=0), self.height)
        return (self.height - first).astype(np.int64)

    def max_height(self) -> int:
        return int(self.column_heights().max())

    def count_holes(self) -> int:
        holes = 0
        for x in range(self.width):
            seen_block = False
            for cell in self.grid[:, x]:
                if cell != 0:
                    seen_block = True
                elif seen_block:
                    holes += 1
        return holes
