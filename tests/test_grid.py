from __future__ import annotations

import unittest

import numpy as np

from testris.game import Board, PieceKind, Tetromino


class TestBoard(unittest.TestCase):
    def setUp(self) -> None:
        self.board = Board(10, 20)

    def test_invalid_dimensions_fail_fast(self) -> None:
        for width, height in ((0, 20), (10, -1), (3, 20), (10, 3)):
            with self.assertRaises(ValueError):
                Board(width, height)

    def test_bounds_allow_rows_above_the_board(self) -> None:
        self.assertTrue(self.board.is_within_bounds(0, -3))
        self.assertTrue(self.board.is_within_bounds(9, 19))
        self.assertFalse(self.board.is_within_bounds(-1, 5))
        self.assertFalse(self.board.is_within_bounds(10, 5))
        self.assertFalse(self.board.is_within_bounds(5, 20))

    def test_out_of_bounds_always_collides(self) -> None:
        self.board.grid.fill(int(PieceKind.T))
        for cell in ((-1, 5), (10, 5), (3, 20), (-1, -1)):
            self.assertTrue(self.board.collides([cell]))
        self.board.reset()
        for cell in ((-1, 5), (10, 5), (3, 20), (-1, -1)):
            self.assertTrue(self.board.collides([cell]))

    def test_cells_above_board_ignore_occupancy(self) -> None:
        self.board.grid.fill(int(PieceKind.T))
        self.assertFalse(self.board.collides([(4, -1), (5, -2)]))

    def test_has_collision_with_settled_cells(self) -> None:
        piece = Tetromino.create("T")
        self.assertFalse(self.board.has_collision(piece))
        self.board.grid[0, 5] = int(PieceKind.I)
        self.assertTrue(self.board.has_collision(piece))

    def test_clear_lines_on_empty_board(self) -> None:
        self.assertEqual(self.board.clear_lines(), 0)

    def test_clear_single_row_shifts_content_down(self) -> None:
        self.board.grid[19, :] = int(PieceKind.I)
        self.board.grid[18, 0] = int(PieceKind.T)
        self.assertEqual(self.board.clear_lines(), 1)
        self.assertIs(self.board.cell(0, 19), PieceKind.T)
        self.assertEqual(int(np.count_nonzero(self.board.grid)), 1)
        self.assertFalse(self.board.grid[0].any())

    def test_clear_non_contiguous_rows(self) -> None:
        self.board.grid[19, :] = int(PieceKind.I)
        self.board.grid[17, :] = int(PieceKind.L)
        self.board.grid[18, 3] = int(PieceKind.S)
        self.board.grid[16, 7] = int(PieceKind.Z)
        self.assertEqual(self.board.clear_lines(), 2)
        self.assertIs(self.board.cell(3, 19), PieceKind.S)
        self.assertIs(self.board.cell(7, 18), PieceKind.Z)
        self.assertEqual(int(np.count_nonzero(self.board.grid)), 2)

    def test_settle_only_writes_visible_cells(self) -> None:
        piece = Tetromino.create("T")
        self.assertEqual(self.board.settle(piece), 0)
        self.assertEqual(int(np.count_nonzero(self.board.grid)), 3)
        self.assertIs(self.board.cell(4, 0), PieceKind.T)

    def test_settle_above_board_is_noop(self) -> None:
        piece = Tetromino.create("J")
        piece.y = -2
        self.assertEqual(self.board.settle(piece), 0)
        self.assertFalse(self.board.grid.any())

    def test_settle_returns_lines_cleared(self) -> None:
        self.board.grid[19, :] = int(PieceKind.I)
        self.board.grid[19, 3:7] = 0
        piece = Tetromino.create("I")
        piece.hard_drop(self.board)
        self.assertEqual(self.board.settle(piece), 1)
        self.assertFalse(self.board.grid.any())

    def test_square_pieces_fill_two_rows(self) -> None:
        cleared = []
        for column in (0, 2, 4, 6, 8):
            piece = Tetromino.create("O")
            piece.x = column
            piece.hard_drop(self.board)
            cleared.append(self.board.settle(piece))
        self.assertEqual(cleared, [0, 0, 0, 0, 2])
        self.assertFalse(self.board.grid.any())

    def test_game_over_when_top_row_occupied(self) -> None:
        self.assertFalse(self.board.is_game_over())
        self.board.grid[0, 3] = int(PieceKind.O)
        self.assertTrue(self.board.is_game_over())
        self.board.reset()
        self.assertFalse(self.board.is_game_over())

    def test_surface_queries(self) -> None:
        self.board.grid[19, 0] = int(PieceKind.I)
        self.board.grid[17, 0] = int(PieceKind.I)
        self.board.grid[19, 9] = int(PieceKind.O)
        heights = self.board.column_heights()
        self.assertEqual(int(heights[0]), 3)
        self.assertEqual(int(heights[9]), 1)
        self.assertEqual(int(heights[4]), 0)
        self.assertEqual(self.board.max_height(), 3)
        self.assertEqual(self.board.count_holes(), 1)
        self.assertEqual(self.board.complete_lines(), 0)

    def test_copy_is_independent(self) -> None:
        clone = self.board.copy()
        clone.grid[5, 5] = int(PieceKind.T)
        self.assertIsNone(self.board.cell(5, 5))
        self.assertEqual(len(self.board.rows()), 20)
        self.assertEqual(len(self.board.rows()[0]), 10)


if __name__ == "__main__":
    unittest.main()
