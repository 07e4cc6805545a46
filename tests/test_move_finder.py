from __future__ import annotations

import unittest

from testris.ai import BoardFeatures, MoveFinder, evaluate_position
from testris.ai.heuristic import center_columns, edge_columns
from testris.game import Board, PieceKind, Tetromino


class TestHeuristic(unittest.TestCase):
    def setUp(self) -> None:
        self.board = Board(10, 20)

    def test_column_groups(self) -> None:
        self.assertEqual(edge_columns(10), [0, 1, 8, 9])
        self.assertEqual(center_columns(10), [3, 4, 5, 6])

    def test_features(self) -> None:
        self.board.grid[19, :] = int(PieceKind.I)
        self.board.grid[17, 4] = int(PieceKind.T)
        features = BoardFeatures.from_board(self.board)
        self.assertEqual(features.complete_lines, 1)
        self.assertEqual(features.holes, 1)
        self.assertEqual(features.max_height, 3)
        self.assertEqual(features.bumpiness, 4)
        self.assertAlmostEqual(features.edge_height, 1.0)
        self.assertAlmostEqual(features.center_height, 1.5)

    def test_square_in_the_corner(self) -> None:
        piece = Tetromino.create("O")
        piece.x = 0
        piece.hard_drop(self.board)
        # height 0, bumpiness 2, max height 2, edges 1 vs center 0
        self.assertAlmostEqual(evaluate_position(self.board, piece), -2 * 2.5 - 4 * 0.8 + 2.0)
        self.assertFalse(self.board.grid.any())

    def test_completed_line_is_counted_before_clearing(self) -> None:
        self.board.grid[19, :] = int(PieceKind.J)
        self.board.grid[19, 3:7] = 0
        piece = Tetromino.create("I")
        piece.hard_drop(self.board)
        # one line, flat surface of height 1
        self.assertAlmostEqual(evaluate_position(self.board, piece), 20.0 - 0.8)


class TestMoveFinder(unittest.TestCase):
    def setUp(self) -> None:
        self.board = Board(10, 20)
        self.finder = MoveFinder()

    def test_empty_board_prefers_first_flat_corner(self) -> None:
        best = self.finder.find_best_move(self.board, Tetromino.create("O"))
        self.assertEqual((best.rotation, best.column, best.landing_row), (0, 0, 19))
        self.assertAlmostEqual(best.score, -6.2)

    def test_candidates_follow_rotation_then_column_order(self) -> None:
        candidates = self.finder.candidates(self.board, Tetromino.create("O"))
        self.assertEqual(len(candidates), 4 * 9)
        order = [(c.rotation, c.column) for c in candidates]
        self.assertEqual(order, sorted(order))
        self.assertEqual(order[0], (0, 0))

    def test_skips_columns_that_collide(self) -> None:
        candidates = self.finder.candidates(self.board, Tetromino.create("T"))
        first = [c.column for c in candidates if c.rotation == 0]
        self.assertEqual(first, list(range(1, 9)))

    def test_blocked_rotation_stops_search(self) -> None:
        self.board.grid[2, 4] = int(PieceKind.Z)
        candidates = self.finder.candidates(self.board, Tetromino.create("I"))
        self.assertTrue(all(c.rotation == 0 for c in candidates))
        self.assertEqual([c.column for c in candidates], list(range(1, 8)))

    def test_prefers_completing_a_line(self) -> None:
        self.board.grid[19, :] = int(PieceKind.L)
        self.board.grid[19, 4:6] = 0
        best = self.finder.find_best_move(self.board, Tetromino.create("O"))
        self.assertEqual((best.rotation, best.column), (0, 4))
        self.assertAlmostEqual(best.score, 10.8)

    def test_search_leaves_piece_and_board_untouched(self) -> None:
        self.board.grid[15:, :7] = int(PieceKind.S)
        self.board.grid[18, 2] = 0
        grid_before = self.board.grid.copy()
        piece = Tetromino.create("L")
        piece.x, piece.y = 6, 3
        piece.rotate(self.board)
        state = (piece.kind, piece.blocks, piece.center, piece.rotation, piece.x, piece.y)

        self.finder.find_best_move(self.board, piece)

        self.assertEqual((piece.kind, piece.blocks, piece.center, piece.rotation, piece.x, piece.y), state)
        self.assertTrue((self.board.grid == grid_before).all())

    def test_rotation_is_reported_as_absolute_index(self) -> None:
        piece = Tetromino.create("T")
        piece.y = 5
        piece.rotate(self.board)
        candidates = self.finder.candidates(self.board, piece)
        self.assertEqual(candidates[0].rotation, 1)

    def test_no_legal_placement(self) -> None:
        self.board.grid[:, :] = int(PieceKind.Z)
        self.assertIsNone(self.finder.find_best_move(self.board, Tetromino.create("T")))


if __name__ == "__main__":
    unittest.main()
