"""
Unit Tests for Move Ordering

Tests for MVV-LVA capture ordering.
"""

import chess
import pytest
from chess_tutor.search import capture_gain, order_moves


class TestMoveOrdering:
    """Tests for move ordering heuristics."""

    @pytest.fixture
    def board(self):
        """Pawn and knight can both take the queen; the pawn can also take a rook."""
        return chess.Board("4k3/8/8/3q1r2/4P3/2N5/8/4K2Q w - - 0 1")

    def test_captures_ordered_first(self, board):
        moves = list(board.legal_moves)
        ordered = order_moves(board, moves)

        flags = [board.is_capture(m) for m in ordered]
        first_quiet = flags.index(False)

        assert all(flags[:first_quiet])
        assert not any(flags[first_quiet:])

    def test_mvv_lva_order(self, board):
        ordered = order_moves(board, list(board.legal_moves))

        assert [m.uci() for m in ordered[:3]] == ["e4d5", "c3d5", "e4f5"]

    def test_captures_non_increasing(self, board):
        ordered = order_moves(board, list(board.legal_moves))
        gains = [capture_gain(board, m) for m in ordered if board.is_capture(m)]

        assert gains == sorted(gains, reverse=True)

    def test_quiet_moves_keep_relative_order(self, board):
        moves = list(board.legal_moves)
        ordered = order_moves(board, moves)

        quiet_in = [m for m in moves if not board.is_capture(m)]
        quiet_out = [m for m in ordered if not board.is_capture(m)]

        assert quiet_out == quiet_in

    def test_is_a_permutation(self, board):
        moves = list(board.legal_moves)
        ordered = order_moves(board, moves)

        assert sorted(ordered, key=chess.Move.uci) == sorted(moves, key=chess.Move.uci)
        assert len(ordered) == len(moves)

    def test_no_captures_unchanged(self):
        board = chess.Board()
        moves = list(board.legal_moves)

        assert order_moves(board, moves) == moves

    def test_capture_gain(self, board):
        assert capture_gain(board, chess.Move.from_uci("e4d5")) == 900 - 100
        assert capture_gain(board, chess.Move.from_uci("c3d5")) == 900 - 320

    def test_en_passant_victim_is_pawn(self):
        board = chess.Board("rnbqkbnr/ppp1p1pp/8/3pPp2/8/8/PPPP1PPP/RNBQKBNR w KQkq f6 0 3")
        move = chess.Move.from_uci("e5f6")

        assert capture_gain(board, move) == 0
        assert order_moves(board, list(board.legal_moves))[0] == move

    def test_king_captures_rank_last(self):
        """A king is the most valuable attacker, so its captures come last."""
        board = chess.Board("4k3/8/8/8/8/8/3n4/3RK3 w - - 0 1")
        ordered = order_moves(board, list(board.legal_moves))
        captures = [m for m in ordered if board.is_capture(m)]

        assert [m.uci() for m in captures] == ["d1d2", "e1d2"]
