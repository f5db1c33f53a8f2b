"""
Unit Tests for Core API

Tests for the FEN-in, UCI-out functions used by the UI.
"""

import random

import chess
import pytest
from chess_tutor import api
from chess_tutor.errors import (
    IllegalMoveError,
    InvalidMoveError,
    InvalidPositionError,
    UnknownDifficultyError,
)
from chess_tutor.tutor.classifier import MoveClassification, QualityTier

MATE_IN_ONE = "6k1/5ppp/8/8/8/8/8/3QK3 w - - 0 1"
STALEMATE = "k7/2Q5/1K6/8/8/8/8/8 b - - 0 1"
HANGING_QUEEN = "6k1/5ppp/2n5/8/8/8/8/3QK3 w - - 0 1"


class TestParseSide:
    """Tests for side normalization."""

    @pytest.mark.parametrize("side,expected", [
        ("w", chess.WHITE),
        ("b", chess.BLACK),
        ("White", chess.WHITE),
        (" black ", chess.BLACK),
        (chess.BLACK, chess.BLACK),
    ])
    def test_valid(self, side, expected):
        assert api.parse_side(side) is expected

    @pytest.mark.parametrize("side", ["x", "", "wb"])
    def test_invalid(self, side):
        with pytest.raises(ValueError):
            api.parse_side(side)


class TestComputeBestMove:
    """Tests for the engine's move choice."""

    def test_finds_mate_in_one(self):
        move = api.compute_best_move(MATE_IN_ONE, "Medium", "w", rng=random.Random(0))

        assert move == "d1d8"

    def test_no_legal_moves(self):
        assert api.compute_best_move(STALEMATE, "Hard", "b") is None

    def test_invalid_fen(self):
        with pytest.raises(InvalidPositionError):
            api.compute_best_move("not a fen", "Medium", "w")

    def test_unknown_difficulty(self):
        with pytest.raises(UnknownDifficultyError):
            api.compute_best_move(chess.STARTING_FEN, "Grandmaster", "w")

    def test_side_must_be_to_move(self):
        with pytest.raises(ValueError):
            api.compute_best_move(chess.STARTING_FEN, "Medium", "b")

    def test_beginner_moves_are_legal(self):
        board = chess.Board()

        for seed in range(5):
            move = api.compute_best_move(chess.STARTING_FEN, "Beginner", "w", rng=random.Random(seed))
            assert chess.Move.from_uci(move) in board.legal_moves

    @pytest.mark.slow
    def test_expert_finds_mate_in_one(self):
        assert api.compute_best_move(MATE_IN_ONE, "Expert", "w") == "d1d8"


class TestClassifyPlayedMove:
    """Tests for move classification through the API."""

    def test_hanging_queen_is_a_blunder(self):
        classification = api.classify_played_move(HANGING_QUEEN, "d1d4", "w")

        assert classification.tier is QualityTier.BLUNDER
        assert classification.better_move is not None
        assert classification.diff > 300

    def test_illegal_move(self):
        with pytest.raises(IllegalMoveError):
            api.classify_played_move(chess.STARTING_FEN, "e2e5", "w")

    def test_malformed_move(self):
        with pytest.raises(InvalidMoveError):
            api.classify_played_move(chess.STARTING_FEN, "e2-e4", "w")

    def test_side_must_be_to_move(self):
        with pytest.raises(ValueError):
            api.classify_played_move(chess.STARTING_FEN, "e2e4", "black")


class TestExplanations:
    """Tests for the explanation functions."""

    def test_explain_better_move(self):
        text = api.explain_better_move(chess.STARTING_FEN, "a2a3", "e2e4", diff=50)

        assert text.startswith("Better move: e4  (you played: a3)")
        assert "0.5 pawns" in text

    def test_explain_better_move_malformed(self):
        with pytest.raises(InvalidMoveError):
            api.explain_better_move(chess.STARTING_FEN, "a2a3", "castle")

    def test_narrate_engine_move(self):
        narrative = api.narrate_engine_move(MATE_IN_ONE, "d1d8")

        assert narrative.headline == "I played Qd8# — checkmate."

    def test_analyze_with_classification(self):
        classification = MoveClassification(QualityTier.GOOD, None, 12, "e2e4")

        feedback = api.analyze_player_move(chess.STARTING_FEN, "d2d4", "w", classification)

        assert feedback.headline == "✓ Good move!"
        assert feedback.better_move is None

    def test_analyze_classifies_when_needed(self):
        feedback = api.analyze_player_move(HANGING_QUEEN, "d1d4", "w")

        assert feedback.tier is QualityTier.BLUNDER
        assert feedback.better_move is not None
