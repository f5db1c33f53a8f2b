"""
Move Quality Classification

Grades a played move by centipawn loss against the engine's choice.

Both moves are scored with the same fixed-depth search (no clock), from
the mover's point of view. The engine's choice is the best root move of
that same search, so the loss is never negative. This shallow search can
disagree with the full-budget search used for play; that is expected.

Tiers (inclusive upper bounds, centipawns):
    Best        <= 5
    Good        <= 30
    Inaccuracy  <= 100
    Mistake     <= 300
    Blunder     above 300
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

import chess

from chess_tutor.board.moves import describe_move
from chess_tutor.config import DEFAULT_CONFIG, TutorConfig
from chess_tutor.evaluation.base import Evaluator
from chess_tutor.evaluation.classical import ClassicalEvaluator
from chess_tutor.search.minimax import score_move, search

logger = logging.getLogger(__name__)


class QualityTier(IntEnum):
    """Move quality, ordered from best to worst."""
    BEST = 0
    GOOD = 1
    INACCURACY = 2
    MISTAKE = 3
    BLUNDER = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()


def tier_for_loss(diff: int, config: TutorConfig = DEFAULT_CONFIG) -> QualityTier:
    """
    Map a centipawn loss to a quality tier.

    Args:
        diff: Non-negative centipawn loss
        config: Supplies the tier thresholds

    Returns:
        QualityTier
    """
    if diff <= config.best_threshold:
        return QualityTier.BEST
    if diff <= config.good_threshold:
        return QualityTier.GOOD
    if diff <= config.inaccuracy_threshold:
        return QualityTier.INACCURACY
    if diff <= config.mistake_threshold:
        return QualityTier.MISTAKE
    return QualityTier.BLUNDER


@dataclass(frozen=True)
class MoveClassification:
    """
    Result of grading one played move.

    Attributes:
        tier: Quality tier derived from diff
        better_move: Engine's move in UCI form when diff exceeds the
            correction threshold, else None
        diff: Centipawn loss (>= 0)
        best_move: Engine's move in UCI form, always present
    """
    tier: QualityTier
    better_move: Optional[str]
    diff: int
    best_move: Optional[str] = None


class MoveQualityClassifier:
    """
    Compares a played move with the engine's best move at a fixed depth.

    Attributes:
        evaluator: Static evaluator for both searches
        config: Classification depth and tier thresholds
    """

    def __init__(self, evaluator: Optional[Evaluator] = None, config: TutorConfig = DEFAULT_CONFIG):
        self.evaluator = evaluator or ClassicalEvaluator()
        self.config = config

    def classify(
        self,
        board: chess.Board,
        played: chess.Move,
        mover: bool,
    ) -> MoveClassification:
        """
        Grade a move.

        The position must have at least one legal move; classifying a
        terminal position is the caller's error.

        Args:
            board: Position before the move (not modified)
            played: The move that was played
            mover: Color of the side that played it

        Returns:
            MoveClassification

        Raises:
            IllegalMoveError: If played is not legal in the position
        """
        describe_move(board, played)  # legality check
        board = board.copy()
        depth = self.config.classification_depth

        # Each root move is scored at `depth` plies after it
        result = search(board, max_depth=depth + 1, evaluator=self.evaluator)
        best = result.best_move

        best_raw = result.score
        played_raw = best_raw if played == best else score_move(board, played, depth, self.evaluator)

        sign = 1 if mover == chess.WHITE else -1
        diff = sign * best_raw - sign * played_raw
        if diff < 0:
            # Only reachable when mover is not the side to move
            logger.warning(f"Negative centipawn loss {diff} for {played.uci()}, clamping to 0")
            diff = 0

        tier = tier_for_loss(diff, self.config)
        better = best.uci() if diff > self.config.correction_threshold else None

        logger.debug(
            f"Classified {played.uci()}: tier={tier.label} diff={diff} "
            f"best={best.uci()} played_score={played_raw} best_score={best_raw}"
        )
        return MoveClassification(tier=tier, better_move=better, diff=diff, best_move=best.uci())
