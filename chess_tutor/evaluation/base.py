"""
Abstract Evaluator Interface

Key Principles:
    1. Evaluators are stateless and never modify the board
    2. evaluate() returns centipawns from White's perspective
    3. Positive = White advantage, Negative = Black advantage
    4. Terminal positions are NOT special-cased here; the search detects
       checkmate/stalemate at interior nodes with no legal moves
"""

from abc import ABC, abstractmethod

import chess


# Evaluation constants
INFINITY = 999_999  # Initial alpha/beta bound, beyond any reachable score
MATE_SCORE = 99_999  # Base score for checkmate (remaining depth is added)


class Evaluator(ABC):
    """
    Abstract base class for position evaluation.

    Implementations must be side-effect free: the search calls evaluate()
    at every depth-0 leaf with the board in a mid-search state.
    """

    @abstractmethod
    def evaluate(self, board: chess.Board) -> int:
        """
        Evaluate a chess position from White's perspective.

        Args:
            board: python-chess Board object to evaluate

        Returns:
            int: Evaluation in centipawns
        """

    def __repr__(self) -> str:
        """String representation of evaluator."""
        return f"{self.__class__.__name__}()"
