"""
Evaluation Module

Static position evaluation. Evaluators are swappable: the search works with
any object implementing the Evaluator interface.

Key Components:
    - Evaluator (ABC): Abstract base class defining the evaluation interface
    - ClassicalEvaluator: Material + piece-square table evaluation

Data Flow:
    chess.Board → evaluator.evaluate() → int (centipawns)
                                          Positive = White advantage
                                          Negative = Black advantage
"""

from chess_tutor.evaluation.base import Evaluator, MATE_SCORE, INFINITY
from chess_tutor.evaluation.classical import ClassicalEvaluator, PIECE_VALUES

__all__ = ['Evaluator', 'ClassicalEvaluator', 'PIECE_VALUES', 'MATE_SCORE', 'INFINITY']
