"""
Search Module

Iterative-deepening minimax with alpha-beta pruning over a wall-clock
deadline. No transposition table, no quiescence: leaves are scored by the
static evaluator.

Key Components:
    - search: Root driver, one full alpha-beta pass per depth
    - minimax: Recursive alpha-beta with mate/stalemate scoring
    - score_move: Fixed-depth score of a single candidate move
    - order_moves: Captures first, MVV-LVA within captures
"""

from chess_tutor.search.ordering import order_moves, capture_gain
from chess_tutor.search.minimax import SearchResult, minimax, pushed, score_move, search

__all__ = [
    'SearchResult',
    'search',
    'minimax',
    'score_move',
    'pushed',
    'order_moves',
    'capture_gain',
]
