"""
Move Ordering

Alpha-beta prunes more when strong moves are searched first. Captures are
moved to the front and sorted by MVV-LVA (Most Valuable Victim - Least
Valuable Aggressor); quiet moves keep their existing relative order.

The moves are partitioned in one pass instead of sorting the whole list,
so the quiet tail (usually most of the moves) is never compared.

Reference:
    https://www.chessprogramming.org/MVV-LVA
"""

from typing import List

import chess

from chess_tutor.evaluation.classical import PIECE_VALUES

# The king is never a victim; as an aggressor it should rank last
ORDERING_VALUES = {**PIECE_VALUES, chess.KING: 20000}


def capture_gain(board: chess.Board, move: chess.Move) -> int:
    """
    MVV-LVA key of a capture: value of the victim minus value of the attacker.

    Args:
        board: Position before the move
        move: A capturing move

    Returns:
        int: Higher means search earlier
    """
    if board.is_en_passant(move):
        victim = chess.PAWN
    else:
        victim = board.piece_type_at(move.to_square)
    attacker = board.piece_type_at(move.from_square)
    return ORDERING_VALUES.get(victim, 0) - ORDERING_VALUES.get(attacker, 0)


def order_moves(board: chess.Board, moves: List[chess.Move]) -> List[chess.Move]:
    """
    Order moves for alpha-beta: captures (best MVV-LVA first), then quiet moves.

    Args:
        board: Current board position
        moves: Legal moves to order

    Returns:
        New list: sorted captures followed by quiet moves in input order
    """
    captures = []
    quiet = []
    for move in moves:
        if board.is_capture(move):
            captures.append(move)
        else:
            quiet.append(move)

    if not captures:
        return quiet

    # list.sort is stable, so equal-gain captures keep generation order
    captures.sort(key=lambda move: capture_gain(board, move), reverse=True)
    return captures + quiet
