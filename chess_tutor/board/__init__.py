"""
Board Module

Everything the core knows about moves and positions beyond what
python-chess already provides.

Key Components:
    - VerboseMove: tagged description of a move (captured piece, flags, SAN)
    - MoveFlag: closed set of move kinds
    - parse_uci / parse_legal_move: wire-format validation
    - load_position: FEN to board with a typed error

Data Flow:
    "e2e4" → parse_legal_move(board, ...) → chess.Move → describe_move() → VerboseMove
"""

from chess_tutor.board.moves import (
    MoveFlag,
    VerboseMove,
    describe_move,
    legal_verbose_moves,
    load_position,
    parse_uci,
    parse_legal_move,
)

__all__ = [
    'MoveFlag',
    'VerboseMove',
    'describe_move',
    'legal_verbose_moves',
    'load_position',
    'parse_uci',
    'parse_legal_move',
]
