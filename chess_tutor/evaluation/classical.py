"""
Classical Piece-Square Table Evaluation

Score = sum over pieces of (material value + piece-square bonus), added for
White and subtracted for Black. No search, no terminal detection.

Table Orientation:
    Tables are written as the board is drawn, row 0 = rank 8, and stored
    flattened. A python-chess square (0 = a1) maps to the table index
    square ^ 56 for White; Black reads the same table at the vertically
    flipped index, which is the square itself.

Reference:
    Simplified Evaluation Function
    https://www.chessprogramming.org/Simplified_Evaluation_Function
"""

import chess
import numpy as np

from chess_tutor.evaluation.base import Evaluator

# fmt: off
PIECE_VALUES = {
    chess.PAWN: 100,
    chess.KNIGHT: 320,
    chess.BISHOP: 330,
    chess.ROOK: 500,
    chess.QUEEN: 900,
    chess.KING: 0,
}

# Advanced and central pawns are rewarded; d2/e2 blockers are penalized
PAWN_TABLE = np.array([
    [  0,   0,   0,   0,   0,   0,   0,   0],
    [ 50,  50,  50,  50,  50,  50,  50,  50],
    [ 10,  10,  20,  30,  30,  20,  10,  10],
    [  5,   5,  10,  25,  25,  10,   5,   5],
    [  0,   0,   0,  20,  20,   0,   0,   0],
    [  5,  -5, -10,   0,   0, -10,  -5,   5],
    [  5,  10,  10, -20, -20,  10,  10,   5],
    [  0,   0,   0,   0,   0,   0,   0,   0],
], dtype=np.int32)

# Knights on the rim are dim
KNIGHT_TABLE = np.array([
    [-50, -40, -30, -30, -30, -30, -40, -50],
    [-40, -20,   0,   0,   0,   0, -20, -40],
    [-30,   0,  10,  15,  15,  10,   0, -30],
    [-30,   5,  15,  20,  20,  15,   5, -30],
    [-30,   0,  15,  20,  20,  15,   0, -30],
    [-30,   5,  10,  15,  15,  10,   5, -30],
    [-40, -20,   0,   5,   5,   0, -20, -40],
    [-50, -40, -30, -30, -30, -30, -40, -50],
], dtype=np.int32)

BISHOP_TABLE = np.array([
    [-20, -10, -10, -10, -10, -10, -10, -20],
    [-10,   0,   0,   0,   0,   0,   0, -10],
    [-10,   0,   5,  10,  10,   5,   0, -10],
    [-10,   5,   5,  10,  10,   5,   5, -10],
    [-10,   0,  10,  10,  10,  10,   0, -10],
    [-10,  10,  10,  10,  10,  10,  10, -10],
    [-10,   5,   0,   0,   0,   0,   5, -10],
    [-20, -10, -10, -10, -10, -10, -10, -20],
], dtype=np.int32)

# Seventh rank and central back-rank files
ROOK_TABLE = np.array([
    [  0,   0,   0,   0,   0,   0,   0,   0],
    [  5,  10,  10,  10,  10,  10,  10,   5],
    [ -5,   0,   0,   0,   0,   0,   0,  -5],
    [ -5,   0,   0,   0,   0,   0,   0,  -5],
    [ -5,   0,   0,   0,   0,   0,   0,  -5],
    [ -5,   0,   0,   0,   0,   0,   0,  -5],
    [ -5,   0,   0,   0,   0,   0,   0,  -5],
    [  0,   0,   0,   5,   5,   0,   0,   0],
], dtype=np.int32)

QUEEN_TABLE = np.array([
    [-20, -10, -10,  -5,  -5, -10, -10, -20],
    [-10,   0,   0,   0,   0,   0,   0, -10],
    [-10,   0,   5,   5,   5,   5,   0, -10],
    [ -5,   0,   5,   5,   5,   5,   0,  -5],
    [  0,   0,   5,   5,   5,   5,   0,  -5],
    [-10,   5,   5,   5,   5,   5,   0, -10],
    [-10,   0,   5,   0,   0,   0,   0, -10],
    [-20, -10, -10,  -5,  -5, -10, -10, -20],
], dtype=np.int32)

# King safety: stay behind the pawns, castled
KING_TABLE = np.array([
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-20, -30, -30, -40, -40, -30, -30, -20],
    [-10, -20, -20, -20, -20, -20, -20, -10],
    [ 20,  20,   0,   0,   0,   0,  20,  20],
    [ 20,  30,  10,   0,   0,  10,  30,  20],
], dtype=np.int32)
# fmt: on

PIECE_SQUARE_TABLES = {
    chess.PAWN: PAWN_TABLE.ravel(),
    chess.KNIGHT: KNIGHT_TABLE.ravel(),
    chess.BISHOP: BISHOP_TABLE.ravel(),
    chess.ROOK: ROOK_TABLE.ravel(),
    chess.QUEEN: QUEEN_TABLE.ravel(),
    chess.KING: KING_TABLE.ravel(),
}


def table_index(square: int, color: bool) -> int:
    """Index into a flattened table for a piece of the given color."""
    return square ^ 56 if color == chess.WHITE else square


class ClassicalEvaluator(Evaluator):
    """
    Material plus piece-square tables.

    Attributes:
        piece_values: Material value per piece type (centipawns)
        piece_tables: Flattened 64-entry PST per piece type
    """

    def __init__(self):
        self.piece_values = PIECE_VALUES
        self.piece_tables = PIECE_SQUARE_TABLES

    def piece_score(self, piece: chess.Piece, square: int) -> int:
        """Material + positional value of one piece, unsigned."""
        table = self.piece_tables[piece.piece_type]
        return self.piece_values[piece.piece_type] + int(table[table_index(square, piece.color)])

    def evaluate(self, board: chess.Board) -> int:
        """
        Evaluate position using material + PST.

        Args:
            board: Chess board to evaluate

        Returns:
            int: Evaluation in centipawns (White's perspective)
        """
        score = 0
        for square, piece in board.piece_map().items():
            value = self.piece_score(piece, square)
            if piece.color == chess.WHITE:
                score += value
            else:
                score -= value
        return score
