"""
Verbose Moves and the UCI Wire Format

python-chess hands out bare chess.Move objects (from, to, promotion).
Explanations need more than that: what was captured, whether the move
castles or promotes, its SAN. VerboseMove gathers those facts into one
frozen structure computed from the position *before* the move, so
consumers match on a known shape instead of re-probing the board.

Wire Format:
    Exactly 4 characters (from square + to square, e.g. "e2e4") optionally
    followed by one promotion letter from {q, r, b, n} ("e7e8q").

Square Indexing:
    python-chess squares: 0 = a1, 7 = h1, 56 = a8, 63 = h8
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Optional

import chess

from chess_tutor.errors import IllegalMoveError, InvalidMoveError, InvalidPositionError

UCI_PATTERN = re.compile(r"^[a-h][1-8][a-h][1-8][qrbn]?$")


class MoveFlag(Enum):
    """Kinds of special move a VerboseMove can carry."""
    CAPTURE = "capture"
    KINGSIDE_CASTLE = "kingside_castle"
    QUEENSIDE_CASTLE = "queenside_castle"
    EN_PASSANT = "en_passant"
    PROMOTION = "promotion"


@dataclass(frozen=True)
class VerboseMove:
    """
    A legal move plus the facts the tutor needs about it.

    Attributes:
        from_square: Origin square (python-chess index)
        to_square: Destination square
        piece: Piece type of the moving piece
        color: Color of the moving side
        promotion: Promotion piece type, or None
        captured: Captured piece type (a pawn for en passant), or None
        flags: Set of MoveFlag values
        san: Standard algebraic notation in the pre-move position
    """
    from_square: int
    to_square: int
    piece: int
    color: bool
    promotion: Optional[int] = None
    captured: Optional[int] = None
    flags: FrozenSet[MoveFlag] = frozenset()
    san: str = ""

    @property
    def move(self) -> chess.Move:
        """The bare python-chess move."""
        return chess.Move(self.from_square, self.to_square, promotion=self.promotion)

    @property
    def uci(self) -> str:
        return self.move.uci()

    @property
    def is_capture(self) -> bool:
        return MoveFlag.CAPTURE in self.flags

    @property
    def is_castle(self) -> bool:
        return bool(self.flags & {MoveFlag.KINGSIDE_CASTLE, MoveFlag.QUEENSIDE_CASTLE})

    @property
    def to_name(self) -> str:
        """Destination square name, e.g. 'e4'."""
        return chess.square_name(self.to_square)


def describe_move(board: chess.Board, move: chess.Move) -> VerboseMove:
    """
    Build a VerboseMove for a legal move.

    Args:
        board: Position before the move (not modified)
        move: A member of board.legal_moves

    Returns:
        VerboseMove describing the move

    Raises:
        IllegalMoveError: If the move is not legal in this position
    """
    if move not in board.legal_moves:
        raise IllegalMoveError(f"Illegal move in this position: {move.uci()}")

    mover = board.piece_at(move.from_square)
    flags = set()
    captured = None

    if board.is_en_passant(move):
        flags.add(MoveFlag.EN_PASSANT)
        flags.add(MoveFlag.CAPTURE)
        captured = chess.PAWN
    elif board.is_capture(move):
        flags.add(MoveFlag.CAPTURE)
        captured = board.piece_type_at(move.to_square)

    if board.is_kingside_castling(move):
        flags.add(MoveFlag.KINGSIDE_CASTLE)
    elif board.is_queenside_castling(move):
        flags.add(MoveFlag.QUEENSIDE_CASTLE)

    if move.promotion:
        flags.add(MoveFlag.PROMOTION)

    return VerboseMove(
        from_square=move.from_square,
        to_square=move.to_square,
        piece=mover.piece_type,
        color=mover.color,
        promotion=move.promotion,
        captured=captured,
        flags=frozenset(flags),
        san=board.san(move),
    )


def legal_verbose_moves(board: chess.Board, square: Optional[int] = None) -> List[VerboseMove]:
    """
    Enumerate legal moves as VerboseMoves.

    Args:
        board: Current position
        square: If given, only moves starting on this square

    Returns:
        List of VerboseMove in python-chess generation order
    """
    if square is None:
        moves = board.legal_moves
    else:
        moves = board.generate_legal_moves(from_mask=chess.BB_SQUARES[square])
    return [describe_move(board, move) for move in moves]


def parse_uci(text: str) -> chess.Move:
    """
    Parse a move in the UCI wire format.

    Args:
        text: Move string such as "e2e4" or "a7a8q"

    Returns:
        chess.Move (not yet checked for legality)

    Raises:
        InvalidMoveError: If the text is not a 4-5 character UCI move
    """
    if not isinstance(text, str):
        raise InvalidMoveError(f"Move must be a string, got {type(text).__name__}")

    candidate = text.strip()
    if not UCI_PATTERN.match(candidate):
        raise InvalidMoveError(f"Invalid move format: {text!r}")

    return chess.Move.from_uci(candidate)


def parse_legal_move(board: chess.Board, text: str) -> chess.Move:
    """
    Parse a UCI move and require it to be legal in the position.

    Raises:
        InvalidMoveError: Malformed move text
        IllegalMoveError: Well-formed but not legal here
    """
    move = parse_uci(text)
    if move not in board.legal_moves:
        raise IllegalMoveError(f"Illegal move {move.uci()} in position {board.fen()}")
    return move


def load_position(fen: str) -> chess.Board:
    """
    Build a board from a FEN string.

    Raises:
        InvalidPositionError: If python-chess rejects the FEN
    """
    try:
        return chess.Board(fen)
    except ValueError as e:
        raise InvalidPositionError(f"Invalid FEN {fen!r}: {e}") from e
