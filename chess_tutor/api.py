"""
Core API

The FEN-in, UCI-out surface used by the UI. Every call builds its own
board from the FEN, so concurrent calls share no mutable state.

Functions:
    compute_best_move(fen, difficulty, side) -> "e2e4" | None
    classify_played_move(fen_before, played, side) -> MoveClassification
    explain_better_move(fen_before, played, better) -> str
    narrate_engine_move(fen_before, move) -> MoveNarrative
    analyze_player_move(fen_before, played, side) -> MoveFeedback
"""

import logging
import random
from typing import Optional, Union

import chess

from chess_tutor.board.moves import load_position, parse_legal_move, parse_uci
from chess_tutor.config import DEFAULT_CONFIG, TutorConfig
from chess_tutor.tutor.classifier import MoveClassification, MoveQualityClassifier
from chess_tutor.tutor.difficulty import Difficulty, DifficultyPolicy
from chess_tutor.tutor.explain import ExplanationGenerator, MoveFeedback, MoveNarrative

logger = logging.getLogger(__name__)

Side = Union[str, bool]

SIDE_NAMES = {
    "w": chess.WHITE,
    "white": chess.WHITE,
    "b": chess.BLACK,
    "black": chess.BLACK,
}


def parse_side(side: Side) -> bool:
    """
    Normalize a side given as 'w'/'b', 'white'/'black' or a chess color.

    Raises:
        ValueError: For anything else
    """
    if isinstance(side, bool):
        return side
    try:
        return SIDE_NAMES[str(side).strip().lower()]
    except KeyError:
        raise ValueError(f"Invalid side {side!r}, expected 'w' or 'b'") from None


def _board_for_side(fen: str, side: Side) -> chess.Board:
    board = load_position(fen)
    color = parse_side(side)
    if board.turn != color:
        raise ValueError(
            f"Side {chess.COLOR_NAMES[color]} is not to move in {fen!r}"
        )
    return board


def compute_best_move(
    fen: str,
    difficulty: Union[str, Difficulty],
    side: Side,
    rng: Optional[random.Random] = None,
    config: TutorConfig = DEFAULT_CONFIG,
) -> Optional[str]:
    """
    Choose the engine's move.

    Args:
        fen: Current position
        difficulty: Level name ("Beginner" .. "Expert")
        side: Side the engine plays; must be the side to move
        rng: Random source (seed it for reproducible play)

    Returns:
        UCI move string, or None when the position has no legal moves

    Raises:
        InvalidPositionError: Malformed FEN
        UnknownDifficultyError: Unknown level name
        ValueError: Side is not the side to move
    """
    board = _board_for_side(fen, side)
    policy = DifficultyPolicy(config=config, rng=rng)
    choice = policy.choose(board, difficulty)
    if choice.move is None:
        logger.info(f"No legal moves in {fen!r}")
        return None
    return choice.move.uci()


def classify_played_move(
    fen_before: str,
    played: str,
    side: Side,
    config: TutorConfig = DEFAULT_CONFIG,
) -> MoveClassification:
    """
    Grade the student's move.

    Raises:
        InvalidPositionError: Malformed FEN
        InvalidMoveError: Malformed move text
        IllegalMoveError: Move not legal in the position
        ValueError: Side is not the side to move
    """
    board = _board_for_side(fen_before, side)
    move = parse_legal_move(board, played)
    return MoveQualityClassifier(config=config).classify(board, move, board.turn)


def explain_better_move(
    fen_before: str,
    played: str,
    better: str,
    diff: Optional[int] = None,
    config: TutorConfig = DEFAULT_CONFIG,
) -> str:
    """Explain why `better` beats `played` in the position before the move."""
    board = load_position(fen_before)
    return ExplanationGenerator(config).explain_better(board, parse_uci(played), parse_uci(better), diff)


def narrate_engine_move(fen_before: str, move: str) -> MoveNarrative:
    """Describe the engine's move in the tutor's voice."""
    board = load_position(fen_before)
    return ExplanationGenerator().narrate_own_move(board, parse_uci(move))


def analyze_player_move(
    fen_before: str,
    played: str,
    side: Side,
    classification: Optional[MoveClassification] = None,
    config: TutorConfig = DEFAULT_CONFIG,
) -> MoveFeedback:
    """
    Headline and detail for the student's move.

    The classification is computed when not supplied.
    """
    board = _board_for_side(fen_before, side)
    move = parse_legal_move(board, played)
    if classification is None:
        classification = MoveQualityClassifier(config=config).classify(board, move, board.turn)
    return ExplanationGenerator(config).analyze_player_move(board, move, classification)
