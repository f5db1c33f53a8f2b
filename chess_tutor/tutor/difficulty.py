"""
Difficulty Policy

Each named difficulty is a time budget for the search plus a probability of
skipping the search altogether and playing a uniformly random legal move.
The random move is a deliberate weakening for low levels, not a fallback.

Levels:
    Beginner   200 ms   75% random
    Easy       400 ms   25% random
    Medium     700 ms    0% random
    Hard      1500 ms    0% random
    Expert    3000 ms    0% random
"""

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

import chess

from chess_tutor.config import DEFAULT_CONFIG, TutorConfig
from chess_tutor.errors import UnknownDifficultyError
from chess_tutor.evaluation.base import Evaluator
from chess_tutor.search.minimax import SearchResult, search

logger = logging.getLogger(__name__)


class Difficulty(Enum):
    """Named difficulty levels, weakest first."""
    BEGINNER = "Beginner"
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    EXPERT = "Expert"


@dataclass(frozen=True)
class DifficultyProfile:
    """Search settings for one difficulty level."""

    time_budget_ms: int
    """Wall-clock budget handed to iterative deepening"""

    random_move_probability: float
    """Chance of playing a random legal move instead of searching"""

    def __post_init__(self):
        """Validate profile after initialization."""
        if self.time_budget_ms < 0:
            raise ValueError(f"time_budget_ms must be non-negative, got {self.time_budget_ms}")

        if not 0.0 <= self.random_move_probability <= 1.0:
            raise ValueError(
                "random_move_probability must be in [0, 1], "
                f"got {self.random_move_probability}"
            )


DIFFICULTY_PROFILES = {
    Difficulty.BEGINNER: DifficultyProfile(time_budget_ms=200, random_move_probability=0.75),
    Difficulty.EASY: DifficultyProfile(time_budget_ms=400, random_move_probability=0.25),
    Difficulty.MEDIUM: DifficultyProfile(time_budget_ms=700, random_move_probability=0.0),
    Difficulty.HARD: DifficultyProfile(time_budget_ms=1500, random_move_probability=0.0),
    Difficulty.EXPERT: DifficultyProfile(time_budget_ms=3000, random_move_probability=0.0),
}


def get_difficulty(name: Union[str, Difficulty]) -> Difficulty:
    """
    Resolve a difficulty by name, case-insensitively.

    Raises:
        UnknownDifficultyError: If no level has this name
    """
    if isinstance(name, Difficulty):
        return name
    wanted = str(name).strip().lower()
    for level in Difficulty:
        if level.value.lower() == wanted:
            return level
    known = ", ".join(level.value for level in Difficulty)
    raise UnknownDifficultyError(f"Unknown difficulty {name!r} (expected one of: {known})")


def get_profile(name: Union[str, Difficulty]) -> DifficultyProfile:
    """Profile for a difficulty name or enum member."""
    return DIFFICULTY_PROFILES[get_difficulty(name)]


@dataclass(frozen=True)
class MoveChoice:
    """
    A move picked by the policy.

    Attributes:
        move: Chosen move, or None if the position has no legal moves
        randomized: True when the random-move draw short-circuited the search
        search_result: The search outcome when a search ran
    """
    move: Optional[chess.Move]
    randomized: bool = False
    search_result: Optional[SearchResult] = None


class DifficultyPolicy:
    """
    Chooses the engine's move for a difficulty level.

    Attributes:
        evaluator: Static evaluator passed to the search
        config: Tutor configuration (search depth ceiling)
        rng: Random source for the weakening draw and root shuffling
        clock: Monotonic time source used for deadlines
    """

    def __init__(
        self,
        evaluator: Optional[Evaluator] = None,
        config: TutorConfig = DEFAULT_CONFIG,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.evaluator = evaluator
        self.config = config
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock

    def choose(self, board: chess.Board, difficulty: Union[str, Difficulty]) -> MoveChoice:
        """
        Pick a move for the side to move.

        Args:
            board: Current position (not modified)
            difficulty: Level name or Difficulty member

        Returns:
            MoveChoice; move is None only for a terminal position
        """
        level = get_difficulty(difficulty)
        profile = DIFFICULTY_PROFILES[level]

        moves = list(board.legal_moves)
        if not moves:
            return MoveChoice(move=None)

        if self.rng.random() < profile.random_move_probability:
            move = self.rng.choice(moves)
            logger.debug(f"{level.value}: random move {move.uci()} instead of searching")
            return MoveChoice(move=move, randomized=True)

        deadline = self.clock() + profile.time_budget_ms / 1000.0
        result = search(
            board,
            max_depth=self.config.max_depth,
            deadline=deadline,
            evaluator=self.evaluator,
            rng=self.rng,
            clock=self.clock,
        )
        logger.debug(
            f"{level.value}: searched to depth {result.depth} in {result.elapsed_ms}ms, "
            f"best={result.best_move.uci()} score={result.score}"
        )
        return MoveChoice(move=result.best_move, search_result=result)
