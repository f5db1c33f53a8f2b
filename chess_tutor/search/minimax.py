"""
Iterative Deepening Minimax with Alpha-Beta Pruning

The engine's move search. The root driver runs a complete alpha-beta pass
at depth 1, 2, 3, ... until the deadline passes or the depth ceiling is
reached, and reports the best move of the last depth that finished.

Key Concepts:
    - Minimax: White maximizes, Black minimizes; scores are White-relative
    - Alpha-Beta: Stop exploring a node once alpha >= beta
    - Iterative Deepening: Each finished depth commits a result and moves
      its best move to the front of the root list for the next depth
    - Mate Scores: +/-(MATE_SCORE + remaining depth), so faster mates score
      higher and, when losing, longer resistance is preferred

Deadline Handling:
    The clock is read only before each depth and before each root move,
    never inside the recursion. A depth cut short by the deadline is thrown
    away entirely, so moves scored at different depths are never compared.
    One slow root branch can therefore overrun the budget.

Board Discipline:
    The search mutates one private copy of the board. Every push is paired
    with exactly one pop through the pushed() context manager, including
    on pruning breaks and exceptions.

References:
    - Alpha-Beta: https://www.chessprogramming.org/Alpha-Beta
    - Iterative Deepening: https://www.chessprogramming.org/Iterative_Deepening
"""

import logging
import random
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

import chess

from chess_tutor.evaluation.base import Evaluator, INFINITY, MATE_SCORE
from chess_tutor.evaluation.classical import ClassicalEvaluator
from chess_tutor.search.ordering import order_moves

logger = logging.getLogger(__name__)

MAX_DEPTH = 10  # Practical iterative-deepening ceiling


@dataclass(frozen=True)
class SearchResult:
    """
    Outcome of a root search.

    Attributes:
        best_move: Best move of the deepest completed depth (None if terminal)
        score: Centipawns, White's perspective
        depth: Deepest fully completed depth (0 if none finished)
        complete: True if every depth up to max_depth finished
        nodes: Nodes visited, including abandoned depths
        elapsed_ms: Wall-clock time spent
    """
    best_move: Optional[chess.Move]
    score: int
    depth: int
    complete: bool
    nodes: int = 0
    elapsed_ms: int = 0


@contextmanager
def pushed(board: chess.Board, move: chess.Move) -> Iterator[chess.Board]:
    """Make a move for the duration of a with-block, always undoing it."""
    board.push(move)
    try:
        yield board
    finally:
        board.pop()


def terminal_score(board: chess.Board, depth: int) -> int:
    """
    Score of a node whose side to move has no legal moves.

    Checkmate scores MATE_SCORE + remaining depth against the side to move;
    stalemate is exactly 0.
    """
    if not board.is_check():
        return 0
    mate = MATE_SCORE + depth
    return -mate if board.turn == chess.WHITE else mate


def minimax(
    board: chess.Board,
    depth: int,
    alpha: int,
    beta: int,
    maximizing_player: bool,
    evaluator: Evaluator,
    nodes_searched: Optional[List[int]] = None,
) -> int:
    """
    Minimax search with alpha-beta pruning.

    Args:
        board: Current position (restored before returning)
        depth: Remaining search depth
        alpha: Best score the maximizer can already force
        beta: Best score the minimizer can already force
        maximizing_player: True when White is to move
        evaluator: Static evaluation used at depth 0
        nodes_searched: Optional mutable [count] incremented per node

    Returns:
        int: Score in centipawns, White's perspective
    """
    if nodes_searched is not None:
        nodes_searched[0] += 1

    if depth == 0:
        return evaluator.evaluate(board)

    moves = order_moves(board, list(board.legal_moves))
    if not moves:
        return terminal_score(board, depth)

    if maximizing_player:
        best = -INFINITY
        for move in moves:
            with pushed(board, move):
                score = minimax(board, depth - 1, alpha, beta, False, evaluator, nodes_searched)
            best = max(best, score)
            alpha = max(alpha, best)
            if alpha >= beta:
                break
        return best

    best = INFINITY
    for move in moves:
        with pushed(board, move):
            score = minimax(board, depth - 1, alpha, beta, True, evaluator, nodes_searched)
        best = min(best, score)
        beta = min(beta, best)
        if alpha >= beta:
            break
    return best


def score_move(
    board: chess.Board,
    move: chess.Move,
    depth: int,
    evaluator: Optional[Evaluator] = None,
    nodes_searched: Optional[List[int]] = None,
) -> int:
    """
    Fixed-depth score of the position reached by one move.

    Args:
        board: Position before the move (restored before returning)
        move: Legal move to score
        depth: Plies to search after the move
        evaluator: Defaults to ClassicalEvaluator

    Returns:
        int: Centipawns, White's perspective
    """
    evaluator = evaluator or ClassicalEvaluator()
    with pushed(board, move):
        return minimax(
            board,
            depth,
            -INFINITY,
            INFINITY,
            board.turn == chess.WHITE,
            evaluator,
            nodes_searched,
        )


def search(
    board: chess.Board,
    max_depth: int = MAX_DEPTH,
    deadline: Optional[float] = None,
    evaluator: Optional[Evaluator] = None,
    rng: Optional[random.Random] = None,
    clock: Callable[[], float] = time.monotonic,
) -> SearchResult:
    """
    Find the best move by iterative deepening.

    Args:
        board: Position to search (not modified; a private copy is used)
        max_depth: Deepest iteration to attempt
        deadline: Absolute time on `clock` after which no new depth or
            root move is started; None searches every depth to max_depth
        evaluator: Static evaluator (default: ClassicalEvaluator)
        rng: If given, root moves are shuffled so equal-score moves vary
        clock: Monotonic time source in seconds

    Returns:
        SearchResult of the deepest completed depth. If no depth finished
        in time, best_move is the first root move and score its static
        evaluation at the root.
    """
    start = clock()
    evaluator = evaluator or ClassicalEvaluator()
    board = board.copy()

    root_moves = list(board.legal_moves)
    if not root_moves:
        return SearchResult(
            best_move=None,
            score=terminal_score(board, 0),
            depth=0,
            complete=True,
        )

    if rng is not None:
        rng.shuffle(root_moves)

    maximizing = board.turn == chess.WHITE
    nodes = [0]

    best_move = root_moves[0]
    best_score = evaluator.evaluate(board)
    depth_reached = 0
    complete = True

    for depth in range(1, max_depth + 1):
        if deadline is not None and clock() >= deadline:
            complete = False
            break

        depth_best_move = root_moves[0]
        depth_best_score = -INFINITY if maximizing else INFINITY
        finished = True

        for move in root_moves:
            if deadline is not None and clock() >= deadline:
                finished = False
                break

            with pushed(board, move):
                score = minimax(
                    board,
                    depth - 1,
                    -INFINITY,
                    INFINITY,
                    not maximizing,
                    evaluator,
                    nodes,
                )

            if (maximizing and score > depth_best_score) or (
                not maximizing and score < depth_best_score
            ):
                depth_best_score = score
                depth_best_move = move

        if not finished:
            logger.debug(f"Depth {depth} abandoned at deadline after {nodes[0]} nodes")
            complete = False
            break

        best_move = depth_best_move
        best_score = depth_best_score
        depth_reached = depth
        root_moves.remove(best_move)
        root_moves.insert(0, best_move)

        logger.debug(
            f"Depth {depth} complete: best={best_move.uci()} score={best_score} "
            f"nodes={nodes[0]} time={int((clock() - start) * 1000)}ms"
        )

    return SearchResult(
        best_move=best_move,
        score=best_score,
        depth=depth_reached,
        complete=complete,
        nodes=nodes[0],
        elapsed_ms=int((clock() - start) * 1000),
    )
