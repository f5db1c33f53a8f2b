"""
Unit Tests for Search Module

Tests for iterative deepening, minimax and deadline handling.
"""

import importlib
import random

import chess
import pytest
from chess_tutor.evaluation import ClassicalEvaluator, INFINITY, MATE_SCORE
from chess_tutor.search import SearchResult, minimax, pushed, score_move, search
from chess_tutor.search.minimax import terminal_score

FOOLS_MATE = "rnbqkbnr/pppp1ppp/8/4p3/6P1/5P2/PPPPP2P/RNBQKBNR b KQkq - 0 2"
BACK_RANK = "6k1/5ppp/8/8/8/8/8/R6K w - - 0 1"
STALEMATE = "k7/2Q5/1K6/8/8/8/8/8 b - - 0 1"

# chess_tutor.search re-exports the minimax function under the module's name
minimax_module = importlib.import_module("chess_tutor.search.minimax")


class StepClock:
    """Fake monotonic clock that jumps far ahead after `budget` reads."""

    def __init__(self, budget):
        self.budget = budget
        self.reads = 0

    def __call__(self):
        self.reads += 1
        return 0.0 if self.reads <= self.budget else 1000.0


class TestMinimax:
    """Tests for the recursive search."""

    @pytest.fixture
    def evaluator(self):
        """Create evaluator for testing."""
        return ClassicalEvaluator()

    def test_depth_zero_is_static_eval(self, evaluator):
        board = chess.Board(BACK_RANK)

        score = minimax(board, 0, -INFINITY, INFINITY, True, evaluator)

        assert score == evaluator.evaluate(board)

    def test_checkmated_white(self, evaluator):
        board = chess.Board(FOOLS_MATE)
        board.push_san("Qh4#")

        assert minimax(board, 3, -INFINITY, INFINITY, True, evaluator) == -(MATE_SCORE + 3)

    def test_stalemate_is_zero(self, evaluator):
        board = chess.Board(STALEMATE)
        assert board.is_stalemate()

        assert minimax(board, 2, -INFINITY, INFINITY, False, evaluator) == 0

    def test_terminal_score(self):
        mated = chess.Board(FOOLS_MATE)
        mated.push_san("Qh4#")

        assert terminal_score(mated, 0) == -MATE_SCORE
        assert terminal_score(mated, 4) == -(MATE_SCORE + 4)
        assert terminal_score(chess.Board(STALEMATE), 4) == 0

    def test_board_restored(self, evaluator):
        board = chess.Board("r1bqkb1r/pppp1ppp/2n2n2/4p2Q/2B1P3/8/PPPP1PPP/RNB1K1NR w KQkq - 4 4")
        fen = board.fen()

        minimax(board, 2, -INFINITY, INFINITY, True, evaluator)

        assert board.fen() == fen
        assert not board.move_stack

    def test_counts_nodes(self, evaluator):
        nodes = [0]
        minimax(chess.Board(BACK_RANK), 2, -INFINITY, INFINITY, True, evaluator, nodes)

        assert nodes[0] > 1

    def test_alpha_beta_matches_plain_minimax(self, evaluator):
        """Pruning must not change the value."""

        def plain(board, depth):
            if depth == 0:
                return evaluator.evaluate(board)
            moves = list(board.legal_moves)
            if not moves:
                return terminal_score(board, depth)
            scores = []
            for move in moves:
                with pushed(board, move):
                    scores.append(plain(board, depth - 1))
            return max(scores) if board.turn == chess.WHITE else min(scores)

        board = chess.Board("4k3/8/8/3q1r2/4P3/2N5/8/4K2Q w - - 0 1")

        assert minimax(board, 2, -INFINITY, INFINITY, True, evaluator) == plain(board, 2)


class TestPushed:
    """Tests for the scoped move/undo helper."""

    def test_undo_on_normal_exit(self):
        board = chess.Board()
        with pushed(board, chess.Move.from_uci("e2e4")):
            assert board.piece_at(chess.E4) is not None
        assert board.fen() == chess.STARTING_FEN

    def test_undo_on_exception(self):
        board = chess.Board()
        with pytest.raises(RuntimeError):
            with pushed(board, chess.Move.from_uci("e2e4")):
                raise RuntimeError("boom")
        assert board.fen() == chess.STARTING_FEN


class TestSearch:
    """Tests for the iterative-deepening root driver."""

    @pytest.fixture
    def evaluator(self):
        return ClassicalEvaluator()

    def test_mate_in_one_white(self, evaluator):
        board = chess.Board(BACK_RANK)

        result = search(board, max_depth=2, evaluator=evaluator)

        assert result.best_move == chess.Move.from_uci("a1a8")
        assert result.score >= MATE_SCORE
        assert result.depth == 2
        assert result.complete

    def test_mate_in_one_black(self, evaluator):
        board = chess.Board(FOOLS_MATE)

        result = search(board, max_depth=2, evaluator=evaluator)

        assert result.best_move == chess.Move.from_uci("d8h4")
        assert result.score <= -MATE_SCORE

        board.push(result.best_move)
        assert board.is_checkmate()

    def test_faster_mate_scores_higher(self, evaluator):
        """Mate found with more depth left scores more."""
        board = chess.Board(BACK_RANK)

        shallow = search(board, max_depth=2, evaluator=evaluator)
        deeper = search(board, max_depth=3, evaluator=evaluator)

        assert shallow.score == MATE_SCORE + 1
        assert deeper.score == MATE_SCORE + 2
        assert deeper.best_move == shallow.best_move

    def test_terminal_root_has_no_move(self, evaluator):
        board = chess.Board(FOOLS_MATE)
        board.push_san("Qh4#")

        result = search(board, max_depth=3, evaluator=evaluator)

        assert result.best_move is None
        assert result.depth == 0
        assert result.score == -MATE_SCORE

    def test_stalemate_root(self, evaluator):
        result = search(chess.Board(STALEMATE), max_depth=3, evaluator=evaluator)

        assert result.best_move is None
        assert result.score == 0

    def test_does_not_modify_board(self, evaluator):
        board = chess.Board("r1bqkb1r/pppp1ppp/2n2n2/4p2Q/2B1P3/8/PPPP1PPP/RNB1K1NR w KQkq - 4 4")
        fen = board.fen()

        search(board, max_depth=2, evaluator=evaluator)

        assert board.fen() == fen

    @pytest.mark.parametrize(
        "fen",
        [
            chess.STARTING_FEN,
            "r1bqkb1r/pppp1ppp/2n2n2/4p2Q/2B1P3/8/PPPP1PPP/RNB1K1NR b KQkq - 5 4",
            "8/P6k/8/8/8/2n5/8/K7 w - - 0 1",
        ],
    )
    def test_returns_legal_move(self, evaluator, fen):
        board = chess.Board(fen)

        result = search(board, max_depth=2, evaluator=evaluator)

        assert result.best_move in board.legal_moves
        assert result.nodes > 0

    def test_finds_hanging_queen(self, evaluator):
        board = chess.Board("4k3/8/8/3q4/4P3/8/8/4K3 w - - 0 1")

        result = search(board, max_depth=2, evaluator=evaluator)

        assert result.best_move == chess.Move.from_uci("e4d5")

    def test_deeper_search_never_regresses(self, evaluator):
        """The depth d+1 choice scores at least as well as the depth d choice at d+1."""
        board = chess.Board("4k3/8/8/3q1r2/4P3/2N5/8/4K2Q w - - 0 1")

        for depth in (1, 2):
            shallow = search(board, max_depth=depth, evaluator=evaluator)
            deeper = search(board, max_depth=depth + 1, evaluator=evaluator)
            shallow_choice_deeper = score_move(board, shallow.best_move, depth, evaluator)

            assert deeper.score >= shallow_choice_deeper

    def test_deterministic_without_rng(self, evaluator):
        board = chess.Board()

        first = search(board, max_depth=2, evaluator=evaluator)
        second = search(board, max_depth=2, evaluator=evaluator)

        assert first.best_move == second.best_move
        assert first.score == second.score

    def test_seeded_rng_is_reproducible(self, evaluator):
        board = chess.Board()

        first = search(board, max_depth=1, evaluator=evaluator, rng=random.Random(7))
        second = search(board, max_depth=1, evaluator=evaluator, rng=random.Random(7))

        assert first.best_move == second.best_move
        assert first.score == second.score


class TestRootOrdering:
    """Tests for carrying the best move to the front between depths."""

    TACTICS = "4k3/8/8/3q1r2/4P3/2N5/8/4K2Q w - - 0 1"

    @pytest.fixture
    def evaluator(self):
        return ClassicalEvaluator()

    @pytest.fixture
    def root_calls(self, monkeypatch):
        """Record (iteration depth, root move) for every root move searched."""
        real_minimax = minimax_module.minimax
        calls = []

        def spy(board, depth, *args):
            # Root positions are one ply past a move-1 FEN
            if board.ply() == 1:
                calls.append((depth + 1, board.peek()))
            return real_minimax(board, depth, *args)

        monkeypatch.setattr(minimax_module, "minimax", spy)
        return calls

    @pytest.mark.parametrize("depth", [2, 3])
    def test_previous_best_searched_first(self, evaluator, root_calls, depth):
        previous = search(chess.Board(self.TACTICS), max_depth=depth - 1, evaluator=evaluator)
        root_calls.clear()

        search(chess.Board(self.TACTICS), max_depth=depth, evaluator=evaluator)

        first_at_depth = next(move for d, move in root_calls if d == depth)
        assert first_at_depth == previous.best_move

    def test_tie_keeps_previous_best(self, monkeypatch):
        board = chess.Board()
        target = list(board.legal_moves)[-1]

        def flat_minimax(board, depth, *args):
            # Only the depth-1 pass prefers the target; deeper passes tie everywhere
            if depth == 0 and board.peek() == target:
                return 50
            return 0

        monkeypatch.setattr(minimax_module, "minimax", flat_minimax)

        result = search(board, max_depth=3)

        assert result.best_move == target
        assert result.score == 0
        assert result.depth == 3


class TestDeadline:
    """Tests for deadline handling."""

    @pytest.fixture
    def evaluator(self):
        return ClassicalEvaluator()

    def test_expired_deadline_searches_nothing(self, evaluator):
        board = chess.Board()
        first_root = next(iter(board.legal_moves))

        result = search(board, max_depth=5, deadline=0.0, evaluator=evaluator, clock=lambda: 1.0)

        assert result.depth == 0
        assert not result.complete
        assert result.best_move == first_root
        assert result.score == evaluator.evaluate(board)
        assert result.nodes == 0

    def test_no_deadline_is_complete(self, evaluator):
        result = search(chess.Board(BACK_RANK), max_depth=3, evaluator=evaluator)

        assert result.complete
        assert result.depth == 3

    @pytest.mark.parametrize("budget", [5, 30, 60])
    def test_cut_depth_is_discarded(self, evaluator, budget):
        """Whatever depth was cut, the result is exactly the last full depth's."""
        board = chess.Board("4k3/8/8/3q1r2/4P3/2N5/8/4K2Q w - - 0 1")

        result = search(
            board,
            max_depth=6,
            deadline=1.0,
            evaluator=evaluator,
            clock=StepClock(budget),
        )

        assert not result.complete
        assert result.depth < 6
        if result.depth > 0:
            reference = search(board, max_depth=result.depth, evaluator=evaluator)
            assert result.best_move == reference.best_move
            assert result.score == reference.score

    def test_result_type(self, evaluator):
        result = search(chess.Board(BACK_RANK), max_depth=1, evaluator=evaluator)

        assert isinstance(result, SearchResult)
        assert result.elapsed_ms >= 0
