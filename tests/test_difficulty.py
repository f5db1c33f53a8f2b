"""
Unit Tests for Difficulty Policy

Tests for the profile table and the random-move weakening.
"""

import dataclasses
import random

import chess
import pytest
from chess_tutor.errors import UnknownDifficultyError
from chess_tutor.search import SearchResult
from chess_tutor.tutor import difficulty as difficulty_module
from chess_tutor.tutor.difficulty import (
    DIFFICULTY_PROFILES,
    Difficulty,
    DifficultyPolicy,
    DifficultyProfile,
    get_difficulty,
    get_profile,
)

MIDDLEGAME = "r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4"


class TestProfiles:
    """Tests for the static profile table."""

    def test_table(self):
        assert get_profile("Beginner") == DifficultyProfile(200, 0.75)
        assert get_profile("Easy") == DifficultyProfile(400, 0.25)
        assert get_profile("Medium") == DifficultyProfile(700, 0.0)
        assert get_profile("Hard") == DifficultyProfile(1500, 0.0)
        assert get_profile("Expert") == DifficultyProfile(3000, 0.0)

    def test_every_level_has_a_profile(self):
        assert set(DIFFICULTY_PROFILES) == set(Difficulty)

    def test_budgets_grow_and_randomness_shrinks(self):
        profiles = [DIFFICULTY_PROFILES[level] for level in Difficulty]
        budgets = [p.time_budget_ms for p in profiles]
        randomness = [p.random_move_probability for p in profiles]

        assert budgets == sorted(budgets)
        assert randomness == sorted(randomness, reverse=True)
        assert randomness[-1] == 0.0

    @pytest.mark.parametrize("name", ["beginner", "BEGINNER", " Beginner "])
    def test_lookup_is_case_insensitive(self, name):
        assert get_difficulty(name) is Difficulty.BEGINNER

    def test_enum_member_passes_through(self):
        assert get_difficulty(Difficulty.HARD) is Difficulty.HARD

    def test_unknown_level(self):
        with pytest.raises(UnknownDifficultyError, match="Grandmaster"):
            get_profile("Grandmaster")

    def test_unknown_level_is_key_error(self):
        with pytest.raises(KeyError):
            get_profile("Grandmaster")

    @pytest.mark.parametrize("budget, probability", [(-1, 0.5), (100, -0.1), (100, 1.5)])
    def test_profile_validation(self, budget, probability):
        with pytest.raises(ValueError):
            DifficultyProfile(budget, probability)

    def test_profiles_are_read_only(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            get_profile("Easy").time_budget_ms = 10


class TestDifficultyPolicy:
    """Tests for move choice."""

    @pytest.fixture
    def fixed_search(self, monkeypatch):
        """Replace the search with an instant one that plays the first legal move."""
        calls = []

        def fake_search(board, **kwargs):
            calls.append(kwargs)
            move = next(iter(board.legal_moves))
            return SearchResult(best_move=move, score=0, depth=1, complete=True)

        monkeypatch.setattr(difficulty_module, "search", fake_search)
        return calls

    def test_terminal_position(self):
        board = chess.Board("rnbqkbnr/pppp1ppp/8/4p3/6P1/5P2/PPPPP2P/RNBQKBNR b KQkq - 0 2")
        board.push_san("Qh4#")

        choice = DifficultyPolicy(rng=random.Random(0)).choose(board, "Beginner")

        assert choice.move is None
        assert not choice.randomized

    def test_beginner_random_rate(self, fixed_search):
        """About 75% of Beginner moves skip the search."""
        board = chess.Board(MIDDLEGAME)
        policy = DifficultyPolicy(rng=random.Random(1234))
        trials = 400

        choices = [policy.choose(board, "Beginner") for _ in range(trials)]
        randomized = [c for c in choices if c.randomized]
        rate = len(randomized) / trials

        assert 0.68 < rate < 0.82
        assert len(fixed_search) == trials - len(randomized)

    def test_random_moves_are_uniform_over_legal_moves(self, fixed_search):
        board = chess.Board(MIDDLEGAME)
        legal = set(board.legal_moves)
        policy = DifficultyPolicy(rng=random.Random(99))

        picked = [policy.choose(board, "Beginner") for _ in range(600)]
        random_moves = [c.move for c in picked if c.randomized]

        assert set(random_moves) <= legal
        assert len(set(random_moves)) >= len(legal) * 3 // 4

    def test_zero_probability_always_searches(self, fixed_search):
        board = chess.Board(MIDDLEGAME)
        policy = DifficultyPolicy(rng=random.Random(5))

        choices = [policy.choose(board, "Medium") for _ in range(50)]

        assert not any(c.randomized for c in choices)
        assert all(c.search_result is not None for c in choices)

    def test_deadline_uses_budget(self, fixed_search):
        policy = DifficultyPolicy(rng=random.Random(0), clock=lambda: 10.0)

        policy.choose(chess.Board(MIDDLEGAME), "Hard")

        assert fixed_search[0]["deadline"] == pytest.approx(11.5)
        assert fixed_search[0]["max_depth"] == 10

    def test_seeded_random_choices_reproducible(self, fixed_search):
        board = chess.Board(MIDDLEGAME)

        def play(seed):
            policy = DifficultyPolicy(rng=random.Random(seed))
            return [policy.choose(board, "Beginner").move for _ in range(20)]

        first = play(3)
        second = play(3)

        assert first == second

    def test_real_search_returns_legal_move(self):
        board = chess.Board("4k3/8/8/3q4/4P3/8/8/4K3 w - - 0 1")

        choice = DifficultyPolicy(rng=random.Random(0)).choose(board, "Medium")

        assert choice.move == chess.Move.from_uci("e4d5")
        assert choice.search_result.depth >= 2
