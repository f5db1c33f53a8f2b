"""
Tutor Module

Pedagogy built on top of the search.

Key Components:
    - DifficultyPolicy: named level → time budget + random-move weakening
    - MoveQualityClassifier: centipawn loss → Best / Good / Inaccuracy / Mistake / Blunder
    - ExplanationGenerator: plain-English feedback on moves
"""

from chess_tutor.tutor.difficulty import (
    Difficulty,
    DifficultyProfile,
    DifficultyPolicy,
    DIFFICULTY_PROFILES,
    MoveChoice,
    get_difficulty,
    get_profile,
)
from chess_tutor.tutor.classifier import (
    MoveClassification,
    MoveQualityClassifier,
    QualityTier,
    tier_for_loss,
)
from chess_tutor.tutor.explain import (
    ExplanationGenerator,
    MoveFacts,
    MoveFeedback,
    MoveNarrative,
    gather_facts,
)

__all__ = [
    'Difficulty',
    'DifficultyProfile',
    'DifficultyPolicy',
    'DIFFICULTY_PROFILES',
    'MoveChoice',
    'get_difficulty',
    'get_profile',
    'MoveClassification',
    'MoveQualityClassifier',
    'QualityTier',
    'tier_for_loss',
    'ExplanationGenerator',
    'MoveFacts',
    'MoveFeedback',
    'MoveNarrative',
    'gather_facts',
]
