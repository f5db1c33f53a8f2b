"""
Tutor engine configuration.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TutorConfig:
    """Search and classification settings shared by every request.

    The table is process-wide and read-only; build a new instance to
    experiment with different thresholds.
    """

    # Search
    max_depth: int = 10
    """Iterative-deepening ceiling (plies)"""

    classification_depth: int = 2
    """Fixed depth used to score the played move and the best move"""

    # Centipawn-loss tiers (inclusive upper bounds)
    best_threshold: int = 5
    """diff <= this is Best"""

    good_threshold: int = 30
    """diff <= this is Good"""

    inaccuracy_threshold: int = 100
    """diff <= this is Inaccuracy"""

    mistake_threshold: int = 300
    """diff <= this is Mistake, anything above is Blunder"""

    correction_threshold: int = 30
    """A better move is suggested only when diff exceeds this"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.max_depth <= 0:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")

        if self.classification_depth <= 0:
            raise ValueError(
                f"classification_depth must be positive, got {self.classification_depth}"
            )

        thresholds = [
            self.best_threshold,
            self.good_threshold,
            self.inaccuracy_threshold,
            self.mistake_threshold,
        ]
        if thresholds[0] < 0:
            raise ValueError(f"best_threshold must be non-negative, got {self.best_threshold}")

        if any(lower >= upper for lower, upper in zip(thresholds, thresholds[1:])):
            raise ValueError(f"quality thresholds must be strictly increasing, got {thresholds}")

        if self.correction_threshold < 0:
            raise ValueError(
                f"correction_threshold must be non-negative, got {self.correction_threshold}"
            )


DEFAULT_CONFIG = TutorConfig()
