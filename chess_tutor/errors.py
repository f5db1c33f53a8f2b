"""
Exception hierarchy for the tutor engine.

Bad inputs raise ValueError subclasses so callers that already guard
python-chess parsing (which raises ValueError) keep working unchanged.
"""


class TutorError(Exception):
    """Base class for every error raised by chess_tutor."""


class InvalidPositionError(TutorError, ValueError):
    """FEN string rejected by the rules engine."""


class InvalidMoveError(TutorError, ValueError):
    """Move text does not match the 4-5 character UCI wire format."""


class IllegalMoveError(InvalidMoveError):
    """Well-formed move that is not in the position's legal-move enumeration."""


class UnknownDifficultyError(TutorError, KeyError):
    """Difficulty name missing from the profile table."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable
        return str(self.args[0]) if self.args else ""


class StaleResultError(TutorError):
    """A background computation finished after a newer request superseded it."""
