"""
Move Explanations

Turns search output into plain-English feedback. No search happens here:
the generator re-derives simple facts about a move from the rules engine
(checkmate, check, capture, castling, promotion, en passant, fork, central
destination, development off the back rank) and picks sentences by a fixed
priority:

    checkmate > castle > promotion > en passant > capture with check >
    capture > check > fork > development > generic

A "fork" is two or more enemy pieces (kings excluded) attacked from the
destination square that the piece did not already attack from its origin.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import chess

from chess_tutor.board.moves import MoveFlag, VerboseMove, describe_move
from chess_tutor.config import DEFAULT_CONFIG, TutorConfig
from chess_tutor.errors import IllegalMoveError
from chess_tutor.tutor.classifier import MoveClassification, QualityTier

logger = logging.getLogger(__name__)

PIECE_NAMES = {
    chess.PAWN: "pawn",
    chess.KNIGHT: "knight",
    chess.BISHOP: "bishop",
    chess.ROOK: "rook",
    chess.QUEEN: "queen",
    chess.KING: "king",
}

# Teaching values in whole points
PIECE_POINTS = {
    chess.PAWN: 1,
    chess.KNIGHT: 3,
    chess.BISHOP: 3,
    chess.ROOK: 5,
    chess.QUEEN: 9,
    chess.KING: 0,
}

CENTRAL_FILES = range(2, 6)  # c-f
CENTRAL_RANKS = range(2, 6)  # 3-6

OPENING_PLIES = 20

HEADLINES = {
    QualityTier.BEST: "★ Best move!",
    QualityTier.GOOD: "✓ Good move!",
    QualityTier.INACCURACY: "△ Slight inaccuracy",
    QualityTier.MISTAKE: "✗ Mistake",
    QualityTier.BLUNDER: "✗✗ Blunder!",
}


def piece_name(piece_type: Optional[int]) -> str:
    return PIECE_NAMES.get(piece_type, "piece")


def points(n: int) -> str:
    return f"{n} pt" if n == 1 else f"{n} pts"


def pawns(diff: int) -> str:
    """Centipawns as a pawn count, e.g. '1.5 pawns'."""
    value = diff / 100.0
    return f"{value:.1f} pawn" if diff == 100 else f"{value:.1f} pawns"


def is_central(square: int) -> bool:
    return chess.square_file(square) in CENTRAL_FILES and chess.square_rank(square) in CENTRAL_RANKS


def is_back_rank(square: int, color: bool) -> bool:
    return chess.square_rank(square) == (0 if color == chess.WHITE else 7)


@dataclass(frozen=True)
class MoveFacts:
    """
    Facts about a move, read from the position after it.

    Attributes:
        move: VerboseMove in the position before the move
        after: Position after the move
        checkmate: The move mates
        check: The move gives check (including mate)
        forked: Enemy pieces newly attacked by the moved piece
        central: Destination lies in the c3-f6 block
        undeveloped: A knight or bishop leaving its own back rank
    """
    move: VerboseMove
    after: chess.Board
    checkmate: bool
    check: bool
    forked: int
    central: bool
    undeveloped: bool

    @property
    def piece(self) -> str:
        return piece_name(self.move.piece)

    @property
    def trade_balance(self) -> int:
        """Captured points minus mover points; 0 for quiet moves."""
        if self.move.captured is None:
            return 0
        return PIECE_POINTS[self.move.captured] - PIECE_POINTS[self.move.piece]


def count_new_attacks(before: chess.Board, after: chess.Board, move: chess.Move, color: bool) -> int:
    """Enemy non-king pieces attacked from move.to_square but not from move.from_square."""
    enemy = not color
    targets_after = after.attacks_mask(move.to_square) & after.occupied_co[enemy] & ~after.kings
    targets_before = before.attacks_mask(move.from_square) & before.occupied_co[enemy]
    return chess.popcount(targets_after & ~targets_before & chess.BB_ALL)


def gather_facts(board: chess.Board, move: chess.Move) -> MoveFacts:
    """
    Describe a legal move and the position it leads to.

    Args:
        board: Position before the move (not modified)
        move: Legal move

    Raises:
        IllegalMoveError: If the move is not legal
    """
    verbose = describe_move(board, move)
    after = board.copy()
    after.push(move)
    return MoveFacts(
        move=verbose,
        after=after,
        checkmate=after.is_checkmate(),
        check=after.is_check(),
        forked=count_new_attacks(board, after, move, verbose.color),
        central=is_central(move.to_square),
        undeveloped=(
            verbose.piece in (chess.KNIGHT, chess.BISHOP)
            and is_back_rank(move.from_square, verbose.color)
        ),
    )


@dataclass(frozen=True)
class MoveNarrative:
    """Short tutor commentary on a move."""
    headline: str
    detail: str


@dataclass(frozen=True)
class MoveFeedback:
    """
    Feedback shown to the student after their move.

    Attributes:
        tier: Quality tier of the move
        headline: One-line verdict
        detail: What the move does, how good it was, and an optional tip
        better_move: Engine's move (UCI) for mistakes and blunders only
    """
    tier: QualityTier
    headline: str
    detail: str
    better_move: Optional[str] = None


class ExplanationGenerator:
    """
    Builds explanations for suggested moves, the engine's own moves,
    and the student's moves.

    Attributes:
        config: Supplies the correction threshold for gap wording
    """

    def __init__(self, config: TutorConfig = DEFAULT_CONFIG):
        self.config = config

    # ------------------------------------------------------------------
    # Better-move explanation
    # ------------------------------------------------------------------

    def explain_better(
        self,
        board: chess.Board,
        played: chess.Move,
        better: chess.Move,
        diff: Optional[int] = None,
    ) -> str:
        """
        Explain why `better` is stronger than `played`.

        Args:
            board: Position before either move
            played: Move the student played
            better: Move the engine prefers
            diff: Optional centipawn gap, reported in pawns when given

        Returns:
            Multi-line text
        """
        played_san = self._san_or_uci(board, played)
        try:
            facts = gather_facts(board, better)
        except IllegalMoveError:
            logger.warning(f"Cannot explain illegal move {better.uci()} in {board.fen()}")
            return f"Better was {better.uci()} instead of {played_san}."

        san = facts.move.san
        lines = [f"Better move: {san}  (you played: {played_san})", ""]

        if diff is not None and diff > self.config.correction_threshold:
            if diff > 5000:
                lines.append("This move leads to a decisive advantage.")
            else:
                lines.append(f"This is about {pawns(diff)} stronger.")
            lines.append("")

        lines.extend(self._better_reasons(facts))
        return "\n".join(lines)

    def _better_reasons(self, facts: MoveFacts) -> List[str]:
        move = facts.move
        san = move.san
        if facts.checkmate:
            return [f"{san} delivers checkmate immediately — the game would have been won on the spot!"]
        if move.is_castle:
            return ["Castling here would have sheltered the king and activated the rook — two goals in one move."]
        if MoveFlag.PROMOTION in move.flags:
            return [f"{san} promotes the pawn to a {piece_name(move.promotion)}, a huge material gain."]
        if MoveFlag.EN_PASSANT in move.flags:
            return [f"{san} captures en passant, removing the pawn that just slipped past."]
        if move.is_capture and facts.check:
            return [
                f"{san} captures the {piece_name(move.captured)} with check, "
                "so your opponent has no time to recapture on their own terms."
            ]
        if move.is_capture:
            mine = PIECE_POINTS[move.piece]
            theirs = PIECE_POINTS[move.captured]
            if theirs > mine:
                return [
                    f"{san} wins the {piece_name(move.captured)} ({points(theirs)}) "
                    f"with your {facts.piece} ({points(mine)}) — free material!"
                ]
            if theirs == mine:
                return [f"{san} makes an equal trade that was favorable in this specific position."]
            return [f"{san} captures the {piece_name(move.captured)} to clear an important square."]
        if facts.check:
            reasons = [f"{san} gives check, forcing your opponent to react rather than make their own threats."]
            if facts.forked >= 2:
                reasons.append(f"It simultaneously attacks {facts.forked} pieces — a check combined with a fork!")
            return reasons
        if facts.forked >= 2:
            return [
                f"{san} creates a fork — the {facts.piece} attacks "
                f"{facts.forked} of your opponent's pieces at once!"
            ]
        if facts.undeveloped:
            return [f"{san} develops the {facts.piece} off the back rank, bringing another piece into play."]
        if facts.forked == 1:
            return [f"{san} improves the {facts.piece}'s activity while threatening an opponent piece."]
        if facts.central:
            return [f"{san} places the {facts.piece} on a strong central square."]
        return [f"{san} places the {facts.piece} on a more active square, controlling key areas of the board."]

    # ------------------------------------------------------------------
    # Engine move narration
    # ------------------------------------------------------------------

    def narrate_own_move(self, board: chess.Board, move: chess.Move) -> MoveNarrative:
        """
        Describe the engine's move to the student ("notice that...").

        Args:
            board: Position before the engine's move
            move: The engine's move

        Returns:
            MoveNarrative with headline and detail
        """
        try:
            facts = gather_facts(board, move)
        except IllegalMoveError:
            logger.warning(f"Cannot narrate illegal move {move.uci()} in {board.fen()}")
            return MoveNarrative(headline="I made a move.", detail="")

        verbose = facts.move
        san = verbose.san
        mine = facts.piece

        if facts.checkmate:
            return MoveNarrative(
                headline=f"I played {san} — checkmate.",
                detail="The king is in check with no way to escape. Game over.",
            )

        if verbose.is_castle:
            side = "kingside" if MoveFlag.KINGSIDE_CASTLE in verbose.flags else "queenside"
            return MoveNarrative(
                headline=f"I castled {side}.",
                detail=(
                    "Notice: castling puts the king behind a wall of pawns and brings the rook "
                    "toward the center. Try to castle within the first 10–15 moves."
                ),
            )

        if MoveFlag.PROMOTION in verbose.flags:
            promoted = piece_name(verbose.promotion)
            return MoveNarrative(
                headline=f"I promoted a pawn with {san}.",
                detail=(
                    f"Notice: my pawn reached the last rank and became a {promoted}. "
                    "Passed pawns close to promotion must be stopped early."
                ),
            )

        if MoveFlag.EN_PASSANT in verbose.flags:
            return MoveNarrative(
                headline=f"I captured en passant with {san}.",
                detail=(
                    "Notice: a pawn that advances two squares can be captured as if it had moved "
                    "only one — but only on the very next move."
                ),
            )

        if verbose.is_capture and facts.check:
            detail = (
                f"Notice: I took your {piece_name(verbose.captured)} and your king is now in check, "
                "so you must deal with the check before anything else."
            )
            return MoveNarrative(
                headline=f"I captured your {piece_name(verbose.captured)} with {san}, giving check!",
                detail=self._with_fork_note(detail, facts),
            )

        if verbose.is_capture:
            captured = piece_name(verbose.captured)
            my_val = PIECE_POINTS[verbose.piece]
            their_val = PIECE_POINTS[verbose.captured]
            if their_val > my_val:
                detail = (
                    f"Notice: I won material — I traded my {mine} ({points(my_val)}) for your "
                    f"{captured} ({points(their_val)}). When a piece is unprotected, it can be "
                    "captured for a gain."
                )
            elif their_val == my_val:
                detail = (
                    "I made an equal exchange. Equal trades are often fine, but consider which "
                    "player's remaining pieces are better placed."
                )
            else:
                detail = f"I captured your {captured} for a positional reason even though it's a less-valuable piece."
            return MoveNarrative(
                headline=f"I captured your {captured} with {san}.",
                detail=self._with_fork_note(detail, facts),
            )

        if facts.check:
            detail = (
                "Notice: your king is now in check — you must respond by moving the king, "
                f"blocking, or capturing my {mine}."
            )
            if facts.forked >= 1:
                plural = "s" if facts.forked > 1 else ""
                detail += (
                    f" My {mine} also attacks {facts.forked} other piece{plural} — a fork combined "
                    "with check is very hard to defend!"
                )
            return MoveNarrative(headline=f"I played {san}, giving check!", detail=detail)

        if facts.forked >= 2:
            return MoveNarrative(
                headline=f"I played {san}, creating a fork!",
                detail=(
                    f"Notice: my {mine} on {verbose.to_name} now attacks {facts.forked} of your "
                    "pieces simultaneously. When facing a fork you can usually save only one — "
                    "try to spot forks before they happen."
                ),
            )

        if facts.undeveloped:
            if facts.after.ply() <= OPENING_PLIES:
                detail = (
                    "In the opening, developing pieces quickly gives them more influence over the "
                    "board. Central squares — d and e files — are especially valuable."
                )
            else:
                detail = f"My {mine} was idle on the back rank; now it joins the game."
            return MoveNarrative(
                headline=f"I developed my {mine} to {verbose.to_name}.",
                detail=detail,
            )

        if facts.forked == 1:
            return MoveNarrative(
                headline=f"I played {san}.",
                detail=f"My {mine} now threatens one of your pieces. Make sure it's protected or move it to safety.",
            )

        return MoveNarrative(
            headline=f"I played {san}.",
            detail=f"I'm improving my {mine}'s position, giving it more scope over the board.",
        )

    @staticmethod
    def _with_fork_note(detail: str, facts: MoveFacts) -> str:
        if facts.forked >= 2:
            detail += (
                f" Notice also: my {facts.piece} on {facts.move.to_name} now threatens "
                f"{facts.forked} of your pieces — a fork!"
            )
        return detail

    # ------------------------------------------------------------------
    # Student move feedback
    # ------------------------------------------------------------------

    def analyze_player_move(
        self,
        board: chess.Board,
        played: chess.Move,
        classification: MoveClassification,
    ) -> MoveFeedback:
        """
        Feedback for the student's move given its classification.

        Args:
            board: Position before the move
            played: The student's move
            classification: Output of MoveQualityClassifier.classify()

        Returns:
            MoveFeedback; better_move is only set for mistakes and blunders

        Raises:
            IllegalMoveError: If the move is not legal
        """
        facts = gather_facts(board, played)
        tier = classification.tier

        detail = f"{self._what_it_does(facts)} {self._assessment(tier, classification.diff)}"
        tip = None if facts.checkmate else self._opening_tip(facts)
        if tip:
            detail += f"\n\nTip: {tip}"

        correct = tier in (QualityTier.MISTAKE, QualityTier.BLUNDER)
        return MoveFeedback(
            tier=tier,
            headline=HEADLINES[tier],
            detail=detail,
            better_move=classification.better_move if correct else None,
        )

    @staticmethod
    def _what_it_does(facts: MoveFacts) -> str:
        move = facts.move
        square = move.to_name
        if facts.checkmate:
            return f"Your {facts.piece} delivers checkmate!"
        if move.is_castle:
            side = "kingside" if MoveFlag.KINGSIDE_CASTLE in move.flags else "queenside"
            return f"You castle {side}, tucking your king to safety."
        if MoveFlag.PROMOTION in move.flags:
            return f"Your pawn promotes to a {piece_name(move.promotion)}!"
        if MoveFlag.EN_PASSANT in move.flags:
            return "En passant — you capture the pawn diagonally even though the target square looked empty."
        if move.is_capture and facts.check:
            return f"You capture the {piece_name(move.captured)} on {square} and give check!"

        if move.is_capture:
            balance = facts.trade_balance
            if balance > 0:
                trade = "winning material"
            elif balance == 0:
                trade = "an equal trade"
            else:
                trade = "taking a less-valuable piece"
            text = f"You capture the {piece_name(move.captured)} on {square} ({trade})."
        elif facts.check:
            text = f"Your {facts.piece} moves to {square}, giving check!"
        elif facts.forked >= 2:
            return (
                f"Your {facts.piece} on {square} now threatens {facts.forked} "
                "opponent pieces at once — a fork!"
            )
        elif facts.undeveloped:
            text = f"You develop your {facts.piece} off the back rank."
        elif move.piece == chess.PAWN and facts.central:
            text = f"You advance your pawn to {square}, contesting the center."
        else:
            text = f"You move your {facts.piece} to {square}."
        return text

    @staticmethod
    def _assessment(tier: QualityTier, diff: int) -> str:
        if tier == QualityTier.BEST:
            return "This is the engine's top choice — excellent!"
        if tier == QualityTier.GOOD:
            return "Strong play!"
        if tier == QualityTier.INACCURACY:
            return (
                f"There was a slightly better option (about {pawns(diff)} stronger), "
                "but your move is still reasonable."
            )
        if tier == QualityTier.MISTAKE:
            return f"This loses about {pawns(diff)} of advantage. Let's see what was better."
        return f"This is a serious error — about {pawns(diff)} lost. Let's look at the right move."

    @staticmethod
    def _opening_tip(facts: MoveFacts) -> Optional[str]:
        ply = facts.after.ply()
        if ply > OPENING_PLIES:
            return None

        move = facts.move
        if move.piece == chess.QUEEN and ply <= 8:
            return (
                "avoid bringing your queen out early — it becomes a target and you lose time "
                "retreating it."
            )
        if move.piece == chess.KNIGHT and chess.square_file(move.to_square) in (0, 7):
            return (
                '"A knight on the rim is dim" — edge squares limit the knight to 2–4 moves. '
                "Central files (c–f) are far stronger."
            )
        if (
            move.piece == chess.PAWN
            and chess.square_file(move.to_square) not in (3, 4)
            and has_undeveloped_minors(facts.after, move.color)
        ):
            return "develop your knights and bishops before pushing flank pawns."
        return None

    @staticmethod
    def _san_or_uci(board: chess.Board, move: chess.Move) -> str:
        if move in board.legal_moves:
            return board.san(move)
        return move.uci()


def has_undeveloped_minors(board: chess.Board, color: bool) -> bool:
    """True if a knight or bishop of `color` still stands on its home square."""
    home = (
        [chess.B1, chess.G1, chess.C1, chess.F1]
        if color == chess.WHITE
        else [chess.B8, chess.G8, chess.C8, chess.F8]
    )
    for square in home:
        piece = board.piece_at(square)
        if piece and piece.color == color and piece.piece_type in (chess.KNIGHT, chess.BISHOP):
            return True
    return False
