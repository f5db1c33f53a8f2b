"""
UCI Protocol Interface

Lets the tutor engine play inside any UCI chess GUI at a chosen difficulty.

Protocol Flow:
    GUI → "uci"
    Engine → "id name ChessTutor 0.1.0"
    Engine → "option name Difficulty type combo default Medium var Beginner ..."
    Engine → "uciok"
    GUI → "setoption name Difficulty value Beginner"
    GUI → "position startpos moves e2e4"
    GUI → "go"
    Engine → "info depth 4 score cp 25 nodes 12345 time 198"
    Engine → "bestmove e7e5"

Reference:
    UCI Protocol: https://www.chessprogramming.org/UCI
"""

from chess_tutor.uci.interface import UCIEngine

__all__ = ['UCIEngine']
