"""
Main entry point for running the tutor as a UCI engine.

Usage:
    python -m chess_tutor.uci
"""

from chess_tutor.uci.interface import main

if __name__ == "__main__":
    main()
