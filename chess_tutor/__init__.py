"""
Chess Tutor Engine

The opponent engine and move-quality tutor behind a chess teaching app.
It plays the opposing side at a named difficulty, grades the student's
moves by centipawn loss, and explains the reasoning in plain English.

## Architecture

The package is organized into several key modules:

1. **board**: Move descriptions and wire format
   - VerboseMove: one closed, tagged shape for a move's facts
   - UCI move parsing/validation against the legal-move enumeration

2. **evaluation**: Static position evaluation
   - Abstract Evaluator interface
   - ClassicalEvaluator: material + piece-square tables

3. **search**: Search algorithms
   - Iterative deepening over a wall-clock deadline
   - Minimax with alpha-beta pruning
   - MVV-LVA move ordering

4. **tutor**: Pedagogy built on top of search
   - DifficultyPolicy: time budget + random-move weakening
   - MoveQualityClassifier: centipawn loss to Best..Blunder
   - ExplanationGenerator: natural-language feedback

5. **api / workers**: The FEN-in, UCI-out surface and background
   computation units for the UI

6. **uci**: Universal Chess Interface front-end

python-chess is the rules engine: legality, check detection, FEN and SAN
are never re-implemented here.

## Quick Start

```python
from chess_tutor import compute_best_move, classify_played_move

move = compute_best_move("6k1/5ppp/8/8/8/8/8/3QK3 w - - 0 1", "Expert", "w")
print(move)  # d1d8

result = classify_played_move("6k1/5ppp/2n5/8/8/8/8/3QK3 w - - 0 1", "d1d4", "w")
print(result.tier, result.better_move, result.diff)
```

## Version

0.1.0
"""

__version__ = "0.1.0"
__license__ = "MIT"

from chess_tutor.api import (
    analyze_player_move,
    compute_best_move,
    classify_played_move,
    explain_better_move,
    narrate_engine_move,
)
from chess_tutor.errors import (
    TutorError,
    InvalidPositionError,
    InvalidMoveError,
    IllegalMoveError,
    UnknownDifficultyError,
    StaleResultError,
)

__all__ = [
    'analyze_player_move',
    'compute_best_move',
    'classify_played_move',
    'explain_better_move',
    'narrate_engine_move',
    'TutorError',
    'InvalidPositionError',
    'InvalidMoveError',
    'IllegalMoveError',
    'UnknownDifficultyError',
    'StaleResultError',
]
