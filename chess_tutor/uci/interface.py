"""
UCI Protocol Implementation

UCI Commands Supported:
    - uci: Identify engine and list options
    - isready: Synchronization check
    - setoption name Difficulty value <level>: Choose the difficulty
    - ucinewgame: Start new game
    - position: Set board position
    - go [depth N] [movetime N]: Start searching
    - stop: Wait for the running search
    - quit: Shutdown engine

Search Limits:
    A bare "go" plays at the selected difficulty: its time budget, and its
    chance of answering with a random move. "go depth N" and/or
    "go movetime N" run a plain search with those limits instead.

Threading:
    - Main thread: Listen for UCI commands
    - Search thread: Run the search on a copy of the board
    The search cannot be interrupted mid-depth, so "stop" waits for it.
"""

import logging
import random
import sys
import threading
import time
from pathlib import Path
from typing import Optional

import chess

from chess_tutor import __version__
from chess_tutor.board.moves import parse_legal_move
from chess_tutor.config import DEFAULT_CONFIG, TutorConfig
from chess_tutor.errors import InvalidMoveError, UnknownDifficultyError
from chess_tutor.evaluation.classical import ClassicalEvaluator
from chess_tutor.search.minimax import SearchResult, search
from chess_tutor.tutor.difficulty import Difficulty, DifficultyPolicy, get_difficulty

LOG_DIR = Path.home() / ".chess_tutor"


def setup_logger(debug=True, log_dir: Optional[Path] = None):
    """
    Setup file-based logger for UCI debugging.

    Stdout belongs to the protocol, so everything goes to a file.

    Args:
        debug: If True, log at DEBUG level; otherwise INFO level
        log_dir: Directory for engine.log (default: ~/.chess_tutor)

    Returns:
        Configured logger instance
    """
    log_dir = Path(log_dir) if log_dir is not None else LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "engine.log"

    logger = logging.getLogger("chess_tutor")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    logger.handlers.clear()

    handler = logging.FileHandler(log_file, mode='w')
    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


class UCIEngine:
    """
    UCI front-end for the tutor engine.

    Attributes:
        board: Current chess position
        difficulty: Level used by a bare "go"
        evaluator: Position evaluation function
        searching: Flag indicating if search is in progress
        search_thread: Background thread for search
    """

    def __init__(
        self,
        config: TutorConfig = DEFAULT_CONFIG,
        rng: Optional[random.Random] = None,
        debug=True,
        log_dir: Optional[Path] = None,
    ):
        """
        Initialize UCI engine.

        Args:
            config: Tutor configuration (depth ceiling)
            rng: Random source for difficulty weakening (default: unseeded)
            debug: Enable debug logging (default: True)
            log_dir: Log directory (default: ~/.chess_tutor)
        """
        self.board = chess.Board()
        self.config = config
        self.evaluator = ClassicalEvaluator()
        self.rng = rng if rng is not None else random.Random()
        self.difficulty = Difficulty.MEDIUM

        self.searching = False
        self.search_thread: Optional[threading.Thread] = None

        self.name = "ChessTutor"
        self.version = __version__

        self.logger = setup_logger(debug=debug, log_dir=log_dir)
        self.logger.info("=== ChessTutor Engine Started ===")

    def run(self):
        """
        Main UCI command loop.

        Listens for UCI commands on stdin and responds on stdout.
        Runs until 'quit' command or EOF.
        """
        while True:
            try:
                command = input().strip()

                if not command:
                    continue

                self.logger.debug(f">>> {command}")

                tokens = command.split()
                cmd = tokens[0].lower()

                if cmd == "uci":
                    self.handle_uci()

                elif cmd == "isready":
                    self.handle_isready()

                elif cmd == "setoption":
                    self.handle_setoption(tokens)

                elif cmd == "ucinewgame":
                    self.handle_ucinewgame()

                elif cmd == "position":
                    self.handle_position(tokens)

                elif cmd == "go":
                    self.handle_go(tokens)

                elif cmd == "stop":
                    self.handle_stop()

                elif cmd == "quit":
                    self.handle_quit()
                    break

                else:
                    # Unknown command - UCI spec says to ignore
                    self.logger.debug(f"Unknown command ignored: {command}")

            except EOFError:
                self.logger.info("EOF received, shutting down")
                break
            except Exception as e:
                self.logger.error(f"Command error: {e}", exc_info=True)
                print(f"# Error: {e}", file=sys.stderr)

    def send(self, line: str):
        """Write one protocol line to stdout."""
        print(line)
        sys.stdout.flush()
        self.logger.debug(f"<<< {line}")

    def handle_uci(self):
        """Handle 'uci' command - identify engine and advertise options."""
        self.logger.info("Handling: uci")

        levels = " ".join(f"var {level.value}" for level in Difficulty)
        self.send(f"id name {self.name} {self.version}")
        self.send("id author ChessTutor developers")
        self.send(f"option name Difficulty type combo default {self.difficulty.value} {levels}")
        self.send("uciok")

    def handle_isready(self):
        """Handle 'isready' command - synchronization."""
        self.logger.info("Handling: isready")
        self.send("readyok")

    def handle_setoption(self, tokens):
        """
        Handle 'setoption name <id> value <x>'.

        Only the Difficulty option is recognized; others are ignored.
        """
        self.logger.info(f"Handling: setoption {' '.join(tokens[1:])}")

        try:
            name_index = tokens.index("name")
            value_index = tokens.index("value")
        except ValueError:
            self.logger.warning("setoption without name/value ignored")
            return

        name = " ".join(tokens[name_index + 1:value_index]).lower()
        value = " ".join(tokens[value_index + 1:])

        if name != "difficulty":
            self.logger.debug(f"Unknown option ignored: {name}")
            return

        try:
            self.difficulty = get_difficulty(value)
        except UnknownDifficultyError as e:
            self.logger.error(str(e))
            print(f"# {e}", file=sys.stderr)
            return

        self.logger.info(f"Difficulty set to {self.difficulty.value}")

    def handle_ucinewgame(self):
        """Handle 'ucinewgame' command - reset for new game."""
        self.logger.info("Handling: ucinewgame - resetting board")
        self.board = chess.Board()

    def handle_position(self, tokens):
        """
        Handle 'position' command - set board position.

        Formats:
            position startpos
            position startpos moves e2e4 e7e5
            position fen <FEN string>
            position fen <FEN string> moves e2e4

        An illegal or malformed move stops move application; the moves
        before it stay applied.
        """
        self.logger.info(f"Handling: position {' '.join(tokens[1:])}")

        if len(tokens) < 2:
            self.logger.warning("Position command with insufficient arguments")
            return

        if tokens[1] == "startpos":
            board = chess.Board()
            move_index = 2
        elif tokens[1] == "fen":
            if "moves" in tokens:
                move_index = tokens.index("moves")
            else:
                move_index = len(tokens)
            fen = " ".join(tokens[2:move_index])

            try:
                board = chess.Board(fen)
            except ValueError as e:
                self.logger.error(f"Invalid FEN: {e}")
                print(f"# Invalid FEN: {e}", file=sys.stderr)
                return
        else:
            self.logger.warning(f"Unknown position type: {tokens[1]}")
            return

        if move_index < len(tokens) and tokens[move_index] == "moves":
            for move_str in tokens[move_index + 1:]:
                try:
                    board.push(parse_legal_move(board, move_str))
                except InvalidMoveError as e:
                    self.logger.error(str(e))
                    print(f"# {e}", file=sys.stderr)
                    break

        self.board = board
        self.logger.debug(f"Full FEN: {board.fen()}")

    def handle_go(self, tokens):
        """
        Handle 'go' command - start search on a background thread.

        Formats:
            go                (selected difficulty)
            go depth 5
            go movetime 500
            go depth 6 movetime 2000
        """
        self.logger.info(f"Handling: go {' '.join(tokens[1:])}")

        depth = None
        movetime = None

        i = 1
        while i < len(tokens):
            if tokens[i] == "depth" and i + 1 < len(tokens):
                depth = int(tokens[i + 1])
                i += 2
            elif tokens[i] == "movetime" and i + 1 < len(tokens):
                movetime = int(tokens[i + 1])
                i += 2
            else:
                # wtime/btime/infinite: the difficulty budget governs instead
                i += 1

        if self.search_thread and self.search_thread.is_alive():
            self.logger.warning("go received while searching, waiting for previous search")
            self.search_thread.join()

        # The search thread owns its own copy of the board
        board_copy = self.board.copy()

        self.searching = True
        self.search_thread = threading.Thread(
            target=self._search_thread,
            args=(board_copy, depth, movetime),
            daemon=True,
        )
        self.search_thread.start()

    def _search(self, board: chess.Board, depth: Optional[int], movetime: Optional[int]):
        """Run the search for one 'go'; returns (move, SearchResult or None)."""
        if depth is None and movetime is None:
            policy = DifficultyPolicy(self.evaluator, self.config, rng=self.rng)
            choice = policy.choose(board, self.difficulty)
            return choice.move, choice.search_result

        deadline = time.monotonic() + movetime / 1000.0 if movetime is not None else None
        result = search(
            board,
            max_depth=depth if depth is not None else self.config.max_depth,
            deadline=deadline,
            evaluator=self.evaluator,
        )
        return result.best_move, result

    def _search_thread(self, board: chess.Board, depth: Optional[int], movetime: Optional[int]):
        """
        Background thread for search.

        Output:
            info depth X score cp Y nodes Z time T
            bestmove <move>
        """
        start_time = time.monotonic()

        try:
            self.logger.info(f"Search started: depth={depth} movetime={movetime} fen={board.fen()}")

            best_move, result = self._search(board, depth, movetime)
            if result is not None:
                self.send_info(result)

            if best_move is None:
                self.logger.info("No legal moves, sending null move")
                self.send("bestmove 0000")
            else:
                self.send(f"bestmove {best_move.uci()}")

        except Exception as e:
            elapsed_time = time.monotonic() - start_time
            self.logger.error(f"Search error after {elapsed_time:.3f}s: {e}", exc_info=True)
            print(f"# Search error: {e}", file=sys.stderr)

            # Send a legal move as fallback
            legal_moves = list(board.legal_moves)
            if legal_moves:
                fallback_move = legal_moves[0].uci()
                self.logger.warning(f"Using fallback move: {fallback_move}")
                self.send(f"bestmove {fallback_move}")
            else:
                self.send("bestmove 0000")

        finally:
            self.searching = False
            self.logger.debug("Search thread finished")

    def send_info(self, result: SearchResult):
        """Report a search result as a UCI info line."""
        parts = [
            "info",
            f"depth {result.depth}",
            f"score cp {result.score}",
            f"nodes {result.nodes}",
            f"time {result.elapsed_ms}",
        ]
        if result.best_move is not None:
            parts.append(f"pv {result.best_move.uci()}")
        self.send(" ".join(parts))

    def handle_stop(self):
        """
        Handle 'stop' command.

        A depth in progress cannot be interrupted, so this waits for the
        search thread, which then reports its move as usual.
        """
        self.logger.info("Handling: stop")

        if self.search_thread and self.search_thread.is_alive():
            self.logger.debug("Waiting for search thread to finish")
            self.search_thread.join()

    def handle_quit(self):
        """Handle 'quit' command - shutdown engine."""
        self.logger.info("Handling: quit - shutting down engine")

        if self.search_thread and self.search_thread.is_alive():
            self.logger.debug("Waiting for search thread to complete before quitting")
            self.search_thread.join()

        self.logger.info("=== ChessTutor Engine Stopped ===")


def main():
    """Run the UCI engine on stdin/stdout."""
    engine = UCIEngine()
    engine.run()
