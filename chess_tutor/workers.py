"""
Background Workers

Searches take hundreds of milliseconds, so the UI hands them to workers and
gets a Future back. Each request runs on its own daemon thread over a
board built from the FEN, so requests never share a position.

Two workers exist, as in the app:
    - AiWorker: the engine's reply at a difficulty level
    - EvalWorker: classification of the student's last move

There is no cancellation inside a search. Issuing a new request on a
worker supersedes the previous one: if the older computation finishes
later, its future fails with StaleResultError instead of delivering an
outdated answer.
"""

import logging
import random
import threading
import time
from concurrent.futures import Future
from typing import Callable, Optional

from chess_tutor.api import Side, classify_played_move, compute_best_move
from chess_tutor.config import DEFAULT_CONFIG, TutorConfig
from chess_tutor.errors import StaleResultError

logger = logging.getLogger(__name__)


class Worker:
    """
    Runs one computation per request on a background thread.

    Attributes:
        name: Used in thread names and log lines
        config: Tutor configuration passed to the computation
    """

    name = "worker"

    def __init__(self, config: TutorConfig = DEFAULT_CONFIG):
        self.config = config
        self._generation = 0
        self._lock = threading.Lock()

    def supersede(self) -> None:
        """Mark every in-flight request as stale."""
        with self._lock:
            self._generation += 1

    def _submit(self, compute: Callable, *args) -> Future:
        future = Future()
        with self._lock:
            self._generation += 1
            generation = self._generation

        thread = threading.Thread(
            target=self._run,
            args=(future, generation, compute, args),
            name=f"{self.name}-{generation}",
            daemon=True,
        )
        thread.start()
        return future

    def _run(self, future: Future, generation: int, compute: Callable, args) -> None:
        if not future.set_running_or_notify_cancel():
            return

        start_time = time.monotonic()
        logger.info(f"{self.name} request {generation} started")
        try:
            result = compute(*args)
        except Exception as e:
            logger.error(f"{self.name} request {generation} failed: {e}", exc_info=True)
            future.set_exception(e)
            return

        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        with self._lock:
            stale = generation != self._generation

        if stale:
            logger.debug(f"{self.name} request {generation} superseded, discarding result")
            future.set_exception(
                StaleResultError(f"{self.name} request {generation} was superseded")
            )
            return

        logger.info(f"{self.name} request {generation} done in {elapsed_ms}ms")
        future.set_result(result)


class AiWorker(Worker):
    """
    Computes the engine's move off the UI thread.

    Attributes:
        rng: Seeds a private Random for every request
    """

    name = "ai"

    def __init__(self, config: TutorConfig = DEFAULT_CONFIG, rng: Optional[random.Random] = None):
        super().__init__(config)
        self.rng = rng if rng is not None else random.Random()

    def request(self, fen: str, difficulty: str, side: Side) -> "Future[Optional[str]]":
        """Start computing the engine's move; the future yields a UCI string or None."""
        request_rng = random.Random(self.rng.getrandbits(64))
        return self._submit(self._compute, fen, difficulty, side, request_rng)

    def _compute(self, fen, difficulty, side, rng):
        return compute_best_move(fen, difficulty, side, rng=rng, config=self.config)


class EvalWorker(Worker):
    """Classifies the student's move off the UI thread."""

    name = "eval"

    def request(self, fen_before: str, played: str, side: Side) -> Future:
        """Start classifying; the future yields a MoveClassification."""
        return self._submit(self._compute, fen_before, played, side)

    def _compute(self, fen_before, played, side):
        return classify_played_move(fen_before, played, side, config=self.config)
