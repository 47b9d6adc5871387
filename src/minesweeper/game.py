"""
The single game a front end plays.

GameHost replaces the session wholesale on reset, keeps the timer in
step with the wall clock and records a high score on every win.
"""
import logging
import random
import threading
from typing import Callable, Optional

from .board import DEFAULT_SIZE
from .scores import HighScores
from .session import GameSession, reset_game
from .timer import GameClock


logger = logging.getLogger(__name__)


class GameHost:
    """
    Owns the current session, its clock and the high-score table.

    Every action holds the host lock for its whole duration, so requests
    served on different threads never interleave on one session.
    """

    def __init__(
        self,
        scores: HighScores,
        size_key: str = DEFAULT_SIZE,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.scores = scores
        self.rng = rng
        self.clock = GameClock(clock) if clock else GameClock()
        self.session = reset_game(size_key, rng=rng)
        self._lock = threading.Lock()

    def reset(self, size_key: Optional[str] = None) -> GameSession:
        """
        Replace the session, keeping the current size unless given.

        Raises:
            ConfigurationError: If the size key is unknown.
        """
        with self._lock:
            self.session = reset_game(
                size_key or self.session.size_key, rng=self.rng
            )
            self.clock.restart()
            logger.info("New %s game", self.session.size_key)
            return self.session

    def reveal(self, row: int, col: int) -> GameSession:
        """
        Reveal a cell; the winning reveal records a high score.

        The clock is re-anchored on the first click, so the timer's
        first second starts when the game does.
        """
        with self._lock:
            session = self.session
            self.clock.sync(session)
            started = session.first_click_done
            if not session.reveal(row, col):
                return session
            if not started:
                self.clock.restart()
            if session.is_won:
                self.scores.save_score(
                    session.size_key, session.elapsed_seconds
                )
            return session

    def toggle_flag(self, row: int, col: int) -> GameSession:
        """Toggle a flag on the current board."""
        with self._lock:
            self.clock.sync(self.session)
            self.session.toggle_flag(row, col)
            return self.session

    def current(self) -> GameSession:
        """Current session with the timer brought up to date."""
        with self._lock:
            self.clock.sync(self.session)
            return self.session
