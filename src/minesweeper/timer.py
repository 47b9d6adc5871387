"""
Wall-clock driver for the game timer.

Front ends call ``sync`` before handling each action; the clock delivers
one session tick per whole second that passed since the previous sync.
"""
import time
from typing import Callable

from .session import GameSession


class GameClock:
    """Converts elapsed wall time into whole-second session ticks."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._anchor = clock()

    def restart(self) -> None:
        """Re-anchor after a reset so the new session starts at zero."""
        self._anchor = self._clock()

    def sync(self, session: GameSession) -> int:
        """
        Deliver pending ticks to the session.

        The fractional remainder is kept, so a second is never counted
        twice. Ticks on a stopped timer are no-ops.

        Returns:
            Number of ticks delivered.
        """
        now = self._clock()
        pending = int(now - self._anchor)
        if pending <= 0:
            return 0
        self._anchor += pending
        return sum(1 for _ in range(pending) if session.tick())
