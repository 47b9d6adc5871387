"""
Game session module.

A GameSession owns one board plus everything the player sees around it:
status, flag counter and timer. Every user action is a method call that
runs to completion; a reset builds a new session instead of mutating a
finished one.
"""
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .board import (
    Board,
    BoardConfig,
    DEFAULT_SIZE,
    check_win,
    create_board,
    flood_reveal,
    get_board_config,
    place_mines,
)


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class GameStatus(str, Enum):
    """Possible states of the game."""

    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


# ============================================================================
# Game Session
# ============================================================================

@dataclass
class GameSession:
    """
    State of one game from first click to win or loss.

    Attributes:
        size_key: Preset board size this session was created for.
        config: Dimensions and mine count of the preset.
        board: The grid of cells.
        status: Playing, won or lost. Won and lost are terminal.
        flags_placed: Number of flagged cells.
        first_click_done: Whether mines have been placed.
        elapsed_seconds: Timer value.
        timer_running: Whether ticks advance the timer.
    """

    size_key: str
    config: BoardConfig
    board: Board
    status: GameStatus = GameStatus.PLAYING
    flags_placed: int = 0
    first_click_done: bool = False
    elapsed_seconds: int = 0
    timer_running: bool = False
    rng: Optional[random.Random] = field(default=None, repr=False)

    # ========================================================================
    # Actions
    # ========================================================================

    def reveal(self, row: int, col: int) -> bool:
        """
        Reveal a cell at the given position.

        On the first reveal, places mines avoiding this cell and starts the
        timer. Zero-count cells open their neighborhood; a mine ends the
        game as lost.

        Args:
            row: Row index to reveal.
            col: Column index to reveal.

        Returns:
            True if the board changed, False if the action was ignored.
        """
        if not self._can_reveal(row, col):
            return False

        if not self.first_click_done:
            self._handle_first_click(row, col)

        result = flood_reveal(self.board, row, col)
        self.flags_placed -= result.flags_cleared

        if result.hit_mine:
            self._finish(GameStatus.LOST)
        elif check_win(self.board):
            self._finish(GameStatus.WON)
        return True

    def _can_reveal(self, row: int, col: int) -> bool:
        """Check if a cell can be revealed."""
        if self.status != GameStatus.PLAYING:
            return False
        cell = self.board.get_cell(row, col)
        if cell is None:
            return False
        return cell.is_hidden

    def _handle_first_click(self, row: int, col: int) -> None:
        """Handle first click: place mines and start the timer."""
        self.board = place_mines(
            self.board, self.config.mines, row, col, rng=self.rng
        )
        self.first_click_done = True
        self.timer_running = True
        logger.debug("Mines placed around safe cell (%d, %d)", row, col)

    def _finish(self, status: GameStatus) -> None:
        """Enter a terminal status and stop the timer."""
        self.status = status
        self.timer_running = False
        logger.info(
            "Game %s on %s board after %ds",
            status.value, self.size_key, self.elapsed_seconds,
        )

    def toggle_flag(self, row: int, col: int) -> bool:
        """
        Toggle flag on a cell.

        Args:
            row: Row index.
            col: Column index.

        Returns:
            True if flag was toggled, False otherwise.
        """
        if self.status != GameStatus.PLAYING:
            return False
        cell = self.board.get_cell(row, col)
        if cell is None or not cell.toggle_flag():
            return False
        self.flags_placed += 1 if cell.is_flagged else -1
        return True

    def tick(self) -> bool:
        """Advance the timer by one second if it is running."""
        if not self.timer_running:
            return False
        self.elapsed_seconds += 1
        return True

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def mines_remaining(self) -> int:
        """Mine counter shown to the player: mines minus flags."""
        return self.config.mines - self.flags_placed

    @property
    def is_playing(self) -> bool:
        """Check if game is still in progress."""
        return self.status == GameStatus.PLAYING

    @property
    def is_won(self) -> bool:
        """Check if game was won."""
        return self.status == GameStatus.WON

    @property
    def is_lost(self) -> bool:
        """Check if game was lost."""
        return self.status == GameStatus.LOST


def reset_game(
    size_key: str = DEFAULT_SIZE,
    rng: Optional[random.Random] = None,
) -> GameSession:
    """
    Start a fresh session on a preset board size.

    Args:
        size_key: One of the keys of BOARD_SIZES.
        rng: Random source used for mine placement.

    Raises:
        ConfigurationError: If the size key is unknown.
    """
    config = get_board_config(size_key)
    return GameSession(
        size_key=size_key,
        config=config,
        board=create_board(config.rows, config.cols),
        rng=rng,
    )
