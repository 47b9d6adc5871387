"""
Minesweeper game module.

Provides the board engine (mine placement, adjacency counts, flood
reveal), game sessions with a timer, and local high-score persistence.
"""
from .cell import Cell, CellState
from .board import (
    Board,
    BoardConfig,
    ConfigurationError,
    RevealResult,
    BOARD_SIZES,
    DEFAULT_SIZE,
    check_win,
    create_board,
    flood_reveal,
    get_board_config,
    place_mines,
    reveal_all_mines,
)
from .session import GameSession, GameStatus, reset_game
from .timer import GameClock
from .scores import HighScoreEntry, HighScores, LocalStore, format_time

__all__ = [
    "Cell",
    "CellState",
    "Board",
    "BoardConfig",
    "ConfigurationError",
    "RevealResult",
    "BOARD_SIZES",
    "DEFAULT_SIZE",
    "check_win",
    "create_board",
    "flood_reveal",
    "get_board_config",
    "place_mines",
    "reveal_all_mines",
    "GameSession",
    "GameStatus",
    "reset_game",
    "GameClock",
    "HighScoreEntry",
    "HighScores",
    "LocalStore",
    "format_time",
]
