"""
Pytest configuration and shared fixtures.
"""
import random
import sys
from pathlib import Path
from typing import List, Tuple

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minesweeper import (
    Board,
    BoardConfig,
    Cell,
    GameSession,
    HighScores,
    LocalStore,
    create_board,
    reset_game,
)
from minesweeper.board import _calculate_adjacent_mines


def board_with_mines(
    rows: int, cols: int, mines: List[Tuple[int, int]]
) -> Board:
    """Build a board with mines at fixed positions and counts computed."""
    board = create_board(rows, cols)
    for row, col in mines:
        board.get_cell(row, col).is_mine = True
    _calculate_adjacent_mines(board)
    return board


def session_with_mines(
    rows: int, cols: int, mines: List[Tuple[int, int]]
) -> GameSession:
    """Session already past its first click, with a fixed mine layout."""
    board = board_with_mines(rows, cols, mines)
    session = GameSession(
        size_key="custom",
        config=BoardConfig(rows, cols, len(mines)),
        board=board,
        first_click_done=True,
        timer_running=True,
    )
    return session


# ============================================================================
# Factory Fixtures
# ============================================================================

@pytest.fixture
def make_board():
    """Factory for boards with a fixed mine layout."""
    return board_with_mines


@pytest.fixture
def make_session():
    """Factory for started sessions with a fixed mine layout."""
    return session_with_mines


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def fake_clock() -> FakeClock:
    """Monotonic clock that only moves when a test advances it."""
    return FakeClock()


# ============================================================================
# Random Fixtures
# ============================================================================

@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible mine layouts."""
    return random.Random(1234)


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def small_board() -> Board:
    """Create an empty 8x8 board."""
    return create_board(8, 8)


@pytest.fixture
def corner_mine_board() -> Board:
    """
    4x4 board with a single mine in the bottom-right corner.

    . . . .
    . . . .
    . . 1 1
    . . 1 *
    """
    return board_with_mines(4, 4, [(3, 3)])


# ============================================================================
# Session Fixtures
# ============================================================================

@pytest.fixture
def small_session(rng: random.Random) -> GameSession:
    """Fresh small (8x8, 10 mines) session."""
    return reset_game("small", rng=rng)


@pytest.fixture
def corner_mine_session() -> GameSession:
    """4x4 session with one mine at (3, 3), mines already placed."""
    return session_with_mines(4, 4, [(3, 3)])


@pytest.fixture
def split_session() -> GameSession:
    """
    3x5 session with a mine column cutting off the left edge.

    2 * 2 . .
    3 * 3 . .
    2 * 2 . .
    """
    return session_with_mines(3, 5, [(0, 1), (1, 1), (2, 1)])


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(is_mine=True)


# ============================================================================
# Score Fixtures
# ============================================================================

@pytest.fixture
def store(tmp_path: Path) -> LocalStore:
    """Key-value store in a temporary file."""
    return LocalStore(tmp_path / "scores.json")


@pytest.fixture
def high_scores(store: LocalStore) -> HighScores:
    """High-score table on an empty store."""
    return HighScores(store)
