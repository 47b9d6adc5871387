"""
Board module for Minesweeper game.

Implements the grid of cells, the preset board sizes, safe first-click
mine placement, adjacency counting and flood reveal.
"""
import copy
import random
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from .cell import Cell, HIDDEN_VALUE, FLAGGED_VALUE, MINE_VALUE


# ============================================================================
# Configuration
# ============================================================================

class ConfigurationError(ValueError):
    """Raised for board dimensions or mine counts that cannot be played."""


@dataclass(frozen=True)
class BoardConfig:
    """
    Configuration for a Minesweeper board.

    Attributes:
        rows: Number of rows.
        cols: Number of columns.
        mines: Total mines to place.
    """

    rows: int = 16
    cols: int = 16
    mines: int = 40

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.rows < 1 or self.cols < 1:
            raise ConfigurationError("Board dimensions must be positive")
        validate_mine_count(self.rows, self.cols, self.mines)

    @property
    def cells(self) -> int:
        """Total number of cells on the board."""
        return self.rows * self.cols

    @property
    def safe_cells(self) -> int:
        """Number of cells without a mine."""
        return self.cells - self.mines


def validate_mine_count(rows: int, cols: int, mines: int) -> None:
    """
    Reject mine counts that would make placement loop forever.

    At least two cells must stay mine-free: the first-click cell and one
    more, otherwise rejection sampling has nothing left to draw.
    """
    if mines < 0:
        raise ConfigurationError("Number of mines cannot be negative")
    max_mines = rows * cols - 2
    if mines > max_mines:
        raise ConfigurationError(f"Too many mines (max {max(max_mines, 0)})")


# Preset board sizes, keyed the way scores are stored
BOARD_SIZES: Dict[str, BoardConfig] = {
    "small": BoardConfig(8, 8, 10),
    "medium": BoardConfig(16, 16, 40),
    "large": BoardConfig(16, 32, 100),
}
DEFAULT_SIZE = "medium"


def get_board_config(size_key: str) -> BoardConfig:
    """Look up a preset board size."""
    try:
        return BOARD_SIZES[size_key]
    except KeyError:
        raise ConfigurationError(
            f"Unknown board size {size_key!r} "
            f"(choose from {', '.join(BOARD_SIZES)})"
        ) from None


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Rectangular grid of cells.

    The board only stores and queries cells; the game rules that mutate
    it live in the module-level functions below and in GameSession.
    """

    rows: int
    cols: int
    _grid: List[List[Cell]] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        """Initialize the grid after dataclass creation."""
        if not self._grid:
            self._init_grid()

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create empty grid of cells."""
        self._grid = [
            [Cell() for _ in range(self.cols)]
            for _ in range(self.rows)
        ]

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def get_neighbors(
        self, row: int, col: int
    ) -> List[Tuple[int, int]]:
        """
        Get valid neighboring cell positions.

        Args:
            row: Row index of center cell.
            col: Column index of center cell.

        Returns:
            List of (row, col) tuples for valid neighbors.
        """
        neighbors = []
        for delta_row in (-1, 0, 1):
            for delta_col in (-1, 0, 1):
                if delta_row == 0 and delta_col == 0:
                    continue
                new_row = row + delta_row
                new_col = col + delta_col
                if self.is_valid_position(new_row, new_col):
                    neighbors.append((new_row, new_col))
        return neighbors

    def is_valid_position(self, row: int, col: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= row < self.rows and 0 <= col < self.cols

    def count_adjacent_mines(self, row: int, col: int) -> int:
        """Count mines adjacent to a specific cell."""
        count = 0
        for neighbor_row, neighbor_col in self.get_neighbors(row, col):
            if self._grid[neighbor_row][neighbor_col].is_mine:
                count += 1
        return count

    # ========================================================================
    # Accessors
    # ========================================================================

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        """Get cell at position, or None if invalid."""
        if not self.is_valid_position(row, col):
            return None
        return self._grid[row][col]

    def positions(self) -> Iterator[Tuple[int, int]]:
        """Iterate over every (row, col) on the board in row-major order."""
        for row in range(self.rows):
            for col in range(self.cols):
                yield row, col

    def cells(self) -> Iterator[Cell]:
        """Iterate over every cell in row-major order."""
        for row in self._grid:
            yield from row

    @property
    def mine_count(self) -> int:
        """Number of mines currently on the board."""
        return sum(1 for cell in self.cells() if cell.is_mine)

    @property
    def flag_count(self) -> int:
        """Number of flagged cells."""
        return sum(1 for cell in self.cells() if cell.is_flagged)

    def copy(self) -> "Board":
        """Return an independent deep copy of this board."""
        return Board(self.rows, self.cols, copy.deepcopy(self._grid))

    def get_observation(self) -> np.ndarray:
        """
        Get the player-visible board as a numpy array.

        Returns:
            2D int8 array where:
                -1 = hidden
                -2 = flagged
                0-8 = revealed with adjacent count
                9 = revealed mine
        """
        obs = np.zeros((self.rows, self.cols), dtype=np.int8)
        for row, col in self.positions():
            obs[row, col] = self._grid[row][col].to_observation()
        return obs

    def render(self) -> str:
        """Render board as a text grid with row and column indices."""
        obs = self.get_observation()
        width = len(str(max(self.rows, self.cols) - 1))
        header = " " * (width + 1) + " ".join(
            str(col).rjust(width) for col in range(self.cols)
        )
        lines = [header]
        for row in range(self.rows):
            symbols = []
            for val in obs[row]:
                if val == HIDDEN_VALUE:
                    symbol = "."
                elif val == FLAGGED_VALUE:
                    symbol = "F"
                elif val == MINE_VALUE:
                    symbol = "*"
                elif val == 0:
                    symbol = " "
                else:
                    symbol = str(val)
                symbols.append(symbol.rjust(width))
            lines.append(str(row).rjust(width) + " " + " ".join(symbols))
        return "\n".join(lines)


# ============================================================================
# Board Engine
# ============================================================================

@dataclass
class RevealResult:
    """
    Outcome of a single flood reveal.

    Attributes:
        revealed: Number of cells newly revealed (including disclosed mines).
        flags_cleared: Number of flags removed because their cell was revealed.
        hit_mine: Whether a mine was revealed.
    """

    revealed: int = 0
    flags_cleared: int = 0
    hit_mine: bool = False


def create_board(rows: int, cols: int) -> Board:
    """Create a board of default cells: hidden, mine-free, count zero."""
    if rows < 1 or cols < 1:
        raise ConfigurationError("Board dimensions must be positive")
    return Board(rows, cols)


def place_mines(
    board: Board,
    mine_count: int,
    safe_row: int,
    safe_col: int,
    rng: Optional[random.Random] = None,
) -> Board:
    """
    Place mines on a copy of the board, keeping one cell mine-free.

    Cells are drawn uniformly at random and rejected if already mined or
    equal to the safe cell, then every non-mine cell gets its count of
    mined neighbors.

    Args:
        board: Board to copy. It is not modified.
        mine_count: Number of mines to place.
        safe_row: Row of the cell that must stay mine-free.
        safe_col: Column of the cell that must stay mine-free.
        rng: Random source; the module-level generator when omitted.

    Returns:
        A new board with mines and adjacency counts set.

    Raises:
        ConfigurationError: If the mine count leaves fewer than two
            mine-free cells.
    """
    validate_mine_count(board.rows, board.cols, mine_count)
    randrange = (rng or random).randrange
    mined = board.copy()

    placed = 0
    while placed < mine_count:
        row = randrange(mined.rows)
        col = randrange(mined.cols)
        cell = mined.get_cell(row, col)
        if (row, col) != (safe_row, safe_col) and not cell.is_mine:
            cell.is_mine = True
            placed += 1

    _calculate_adjacent_mines(mined)
    return mined


def _calculate_adjacent_mines(board: Board) -> None:
    """Calculate adjacent mine counts for all non-mine cells."""
    for row, col in board.positions():
        cell = board.get_cell(row, col)
        if not cell.is_mine:
            cell.adjacent_mines = board.count_adjacent_mines(row, col)


def flood_reveal(board: Board, row: int, col: int) -> RevealResult:
    """
    Reveal a cell and propagate through zero-count regions.

    Uses an explicit stack of coordinates; a cell that is out of bounds
    or already revealed ends its branch. Flagged cells reached by the
    flood are revealed and lose their flag. Revealing a mine discloses
    every mine on the board and stops propagation.

    Args:
        board: Board to mutate.
        row: Row index to start from.
        col: Column index to start from.

    Returns:
        What the reveal changed.
    """
    result = RevealResult()
    stack = [(row, col)]

    while stack:
        current_row, current_col = stack.pop()
        cell = board.get_cell(current_row, current_col)
        if cell is None or cell.is_revealed:
            continue

        if cell.reveal():
            result.flags_cleared += 1
        result.revealed += 1

        if cell.is_mine:
            result.hit_mine = True
            disclosed = reveal_all_mines(board)
            result.revealed += disclosed.revealed
            result.flags_cleared += disclosed.flags_cleared
            return result

        if cell.adjacent_mines == 0:
            stack.extend(board.get_neighbors(current_row, current_col))

    return result


def reveal_all_mines(board: Board) -> RevealResult:
    """Reveal every mine that is still unrevealed."""
    result = RevealResult()
    for cell in board.cells():
        if cell.is_mine and not cell.is_revealed:
            if cell.reveal():
                result.flags_cleared += 1
            result.revealed += 1
    return result


def check_win(board: Board) -> bool:
    """
    Check whether every mine-free cell is revealed.

    Flags play no part: unflagged mines and misflagged safe cells
    neither block nor grant a win.
    """
    return not any(
        not cell.is_revealed and not cell.is_mine
        for cell in board.cells()
    )
