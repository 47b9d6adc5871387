"""
High-score persistence.

Scores live in a local key-value store under one fixed key, as a JSON
mapping of board size to at most ten ``{"time", "date"}`` records sorted
by time. Unreadable data is treated as an empty table.
"""
import json
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

SCORES_KEY = "minesweeperHighScores"
MAX_SCORES_PER_SIZE = 10
DEFAULT_SCORES_PATH = "~/.minesweeper/scores.json"

SIZE_LABELS = {
    "small": "Small (8×8)",
    "medium": "Medium (16×16)",
    "large": "Large (32×16)",
}


def scores_path_from_env() -> str:
    """Location of the high-score file, overridable by environment."""
    return os.getenv("MINESWEEPER_SCORES_PATH", DEFAULT_SCORES_PATH)


def format_time(seconds: int) -> str:
    """Format a duration as MM:SS."""
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


def size_label(size_key: str) -> str:
    """Human-readable name of a board size."""
    return SIZE_LABELS.get(size_key, size_key)


# ============================================================================
# Score Entries
# ============================================================================

@dataclass(frozen=True)
class HighScoreEntry:
    """
    One winning game.

    Attributes:
        elapsed_seconds: Time taken to win.
        timestamp: When the game was won, ISO-8601.
    """

    elapsed_seconds: int
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the stored record format."""
        return {"time": self.elapsed_seconds, "date": self.timestamp}

    @classmethod
    def from_dict(cls, data: Any) -> Optional["HighScoreEntry"]:
        """Parse a stored record, or return None if it is malformed."""
        if not isinstance(data, dict):
            return None
        elapsed = data.get("time")
        timestamp = data.get("date")
        if isinstance(elapsed, bool) or not isinstance(elapsed, int):
            return None
        if elapsed < 0 or not isinstance(timestamp, str):
            return None
        return cls(elapsed, timestamp)


HighScoreTable = Dict[str, List[HighScoreEntry]]


# ============================================================================
# Key-Value Store
# ============================================================================

class LocalStore:
    """
    Text key-value store kept in a single JSON file.

    A missing or corrupt file reads as an empty store.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path).expanduser()

    def _read(self) -> Dict[str, str]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable store %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed store %s", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get_item(self, key: str) -> Optional[str]:
        """Get the stored text for a key, or None."""
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        """Store text under a key, creating the file if needed."""
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Write beside the target, then swap it in
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=self.path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            os.unlink(tmp_name)
            raise


# ============================================================================
# High Scores
# ============================================================================

class HighScores:
    """Reads and appends to the high-score table in a LocalStore."""

    def __init__(self, store: LocalStore, key: str = SCORES_KEY) -> None:
        self.store = store
        self.key = key

    def load_scores(self) -> HighScoreTable:
        """
        Load the high-score table.

        Returns:
            Mapping of size key to entries; empty if nothing valid is
            stored. Malformed entries are dropped.
        """
        raw = self.store.get_item(self.key)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring malformed high-score data")
            return {}
        if not isinstance(data, dict):
            return {}

        table: HighScoreTable = {}
        for size_key, records in data.items():
            if not isinstance(records, list):
                continue
            entries = [HighScoreEntry.from_dict(r) for r in records]
            valid = [e for e in entries if e is not None]
            valid.sort(key=lambda e: e.elapsed_seconds)
            table[size_key] = valid[:MAX_SCORES_PER_SIZE]
        return table

    def save_score(
        self,
        size_key: str,
        elapsed_seconds: int,
        now: Optional[datetime] = None,
    ) -> HighScoreEntry:
        """
        Record a win, keeping the ten fastest times for the size.

        Args:
            size_key: Board size the game was played on.
            elapsed_seconds: Time taken to win.
            now: Timestamp of the win; current UTC time when omitted.

        Returns:
            The entry that was appended (it may have been cut off if
            slower than ten existing scores).
        """
        now = now or datetime.now(timezone.utc)
        entry = HighScoreEntry(int(elapsed_seconds), now.isoformat())

        table = self.load_scores()
        scores = table.get(size_key, []) + [entry]
        scores.sort(key=lambda e: e.elapsed_seconds)
        table[size_key] = scores[:MAX_SCORES_PER_SIZE]

        self.store.set_item(self.key, json.dumps({
            key: [e.to_dict() for e in entries]
            for key, entries in table.items()
        }))
        logger.info(
            "Saved %s score %s", size_key, format_time(entry.elapsed_seconds)
        )
        return entry
