"""Persistence of quiz progress (placed circles) and preferences."""
import json
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import duckdb

from cityquiz.core.config import PROGRESS_DB_PATH
from cityquiz.core.models import PlacedCircle
from cityquiz.utils.logging import log_structured, log_error

PROGRESS_VERSION = 1
CUTOFF_PREFERENCE = "cutoff"
DEFAULT_PLAYER = "default"


def dump_progress(circles: Sequence[PlacedCircle]) -> str:
    """Serialize circles to the versioned JSON document."""
    return json.dumps({
        "v": PROGRESS_VERSION,
        "circles": [circle.to_dict() for circle in circles],
    })


def parse_progress(payload: Optional[str]) -> Optional[List[PlacedCircle]]:
    """
    Parse a saved progress document.

    Args:
        payload: JSON text as written by dump_progress

    Returns:
        List of PlacedCircle, or None if the payload is missing or corrupt
    """
    if not payload:
        return None
    try:
        data = json.loads(payload)
        if not isinstance(data, dict) or not isinstance(data.get("circles"), list):
            return None
        return [PlacedCircle.from_dict(entry) for entry in data["circles"]]
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        log_structured("warning", "Ignoring corrupt saved progress", error=str(e))
        return None


class ProgressStore(ABC):
    """Base class for progress storage backends, scoped to one player."""

    player_id: str = DEFAULT_PLAYER

    @abstractmethod
    def save(self, circles: Sequence[PlacedCircle]):
        """Replace the saved circle list."""
        pass

    @abstractmethod
    def load(self) -> Optional[List[PlacedCircle]]:
        """Saved circles, or None when nothing usable is stored."""
        pass

    @abstractmethod
    def clear(self):
        """Forget saved circles."""
        pass

    @abstractmethod
    def get_preference(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set_preference(self, key: str, value: str):
        pass

    @abstractmethod
    def for_player(self, player_id: str) -> "ProgressStore":
        """Store over the same backend holding another player's rows."""
        pass

    def close(self):
        pass


class MemoryProgressStore(ProgressStore):
    """In-process store, used when on-disk storage is disabled."""

    def __init__(
        self,
        player_id: str = DEFAULT_PLAYER,
        payloads: Optional[Dict[str, str]] = None,
        preferences: Optional[Dict[Tuple[str, str], str]] = None,
    ):
        self.player_id = player_id
        self.payloads = {} if payloads is None else payloads
        self.preferences = {} if preferences is None else preferences

    @property
    def payload(self) -> Optional[str]:
        return self.payloads.get(self.player_id)

    def save(self, circles: Sequence[PlacedCircle]):
        self.payloads[self.player_id] = dump_progress(circles)

    def load(self) -> Optional[List[PlacedCircle]]:
        return parse_progress(self.payload)

    def clear(self):
        self.payloads.pop(self.player_id, None)

    def get_preference(self, key: str) -> Optional[str]:
        return self.preferences.get((self.player_id, key))

    def set_preference(self, key: str, value: str):
        self.preferences[(self.player_id, key)] = value

    def for_player(self, player_id: str) -> "MemoryProgressStore":
        return MemoryProgressStore(player_id, self.payloads, self.preferences)


class DuckDBProgressStore(ProgressStore):
    """DuckDB-backed progress store."""

    def __init__(
        self,
        db_path: Optional[Path] = None,
        player_id: str = DEFAULT_PLAYER,
        conn: Optional[duckdb.DuckDBPyConnection] = None,
    ):
        """
        Initialize DuckDB connection.

        Args:
            db_path: Path to DuckDB database file
            player_id: Whose progress rows this store reads and writes
            conn: Existing connection (or cursor) to use instead of opening db_path
        """
        self.player_id = player_id
        if conn is None:
            self.db_path = Path(db_path or PROGRESS_DB_PATH)
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = duckdb.connect(str(self.db_path))
        else:
            self.db_path = Path(db_path) if db_path else None
        self.conn = conn
        self._init_schema()

    def _init_schema(self):
        """Initialize database schema."""
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS player_progress (
                player_id VARCHAR PRIMARY KEY,
                payload TEXT,
                updated_at TIMESTAMP
            )
        """)
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS player_preferences (
                player_id VARCHAR,
                key VARCHAR,
                value VARCHAR,
                PRIMARY KEY (player_id, key)
            )
        """)

    def save(self, circles: Sequence[PlacedCircle]):
        self.conn.execute(
            "INSERT OR REPLACE INTO player_progress (player_id, payload, updated_at) VALUES (?, ?, ?)",
            [self.player_id, dump_progress(circles), datetime.now()]
        )

    def load(self) -> Optional[List[PlacedCircle]]:
        row = self.conn.execute(
            "SELECT payload FROM player_progress WHERE player_id = ?", [self.player_id]
        ).fetchone()
        return parse_progress(row[0] if row else None)

    def clear(self):
        self.conn.execute("DELETE FROM player_progress WHERE player_id = ?", [self.player_id])

    def get_preference(self, key: str) -> Optional[str]:
        row = self.conn.execute(
            "SELECT value FROM player_preferences WHERE player_id = ? AND key = ?",
            [self.player_id, key]
        ).fetchone()
        return row[0] if row else None

    def set_preference(self, key: str, value: str):
        self.conn.execute(
            "INSERT OR REPLACE INTO player_preferences (player_id, key, value) VALUES (?, ?, ?)",
            [self.player_id, key, value]
        )

    def for_player(self, player_id: str) -> "DuckDBProgressStore":
        """Store on its own cursor of this connection; closing it leaves this store open."""
        return DuckDBProgressStore(self.db_path, player_id, conn=self.conn.cursor())

    def close(self):
        """Close database connection."""
        self.conn.close()


def open_progress_store(db_path: Optional[Path] = None, enabled: bool = True) -> ProgressStore:
    """
    Open the on-disk store, falling back to memory when it is unavailable.

    Args:
        db_path: DuckDB file path
        enabled: False forces the in-memory store

    Returns:
        ProgressStore
    """
    if not enabled:
        return MemoryProgressStore()
    try:
        return DuckDBProgressStore(db_path)
    except (OSError, duckdb.Error) as e:
        log_error(e, {"operation": "open_progress_store", "db_path": str(db_path)})
        return MemoryProgressStore()
