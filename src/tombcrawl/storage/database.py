"""SQLite persistence layer for Tombcrawl.

Stores whole-world snapshots in named save slots. A snapshot is the JSON
document produced by ``GameState.to_json``; the table keeps a few
summary columns alongside it for listing saves without parsing them.

Storage location: ~/.tombcrawl/tombcrawl.db (see StorageSettings)
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Generator

from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from tombcrawl.core.config import get_settings
from tombcrawl.core.exceptions import CorruptSaveError, SaveNotFoundError
from tombcrawl.core.logging import get_logger
from tombcrawl.models.game_state import GameState

logger = get_logger(__name__)


def _is_locked_error(exc: BaseException) -> bool:
    return isinstance(exc, sqlite3.OperationalError) and "locked" in str(exc).lower()


_retry_when_locked = retry(
    retry=retry_if_exception(_is_locked_error),
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
    reraise=True,
)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class SaveRecord:
    """A saved game slot.

    Attributes:
        slot: Slot name, unique per database.
        dungeon_level: Depth the player was on.
        player_level: Player progression level.
        saved_at: When the slot was last written.
        state_json: Serialized GameState.
    """

    slot: str
    dungeon_level: int
    player_level: int
    saved_at: datetime
    state_json: str

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> SaveRecord:
        """Create from database row."""
        return cls(
            slot=row[0],
            dungeon_level=row[1],
            player_level=row[2],
            saved_at=datetime.fromisoformat(row[3]),
            state_json=row[4],
        )

    def get_game_state(self) -> GameState:
        """Parse the stored snapshot.

        Raises:
            CorruptSaveError: If the snapshot cannot be parsed.
        """
        try:
            return GameState.from_json(self.state_json)
        except CorruptSaveError as e:
            raise CorruptSaveError(
                "Saved game could not be read",
                slot=self.slot,
                details=e.details,
            ) from e


# =============================================================================
# Database
# =============================================================================


class Database:
    """SQLite database holding save slots.

    Writes retry briefly when another connection holds the database lock.
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path | None = None) -> None:
        """Initialize database.

        Args:
            db_path: Path to database file. If None, uses the configured location.
        """
        if db_path is None:
            self.db_path = self._get_default_path()
        else:
            self.db_path = Path(db_path)

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

        logger.info("Database initialized", path=str(self.db_path))

    @staticmethod
    def _get_default_path() -> Path:
        """Get default database path from settings."""
        return get_settings().storage.database_path

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @_retry_when_locked
    def _init_schema(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS saves (
                    slot TEXT PRIMARY KEY,
                    dungeon_level INTEGER NOT NULL,
                    player_level INTEGER NOT NULL,
                    saved_at TEXT NOT NULL,
                    state_json TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_saves_saved_at
                ON saves(saved_at DESC)
            """)

            cursor.execute("""
                INSERT OR REPLACE INTO schema_version (version) VALUES (?)
            """, (self.SCHEMA_VERSION,))

    # =========================================================================
    # Save Operations
    # =========================================================================

    @_retry_when_locked
    def save_game(self, state: GameState, slot: str | None = None) -> SaveRecord:
        """Write a world snapshot into a slot, replacing what was there.

        Args:
            state: The world to save.
            slot: Slot name; defaults to the configured default slot.

        Returns:
            The stored record.
        """
        slot = slot or get_settings().storage.default_slot
        now = datetime.now()
        state_json = state.to_json()

        with self._get_connection() as conn:
            conn.execute("""
                INSERT OR REPLACE INTO saves
                (slot, dungeon_level, player_level, saved_at, state_json)
                VALUES (?, ?, ?, ?, ?)
            """, (slot, state.dungeon_level, state.player.level, now.isoformat(), state_json))

        logger.info("Game saved", slot=slot, dungeon_level=state.dungeon_level)

        return SaveRecord(
            slot=slot,
            dungeon_level=state.dungeon_level,
            player_level=state.player.level,
            saved_at=now,
            state_json=state_json,
        )

    def get_save(self, slot: str) -> SaveRecord | None:
        """Get a save record by slot name, or None if the slot is empty."""
        with self._get_connection() as conn:
            cursor = conn.execute("""
                SELECT slot, dungeon_level, player_level, saved_at, state_json
                FROM saves WHERE slot = ?
            """, (slot,))
            row = cursor.fetchone()

            if row:
                return SaveRecord.from_row(tuple(row))
            return None

    def load_game(self, slot: str | None = None) -> GameState:
        """Restore the world stored in a slot.

        Args:
            slot: Slot name; defaults to the configured default slot.

        Returns:
            The restored world.

        Raises:
            SaveNotFoundError: If the slot is empty.
            CorruptSaveError: If the stored snapshot cannot be parsed.
        """
        slot = slot or get_settings().storage.default_slot
        record = self.get_save(slot)
        if record is None:
            raise SaveNotFoundError("No saved game", slot=slot)

        state = record.get_game_state()
        logger.info("Game loaded", slot=slot, dungeon_level=state.dungeon_level)
        return state

    def list_saves(self) -> list[SaveRecord]:
        """All save records, most recent first."""
        with self._get_connection() as conn:
            cursor = conn.execute("""
                SELECT slot, dungeon_level, player_level, saved_at, state_json
                FROM saves ORDER BY saved_at DESC
            """)
            return [SaveRecord.from_row(tuple(row)) for row in cursor.fetchall()]

    @_retry_when_locked
    def delete_save(self, slot: str) -> bool:
        """Delete a save slot.

        Returns:
            True if deleted, False if the slot was empty.
        """
        with self._get_connection() as conn:
            cursor = conn.execute("DELETE FROM saves WHERE slot = ?", (slot,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("Save deleted", slot=slot)

        return deleted

    def get_save_count(self) -> int:
        with self._get_connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM saves").fetchone()[0]


# =============================================================================
# Singleton Instance
# =============================================================================


_database_instance: Database | None = None


def get_database() -> Database:
    """Get the global database instance.

    Returns:
        Database singleton instance.
    """
    global _database_instance

    if _database_instance is None:
        _database_instance = Database()

    return _database_instance


__all__ = [
    "SaveRecord",
    "Database",
    "get_database",
]
