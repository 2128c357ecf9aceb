"""Storage module for Tombcrawl persistence.

Provides SQLite-based save slots holding whole-world snapshots.
"""

from tombcrawl.storage.database import (
    Database,
    SaveRecord,
    get_database,
)

__all__ = [
    "Database",
    "SaveRecord",
    "get_database",
]
