"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        TombcrawlError: Base exception for all application errors.
        InvalidGameStateError: Broken world invariant.
        PersistenceError: Save/load failure ("no saved game").

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
"""

from __future__ import annotations

from tombcrawl.core.config import (
    GameSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from tombcrawl.core.exceptions import (
    ConfigurationError,
    CorruptSaveError,
    DungeonGenerationError,
    EntityAliasError,
    GameEngineError,
    InvalidGameStateError,
    PersistenceError,
    SaveNotFoundError,
    TombcrawlError,
)
from tombcrawl.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "TombcrawlError",
    "GameEngineError",
    "InvalidGameStateError",
    "EntityAliasError",
    "DungeonGenerationError",
    "PersistenceError",
    "SaveNotFoundError",
    "CorruptSaveError",
    "ConfigurationError",
    # Configuration
    "Settings",
    "GameSettings",
    "StorageSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
