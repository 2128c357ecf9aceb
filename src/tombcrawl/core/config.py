"""Configuration management for Tombcrawl.

Centralized configuration using pydantic-settings, supporting environment
variables, .env files, and runtime overrides.

Example:
    >>> from tombcrawl.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.game.map_width
    80

Environment Variables:
    TOMBCRAWL_GAME_SEED: Fixed seed for the random source
    TOMBCRAWL_GAME_MAP_WIDTH / TOMBCRAWL_GAME_MAP_HEIGHT: Grid dimensions
    TOMBCRAWL_DATABASE_PATH: Path to the SQLite save database
    TOMBCRAWL_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tombcrawl.core.constants import MAP_HEIGHT, MAP_WIDTH, MAX_ROOMS, ROOM_MAX_SIZE, ROOM_MIN_SIZE
from tombcrawl.core.exceptions import ConfigurationError


class GameSettings(BaseSettings):
    """Dungeon dimensions and generation parameters.

    Attributes:
        seed: Seed for the random source; None draws from system entropy.
        map_width: Grid width in tiles.
        map_height: Grid height in tiles.
        max_rooms: Number of room placement attempts per level.
        room_min_size: Smallest room side, walls included.
        room_max_size: Largest room side, walls included.
        torch_radius: Sight radius handed to the visibility collaborator.
    """

    model_config = SettingsConfigDict(
        env_prefix="TOMBCRAWL_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    seed: int | None = Field(default=None, description="Random seed")
    map_width: int = Field(default=MAP_WIDTH, ge=12, le=500, description="Grid width")
    map_height: int = Field(default=MAP_HEIGHT, ge=12, le=500, description="Grid height")
    max_rooms: int = Field(default=MAX_ROOMS, ge=1, le=500, description="Room placement attempts")
    room_min_size: int = Field(default=ROOM_MIN_SIZE, ge=3, description="Minimum room side")
    room_max_size: int = Field(default=ROOM_MAX_SIZE, ge=3, description="Maximum room side")
    torch_radius: int = Field(default=10, ge=1, description="Player sight radius")

    @model_validator(mode="after")
    def validate_room_sizes(self) -> "GameSettings":
        """Ensure rooms have a valid size range and fit on the map.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If the size range is inverted or too large.
        """
        if self.room_min_size > self.room_max_size:
            raise ConfigurationError(
                f"room_min_size ({self.room_min_size}) must not exceed "
                f"room_max_size ({self.room_max_size})",
                config_key="room_min_size",
            )
        if self.room_max_size >= min(self.map_width, self.map_height):
            raise ConfigurationError(
                f"room_max_size ({self.room_max_size}) must be smaller than the map",
                config_key="room_max_size",
            )
        return self


class StorageSettings(BaseSettings):
    """Where saved games live.

    Attributes:
        database_path: Path to the SQLite database file.
        default_slot: Save slot used when the caller names none.
    """

    model_config = SettingsConfigDict(
        env_prefix="TOMBCRAWL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default_factory=lambda: Path.home() / ".tombcrawl" / "tombcrawl.db",
        description="Path to SQLite database",
    )
    default_slot: str = Field(
        default="savegame",
        min_length=1,
        description="Default save slot name",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        json_logs: Emit JSON log lines instead of console output.
        game: Dungeon generation settings.
        storage: Save storage settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="TOMBCRAWL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="Tombcrawl", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(default=False, description="JSON log output")

    game: GameSettings = Field(default_factory=GameSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "GameSettings",
    "StorageSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
