"""Custom exception hierarchy for Tombcrawl.

All exceptions inherit from TombcrawlError so the surrounding UI can catch
everything the simulation raises at a single boundary while keeping the
domain-specific context attached to each error.

Two families matter to callers:

* ``InvalidGameStateError`` and its subclasses signal programming errors
  (broken invariants). They are never caught inside the core.
* ``PersistenceError`` and its subclasses signal the recoverable
  "no saved game" condition.

Player-facing illegal actions (blocked moves, full inventory, no target in
range) never raise; they are reported through result values and the message
log.

Example:
    >>> from tombcrawl.core.exceptions import SaveNotFoundError
    >>> raise SaveNotFoundError("No save in slot", slot="savegame")
"""

from __future__ import annotations

from typing import Any


class TombcrawlError(Exception):
    """Base exception for all Tombcrawl errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Game Engine Domain Exceptions
# =============================================================================


class GameEngineError(TombcrawlError):
    """Base exception for all simulation errors."""


class InvalidGameStateError(GameEngineError):
    """Raised when an operation would break a world invariant.

    These are programming errors: the caller asked the engine to do
    something no legitimate game state allows.
    """

    def __init__(
        self,
        message: str,
        *,
        entity_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid game state error with entity context.

        Args:
            message: Human-readable error description.
            entity_index: Store index of the entity involved, if any.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if entity_index is not None:
            combined_details["entity_index"] = entity_index
        super().__init__(message, details=combined_details)


class EntityAliasError(InvalidGameStateError):
    """Raised when the same store index is borrowed twice at once.

    An entity can never be both attacker and defender of the same attack.
    """


class DungeonGenerationError(GameEngineError):
    """Raised when the generator is given parameters it cannot satisfy."""


# =============================================================================
# Persistence Exceptions
# =============================================================================


class PersistenceError(TombcrawlError):
    """Base exception for save/load failures.

    The UI treats every subclass as "no saved game" and offers a new game.
    """

    def __init__(
        self,
        message: str,
        *,
        slot: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize persistence error with save slot context.

        Args:
            message: Human-readable error description.
            slot: Name of the save slot involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if slot:
            combined_details["slot"] = slot
        super().__init__(message, details=combined_details)


class SaveNotFoundError(PersistenceError):
    """Raised when the requested save slot does not exist."""


class CorruptSaveError(PersistenceError):
    """Raised when a stored snapshot cannot be decoded or validated."""


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(TombcrawlError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


__all__ = [
    "TombcrawlError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidGameStateError",
    "EntityAliasError",
    "DungeonGenerationError",
    # Persistence exceptions
    "PersistenceError",
    "SaveNotFoundError",
    "CorruptSaveError",
    # Configuration exceptions
    "ConfigurationError",
]
