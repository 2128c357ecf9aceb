"""World snapshot models for Tombcrawl.

This module defines the message log and the GameState aggregate that holds
everything a running game needs: the map, the entity store, the player's
inventory, the message log, and the current dungeon depth.

Models:
    Message: One line of player-facing text with a display colour.
    MessageLog: Append-only, oldest-first sequence of messages.
    GameState: The whole world, serialisable to JSON and back.
"""

from __future__ import annotations

from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

from tombcrawl.core.constants import INVENTORY_CAPACITY, WHITE, Color
from tombcrawl.core.exceptions import CorruptSaveError
from tombcrawl.models.ecs import Entity, EntityStore
from tombcrawl.models.map import GameMap


# =============================================================================
# Message Log
# =============================================================================


class Message(BaseModel):
    """A single message shown to the player."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    text: str
    color: Color = WHITE


class MessageLog(RootModel[list[Message]]):
    """Player-facing text, oldest first.

    The log is append-only and unbounded; the rendering side decides how
    many lines to show.
    """

    root: list[Message] = Field(default_factory=list)

    def add(self, text: str, color: Color = WHITE) -> None:
        self.root.append(Message(text=text, color=color))

    def __iter__(self) -> Iterator[Message]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> Message:
        return self.root[index]

    @property
    def texts(self) -> list[str]:
        """Plain text of every message, oldest first."""
        return [message.text for message in self.root]


# =============================================================================
# Game State
# =============================================================================


class GameState(BaseModel):
    """The complete world snapshot.

    Created by ``engine.levels.new_game`` or restored wholesale from a save.
    Descent rebuilds ``game_map`` and re-seeds ``entities`` while keeping the
    player and the inventory.

    Attributes:
        game_map: The current level's tile grid.
        messages: Player-facing message log.
        entities: Entity store; index 0 is the player.
        inventory: Items carried by the player, in pick-up order.
        dungeon_level: Current depth, starting at 1.
    """

    model_config = ConfigDict(extra="forbid")

    game_map: GameMap
    messages: MessageLog = Field(default_factory=MessageLog)
    entities: EntityStore = Field(default_factory=EntityStore)
    inventory: list[Entity] = Field(default_factory=list)
    dungeon_level: int = Field(default=1, ge=1)

    @field_validator("inventory")
    @classmethod
    def validate_inventory(cls, v: list[Entity]) -> list[Entity]:
        """Inventory holds carryable items only, up to the capacity."""
        if len(v) > INVENTORY_CAPACITY:
            raise ValueError(f"inventory holds at most {INVENTORY_CAPACITY} items")
        for entity in v:
            if entity.item is None:
                raise ValueError(f"{entity.name!r} is not an item")
        return v

    @property
    def player(self) -> Entity:
        return self.entities.player

    @property
    def inventory_full(self) -> bool:
        return len(self.inventory) >= INVENTORY_CAPACITY

    def log(self, text: str, color: Color = WHITE) -> None:
        """Append a message to the player-facing log."""
        self.messages.add(text, color)

    def to_json(self) -> str:
        """Serialise the whole world to a JSON document."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str | bytes) -> GameState:
        """Restore a world serialised by :meth:`to_json`.

        Raises:
            CorruptSaveError: If the document is not a valid world snapshot.
        """
        try:
            return cls.model_validate_json(data)
        except ValueError as e:
            raise CorruptSaveError(
                "Saved game could not be read",
                details={"error": str(e)},
            ) from e


__all__ = [
    "Message",
    "MessageLog",
    "GameState",
]
