"""Interfaces to the world outside the simulation core.

The core never draws, reads the keyboard, or computes field of view. It
talks to those concerns through the protocols below, which a front end
implements and hands to the GameLoop.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any, Callable, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tombcrawl.models.enums import LevelUpChoice


if TYPE_CHECKING:
    from tombcrawl.models.game_state import GameState
    from tombcrawl.models.map import GameMap


Visibility = Callable[[int, int], bool]
"""Predicate telling whether tile ``(x, y)`` is currently visible."""


# =============================================================================
# Player Intents
# =============================================================================


class IntentKind(StrEnum):
    """What the player asked to do."""

    MOVE = "move"
    PICK_UP = "pick_up"
    DROP = "drop"
    USE_ITEM = "use_item"
    DESCEND = "descend"
    SHOW_INFO = "show_info"
    WAIT = "wait"
    QUIT = "quit"


_TURN_CONSUMING_BY_DEFAULT = frozenset({IntentKind.MOVE, IntentKind.WAIT})
_NEEDS_INVENTORY_INDEX = frozenset({IntentKind.DROP, IntentKind.USE_ITEM})


class PlayerIntent(BaseModel):
    """One decoded player command.

    Attributes:
        kind: The command.
        dx: Horizontal step for MOVE.
        dy: Vertical step for MOVE.
        inventory_index: Inventory slot for DROP and USE_ITEM.
        consumes_turn: Whether resolving the command may let monsters act.
            Defaults to True for MOVE and WAIT only.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: IntentKind
    dx: int = Field(default=0, ge=-1, le=1)
    dy: int = Field(default=0, ge=-1, le=1)
    inventory_index: int | None = Field(default=None, ge=0)
    consumes_turn: bool = False

    @model_validator(mode="before")
    @classmethod
    def default_consumes_turn(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("consumes_turn") is None:
            data = {**data, "consumes_turn": data.get("kind") in _TURN_CONSUMING_BY_DEFAULT}
        return data

    @model_validator(mode="after")
    def check_inventory_index(self) -> "PlayerIntent":
        if self.kind in _NEEDS_INVENTORY_INDEX and self.inventory_index is None:
            raise ValueError(f"{self.kind} needs an inventory_index")
        return self

    @classmethod
    def move(cls, dx: int, dy: int) -> "PlayerIntent":
        return cls(kind=IntentKind.MOVE, dx=dx, dy=dy)

    @classmethod
    def wait(cls) -> "PlayerIntent":
        return cls(kind=IntentKind.WAIT)

    @classmethod
    def pick_up(cls) -> "PlayerIntent":
        return cls(kind=IntentKind.PICK_UP)

    @classmethod
    def drop(cls, inventory_index: int) -> "PlayerIntent":
        return cls(kind=IntentKind.DROP, inventory_index=inventory_index)

    @classmethod
    def use_item(cls, inventory_index: int) -> "PlayerIntent":
        return cls(kind=IntentKind.USE_ITEM, inventory_index=inventory_index)

    @classmethod
    def descend(cls) -> "PlayerIntent":
        return cls(kind=IntentKind.DESCEND)

    @classmethod
    def show_info(cls) -> "PlayerIntent":
        return cls(kind=IntentKind.SHOW_INFO)

    @classmethod
    def quit(cls) -> "PlayerIntent":
        return cls(kind=IntentKind.QUIT)


# =============================================================================
# Protocols
# =============================================================================


@runtime_checkable
class VisibilityProvider(Protocol):
    """Computes which tiles the player can see."""

    def compute(self, game_map: GameMap, x: int, y: int, radius: int) -> Visibility:
        """Field of view from ``(x, y)`` out to ``radius`` tiles."""
        ...


@runtime_checkable
class IntentSource(Protocol):
    """Supplies the next player command, blocking until one is available."""

    def next_intent(self, state: GameState) -> PlayerIntent: ...


@runtime_checkable
class TargetSelector(Protocol):
    """Asks the player to pick a tile for a targeted item."""

    def select_tile(
        self,
        state: GameState,
        visible: Visibility,
        max_range: float | None,
    ) -> tuple[int, int] | None:
        """Return the chosen tile, or None if the player cancelled.

        Implementations only return visible tiles within ``max_range`` of
        the player (any distance when ``max_range`` is None).
        """
        ...


@runtime_checkable
class LevelUpChooser(Protocol):
    """Asks the player which stat to raise on level-up."""

    def choose(self, state: GameState) -> LevelUpChoice: ...


__all__ = [
    "Visibility",
    "IntentKind",
    "PlayerIntent",
    "VisibilityProvider",
    "IntentSource",
    "TargetSelector",
    "LevelUpChooser",
]
