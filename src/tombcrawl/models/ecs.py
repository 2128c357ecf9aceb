"""Entity Component System (ECS) models for Tombcrawl.

This module implements a Pydantic V2-based component model where:
- Entities are the things that exist on the map (player, monsters, items,
  stairs, corpses)
- Components are optional data containers attached to entities
  (Fighter, AI state, Equipment)
- Engine functions operate on entities with specific component combinations

Entities have no stable id. They are identified by their index in the
EntityStore, and nothing holds an index across a store mutation.

The store itself is an ordered, growable sequence whose first element is
always the player.
"""

from __future__ import annotations

import math
from typing import Annotated, Iterator, Literal, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    model_validator,
)

from tombcrawl.core.constants import (
    DARKER_GREEN,
    DESATURATED_GREEN,
    LIGHT_YELLOW,
    PLAYER_BASE_DEFENSE,
    PLAYER_BASE_HP,
    PLAYER_BASE_POWER,
    PLAYER_INDEX,
    PLAYER_NAME,
    SKY,
    STAIRS_NAME,
    VIOLET,
    WHITE,
    DARKER_ORANGE,
    Color,
)
from tombcrawl.core.exceptions import EntityAliasError, InvalidGameStateError
from tombcrawl.models.enums import DeathKind, ItemKind, Slot


# =============================================================================
# Base Component
# =============================================================================


class Component(BaseModel):
    """Base class for all ECS components.

    Components are pure data containers with no behavior; the engine
    modules mutate them.
    """

    model_config = ConfigDict(
        frozen=False,
        validate_assignment=True,
        extra="forbid",
    )


# =============================================================================
# Combat Component
# =============================================================================


class Fighter(Component):
    """Hit points, base stats, and the death transition.

    ``hp`` is deliberately unconstrained below: damage may push it negative
    until the death check runs. Effective max hp, power and defense add
    equipment bonuses on top of the ``base_`` values (see engine.combat).
    """

    hp: int = Field(description="Current hit points")
    base_max_hp: int = Field(ge=1, description="Max hp before equipment bonuses")
    base_defense: int = Field(default=0, description="Defense before equipment bonuses")
    base_power: int = Field(default=0, description="Power before equipment bonuses")
    xp: int = Field(default=0, ge=0, description="Experience banked or accumulated")
    on_death: DeathKind = Field(default=DeathKind.MONSTER)


# =============================================================================
# AI State Machine
# =============================================================================


class BasicAI(Component):
    """Chase the player when visible, attack when adjacent."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["basic"] = "basic"


class ConfusedAI(Component):
    """Stumble randomly for a number of turns, then restore ``previous``.

    ``previous`` may itself be confused; nesting depth is unbounded.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["confused"] = "confused"
    previous: AIState
    remaining_turns: int

    @property
    def depth(self) -> int:
        """How many confusion layers wrap the innermost state."""
        inner = self.previous
        return 1 + (inner.depth if isinstance(inner, ConfusedAI) else 0)


AIState = Annotated[BasicAI | ConfusedAI, Field(discriminator="kind")]

ConfusedAI.model_rebuild()


# =============================================================================
# Equipment Component
# =============================================================================


class Equipment(Component):
    """An item that can be worn in a slot for passive stat bonuses."""

    slot: Slot
    power_bonus: int = 0
    defense_bonus: int = 0
    max_hp_bonus: int = 0
    equipped: bool = False


# =============================================================================
# Entity
# =============================================================================


class Entity(BaseModel):
    """Something that exists on a map tile.

    Attributes:
        x: Column of the tile the entity stands on.
        y: Row of the tile the entity stands on.
        glyph: Display character (opaque to the core).
        name: Display name.
        color: Display colour (opaque to the core).
        blocks: Whether the entity occupies its tile exclusively.
        alive: Whether the entity is a living combatant.
        always_visible: Rendering hint for static things like stairs.
        level: Player progression counter; 1 for everything else.
        fighter: Combat component.
        ai: Behavior state for monsters.
        item: Item tag; present on everything that can be carried.
        equipment: Equipment component; requires an item tag.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
    )

    x: int = 0
    y: int = 0
    glyph: str = Field(default="?", min_length=1, max_length=1)
    name: str
    color: Color = WHITE
    blocks: bool = False
    alive: bool = False
    always_visible: bool = False
    level: int = Field(default=1, ge=1)

    fighter: Fighter | None = None
    ai: AIState | None = None
    item: ItemKind | None = None
    equipment: Equipment | None = None

    @model_validator(mode="after")
    def equipment_requires_item(self) -> Self:
        """Equipment is a specialization of item."""
        if self.equipment is not None and self.item is None:
            raise ValueError(f"{self.name!r} has equipment but no item tag")
        return self

    @property
    def pos(self) -> tuple[int, int]:
        return (self.x, self.y)

    def set_pos(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def distance(self, x: int, y: int) -> float:
        """Euclidean distance from this entity to a tile."""
        return math.hypot(x - self.x, y - self.y)

    def distance_to(self, other: Entity) -> float:
        """Euclidean distance from this entity to another."""
        return self.distance(other.x, other.y)


# =============================================================================
# Entity Store
# =============================================================================


class EntityStore(RootModel[list[Entity]]):
    """Ordered, growable sequence of entities addressed by index.

    Index 0 is always the player. Removal swaps the last entity into the
    freed slot, so indices are only meaningful until the next mutation.
    """

    root: list[Entity] = Field(default_factory=list)

    def __iter__(self) -> Iterator[Entity]:  # type: ignore[override]
        return iter(self.root)

    def __getitem__(self, index: int) -> Entity:
        return self.root[index]

    def __len__(self) -> int:
        return len(self.root)

    @property
    def player(self) -> Entity:
        """The player entity (index 0).

        Raises:
            InvalidGameStateError: If the store is empty.
        """
        if not self.root:
            raise InvalidGameStateError("Entity store has no player")
        return self.root[PLAYER_INDEX]

    def append(self, entity: Entity) -> int:
        """Add an entity at the end of the store and return its index."""
        self.root.append(entity)
        return len(self.root) - 1

    def swap_remove(self, index: int) -> Entity:
        """Remove the entity at ``index`` by swapping the last one into place.

        Raises:
            InvalidGameStateError: If asked to remove the player.
            IndexError: If ``index`` is out of range.
        """
        if index == PLAYER_INDEX:
            raise InvalidGameStateError(
                "The player is never removed from the store",
                entity_index=index,
            )
        if not 0 < index < len(self.root):
            raise IndexError(f"entity index {index} out of range")
        last = self.root.pop()
        if index == len(self.root):
            return last
        removed = self.root[index]
        self.root[index] = last
        return removed

    def pair(self, first: int, second: int) -> tuple[Entity, Entity]:
        """Borrow two distinct entities for a simultaneous mutation.

        Raises:
            EntityAliasError: If both indices are the same.
        """
        if first == second:
            raise EntityAliasError(
                "Cannot borrow the same entity twice",
                entity_index=first,
            )
        return self.root[first], self.root[second]

    def retain_player(self) -> None:
        """Drop every entity except the player."""
        del self.root[PLAYER_INDEX + 1 :]

    def index_of(self, entity: Entity) -> int | None:
        """Store index of this exact entity object, if present."""
        for index, candidate in enumerate(self.root):
            if candidate is entity:
                return index
        return None

    def blocking_entity_at(self, x: int, y: int) -> int | None:
        """Index of the first blocking entity standing on ``(x, y)``."""
        for index, entity in enumerate(self.root):
            if entity.blocks and entity.pos == (x, y):
                return index
        return None

    def fighter_at(self, x: int, y: int) -> int | None:
        """Index of the first combatant standing on ``(x, y)``."""
        for index, entity in enumerate(self.root):
            if entity.fighter is not None and entity.pos == (x, y):
                return index
        return None

    def items_at(self, x: int, y: int) -> list[int]:
        """Indices of every carryable entity lying on ``(x, y)``."""
        return [
            index
            for index, entity in enumerate(self.root)
            if index != PLAYER_INDEX and entity.item is not None and entity.pos == (x, y)
        ]

    def with_ai(self) -> list[int]:
        """Indices of every entity currently holding an AI component."""
        return [index for index, entity in enumerate(self.root) if entity.ai is not None]


# =============================================================================
# Factory Functions
# =============================================================================


def create_player(x: int = 0, y: int = 0) -> Entity:
    """Create the player at full health with the starting stats."""
    return Entity(
        x=x,
        y=y,
        glyph="@",
        name=PLAYER_NAME,
        color=WHITE,
        blocks=True,
        alive=True,
        fighter=Fighter(
            hp=PLAYER_BASE_HP,
            base_max_hp=PLAYER_BASE_HP,
            base_defense=PLAYER_BASE_DEFENSE,
            base_power=PLAYER_BASE_POWER,
            xp=0,
            on_death=DeathKind.PLAYER,
        ),
    )


def create_monster(
    name: str,
    x: int,
    y: int,
    *,
    hp: int,
    defense: int,
    power: int,
    xp: int,
    glyph: str = "m",
    color: Color = WHITE,
) -> Entity:
    """Create a hostile combatant with basic AI."""
    return Entity(
        x=x,
        y=y,
        glyph=glyph,
        name=name,
        color=color,
        blocks=True,
        alive=True,
        fighter=Fighter(
            hp=hp,
            base_max_hp=hp,
            base_defense=defense,
            base_power=power,
            xp=xp,
            on_death=DeathKind.MONSTER,
        ),
        ai=BasicAI(),
    )


def create_orc(x: int, y: int) -> Entity:
    return create_monster(
        "orc", x, y, hp=10, defense=0, power=3, xp=35, glyph="o", color=DESATURATED_GREEN
    )


def create_troll(x: int, y: int) -> Entity:
    return create_monster(
        "troll", x, y, hp=16, defense=1, power=4, xp=100, glyph="T", color=DARKER_GREEN
    )


_ITEM_TEMPLATES: dict[ItemKind, tuple[str, str, Color]] = {
    ItemKind.HEAL: ("!", "healing potion", VIOLET),
    ItemKind.LIGHTNING: ("#", "scroll of lightning bolt", LIGHT_YELLOW),
    ItemKind.FIREBALL: ("#", "scroll of fireball", LIGHT_YELLOW),
    ItemKind.CONFUSE: ("#", "scroll of confusion", LIGHT_YELLOW),
    ItemKind.SWORD: ("/", "sword", SKY),
    ItemKind.SHIELD: ("[", "shield", DARKER_ORANGE),
}

_EQUIPMENT_TEMPLATES: dict[ItemKind, Equipment] = {
    ItemKind.SWORD: Equipment(slot=Slot.RIGHT_HAND, power_bonus=3),
    ItemKind.SHIELD: Equipment(slot=Slot.LEFT_HAND, defense_bonus=1),
}


def create_item(kind: ItemKind, x: int = 0, y: int = 0) -> Entity:
    """Create a carryable item; equipment kinds get their Equipment component."""
    glyph, name, color = _ITEM_TEMPLATES[kind]
    template = _EQUIPMENT_TEMPLATES.get(kind)
    return Entity(
        x=x,
        y=y,
        glyph=glyph,
        name=name,
        color=color,
        always_visible=True,
        item=kind,
        equipment=template.model_copy() if template is not None else None,
    )


def create_stairs(x: int, y: int) -> Entity:
    """Create the descent marker."""
    return Entity(
        x=x,
        y=y,
        glyph="<",
        name=STAIRS_NAME,
        color=WHITE,
        always_visible=True,
    )


__all__ = [
    # Components
    "Component",
    "Fighter",
    "BasicAI",
    "ConfusedAI",
    "AIState",
    "Equipment",
    # Entities
    "Entity",
    "EntityStore",
    # Factories
    "create_player",
    "create_monster",
    "create_orc",
    "create_troll",
    "create_item",
    "create_stairs",
]
