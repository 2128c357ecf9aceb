"""Enumeration types for Tombcrawl.

Closed sets of values shared by the models and the engine: death
transitions, item kinds, equipment slots, and level-up choices.
"""

from __future__ import annotations

from enum import StrEnum


class DeathKind(StrEnum):
    """Which death transition a combatant runs when its hp drops to zero."""

    PLAYER = "player"
    """Cosmetic change only; the game continues in a dead display state."""

    MONSTER = "monster"
    """The body becomes non-blocking scenery named "remains of X"."""


class ItemKind(StrEnum):
    """What using an item does.

    The first four are consumables; the rest are equipment and are toggled
    on and off instead of being consumed.
    """

    HEAL = "heal"
    LIGHTNING = "lightning"
    CONFUSE = "confuse"
    FIREBALL = "fireball"
    SWORD = "sword"
    SHIELD = "shield"

    @property
    def is_consumable(self) -> bool:
        """Whether using the item removes it from the inventory."""
        return self in (ItemKind.HEAL, ItemKind.LIGHTNING, ItemKind.CONFUSE, ItemKind.FIREBALL)


class Slot(StrEnum):
    """Equipment slots; at most one equipped item per slot."""

    RIGHT_HAND = "right hand"
    LEFT_HAND = "left hand"
    HEAD = "head"


class LevelUpChoice(StrEnum):
    """The three permanent stat increases offered on level-up."""

    HP = "hp"
    POWER = "power"
    DEFENSE = "defense"


__all__ = [
    "DeathKind",
    "ItemKind",
    "Slot",
    "LevelUpChoice",
]
