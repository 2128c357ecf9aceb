"""Depth-indexed lookup tables.

A transition table is a list of ``(level, value)`` entries sorted by
ascending level. The value in effect at a given depth is the one of the
last entry whose level does not exceed that depth.

The spawn tables used by the dungeon generator live here too, so balance
changes touch one file.
"""

from __future__ import annotations

from dataclasses import dataclass

from tombcrawl.models.enums import ItemKind


@dataclass(frozen=True)
class Transition:
    """One step of a depth-indexed table.

    Attributes:
        level: First dungeon level at which ``value`` applies.
        value: The value from ``level`` onward.
    """

    level: int
    value: int


def from_dungeon_level(table: list[Transition], level: int) -> int:
    """Value in effect at ``level``.

    Args:
        table: Entries sorted by ascending ``level``.
        level: Current dungeon depth.

    Returns:
        The value of the highest entry not above ``level``, or 0 when the
        depth precedes every entry.
    """
    for transition in reversed(table):
        if level >= transition.level:
            return transition.value
    return 0


# =============================================================================
# Spawn Tables
# =============================================================================

MAX_MONSTERS_PER_ROOM: list[Transition] = [
    Transition(level=1, value=3),
    Transition(level=4, value=4),
    Transition(level=6, value=5),
]

MAX_ITEMS_PER_ROOM: list[Transition] = [
    Transition(level=1, value=2),
    Transition(level=4, value=3),
]

MONSTER_WEIGHTS: dict[str, list[Transition]] = {
    "orc": [Transition(level=1, value=80)],
    "troll": [
        Transition(level=1, value=20),
        Transition(level=5, value=30),
        Transition(level=7, value=60),
    ],
}

ITEM_WEIGHTS: dict[ItemKind, list[Transition]] = {
    ItemKind.HEAL: [Transition(level=1, value=70)],
    ItemKind.LIGHTNING: [
        Transition(level=1, value=10),
        Transition(level=4, value=25),
    ],
    ItemKind.FIREBALL: [
        Transition(level=1, value=10),
        Transition(level=6, value=25),
    ],
    ItemKind.CONFUSE: [Transition(level=1, value=10)],
    ItemKind.SWORD: [Transition(level=4, value=5)],
    ItemKind.SHIELD: [Transition(level=8, value=15)],
}


def monster_weights(level: int) -> list[tuple[str, int]]:
    """``(monster name, weight)`` pairs in effect at ``level``."""
    return [(name, from_dungeon_level(table, level)) for name, table in MONSTER_WEIGHTS.items()]


def item_weights(level: int) -> list[tuple[ItemKind, int]]:
    """``(item kind, weight)`` pairs in effect at ``level``."""
    return [(kind, from_dungeon_level(table, level)) for kind, table in ITEM_WEIGHTS.items()]


__all__ = [
    "Transition",
    "from_dungeon_level",
    "MAX_MONSTERS_PER_ROOM",
    "MAX_ITEMS_PER_ROOM",
    "MONSTER_WEIGHTS",
    "ITEM_WEIGHTS",
    "monster_weights",
    "item_weights",
]
