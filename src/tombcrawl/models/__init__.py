"""Pydantic V2 schemas for Tombcrawl.

This module provides the data model layer of the simulation: the tile
grid, the entity store with its components, and the world snapshot.

Submodules:
    enums: Enumeration types (DeathKind, ItemKind, Slot, LevelUpChoice)
    map: Tile and GameMap
    ecs: Components, Entity, EntityStore, and entity factories
    game_state: MessageLog and GameState

Example:
    >>> from tombcrawl.models import EntityStore, create_player, create_orc
    >>> store = EntityStore([create_player(5, 5)])
    >>> store.append(create_orc(6, 5))
    1
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from tombcrawl.models.enums import (
    DeathKind,
    ItemKind,
    LevelUpChoice,
    Slot,
)

# =============================================================================
# Map
# =============================================================================
from tombcrawl.models.map import (
    GameMap,
    Tile,
)

# =============================================================================
# Entities and Components
# =============================================================================
from tombcrawl.models.ecs import (
    AIState,
    BasicAI,
    Component,
    ConfusedAI,
    Entity,
    EntityStore,
    Equipment,
    Fighter,
    create_item,
    create_monster,
    create_orc,
    create_player,
    create_stairs,
    create_troll,
)

# =============================================================================
# World Snapshot
# =============================================================================
from tombcrawl.models.game_state import (
    GameState,
    Message,
    MessageLog,
)


__all__ = [
    # Enumerations
    "DeathKind",
    "ItemKind",
    "LevelUpChoice",
    "Slot",
    # Map
    "GameMap",
    "Tile",
    # Entities and Components
    "AIState",
    "BasicAI",
    "Component",
    "ConfusedAI",
    "Entity",
    "EntityStore",
    "Equipment",
    "Fighter",
    "create_item",
    "create_monster",
    "create_orc",
    "create_player",
    "create_stairs",
    "create_troll",
    # World Snapshot
    "GameState",
    "Message",
    "MessageLog",
]
