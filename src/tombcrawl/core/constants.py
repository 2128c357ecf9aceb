"""Game-balance constants and the colour palette for Tombcrawl.

Colours are opaque RGB triples carried by the core for the rendering
collaborator; nothing in the simulation branches on them.
"""

from __future__ import annotations

# =============================================================================
# Player
# =============================================================================

PLAYER_INDEX = 0
"""Store index the player occupies for the whole game."""

PLAYER_NAME = "player"

PLAYER_BASE_HP = 30
PLAYER_BASE_DEFENSE = 2
PLAYER_BASE_POWER = 5

INVENTORY_CAPACITY = 26
"""One slot per letter of the inventory menu."""

# =============================================================================
# Progression
# =============================================================================

LEVEL_UP_BASE = 200
LEVEL_UP_FACTOR = 150

LEVEL_UP_HP_BONUS = 20
LEVEL_UP_POWER_BONUS = 1
LEVEL_UP_DEFENSE_BONUS = 1

# =============================================================================
# Item Effects
# =============================================================================

HEAL_AMOUNT = 40
LIGHTNING_DAMAGE = 40
LIGHTNING_RANGE = 5
CONFUSE_NUM_TURNS = 10
CONFUSE_RANGE = 8
FIREBALL_RADIUS = 3
FIREBALL_DAMAGE = 25

# =============================================================================
# AI
# =============================================================================

MELEE_DISTANCE = 2.0
"""Monsters farther than this step toward the player instead of attacking."""

# =============================================================================
# Dungeon Generation
# =============================================================================

MAP_WIDTH = 80
MAP_HEIGHT = 43

ROOM_MIN_SIZE = 6
ROOM_MAX_SIZE = 10
MAX_ROOMS = 30

MAX_PLACEMENT_ATTEMPTS = 10
"""Re-rolls allowed when a spawn position is already taken."""

STAIRS_NAME = "stairs"

# =============================================================================
# Colours
# =============================================================================

Color = tuple[int, int, int]

WHITE: Color = (255, 255, 255)
RED: Color = (255, 0, 0)
DARK_RED: Color = (191, 0, 0)
ORANGE: Color = (255, 127, 0)
YELLOW: Color = (255, 255, 0)
LIGHT_YELLOW: Color = (255, 255, 115)
GREEN: Color = (0, 255, 0)
LIGHT_GREEN: Color = (115, 255, 115)
DESATURATED_GREEN: Color = (63, 127, 63)
DARKER_GREEN: Color = (0, 127, 0)
LIGHT_CYAN: Color = (115, 255, 255)
LIGHT_BLUE: Color = (115, 115, 255)
VIOLET: Color = (127, 0, 255)
LIGHT_VIOLET: Color = (185, 115, 255)
SKY: Color = (0, 191, 255)
DARKER_ORANGE: Color = (127, 63, 0)


__all__ = [
    "PLAYER_INDEX",
    "PLAYER_NAME",
    "PLAYER_BASE_HP",
    "PLAYER_BASE_DEFENSE",
    "PLAYER_BASE_POWER",
    "INVENTORY_CAPACITY",
    "LEVEL_UP_BASE",
    "LEVEL_UP_FACTOR",
    "LEVEL_UP_HP_BONUS",
    "LEVEL_UP_POWER_BONUS",
    "LEVEL_UP_DEFENSE_BONUS",
    "HEAL_AMOUNT",
    "LIGHTNING_DAMAGE",
    "LIGHTNING_RANGE",
    "CONFUSE_NUM_TURNS",
    "CONFUSE_RANGE",
    "FIREBALL_RADIUS",
    "FIREBALL_DAMAGE",
    "MELEE_DISTANCE",
    "MAP_WIDTH",
    "MAP_HEIGHT",
    "ROOM_MIN_SIZE",
    "ROOM_MAX_SIZE",
    "MAX_ROOMS",
    "MAX_PLACEMENT_ATTEMPTS",
    "STAIRS_NAME",
    "Color",
    "WHITE",
    "RED",
    "DARK_RED",
    "ORANGE",
    "YELLOW",
    "LIGHT_YELLOW",
    "GREEN",
    "LIGHT_GREEN",
    "DESATURATED_GREEN",
    "DARKER_GREEN",
    "LIGHT_CYAN",
    "LIGHT_BLUE",
    "VIOLET",
    "LIGHT_VIOLET",
    "SKY",
    "DARKER_ORANGE",
]
