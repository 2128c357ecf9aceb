"""Starting a game and descending to the next level."""

from __future__ import annotations

from tombcrawl.core.config import GameSettings
from tombcrawl.core.constants import LIGHT_VIOLET, RED
from tombcrawl.core.logging import get_logger
from tombcrawl.engine.combat import heal, max_hp
from tombcrawl.engine.dice import DiceRoller
from tombcrawl.engine.dungeon import is_descent_marker, make_map
from tombcrawl.models.ecs import EntityStore, create_player
from tombcrawl.models.game_state import GameState


logger = get_logger(__name__)


def new_game(rng: DiceRoller, settings: GameSettings | None = None) -> GameState:
    """Create a fresh world on dungeon level 1.

    Args:
        rng: Random source for generation.
        settings: Grid and room parameters; defaults to the app settings.

    Returns:
        The new world, with the player at the centre of the first room.
    """
    entities = EntityStore([create_player()])
    dungeon = make_map(entities, 1, rng, settings)
    state = GameState(game_map=dungeon.game_map, entities=entities)
    state.log(
        "Welcome stranger! Prepare to perish in the Tombs of the Ancient Kings.",
        RED,
    )
    logger.info("New game started", rooms=len(dungeon.rooms), entities=len(entities))
    return state


def on_stairs(state: GameState) -> bool:
    """Whether the player stands on the descent marker."""
    player = state.player
    return any(
        is_descent_marker(entity) and entity.pos == player.pos
        for entity in state.entities
    )


def next_level(
    state: GameState,
    rng: DiceRoller,
    settings: GameSettings | None = None,
) -> None:
    """Descend one level.

    The player recovers half of their maximum hp, the depth counter goes
    up, and a new map replaces the old one. The player and the inventory
    carry over; every other entity is discarded.
    """
    player = state.player
    state.log("You take a moment to rest, and recover your strength.", LIGHT_VIOLET)
    heal(player, max_hp(player, state) // 2, state)

    state.log(
        "After a rare moment of peace, you descend deeper into the heart of the dungeon...",
        RED,
    )
    state.dungeon_level += 1
    dungeon = make_map(state.entities, state.dungeon_level, rng, settings)
    state.game_map = dungeon.game_map
    logger.info("Descended", dungeon_level=state.dungeon_level, rooms=len(dungeon.rooms))


__all__ = [
    "new_game",
    "on_stairs",
    "next_level",
]
