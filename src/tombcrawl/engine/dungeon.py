"""Procedural dungeon generation.

Builds a level as a chain of non-overlapping rectangular rooms joined by
L-shaped corridors, then populates every room with monsters and items
drawn from the depth-indexed spawn tables. The player is placed at the
centre of the first room and the stairs at the centre of the last.

Because each room is joined to the previous one, every carved tile is
reachable from the player's start; :func:`reachable_tiles` checks this.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator

import networkx as nx

from tombcrawl.core.config import GameSettings, get_settings
from tombcrawl.core.constants import MAX_PLACEMENT_ATTEMPTS, STAIRS_NAME
from tombcrawl.core.exceptions import DungeonGenerationError
from tombcrawl.core.logging import get_logger
from tombcrawl.engine.dice import DiceRoller
from tombcrawl.engine.transitions import (
    MAX_ITEMS_PER_ROOM,
    MAX_MONSTERS_PER_ROOM,
    from_dungeon_level,
    item_weights,
    monster_weights,
)
from tombcrawl.models.ecs import (
    Entity,
    EntityStore,
    create_item,
    create_orc,
    create_stairs,
    create_troll,
)
from tombcrawl.models.map import GameMap


logger = get_logger(__name__)

MONSTER_FACTORIES: dict[str, Callable[[int, int], Entity]] = {
    "orc": create_orc,
    "troll": create_troll,
}


# =============================================================================
# Geometry
# =============================================================================


@dataclass(frozen=True)
class Rect:
    """A room's bounding box, walls included.

    ``(x1, y1)`` is the top-left corner and ``(x2, y2)`` the bottom-right.
    Only the interior (one tile in from each edge) is carved.
    """

    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_size(cls, x: int, y: int, w: int, h: int) -> Rect:
        return cls(x1=x, y1=y, x2=x + w, y2=y + h)

    def center(self) -> tuple[int, int]:
        return ((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)

    def intersects(self, other: Rect) -> bool:
        """Whether the two boxes overlap or touch (inclusive bounds)."""
        return (
            self.x1 <= other.x2
            and self.x2 >= other.x1
            and self.y1 <= other.y2
            and self.y2 >= other.y1
        )

    def interior(self) -> Iterator[tuple[int, int]]:
        """Coordinates of every carved tile."""
        for x in range(self.x1 + 1, self.x2):
            for y in range(self.y1 + 1, self.y2):
                yield (x, y)


@dataclass
class GeneratedDungeon:
    """Result of generating one level.

    Attributes:
        game_map: The carved grid.
        rooms: Accepted rooms, in acceptance order.
    """

    game_map: GameMap
    rooms: list[Rect] = field(default_factory=list)


# =============================================================================
# Carving
# =============================================================================


def create_room(room: Rect, game_map: GameMap) -> None:
    for x, y in room.interior():
        game_map.carve(x, y)


def create_h_tunnel(x1: int, x2: int, y: int, game_map: GameMap) -> None:
    for x in range(min(x1, x2), max(x1, x2) + 1):
        game_map.carve(x, y)


def create_v_tunnel(y1: int, y2: int, x: int, game_map: GameMap) -> None:
    for y in range(min(y1, y2), max(y1, y2) + 1):
        game_map.carve(x, y)


def connect_rooms(
    previous: tuple[int, int],
    current: tuple[int, int],
    game_map: GameMap,
    rng: DiceRoller,
) -> None:
    """Join two room centres with an L-shaped corridor.

    A coin flip decides whether the corridor runs horizontally first.
    """
    prev_x, prev_y = previous
    new_x, new_y = current
    if rng.coin_flip():
        create_h_tunnel(prev_x, new_x, prev_y, game_map)
        create_v_tunnel(prev_y, new_y, new_x, game_map)
    else:
        create_v_tunnel(prev_y, new_y, prev_x, game_map)
        create_h_tunnel(prev_x, new_x, new_y, game_map)


# =============================================================================
# Queries
# =============================================================================


def is_blocked(x: int, y: int, game_map: GameMap, entities: EntityStore) -> bool:
    """Whether terrain or a blocking entity prevents standing on ``(x, y)``."""
    if game_map.is_blocked(x, y):
        return True
    return entities.blocking_entity_at(x, y) is not None


def is_descent_marker(entity: Entity) -> bool:
    """Whether ``entity`` is the stairs down."""
    return entity.name == STAIRS_NAME and entity.fighter is None and entity.item is None


def reachable_tiles(game_map: GameMap, start: tuple[int, int]) -> set[tuple[int, int]]:
    """Unblocked tiles connected to ``start`` by orthogonal steps.

    Args:
        game_map: The grid to search.
        start: Starting coordinate.

    Returns:
        The connected component containing ``start``; empty when ``start``
        itself is blocked.
    """
    if game_map.is_blocked(*start):
        return set()

    graph = nx.grid_2d_graph(game_map.width, game_map.height)
    graph.remove_nodes_from(
        (x, y)
        for x in range(game_map.width)
        for y in range(game_map.height)
        if game_map.tiles[x][y].blocked
    )
    return set(nx.node_connected_component(graph, start))


# =============================================================================
# Population
# =============================================================================


def _random_free_spot(
    room: Rect,
    game_map: GameMap,
    entities: EntityStore,
    rng: DiceRoller,
) -> tuple[int, int] | None:
    for _ in range(MAX_PLACEMENT_ATTEMPTS):
        x = rng.randint(room.x1 + 1, room.x2 - 1)
        y = rng.randint(room.y1 + 1, room.y2 - 1)
        if not is_blocked(x, y, game_map, entities):
            return (x, y)
    return None


def place_objects(
    room: Rect,
    game_map: GameMap,
    entities: EntityStore,
    depth: int,
    rng: DiceRoller,
) -> int:
    """Spawn monsters and items inside ``room``.

    A spot that is taken is re-rolled a bounded number of times; a spawn
    that never finds a free spot is skipped.

    Returns:
        Number of entities added.
    """
    added = 0

    num_monsters = rng.randint(0, from_dungeon_level(MAX_MONSTERS_PER_ROOM, depth))
    for _ in range(num_monsters):
        spot = _random_free_spot(room, game_map, entities, rng)
        if spot is None:
            continue
        name = rng.weighted_choice(monster_weights(depth))
        entities.append(MONSTER_FACTORIES[name](*spot))
        added += 1

    num_items = rng.randint(0, from_dungeon_level(MAX_ITEMS_PER_ROOM, depth))
    for _ in range(num_items):
        spot = _random_free_spot(room, game_map, entities, rng)
        if spot is None:
            continue
        kind = rng.weighted_choice(item_weights(depth))
        entities.append(create_item(kind, *spot))
        added += 1

    return added


# =============================================================================
# Generation
# =============================================================================


def make_map(
    entities: EntityStore,
    depth: int,
    rng: DiceRoller,
    settings: GameSettings | None = None,
) -> GeneratedDungeon:
    """Generate a level and repopulate ``entities``.

    Everything except the player is dropped from the store first. The
    player is moved to the centre of the first room.

    Args:
        entities: Store to repopulate; index 0 must be the player.
        depth: Dungeon level, used for the spawn tables.
        rng: Random source.
        settings: Grid and room parameters; defaults to the app settings.

    Returns:
        The new map and the accepted rooms.

    Raises:
        DungeonGenerationError: If no room could be placed.
    """
    settings = settings or get_settings().game
    game_map = GameMap(width=settings.map_width, height=settings.map_height)
    rooms: list[Rect] = []

    entities.retain_player()
    player = entities.player

    for _ in range(settings.max_rooms):
        w = rng.randint(settings.room_min_size, settings.room_max_size)
        h = rng.randint(settings.room_min_size, settings.room_max_size)
        x = rng.randrange(0, settings.map_width - w)
        y = rng.randrange(0, settings.map_height - h)
        new_room = Rect.from_size(x, y, w, h)

        if any(new_room.intersects(other) for other in rooms):
            continue

        create_room(new_room, game_map)
        center = new_room.center()
        if not rooms:
            player.set_pos(*center)
        else:
            connect_rooms(rooms[-1].center(), center, game_map, rng)

        place_objects(new_room, game_map, entities, depth, rng)
        rooms.append(new_room)

    if not rooms:
        raise DungeonGenerationError(
            "No room could be placed",
            details={"depth": depth, "max_rooms": settings.max_rooms},
        )

    entities.append(create_stairs(*rooms[-1].center()))

    floor = game_map.floor_tiles()
    reachable = reachable_tiles(game_map, player.pos)
    if len(reachable) != len(floor):
        logger.warning(
            "Unreachable floor tiles",
            depth=depth,
            floor=len(floor),
            reachable=len(reachable),
        )

    logger.info(
        "Dungeon generated",
        depth=depth,
        rooms=len(rooms),
        entities=len(entities),
        floor_tiles=len(floor),
    )
    return GeneratedDungeon(game_map=game_map, rooms=rooms)


__all__ = [
    "Rect",
    "GeneratedDungeon",
    "MONSTER_FACTORIES",
    "create_room",
    "create_h_tunnel",
    "create_v_tunnel",
    "connect_rooms",
    "is_blocked",
    "is_descent_marker",
    "reachable_tiles",
    "place_objects",
    "make_map",
]
