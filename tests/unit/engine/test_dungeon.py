"""Tests for procedural dungeon generation."""

from __future__ import annotations

from itertools import combinations
from typing import Any

import pytest

from tombcrawl.core.config import GameSettings
from tombcrawl.engine.dice import DiceRoller
from tombcrawl.engine.dungeon import (
    Rect,
    create_h_tunnel,
    create_v_tunnel,
    is_blocked,
    is_descent_marker,
    make_map,
    reachable_tiles,
)
from tombcrawl.models import EntityStore, GameMap, create_orc, create_player


class TestRect:
    """Tests for room geometry."""

    def test_center(self) -> None:
        """Test the centre uses integer division of the corners."""
        assert Rect.from_size(2, 3, 7, 6).center() == (5, 6)

    def test_touching_rooms_intersect(self) -> None:
        """Test shared edges count as an intersection."""
        a = Rect.from_size(0, 0, 6, 6)
        b = Rect.from_size(6, 0, 6, 6)

        assert a.intersects(b)
        assert b.intersects(a)

    def test_separate_rooms(self) -> None:
        """Test rooms one tile apart do not intersect."""
        a = Rect.from_size(0, 0, 6, 6)
        b = Rect.from_size(7, 0, 6, 6)

        assert not a.intersects(b)

    def test_interior_excludes_walls(self) -> None:
        """Test only the inside of the box is carved."""
        interior = set(Rect.from_size(0, 0, 3, 3).interior())

        assert interior == {(1, 1), (1, 2), (2, 1), (2, 2)}


class TestTunnels:
    """Tests for corridor carving."""

    def test_tunnels_inclusive(self) -> None:
        """Test both ends of a corridor are carved, in either direction."""
        game_map = GameMap(width=10, height=10)
        create_h_tunnel(7, 2, 4, game_map)
        create_v_tunnel(1, 3, 8, game_map)

        assert all(not game_map.is_blocked(x, 4) for x in range(2, 8))
        assert all(not game_map.is_blocked(8, y) for y in range(1, 4))
        assert game_map.is_blocked(1, 4)


class TestReachableTiles:
    """Tests for the connectivity query."""

    def test_split_map(self) -> None:
        """Test disconnected floor is not reachable."""
        game_map = GameMap(width=8, height=3)
        for x in (1, 2, 5, 6):
            game_map.carve(x, 1)

        assert reachable_tiles(game_map, (1, 1)) == {(1, 1), (2, 1)}

    def test_blocked_start(self) -> None:
        """Test a blocked start reaches nothing."""
        assert reachable_tiles(GameMap(width=3, height=3), (1, 1)) == set()


class TestMakeMap:
    """Tests for full level generation."""

    @pytest.mark.parametrize("seed", [1, 2, 3, 42, 1234])
    def test_generated_level_properties(self, seed: int, small_settings: GameSettings) -> None:
        """Test rooms, connectivity, and placement for several seeds."""
        old_orc = create_orc(1, 1)
        store = EntityStore([create_player(), old_orc])

        dungeon = make_map(store, 1, DiceRoller(seed=seed), small_settings)
        game_map = dungeon.game_map
        player = store.player

        # rooms never overlap or touch
        for a, b in combinations(dungeon.rooms, 2):
            assert not a.intersects(b)

        # every floor tile is reachable from the player
        assert reachable_tiles(game_map, player.pos) == set(game_map.floor_tiles())

        # player at first room centre, stairs at last room centre
        assert player.pos == dungeon.rooms[0].center()
        stairs = [e for e in store if is_descent_marker(e)]
        assert len(stairs) == 1
        assert stairs[0].pos == dungeon.rooms[-1].center()

        # the pre-existing orc was discarded; the player survived
        assert store[0] is player
        assert store.index_of(old_orc) is None

        # every spawn stands on floor inside a room, blocking ones alone
        for entity in list(store)[1:]:
            assert not game_map.is_blocked(*entity.pos)
            assert any(entity.pos in set(room.interior()) for room in dungeon.rooms)
        blocking = [e.pos for e in store if e.blocks]
        assert len(blocking) == len(set(blocking))

    def test_spawn_counts_bounded(self, small_settings: GameSettings) -> None:
        """Test no room gets more than 3 monsters and 2 items at depth 1."""
        store = EntityStore([create_player()])
        dungeon = make_map(store, 1, DiceRoller(seed=99), small_settings)

        for room in dungeon.rooms:
            inside = set(room.interior())
            monsters = [e for e in store if e.ai is not None and e.pos in inside]
            items = [e for e in store if e.item is not None and e.pos in inside]
            assert len(monsters) <= 3
            assert len(items) <= 2

    def test_default_size_map(self) -> None:
        """Test the default 80x43 level with 6..10 rooms sizes."""
        store = EntityStore([create_player()])

        dungeon = make_map(store, 1, DiceRoller(seed=5), GameSettings())

        assert (dungeon.game_map.width, dungeon.game_map.height) == (80, 43)
        for room in dungeon.rooms:
            assert 6 <= room.x2 - room.x1 <= 10
            assert 6 <= room.y2 - room.y1 <= 10
            assert 0 <= room.x1 and room.x2 < 80
            assert 0 <= room.y1 and room.y2 < 43

    def test_single_room(self, small_settings: GameSettings) -> None:
        """Test one accepted room gives a single-room dungeon with stairs under the player."""
        settings = small_settings.model_copy(update={"max_rooms": 1})
        store = EntityStore([create_player()])

        dungeon = make_map(store, 1, DiceRoller(seed=3), settings)

        assert len(dungeon.rooms) == 1
        stairs = [e for e in store if is_descent_marker(e)]
        assert stairs[0].pos == store.player.pos

    def test_deterministic(self, small_settings: GameSettings) -> None:
        """Test one seed always produces the same level."""
        first = EntityStore([create_player()])
        second = EntityStore([create_player()])

        a = make_map(first, 2, DiceRoller(seed=8), small_settings)
        b = make_map(second, 2, DiceRoller(seed=8), small_settings)

        assert a.rooms == b.rooms
        assert a.game_map == b.game_map
        assert first == second


class TestIsBlocked:
    """Tests for the combined terrain and entity check."""

    def test_blocking_entity(self, room_state: Any) -> None:
        """Test a monster blocks its tile but a wall-free tile is open."""
        room_state.entities.append(create_orc(6, 5))

        assert is_blocked(6, 5, room_state.game_map, room_state.entities)
        assert not is_blocked(7, 5, room_state.game_map, room_state.entities)
        assert is_blocked(0, 0, room_state.game_map, room_state.entities)
