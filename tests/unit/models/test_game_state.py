"""Tests for the map, message log, and world snapshot models."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from tombcrawl.core.constants import RED, WHITE
from tombcrawl.core.exceptions import CorruptSaveError
from tombcrawl.models import (
    BasicAI,
    ConfusedAI,
    GameMap,
    GameState,
    ItemKind,
    MessageLog,
    Tile,
    create_item,
    create_orc,
)


class TestGameMap:
    """Tests for the tile grid."""

    def test_starts_walled(self) -> None:
        """Test a fresh map is entirely blocked."""
        game_map = GameMap(width=5, height=4)

        assert len(game_map.tiles) == 5
        assert all(len(column) == 4 for column in game_map.tiles)
        assert game_map.floor_tiles() == []
        assert game_map.is_blocked(2, 2)

    def test_carve(self) -> None:
        """Test carving makes a floor tile."""
        game_map = GameMap(width=5, height=4)
        game_map.carve(2, 1)

        assert game_map.tile(2, 1) == Tile.floor()
        assert not game_map.is_blocked(2, 1)
        assert game_map.floor_tiles() == [(2, 1)]

    def test_out_of_bounds(self) -> None:
        """Test coordinates outside the grid count as blocked."""
        game_map = GameMap(width=5, height=4)

        assert game_map.is_blocked(-1, 0)
        assert game_map.is_blocked(5, 0)
        with pytest.raises(IndexError):
            game_map.tile(0, 4)

    def test_explored_flag(self) -> None:
        """Test marking a tile explored."""
        game_map = GameMap(width=3, height=3)
        game_map.mark_explored(1, 1)

        assert game_map.tile(1, 1).explored is True
        assert game_map.tile(0, 0).explored is False

    def test_shape_mismatch(self) -> None:
        """Test a restored grid must match its declared size."""
        with pytest.raises(ValidationError):
            GameMap(width=2, height=2, tiles=[[Tile.wall()]])


class TestMessageLog:
    """Tests for the append-only message log."""

    def test_oldest_first(self) -> None:
        """Test messages keep insertion order."""
        log = MessageLog()
        log.add("first")
        log.add("second", RED)

        assert log.texts == ["first", "second"]
        assert log[0].color == WHITE
        assert log[1].color == RED
        assert len(log) == 2


class TestGameState:
    """Tests for the world snapshot."""

    def test_defaults(self, room_state: Any) -> None:
        """Test a new world starts on level 1 with an empty inventory."""
        assert room_state.dungeon_level == 1
        assert room_state.inventory == []
        assert room_state.player.pos == (5, 5)

    def test_inventory_capacity(self, room_state: Any) -> None:
        """Test the inventory cannot be restored with more than 26 items."""
        data = room_state.model_dump()
        data["inventory"] = [create_item(ItemKind.HEAL).model_dump() for _ in range(27)]

        with pytest.raises(ValidationError):
            GameState.model_validate(data)

    def test_json_round_trip(self, room_state: Any) -> None:
        """Test saving and restoring gives an identical world."""
        orc = create_orc(2, 2)
        orc.ai = ConfusedAI(
            previous=ConfusedAI(previous=BasicAI(), remaining_turns=1),
            remaining_turns=4,
        )
        room_state.entities.append(orc)
        room_state.inventory.append(create_item(ItemKind.SWORD))
        room_state.game_map.mark_explored(5, 5)
        room_state.log("hello", RED)
        room_state.dungeon_level = 3

        restored = GameState.from_json(room_state.to_json())

        assert restored == room_state
        assert restored.to_json() == room_state.to_json()

    def test_corrupt_json(self) -> None:
        """Test garbage input raises CorruptSaveError."""
        with pytest.raises(CorruptSaveError):
            GameState.from_json("{not json")
