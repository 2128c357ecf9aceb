"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Tombcrawl test suite: a seeded random source, a hand-built
single-room world, and stub front-end collaborators.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from tombcrawl.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep settings and saves inside a temporary directory.

    Returns:
        Path of the database file tests write to.
    """
    for key in ("TOMBCRAWL_GAME_SEED", "TOMBCRAWL_LOG_LEVEL", "TOMBCRAWL_DEBUG"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    db_path = tmp_path / "saves" / "tombcrawl.db"
    monkeypatch.setenv("TOMBCRAWL_DATABASE_PATH", str(db_path))
    return db_path


@pytest.fixture
def small_settings() -> Any:
    """Game settings for a small map that generates quickly.

    Returns:
        GameSettings instance.
    """
    from tombcrawl.core.config import GameSettings

    return GameSettings(
        map_width=40,
        map_height=24,
        max_rooms=12,
        room_min_size=4,
        room_max_size=8,
        torch_radius=6,
    )


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def dice_roller() -> Any:
    """Create a DiceRoller with a fixed seed for reproducible tests.

    Returns:
        DiceRoller instance with fixed seed.
    """
    from tombcrawl.engine.dice import DiceRoller

    return DiceRoller(seed=42)


# =============================================================================
# World Fixtures
# =============================================================================


@pytest.fixture
def room_state() -> Any:
    """A 12x12 map with one open room (x and y in 1..10) and the player at (5, 5).

    No monsters, no items, empty inventory.

    Returns:
        GameState instance.
    """
    from tombcrawl.models import EntityStore, GameMap, GameState, create_player

    game_map = GameMap(width=12, height=12)
    for x in range(1, 11):
        for y in range(1, 11):
            game_map.carve(x, y)

    return GameState(
        game_map=game_map,
        entities=EntityStore([create_player(5, 5)]),
    )


# =============================================================================
# Collaborator Stubs
# =============================================================================


class AllVisible:
    """Visibility provider that sees every tile."""

    def __init__(self) -> None:
        self.calls = 0

    def compute(self, game_map: Any, x: int, y: int, radius: int) -> Any:
        self.calls += 1
        return lambda tx, ty: True


class NothingVisible:
    """Visibility provider that sees no tile at all."""

    def compute(self, game_map: Any, x: int, y: int, radius: int) -> Any:
        return lambda tx, ty: False


class ScriptedIntents:
    """Intent source replaying a fixed list, then quitting."""

    def __init__(self, intents: list[Any]) -> None:
        self._intents = list(intents)

    def next_intent(self, state: Any) -> Any:
        from tombcrawl.engine.collaborators import PlayerIntent

        if self._intents:
            return self._intents.pop(0)
        return PlayerIntent.quit()


class FixedTarget:
    """Target selector that always picks the same tile (or cancels on None)."""

    def __init__(self, tile: tuple[int, int] | None) -> None:
        self.tile = tile
        self.max_ranges: list[float | None] = []

    def select_tile(self, state: Any, visible: Any, max_range: float | None) -> Any:
        self.max_ranges.append(max_range)
        return self.tile


class FixedChoice:
    """Level-up chooser that always picks the same stat."""

    def __init__(self, choice: Any) -> None:
        self.choice = choice
        self.calls = 0

    def choose(self, state: Any) -> Any:
        self.calls += 1
        return self.choice


@pytest.fixture
def stubs() -> Any:
    """Namespace of stub collaborator classes.

    Returns:
        Object with AllVisible, NothingVisible, ScriptedIntents,
        FixedTarget and FixedChoice attributes.
    """

    class Stubs:
        pass

    Stubs.AllVisible = AllVisible  # type: ignore[attr-defined]
    Stubs.NothingVisible = NothingVisible  # type: ignore[attr-defined]
    Stubs.ScriptedIntents = ScriptedIntents  # type: ignore[attr-defined]
    Stubs.FixedTarget = FixedTarget  # type: ignore[attr-defined]
    Stubs.FixedChoice = FixedChoice  # type: ignore[attr-defined]
    return Stubs


@pytest.fixture
def everything_visible() -> Any:
    """Visibility predicate that sees every tile."""
    return lambda x, y: True
