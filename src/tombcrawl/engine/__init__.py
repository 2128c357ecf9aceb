"""Simulation engine for Tombcrawl.

This package contains the rules that act on the models:

- dice: Seedable random source
- transitions: Depth-indexed tables and spawn weights
- dungeon: Procedural level generation
- combat: Damage, death, healing, and progression
- inventory: Pick-up, drop, equipment, and item effects
- ai: Movement and the monster AI state machine
- collaborators: Player intents and front-end protocols
- levels: New game and descent
- loop: The turn scheduler
"""

from __future__ import annotations

from tombcrawl.engine.collaborators import (
    IntentKind,
    IntentSource,
    LevelUpChooser,
    PlayerIntent,
    TargetSelector,
    Visibility,
    VisibilityProvider,
)
from tombcrawl.engine.dice import DiceRoller
from tombcrawl.engine.dungeon import GeneratedDungeon, Rect, make_map, reachable_tiles
from tombcrawl.engine.inventory import ActionOutcome, ActionResult, UseResult
from tombcrawl.engine.levels import new_game, next_level
from tombcrawl.engine.loop import GameLoop, PlayerAction, TurnResult, TurnStatus
from tombcrawl.engine.transitions import Transition, from_dungeon_level


__all__ = [
    # Collaborators
    "IntentKind",
    "IntentSource",
    "LevelUpChooser",
    "PlayerIntent",
    "TargetSelector",
    "Visibility",
    "VisibilityProvider",
    # Dice
    "DiceRoller",
    # Dungeon
    "GeneratedDungeon",
    "Rect",
    "make_map",
    "reachable_tiles",
    # Results
    "ActionOutcome",
    "ActionResult",
    "UseResult",
    # Levels
    "new_game",
    "next_level",
    # Loop
    "GameLoop",
    "PlayerAction",
    "TurnResult",
    "TurnStatus",
    # Transitions
    "Transition",
    "from_dungeon_level",
]
