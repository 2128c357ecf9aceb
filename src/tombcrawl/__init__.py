"""Tombcrawl: a turn-based dungeon-crawler simulation core.

Procedurally generated dungeons, a strict turn scheduler with a monster AI
state machine, and the combat, progression and item rules, with rendering
and input left to pluggable collaborators.
"""

__version__ = "0.1.0"
