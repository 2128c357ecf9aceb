"""Integration tests for combat flow.

Tests complete fights from the first blow to the monster's remains,
through the turn scheduler and on a generated dungeon.
"""

from __future__ import annotations

from typing import Any

from tombcrawl.engine.ai import player_move_or_attack
from tombcrawl.engine.collaborators import PlayerIntent
from tombcrawl.engine.dice import DiceRoller
from tombcrawl.engine.inventory import pick_item_up, use_item
from tombcrawl.engine.levels import new_game
from tombcrawl.engine.loop import GameLoop, PlayerAction, TurnStatus
from tombcrawl.models import (
    BasicAI,
    Entity,
    Fighter,
    ItemKind,
    create_item,
    create_orc,
)


class TestCombatFlow:
    """Test complete combat scenarios."""

    def test_two_blows_kill(self, room_state: Any) -> None:
        """Power 5 against defense 0 and hp 10: 5 hp left, then remains."""
        dummy = Entity(
            x=6,
            y=5,
            glyph="d",
            name="dummy",
            blocks=True,
            alive=True,
            fighter=Fighter(hp=10, base_max_hp=10, base_defense=0, base_power=0, xp=20),
            ai=BasicAI(),
        )
        room_state.entities.append(dummy)

        player_move_or_attack(1, 0, room_state)
        assert dummy.fighter is not None and dummy.fighter.hp == 5
        assert dummy.alive

        player_move_or_attack(1, 0, room_state)
        assert dummy.alive is False
        assert dummy.blocks is False
        assert dummy.ai is None
        assert dummy.fighter is None
        assert dummy.name == "remains of dummy"
        assert room_state.player.fighter.xp == 20

        # the remains no longer stop the player
        player_move_or_attack(1, 0, room_state)
        assert room_state.player.pos == (6, 5)

    def test_fight_through_the_loop(self, room_state: Any, stubs: Any, small_settings: Any) -> None:
        """The player wins a bump fight while the orc hits back every turn."""
        orc = create_orc(6, 5)
        room_state.entities.append(orc)
        loop = GameLoop(
            room_state,
            intents=stubs.ScriptedIntents([PlayerIntent.move(1, 0)] * 2),
            visibility=stubs.AllVisible(),
            rng=DiceRoller(seed=1),
            settings=small_settings,
        )

        first = loop.step()
        second = loop.step()

        assert first.monsters_acted == 1
        # the orc died on the player's blow and never got its second turn
        assert second.monsters_acted == 0
        assert orc.alive is False
        assert room_state.player.fighter.hp == 29
        assert room_state.player.fighter.xp == 35
        assert loop.step().status == TurnStatus.QUIT

    def test_orc_walks_up_and_attacks(
        self, room_state: Any, stubs: Any, small_settings: Any
    ) -> None:
        """A visible orc closes the distance, then starts hitting."""
        room_state.entities.append(create_orc(9, 5))
        loop = GameLoop(
            room_state,
            intents=stubs.ScriptedIntents([PlayerIntent.wait()] * 3),
            visibility=stubs.AllVisible(),
            rng=DiceRoller(seed=1),
            settings=small_settings,
        )

        loop.step()
        loop.step()
        assert room_state.entities[1].pos == (7, 5)
        assert room_state.player.fighter.hp == 30

        loop.step()
        assert room_state.player.fighter.hp == 29

    def test_equipment_changes_the_fight(self, room_state: Any, everything_visible: Any) -> None:
        """A picked-up sword is worn at once and adds its power."""
        sword_index = room_state.entities.append(create_item(ItemKind.SWORD, 5, 5))
        pick_item_up(sword_index, room_state)
        orc = create_orc(6, 5)
        room_state.entities.append(orc)

        player_move_or_attack(1, 0, room_state)

        assert orc.alive
        assert orc.fighter is not None and orc.fighter.hp == 2

        # unequip by using it, the next blow is back to base power
        use_item(0, room_state, everything_visible)
        orc.fighter.hp = 10
        player_move_or_attack(1, 0, room_state)
        assert orc.fighter.hp == 5

    def test_fireball_on_player_and_monster(
        self, room_state: Any, stubs: Any, small_settings: Any
    ) -> None:
        """Fireball hits both; only the monster's death gives xp."""
        orc = create_orc(6, 6)
        room_state.entities.append(orc)
        room_state.inventory.append(create_item(ItemKind.FIREBALL))
        loop = GameLoop(
            room_state,
            intents=stubs.ScriptedIntents([PlayerIntent.use_item(0)]),
            visibility=stubs.AllVisible(),
            targeting=stubs.FixedTarget((5, 6)),
            rng=DiceRoller(seed=1),
            settings=small_settings,
        )

        result = loop.step()

        assert result.action == PlayerAction.DIDNT_TAKE_TURN
        assert room_state.player.fighter.hp == 5
        assert orc.alive is False
        assert room_state.player.fighter.xp == 35
        assert room_state.inventory == []


class TestGeneratedGame:
    """Play on a real generated dungeon."""

    def test_random_walk_stays_consistent(self, stubs: Any, small_settings: Any) -> None:
        """A long seeded session keeps every world invariant."""
        rng = DiceRoller(seed=2024)
        state = new_game(rng, small_settings)
        directions = [(1, 0), (-1, 0), (0, 1), (0, -1), (1, 1), (-1, -1)]
        intents = [PlayerIntent.move(*directions[i % len(directions)]) for i in range(60)]
        loop = GameLoop(
            state,
            intents=stubs.ScriptedIntents(intents),
            visibility=stubs.AllVisible(),
            rng=rng,
            settings=small_settings,
        )

        for _ in range(60):
            loop.step()
            player = state.player
            assert state.entities[0] is player
            assert not state.game_map.is_blocked(player.x, player.y)
            blocking = [e.pos for e in state.entities if e.blocks]
            assert len(blocking) == len(set(blocking))
            for entity in state.entities:
                if entity.ai is not None:
                    assert entity.alive and entity.fighter is not None
