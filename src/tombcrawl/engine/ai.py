"""Movement primitives and the monster AI state machine.

Each AI-bearing entity holds one AI state. On its turn the state is
detached, resolved into the next state, and reattached:

- BasicAI chases the player while the monster is visible and attacks when
  adjacent. It always stays basic.
- ConfusedAI stumbles one random step per turn while turns remain, then
  hands back the state it wrapped.
"""

from __future__ import annotations

from tombcrawl.core.constants import MELEE_DISTANCE, PLAYER_INDEX, RED
from tombcrawl.core.logging import get_logger
from tombcrawl.engine.collaborators import Visibility
from tombcrawl.engine.combat import attack
from tombcrawl.engine.dice import DiceRoller
from tombcrawl.engine.dungeon import is_blocked
from tombcrawl.engine.inventory import ActionResult
from tombcrawl.models.ecs import AIState, BasicAI, ConfusedAI
from tombcrawl.models.game_state import GameState


logger = get_logger(__name__)


# =============================================================================
# Movement
# =============================================================================


def move_by(entity_index: int, dx: int, dy: int, state: GameState) -> bool:
    """Step an entity by ``(dx, dy)`` if the destination is free.

    Returns:
        Whether the entity moved. Illegal moves are silent no-ops.
    """
    entity = state.entities[entity_index]
    x, y = entity.x + dx, entity.y + dy
    if is_blocked(x, y, state.game_map, state.entities):
        return False
    entity.set_pos(x, y)
    return True


def move_towards(entity_index: int, target_x: int, target_y: int, state: GameState) -> bool:
    """Take one step along the rounded unit vector toward a tile."""
    entity = state.entities[entity_index]
    dx = target_x - entity.x
    dy = target_y - entity.y
    distance = entity.distance(target_x, target_y)
    if distance == 0:
        return False
    return move_by(entity_index, round(dx / distance), round(dy / distance), state)


def player_move_or_attack(dx: int, dy: int, state: GameState) -> ActionResult:
    """Attack the combatant in the given direction, or step there.

    A zero offset is a wait. A step into a wall or a blocking entity that
    is not a combatant fails without using the turn.
    """
    if dx == 0 and dy == 0:
        return ActionResult.ok()

    player = state.player
    x, y = player.x + dx, player.y + dy

    target_index = state.entities.fighter_at(x, y)
    if target_index is not None and target_index != PLAYER_INDEX:
        player, target = state.entities.pair(PLAYER_INDEX, target_index)
        attack(player, target, state)
        return ActionResult.ok()

    if move_by(PLAYER_INDEX, dx, dy, state):
        return ActionResult.ok()
    return ActionResult.failed("blocked")


# =============================================================================
# AI State Machine
# =============================================================================


def ai_basic(monster_index: int, state: GameState, visible: Visibility) -> AIState:
    """A visible monster closes in on the player and attacks when adjacent."""
    monster = state.entities[monster_index]
    player = state.player

    if visible(monster.x, monster.y):
        if monster.distance_to(player) > MELEE_DISTANCE:
            move_towards(monster_index, player.x, player.y, state)
        elif player.fighter is not None and player.fighter.hp > 0:
            monster, player = state.entities.pair(monster_index, PLAYER_INDEX)
            attack(monster, player, state)
    return BasicAI()


def ai_confused(
    monster_index: int,
    state: GameState,
    rng: DiceRoller,
    ai: ConfusedAI,
) -> AIState:
    """Stumble randomly, or recover once no turns remain."""
    if ai.remaining_turns > 0:
        move_by(monster_index, rng.delta(), rng.delta(), state)
        return ConfusedAI(previous=ai.previous, remaining_turns=ai.remaining_turns - 1)

    monster = state.entities[monster_index]
    state.log(f"The {monster.name} is no longer confused!", RED)
    return ai.previous


def take_turn(
    monster_index: int,
    state: GameState,
    visible: Visibility,
    rng: DiceRoller,
) -> None:
    """Resolve one AI turn for the entity at ``monster_index``.

    The AI is detached while it runs and the resulting state reattached,
    unless the entity died in the meantime.
    """
    monster = state.entities[monster_index]
    ai = monster.ai
    if ai is None:
        return

    monster.ai = None
    if isinstance(ai, ConfusedAI):
        new_ai = ai_confused(monster_index, state, rng, ai)
    else:
        new_ai = ai_basic(monster_index, state, visible)

    if monster.alive:
        monster.ai = new_ai


__all__ = [
    "move_by",
    "move_towards",
    "player_move_or_attack",
    "ai_basic",
    "ai_confused",
    "take_turn",
]
