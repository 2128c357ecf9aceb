"""Combat, death, healing, and progression rules.

Effective stats are the fighter's base values plus the bonuses of every
equipped item in the inventory. Only the player carries an inventory, so
only the player ever benefits from equipment.

Damage is not clamped: hp can go below zero until the death check runs,
and the death check fires at most once per entity.
"""

from __future__ import annotations

from tombcrawl.core.constants import (
    DARK_RED,
    LEVEL_UP_BASE,
    LEVEL_UP_DEFENSE_BONUS,
    LEVEL_UP_FACTOR,
    LEVEL_UP_HP_BONUS,
    LEVEL_UP_POWER_BONUS,
    ORANGE,
    RED,
    WHITE,
    YELLOW,
)
from tombcrawl.core.exceptions import InvalidGameStateError
from tombcrawl.core.logging import get_logger
from tombcrawl.models.ecs import Entity, Equipment
from tombcrawl.models.enums import DeathKind, LevelUpChoice
from tombcrawl.models.game_state import GameState


logger = get_logger(__name__)


# =============================================================================
# Effective Stats
# =============================================================================


def equipped_items(entity: Entity, state: GameState) -> list[Equipment]:
    """Equipment components currently worn by ``entity``."""
    if entity is not state.player:
        return []
    return [
        item.equipment
        for item in state.inventory
        if item.equipment is not None and item.equipment.equipped
    ]


def power(entity: Entity, state: GameState) -> int:
    """Base power plus equipment bonuses; 0 for non-combatants."""
    if entity.fighter is None:
        return 0
    bonus = sum(e.power_bonus for e in equipped_items(entity, state))
    return entity.fighter.base_power + bonus


def defense(entity: Entity, state: GameState) -> int:
    """Base defense plus equipment bonuses; 0 for non-combatants."""
    if entity.fighter is None:
        return 0
    bonus = sum(e.defense_bonus for e in equipped_items(entity, state))
    return entity.fighter.base_defense + bonus


def max_hp(entity: Entity, state: GameState) -> int:
    """Base max hp plus equipment bonuses; 0 for non-combatants."""
    if entity.fighter is None:
        return 0
    bonus = sum(e.max_hp_bonus for e in equipped_items(entity, state))
    return entity.fighter.base_max_hp + bonus


# =============================================================================
# Damage and Death
# =============================================================================


def player_death(player: Entity, state: GameState) -> None:
    state.log("You died!", RED)
    player.glyph = "%"
    player.color = DARK_RED


def monster_death(monster: Entity, state: GameState) -> None:
    """Turn a slain monster into non-blocking remains."""
    state.log(f"{monster.name} is dead!", ORANGE)
    monster.glyph = "%"
    monster.color = DARK_RED
    monster.blocks = False
    monster.fighter = None
    monster.ai = None
    monster.name = f"remains of {monster.name}"


def take_damage(entity: Entity, amount: int, state: GameState) -> int | None:
    """Apply damage and run the death transition if hp drops to zero.

    Non-positive amounts are ignored. An entity that is already dead never
    triggers its death transition again.

    Args:
        entity: The entity being hit.
        amount: Raw damage.
        state: World the entity lives in (for messages).

    Returns:
        The experience value of the entity if this hit killed it,
        otherwise None.
    """
    fighter = entity.fighter
    if fighter is None:
        return None

    if amount > 0:
        fighter.hp -= amount

    if fighter.hp <= 0 and entity.alive:
        xp = fighter.xp
        entity.alive = False
        if fighter.on_death == DeathKind.PLAYER:
            player_death(entity, state)
        else:
            monster_death(entity, state)
        logger.info("Entity died", name=entity.name, xp=xp)
        return xp

    return None


def attack(attacker: Entity, target: Entity, state: GameState) -> int:
    """Resolve one melee attack.

    Damage is attacker power minus target defense. Experience from a kill
    goes to the attacker only when the attacker is the player.

    Returns:
        The damage dealt (0 when the attack had no effect).
    """
    damage = power(attacker, state) - defense(target, state)
    if damage <= 0:
        state.log(f"{attacker.name} attacks {target.name} but it has no effect!", WHITE)
        return 0

    state.log(f"{attacker.name} attacks {target.name} for {damage} hit points.", WHITE)
    xp = take_damage(target, damage, state)
    if xp is not None and attacker is state.player and attacker.fighter is not None:
        attacker.fighter.xp += xp
    return damage


def heal(entity: Entity, amount: int, state: GameState) -> None:
    """Restore hp, keeping it between zero and the effective maximum."""
    fighter = entity.fighter
    if fighter is None:
        return
    fighter.hp = max(0, min(fighter.hp + amount, max_hp(entity, state)))


# =============================================================================
# Progression
# =============================================================================


def level_up_xp(entity: Entity) -> int:
    """Experience needed to advance from the entity's current level."""
    return LEVEL_UP_BASE + entity.level * LEVEL_UP_FACTOR


def can_level_up(state: GameState) -> bool:
    player = state.player
    return player.fighter is not None and player.fighter.xp >= level_up_xp(player)


def level_up(state: GameState, choice: LevelUpChoice) -> None:
    """Advance the player one level and apply the chosen stat increase.

    The threshold for the current level is subtracted from the player's
    experience; any surplus carries over.

    Raises:
        InvalidGameStateError: If the player does not have enough experience.
    """
    player = state.player
    if not can_level_up(state) or player.fighter is None:
        raise InvalidGameStateError(
            "Player is not eligible for a level-up",
            entity_index=0,
            details={"level": player.level},
        )

    fighter = player.fighter
    threshold = level_up_xp(player)
    player.level += 1
    fighter.xp -= threshold
    state.log(
        f"Your battle skills grow stronger! You reached level {player.level}!",
        YELLOW,
    )

    choice = LevelUpChoice(choice)
    if choice == LevelUpChoice.HP:
        fighter.base_max_hp += LEVEL_UP_HP_BONUS
        fighter.hp += LEVEL_UP_HP_BONUS
    elif choice == LevelUpChoice.POWER:
        fighter.base_power += LEVEL_UP_POWER_BONUS
    else:
        fighter.base_defense += LEVEL_UP_DEFENSE_BONUS

    logger.info("Level up", level=player.level, choice=str(choice), xp=fighter.xp)


def character_info(state: GameState) -> dict[str, int]:
    """Progression and effective stats of the player, for display."""
    player = state.player
    fighter = player.fighter
    return {
        "level": player.level,
        "xp": fighter.xp if fighter is not None else 0,
        "next_level_xp": level_up_xp(player),
        "hp": fighter.hp if fighter is not None else 0,
        "max_hp": max_hp(player, state),
        "power": power(player, state),
        "defense": defense(player, state),
    }


__all__ = [
    "equipped_items",
    "power",
    "defense",
    "max_hp",
    "player_death",
    "monster_death",
    "take_damage",
    "attack",
    "heal",
    "level_up_xp",
    "can_level_up",
    "level_up",
    "character_info",
]
