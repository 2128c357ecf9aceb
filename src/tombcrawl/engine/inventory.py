"""Inventory management and item effects.

Picking up moves an entity out of the store into the player's inventory;
dropping moves it back. Consumable items run an effect and are removed
when the effect goes through. Equipment is toggled on and off instead,
with at most one equipped item per slot.

Illegal requests never raise. They log a message for the player and
return a result that says what happened.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from tombcrawl.core.constants import (
    CONFUSE_NUM_TURNS,
    CONFUSE_RANGE,
    FIREBALL_DAMAGE,
    FIREBALL_RADIUS,
    GREEN,
    HEAL_AMOUNT,
    LIGHT_BLUE,
    LIGHT_CYAN,
    LIGHT_GREEN,
    LIGHT_VIOLET,
    LIGHT_YELLOW,
    LIGHTNING_DAMAGE,
    LIGHTNING_RANGE,
    ORANGE,
    PLAYER_INDEX,
    RED,
    WHITE,
    YELLOW,
)
from tombcrawl.core.logging import get_logger
from tombcrawl.engine.collaborators import TargetSelector, Visibility
from tombcrawl.engine.combat import heal, max_hp, take_damage
from tombcrawl.models.ecs import BasicAI, ConfusedAI
from tombcrawl.models.enums import ItemKind, Slot
from tombcrawl.models.game_state import GameState


logger = get_logger(__name__)


# =============================================================================
# Results
# =============================================================================


class ActionOutcome(StrEnum):
    """How a player action ended."""

    SUCCESS = "success"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class ActionResult:
    """Outcome of an inventory action.

    Attributes:
        outcome: Success, cancellation, or failure.
        reason: Short machine-readable reason for anything but success.
    """

    outcome: ActionOutcome
    reason: str = ""

    @classmethod
    def ok(cls) -> ActionResult:
        return cls(ActionOutcome.SUCCESS)

    @classmethod
    def cancelled(cls, reason: str) -> ActionResult:
        return cls(ActionOutcome.CANCELLED, reason)

    @classmethod
    def failed(cls, reason: str) -> ActionResult:
        return cls(ActionOutcome.FAILED, reason)

    @property
    def succeeded(self) -> bool:
        return self.outcome == ActionOutcome.SUCCESS


class UseResult(StrEnum):
    """Outcome of using an inventory item."""

    USED_UP = "used_up"
    """A consumable took effect and was removed from the inventory."""

    TOGGLED = "toggled"
    """An equipment item was equipped or unequipped."""

    CANCELLED = "cancelled"
    """Nothing happened; the item stays in the inventory."""

    @property
    def took_effect(self) -> bool:
        return self != UseResult.CANCELLED


# =============================================================================
# Equipment
# =============================================================================


def get_equipped_in_slot(slot: Slot, state: GameState) -> int | None:
    """Inventory index of the item equipped in ``slot``, if any."""
    for index, item in enumerate(state.inventory):
        equipment = item.equipment
        if equipment is not None and equipment.equipped and equipment.slot == slot:
            return index
    return None


def equip(inventory_index: int, state: GameState) -> ActionResult:
    """Equip an inventory item, unequipping whatever occupies its slot.

    Equipping an already equipped item does nothing.
    """
    item = state.inventory[inventory_index]
    equipment = item.equipment
    if equipment is None:
        state.log(f"Can't equip {item.name} because it's not an Equipment.", RED)
        return ActionResult.failed("not equipment")
    if equipment.equipped:
        return ActionResult.ok()

    occupant = get_equipped_in_slot(equipment.slot, state)
    if occupant is not None:
        dequip(occupant, state)

    equipment.equipped = True
    state.log(f"Equipped {item.name} on {equipment.slot}.", LIGHT_GREEN)
    logger.debug("Item equipped", item=item.name, slot=str(equipment.slot))
    return ActionResult.ok()


def dequip(inventory_index: int, state: GameState) -> ActionResult:
    """Unequip an inventory item. Unequipping an idle item does nothing."""
    item = state.inventory[inventory_index]
    equipment = item.equipment
    if equipment is None:
        state.log(f"Can't dequip {item.name} because it's not an Equipment.", RED)
        return ActionResult.failed("not equipment")
    if not equipment.equipped:
        return ActionResult.ok()

    equipment.equipped = False
    state.log(f"Dequipped {item.name} from {equipment.slot}.", LIGHT_YELLOW)
    logger.debug("Item dequipped", item=item.name, slot=str(equipment.slot))
    return ActionResult.ok()


def toggle_equipment(inventory_index: int, state: GameState) -> ActionResult:
    equipment = state.inventory[inventory_index].equipment
    if equipment is not None and equipment.equipped:
        return dequip(inventory_index, state)
    return equip(inventory_index, state)


# =============================================================================
# Pick Up and Drop
# =============================================================================


def pick_item_up(entity_index: int, state: GameState) -> ActionResult:
    """Move an item from the entity store into the inventory.

    The entity is swap-removed from the store, so any other index held by
    the caller is stale afterwards. Equipment is auto-equipped when its
    slot is free.
    """
    entity = state.entities[entity_index]
    if state.inventory_full:
        state.log(f"Your inventory is full, cannot pick up {entity.name}.", RED)
        return ActionResult.failed("inventory full")

    item = state.entities.swap_remove(entity_index)
    state.inventory.append(item)
    state.log(f"You picked up a {item.name}!", GREEN)
    logger.debug("Item picked up", item=item.name, inventory=len(state.inventory))

    if item.equipment is not None and get_equipped_in_slot(item.equipment.slot, state) is None:
        equip(len(state.inventory) - 1, state)
    return ActionResult.ok()


def drop_item(inventory_index: int, state: GameState) -> ActionResult:
    """Put an inventory item down on the player's tile."""
    if not 0 <= inventory_index < len(state.inventory):
        state.log("There is no item in that slot.", WHITE)
        return ActionResult.failed("no such item")

    if state.inventory[inventory_index].equipment is not None:
        dequip(inventory_index, state)

    item = state.inventory.pop(inventory_index)
    item.set_pos(*state.player.pos)
    state.entities.append(item)
    state.log(f"You dropped a {item.name}.", YELLOW)
    logger.debug("Item dropped", item=item.name, inventory=len(state.inventory))
    return ActionResult.ok()


# =============================================================================
# Targeting
# =============================================================================


def closest_monster(state: GameState, visible: Visibility, max_range: int) -> int | None:
    """Index of the nearest visible monster strictly within ``max_range + 1``."""
    player = state.player
    closest: int | None = None
    closest_dist = float(max_range + 1)

    for index, entity in enumerate(state.entities):
        if (
            index != PLAYER_INDEX
            and entity.fighter is not None
            and entity.ai is not None
            and visible(entity.x, entity.y)
        ):
            dist = player.distance_to(entity)
            if dist < closest_dist:
                closest = index
                closest_dist = dist
    return closest


def target_monster(
    state: GameState,
    visible: Visibility,
    selector: TargetSelector,
    max_range: float | None,
) -> int | None:
    """Ask for a tile and return the non-player combatant standing on it.

    Tiles out of sight or farther than ``max_range`` from the player count
    as no target.
    """
    tile = selector.select_tile(state, visible, max_range)
    if tile is None or not visible(*tile):
        return None
    if max_range is not None and state.player.distance(*tile) > max_range:
        return None
    for index, entity in enumerate(state.entities):
        if index != PLAYER_INDEX and entity.fighter is not None and entity.pos == tile:
            return index
    return None


# =============================================================================
# Item Effects
# =============================================================================


def cast_heal(state: GameState) -> UseResult:
    player = state.player
    if player.fighter is None:
        return UseResult.CANCELLED
    if player.fighter.hp >= max_hp(player, state):
        state.log("You are already at full health.", RED)
        return UseResult.CANCELLED

    state.log("Your wounds start to feel better!", LIGHT_VIOLET)
    heal(player, HEAL_AMOUNT, state)
    return UseResult.USED_UP


def cast_lightning(state: GameState, visible: Visibility) -> UseResult:
    """Strike the closest visible monster in range."""
    monster_index = closest_monster(state, visible, LIGHTNING_RANGE)
    if monster_index is None:
        state.log("No enemy is close enough to strike.", RED)
        return UseResult.CANCELLED

    monster = state.entities[monster_index]
    state.log(
        f"A lightning bolt strikes the {monster.name} with a loud thunder! "
        f"The damage is {LIGHTNING_DAMAGE} hit points.",
        LIGHT_BLUE,
    )
    xp = take_damage(monster, LIGHTNING_DAMAGE, state)
    player_fighter = state.player.fighter
    if xp is not None and player_fighter is not None:
        player_fighter.xp += xp
    return UseResult.USED_UP


def cast_confuse(
    state: GameState,
    visible: Visibility,
    selector: TargetSelector | None,
) -> UseResult:
    """Wrap the chosen monster's AI in a confusion layer."""
    if selector is None:
        return UseResult.CANCELLED

    state.log("Select an enemy to confuse it, or cancel.", LIGHT_CYAN)
    monster_index = target_monster(state, visible, selector, CONFUSE_RANGE)
    if monster_index is None:
        state.log("No enemy is close enough to strike.", RED)
        return UseResult.CANCELLED

    monster = state.entities[monster_index]
    previous = monster.ai if monster.ai is not None else BasicAI()
    monster.ai = ConfusedAI(previous=previous, remaining_turns=CONFUSE_NUM_TURNS)
    state.log(
        f"The eyes of the {monster.name} look vacant, as it starts to stumble around!",
        LIGHT_GREEN,
    )
    return UseResult.USED_UP


def cast_fireball(
    state: GameState,
    visible: Visibility,
    selector: TargetSelector | None,
) -> UseResult:
    """Burn every combatant around the chosen tile, the player included.

    Only kills of non-player combatants give the player experience.
    """
    if selector is None:
        return UseResult.CANCELLED

    state.log("Select a target tile for the fireball, or cancel.", LIGHT_CYAN)
    tile = selector.select_tile(state, visible, None)
    if tile is None:
        return UseResult.CANCELLED

    x, y = tile
    state.log(
        f"The fireball explodes, burning everything within {FIREBALL_RADIUS} tiles!",
        ORANGE,
    )

    xp_to_gain = 0
    for index, entity in enumerate(state.entities):
        if entity.fighter is not None and entity.distance(x, y) <= FIREBALL_RADIUS:
            state.log(f"The {entity.name} gets burned for {FIREBALL_DAMAGE} hit points.", ORANGE)
            xp = take_damage(entity, FIREBALL_DAMAGE, state)
            if xp is not None and index != PLAYER_INDEX:
                xp_to_gain += xp

    player_fighter = state.player.fighter
    if player_fighter is not None:
        player_fighter.xp += xp_to_gain
    return UseResult.USED_UP


def use_item(
    inventory_index: int,
    state: GameState,
    visible: Visibility,
    selector: TargetSelector | None = None,
) -> UseResult:
    """Use the item in an inventory slot.

    Consumables are removed only when their effect goes through. Equipment
    is toggled and stays in the inventory.

    Args:
        inventory_index: Slot in the player's inventory.
        state: The world.
        visible: Current visibility predicate.
        selector: Targeting collaborator for confusion and fireball.

    Returns:
        What happened to the item.
    """
    if not 0 <= inventory_index < len(state.inventory):
        state.log("There is no item in that slot.", WHITE)
        return UseResult.CANCELLED

    item = state.inventory[inventory_index]
    kind = item.item
    if kind is None:
        state.log(f"The {item.name} cannot be used.", WHITE)
        return UseResult.CANCELLED

    if not kind.is_consumable:
        result = toggle_equipment(inventory_index, state)
        return UseResult.TOGGLED if result.succeeded else UseResult.CANCELLED

    if kind == ItemKind.HEAL:
        outcome = cast_heal(state)
    elif kind == ItemKind.LIGHTNING:
        outcome = cast_lightning(state, visible)
    elif kind == ItemKind.CONFUSE:
        outcome = cast_confuse(state, visible, selector)
    elif kind == ItemKind.FIREBALL:
        outcome = cast_fireball(state, visible, selector)
    else:
        state.log(f"The {item.name} cannot be used.", WHITE)
        outcome = UseResult.CANCELLED

    if outcome == UseResult.USED_UP:
        state.inventory.pop(inventory_index)
        logger.debug("Item used", item=item.name, kind=str(kind))
    else:
        state.log("Cancelled", WHITE)
    return outcome


__all__ = [
    "ActionOutcome",
    "ActionResult",
    "UseResult",
    "get_equipped_in_slot",
    "equip",
    "dequip",
    "toggle_equipment",
    "pick_item_up",
    "drop_item",
    "closest_monster",
    "target_monster",
    "cast_heal",
    "cast_lightning",
    "cast_confuse",
    "cast_fireball",
    "use_item",
]
