"""Inventory handling and item use effects.

Each usable ``ItemKind`` maps to one effect in ``ITEM_EFFECTS``. Effects share
the signature ``(inventory_id, entities, world, visibility, rng) -> UseResult``
and report, through the result, both what happened to the item and whether
the action spends the player's turn:

    USED_UP             effect applied, item consumed, no turn spent
    USE_AND_TAKE_TURN   effect applied, item consumed, turn spent
    USE_AND_KEPT        effect applied, item stays (equip toggles), no turn
    CANCELLED           nothing changed besides a log message, no turn

Problems with the request itself (bad inventory slot, empty inventory, an
item with no use) are reported in the message log and come back as
CANCELLED; nothing in this module raises for player mistakes.
"""

from __future__ import annotations

import random
from enum import Enum
from typing import Callable, Dict, List, Optional

from delve.models.entities import PLAYER, Entity, ItemKind
from delve.models.world import World

from . import stats
from .combat_service import take_damage


class UseResult(str, Enum):
    USED_UP = "used_up"
    USE_AND_TAKE_TURN = "use_and_take_turn"
    USE_AND_KEPT = "use_and_kept"
    CANCELLED = "cancelled"

    @property
    def takes_turn(self) -> bool:
        return self is UseResult.USE_AND_TAKE_TURN

    @property
    def consumes_item(self) -> bool:
        return self in (UseResult.USED_UP, UseResult.USE_AND_TAKE_TURN)


HEAL_AMOUNT = 4
ATTACK_BUFF = 2
PLAYER_MAX_ATTACK = 9
LIGHTNING_DAMAGE = 20
LIGHTNING_RANGE = 5


def heal(entity_id: int, amount: int, entities: List[Entity], world: World) -> int:
    """Raise hp by ``amount`` clamped to effective max; return hp gained."""
    fighter = entities[entity_id].fighter
    if fighter is None:
        return 0
    before = fighter.hp
    fighter.hp = min(fighter.hp + amount, stats.max_hp(entity_id, entities, world))
    return fighter.hp - before


def cast_heal(inventory_id, entities, world, visibility, rng) -> UseResult:
    fighter = entities[PLAYER].fighter
    if fighter is None:
        return UseResult.CANCELLED
    if fighter.hp >= stats.max_hp(PLAYER, entities, world):
        world.log.add("You are already at full health.", "red")
        return UseResult.CANCELLED
    world.log.add("Your wounds start to feel better!", "light_violet")
    gained = heal(PLAYER, HEAL_AMOUNT, entities, world)
    world.log.add(f"Healed by: {gained}", "green")
    return UseResult.USED_UP


def cast_attack_buff(inventory_id, entities, world, visibility, rng) -> UseResult:
    fighter = entities[PLAYER].fighter
    if fighter is None:
        return UseResult.CANCELLED
    if fighter.base_power >= PLAYER_MAX_ATTACK:
        world.log.add("Your attack is too high for this scroll to help.", "red")
        return UseResult.CANCELLED
    fighter.base_power = min(fighter.base_power + ATTACK_BUFF, PLAYER_MAX_ATTACK)
    world.log.add(f"Your attack permanently rises to {fighter.base_power}.", "green")
    return UseResult.USED_UP


def closest_monster(max_range: int, entities: List[Entity], visibility) -> Optional[int]:
    """Index of the nearest visible AI fighter within ``max_range``, if any."""
    player = entities[PLAYER]
    closest = None
    closest_dist = max_range + 1.0
    for idx, e in enumerate(entities):
        if idx == PLAYER or e.fighter is None or e.ai is None:
            continue
        if not visibility.visible(e.x, e.y):
            continue
        dist = player.distance_to(e)
        if dist < closest_dist:
            closest = idx
            closest_dist = dist
    return closest


def cast_lightning(inventory_id, entities, world, visibility, rng) -> UseResult:
    monster_id = closest_monster(LIGHTNING_RANGE, entities, visibility)
    if monster_id is None:
        world.log.add("No enemy is close enough to strike.", "red")
        return UseResult.CANCELLED
    world.log.add(
        f"A lightning bolt strikes the {entities[monster_id].name} with a loud thunder! "
        f"The damage is {LIGHTNING_DAMAGE} hit points.",
        "light_blue",
    )
    xp = take_damage(monster_id, LIGHTNING_DAMAGE, entities, world)
    player_fighter = entities[PLAYER].fighter
    if xp is not None and player_fighter is not None:
        player_fighter.xp += xp
    return UseResult.USE_AND_TAKE_TURN


def equip(inventory_id: int, world: World):
    item = world.inventory[inventory_id]
    item.equipment.equipped = True
    world.log.add(f"Equipped {item.name} on {item.equipment.slot.value}.", "light_green")


def dequip(inventory_id: int, world: World):
    item = world.inventory[inventory_id]
    item.equipment.equipped = False
    world.log.add(f"Dequipped {item.name} from {item.equipment.slot.value}.", "light_yellow")


def toggle_equipment(inventory_id, entities, world, visibility, rng) -> UseResult:
    item = world.inventory[inventory_id]
    if item.equipment is None:
        world.log.add(f"The {item.name} cannot be equipped.", "red")
        return UseResult.CANCELLED
    if item.equipment.equipped:
        dequip(inventory_id, world)
    else:
        current = stats.equipped_in_slot(world, item.equipment.slot)
        if current is not None:
            dequip(current, world)
        equip(inventory_id, world)
    return UseResult.USE_AND_KEPT


ItemEffect = Callable[[int, List[Entity], World, object, random.Random], UseResult]

ITEM_EFFECTS: Dict[ItemKind, ItemEffect] = {
    ItemKind.HEAL: cast_heal,
    ItemKind.ATTACK_BUFF: cast_attack_buff,
    ItemKind.LIGHTNING: cast_lightning,
    ItemKind.WEAPON: toggle_equipment,
    ItemKind.ARMOR: toggle_equipment,
    ItemKind.SHIELD: toggle_equipment,
}


def _valid_slot(inventory_id, world: World) -> bool:
    if not world.inventory:
        world.log.add("Inventory is empty.", "white")
        return False
    if not isinstance(inventory_id, int) or not 0 <= inventory_id < len(world.inventory):
        world.log.add("There is no item in that slot.", "red")
        return False
    return True


def use_item(
    inventory_id: int,
    entities: List[Entity],
    world: World,
    visibility,
    rng: Optional[random.Random] = None,
) -> UseResult:
    if not _valid_slot(inventory_id, world):
        return UseResult.CANCELLED
    item = world.inventory[inventory_id]
    effect = ITEM_EFFECTS.get(item.item) if item.item is not None else None
    if effect is None:
        world.log.add(f"The {item.name} cannot be used.", "red")
        return UseResult.CANCELLED
    result = effect(inventory_id, entities, world, visibility, rng or random.Random())
    if result.consumes_item:
        world.inventory.pop(inventory_id)
    elif result is UseResult.CANCELLED:
        world.log.add("Cancelled", "white")
    return result


def pick_item_up(object_id: int, entities: List[Entity], world: World) -> bool:
    """Move the on-ground item at ``object_id`` into the inventory.

    The store is swap-removed: the last entity takes ``object_id``'s index.
    """
    item = entities[object_id]
    if world.inventory_full():
        world.log.add(f"Your inventory is full, you cannot pick up {item.name}.", "red")
        return False
    last = entities.pop()
    if object_id < len(entities):
        entities[object_id] = last
    world.inventory.append(item)
    world.log.add(f"You picked up a {item.name}!", "green")
    return True


def item_at_player(entities: List[Entity]) -> Optional[int]:
    player = entities[PLAYER]
    for idx, e in enumerate(entities):
        if idx != PLAYER and e.item is not None and e.pos == player.pos:
            return idx
    return None


def drop_item(inventory_id: int, entities: List[Entity], world: World) -> bool:
    if not _valid_slot(inventory_id, world):
        return False
    item = world.inventory[inventory_id]
    if item.equipment is not None and item.equipment.equipped:
        dequip(inventory_id, world)
    world.inventory.pop(inventory_id)
    item.set_pos(*entities[PLAYER].pos)
    entities.append(item)
    world.log.add(f"You dropped a {item.name}.", "yellow")
    return True


__all__ = [
    "UseResult",
    "HEAL_AMOUNT",
    "ATTACK_BUFF",
    "PLAYER_MAX_ATTACK",
    "LIGHTNING_DAMAGE",
    "LIGHTNING_RANGE",
    "ITEM_EFFECTS",
    "heal",
    "cast_heal",
    "cast_attack_buff",
    "cast_lightning",
    "closest_monster",
    "toggle_equipment",
    "equip",
    "dequip",
    "use_item",
    "pick_item_up",
    "item_at_player",
    "drop_item",
]
