"""Effective stat composition.

Effective stats are the Fighter's base values plus the bonuses of every
equipped item in the world inventory. Only the player owns that inventory, so
every other entity resolves to its base stats.
"""

from __future__ import annotations

from typing import List, Optional

from delve.models.entities import PLAYER, Entity, Slot
from delve.models.world import World


def equipped_items(world: World) -> List[Entity]:
    return [it for it in world.inventory if it.equipment is not None and it.equipment.equipped]


def equipped_in_slot(world: World, slot: Slot) -> Optional[int]:
    """Inventory index of the item equipped in ``slot``, if any."""
    for idx, it in enumerate(world.inventory):
        if it.equipment is not None and it.equipment.equipped and it.equipment.slot == slot:
            return idx
    return None


def _bonus(entity_id: int, world: World, attr: str) -> int:
    if entity_id != PLAYER:
        return 0
    return sum(getattr(it.equipment, attr) for it in equipped_items(world))


def power(entity_id: int, entities: List[Entity], world: World) -> int:
    fighter = entities[entity_id].fighter
    base = fighter.base_power if fighter else 0
    return base + _bonus(entity_id, world, "power_bonus")


def defense(entity_id: int, entities: List[Entity], world: World) -> int:
    fighter = entities[entity_id].fighter
    base = fighter.base_defense if fighter else 0
    return base + _bonus(entity_id, world, "defense_bonus")


def max_hp(entity_id: int, entities: List[Entity], world: World) -> int:
    fighter = entities[entity_id].fighter
    base = fighter.base_max_hp if fighter else 0
    return base + _bonus(entity_id, world, "max_hp_bonus")


__all__ = ["equipped_items", "equipped_in_slot", "power", "defense", "max_hp"]
