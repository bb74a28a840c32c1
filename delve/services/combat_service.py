"""Melee combat resolution and the death/XP pipeline.

Responsibilities:
    * Resolve one attack between two entities addressed by store index.
    * Apply damage and run the death callback bound to the target's Fighter.
    * Convert dead monsters into inert remains and credit XP to the killer.

Design notes:
    - Damage is attacker power minus defender defense, both effective stats.
    - Every attack rolls an independent miss check (``MISS_CHANCE``) that
      overrides the arithmetic result.
    - ``take_damage`` never fires a death callback twice: a target that is
      already dead still loses hp but banks no further XP.
"""

from __future__ import annotations

import random
from typing import Callable, Dict, List, Optional

from delve.logging_utils import get_logger
from delve.models.entities import DeathCallback, Entity, pair
from delve.models.world import World

from . import stats

log = get_logger("combat")

MISS_CHANCE = 0.1


def player_death(player: Entity, world: World):
    world.log.add("You died, see you another time!", "red")
    player.glyph = "%"
    player.color = "lighter_red"


def monster_death(monster: Entity, world: World):
    xp = monster.fighter.xp if monster.fighter else 0
    world.log.add(f"{monster.name} is dead! You gain {xp} experience points.", "orange")
    monster.glyph = "%"
    monster.color = "dark_red"
    monster.blocks = False
    monster.fighter = None
    monster.ai = None
    monster.name = f"remains of {monster.name}"


DEATH_CALLBACKS: Dict[DeathCallback, Callable[[Entity, World], None]] = {
    DeathCallback.PLAYER: player_death,
    DeathCallback.MONSTER: monster_death,
}


def take_damage(entity_id: int, amount: int, entities: List[Entity], world: World) -> Optional[int]:
    """Subtract ``amount`` hp; on a fresh death return the XP the target carried."""
    target = entities[entity_id]
    fighter = target.fighter
    if fighter is None:
        return None
    if amount > 0:
        fighter.hp -= amount
    if fighter.hp <= 0 and target.alive:
        target.alive = False
        xp = fighter.xp
        DEATH_CALLBACKS[fighter.on_death](target, world)
        return xp
    return None


def attack(
    attacker_id: int,
    defender_id: int,
    entities: List[Entity],
    world: World,
    rng: Optional[random.Random] = None,
) -> int:
    """Resolve a melee attack; return the damage figure that was applied.

    A forced miss returns -1, a blocked blow returns 0.
    """
    rng = rng or random.Random()
    attacker, defender = pair(attacker_id, defender_id, entities)
    damage = stats.power(attacker_id, entities, world) - stats.defense(defender_id, entities, world)
    if rng.random() < MISS_CHANCE:
        damage = -1

    if damage > 0:
        world.log.add(f"{attacker.name} attacks {defender.name} for {damage} hit points.", "white")
        xp = take_damage(defender_id, damage, entities, world)
        if xp is not None and attacker.fighter is not None:
            attacker.fighter.xp += xp
            log.debug(event="kill", attacker=attacker.name, defender=defender.name, xp=xp)
    elif damage < 0:
        world.log.add(f"{attacker.name} misses {defender.name}.", "orange")
    else:
        world.log.add(f"{attacker.name} attacks {defender.name} but it has no effect!", "white")
    return damage


__all__ = ["MISS_CHANCE", "DEATH_CALLBACKS", "player_death", "monster_death", "take_damage", "attack"]
