"""Character advancement and dungeon descent.

Level-ups are split in two steps so no caller ever blocks on input:
``check_level_up`` bumps the level and records the pending threshold on the
world, ``apply_level_up`` spends the XP and raises the chosen stat. The turn
driver refuses turn-advancing intents in between.
"""

from __future__ import annotations

import random
from enum import Enum
from typing import List, Optional

from delve.dungeon.generator import GeneratedLevel, make_map
from delve.logging_utils import get_logger
from delve.models.entities import PLAYER, Entity
from delve.models.world import World
from delve.models.xp import level_up_xp

from . import stats
from .items import heal

log = get_logger("progression")

HP_PER_LEVEL = 20
POWER_PER_LEVEL = 1
DEFENSE_PER_LEVEL = 1


class StatChoice(str, Enum):
    HP = "hp"
    POWER = "power"
    DEFENSE = "defense"


def check_level_up(entities: List[Entity], world: World) -> bool:
    """Start a level-up when the banked XP reaches the threshold.

    Returns True when a new choice became pending.
    """
    if world.pending_level_up is not None:
        return False
    player = entities[PLAYER]
    fighter = player.fighter
    if fighter is None:
        return False
    threshold = level_up_xp(player.level)
    if fighter.xp < threshold:
        return False
    player.level += 1
    world.pending_level_up = threshold
    world.log.add(f"You reached level {player.level}!", "yellow")
    log.info(event="level_up", char_level=player.level, xp=fighter.xp, threshold=threshold)
    return True


def apply_level_up(choice, entities: List[Entity], world: World):
    """Resolve the pending level-up with ``choice`` (StatChoice or its value)."""
    if world.pending_level_up is None:
        raise ValueError("no level-up is pending")
    choice = StatChoice(choice)
    fighter = entities[PLAYER].fighter
    threshold = world.pending_level_up
    if choice is StatChoice.HP:
        fighter.base_max_hp += HP_PER_LEVEL
        fighter.hp += HP_PER_LEVEL
    elif choice is StatChoice.POWER:
        fighter.base_power += POWER_PER_LEVEL
    else:
        fighter.base_defense += DEFENSE_PER_LEVEL
    fighter.xp = max(0, fighter.xp - threshold)
    world.pending_level_up = None
    log.debug(event="level_up_applied", choice=choice.value, xp=fighter.xp)


def next_level(
    entities: List[Entity],
    world: World,
    visibility,
    rng: Optional[random.Random] = None,
) -> GeneratedLevel:
    """Generate the level below, rest the player and move them down.

    The new level is built before anything else changes, so a
    GenerationError leaves the current level and the player untouched.
    """
    target_level = world.dungeon_level + 1
    level = make_map(entities, target_level, world.config, rng or random.Random())

    world.log.add("You take a moment to rest.", "violet")
    heal(PLAYER, stats.max_hp(PLAYER, entities, world) // 2, entities, world)
    world.log.add("After a rare moment of peace, you descend deeper into the dungeon.", "red")
    world.dungeon_level = target_level
    world.grid = level.grid
    visibility.initialise(level.grid)
    world.fov_origin = None
    log.info(event="descend", dungeon_level=target_level, rooms=level.metrics.get("rooms"))
    return level


__all__ = [
    "HP_PER_LEVEL",
    "POWER_PER_LEVEL",
    "DEFENSE_PER_LEVEL",
    "StatChoice",
    "check_level_up",
    "apply_level_up",
    "next_level",
]
