"""Movement helpers shared by the player turn and the monster AI."""

from __future__ import annotations

import math
import random
from typing import List, Optional

from delve.dungeon.tiles import in_bounds
from delve.models.entities import PLAYER, Entity, is_blocked
from delve.models.world import World

from .combat_service import attack

CARDINAL_STEPS = [(0, -1), (0, 1), (-1, 0), (1, 0)]


def move_by(entity_id: int, dx: int, dy: int, entities: List[Entity], world: World) -> bool:
    """Step ``entity_id`` by (dx, dy) unless the destination is blocked."""
    entity = entities[entity_id]
    x, y = entity.x + dx, entity.y + dy
    if not in_bounds(world.grid, x, y):
        return False
    if is_blocked(x, y, world.grid, entities):
        return False
    entity.set_pos(x, y)
    return True


def move_towards(entity_id: int, target_x: int, target_y: int, entities: List[Entity], world: World) -> bool:
    """Take one 8-way step toward the target (direction normalised then rounded)."""
    entity = entities[entity_id]
    dx = target_x - entity.x
    dy = target_y - entity.y
    distance = math.sqrt(dx**2 + dy**2)
    if distance == 0:
        return False
    # round-half-away-from-zero, unlike Python's banker's rounding
    step_x = int(math.copysign(math.floor(abs(dx / distance) + 0.5), dx))
    step_y = int(math.copysign(math.floor(abs(dy / distance) + 0.5), dy))
    return move_by(entity_id, step_x, step_y, entities, world)


def fighter_at(x: int, y: int, entities: List[Entity]) -> Optional[int]:
    for idx, e in enumerate(entities):
        if e.fighter is not None and e.pos == (x, y):
            return idx
    return None


def player_move_or_attack(dx: int, dy: int, entities: List[Entity], world: World, rng: Optional[random.Random] = None):
    """Attack whatever fighter stands on the destination, otherwise walk there."""
    player = entities[PLAYER]
    x, y = player.x + dx, player.y + dy
    target_id = fighter_at(x, y, entities)
    if target_id is not None and target_id != PLAYER:
        attack(PLAYER, target_id, entities, world, rng)
        return {"type": "attack", "target_index": target_id}
    moved = move_by(PLAYER, dx, dy, entities, world)
    return {"type": "move" if moved else "bump"}


__all__ = ["CARDINAL_STEPS", "move_by", "move_towards", "fighter_at", "player_move_or_attack"]
