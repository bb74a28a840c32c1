"""Monster AI action selection.

Each AI-bearing entity gets one decision per player turn. Behaviors are keyed
by the ``Ai`` enum in ``AI_HANDLERS``; adding a behavior means adding an enum
member and a handler with the same signature, ``take_turn`` stays unchanged.

Handlers return an action dict describing what happened:
{
  'type': 'move' | 'attack' | 'idle',
  'target_index': 0,          # when type == 'attack'
}

Perception reuses the player's field of view: a monster acts only when its
own tile is visible from the last computed player-centred FOV.
"""

from __future__ import annotations

import random
from typing import Any, Callable, Dict, List, Optional

from delve.models.entities import PLAYER, Ai, Entity
from delve.models.world import World

from .combat_service import attack
from .movement import move_towards

Action = Dict[str, Any]

MELEE_DISTANCE = 2.0


def ai_basic(monster_id: int, entities: List[Entity], world: World, visibility, rng) -> Action:
    monster = entities[monster_id]
    player = entities[PLAYER]
    if not visibility.visible(monster.x, monster.y):
        return {"type": "idle"}
    if monster.distance_to(player) >= MELEE_DISTANCE:
        moved = move_towards(monster_id, player.x, player.y, entities, world)
        return {"type": "move" if moved else "idle"}
    if player.fighter is not None and player.fighter.hp > 0:
        attack(monster_id, PLAYER, entities, world, rng)
        return {"type": "attack", "target_index": PLAYER}
    return {"type": "idle"}


AI_HANDLERS: Dict[Ai, Callable[..., Action]] = {
    Ai.BASIC: ai_basic,
}


def take_turn(
    monster_id: int,
    entities: List[Entity],
    world: World,
    visibility,
    rng: Optional[random.Random] = None,
) -> Action:
    monster = entities[monster_id]
    if monster.ai is None or monster_id == PLAYER:
        return {"type": "idle"}
    handler = AI_HANDLERS[monster.ai]
    return handler(monster_id, entities, world, visibility, rng or random.Random())


def run_ai_sweep(entities: List[Entity], world: World, visibility, rng: Optional[random.Random] = None) -> List[Action]:
    """Give every AI-bearing entity one decision, in store order."""
    rng = rng or random.Random()
    actions = []
    for idx in range(len(entities)):
        if idx == PLAYER or entities[idx].ai is None:
            continue
        actions.append(take_turn(idx, entities, world, visibility, rng))
    return actions


__all__ = ["Action", "MELEE_DISTANCE", "AI_HANDLERS", "ai_basic", "take_turn", "run_ai_sweep"]
