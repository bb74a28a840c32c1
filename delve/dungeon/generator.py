"""Level generation: rooms, corridors and population.

Generation phases:
    * Start from a fully walled grid.
    * Scatter non-overlapping rectangular rooms; overlapping candidates are
      discarded and retried without counting toward ``max_rooms``.
    * Join every accepted room to the previous one with an L-shaped corridor
      (axis order picked per room).
    * Populate each room with monsters and items drawn from the level-scaled
      tables, skipping spawn tiles that are already occupied.
    * Put the player at the center of the first room and the stairs down at
      the center of the last.

The entity store is rewritten only after every phase succeeded, so a failed
generation leaves the previous level intact.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from delve.errors import GenerationError
from delve.logging_utils import get_logger
from delve.models.catalog import new_stairs, spawn_item, spawn_monster
from delve.models.entities import PLAYER, Entity, is_blocked

from .config import DungeonConfig
from .rooms import Room, carve_room, random_room, room_overlaps
from .tables import (
    ITEM_WEIGHTS,
    MAX_ITEMS_PER_ROOM,
    MAX_MONSTERS_PER_ROOM,
    MONSTER_WEIGHTS,
    transition,
    weighted_choice,
    weights_for_level,
)
from .tiles import Grid, new_grid
from .tunnels import carve_tunnel_between

log = get_logger("generator")


@dataclass
class GeneratedLevel:
    grid: Grid
    rooms: List[Room]
    player_start: Tuple[int, int]
    stairs_pos: Tuple[int, int]
    metrics: Dict[str, Any] = field(default_factory=dict)


def _make_rng(config: DungeonConfig, rng):
    if rng is not None:
        return rng
    return random.Random(config.seed)


def place_objects(room: Room, grid: Grid, occupants: List[Entity], dungeon_level: int, rng) -> List[Entity]:
    """Roll monsters and items for ``room``; return the newly spawned entities.

    ``occupants`` is consulted for blocking checks and is not modified.
    """
    spawned: List[Entity] = []
    monster_weights = weights_for_level(MONSTER_WEIGHTS, dungeon_level)
    num_monsters = rng.randint(0, transition(MAX_MONSTERS_PER_ROOM, dungeon_level))
    for _ in range(num_monsters):
        x, y = room.random_interior_point(rng)
        if is_blocked(x, y, grid, occupants) or is_blocked(x, y, grid, spawned):
            continue
        slug = weighted_choice(monster_weights, rng)
        if slug is None:
            continue
        spawned.append(spawn_monster(slug, x, y))

    item_weights = weights_for_level(ITEM_WEIGHTS, dungeon_level)
    num_items = rng.randint(0, transition(MAX_ITEMS_PER_ROOM, dungeon_level))
    for _ in range(num_items):
        x, y = room.random_interior_point(rng)
        if is_blocked(x, y, grid, occupants) or is_blocked(x, y, grid, spawned):
            continue
        slug = weighted_choice(item_weights, rng)
        if slug is None:
            continue
        spawned.append(spawn_item(slug, x, y))
    return spawned


def _check_config(config: DungeonConfig, dungeon_level: int):
    """Reject size settings no room placement could satisfy."""
    problem = None
    if not 2 <= config.min_size <= config.max_size:
        problem = f"room sizes {config.min_size}..{config.max_size} are invalid"
    elif config.width <= config.max_size or config.height <= config.max_size:
        problem = f"{config.width}x{config.height} map cannot hold rooms of size {config.max_size}"
    if problem is not None:
        log.error(event="generation_failed", dungeon_level=dungeon_level, reason=problem)
        raise GenerationError(problem)


def make_map(
    entities: List[Entity],
    dungeon_level: int,
    config: Optional[DungeonConfig] = None,
    rng: Optional[random.Random] = None,
) -> GeneratedLevel:
    """Generate a level and repopulate ``entities`` (player kept at index 0).

    Raises GenerationError if the size settings cannot fit a room or no room
    could be placed within the attempt budget; ``entities`` is untouched in
    either case.
    """
    if not entities:
        raise ValueError("entity store must hold the player at index 0")
    config = config or DungeonConfig()
    _check_config(config, dungeon_level)
    rng = _make_rng(config, rng)
    player = entities[PLAYER]

    grid = new_grid(config.width, config.height)
    rooms: List[Room] = []
    spawned: List[Entity] = []
    attempts = config.attempt_budget()
    rejected = 0
    while len(rooms) < config.max_rooms and attempts > 0:
        attempts -= 1
        new_room = random_room(config, rng)
        if room_overlaps(new_room, rooms):
            rejected += 1
            continue
        carve_room(grid, new_room)
        spawned.extend(place_objects(new_room, grid, spawned, dungeon_level, rng))
        if rooms:
            carve_tunnel_between(grid, rooms[-1].center, new_room.center, horizontal_first=rng.random() < 0.5)
        rooms.append(new_room)

    if not rooms:
        log.error(event="generation_failed", dungeon_level=dungeon_level, budget=config.attempt_budget())
        raise GenerationError(f"no room could be placed for dungeon level {dungeon_level}")

    player_start = rooms[0].center
    stairs_pos = rooms[-1].center
    # Spawns rolled before the player moved in must not share its tile
    spawned = [e for e in spawned if not (e.blocks and e.pos == player_start)]

    player.set_pos(*player_start)
    del entities[PLAYER + 1 :]
    entities.extend(spawned)
    entities.append(new_stairs(*stairs_pos))

    metrics = {
        "rooms": len(rooms),
        "rejected": rejected,
        "attempts_left": attempts,
        "monsters": sum(1 for e in spawned if e.ai is not None),
        "items": sum(1 for e in spawned if e.item is not None),
    }
    log.info(event="level_generated", dungeon_level=dungeon_level, **metrics)
    return GeneratedLevel(grid=grid, rooms=rooms, player_start=player_start, stairs_pos=stairs_pos, metrics=metrics)


__all__ = ["GeneratedLevel", "make_map", "place_objects"]
