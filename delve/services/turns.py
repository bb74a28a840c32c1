"""Turn driver: one player intent in, one resolved turn quantum out.

A quantum is the player's action followed, when that action spent a turn, by
one AI sweep over every AI-bearing entity, then a level-up check. Intents
are plain dicts (see ``delve.validation``):

{
  'kind': 'move' | 'pick_up' | 'use' | 'drop' | 'descend'
          | 'character_sheet' | 'toggle_display' | 'quit',
  'dx': -1..1, 'dy': -1..1,   # move
  'slot': 0..25,              # use / drop
}

Nothing raised while resolving an intent escapes ``play_turn``: failures are
logged, reported in the message log and the quantum counts as not taken.
"""

from __future__ import annotations

import random
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from delve.dungeon.config import DungeonConfig
from delve.dungeon.generator import make_map
from delve.logging_utils import get_logger
from delve.models.catalog import new_player
from delve.models.entities import PLAYER, Entity
from delve.models.world import World
from delve.models.xp import level_up_xp
from delve.validation import validate_intent
from delve.visibility import OmniscientVisibility

from . import persistence, stats
from .items import UseResult, drop_item, item_at_player, pick_item_up, use_item
from .monster_ai import run_ai_sweep
from .movement import player_move_or_attack
from .progression import StatChoice, apply_level_up, check_level_up, next_level

log = get_logger("turns")

TORCH_RADIUS = 5
WELCOME_MESSAGE = "Welcome stranger, brace yourself, you're alone now.."


class PlayerAction(str, Enum):
    TOOK_TURN = "took_turn"
    DIDNT_TAKE_TURN = "didnt_take_turn"
    EXIT = "exit"


def refresh_visibility(entities: List[Entity], world: World, visibility) -> bool:
    """Recompute the oracle when the player moved since the last computation."""
    origin = entities[PLAYER].pos
    if world.fov_origin == origin:
        return False
    visibility.recompute(origin[0], origin[1], TORCH_RADIUS)
    world.fov_origin = origin
    world.mark_explored(visibility)
    return True


def _on_stairs(entities: List[Entity]) -> bool:
    player = entities[PLAYER]
    return any(e.stairs and e.pos == player.pos for e in entities)


def _move(intent, entities, world, visibility, rng) -> PlayerAction:
    player_move_or_attack(intent["dx"], intent["dy"], entities, world, rng)
    return PlayerAction.TOOK_TURN


def _pick_up(intent, entities, world, visibility, rng) -> PlayerAction:
    item_id = item_at_player(entities)
    if item_id is not None:
        pick_item_up(item_id, entities, world)
    return PlayerAction.DIDNT_TAKE_TURN


def _use(intent, entities, world, visibility, rng) -> PlayerAction:
    result = use_item(intent["slot"], entities, world, visibility, rng)
    return PlayerAction.TOOK_TURN if result is UseResult.USE_AND_TAKE_TURN else PlayerAction.DIDNT_TAKE_TURN


def _drop(intent, entities, world, visibility, rng) -> PlayerAction:
    drop_item(intent["slot"], entities, world)
    return PlayerAction.DIDNT_TAKE_TURN


def _descend(intent, entities, world, visibility, rng) -> PlayerAction:
    if _on_stairs(entities):
        next_level(entities, world, visibility, rng)
    return PlayerAction.DIDNT_TAKE_TURN


def _no_turn(intent, entities, world, visibility, rng) -> PlayerAction:
    return PlayerAction.DIDNT_TAKE_TURN


INTENT_HANDLERS: Dict[str, Callable[..., PlayerAction]] = {
    "move": _move,
    "pick_up": _pick_up,
    "use": _use,
    "drop": _drop,
    "descend": _descend,
    # Both only change what the caller displays
    "character_sheet": _no_turn,
    "toggle_display": _no_turn,
}


def play_turn(
    intent: Any,
    entities: List[Entity],
    world: World,
    visibility,
    rng: Optional[random.Random] = None,
) -> PlayerAction:
    rng = rng or random.Random()
    refresh_visibility(entities, world, visibility)

    ok, data = validate_intent(intent)
    if not ok:
        log.debug(event="intent_rejected", **data)
        return PlayerAction.DIDNT_TAKE_TURN
    kind = data["kind"]
    if kind == "quit":
        return PlayerAction.EXIT
    if not entities[PLAYER].alive:
        return PlayerAction.DIDNT_TAKE_TURN
    if world.pending_level_up is not None:
        return PlayerAction.DIDNT_TAKE_TURN

    try:
        action = INTENT_HANDLERS[kind](data, entities, world, visibility, rng)
        if action is PlayerAction.TOOK_TURN and entities[PLAYER].alive:
            run_ai_sweep(entities, world, visibility, rng)
    except Exception as exc:  # turn boundary: resolver failures never abort the loop
        log.error(event="turn_error", kind=kind, error=repr(exc))
        world.log.add("Something went wrong, nothing happens.", "red")
        return PlayerAction.DIDNT_TAKE_TURN

    check_level_up(entities, world)
    return action


def character_sheet(entities: List[Entity], world: World) -> Dict[str, Any]:
    player = entities[PLAYER]
    fighter = player.fighter
    return {
        "level": player.level,
        "xp": fighter.xp if fighter else 0,
        "xp_to_level": level_up_xp(player.level),
        "hp": fighter.hp if fighter else 0,
        "max_hp": stats.max_hp(PLAYER, entities, world),
        "power": stats.power(PLAYER, entities, world),
        "defense": stats.defense(PLAYER, entities, world),
        "dungeon_level": world.dungeon_level,
    }


def new_game(
    config: Optional[DungeonConfig] = None,
    rng: Optional[random.Random] = None,
    visibility=None,
) -> Tuple[List[Entity], World]:
    """Create the player, generate dungeon level 1 and greet the player."""
    config = config or DungeonConfig()
    rng = rng or random.Random(config.seed)
    entities = [new_player()]
    level = make_map(entities, 1, config, rng)
    world = World(grid=level.grid, config=config)
    if visibility is not None:
        visibility.initialise(world.grid)
    world.log.add(WELCOME_MESSAGE, "red")
    log.info(event="new_game", seed=config.seed, rooms=level.metrics.get("rooms"))
    return entities, world


class Session:
    """Bundle of the live game state the CLI and tests drive turn by turn."""

    def __init__(self, entities: List[Entity], world: World, visibility=None, rng: Optional[random.Random] = None):
        self.entities = entities
        self.world = world
        self.visibility = visibility if visibility is not None else OmniscientVisibility()
        self.rng = rng or random.Random()
        self.fullscreen = False
        self.last_sheet: Optional[Dict[str, Any]] = None
        self.visibility.initialise(world.grid)

    @classmethod
    def new(cls, config: Optional[DungeonConfig] = None, seed: Optional[int] = None, visibility=None) -> "Session":
        config = config or DungeonConfig(seed=seed)
        rng = random.Random(seed if seed is not None else config.seed)
        entities, world = new_game(config, rng)
        return cls(entities, world, visibility, rng)

    @classmethod
    def load(cls, slot: Optional[str] = None, url: Optional[str] = None, visibility=None) -> Optional["Session"]:
        loaded = persistence.load_game(slot, url)
        if loaded is None:
            return None
        entities, world = loaded
        return cls(entities, world, visibility)

    @property
    def player(self) -> Entity:
        return self.entities[PLAYER]

    def play(self, intent) -> PlayerAction:
        action = play_turn(intent, self.entities, self.world, self.visibility, self.rng)
        kind = intent.get("kind") if isinstance(intent, dict) else None
        if action is PlayerAction.DIDNT_TAKE_TURN and self.player.alive:
            if kind == "toggle_display":
                self.fullscreen = not self.fullscreen
            elif kind == "character_sheet":
                self.last_sheet = self.sheet()
        return action

    def choose(self, choice) -> None:
        apply_level_up(StatChoice(choice), self.entities, self.world)

    def sheet(self) -> Dict[str, Any]:
        return character_sheet(self.entities, self.world)

    def save(self, slot: Optional[str] = None, url: Optional[str] = None):
        persistence.save_game(self.entities, self.world, slot, url)


__all__ = [
    "TORCH_RADIUS",
    "WELCOME_MESSAGE",
    "PlayerAction",
    "INTENT_HANDLERS",
    "refresh_visibility",
    "play_turn",
    "character_sheet",
    "new_game",
    "Session",
]
