"""Monster and item catalog.

Central table of spawnable content keyed by slug. Generation picks slugs
through the level-scaled weight tables in ``delve.dungeon.tables`` and calls
``spawn_monster`` / ``spawn_item`` to build fresh entities.

Colors are plain names; translating them to terminal or RGB values is left to
whatever renders the world.
"""

from __future__ import annotations

from typing import Dict

from .entities import Ai, DeathCallback, Entity, Equipment, Fighter, ItemKind, Slot

MONSTERS: Dict[str, dict] = {
    "orc": {"glyph": "o", "name": "orc", "color": "light_green", "hp": 9, "defense": 0, "power": 3, "xp": 35},
    "troll": {"glyph": "T", "name": "troll", "color": "darker_green", "hp": 16, "defense": 2, "power": 4, "xp": 55},
    "boss": {"glyph": "W", "name": "boss", "color": "red", "hp": 25, "defense": 4, "power": 5, "xp": 100},
}

ITEMS: Dict[str, dict] = {
    "healing-potion": {"glyph": "!", "name": "healing potion", "color": "violet", "kind": ItemKind.HEAL},
    "lightning-scroll": {
        "glyph": "#",
        "name": "scroll of lightning bolt",
        "color": "light_yellow",
        "kind": ItemKind.LIGHTNING,
    },
    "attack-scroll": {"glyph": "+", "name": "attack scroll", "color": "violet", "kind": ItemKind.ATTACK_BUFF},
    "sword": {
        "glyph": "/",
        "name": "sword",
        "color": "sky",
        "kind": ItemKind.WEAPON,
        "equipment": {"slot": Slot.RIGHT_HAND, "power_bonus": 3},
    },
    "shield": {
        "glyph": "[",
        "name": "shield",
        "color": "darker_orange",
        "kind": ItemKind.SHIELD,
        "equipment": {"slot": Slot.LEFT_HAND, "defense_bonus": 1},
    },
    "chain-mail": {
        "glyph": "&",
        "name": "chain mail",
        "color": "light_grey",
        "kind": ItemKind.ARMOR,
        "equipment": {"slot": Slot.CHEST, "defense_bonus": 2, "max_hp_bonus": 10},
    },
}

PLAYER_STATS = {"hp": 30, "defense": 2, "power": 5}
STAIRS_NAME = "stairs"


def new_player(x: int = 0, y: int = 0) -> Entity:
    player = Entity(x, y, "@", "player", "white", blocks=True)
    player.fighter = Fighter(
        base_max_hp=PLAYER_STATS["hp"],
        hp=PLAYER_STATS["hp"],
        base_defense=PLAYER_STATS["defense"],
        base_power=PLAYER_STATS["power"],
        on_death=DeathCallback.PLAYER,
    )
    player.alive = True
    return player


def spawn_monster(slug: str, x: int, y: int) -> Entity:
    """Build a live monster from the catalog (KeyError for unknown slugs)."""
    spec = MONSTERS[slug]
    monster = Entity(x, y, spec["glyph"], spec["name"], spec["color"], blocks=True)
    monster.fighter = Fighter(
        base_max_hp=spec["hp"],
        hp=spec["hp"],
        base_defense=spec["defense"],
        base_power=spec["power"],
        on_death=DeathCallback.MONSTER,
        xp=spec["xp"],
    )
    monster.ai = Ai.BASIC
    monster.alive = True
    return monster


def spawn_item(slug: str, x: int, y: int) -> Entity:
    spec = ITEMS[slug]
    item = Entity(x, y, spec["glyph"], spec["name"], spec["color"])
    item.item = spec["kind"]
    eq = spec.get("equipment")
    if eq:
        item.equipment = Equipment(
            slot=eq["slot"],
            power_bonus=eq.get("power_bonus", 0),
            defense_bonus=eq.get("defense_bonus", 0),
            max_hp_bonus=eq.get("max_hp_bonus", 0),
        )
    return item


def new_stairs(x: int, y: int) -> Entity:
    return Entity(x, y, "<", STAIRS_NAME, "white", stairs=True)


__all__ = [
    "MONSTERS",
    "ITEMS",
    "PLAYER_STATS",
    "STAIRS_NAME",
    "new_player",
    "spawn_monster",
    "spawn_item",
    "new_stairs",
]
