"""Entity and component data model.

An ``Entity`` is one simulated thing (player, monster, item, stairs) carrying
up to four optional components. Components are small value records rather
than subclasses; behavior variants (AI, item effect, death callback) are enums
resolved through handler tables in the service layer.

The entity store is a plain ``list`` with the player fixed at index
``PLAYER``. Every other index may shift when entities are picked up or
dropped, so services address entities by index only within one operation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

PLAYER = 0


class DeathCallback(str, Enum):
    PLAYER = "player"
    MONSTER = "monster"


class Ai(str, Enum):
    BASIC = "basic"


class ItemKind(str, Enum):
    HEAL = "heal"
    ATTACK_BUFF = "attack_buff"
    LIGHTNING = "lightning"
    WEAPON = "weapon"
    ARMOR = "armor"
    SHIELD = "shield"


class Slot(str, Enum):
    RIGHT_HAND = "right hand"
    LEFT_HAND = "left hand"
    CHEST = "chest"


@dataclass
class Fighter:
    base_max_hp: int
    hp: int
    base_defense: int
    base_power: int
    on_death: DeathCallback
    xp: int = 0

    def to_dict(self):
        return {
            "base_max_hp": self.base_max_hp,
            "hp": self.hp,
            "base_defense": self.base_defense,
            "base_power": self.base_power,
            "on_death": self.on_death.value,
            "xp": self.xp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Fighter":
        return cls(
            base_max_hp=int(data["base_max_hp"]),
            hp=int(data["hp"]),
            base_defense=int(data["base_defense"]),
            base_power=int(data["base_power"]),
            on_death=DeathCallback(data["on_death"]),
            xp=int(data["xp"]),
        )


@dataclass
class Equipment:
    slot: Slot
    equipped: bool = False
    power_bonus: int = 0
    defense_bonus: int = 0
    max_hp_bonus: int = 0

    def to_dict(self):
        return {
            "slot": self.slot.value,
            "equipped": self.equipped,
            "power_bonus": self.power_bonus,
            "defense_bonus": self.defense_bonus,
            "max_hp_bonus": self.max_hp_bonus,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Equipment":
        return cls(
            slot=Slot(data["slot"]),
            equipped=bool(data["equipped"]),
            power_bonus=int(data["power_bonus"]),
            defense_bonus=int(data["defense_bonus"]),
            max_hp_bonus=int(data["max_hp_bonus"]),
        )


@dataclass
class Entity:
    x: int
    y: int
    glyph: str
    name: str
    color: str
    blocks: bool = False
    alive: bool = False
    level: int = 1
    stairs: bool = False
    fighter: Optional[Fighter] = None
    ai: Optional[Ai] = None
    item: Optional[ItemKind] = None
    equipment: Optional[Equipment] = None

    @property
    def pos(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def set_pos(self, x: int, y: int):
        self.x = x
        self.y = y

    def distance_to(self, other: "Entity") -> float:
        return self.distance(other.x, other.y)

    def distance(self, x: int, y: int) -> float:
        return math.sqrt((x - self.x) ** 2 + (y - self.y) ** 2)

    def to_dict(self):
        return {
            "x": self.x,
            "y": self.y,
            "glyph": self.glyph,
            "name": self.name,
            "color": self.color,
            "blocks": self.blocks,
            "alive": self.alive,
            "level": self.level,
            "stairs": self.stairs,
            "fighter": self.fighter.to_dict() if self.fighter else None,
            "ai": self.ai.value if self.ai else None,
            "item": self.item.value if self.item else None,
            "equipment": self.equipment.to_dict() if self.equipment else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Entity":
        """Strict inverse of ``to_dict``; missing keys or bad enum values raise."""
        fighter = data["fighter"]
        equipment = data["equipment"]
        return cls(
            x=int(data["x"]),
            y=int(data["y"]),
            glyph=str(data["glyph"]),
            name=str(data["name"]),
            color=str(data["color"]),
            blocks=bool(data["blocks"]),
            alive=bool(data["alive"]),
            level=int(data["level"]),
            stairs=bool(data["stairs"]),
            fighter=Fighter.from_dict(fighter) if fighter is not None else None,
            ai=Ai(data["ai"]) if data["ai"] is not None else None,
            item=ItemKind(data["item"]) if data["item"] is not None else None,
            equipment=Equipment.from_dict(equipment) if equipment is not None else None,
        )


def pair(first_id: int, second_id: int, entities: List[Entity]) -> Tuple[Entity, Entity]:
    """Return two distinct entities from the store by index.

    Combat and other two-party operations go through this so attacker and
    defender can never be the same record.
    """
    if first_id == second_id:
        raise ValueError(f"pair() requires distinct indices, got {first_id} twice")
    return entities[first_id], entities[second_id]


def is_blocked(x: int, y: int, grid, entities: List[Entity]) -> bool:
    """True when terrain or a blocking entity occupies (x, y)."""
    if grid[x][y].blocked:
        return True
    return any(e.blocks and e.pos == (x, y) for e in entities)


__all__ = [
    "PLAYER",
    "DeathCallback",
    "Ai",
    "ItemKind",
    "Slot",
    "Fighter",
    "Equipment",
    "Entity",
    "pair",
    "is_blocked",
]
