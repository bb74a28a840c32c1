# Model package init
from .entities import PLAYER, Ai, DeathCallback, Entity, Equipment, Fighter, ItemKind, Slot  # noqa: F401 re-export
from .catalog import new_player, spawn_item, spawn_monster  # noqa: F401 re-export
from .world import INVENTORY_CAPACITY, MessageLog, World  # noqa: F401 re-export
from .xp import level_up_xp  # noqa: F401 re-export

__all__ = [
    "PLAYER",
    "Ai",
    "DeathCallback",
    "Entity",
    "Equipment",
    "Fighter",
    "ItemKind",
    "Slot",
    "new_player",
    "spawn_item",
    "spawn_monster",
    "INVENTORY_CAPACITY",
    "MessageLog",
    "World",
    "level_up_xp",
]
