"""Public dungeon package interface."""

from .config import DungeonConfig
from .generator import GeneratedLevel, make_map
from .rooms import Room
from .tables import transition, weighted_choice
from .tiles import Grid, Tile, new_grid

__all__ = [
    "DungeonConfig",
    "GeneratedLevel",
    "make_map",
    "Room",
    "transition",
    "weighted_choice",
    "Grid",
    "Tile",
    "new_grid",
]
