"""Terrain tiles and grid construction.

The grid is column-major (``grid[x][y]``) to match coordinates used by
entities and the visibility oracle.
"""

from dataclasses import dataclass
from typing import List


@dataclass
class Tile:
    blocked: bool
    block_sight: bool
    explored: bool = False

    @classmethod
    def empty(cls) -> "Tile":
        return cls(blocked=False, block_sight=False)

    @classmethod
    def wall(cls) -> "Tile":
        return cls(blocked=True, block_sight=True)


Grid = List[List[Tile]]


def new_grid(width: int, height: int) -> Grid:
    """Return a fully walled ``width`` x ``height`` grid."""
    return [[Tile.wall() for _ in range(height)] for _ in range(width)]


def in_bounds(grid: Grid, x: int, y: int) -> bool:
    return 0 <= x < len(grid) and 0 <= y < len(grid[x])


__all__ = ["Tile", "Grid", "new_grid", "in_bounds"]
