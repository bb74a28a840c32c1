"""Visibility oracle interface.

The field-of-view computation itself lives outside the core (usually in the
renderer). The core only asks whether a tile is visible from the last computed
origin, asks for a recomputation when the player moves, and re-initialises the
oracle when a new grid replaces the old one.

Two small implementations ship with the package:

* ``StaticVisibility`` answers from an explicit set of visible tiles. Tests
  and scripted scenarios use it to decide exactly what the AI can perceive.
* ``OmniscientVisibility`` reports every in-bounds tile as visible. The CLI
  simulator uses it when no real FOV provider is attached.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, Set, Tuple


class VisibilityOracle(Protocol):
    def visible(self, x: int, y: int) -> bool: ...

    def recompute(self, origin_x: int, origin_y: int, radius: int) -> None: ...

    def initialise(self, grid) -> None: ...


class StaticVisibility:
    def __init__(self, tiles: Optional[Iterable[Tuple[int, int]]] = None):
        self.tiles: Set[Tuple[int, int]] = set(tiles or ())
        self.origin: Optional[Tuple[int, int]] = None
        self.radius: Optional[int] = None
        self.recompute_calls = 0
        self.initialise_calls = 0

    def visible(self, x: int, y: int) -> bool:
        return (x, y) in self.tiles

    def recompute(self, origin_x: int, origin_y: int, radius: int) -> None:
        self.origin = (origin_x, origin_y)
        self.radius = radius
        self.recompute_calls += 1

    def initialise(self, grid) -> None:
        self.initialise_calls += 1


class OmniscientVisibility:
    def __init__(self):
        self.width = 0
        self.height = 0
        self.origin: Optional[Tuple[int, int]] = None

    def visible(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def recompute(self, origin_x: int, origin_y: int, radius: int) -> None:
        self.origin = (origin_x, origin_y)

    def initialise(self, grid) -> None:
        self.width = len(grid)
        self.height = len(grid[0]) if grid else 0


__all__ = ["VisibilityOracle", "StaticVisibility", "OmniscientVisibility"]
