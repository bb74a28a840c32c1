import random
from dataclasses import dataclass
from typing import List, Tuple

from .config import DungeonConfig
from .tiles import Grid, Tile


@dataclass
class Room:
    x: int
    y: int
    w: int
    h: int

    @property
    def x2(self) -> int:
        return self.x + self.w

    @property
    def y2(self) -> int:
        return self.y + self.h

    def cells(self):
        """Yield the carved interior; the outer ring stays wall."""
        for ix in range(self.x + 1, self.x2):
            for iy in range(self.y + 1, self.y2):
                yield ix, iy

    def contains(self, x: int, y: int) -> bool:
        return self.x < x < self.x2 and self.y < y < self.y2

    @property
    def center(self) -> Tuple[int, int]:
        return ((self.x + self.x2) // 2, (self.y + self.y2) // 2)

    def intersects(self, other: "Room") -> bool:
        # Inclusive edges: rooms may not even share a wall ring
        return self.x <= other.x2 and self.x2 >= other.x and self.y <= other.y2 and self.y2 >= other.y

    def random_interior_point(self, rng) -> Tuple[int, int]:
        return rng.randint(self.x + 1, self.x2 - 1), rng.randint(self.y + 1, self.y2 - 1)


def random_room(config: DungeonConfig, rng=None) -> Room:
    if rng is None:
        rng = random.Random()
    w = rng.randint(config.min_size, config.max_size)
    h = rng.randint(config.min_size, config.max_size)
    x = rng.randint(0, config.width - w - 1)
    y = rng.randint(0, config.height - h - 1)
    return Room(x, y, w, h)


def room_overlaps(room: Room, existing: List[Room]) -> bool:
    return any(room.intersects(r) for r in existing)


def carve_room(grid: Grid, room: Room):
    for ix, iy in room.cells():
        grid[ix][iy] = Tile.empty()


__all__ = ["Room", "random_room", "room_overlaps", "carve_room"]
