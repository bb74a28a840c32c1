"""World state owned alongside the entity store.

``World`` bundles everything the renderer reads besides entities: the tile
grid, the message log, the inventory and the dungeon level counter. It is
serialized together with the entity store as one unit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from delve.dungeon.config import DungeonConfig
from delve.dungeon.tiles import Grid

from .entities import Entity

INVENTORY_CAPACITY = 26

Message = Tuple[str, str]


class MessageLog:
    """Append-only list of (text, color) pairs."""

    def __init__(self, messages: Optional[List[Message]] = None):
        self._messages: List[Message] = list(messages or [])

    def add(self, text: str, color: str = "white"):
        self._messages.append((str(text), color))

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __getitem__(self, index):
        return self._messages[index]

    def __eq__(self, other) -> bool:
        if isinstance(other, MessageLog):
            return self._messages == other._messages
        return NotImplemented

    def texts(self) -> List[str]:
        return [text for text, _ in self._messages]

    def tail(self, count: int) -> List[Message]:
        return self._messages[-count:] if count > 0 else []

    def to_list(self) -> List[List[str]]:
        return [[text, color] for text, color in self._messages]


@dataclass
class World:
    grid: Grid
    log: MessageLog = field(default_factory=MessageLog)
    inventory: List[Entity] = field(default_factory=list)
    dungeon_level: int = 1
    # Threshold of an outstanding level-up stat choice; None when none pending
    pending_level_up: Optional[int] = None
    config: DungeonConfig = field(default_factory=DungeonConfig)
    # Player position the oracle was last recomputed from; not persisted
    fov_origin: Optional[Tuple[int, int]] = field(default=None, compare=False)

    @property
    def width(self) -> int:
        return len(self.grid)

    @property
    def height(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    def inventory_full(self) -> bool:
        return len(self.inventory) >= INVENTORY_CAPACITY

    def mark_explored(self, visibility):
        """Flag every currently visible tile as explored."""
        for x in range(self.width):
            column = self.grid[x]
            for y in range(self.height):
                if visibility.visible(x, y):
                    column[y].explored = True


__all__ = ["INVENTORY_CAPACITY", "Message", "MessageLog", "World"]
