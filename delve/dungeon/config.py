from dataclasses import dataclass
from typing import Optional


@dataclass
class DungeonConfig:
    width: int = 80
    height: int = 43
    max_rooms: int = 30
    min_size: int = 6
    max_size: int = 10
    # Rejected placements retry without counting; this bounds the loop.
    max_attempts: Optional[int] = None
    seed: Optional[int] = None

    def attempt_budget(self) -> int:
        if self.max_attempts is not None:
            return self.max_attempts
        return self.max_rooms * 15

    def to_dict(self):
        return {
            "width": self.width,
            "height": self.height,
            "max_rooms": self.max_rooms,
            "min_size": self.min_size,
            "max_size": self.max_size,
            "max_attempts": self.max_attempts,
            "seed": self.seed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DungeonConfig":
        return cls(
            width=int(data["width"]),
            height=int(data["height"]),
            max_rooms=int(data["max_rooms"]),
            min_size=int(data["min_size"]),
            max_size=int(data["max_size"]),
            max_attempts=data.get("max_attempts"),
            seed=data.get("seed"),
        )


__all__ = ["DungeonConfig"]
