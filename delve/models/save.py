"""
project: Delve
module: save.py
License: MIT

Database model for saved games.

Notes:
- One row per save slot; the whole game (entity store plus world state) is
  a single JSON document in ``payload`` so a save is one row write.
- ``schema_version`` guards against loading payloads written by an
  incompatible layout.
"""

import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

SAVE_SCHEMA_VERSION = 1


def _utcnow():
    return datetime.datetime.now(datetime.timezone.utc)


class SaveGame(Base):
    """Persisted game snapshot.

    Attributes:
        slot: Unique save name (``savegame`` by default).
        schema_version: Payload layout version written by the saver.
        dungeon_level: Copied out of the payload for cheap listings.
        payload: JSON document holding entities, world and grid.
    """

    __tablename__ = "save_games"
    id = Column(Integer, primary_key=True)
    slot = Column(String(64), unique=True, nullable=False)
    schema_version = Column(Integer, nullable=False, default=SAVE_SCHEMA_VERSION)
    dungeon_level = Column(Integer, nullable=False, default=1)
    payload = Column(Text, nullable=False)
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<SaveGame {self.slot} v{self.schema_version} level={self.dungeon_level}>"


__all__ = ["Base", "SaveGame", "SAVE_SCHEMA_VERSION"]
