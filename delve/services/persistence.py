"""Save game persistence on top of SQLAlchemy.

The entity store and the world are written together as one JSON document in
a single ``SaveGame`` row, inside one transaction, so a save is either fully
present or absent. Loading is all-or-nothing as well: any I/O failure or
payload mismatch is logged and reported as "no save" (None).

Payload layout (``SAVE_SCHEMA_VERSION`` 1):
{
  'entities': [Entity.to_dict(), ...],        # index 0 is the player
  'world': {
    'dungeon_level': int,
    'pending_level_up': int | None,
    'inventory': [Entity.to_dict(), ...],
    'log': [[text, color], ...],
    'config': DungeonConfig.to_dict(),
    'grid': {'width', 'height', 'blocked', 'opaque', 'explored'},
  }
}
Grid flags are stored as compressed coordinate sets (see
``delve.utils.tile_compress``).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from delve import load_config
from delve.dungeon.config import DungeonConfig
from delve.dungeon.tiles import Grid, Tile
from delve.errors import PersistenceError
from delve.logging_utils import get_logger
from delve.models.entities import Entity
from delve.models.save import SAVE_SCHEMA_VERSION, Base, SaveGame
from delve.models.world import MessageLog, World
from delve.utils.tile_compress import compress_tiles, decompress_tiles

log = get_logger("persistence")

_ENGINES: Dict[str, Engine] = {}


def _resolve(slot: Optional[str], url: Optional[str]) -> Tuple[str, str]:
    cfg = load_config()
    return slot or cfg["SAVE_SLOT"], url or cfg["SAVE_URL"]


def get_engine(url: str) -> Engine:
    """Return a cached engine for ``url`` with the save table created."""
    engine = _ENGINES.get(url)
    if engine is not None:
        return engine
    engine_opts = {}
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        # Busy timeout (seconds) to ride out transient lock contention
        engine_opts["connect_args"] = {"timeout": 10}
        if parsed.database and parsed.database != ":memory:":
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(url, **engine_opts)
    Base.metadata.create_all(engine)
    _ENGINES[url] = engine
    return engine


def dispose_engines():
    """Close every cached engine (tests use throwaway database files)."""
    for engine in _ENGINES.values():
        engine.dispose()
    _ENGINES.clear()


def _grid_to_dict(grid: Grid) -> dict:
    blocked, opaque, explored = [], [], []
    for x, column in enumerate(grid):
        for y, tile in enumerate(column):
            if tile.blocked:
                blocked.append((x, y))
            if tile.block_sight:
                opaque.append((x, y))
            if tile.explored:
                explored.append((x, y))
    return {
        "width": len(grid),
        "height": len(grid[0]) if grid else 0,
        "blocked": compress_tiles(blocked),
        "opaque": compress_tiles(opaque),
        "explored": compress_tiles(explored),
    }


def _grid_from_dict(data: dict) -> Grid:
    width, height = int(data["width"]), int(data["height"])
    blocked = decompress_tiles(data["blocked"])
    opaque = decompress_tiles(data["opaque"])
    explored = decompress_tiles(data["explored"])
    for x, y in blocked | opaque | explored:
        if not (0 <= x < width and 0 <= y < height):
            raise ValueError(f"tile ({x},{y}) outside {width}x{height} grid")
    return [
        [Tile(blocked=(x, y) in blocked, block_sight=(x, y) in opaque, explored=(x, y) in explored) for y in range(height)]
        for x in range(width)
    ]


def serialize_game(entities: List[Entity], world: World) -> dict:
    return {
        "entities": [e.to_dict() for e in entities],
        "world": {
            "dungeon_level": world.dungeon_level,
            "pending_level_up": world.pending_level_up,
            "inventory": [it.to_dict() for it in world.inventory],
            "log": world.log.to_list(),
            "config": world.config.to_dict(),
            "grid": _grid_to_dict(world.grid),
        },
    }


def deserialize_game(payload: dict) -> Tuple[List[Entity], World]:
    """Strict inverse of :func:`serialize_game`; raises on any mismatch."""
    entities = [Entity.from_dict(e) for e in payload["entities"]]
    if not entities or entities[0].fighter is None:
        raise ValueError("save holds no player at index 0")
    w = payload["world"]
    pending = w["pending_level_up"]
    world = World(
        grid=_grid_from_dict(w["grid"]),
        log=MessageLog([(str(text), str(color)) for text, color in w["log"]]),
        inventory=[Entity.from_dict(it) for it in w["inventory"]],
        dungeon_level=int(w["dungeon_level"]),
        pending_level_up=int(pending) if pending is not None else None,
        config=DungeonConfig.from_dict(w["config"]),
    )
    return entities, world


def save_game(entities: List[Entity], world: World, slot: Optional[str] = None, url: Optional[str] = None):
    """Write the game to ``slot``, replacing any previous save there.

    Raises PersistenceError when the database cannot be written.
    """
    slot, url = _resolve(slot, url)
    payload = json.dumps(serialize_game(entities, world), separators=(",", ":"))
    try:
        engine = get_engine(url)
        with Session(engine) as session, session.begin():
            row = session.execute(select(SaveGame).where(SaveGame.slot == slot)).scalar_one_or_none()
            if row is None:
                row = SaveGame(slot=slot)
                session.add(row)
            row.schema_version = SAVE_SCHEMA_VERSION
            row.dungeon_level = world.dungeon_level
            row.payload = payload
    except (SQLAlchemyError, OSError) as exc:
        log.error(event="save_failed", slot=slot, error=str(exc))
        raise PersistenceError(f"could not save slot {slot!r}: {exc}") from exc
    log.info(event="game_saved", slot=slot, dungeon_level=world.dungeon_level, bytes=len(payload))


def load_game(slot: Optional[str] = None, url: Optional[str] = None) -> Optional[Tuple[List[Entity], World]]:
    """Return ``(entities, world)`` from ``slot`` or None if unavailable."""
    slot, url = _resolve(slot, url)
    try:
        engine = get_engine(url)
        with Session(engine) as session:
            row = session.execute(select(SaveGame).where(SaveGame.slot == slot)).scalar_one_or_none()
            if row is None:
                return None
            version, raw = row.schema_version, row.payload
        if version != SAVE_SCHEMA_VERSION:
            raise ValueError(f"unsupported save schema version {version}")
        return deserialize_game(json.loads(raw))
    except (SQLAlchemyError, OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
        log.warn(event="load_failed", slot=slot, error=str(exc))
        return None


def has_save(slot: Optional[str] = None, url: Optional[str] = None) -> bool:
    slot, url = _resolve(slot, url)
    try:
        with Session(get_engine(url)) as session:
            return session.execute(select(SaveGame.id).where(SaveGame.slot == slot)).first() is not None
    except (SQLAlchemyError, OSError) as exc:
        log.warn(event="load_failed", slot=slot, error=str(exc))
        return False


def delete_save(slot: Optional[str] = None, url: Optional[str] = None) -> bool:
    """Remove ``slot``; return True when a save was deleted."""
    slot, url = _resolve(slot, url)
    try:
        with Session(get_engine(url)) as session, session.begin():
            row = session.execute(select(SaveGame).where(SaveGame.slot == slot)).scalar_one_or_none()
            if row is None:
                return False
            session.delete(row)
    except (SQLAlchemyError, OSError) as exc:
        raise PersistenceError(f"could not delete slot {slot!r}: {exc}") from exc
    return True


__all__ = [
    "get_engine",
    "dispose_engines",
    "serialize_game",
    "deserialize_game",
    "save_game",
    "load_game",
    "has_save",
    "delete_save",
]
