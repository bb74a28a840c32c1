"""Compact encoding of tile coordinate sets for save payloads.

A saved level carries two coordinate sets per grid: the tiles that block
movement and the tiles the player has explored. Both are written as
semicolon separated ``x,y`` lists and then delta-encoded.

Compressed grammar (simple):
  D:x0,y0|dx1,dy1|dx2,dy2|...

Coordinates are sorted column-major before encoding, matching the
``grid[x][y]`` layout. If the encoded form is not shorter than the raw list
the raw list is stored instead; both forms decode.
"""

from __future__ import annotations

from typing import Iterable, Set, Tuple

Coord = Tuple[int, int]


def _parse_raw(raw: str) -> Set[Coord]:
    coords = set()
    for part in raw.split(";"):
        if not part:
            continue
        x_s, y_s = part.split(",")
        coords.add((int(x_s), int(y_s)))
    return coords


def compress_tiles(coords: Iterable[Coord]) -> str:
    """Encode a coordinate set; the shorter of raw and delta form wins."""
    ordered = sorted(set(coords))
    if not ordered:
        return ""
    raw = ";".join(f"{x},{y}" for x, y in ordered)
    pieces = []
    prev_x, prev_y = None, None
    for x, y in ordered:
        if prev_x is None:
            pieces.append(f"{x},{y}")
        else:
            pieces.append(f"{x - prev_x},{y - prev_y}")
        prev_x, prev_y = x, y
    compressed = "D:" + "|".join(pieces)
    return compressed if len(compressed) < len(raw) else raw


def decompress_tiles(data: str) -> Set[Coord]:
    """Inverse of :func:`compress_tiles`.

    Raises ValueError on malformed input; save loading treats that as a
    schema mismatch.
    """
    if not isinstance(data, str):
        raise ValueError(f"expected encoded tile string, got {type(data).__name__}")
    if not data:
        return set()
    if not data.startswith("D:"):
        return _parse_raw(data)
    coords = set()
    prev_x, prev_y = None, None
    for token in data[2:].split("|"):
        x_s, y_s = token.split(",")
        dx, dy = int(x_s), int(y_s)
        if prev_x is None:
            x, y = dx, dy
        else:
            x, y = prev_x + dx, prev_y + dy
        coords.add((x, y))
        prev_x, prev_y = x, y
    return coords


__all__ = ["compress_tiles", "decompress_tiles"]
