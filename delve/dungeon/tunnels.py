from typing import Tuple

from .tiles import Grid, Tile


def create_h_tunnel(grid: Grid, x1: int, x2: int, y: int):
    for x in range(min(x1, x2), max(x1, x2) + 1):
        grid[x][y] = Tile.empty()


def create_v_tunnel(grid: Grid, y1: int, y2: int, x: int):
    for y in range(min(y1, y2), max(y1, y2) + 1):
        grid[x][y] = Tile.empty()


def carve_tunnel_between(grid: Grid, a: Tuple[int, int], b: Tuple[int, int], horizontal_first: bool):
    """L-shaped corridor from room center ``a`` to room center ``b``.

    ``horizontal_first`` runs along a's row to b's column, then down that
    column; otherwise the vertical leg is carved first along a's column.
    """
    (ax, ay), (bx, by) = a, b
    if horizontal_first:
        create_h_tunnel(grid, ax, bx, ay)
        create_v_tunnel(grid, ay, by, bx)
    else:
        create_v_tunnel(grid, ay, by, ax)
        create_h_tunnel(grid, ax, bx, by)


__all__ = ["create_h_tunnel", "create_v_tunnel", "carve_tunnel_between"]
