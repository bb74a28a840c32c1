"""Level-scaled spawn tables.

A transition table is an ordered list of ``(value, level)`` pairs: the value
applies from that dungeon level onward until a later threshold overrides it.
``transition`` is the step function over such a table; weights of 0 remove an
entry from the draw entirely.
"""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence, Tuple

Transition = List[Tuple[int, int]]

MAX_MONSTERS_PER_ROOM: Transition = [(2, 1), (3, 4), (5, 6)]
MAX_ITEMS_PER_ROOM: Transition = [(1, 1), (2, 4)]

MONSTER_WEIGHTS: Dict[str, Transition] = {
    "orc": [(80, 1)],
    "troll": [(15, 3), (30, 5), (60, 7)],
    "boss": [(2, 1), (5, 5), (10, 8)],
}

ITEM_WEIGHTS: Dict[str, Transition] = {
    "healing-potion": [(35, 1)],
    "lightning-scroll": [(25, 4)],
    "attack-scroll": [(10, 2)],
    "sword": [(5, 4)],
    "shield": [(15, 8)],
    "chain-mail": [(10, 6)],
}


def transition(table: Sequence[Tuple[int, int]], level: int) -> int:
    """Return the value of the highest threshold <= ``level`` (0 if none)."""
    for value, threshold in reversed(table):
        if level >= threshold:
            return value
    return 0


def weights_for_level(tables: Dict[str, Transition], level: int) -> Dict[str, int]:
    return {slug: transition(table, level) for slug, table in tables.items()}


def weighted_choice(weights: Dict[str, int], rng=None) -> Optional[str]:
    """Roulette-wheel pick of a key; None when every weight is zero."""
    if rng is None:
        rng = random.Random()
    pool = [(k, w) for k, w in weights.items() if w > 0]
    total = sum(w for _, w in pool)
    if total <= 0:
        return None
    r = rng.randint(1, total)
    upto = 0
    for key, w in pool:
        upto += w
        if r <= upto:
            return key
    return pool[-1][0]


__all__ = [
    "Transition",
    "MAX_MONSTERS_PER_ROOM",
    "MAX_ITEMS_PER_ROOM",
    "MONSTER_WEIGHTS",
    "ITEM_WEIGHTS",
    "transition",
    "weights_for_level",
    "weighted_choice",
]
