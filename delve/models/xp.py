"""Experience point (XP) progression utilities.

Leveling is linear: the XP banked on the player's Fighter must reach
``LEVEL_UP_BASE + level * LEVEL_UP_FACTOR`` to advance from ``level``.
XP is spent on level-up (the threshold is subtracted), so the bank restarts
near zero after every advancement instead of accumulating a lifetime total.
"""

LEVEL_UP_BASE = 200
LEVEL_UP_FACTOR = 150


def level_up_xp(level: int) -> int:
    """Return the XP needed to advance from ``level`` to ``level + 1``.

    Args:
        level: current 1-based character level. Values < 1 are treated as 1.

    Returns:
        XP threshold for the next level.
    """
    if level < 1:
        level = 1
    return LEVEL_UP_BASE + level * LEVEL_UP_FACTOR


__all__ = ["LEVEL_UP_BASE", "LEVEL_UP_FACTOR", "level_up_xp"]
