"""Exception types raised across the simulation core."""


class DelveError(Exception):
    """Base class for recoverable core failures."""


class GenerationError(DelveError):
    """No room could be placed on a level (retry budget exhausted)."""


class PersistenceError(DelveError):
    """Writing a save failed; the previous save (if any) is left untouched."""


__all__ = ["DelveError", "GenerationError", "PersistenceError"]
