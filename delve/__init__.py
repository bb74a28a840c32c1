"""
project: Delve
module: __init__.py
License: MIT

Package bootstrap: environment-driven configuration shared by the turn
engine, the save store and the CLI.

Configuration is sourced from environment variables (optionally loaded from a
``.env`` file) with defaults suited to local play. A local ``instance/``
directory holds the SQLite save database.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env if present so DELVE_SAVE_URL etc. can be supplied without
# exporting shell variables.
load_dotenv()

__version__ = "0.1.0"


def _instance_path() -> Path:
    return Path(os.getenv("DELVE_INSTANCE_PATH", "instance")).resolve()


def load_config() -> dict:
    """Return a fresh configuration mapping read from the environment.

    Re-reading on demand keeps tests (which monkeypatch env vars) isolated from
    whatever was present at import time.
    """
    instance = _instance_path()
    save_url = os.getenv("DELVE_SAVE_URL")
    if not save_url:
        # POSIX path keeps the SQLAlchemy URI valid across platforms
        save_url = f"sqlite:///{(instance / 'savegame.db').as_posix()}"
    seed_raw = os.getenv("DELVE_SEED")
    try:
        seed = int(seed_raw) if seed_raw not in (None, "") else None
    except ValueError:
        seed = None
    return {
        "INSTANCE_PATH": str(instance),
        "SAVE_URL": save_url,
        "SAVE_SLOT": os.getenv("DELVE_SAVE_SLOT", "savegame"),
        "SEED": seed,
    }


config = load_config()

__all__ = ["config", "load_config", "__version__"]
