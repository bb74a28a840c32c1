"""Delve CLI entry point.

Provides subcommands for generating levels, creating and inspecting saved
games, and running a short scripted simulation of the turn engine. Accepts
configuration via flags and environment variables, with optional .env
loading.

Run `python run.py --help` for details.
"""

import argparse
import os
import random
import sys
from pathlib import Path
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
_COLOR_ENABLED = True

# Disable colors if output is not a real terminal (e.g., during pytest capture)
if not sys.stdout.isatty():  # pragma: no cover - environment dependent
    _COLOR_ENABLED = False


def _load_version() -> str:
    try:
        with open(Path(__file__).with_name("VERSION"), "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Delve dungeon engine

    Generate dungeon levels, create or inspect a saved game, or let the turn
    engine play a few random turns. Configuration can be provided via CLI
    flags or environment variables. If both are present, CLI flags take
    precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          DELVE_SAVE_URL   SQLAlchemy database URL (default: sqlite:///instance/savegame.db)
          DELVE_SAVE_SLOT  Save slot name (default: savegame)
          DELVE_SEED       Default RNG seed for generate/new/simulate
          DELVE_LOG_LEVEL  debug | info | warn | error (default: info)
          DELVE_LOG_JSON   1 to emit JSON log lines

        Examples:
          # Print dungeon level 3 for seed 42
          python run.py generate --seed 42 --level 3

          # Start a new game and save it
          python run.py new --seed 7

          # Show what is in the save slot
          python run.py info

          # Play 200 random turns and save the result
          python run.py simulate --turns 200 --save
        """
    )

    parser = argparse.ArgumentParser(
        prog="Delve",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Delve {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Print an ASCII map of a generated level",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    gen_parser.add_argument("--seed", type=int, default=None, help="RNG seed (default: env DELVE_SEED or random)")
    gen_parser.add_argument("--level", type=int, default=1, help="Dungeon level used for spawn tables (default: 1)")
    gen_parser.add_argument("--no-entities", action="store_true", help="Print terrain only")
    gen_parser.set_defaults(command="generate")

    # new subcommand
    new_parser = subparsers.add_parser(
        "new",
        help="Create a new game and write it to the save slot",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    new_parser.add_argument("--seed", type=int, default=None, help="RNG seed (default: env DELVE_SEED or random)")
    new_parser.add_argument("--slot", default=None, help="Save slot (default: env DELVE_SAVE_SLOT)")
    new_parser.add_argument("--db", dest="db_url", default=None, help="Database URL (default: env DELVE_SAVE_URL)")
    new_parser.set_defaults(command="new")

    # info subcommand
    info_parser = subparsers.add_parser(
        "info",
        help="Summarise the game stored in a save slot",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    info_parser.add_argument("--slot", default=None, help="Save slot (default: env DELVE_SAVE_SLOT)")
    info_parser.add_argument("--db", dest="db_url", default=None, help="Database URL (default: env DELVE_SAVE_URL)")
    info_parser.set_defaults(command="info")

    # simulate subcommand
    sim_parser = subparsers.add_parser(
        "simulate",
        help="Play random turns with full visibility and print the message log",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    sim_parser.add_argument("--seed", type=int, default=None, help="RNG seed (default: env DELVE_SEED or random)")
    sim_parser.add_argument("--turns", type=int, default=100, help="Number of intents to play (default: 100)")
    sim_parser.add_argument("--tail", type=int, default=15, help="Message log lines to print (default: 15)")
    sim_parser.add_argument("--save", action="store_true", help="Write the final state to the save slot")
    sim_parser.add_argument("--slot", default=None, help="Save slot (default: env DELVE_SAVE_SLOT)")
    sim_parser.add_argument("--db", dest="db_url", default=None, help="Database URL (default: env DELVE_SAVE_URL)")
    sim_parser.set_defaults(command="simulate")

    # If no subcommand provided, default to a single generated map
    if len(argv) == 0:
        argv = ["generate"]

    args = parser.parse_args(argv)
    return args


def label(text: str) -> str:
    return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text


def value(val) -> str:
    return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)


def banner(title: str, rows) -> str:
    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    heading = f"{Fore.CYAN}{Style.BRIGHT}{title}{Style.RESET_ALL}" if _COLOR_ENABLED else title
    lines = [divider, f"  {heading}", divider]
    lines.extend(f"  {label(name + ':'):12} {value(val)}" for name, val in rows)
    lines.extend([divider, ""])
    return "\n".join(lines)


def render_ascii(grid, entities=None) -> str:
    """Row-major text dump of a column-major grid; later entities draw on top."""
    width = len(grid)
    height = len(grid[0]) if grid else 0
    rows = [["#" if grid[x][y].blocked else "." for x in range(width)] for y in range(height)]
    # Items and remains first so fighters stay readable
    for e in sorted(entities or [], key=lambda e: e.blocks):
        rows[e.y][e.x] = e.glyph
    return "\n".join("".join(r) for r in rows)


def _seed(args):
    from delve import load_config

    seed = getattr(args, "seed", None)
    return seed if seed is not None else load_config()["SEED"]


def cmd_generate(args) -> int:
    from delve.dungeon import DungeonConfig, make_map
    from delve.errors import GenerationError
    from delve.models import new_player

    seed = _seed(args)
    entities = [new_player()]
    try:
        level = make_map(entities, args.level, DungeonConfig(seed=seed))
    except GenerationError as exc:
        print(f"[ERROR] {exc}")
        return 1
    print(render_ascii(level.grid, None if args.no_entities else entities))
    rows = [("Seed", seed if seed is not None else "random"), ("Level", args.level)]
    rows.extend((k.replace("_", " ").title(), v) for k, v in level.metrics.items())
    print(banner("Generated level", rows))
    return 0


def cmd_new(args) -> int:
    from delve.errors import DelveError
    from delve.services.turns import Session

    try:
        session = Session.new(seed=_seed(args))
        session.save(args.slot, args.db_url)
    except DelveError as exc:
        print(f"[ERROR] {exc}")
        return 1
    sheet = session.sheet()
    print(banner("New game saved", [("Slot", args.slot or "default"), ("HP", sheet["hp"]), ("Dungeon", 1)]))
    return 0


def cmd_info(args) -> int:
    from delve.services.turns import Session

    session = Session.load(args.slot, args.db_url)
    if session is None:
        print("[ERROR] No usable save found.")
        return 1
    sheet = session.sheet()
    rows = [
        ("Dungeon", sheet["dungeon_level"]),
        ("Level", sheet["level"]),
        ("XP", f"{sheet['xp']}/{sheet['xp_to_level']}"),
        ("HP", f"{sheet['hp']}/{sheet['max_hp']}"),
        ("Attack", sheet["power"]),
        ("Defense", sheet["defense"]),
        ("Inventory", ", ".join(it.name for it in session.world.inventory) or "empty"),
        ("Alive", "YES" if session.player.alive else "NO"),
    ]
    print(banner("Saved game", rows))
    return 0


def _random_intent(session, rng: random.Random) -> dict:
    from delve.services.items import item_at_player
    from delve.services.movement import CARDINAL_STEPS

    player = session.player
    if item_at_player(session.entities) is not None and not session.world.inventory_full():
        return {"kind": "pick_up"}
    if any(e.stairs and e.pos == player.pos for e in session.entities):
        return {"kind": "descend"}
    if session.world.inventory and rng.random() < 0.05:
        return {"kind": "use", "slot": rng.randrange(len(session.world.inventory))}
    dx, dy = rng.choice(CARDINAL_STEPS)
    return {"kind": "move", "dx": dx, "dy": dy}


def cmd_simulate(args) -> int:
    from delve.errors import DelveError
    from delve.services.progression import StatChoice
    from delve.services.turns import PlayerAction, Session

    seed = _seed(args)
    try:
        session = Session.new(seed=seed)
    except DelveError as exc:
        print(f"[ERROR] {exc}")
        return 1
    rng = random.Random(seed)
    taken = 0
    for _ in range(max(0, args.turns)):
        if not session.player.alive:
            break
        if session.world.pending_level_up is not None:
            session.choose(rng.choice(list(StatChoice)))
            continue
        if session.play(_random_intent(session, rng)) is PlayerAction.TOOK_TURN:
            taken += 1

    for text, _color in session.world.log.tail(args.tail):
        print(text)
    sheet = session.sheet()
    rows = [
        ("Seed", seed if seed is not None else "random"),
        ("Turns", taken),
        ("Dungeon", sheet["dungeon_level"]),
        ("Level", sheet["level"]),
        ("HP", f"{sheet['hp']}/{sheet['max_hp']}"),
        ("Alive", "YES" if session.player.alive else "NO"),
    ]
    print(banner("Simulation finished", rows))
    if args.save:
        try:
            session.save(args.slot, args.db_url)
        except DelveError as exc:
            print(f"[ERROR] {exc}")
            return 1
    return 0


COMMANDS = {
    "generate": cmd_generate,
    "new": cmd_new,
    "info": cmd_info,
    "simulate": cmd_simulate,
}


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file, override=True)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    from delve.logging_utils import log

    mode = (getattr(args, "command", None) or "generate").lower()
    log.info(event="cli_start", mode=mode, version=__version__, pid=os.getpid())
    return COMMANDS[mode](args)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
