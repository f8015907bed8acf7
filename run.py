"""Delve CLI entry point.

Provides subcommands for generating a dungeon map and for running structural
diagnostics over a list of seeds. Accepts configuration via flags and DELVE_*
environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import just_fix_windows_console
from dotenv import load_dotenv

from delve.dungeon import CellFlag, ConfigError, Dungeon, DungeonConfig
from delve.dungeon.connectivity import analyze
from delve.logging_utils import log, set_level

just_fix_windows_console()

COMMANDS = ("generate", "diagnose")


def _load_version() -> str:
    path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def _with_default_command(argv: list[str]) -> list[str]:
    """Insert `generate` after any global options when no subcommand was given."""
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--env-file":
            i += 2
        elif arg.startswith("--env-file=") or arg in ("-v", "--verbose"):
            i += 1
        else:
            break
    if i < len(argv) and (argv[i] in COMMANDS or argv[i] in ("-h", "--help", "--version")):
        return argv
    return argv[:i] + ["generate"] + argv[i:]


def _add_dungeon_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--rows", dest="n_rows", type=int, default=None, help="Grid rows (default: env DELVE_N_ROWS or 39)")
    p.add_argument("--cols", dest="n_cols", type=int, default=None, help="Grid columns (default: env DELVE_N_COLS or 39)")
    p.add_argument(
        "--layout",
        dest="dungeon_layout",
        default=None,
        help="Outline mask: None, Box, Cross or Round (default: env DELVE_DUNGEON_LAYOUT or None)",
    )
    p.add_argument("--room-min", dest="room_min", type=int, default=None, help="Smallest room side in cells (default: 3)")
    p.add_argument("--room-max", dest="room_max", type=int, default=None, help="Largest room side in cells (default: 9)")
    p.add_argument("--room-layout", dest="room_layout", default=None, help="Packed or Scattered (default: Scattered)")
    p.add_argument(
        "--corridor-layout",
        dest="corridor_layout",
        default=None,
        help="Labyrinth, Bent, Straight or a 0-100 straightness (default: Bent)",
    )
    p.add_argument(
        "--remove-deadends",
        dest="remove_deadends",
        type=int,
        default=None,
        help="Percent chance to collapse each dead end, 0-100 (default: 50)",
    )
    p.add_argument("--stairs", dest="add_stairs", type=int, default=None, help="Number of stairs to place (default: 2)")


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Delve dungeon generator

    Build a grid dungeon of rooms, doors and corridors from a seed and print it
    as text or JSON, or check a batch of seeds for structural problems.
    Configuration can be provided via CLI flags or environment variables. If
    both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          DELVE_N_ROWS, DELVE_N_COLS     Grid size (default: 39 x 39)
          DELVE_DUNGEON_LAYOUT           None, Box, Cross or Round
          DELVE_ROOM_MIN, DELVE_ROOM_MAX Room size range
          DELVE_ROOM_LAYOUT              Packed or Scattered
          DELVE_CORRIDOR_LAYOUT          Labyrinth, Bent, Straight or 0-100
          DELVE_REMOVE_DEADENDS          0-100
          DELVE_ADD_STAIRS               Stair count
          DELVE_SEED                     Random seed
          DELVE_LOG_LEVEL                debug, info, warn or error
          DELVE_LOG_JSON                 Emit log lines as JSON when 1

        Examples:
          # Print a random dungeon with the default options
          python run.py

          # Reproduce a specific map
          python run.py generate --seed 1234

          # A round, fully pruned labyrinth as JSON
          python run.py generate --layout Round --corridor-layout Labyrinth --remove-deadends 100 --json

          # Check a few seeds for broken doors or overlapping rooms
          python run.py diagnose 1 2 3
        """
    )

    parser = argparse.ArgumentParser(
        prog="delve",
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
        "-v",
        "--verbose",
        action="store_true",
        help="Log per-phase debug events to stderr",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Delve Dungeon Generator {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one dungeon and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate one dungeon and print it as text (default) or JSON",
    )
    _add_dungeon_options(gen_parser)
    gen_parser.add_argument("--seed", type=int, default=None, help="Random seed (default: env DELVE_SEED or random)")
    gen_parser.add_argument("--json", action="store_true", help="Print the dungeon as JSON instead of a map")
    gen_parser.add_argument("--no-color", dest="no_color", action="store_true", help="Disable colored map output")
    gen_parser.set_defaults(command="generate")

    diag_parser = subparsers.add_parser(
        "diagnose",
        help="Run structural checks for one or more seeds",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate each seed and report door, room and mask invariant violations as JSON.",
    )
    diag_parser.add_argument("seeds", nargs="+", type=int, help="Seeds to check")
    _add_dungeon_options(diag_parser)
    diag_parser.set_defaults(command="diagnose")

    args = parser.parse_args(_with_default_command(list(argv)))
    return args


def _config_from_args(args: argparse.Namespace, **extra) -> DungeonConfig:
    overrides = {
        name: getattr(args, name, None)
        for name in (
            "n_rows",
            "n_cols",
            "dungeon_layout",
            "room_min",
            "room_max",
            "room_layout",
            "corridor_layout",
            "remove_deadends",
            "add_stairs",
        )
    }
    corridor = overrides["corridor_layout"]
    if corridor is not None and corridor.lstrip("-").isdigit():
        overrides["corridor_layout"] = int(corridor)
    overrides.update(extra)
    return DungeonConfig.from_env(**overrides).validate()


def render_map(dungeon: Dungeon, color: bool) -> str:
    if not color:
        return dungeon.to_ascii()
    lines = []
    for r in range(dungeon.grid.height):
        parts = []
        for c in range(dungeon.grid.width):
            cell = dungeon.grid[r, c]
            glyph = dungeon.glyph_at(r, c)
            if cell.is_stairs():
                tint = Fore.MAGENTA + Style.BRIGHT
            elif cell.is_doorspace():
                tint = Fore.CYAN
            elif cell.label:
                tint = Fore.GREEN + Style.BRIGHT
            elif cell.has(CellFlag.ROOM):
                tint = Fore.WHITE
            elif cell.has(CellFlag.CORRIDOR):
                tint = Fore.YELLOW
            else:
                tint = ""
            parts.append(f"{tint}{glyph}{Style.RESET_ALL}" if tint else glyph)
        lines.append(" ".join(parts))
    return "\n".join(lines)


def _print_errors(problems) -> None:
    for problem in problems:
        print(f"[ERROR] {problem}")


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()
    if args.verbose:
        set_level("debug")

    mode = args.command
    try:
        if mode == "diagnose":
            config = _config_from_args(args)
        else:
            config = _config_from_args(args, seed=args.seed)
    except ConfigError as e:
        _print_errors(e.problems)
        return 1

    log.info(event="startup", mode=mode, rows=config.n_rows, cols=config.n_cols, seed=config.seed)

    if mode == "diagnose":
        results = []
        for seed in args.seeds:
            report = analyze(Dungeon(config.with_overrides(seed=seed)))
            report["ok"] = not report["issues"]
            results.append(report)
        print(json.dumps({"results": results}, indent=2))
        return 0 if all(r["ok"] for r in results) else 1

    dungeon = Dungeon(config)
    if args.json:
        print(json.dumps(dungeon.to_json(), indent=2))
        return 0

    color = not args.no_color and sys.stdout.isatty()
    print(render_map(dungeon, color))
    info_prefix = f"{Fore.CYAN}[INFO]{Style.RESET_ALL}" if color else "[INFO]"
    print(
        f"{info_prefix} seed={dungeon.seed} rooms={len(dungeon.rooms)} "
        f"stairs={len(dungeon.stairs)} size={dungeon.n_rows + 1}x{dungeon.n_cols + 1}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
