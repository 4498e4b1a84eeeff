"""
Command-line interface for hwt-kicad.

    hwt-kicad sch <file.kicad_sch>     - Import a schematic and summarize it
    hwt-kicad lib <file.kicad_sym>     - Import a symbol library
    hwt-kicad pcb <file.kicad_pcb>     - Import a board layout
    hwt-kicad config --show            - Show effective configuration

Examples:
    hwt-kicad sch amp.kicad_sch
    hwt-kicad pcb board.kicad_pcb --format json
    hwt-kicad --strict --deterministic-ids sch amp.kicad_sch --format json
"""

import argparse
from typing import List, Optional

from hwt_kicad import __version__
from hwt_kicad.config import Config
from hwt_kicad.exceptions import KicadError
from hwt_kicad.logging import enable_verbose

from .utils import print_error

__all__ = ["main", "build_parser"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hwt-kicad",
        description="Import KiCad schematics, symbol libraries and PCBs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"hwt-kicad {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log import details")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on the first malformed element instead of skipping it",
    )
    parser.add_argument(
        "--deterministic-ids",
        action="store_true",
        help="Derive missing identifiers from element content",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    for command, suffix, help_text in (
        ("sch", ".kicad_sch", "Import a schematic"),
        ("lib", ".kicad_sym", "Import a symbol library"),
        ("pcb", ".kicad_pcb", "Import a PCB layout"),
    ):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument("file", help=f"Path to {suffix} file")
        sub.add_argument("--format", choices=["table", "json"], default=None)

    config_parser = subparsers.add_parser("config", help="Manage configuration")
    action_group = config_parser.add_mutually_exclusive_group()
    action_group.add_argument("--show", action="store_true", help="Show effective configuration")
    action_group.add_argument("--init", action="store_true", help="Create template config file")
    action_group.add_argument("--paths", action="store_true", help="Show config file paths")
    config_parser.add_argument(
        "--user",
        action="store_true",
        help="Use user config (~/.config/hwt-kicad/config.toml) for --init",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the hwt-kicad CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    verbose = args.verbose
    try:
        if args.command == "config":
            from .config_cmd import run_config

            return run_config(args)

        config = Config.load()
        verbose = verbose or config.defaults.verbose
        if verbose:
            enable_verbose("DEBUG")
        if args.strict:
            config.import_.strict = True
        if args.deterministic_ids:
            config.import_.id_policy = "deterministic"
        if args.format is None:
            args.format = config.defaults.format

        from .import_cmd import run_library, run_pcb, run_schematic

        runners = {"sch": run_schematic, "lib": run_library, "pcb": run_pcb}
        return runners[args.command](args, config)
    except KicadError as e:
        print_error(e)
        return 1
