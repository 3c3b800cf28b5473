"""Command-line interface: `harstub scan|generate|config`."""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import Any

from harstub import __version__
from harstub.config import load_config, resolve_path
from harstub.errors import HarstubError

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Subcommand -> module exposing run(args); imported only when selected
COMMANDS = {
    "scan": "harstub.commands.scan",
    "generate": "harstub.commands.generate",
    "config": "harstub.commands.config_cmd",
}


def _log_level(verbose: bool, quiet: bool, log_cfg: dict[str, Any]) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    name = str(log_cfg.get("level") or "INFO").upper()
    return getattr(logging, name, logging.INFO)


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure the "harstub" logger.

    --verbose/--quiet override logging.level from the global config. Handlers
    (stderr, plus logging.file when set) are attached only once per process.
    """
    log_cfg = load_config(None).get("logging") or {}
    logger = logging.getLogger("harstub")
    logger.setLevel(_log_level(verbose, quiet, log_cfg))
    if logger.handlers:
        return

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    log_file = log_cfg.get("file")
    if log_file:
        try:
            handlers.append(logging.FileHandler(Path(log_file).expanduser(), encoding="utf-8"))
        except OSError:
            print(f"Warning: cannot open log file {log_file}", file=sys.stderr)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)


def _add_verbosity(parser: argparse.ArgumentParser, hidden: bool = False) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-v", "--verbose", action="store_true",
        help=argparse.SUPPRESS if hidden else "Verbose (DEBUG) output.",
    )
    group.add_argument(
        "-q", "--quiet", action="store_true",
        help=argparse.SUPPRESS if hidden else "Quiet (errors only).",
    )


def _add_module_path(parser: argparse.ArgumentParser, help_text: str) -> None:
    parser.add_argument("path", type=Path, nargs="?", default=Path("."), help=help_text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="harstub",
        description="Generate stub packages for the third-party dependencies of a HarmonyOS HAR module.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    _add_verbosity(parser)

    # Accept -v/-q after the subcommand as well ("harstub scan . -v")
    shared = argparse.ArgumentParser(add_help=False)
    _add_verbosity(shared, hidden=True)
    commands = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    scan = commands.add_parser(
        "scan", parents=[shared], help="Print the dependency model inferred from a module's sources."
    )
    _add_module_path(scan, "HAR module directory (default: .).")
    scan.add_argument("--json", action="store_true", help="Dump the model as JSON.")
    scan.set_defaults(run="scan")

    generate = commands.add_parser(
        "generate",
        parents=[shared],
        help="Write stub packages next to the module and reference them from its oh-package.json5.",
    )
    _add_module_path(generate, "HAR module directory (default: .).")
    generate.add_argument("--dry-run", action="store_true", help="Report the plan without writing files.")
    generate.set_defaults(run="generate")

    config = commands.add_parser("config", parents=[shared], help="Show or edit harstub settings.")
    _add_module_path(config, "Module whose .harstub/config.json is edited (default: .).")
    actions = config.add_argument_group("actions")
    actions.add_argument("--show", action="store_true", help="Print the merged settings.")
    actions.add_argument("--set", dest="set_key", metavar="KEY=VALUE", help="Set a value (dotted KEY, JSON or plain VALUE).")
    actions.add_argument("--add", dest="add_key", nargs=2, metavar=("KEY", "VALUE"), help="Append VALUE to the list at KEY.")
    actions.add_argument("--remove", dest="remove_key", nargs=2, metavar=("KEY", "VALUE"), help="Drop VALUE from the list at KEY.")
    config.add_argument("--global", dest="global_", action="store_true", help="Edit ~/.harstub/config.json instead.")
    config.set_defaults(run="config")

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=getattr(args, "verbose", False), quiet=getattr(args, "quiet", False))
    args.path = resolve_path(args.path)

    command = importlib.import_module(COMMANDS[args.run])
    try:
        command.run(args)
    except HarstubError as e:
        logging.getLogger("harstub").debug("%s failed", args.run, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
