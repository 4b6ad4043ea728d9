"""
GeekyMenu - Main entry point.

Loads settings, scans the application directories once, then runs the
interactive session in the terminal. Confirming an entry starts its
command detached and exits.

Usage:
  geekymenu            open the launcher
  geekymenu --check    report which application sources were found
  geekymenu --debug    log at DEBUG level to the state log file
"""

import argparse
import sys

from loguru import logger

from geekymenu import __version__
from geekymenu.panels.session import SessionController
from geekymenu.services.compat import run_compatibility_check
from geekymenu.services.desktop_entry import load_entries
from geekymenu.services.scanner import default_app_dirs
from geekymenu.utils.helpers import launch_command, load_settings, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geekymenu",
        description="Fuzzy terminal launcher for desktop applications.",
    )
    parser.add_argument("--check", action="store_true",
                        help="print a compatibility report of application directories and exit")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument("--config", metavar="PATH", help="settings file to use")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def create_session(settings: dict) -> SessionController:
    """Scan, parse and wrap the entries in a fresh session."""
    scanner = settings["scanner"]
    roots = default_app_dirs(extra_dirs=scanner["extra_dirs"])
    entries = load_entries(roots, max_depth=scanner["max_depth"], dedupe=scanner["dedupe"])
    return SessionController(
        entries,
        launch=launch_command,
        page_step=settings["session"]["page_step"],
    )


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    settings = load_settings(args.config)
    level = "DEBUG" if args.debug else settings["logging"]["level"]
    log_path = setup_logging(level, settings["logging"]["file"])
    logger.debug(f"GeekyMenu {__version__} starting, logging to {log_path}")

    if args.check:
        return run_compatibility_check()

    if not sys.stdin.isatty() or not sys.stdout.isatty():
        print("geekymenu: needs an interactive terminal (try --check)", file=sys.stderr)
        return 2

    # Imported here so --check works where curses is unavailable
    from geekymenu.panels.terminal import run_terminal_session

    session = create_session(settings)
    outcome = run_terminal_session(session)
    logger.debug(f"GeekyMenu exiting ({outcome})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
