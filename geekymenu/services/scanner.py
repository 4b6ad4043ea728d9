"""
Entry Scanner - Find .desktop descriptors under the application roots.

Walks every root with an explicit work list (depth-first, no recursion).
Missing roots, unreadable directories and broken entries are skipped so
one bad subtree never stops the rest of the scan.

Paths reachable from two roots are reported twice; duplicates are a
matter for the caller (see load_entries(dedupe=...)).
"""

import getpass
import os
from pathlib import Path
from typing import Iterable, Optional

from loguru import logger

DESKTOP_SUFFIX = ".desktop"


def app_dir_categories(home: Optional[Path] = None, username: Optional[str] = None) -> dict[str, dict]:
    """
    Application directories grouped by where the apps come from.

    Args:
        home: Home directory (defaults to Path.home())
        username: Login name used for NixOS per-user profiles

    Returns:
        Ordered mapping of category -> {"name": label, "paths": [str, ...]}
    """
    home = home or Path.home()
    username = username or _current_username()

    return {
        "traditional": {
            "name": "Traditional Linux (FHS)",
            "paths": [
                "/usr/share/applications",
                "/usr/local/share/applications",
                str(home / ".local" / "share" / "applications"),
            ],
        },
        "flatpak": {
            "name": "Flatpak Applications",
            "paths": [
                "/var/lib/flatpak/exports/share/applications",
                str(home / ".local" / "share" / "flatpak" / "exports" / "share" / "applications"),
            ],
        },
        "nixos": {
            "name": "NixOS/Nix Packages",
            "paths": [
                "/run/current-system/sw/share/applications",
                f"/etc/profiles/per-user/{username}/share/applications",
                str(home / ".nix-profile" / "share" / "applications"),
                str(home / ".local" / "state" / "nix" / "profiles" / "profile" / "share" / "applications"),
                "/nix/var/nix/profiles/default/share/applications",
                "/run/wrappers/bin/../share/applications",
            ],
        },
        "snap": {
            "name": "Snap Applications",
            "paths": [
                "/snap/bin",
                "/var/lib/snapd/desktop/applications",
                str(home / ".local" / "share" / "applications" / "snap"),
            ],
        },
    }


def default_app_dirs(home: Optional[Path] = None, username: Optional[str] = None,
                     extra_dirs: Iterable[str] = ()) -> list[str]:
    """Flat, ordered list of roots to scan, with user extras appended."""
    roots = []
    for category in app_dir_categories(home, username).values():
        roots.extend(category["paths"])
    roots.extend(os.path.expanduser(d) for d in extra_dirs)
    return roots


def _current_username() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        # No passwd entry and no LOGNAME/USER (e.g. minimal containers)
        return os.environ.get("USER", "")


def find_desktop_files_in_dir(root: str, max_depth: int = 32) -> list[str]:
    """
    Collect .desktop file paths below a single root.

    Args:
        root: Directory to walk
        max_depth: Directories deeper than this below root are not entered

    Returns:
        Absolute file paths, in traversal order. Empty if root is missing.
    """
    root = os.path.abspath(root)
    if not os.path.isdir(root):
        logger.debug(f"Skipping missing application dir {root}")
        return []

    results = []
    visited = set()
    stack = [(root, 0)]

    while stack:
        current, depth = stack.pop()

        # Symlinked directories can loop back onto an ancestor
        real = os.path.realpath(current)
        if real in visited:
            continue
        visited.add(real)

        try:
            with os.scandir(current) as it:
                children = list(it)
        except OSError as e:
            logger.debug(f"Skipping unreadable directory {current}: {e}")
            continue

        for child in children:
            try:
                is_dir = child.is_dir()
            except OSError as e:
                logger.debug(f"Skipping unreadable entry {child.path}: {e}")
                continue

            if is_dir:
                if depth < max_depth:
                    stack.append((child.path, depth + 1))
                else:
                    logger.debug(f"Not descending into {child.path}: depth limit {max_depth}")
            elif child.name.endswith(DESKTOP_SUFFIX):
                results.append(child.path)

    return results


def find_desktop_files(roots: Iterable[str], max_depth: int = 32) -> list[str]:
    """
    Collect .desktop file paths below every root.

    No deduplication is applied: a file visible through two roots
    shows up once per root.
    """
    results = []
    for root in roots:
        found = find_desktop_files_in_dir(root, max_depth=max_depth)
        if found:
            logger.debug(f"Found {len(found)} descriptors in {root}")
        results.extend(found)
    return results
