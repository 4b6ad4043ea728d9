"""
Desktop Entry Parser - Turn .desktop descriptors into Entry records.

Only four keys are read, each with a line-anchored match:
  - Name     (required, first occurrence wins)
  - Comment  (optional, empty string when missing)
  - Exec     (required, field codes like %u / %F are stripped)
  - Terminal (true iff "Terminal=true" appears anywhere)

Descriptors missing Name or Exec, and files that cannot be read or
decoded, produce no Entry. Nothing is raised to the caller.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from loguru import logger

from geekymenu.services.scanner import find_desktop_files

_NAME_RE = re.compile(r"^Name=([^\r\n]+)\r?$", re.MULTILINE)
_COMMENT_RE = re.compile(r"^Comment=([^\r\n]+)\r?$", re.MULTILINE)
_EXEC_RE = re.compile(r"^Exec=([^\r\n]+)\r?$", re.MULTILINE)

# Field codes substituted by desktop environments; we never substitute them
FIELD_CODE_RE = re.compile(r" ?%[fFuUdDnNickvm]")


@dataclass(frozen=True)
class Entry:
    """A single launchable application."""
    name: str
    exec: str
    comment: str = ""
    terminal: bool = False
    source_path: str = ""


def strip_field_codes(exec_raw: str) -> str:
    """Remove %f/%U/... placeholders (and one leading space each) from an Exec value."""
    return FIELD_CODE_RE.sub("", exec_raw)


def parse_desktop_text(content: str, source_path: str = "") -> Optional[Entry]:
    """
    Extract an Entry from descriptor text.

    Args:
        content: Full text of the .desktop file
        source_path: Originating file path, kept as identity key

    Returns:
        Entry, or None when Name or Exec is missing
    """
    name_match = _NAME_RE.search(content)
    exec_match = _EXEC_RE.search(content)
    if not name_match or not exec_match:
        return None

    exec_clean = strip_field_codes(exec_match.group(1))
    if not exec_clean:
        return None

    comment_match = _COMMENT_RE.search(content)
    return Entry(
        name=name_match.group(1),
        exec=exec_clean,
        comment=comment_match.group(1) if comment_match else "",
        terminal="Terminal=true" in content,
        source_path=source_path,
    )


def parse_desktop_file(path: str) -> Optional[Entry]:
    """
    Read and parse one descriptor file.

    Unreadable or non-UTF-8 files are rejected (None), never raised.
    """
    try:
        with open(path, encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Skipping unreadable descriptor {path}: {e}")
        return None

    entry = parse_desktop_text(content, source_path=path)
    if entry is None:
        logger.debug(f"Skipping incomplete descriptor {path} (missing Name or Exec)")
    return entry


def sort_entries(entries: Iterable[Entry]) -> list[Entry]:
    """Alphabetical by name, case-insensitive. Stable for equal names."""
    return sorted(entries, key=lambda e: e.name.casefold())


def dedupe_entries(entries: Iterable[Entry]) -> list[Entry]:
    """Drop later entries whose (name, exec) pair was already seen."""
    seen = set()
    unique = []
    for entry in entries:
        key = (entry.name.casefold(), entry.exec)
        if key in seen:
            continue
        seen.add(key)
        unique.append(entry)
    return unique


def load_entries(roots: Iterable[str], max_depth: int = 32, dedupe: bool = False) -> tuple[Entry, ...]:
    """
    Scan roots, parse every descriptor, and return the sorted collection.

    Args:
        roots: Ordered application directories to scan
        max_depth: Traversal depth guard passed to the scanner
        dedupe: Collapse entries sharing the same name and command

    Returns:
        Immutable tuple of Entry records sorted by name
    """
    paths = find_desktop_files(roots, max_depth=max_depth)

    entries = []
    for path in paths:
        entry = parse_desktop_file(path)
        if entry is not None:
            entries.append(entry)

    entries = sort_entries(entries)
    if dedupe:
        entries = dedupe_entries(entries)

    logger.info(f"Loaded {len(entries)} applications from {len(paths)} descriptors")
    return tuple(entries)
