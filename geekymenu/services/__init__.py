# GeekyMenu Services Package
"""
Backend services for the GeekyMenu launcher.

Services find and parse application descriptors on disk.
"""

from .desktop_entry import Entry, load_entries, parse_desktop_file
from .scanner import default_app_dirs, find_desktop_files

__all__ = ["Entry", "load_entries", "parse_desktop_file", "default_app_dirs", "find_desktop_files"]
