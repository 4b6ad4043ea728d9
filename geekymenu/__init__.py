# GeekyMenu Launcher Package
"""
Terminal application launcher for Linux desktops.

Pieces:
  - Scanner: finds .desktop descriptors under the application roots
  - Parser: turns descriptors into Entry records
  - Ranker: fuzzy subsequence matching of the typed query
  - Session: keyboard-driven state machine painted by curses
"""

__version__ = "0.2.0"
