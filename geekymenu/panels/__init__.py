# GeekyMenu Panels Package
"""
Session state machine and its terminal front end.
"""

from .session import KeyEvent, KeyKind, SessionController, Snapshot

__all__ = ["KeyEvent", "KeyKind", "SessionController", "Snapshot"]
