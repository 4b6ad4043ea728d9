# GeekyMenu Utilities Package
"""
Shared utility functions and helpers for the GeekyMenu launcher.
"""

from .helpers import launch_command, load_settings, setup_logging

__all__ = ["launch_command", "load_settings", "setup_logging"]
