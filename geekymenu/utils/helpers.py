"""
Helper utilities for the GeekyMenu launcher.

Provides the pieces that sit at the edges of the core:
- Fire-and-forget command launching
- Settings loading (TOML merged over defaults)
- Log sink configuration
"""

import copy
import os
import subprocess
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import toml
from loguru import logger

DEFAULT_SETTINGS: Dict[str, Any] = {
    "scanner": {
        "extra_dirs": [],
        "max_depth": 32,
        "dedupe": False,
    },
    "session": {
        "page_step": 10,
    },
    "logging": {
        "level": "WARNING",
        "file": "",
    },
}


def launch_command(command: str) -> None:
    """
    Start a shell command fully detached and return immediately.

    The child gets its own session and no inherited standard streams,
    so it outlives the launcher and cannot write over the terminal.
    Its exit status is never collected.

    Args:
        command: Shell command line (field codes already stripped)

    Example:
        from geekymenu.utils.helpers import launch_command
        launch_command("firefox")
    """
    try:
        subprocess.Popen(
            command,
            shell=True,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError:
        logger.exception(f"Failed to launch command: {command}")


def _xdg_dir(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    return Path(value) if value else fallback


def default_settings_path() -> Path:
    """$XDG_CONFIG_HOME/geekymenu/settings.toml (~/.config by default)."""
    return _xdg_dir("XDG_CONFIG_HOME", Path.home() / ".config") / "geekymenu" / "settings.toml"


def default_log_path() -> Path:
    """$XDG_STATE_HOME/geekymenu/geekymenu.log (~/.local/state by default)."""
    return _xdg_dir("XDG_STATE_HOME", Path.home() / ".local" / "state") / "geekymenu" / "geekymenu.log"


def load_settings(settings_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load launcher settings from TOML file.

    Args:
        settings_path: File to read (defaults to default_settings_path())

    Returns:
        Dictionary containing settings with defaults applied

    Example settings structure:
        {
            "scanner": {"extra_dirs": [], "max_depth": 32, "dedupe": False},
            "session": {"page_step": 10},
            "logging": {"level": "WARNING", "file": ""},
        }
    """
    defaults = copy.deepcopy(DEFAULT_SETTINGS)
    settings_path = Path(settings_path) if settings_path else default_settings_path()

    if not settings_path.exists():
        logger.info(f"Settings file not found at {settings_path}, using defaults")
        return defaults

    try:
        loaded = toml.load(settings_path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning(f"Could not load settings from {settings_path}: {e}. Using default settings")
        return defaults

    return _validate_settings(_deep_merge(defaults, loaded))


def _validate_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    """
    Repair mistyped values in merged settings.

    A bare string for extra_dirs becomes a one-element list; any other
    wrong type falls back to the default with a warning.
    """
    for section, default in DEFAULT_SETTINGS.items():
        if not isinstance(settings[section], dict):
            logger.warning(f"Settings section [{section}] must be a table, using defaults")
            settings[section] = copy.deepcopy(default)

    scanner = settings["scanner"]
    extra_dirs = scanner["extra_dirs"]
    if isinstance(extra_dirs, str):
        scanner["extra_dirs"] = [extra_dirs]
    elif not isinstance(extra_dirs, list) or not all(isinstance(d, str) for d in extra_dirs):
        logger.warning(f"scanner.extra_dirs must be a list of paths, got {extra_dirs!r}; ignoring it")
        scanner["extra_dirs"] = []

    checks = [
        ("scanner", "max_depth", lambda v: isinstance(v, int) and not isinstance(v, bool) and v >= 0),
        ("scanner", "dedupe", lambda v: isinstance(v, bool)),
        ("session", "page_step", lambda v: isinstance(v, int) and not isinstance(v, bool) and v > 0),
        ("logging", "level", lambda v: isinstance(v, str)),
        ("logging", "file", lambda v: isinstance(v, str)),
    ]
    for section, key, valid in checks:
        value = settings[section][key]
        if not valid(value):
            default = DEFAULT_SETTINGS[section][key]
            logger.warning(f"Invalid {section}.{key} = {value!r}, using {default!r}")
            settings[section][key] = default

    return settings


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary with defaults
        override: Dictionary with overrides

    Returns:
        Merged dictionary (override takes precedence)
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def setup_logging(level: str = "WARNING", log_file: str = "") -> Optional[Path]:
    """
    Route loguru output to a log file.

    The default stderr sink is removed because curses owns the terminal
    while the launcher runs.

    Returns:
        Path of the log file, or None if it could not be opened
    """
    logger.remove()

    log_path = Path(os.path.expanduser(log_file)) if log_file else default_log_path()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_path, level=level.upper(), rotation="1 MB", retention=3)
    except OSError as e:
        # Still surface problems somewhere when the state dir is read-only
        logger.add(sys.stderr, level="ERROR")
        logger.error(f"Could not open log file {log_path}: {e}")
        return None

    return log_path
