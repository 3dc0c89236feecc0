"""
Settings Module for Water Sort Solver

Provides persistent storage for solver configuration using JSON.
Settings are stored in watersort.json in the working directory unless
another path is given.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

# Settings file location (working directory)
SETTINGS_FILE = Path("watersort.json")

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "strategy_name": "bucket",
    "seed": None,
    "filter_kind": "bitarray",
    "filter_bits": 32,
    "max_states": 20_000_000,
    "workers": 1,
    "timeout_sec": 60.0,
    "max_rounds": None,
}

# Keys consumed by strategy constructors, per strategy
_STRATEGY_KEYS: Dict[str, tuple] = {
    "bucket": ("seed", "filter_kind", "filter_bits", "max_states", "workers"),
    "bfs": ("max_states",),
}

# Keys consumed by SolutionContext
_CONTEXT_KEYS = ("timeout_sec", "max_rounds")


def load_settings(path: Union[str, Path, None] = None) -> Dict[str, Any]:
    """
    Load settings from a JSON file.

    Args:
        path: Settings file, SETTINGS_FILE if None

    Returns:
        Settings dictionary. Returns defaults if file missing or invalid.
    """
    settings_file = Path(path) if path is not None else SETTINGS_FILE
    if not settings_file.exists():
        logger.debug("Settings file not found, using defaults")
        return DEFAULT_SETTINGS.copy()

    try:
        with open(settings_file, 'r', encoding='utf-8') as f:
            settings = json.load(f)
        if not isinstance(settings, dict):
            raise ValueError("top-level JSON value is not an object")

        # Merge with defaults to handle missing keys
        result = DEFAULT_SETTINGS.copy()
        result.update(settings)
        logger.debug(f"Settings loaded: {result}")
        return result

    except (json.JSONDecodeError, ValueError, IOError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return DEFAULT_SETTINGS.copy()


def save_settings(settings: Dict[str, Any], path: Union[str, Path, None] = None) -> None:
    """
    Save settings to a JSON file.

    Args:
        settings: Settings dictionary to save
        path: Settings file, SETTINGS_FILE if None
    """
    settings_file = Path(path) if path is not None else SETTINGS_FILE
    try:
        with open(settings_file, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2)
        logger.debug(f"Settings saved: {settings}")
    except IOError as e:
        logger.error(f"Failed to save settings: {e}")


def strategy_kwargs(settings: Dict[str, Any], strategy_name: Optional[str] = None) -> Dict[str, Any]:
    """
    Pick the constructor arguments for a strategy out of flat settings.

    Args:
        settings: Settings dictionary
        strategy_name: Strategy to configure, settings["strategy_name"] if None

    Returns:
        Keyword arguments for create_strategy()
    """
    name = strategy_name or settings.get("strategy_name", DEFAULT_SETTINGS["strategy_name"])
    keys = _STRATEGY_KEYS.get(name, ())
    return {key: settings[key] for key in keys if key in settings}


def context_kwargs(settings: Dict[str, Any]) -> Dict[str, Any]:
    """
    Pick the search budget out of flat settings.

    Returns:
        Keyword arguments for SolutionContext
    """
    return {key: settings[key] for key in _CONTEXT_KEYS if key in settings}
