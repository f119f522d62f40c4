"""
Helper utilities for the Quicklaunch launcher.

Provides:
- Settings loading with defaults
- Window size and test-mode lookups derived from settings
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import toml
from loguru import logger

from quicklaunch.controller import WindowSizes

SETTINGS_PATH = Path(__file__).parent.parent / "data" / "settings.toml"
TEST_MODE_ENV = "QUICKLAUNCH_TEST_MODE"

DEFAULT_SETTINGS = {
    "launcher": {
        "open_command": [],
        "test_mode": False,
    },
    "index": {
        "directories": [],
        "bundle_suffix": ".app",
        "max_age_seconds": 300,
    },
    "window": {
        "width": 600,
        "compact_height": 60,
        "expanded_height": 400,
    },
}


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load launcher settings from TOML file.

    Args:
        path: Settings file, defaults to quicklaunch/data/settings.toml

    Returns:
        Dictionary containing settings with defaults applied

    Example settings.toml:
        [index]
        directories = ["/Applications", "~/Applications"]
        max_age_seconds = 60

        [window]
        expanded_height = 480
    """
    defaults = copy.deepcopy(DEFAULT_SETTINGS)
    settings_path = Path(path) if path is not None else SETTINGS_PATH

    if not settings_path.exists():
        logger.debug(f"Settings file not found at {settings_path}, using defaults")
        return defaults

    try:
        loaded = toml.load(settings_path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning(f"Could not load settings from {settings_path}: {e}")
        return defaults

    return _deep_merge(defaults, loaded)


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


def window_sizes(settings: Dict[str, Any]) -> WindowSizes:
    window = settings.get("window", {})
    return WindowSizes(
        width=int(window.get("width", 600)),
        compact_height=int(window.get("compact_height", 60)),
        expanded_height=int(window.get("expanded_height", 400)),
    )


def is_test_mode(settings: Dict[str, Any]) -> bool:
    """Test mode swaps the layer-shell window for a plain one."""
    if os.environ.get(TEST_MODE_ENV) == "1":
        return True
    return bool(settings.get("launcher", {}).get("test_mode", False))
