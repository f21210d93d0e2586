"""
Settings loader for the Q&A topic scraper.

Settings live in a JSON file (``config/settings.json`` by default) and are
deep-merged over built-in defaults, so a settings file only needs the keys
it changes. Secrets never come from this file; they are read from the
environment by the components that need them.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..constants import COLLECTION, DEFAULT_PATHS, KEYWORDS, TIMEOUTS, TYPING_DELAY_MS
from ..exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: Dict[str, Any] = {
    'browser': {
        'driver': 'local',
        'headless': False
    },
    'timeouts': dict(TIMEOUTS),
    'collection': dict(COLLECTION),
    'typing': {
        'delay_ms': TYPING_DELAY_MS
    },
    'keywords': list(KEYWORDS),
    'storage': {
        'output_dir': DEFAULT_PATHS['output_dir']
    },
    'logging': {
        'level': 'INFO',
        'file': f"{DEFAULT_PATHS['logs_dir']}/scraper.log",
        'max_size': 10485760,
        'backup_count': 5
    }
}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of base with override applied recursively."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_settings(config_path: Optional[str] = None, required: bool = False) -> Dict[str, Any]:
    """
    Load settings from a JSON file merged over the defaults.

    Args:
        config_path: Path to the settings file (defaults to config/settings.json)
        required: Raise if the file does not exist instead of using defaults

    Returns:
        Complete settings dictionary

    Raises:
        ConfigError: If the file is required but missing, or is not a JSON object
    """
    path = Path(config_path or DEFAULT_PATHS['config_file'])
    if not path.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {path}")
        logger.debug(f"No settings file at {path}, using defaults")
        return copy.deepcopy(DEFAULT_SETTINGS)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            loaded = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}")

    if not isinstance(loaded, dict):
        raise ConfigError(f"Settings in {path} must be a JSON object")

    return deep_merge(DEFAULT_SETTINGS, loaded)


def section(settings: Optional[Dict[str, Any]], name: str) -> Dict[str, Any]:
    """A settings section with defaults filled in for any missing keys."""
    defaults = DEFAULT_SETTINGS[name]
    if not settings or name not in settings:
        return copy.deepcopy(defaults)
    return deep_merge(defaults, settings[name])
