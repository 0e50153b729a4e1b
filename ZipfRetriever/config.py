"""
Configuration loading.

Settings are read from a JSON file (config.json beside this package by
default) and merged over the built-in defaults, so a partial file only
overrides the keys it names.
"""
import copy
import json
import logging
import os
from typing import Any, Dict, Optional

from .errors import ConfigurationError

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "config.json")

DEFAULT_CONFIG: Dict[str, Any] = {
    "corpus": {
        "documents_dir": "documents",
        "extension": ".txt",
        "encoding": "utf-8",
    },
    "index": {
        "default_file": "index.bin",
        "initial_capacity": 100,
    },
    "preprocessing": {
        "min_token_length": 3,
        "extra_stop_words": [],
    },
    "zipf": {
        "default_percentile": 15,
        "min_percentile": 1,
        "max_percentile": 30,
        "default_strategy": "conservative",
    },
    "search": {
        "similarity_threshold": 0.001,
        "max_results": 10,
        "preview_length": 150,
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration, falling back to the defaults.

    Args:
        path: JSON file to read; the packaged config.json when None

    Returns:
        Complete configuration dictionary
    """
    explicit = path is not None
    path = path or DEFAULT_CONFIG_PATH

    if not os.path.exists(path):
        if explicit:
            raise ConfigurationError(f"Config file not found: {path}")
        log.warning("Config file %s not found. Using default settings.", path)
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(path, "r", encoding="utf-8") as f:
            user_config = json.load(f)
    except (OSError, ValueError) as e:
        if explicit:
            raise ConfigurationError(f"Could not load config file {path}: {e}") from e
        log.warning("Could not load config file: %s. Using default settings.", e)
        return copy.deepcopy(DEFAULT_CONFIG)

    if not isinstance(user_config, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")

    return _deep_merge(DEFAULT_CONFIG, user_config)


def get_setting(config: Dict[str, Any], dotted_key: str, default: Any = None) -> Any:
    """Fetch a nested setting, e.g. get_setting(config, "zipf.default_percentile")."""
    value: Any = config
    for part in dotted_key.split("."):
        if not isinstance(value, dict) or part not in value:
            return default
        value = value[part]
    return value
