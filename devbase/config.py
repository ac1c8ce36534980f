#!/usr/bin/env python3
"""
Configuration for devbase.

Settings come from, in increasing precedence:
1. Built-in defaults (``get_default_config``)
2. A config file: ``$DEVBASE_CONFIG`` or ``$XDG_CONFIG_HOME/devbase/config.{json,toml,yaml,yml}``
3. Environment overrides ``DEVBASE_<SECTION>_<KEY>``, e.g. ``DEVBASE_CORE_REF=v1.4.0``
"""

import os
import json
import tomllib
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import logging
import sys

import yaml

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("devbase")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']
ENV_PREFIX = "DEVBASE_"


def xdg_config_home() -> Path:
    """Return $XDG_CONFIG_HOME, defaulting to ~/.config."""
    value = os.environ.get('XDG_CONFIG_HOME')
    return Path(value) if value else Path.home() / '.config'


def xdg_data_home() -> Path:
    """Return $XDG_DATA_HOME, defaulting to ~/.local/share."""
    value = os.environ.get('XDG_DATA_HOME')
    return Path(value) if value else Path.home() / '.local' / 'share'


def get_config_path() -> Path:
    """Get the path to the configuration file.

    Checks in order:
    1. DEVBASE_CONFIG environment variable
    2. $XDG_CONFIG_HOME/devbase/ directory (first non-empty config.* file)

    Falls back to ``$XDG_CONFIG_HOME/devbase/config.json`` when nothing exists.
    """
    explicit = os.environ.get('DEVBASE_CONFIG')
    if explicit:
        path = Path(explicit).expanduser()
        if path.exists():
            return path
        logger.debug(f"DEVBASE_CONFIG points to missing file {path}")

    config_dir = xdg_config_home() / 'devbase'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists() and path.stat().st_size > 0:
            return path
    return config_dir / 'config.json'


def _load_toml(path: Path) -> Dict[str, Any]:
    with open(path, 'rb') as f:
        return tomllib.load(f)


def _load_yaml(path: Path) -> Dict[str, Any]:
    with open(path, 'r') as f:
        return yaml.safe_load(f) or {}


def _load_json(path: Path) -> Dict[str, Any]:
    with open(path, 'r') as f:
        return json.load(f)


_LOADERS: Dict[str, Callable[[Path], Dict[str, Any]]] = {
    '.toml': _load_toml,
    '.yaml': _load_yaml,
    '.yml': _load_yaml,
}


def read_config_file(path: Path) -> Dict[str, Any]:
    """Parse a config file by extension; anything unknown is read as JSON."""
    loader = _LOADERS.get(path.suffix.lower(), _load_json)
    return loader(path)


def load_config() -> Dict[str, Any]:
    """Load configuration: defaults, then the config file, then the environment."""
    config = get_default_config()

    config_path = get_config_path()
    if config_path.exists():
        try:
            config = merge_configs(config, read_config_file(config_path))
        except Exception as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    return apply_env_overrides(config)


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        "paths": {
            "data_dir": str(xdg_data_home() / 'devbase'),
            "config_dir": str(xdg_config_home() / 'devbase'),
        },
        "core": {
            "remote_url": "",
            "source_dir": "",
            "ref": "",
        },
        "overlay": {
            "remote_url": "",
            "source_dir": os.environ.get('DEVBASE_CUSTOM_DIR', ""),
        },
        "update": {
            "check_timeout_seconds": 5,
            "fetch_timeout_seconds": 120,
            "version_marker_field": 1,
        },
        "install": {
            "command": ["./setup.sh", "--non-interactive"],
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s"
        },
    }


def configure_logging(config: Dict[str, Any], verbose: bool = False) -> None:
    """Apply the logging section of the config to the package logger."""
    log_config = config.get("logging", {})
    level_name = "DEBUG" if verbose else str(log_config.get("level", "INFO")).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    fmt = log_config.get("format")
    if fmt:
        for handler in logging.getLogger().handlers:
            handler.setFormatter(logging.Formatter(fmt))


def merge_configs(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge two configuration dictionaries.

    Nested dicts are merged key by key; any other value in
    ``override_config`` replaces the base value.
    """
    merged = dict(base_config)
    for key, value in override_config.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value
    return merged


def _coerce_env_value(value: str) -> Any:
    lowered = value.lower()
    if lowered in ('true', 'yes', 'on'):
        return True
    if lowered in ('false', 'no', 'off'):
        return False
    if value.isdigit():
        return int(value)
    return value


def _match_key(section: Dict[str, Any], parts: List[str]) -> Optional[Tuple[str, int]]:
    """
    Longest config key in ``section`` spelled by a prefix of ``parts``.

    ``check_timeout_seconds`` is spelled by ``["check", "timeout", "seconds"]``.
    """
    best = None
    for key in section:
        key_parts = key.split('_')
        if parts[:len(key_parts)] == key_parts and (best is None or len(key_parts) > best[1]):
            best = (key, len(key_parts))
    return best


def apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Variables follow the pattern ``DEVBASE_<SECTION>_<KEY>``, for example
    ``DEVBASE_CORE_REF=v1.4.0`` or ``DEVBASE_UPDATE_CHECK_TIMEOUT_SECONDS=3``.
    Only existing keys are overridden. A string setting keeps the raw string.
    """
    for env_key, raw in os.environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue

        parts = env_key[len(ENV_PREFIX):].lower().split('_')
        section = config
        while parts:
            match = _match_key(section, parts)
            if match is None:
                break
            key, consumed = match
            parts = parts[consumed:]

            if not parts:
                value = raw if isinstance(section[key], str) else _coerce_env_value(raw)
                logger.debug(f"{env_key} overrides {key}")
                section[key] = value
                break
            if not isinstance(section[key], dict):
                break
            section = section[key]

    return config
