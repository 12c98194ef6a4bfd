"""Configuration loading, merging, and caching."""

from __future__ import annotations

import copy
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomllib  # Python 3.11+
except ImportError:  # pragma: no cover
    import tomli as tomllib

from acsh import state

from .defaults import DEFAULT_CONFIG_DICT
from .errors import ConfigurationError
from .resolver import resolve_environment
from .schema import AcshConfig

CONFIG_ENV = "ACSH_CONFIG"


@lru_cache(maxsize=1)
def locate_config_file() -> Optional[Path]:
    """Locate the configuration file: $ACSH_CONFIG, then the state root."""
    env_override = os.environ.get(CONFIG_ENV)
    if env_override:
        path = Path(env_override).expanduser()
        if not path.exists():
            raise ConfigurationError(f"{CONFIG_ENV} points to missing file: {path}")
        return path.resolve()

    candidate = state.default_config_path()
    if candidate.exists():
        return candidate
    return None


def load_toml(path: Path) -> Dict[str, Any]:
    """Load a TOML file with helpful error reporting."""
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid TOML in {path}: {exc}") from exc
    except OSError as exc:  # pragma: no cover - file permission/path errors
        raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge dictionaries, returning a new dict."""
    result: Dict[str, Any] = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def validate_config(data: Dict[str, Any]) -> AcshConfig:
    try:
        return AcshConfig.from_dict(data)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc


def load_config() -> AcshConfig:
    """Load, validate and resolve the effective configuration."""
    config_data = copy.deepcopy(DEFAULT_CONFIG_DICT)
    if config_path := locate_config_file():
        config_data = merge_configs(config_data, load_toml(config_path))
    return resolve_environment(validate_config(config_data))


_CONFIG_INSTANCE: Optional[AcshConfig] = None


def get_config() -> AcshConfig:
    """Get the cached configuration object."""
    global _CONFIG_INSTANCE
    if _CONFIG_INSTANCE is None:
        _CONFIG_INSTANCE = load_config()
    return _CONFIG_INSTANCE


def reload_config() -> AcshConfig:
    """Force reload configuration from disk."""
    global _CONFIG_INSTANCE
    locate_config_file.cache_clear()
    _CONFIG_INSTANCE = load_config()
    return _CONFIG_INSTANCE
