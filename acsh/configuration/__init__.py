"""Configuration loading and persistence."""

from .errors import ConfigurationError
from .loader import (
    get_config,
    load_config,
    locate_config_file,
    merge_configs,
    reload_config,
)
from .schema import AcshConfig
from .store import ConfigStore, normalize_key

__all__ = [
    "AcshConfig",
    "ConfigStore",
    "ConfigurationError",
    "get_config",
    "load_config",
    "locate_config_file",
    "merge_configs",
    "normalize_key",
    "reload_config",
]
