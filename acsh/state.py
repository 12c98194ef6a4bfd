from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

STATE_ROOT_ENV = "ACSH_HOME"


@lru_cache(maxsize=1)
def state_root() -> Path:
    env = os.environ.get(STATE_ROOT_ENV)
    if env:
        return Path(env).expanduser().resolve()
    return Path.home() / ".autocomplete"


def default_config_path() -> Path:
    return state_root() / "config.toml"


def models_file() -> Path:
    return state_root() / "models.json"


def cache_dir() -> Path:
    return state_root() / "cache"


def log_file() -> Path:
    return state_root() / "autocomplete.log"
