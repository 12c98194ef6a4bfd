"""Read and update single configuration values in the TOML file."""

from __future__ import annotations

import os
import re
import shutil
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

import tomlkit
from tomlkit.exceptions import ParseError

try:
    import tomllib  # Python 3.11+
except ImportError:  # pragma: no cover - Python <3.11
    import tomli as tomllib

from acsh import state

from .defaults import DEFAULT_COMMENTS, DEFAULT_CONFIG_DICT
from .errors import ConfigurationError
from .loader import get_config, locate_config_file, merge_configs, reload_config, validate_config


def normalize_key(key: str) -> str:
    """Lower-case ``key`` and replace anything but letters and digits with ``_``."""
    return re.sub(r"[^a-z0-9]", "_", key.strip().lower())


def render_value(value: Any) -> str:
    """Text form of a config value; decimals stay in fixed-point notation."""
    if isinstance(value, Decimal):
        return f"{value:f}"
    return str(value)


def generate_default_toml() -> str:
    document = tomlkit.document()
    document.add(tomlkit.comment("acsh configuration"))
    for key, value in DEFAULT_CONFIG_DICT.items():
        if key in DEFAULT_COMMENTS:
            document.add(tomlkit.nl())
            document.add(tomlkit.comment(DEFAULT_COMMENTS[key]))
        document.add(key, value)
    return tomlkit.dumps(document)


class ConfigStore:
    """``get``/``set`` access to individual configuration keys."""

    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path) if path is not None else None

    @property
    def path(self) -> Path:
        if self._path is not None:
            return self._path
        return locate_config_file() or state.default_config_path()

    def ensure(self) -> Tuple[Path, bool]:
        """Create the config file with defaults if needed; report whether it was created."""
        path = self.path
        if path.exists():
            return path, False
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(generate_default_toml(), encoding="utf-8")
        locate_config_file.cache_clear()
        return path, True

    def get(self, key: str) -> Optional[str]:
        """Return the effective value for ``key`` as text, or ``None`` if unset."""
        value = get_config().to_dict().get(normalize_key(key))
        if value is None:
            return None
        return render_value(value)

    def set(self, key: str, value: Any) -> None:
        """Validate and write ``key = value``, keeping comments intact.

        Raises:
            ConfigurationError: If the key is empty, the file is unreadable, or
                the new value fails validation. Nothing is written then.
        """
        self.update({key: value})

    def update(self, values: Mapping[str, Any]) -> None:
        """Validate and write several keys in a single rewrite of the file.

        Either every value is stored or the file is left as it was.

        Raises:
            ConfigurationError: If a key is empty, the file cannot be read or
                written, or the combined values fail validation.
        """
        names = {}
        for key, value in values.items():
            name = normalize_key(key)
            if not name.strip("_"):
                raise ConfigurationError("Config key cannot be empty")
            names[name] = value
        if not names:
            return

        path, _ = self.ensure()
        try:
            document = tomlkit.parse(path.read_text(encoding="utf-8"))
        except (OSError, ParseError) as exc:
            raise ConfigurationError(f"Cannot read config {path}: {exc}") from exc

        for name, value in names.items():
            document[name] = value
        rendered = tomlkit.dumps(document)
        candidate = tomllib.loads(rendered)
        try:
            validate_config(merge_configs(DEFAULT_CONFIG_DICT, candidate))
        except ConfigurationError as exc:
            raise ConfigurationError(f"Invalid value for {', '.join(names)}: {exc}") from exc

        _replace_file(path, rendered)
        reload_config()

    def reset(self) -> Optional[Path]:
        """Rewrite the file with defaults, returning the backup path if one was made."""
        path = self.path
        backup_path = None
        if path.exists():
            timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
            backup_path = path.with_name(f"{path.name}.{timestamp}.bak")
            counter = 1
            while backup_path.exists():
                backup_path = path.with_name(f"{path.name}.{timestamp}.{counter}.bak")
                counter += 1
            shutil.copy2(path, backup_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(generate_default_toml(), encoding="utf-8")
        reload_config()
        return backup_path


def _replace_file(path: Path, content: str) -> None:
    """Write ``content`` to a sibling temp file and move it over ``path``."""
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        tmp_path.write_text(content, encoding="utf-8")
        os.replace(tmp_path, path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise ConfigurationError(f"Cannot write config {path}: {exc}") from exc
