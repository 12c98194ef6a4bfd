"""Model descriptor sources consumed by the registry."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence

from acsh.errors import SourceUnavailableError


class ModelSource(Protocol):
    """Anything that can hand the registry a list of model descriptors."""

    def fetch(self) -> Sequence[Mapping[str, Any]]:
        ...


class JsonFileSource:
    """Read descriptors from a ``models.json`` file.

    The file is either ``{"models": [...]}`` (as written by
    ``autocomplete models refresh``) or a bare list of descriptors.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def fetch(self) -> Sequence[Mapping[str, Any]]:
        if not self.path.is_file():
            raise SourceUnavailableError(f"Models file not found: {self.path}")
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise SourceUnavailableError(f"Cannot read models file {self.path}: {exc}") from exc
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise SourceUnavailableError(f"Invalid JSON in {self.path}: {exc}") from exc

        if isinstance(data, dict):
            data = data.get("models")
        if not isinstance(data, list):
            raise SourceUnavailableError(
                f"{self.path} must contain a list of models or a 'models' list"
            )
        return data

    def __repr__(self) -> str:
        return f"JsonFileSource({str(self.path)!r})"


class StaticSource:
    """In-memory descriptor list."""

    def __init__(self, descriptors: Sequence[Mapping[str, Any]]):
        self._descriptors = list(descriptors)

    def fetch(self) -> Sequence[Mapping[str, Any]]:
        return list(self._descriptors)
