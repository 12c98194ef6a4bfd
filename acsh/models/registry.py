"""Ordered catalog of selectable (provider, model) combinations."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterator, List, Mapping, Optional

from acsh.logging import debug

from . import keys
from .source import ModelSource

REQUIRED_FIELDS = ("provider", "model", "endpoint")


@dataclass(frozen=True)
class ModelRecord:
    """One selectable provider/model pair and its pricing."""

    provider: str
    model: str
    endpoint: str
    prompt_cost: Decimal = Decimal(0)
    completion_cost: Decimal = Decimal(0)
    key: str = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", keys.encode(self.provider, self.model))

    @classmethod
    def from_descriptor(cls, data: Mapping[str, Any]) -> "ModelRecord":
        """Build a record from a source descriptor.

        Raises:
            ValueError: If a required field is missing or not a string, a cost
                is negative or not numeric, or the pair cannot be encoded into
                a key.
        """
        wrong_type = [
            name
            for name in REQUIRED_FIELDS
            if data.get(name) is not None and not isinstance(data[name], str)
        ]
        if wrong_type:
            raise ValueError(f"{', '.join(wrong_type)} must be text")
        missing = [name for name in REQUIRED_FIELDS if not _text(data.get(name))]
        if missing:
            raise ValueError(f"missing {', '.join(missing)}")
        return cls(
            provider=_text(data["provider"]),
            model=_text(data["model"]),
            endpoint=_text(data["endpoint"]),
            prompt_cost=_cost(data.get("prompt_cost"), "prompt_cost"),
            completion_cost=_cost(data.get("completion_cost"), "completion_cost"),
        )


def _text(value: Optional[str]) -> str:
    return (value or "").strip()


def _cost(value: Any, name: str) -> Decimal:
    if value is None or value == "":
        return Decimal(0)
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number")
    try:
        # str() keeps JSON floats such as 2.5e-07 exact
        cost = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc
    if not cost.is_finite() or cost < 0:
        raise ValueError(f"{name} must be a non-negative number, got {value!r}")
    return cost


class ModelRegistry:
    """Insertion-ordered ``key -> ModelRecord`` catalog.

    The registry is filled once by :meth:`load`; later calls are no-ops until
    :meth:`reset`. Instances are not thread-safe.
    """

    def __init__(self) -> None:
        self._records: Dict[str, ModelRecord] = {}
        self._order: List[str] = []
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self, source: ModelSource) -> None:
        """Populate the registry from ``source`` unless already loaded.

        Descriptors missing provider, model or endpoint, with invalid costs,
        or repeating an earlier (provider, model) pair are skipped.

        Raises:
            SourceUnavailableError: If ``source`` cannot be read. The
                registry is left empty and unloaded.
        """
        if self._loaded:
            return

        descriptors = source.fetch()
        records: Dict[str, ModelRecord] = {}
        order: List[str] = []
        for index, descriptor in enumerate(descriptors):
            if not isinstance(descriptor, Mapping):
                debug(f"skipping model #{index}: not an object")
                continue
            try:
                record = ModelRecord.from_descriptor(descriptor)
            except ValueError as exc:
                debug(f"skipping model #{index}: {exc}")
                continue
            if record.key in records:
                debug(f"skipping model #{index}: duplicate {record.key}")
                continue
            records[record.key] = record
            order.append(record.key)

        self._records = records
        self._order = order
        self._loaded = True
        debug(f"loaded {len(order)} model(s) from {source!r}")

    def reset(self) -> None:
        """Forget all entries so the next :meth:`load` reads the source again."""
        self._records = {}
        self._order = []
        self._loaded = False

    def lookup(self, key: str) -> Optional[ModelRecord]:
        return self._records.get(key)

    def display_order(self) -> List[str]:
        return list(self._order)

    def count(self) -> int:
        return len(self._order)

    def keys_for_provider(self, provider: str) -> List[str]:
        return [key for key in self._order if self._records[key].provider == provider]

    def providers(self) -> List[str]:
        return list(dict.fromkeys(self._records[key].provider for key in self._order))

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[ModelRecord]:
        return (self._records[key] for key in self._order)

    def __contains__(self, key: object) -> bool:
        return key in self._records
