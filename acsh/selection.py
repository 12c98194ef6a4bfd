"""Resolve a user's model choice to a registry entry and persist it."""

from __future__ import annotations

from decimal import Decimal
from typing import Mapping, Optional, Protocol

from acsh.errors import InvalidKeyError, ModelNotFoundError, ResolveError, SelectionCancelled
from acsh.logging import debug
from acsh.menu import Confirmed, MenuSelector
from acsh.models import keys
from acsh.models.registry import ModelRecord, ModelRegistry

COST_PLACES = 8


class ConfigWriter(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def update(self, values: Mapping[str, str]) -> None:
        ...


def format_cost(cost: Decimal) -> str:
    """Render a per-token cost with fixed 8-decimal precision."""
    return f"{cost:.{COST_PLACES}f}"


def resolve_direct(registry: ModelRegistry, provider: str, model: str) -> ModelRecord:
    """Look up ``provider``/``model`` exactly.

    Raises:
        ModelNotFoundError: If the pair is not registered. The error carries
            the keys registered for ``provider`` as suggestions.
    """
    try:
        key = keys.encode(provider, model)
    except InvalidKeyError:
        key = None
    record = registry.lookup(key) if key is not None else None
    if record is None:
        raise ModelNotFoundError(provider, model, registry.keys_for_provider(provider))
    return record


def resolve_from_menu(registry: ModelRegistry, selector: MenuSelector) -> ModelRecord:
    """Let the user pick from the registry via ``selector``.

    The position reported by the menu is mapped back through the very list
    that was rendered.

    Raises:
        EmptyMenuError: If the registry has no entries.
        SelectionCancelled: If the user quits the menu.
        ResolveError: If the selector reports a position past the end of
            the rendered list.
    """
    snapshot = registry.display_order()
    outcome = selector.run(snapshot)
    if not isinstance(outcome, Confirmed):
        raise SelectionCancelled("selection canceled")
    if not 1 <= outcome.position <= len(snapshot):
        raise ResolveError(
            f"menu position {outcome.position} is outside 1..{len(snapshot)}"
        )
    key = snapshot[outcome.position - 1]
    debug(f"menu position {outcome.position} -> {key}")
    record = registry.lookup(key)
    if record is None:  # pragma: no cover - snapshot keys always resolve
        raise ModelNotFoundError(*keys.decode(key))
    return record


def apply_selection(store: ConfigWriter, record: ModelRecord) -> None:
    """Persist ``record`` as the active model in one write."""
    store.update(
        {
            "model": record.model,
            "endpoint": record.endpoint,
            "provider": record.provider,
            "api_prompt_cost": format_cost(record.prompt_cost),
            "api_completion_cost": format_cost(record.completion_cost),
        }
    )
