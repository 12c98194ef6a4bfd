"""Shell completion helpers for the autocomplete CLI."""

from __future__ import annotations

from typing import Iterable, List

import click
import typer
from click.shell_completion import CompletionItem

from acsh import state
from acsh.configuration import AcshConfig, ConfigurationError, get_config
from acsh.errors import SourceUnavailableError
from acsh.models import JsonFileSource, ModelRegistry

from .common import get_registry

CompletionList = List[CompletionItem]


def _quiet_registry() -> ModelRegistry | None:
    registry = get_registry()
    try:
        registry.load(JsonFileSource(state.models_file()))
    except SourceUnavailableError:
        return None
    return registry


def provider_completion(
    ctx: typer.Context | None,  # noqa: ARG001 - required by Click shell completion
    param: click.Parameter | None,  # noqa: ARG001
    incomplete: str,
) -> CompletionList:
    """Suggest providers that have at least one registered model."""

    registry = _quiet_registry()
    if registry is None:
        return []
    return _as_completion_items(_match_candidates(registry.providers(), incomplete))


def model_completion(
    ctx: typer.Context | None,
    param: click.Parameter | None,  # noqa: ARG001
    incomplete: str,
) -> CompletionList:
    """Suggest model names, narrowed to the provider typed before them."""

    registry = _quiet_registry()
    if registry is None:
        return []
    provider = ctx.params.get("provider") if ctx is not None else None
    names = [
        record.model
        for record in registry
        if provider is None or record.provider == provider
    ]
    return _as_completion_items(_match_candidates(dict.fromkeys(names), incomplete))


def config_key_completion(
    ctx: typer.Context | None,  # noqa: ARG001
    param: click.Parameter | None,  # noqa: ARG001
    incomplete: str,
) -> CompletionList:
    """Suggest configuration keys for config get/set commands."""

    try:
        keys = list(get_config().to_dict())
    except ConfigurationError:
        keys = list(AcshConfig.model_fields)

    matches = _match_candidates(sorted(dict.fromkeys(keys)), incomplete)
    return _as_completion_items(matches)


def _match_candidates(candidates: Iterable[str], needle: str) -> List[str]:
    term = (needle or "").lower()
    return [candidate for candidate in candidates if candidate.lower().startswith(term)]


def _as_completion_items(matches: List[str]) -> CompletionList:
    return [CompletionItem(match) for match in matches]


__all__ = [
    "provider_completion",
    "model_completion",
    "config_key_completion",
]
