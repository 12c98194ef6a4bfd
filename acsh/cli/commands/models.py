"""Inspect and rebuild the list of selectable models."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from acsh import providers, state, ui
from acsh.configuration import ConfigurationError, get_config
from acsh.errors import InvalidKeyError, ProviderAPIError
from acsh.logging import console, status_spinner
from acsh.models import keys
from acsh.selection import format_cost

from ..common import COMMAND_CONTEXT, get_registry, load_registry
from ..completions import provider_completion
from ..type_defs import CommandMap

models_app = typer.Typer(help="List and refresh available models.", context_settings=COMMAND_CONTEXT)


@models_app.callback(invoke_without_command=True)
def _models_root(ctx: typer.Context) -> None:
    """Entry point for the models command group."""
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@models_app.command(name="list", context_settings=COMMAND_CONTEXT)
def list_models_cmd(
    provider: Optional[str] = typer.Option(
        None,
        "--provider",
        "-p",
        help="Only show models from this provider.",
        shell_complete=provider_completion,
    ),
) -> None:
    """List registered models in menu order."""
    registry = load_registry()
    try:
        config = get_config()
        active = keys.encode(config.provider, config.model)
    except (ConfigurationError, InvalidKeyError):
        active = None

    records = [r for r in registry if provider is None or r.provider == provider]
    if not records:
        if provider:
            console.print(f"[warn]No models registered for provider '{provider}'.[/]")
        else:
            console.print("[warn]The model list is empty.[/]")
        console.print("[info]Run 'autocomplete models refresh' to download the model list.[/]")
        raise typer.Exit(code=1)

    table = ui.themed_table(title="[info]Available Models")
    table.add_column("", width=1)
    table.add_column("Provider", style="accent", no_wrap=True)
    table.add_column("Model", no_wrap=True)
    table.add_column("Prompt $", style="muted", justify="right")
    table.add_column("Completion $", style="muted", justify="right")
    for record in records:
        marker = "[ok]*[/]" if record.key == active else ""
        table.add_row(
            marker,
            record.provider,
            record.model,
            format_cost(record.prompt_cost),
            format_cost(record.completion_cost),
        )
    console.print(table)
    console.print(f"[muted]{len(records)} of {registry.count()} models[/]")


@models_app.command(name="refresh", context_settings=COMMAND_CONTEXT)
def refresh_models_cmd(
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the list here instead of the default models.json.",
    ),
) -> None:
    """Download model lists from the provider APIs and rewrite models.json."""
    try:
        config = get_config()
    except ConfigurationError as exc:
        console.print(f"[error]{exc}[/]")
        raise typer.Exit(code=1)

    with status_spinner("Fetching model lists"):
        try:
            catalog = providers.build_catalog(
                config.api_key_for("openai"), config.api_key_for("anthropic")
            )
        except ProviderAPIError as exc:
            console.print(f"[error]{exc}[/]")
            raise typer.Exit(code=1)

    for warning in catalog.warnings:
        console.print(f"[warn]{warning}[/]")

    target = output or state.models_file()
    try:
        providers.write_catalog(target, catalog.models)
    except OSError as exc:
        console.print(f"[error]Cannot write {target}: {exc}[/]")
        raise typer.Exit(code=1)
    get_registry().reset()

    if catalog.filtered:
        console.print(f"[muted]Filtered out {len(catalog.filtered)} models:[/]")
        for name in catalog.filtered:
            console.print(f"[muted]  {name}[/]", highlight=False)

    console.print(f"[ok]Wrote {len(catalog.models)} models to {target}[/]")
    for name, count in catalog.count_by_provider().items():
        console.print(f"[info]  {name}: {count}[/]")


def register(app: typer.Typer) -> CommandMap:
    """Register the models command and its subcommands."""
    app.add_typer(models_app, name="models")
    return {}
