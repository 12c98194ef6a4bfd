from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from acsh import __version__, state
from acsh.errors import SourceUnavailableError
from acsh.logging import console
from acsh.models import JsonFileSource, ModelRegistry

COMMAND_CONTEXT = {"help_option_names": ["-h", "--help"]}

COMMAND_ALIASES = {
    "use": "model",
}

ALIAS_HELP_TEMPLATE = "Alias for {canonical}"

_REGISTRY = ModelRegistry()


def get_registry() -> ModelRegistry:
    """Return the process-wide registry (possibly not loaded yet)."""
    return _REGISTRY


def load_registry(path: Optional[Path] = None) -> ModelRegistry:
    """Load the registry from ``models.json``, surfacing Typer-friendly errors."""
    registry = get_registry()
    try:
        registry.load(JsonFileSource(path or state.models_file()))
    except SourceUnavailableError as exc:
        console.print(f"[error]{exc}[/]")
        console.print("[info]Run 'autocomplete models refresh' to download the model list.[/]")
        raise typer.Exit(code=1)
    return registry


def print_version() -> None:
    console.print(f"[bold]autocomplete[/bold] [accent]v{__version__}[/]")


def exit_with_help(
    ctx: typer.Context,
    *,
    message: str | None = None,
    tip: str | None = None,
    code: int = 1,
) -> None:
    """Print an error message and suggest using --help for more information."""
    if message:
        console.print(f"[error]{message}[/]")
    if tip:
        console.print(f"[info]{tip}[/]")
    command_name = ctx.command_path or "autocomplete"
    console.print(f"[info]Try '{command_name} --help' for more information.[/]")
    raise typer.Exit(code=code)
