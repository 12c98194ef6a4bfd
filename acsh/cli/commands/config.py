"""Configuration management commands."""

from __future__ import annotations

import json
from typing import Any, Literal

import typer
from rich.syntax import Syntax

from acsh import ui
from acsh.configuration import (
    ConfigStore,
    ConfigurationError,
    get_config,
    locate_config_file,
    normalize_key,
)
from acsh.configuration.store import generate_default_toml, render_value
from acsh.logging import console
from acsh.state import default_config_path

from ..common import COMMAND_CONTEXT
from ..completions import config_key_completion
from ..type_defs import CommandMap

ValueKind = Literal["auto", "str", "int", "float", "bool", "json"]
VALUE_KINDS = ("auto", "str", "int", "float", "bool", "json")


def register(app: typer.Typer) -> CommandMap:
    config_app = typer.Typer(help="Manage autocomplete configuration.", context_settings=COMMAND_CONTEXT)

    @config_app.callback(invoke_without_command=True)
    def _config_root(ctx: typer.Context) -> None:
        """Entry point for the config command group."""
        if ctx.invoked_subcommand is None:
            show(format="table")

    @config_app.command(context_settings=COMMAND_CONTEXT)
    def init(
        force: bool = typer.Option(
            False, "--force", "-f", help="Overwrite existing config file."
        ),
    ) -> None:
        """Create a default configuration file."""
        store = ConfigStore()
        if store.path.exists() and not force:
            console.print(f"[warn]Config file already exists: {store.path}[/]")
            console.print("[info]Use --force to overwrite it with defaults.[/]")
            raise typer.Exit(code=1)
        store.reset()
        console.print(f"[ok]Created config file: {store.path}[/]")

    @config_app.command(context_settings=COMMAND_CONTEXT)
    def show(
        format: str = typer.Option(
            "table",
            "--format",
            "-f",
            help="Output format (table, toml or json).",
        ),
    ) -> None:
        """Display the current configuration."""
        try:
            config = get_config()
        except ConfigurationError as exc:
            console.print(f"[error]{exc}[/]")
            raise typer.Exit(code=1)

        format = format.lower()
        if format not in {"table", "toml", "json"}:
            console.print(f"[error]Unsupported format: {format}[/]")
            raise typer.Exit(code=1)

        if format == "toml":
            config_path = locate_config_file()
            if config_path and config_path.exists():
                content = config_path.read_text(encoding="utf-8")
            else:
                content = generate_default_toml()
            console.print(Syntax(content, "toml", theme="monokai", line_numbers=True))
            return

        data = config.to_dict()
        if format == "json":
            console.print_json(json.dumps(_masked(data), indent=2, default=render_value))
            return

        table = ui.themed_table(title="[info]Configuration")
        table.add_column("Key", style="accent", no_wrap=True)
        table.add_column("Value")
        for key, value in _masked(data).items():
            table.add_row(key, render_value(value))
        console.print(table)
        config_path = locate_config_file()
        source = str(config_path) if config_path else "built-in defaults"
        console.print(f"[muted]Source: {source}[/]")

    @config_app.command(context_settings=COMMAND_CONTEXT)
    def path() -> None:
        """Show configuration file location."""
        config_path = locate_config_file()
        if config_path:
            console.print(f"[ok]Config file: {config_path}[/]")
            console.print(f"[info]Exists: {config_path.exists()}[/]")
        else:
            console.print("[warn]No config file found (using defaults)[/]")
            console.print("[info]Create one with: autocomplete config init[/]")
            console.print(f"[info]Default location: {default_config_path()}[/]")

    @config_app.command(context_settings=COMMAND_CONTEXT)
    def reset(
        force: bool = typer.Option(
            False, "--force", "-f", help="Skip confirmation prompt."
        ),
    ) -> None:
        """Reset configuration to defaults."""
        config_path = locate_config_file()
        if not config_path:
            console.print("[warn]No config file to reset[/]")
            raise typer.Exit()

        if not force:
            if not ui.confirm_action(
                f"Reset {config_path} to defaults? API keys stored there will be lost.",
                default=False,
            ):
                console.print("[info]Reset cancelled[/]")
                raise typer.Exit(code=0)

        backup_path = ConfigStore(config_path).reset()
        if backup_path is not None:
            console.print(f"[info]Backed up old config to: {backup_path}[/]")
        console.print(f"[ok]Reset config to defaults: {config_path}[/]")

    @config_app.command(context_settings=COMMAND_CONTEXT)
    def get(
        key: str = typer.Argument(
            ...,
            help="Config key, e.g. model or openai_api_key",
            shell_complete=config_key_completion,
        ),
    ) -> None:
        """Print a specific configuration value."""
        try:
            value = ConfigStore().get(key)
        except ConfigurationError as exc:
            console.print(f"[error]{exc}[/]")
            raise typer.Exit(code=1)
        if value is None:
            console.print(f"[warn]Key not found: {key}[/]")
            raise typer.Exit(code=1)
        console.print(value, highlight=False, markup=False)

    @config_app.command(context_settings=COMMAND_CONTEXT)
    def set(
        key: str = typer.Argument(
            ...,
            help="Config key, e.g. temperature",
            shell_complete=config_key_completion,
        ),
        value: str = typer.Argument(..., help="New value"),
        value_type: str = typer.Option(
            "auto",
            "--type",
            "-t",
            help="Interpret VALUE using this type before validation.",
        ),
    ) -> None:
        """Update a specific configuration value."""
        kind = value_type.lower()
        if kind not in VALUE_KINDS:
            console.print(f"[error]Unsupported type: {value_type}[/]")
            raise typer.Exit(code=1)

        try:
            coerced = _coerce_value(value, kind)  # type: ignore[arg-type]
        except ValueError as exc:
            console.print(f"[error]{exc}[/]")
            raise typer.Exit(code=1)

        store = ConfigStore()
        try:
            store.set(key, coerced)
        except ConfigurationError as exc:
            console.print(f"[error]{exc}[/]")
            console.print("[info]No changes were saved.[/]")
            raise typer.Exit(code=1)
        console.print(f"[ok]Updated {normalize_key(key)} in {store.path}[/]")

    app.add_typer(config_app, name="config")

    return {
        "config": config_app,
        "config:init": init,
        "config:show": show,
        "config:path": path,
        "config:reset": reset,
        "config:get": get,
        "config:set": set,
    }


def _masked(data: dict) -> dict:
    return {
        key: ui.mask_secret(value) if key.endswith("_api_key") and value else value
        for key, value in data.items()
    }


def _coerce_value(raw: str, kind: ValueKind) -> Any:
    if kind == "auto":
        for candidate in ("bool", "int", "float"):
            try:
                return _coerce_value(raw, candidate)  # type: ignore[arg-type]
            except ValueError:
                continue
        return raw
    if kind == "str":
        return raw
    if kind == "bool":
        normalized = raw.strip().lower()
        if normalized in {"true", "yes", "on"}:
            return True
        if normalized in {"false", "no", "off"}:
            return False
        raise ValueError(f"Cannot parse boolean value from '{raw}'")
    if kind == "int":
        try:
            return int(raw, 10)
        except ValueError as exc:
            raise ValueError(f"Cannot parse integer value from '{raw}'") from exc
    if kind == "float":
        try:
            return float(raw)
        except ValueError as exc:
            raise ValueError(f"Cannot parse float value from '{raw}'") from exc
    if kind == "json":
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Cannot parse JSON value from '{raw}': {exc}") from exc
    raise ValueError(f"Unsupported type: {kind}")
