"""Pick the language model used for completions."""

from __future__ import annotations

from typing import Optional

import typer

from acsh import ui
from acsh.configuration import AcshConfig, ConfigStore, ConfigurationError, get_config
from acsh.configuration.schema import api_key_field
from acsh.errors import (
    EmptyMenuError,
    InvalidKeyError,
    MenuBusyError,
    ModelNotFoundError,
    SelectionCancelled,
)
from acsh.logging import console
from acsh.menu import MenuSelector
from acsh.models import ModelRecord, ModelRegistry, keys
from acsh.selection import apply_selection, resolve_direct, resolve_from_menu

from ..common import COMMAND_CONTEXT, exit_with_help, load_registry
from ..completions import model_completion, provider_completion
from ..type_defs import CommandMap


def register(app: typer.Typer) -> CommandMap:
    @app.command(context_settings=COMMAND_CONTEXT)
    def model(
        ctx: typer.Context,
        provider: Optional[str] = typer.Argument(
            None,
            help="Provider name, e.g. openai or anthropic.",
            shell_complete=provider_completion,
        ),
        name: Optional[str] = typer.Argument(
            None,
            metavar="MODEL",
            help="Model name as listed by 'autocomplete models list'.",
            shell_complete=model_completion,
        ),
    ) -> None:
        """Choose the active model from a menu, or directly with PROVIDER MODEL."""
        if (provider is None) != (name is None):
            exit_with_help(
                ctx,
                message="Give both PROVIDER and MODEL, or neither to open the menu.",
                code=2,
            )

        registry = load_registry()
        if provider is None:
            record = _choose_from_menu(registry)
            if record is None:
                console.print("Selection canceled.")
                return
        else:
            record = _choose_directly(registry, provider, name)

        store = ConfigStore()
        try:
            apply_selection(store, record)
            config = get_config()
            if config.requires_api_key and not config.active_api_key:
                config = _prompt_for_api_key(store, config)
        except ConfigurationError as exc:
            console.print(f"[error]{exc}[/]")
            raise typer.Exit(code=1)

        _show_summary(config)

    return {"model": model}


def _choose_from_menu(registry: ModelRegistry) -> Optional[ModelRecord]:
    config = get_config()
    try:
        active = keys.encode(config.provider, config.model)
    except InvalidKeyError:
        active = None

    selector = MenuSelector(
        group_of=keys.provider_of,
        format_label=keys.display_label,
        active=active,
    )
    try:
        return resolve_from_menu(registry, selector)
    except SelectionCancelled:
        return None
    except EmptyMenuError:
        console.print("[error]No models are available to choose from.[/]")
        console.print("[info]Run 'autocomplete models refresh' to download the model list.[/]")
        raise typer.Exit(code=1)
    except MenuBusyError as exc:
        console.print(f"[error]{exc}[/]")
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        console.print("[warn]Selection interrupted.[/]")
        raise typer.Abort() from None


def _choose_directly(registry: ModelRegistry, provider: str, name: str) -> ModelRecord:
    try:
        return resolve_direct(registry, provider, name)
    except ModelNotFoundError as exc:
        console.print(f"[error]Invalid provider or model name: {provider} {name}[/]")
        if exc.candidates:
            console.print(f"[info]Available models for {provider}:[/]")
            for key in exc.candidates:
                console.print(f"  {keys.display_label(key)}", highlight=False)
        else:
            providers = ", ".join(registry.providers()) or "none"
            console.print(f"[info]Known providers: {providers}[/]")
        raise typer.Exit(code=1)


def _prompt_for_api_key(store: ConfigStore, config: AcshConfig) -> AcshConfig:
    field = api_key_field(config.provider)
    env_name = field.upper()
    console.print(f"[warn]No API key configured for {config.provider}.[/]")
    console.print(
        f"[info]Set {env_name} in your environment, or enter a key to store it in {store.path}.[/]"
    )
    value = typer.prompt(
        f"Enter your {config.provider} API key (leave blank to skip)",
        default="",
        show_default=False,
        hide_input=True,
    ).strip()
    if not value:
        return config
    store.set(field, value)
    return get_config()


def _show_summary(config: AcshConfig) -> None:
    if not config.requires_api_key:
        api_key = "[muted]not used[/]"
    elif config.active_api_key:
        api_key = ui.mask_secret(config.active_api_key)
    else:
        api_key = "[error]UNSET[/]"

    grid = ui.themed_grid(padding=(0, 2))
    grid.add_column(style="muted")
    grid.add_column()
    grid.add_row("Provider", config.provider)
    grid.add_row("Model", config.model)
    grid.add_row("Temperature", f"{config.temperature:.3f}")
    grid.add_row(
        "Cost/token",
        f"prompt: ${config.api_prompt_cost:.8f}, completion: ${config.api_completion_cost:.8f}",
    )
    grid.add_row("Endpoint", config.endpoint)
    grid.add_row("API key", api_key)

    console.print("[section]Model configuration updated[/]")
    console.print(grid)
