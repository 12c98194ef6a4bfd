from __future__ import annotations

import sys

import typer

from acsh import __description__
from acsh.configuration import ConfigurationError
from acsh.errors import AcshError
from acsh.logging import console, set_verbose

from .commands import register as register_commands
from .common import COMMAND_CONTEXT, print_version

app = typer.Typer(
    name="autocomplete",
    help=__description__,
    context_settings=COMMAND_CONTEXT,
    rich_markup_mode="rich",
    no_args_is_help=False,
)

register_commands(app)


@app.callback(invoke_without_command=True)
def _root_command(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "-v",
        "--version",
        help="Show CLI version and exit.",
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "-V",
        "--verbose",
        help="Print debug traces to stderr.",
    ),
) -> None:
    # Store verbose flag in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    set_verbose(verbose)

    if version:
        print_version()
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


def main() -> None:
    try:
        app()
    except (AcshError, ConfigurationError) as exc:
        console.print(f"[error]{exc}[/]")
        sys.exit(1)


__all__ = ["app", "main"]
