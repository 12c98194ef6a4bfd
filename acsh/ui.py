"""UI utilities for consistently themed Rich console output."""

from __future__ import annotations

from typing import Tuple

import typer
from rich import box
from rich.prompt import Confirm
from rich.table import Table

from acsh.logging import PALETTE, console

DEFAULT_ROW_STYLES: Tuple[str, str] | None = None


def themed_table(
    *,
    title: str | None = None,
    show_header: bool = True,
    header_style: str | None = None,
    row_styles: Tuple[str, str] | None = DEFAULT_ROW_STYLES,
    box_style=box.SIMPLE_HEAD,
    pad_edge: bool = False,
    expand: bool = False,
) -> Table:
    """Return a Rich Table with shared palette + layout defaults."""
    return Table(
        title=title,
        show_header=show_header,
        header_style=header_style or f"bold {PALETTE['blue']}",
        style=PALETTE["fg"],
        row_styles=row_styles,
        box=box_style,
        pad_edge=pad_edge,
        expand=expand,
    )


def themed_grid(*, padding: Tuple[int, int] = (0, 3), expand: bool = False) -> Table:
    """Return a Rich grid table honoring the shared palette."""
    table = Table.grid(padding=padding, expand=expand)
    table.style = PALETTE["fg"]
    return table


def mask_secret(value: str) -> str:
    """Show only the first and last four characters of a secret."""
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}...{value[-4:]}"


def confirm_action(message: str, *, default: bool = False) -> bool:
    """Show a Rich-styled confirmation prompt and return the user's choice."""
    prompt = message.strip() or "Proceed?"
    try:
        return Confirm.ask(
            f"[accent]?[/] {prompt}",
            default=default,
            show_default=True,
            console=console,
        )
    except KeyboardInterrupt:  # pragma: no cover - interactive guard
        console.print("[warn]Prompt cancelled by user.[/]")
        raise typer.Abort() from None
    except EOFError:  # pragma: no cover - interactive guard
        console.print("[warn]No input detected; cancelling.[/]")
        raise typer.Abort() from None
