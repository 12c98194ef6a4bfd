from __future__ import annotations

import os

from rich.console import Console
from rich.theme import Theme


# One Dark-inspired palette shared by every console surface
PALETTE = {
    "fg": "#d7dae0",
    "fg_muted": "#7f848e",
    "green": "#98c379",
    "bright_green": "#a9d98c",
    "yellow": "#e5c07b",
    "orange": "#d19a66",
    "blue": "#61afef",
    "cyan": "#56b6c2",
    "purple": "#c678dd",
    "red": "#e06c75",
}

_theme = Theme(
    {
        "text": PALETTE["fg"],
        "muted": PALETTE["fg_muted"],
        "accent": PALETTE["orange"],
        "ok": PALETTE["green"],
        "warn": PALETTE["yellow"],
        "error": f"bold {PALETTE['red']}",
        "info": PALETTE["blue"],
        "cursor": f"bold {PALETTE['bright_green']}",
        "current": PALETTE["green"],
        "section": f"bold {PALETTE['orange']}",
    }
)

console = Console(theme=_theme)
err_console = Console(theme=_theme, stderr=True)

DEBUG_ENV = "ACSH_DEBUG"
_VERBOSE = False


def set_verbose(enabled: bool) -> None:
    """Toggle debug tracing for the current process."""
    global _VERBOSE
    _VERBOSE = enabled


def is_verbose() -> bool:
    if _VERBOSE:
        return True
    return os.environ.get(DEBUG_ENV, "").strip().lower() in {"1", "true", "yes", "on"}


def debug(message: str) -> None:
    """Print a trace line to stderr when verbose mode is on."""
    if is_verbose():
        err_console.print(f"[muted]debug:[/] {message}", highlight=False)


def status_spinner(message: str):
    """Return a Rich status spinner context manager."""
    return console.status(f"[info]{message}[/]")
