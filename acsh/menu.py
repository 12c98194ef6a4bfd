"""Keyboard-driven selection menu rendered on the alternate screen."""

from __future__ import annotations

import os
import select
import signal
import sys
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Union

from rich.console import Console, Group
from rich.text import Text

from acsh.errors import EmptyMenuError, MenuBusyError
from acsh.logging import console as default_console
from acsh.logging import debug

try:
    import termios
    import tty
except ImportError:  # pragma: no cover - non-POSIX platforms
    termios = None
    tty = None

MENU_ACTIVE_ENV = "ACSH_MENU_ACTIVE"
DEFAULT_TITLE = "Select a Language Model"
HELP_TEXT = "Up/Down arrows to move, Enter to select, 'q' to quit"

UP = "up"
DOWN = "down"
CONFIRM = "confirm"
QUIT = "quit"

_KEYMAP = {
    "\x1b[A": UP,
    "\x1bOA": UP,
    "k": UP,
    "\x1b[B": DOWN,
    "\x1bOB": DOWN,
    "j": DOWN,
    "\r": CONFIRM,
    "\n": CONFIRM,
    "q": QUIT,
    "Q": QUIT,
    "\x1b": QUIT,
    "": QUIT,
}

# Seconds to wait for the rest of an escape sequence before treating ESC as a key
_ESCAPE_TIMEOUT = 0.05

# Signals that would otherwise kill the process without unwinding the session
_EXIT_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)


@dataclass(frozen=True)
class Confirmed:
    """The user picked the entry at 1-based ``position``."""

    position: int

    def __post_init__(self) -> None:
        if isinstance(self.position, bool) or not isinstance(self.position, int):
            raise TypeError(f"position must be an int, got {self.position!r}")
        if self.position < 1:
            raise ValueError(f"position is 1-based, got {self.position}")


@dataclass(frozen=True)
class Cancelled:
    """The user left the menu without picking anything."""

    position: None = None


SelectionOutcome = Union[Confirmed, Cancelled]
CANCELLED = Cancelled()


def decode_key(sequence: str) -> str:
    """Map a raw key sequence to a menu action; unknown keys pass through."""
    return _KEYMAP.get(sequence, sequence)


class MenuState:
    """Cursor over ``labels`` with a 1-based position that wraps at both ends."""

    def __init__(self, labels: Sequence[str], position: int = 1):
        if not labels:
            raise EmptyMenuError("menu has no entries")
        if not 1 <= position <= len(labels):
            raise ValueError(f"position must be within 1..{len(labels)}")
        self.labels = list(labels)
        self.position = position

    def move_up(self) -> None:
        self.position = len(self.labels) if self.position == 1 else self.position - 1

    def move_down(self) -> None:
        self.position = 1 if self.position == len(self.labels) else self.position + 1

    def handle(self, action: str) -> Optional[SelectionOutcome]:
        """Apply ``action``; return an outcome once the menu is finished."""
        if action == UP:
            self.move_up()
        elif action == DOWN:
            self.move_down()
        elif action == CONFIRM:
            return Confirmed(self.position)
        elif action == QUIT:
            return CANCELLED
        return None


def _default_group(label: str) -> str:
    return label.split(":", 1)[0]


def render_menu(
    state: MenuState,
    *,
    title: str = DEFAULT_TITLE,
    group_of: Callable[[str], str] = _default_group,
    format_label: Callable[[str], str] = str,
    active: Optional[str] = None,
) -> List[Text]:
    """Build the menu lines for ``state``.

    Consecutive entries sharing a group stay together; a blank line separates
    groups. ``active`` marks the configured entry wherever the cursor is.
    """
    lines = [Text(""), Text(title, style="section"), Text(HELP_TEXT, style="muted")]
    previous_group: Optional[str] = None
    for position, label in enumerate(state.labels, start=1):
        group = group_of(label)
        if previous_group is not None and group != previous_group:
            lines.append(Text(""))
        previous_group = group

        text = format_label(label)
        marker = " [current]" if active is not None and label == active else ""
        if position == state.position:
            lines.append(Text(f"> {text}{marker}", style="cursor"))
        elif marker:
            lines.append(Text(f"  {text}{marker}", style="current"))
        else:
            lines.append(Text(f"  {text}"))
    return lines


class KeyReader:
    """Read single key presses from a file descriptor."""

    def __init__(self, fd: int):
        self.fd = fd

    def _read_char(self) -> str:
        data = os.read(self.fd, 1)
        return data.decode("utf-8", errors="replace")

    def _pending(self) -> bool:
        ready, _, _ = select.select([self.fd], [], [], _ESCAPE_TIMEOUT)
        return bool(ready)

    def __call__(self) -> str:
        char = self._read_char()
        if char != "\x1b" or not self._pending():
            return decode_key(char)
        sequence = char + self._read_char()
        if sequence[-1] in "[O" and self._pending():
            sequence += self._read_char()
        return decode_key(sequence)


def _exit_on_signal(signum, frame) -> None:
    raise SystemExit(128 + signum)


def _stdin_fd() -> Optional[int]:
    try:
        return sys.stdin.fileno()
    except (AttributeError, ValueError, OSError):
        return None


class TerminalSession:
    """Own the terminal for the lifetime of a menu.

    Entering switches to the alternate screen, hides the cursor and puts the
    input in cbreak mode. Leaving restores all three on every exit path. Only
    one session may be active per process tree; a nested attempt raises
    :class:`MenuBusyError` before touching the terminal.
    """

    _in_use = False

    def __init__(self, console: Console | None = None, input_fd: Optional[int] = None):
        self.console = console or default_console
        self.input_fd = input_fd
        self.active = False
        self._saved_attrs = None
        self._saved_handlers = {}

    def __enter__(self) -> "TerminalSession":
        if TerminalSession._in_use or os.environ.get(MENU_ACTIVE_ENV):
            raise MenuBusyError("another model menu is already using this terminal")
        TerminalSession._in_use = True
        os.environ[MENU_ACTIVE_ENV] = str(os.getpid())
        self.active = True
        try:
            self._install_signal_handlers()
            if self.input_fd is None:
                self.input_fd = _stdin_fd()
            if termios is not None and self.input_fd is not None and os.isatty(self.input_fd):
                self._saved_attrs = termios.tcgetattr(self.input_fd)
            self.console.set_alt_screen(True)
            self.console.show_cursor(False)
            if self._saved_attrs is not None:
                tty.setcbreak(self.input_fd)
        except BaseException:
            self._restore()
            raise
        debug("terminal session started")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._restore()
        debug("terminal session restored")

    def _install_signal_handlers(self) -> None:
        # signal.signal only works from the main thread
        if threading.current_thread() is not threading.main_thread():
            return
        for signum in _EXIT_SIGNALS:
            self._saved_handlers[signum] = signal.signal(signum, _exit_on_signal)

    def _restore(self) -> None:
        try:
            if self._saved_attrs is not None:
                termios.tcsetattr(self.input_fd, termios.TCSADRAIN, self._saved_attrs)
        finally:
            for signum, handler in self._saved_handlers.items():
                signal.signal(signum, signal.SIG_DFL if handler is None else handler)
            self._saved_handlers = {}
            self._saved_attrs = None
            self.console.show_cursor(True)
            self.console.set_alt_screen(False)
            self.active = False
            TerminalSession._in_use = False
            os.environ.pop(MENU_ACTIVE_ENV, None)

    def read_key(self) -> str:
        if self.input_fd is None:
            raise RuntimeError("no input available for the menu")
        return KeyReader(self.input_fd)()

    def draw(self, lines: Sequence[Text]) -> None:
        self.console.clear()
        self.console.print(Group(*lines), highlight=False)


class MenuSelector:
    """Run an interactive menu and report what the user chose."""

    def __init__(
        self,
        *,
        title: str = DEFAULT_TITLE,
        group_of: Callable[[str], str] = _default_group,
        format_label: Callable[[str], str] = str,
        active: Optional[str] = None,
        session_factory: Callable[[], TerminalSession] = TerminalSession,
    ):
        self.title = title
        self.group_of = group_of
        self.format_label = format_label
        self.active = active
        self.session_factory = session_factory

    def run(self, labels: Sequence[str]) -> SelectionOutcome:
        """Show ``labels`` and block until the user confirms or quits.

        Raises:
            EmptyMenuError: If ``labels`` is empty. The terminal is untouched.
            MenuBusyError: If another menu already owns the terminal.
        """
        state = MenuState(labels)
        with self.session_factory() as session:
            while True:
                session.draw(
                    render_menu(
                        state,
                        title=self.title,
                        group_of=self.group_of,
                        format_label=self.format_label,
                        active=self.active,
                    )
                )
                outcome = state.handle(session.read_key())
                if outcome is not None:
                    debug(f"menu finished with {outcome}")
                    return outcome
