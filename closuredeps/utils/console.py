"""
Rich console helpers for closuredeps.

Two lazily created consoles are kept: one on stdout for command results
(tables, summaries) and one on stderr for errors and warnings, so that
``--format json`` and ``--format deps`` output piped to a file is never
mixed with diagnostics.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import IO, Any, Dict, List, Optional, Sequence, Tuple, Union

from rich.table import Table
from rich.markup import escape
from rich.theme import Theme
from rich.console import Console

CLOSUREDEPS_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "dim": "dim",
        "path": "bold cyan",
        "provide": "green",
        "require": "yellow",
    }
)

# A column is a header, or ``(header, style)``
Column = Union[str, Tuple[str, Optional[str]]]

_consoles: Dict[str, Console] = {}
_console_lock = threading.Lock()


def _should_use_color(stream: Optional[IO[str]] = None) -> bool:
    """Return True if ``stream`` (default stdout) should get ANSI colors."""
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return (stream or sys.stdout).isatty()
    except (AttributeError, OSError):
        return False


def _get_console(*, stderr: bool = False) -> Console:
    key = "stderr" if stderr else "stdout"
    console = _consoles.get(key)
    if console is not None:
        return console

    with _console_lock:
        if key not in _consoles:
            use_color = _should_use_color(sys.stderr if stderr else sys.stdout)
            _consoles[key] = Console(
                theme=CLOSUREDEPS_THEME,
                stderr=stderr,
                no_color=not use_color,
                highlight=False,
            )
        return _consoles[key]


def get_raw_console(*, stderr: bool = False) -> Console:
    """Return the shared stdout (or stderr) Rich console."""
    return _get_console(stderr=stderr)


def reconfigure_console() -> None:
    """Drop the cached consoles so they pick up a changed ``NO_COLOR``."""
    with _console_lock:
        _consoles.clear()


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    """Print a success line; ``message`` is plain text, not Rich markup."""
    _get_console().print(escape(f"{prefix} {message}"), style="success")


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _get_console(stderr=True).print(escape(f"{prefix} {message}"), style="error")


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _get_console(stderr=True).print(escape(f"{prefix} {message}"), style="warning")


def print_table(
    rows: Sequence[Dict[str, Any]],
    columns: Sequence[Column],
    *,
    title: Optional[str] = None,
    show_row_lines: bool = False,
) -> None:
    """Print ``rows`` as a table with the given columns.

    Each row maps a column header to its cell; missing cells are empty.
    Cells may contain Rich markup. Nothing is printed for an empty
    ``rows``.

    Example::

        print_table(
            [{"File": "app/main.js", "Provides": "app.main"}],
            ["File", ("Provides", "provide")],
        )
    """
    if not rows:
        return

    table = Table(
        title=title,
        header_style="bold",
        show_lines=show_row_lines,
    )

    headers: List[str] = []
    for column in columns:
        header, style = (column, None) if isinstance(column, str) else column
        headers.append(header)
        table.add_column(header, style=style, overflow="fold")

    for row in rows:
        table.add_row(*(str(row.get(h, "")) for h in headers))

    _get_console().print(table)
