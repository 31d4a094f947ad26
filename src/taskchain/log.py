"""Logging utilities with colored output via Rich.

The engine traces its realignment walk through :func:`debug`.  Hosts that
want the output elsewhere swap the consoles with :func:`set_console`.
"""

from __future__ import annotations

from rich.console import Console

console = Console(highlight=False)
_err_console = Console(highlight=False, stderr=True)

_verbose = False


def set_verbose(enabled: bool) -> None:
    global _verbose
    _verbose = enabled


def set_console(out: Console, err: Console | None = None) -> None:
    """Route all log output to *out* (and errors to *err*, default *out*)."""
    global console, _err_console
    console = out
    _err_console = err if err is not None else out


def info(msg: str) -> None:
    console.print(f"[blue]\\[INFO][/blue] {msg}")


def success(msg: str) -> None:
    console.print(f"[green]\\[OK][/green] {msg}")


def warn(msg: str) -> None:
    console.print(f"[yellow]\\[WARN][/yellow] {msg}")


def error(msg: str) -> None:
    _err_console.print(f"[red]\\[ERROR][/red] {msg}")


def debug(msg: str) -> None:
    if _verbose:
        console.print(f"[dim]\\[DEBUG] {msg}[/dim]")
