"""Shared utilities for CLI commands."""

from __future__ import annotations

import sys
import traceback
from typing import TYPE_CHECKING

from hwt_kicad.exceptions import KicadError

if TYPE_CHECKING:
    from rich.console import Console

__all__ = ["format_error", "print_error", "get_error_console"]

# Module-level console for error output, created lazily
_error_console: Console | None = None


def get_error_console() -> Console:
    """Get or create the Rich console for error output (stderr)."""
    global _error_console
    if _error_console is None:
        from rich.console import Console

        _error_console = Console(stderr=True, force_terminal=None)
    return _error_console


def print_error(
    e: Exception,
    verbose: bool = False,
    use_rich: bool | None = None,
) -> None:
    """
    Print an exception, with Rich formatting on terminals.

    Args:
        e: The exception to print
        verbose: If True, include full stack trace
        use_rich: Override automatic TTY detection (None = auto-detect)
    """
    console = get_error_console()

    if use_rich is None:
        use_rich = console.is_terminal

    if verbose:
        # Always use plain text for stack traces
        print(traceback.format_exc(), file=sys.stderr)
        return

    if use_rich and isinstance(e, KicadError):
        from rich.markup import escape

        console.print(f"[bold red]Error:[/bold red] {escape(e.message)}", highlight=False)
        if e.line is not None:
            console.print(f"  [dim]line:[/dim] {e.line}", highlight=False)
        for key, value in e.context.items():
            console.print(f"  [dim]{key}:[/dim] {escape(str(value))}", highlight=False)
        for suggestion in e.suggestions:
            console.print(f"  [yellow]-[/yellow] {escape(suggestion)}", highlight=False)
    else:
        print(format_error(e, verbose=False), file=sys.stderr)


def format_error(e: Exception, verbose: bool = False) -> str:
    """
    Format an exception for display (plain text).

    Args:
        e: The exception to format
        verbose: If True, include full stack trace

    Returns:
        Formatted error message string
    """
    if verbose:
        return traceback.format_exc()

    if isinstance(e, KicadError):
        return f"Error: {e}"

    return f"Error: {type(e).__name__}: {e}"
