"""Rich console output utilities for lessmore-cli.

This module provides formatted console output with Rich,
supporting colored success/error/warning messages and
respecting the NO_COLOR environment variable.
"""

from __future__ import annotations

import os
from typing import Any

from rich.console import Console

# Rich respects NO_COLOR itself; --no-color is handled by set_no_color()
_force_no_color = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False) -> Console:
    """Create a Rich Console instance with appropriate color settings.

    Args:
        no_color: If True, disable colored output. Also respects NO_COLOR env var.

    Returns:
        Configured Console instance.
    """
    force_terminal = None
    if no_color or _force_no_color:
        force_terminal = False
    return Console(force_terminal=force_terminal, no_color=no_color or _force_no_color)


# Default console instance
console = create_console()


def success(message: str, **kwargs: Any) -> None:
    """Print a success message with green checkmark.

    Example:
        >>> success("Wrote 3 stylesheets")
        ✓ Wrote 3 stylesheets
    """
    console.print(f"[green]✓[/green] {message}", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print an error message with red X.

    Example:
        >>> error("Stylesheet 'screen' not found in any source path")
        ✗ Stylesheet 'screen' not found in any source path
    """
    console.print(f"[red]✗[/red] {message}", **kwargs)


def warning(message: str, **kwargs: Any) -> None:
    """Print a warning message with yellow triangle."""
    console.print(f"[yellow]⚠[/yellow] {message}", **kwargs)


def info(message: str, **kwargs: Any) -> None:
    """Print an informational message."""
    console.print(message, **kwargs)


def notice(message: str) -> None:
    """Print a batch notice verbatim (no markup, no highlighting).

    Used as the notifier for parse/clean so file paths print unaltered.
    """
    console.print(message, markup=False, highlight=False, soft_wrap=True)


def set_no_color(no_color: bool) -> None:
    """Update the global console to enable/disable colors.

    Args:
        no_color: If True, disable colored output.
    """
    global console
    console = create_console(no_color=no_color)
