"""
CLI UX utilities built on rich.

Environment handling:
- Automatically detects TTY vs pipe/CI
- Respects NO_COLOR and FORCE_COLOR environment variables
- Falls back to plain text in non-interactive environments
"""

from __future__ import annotations

import os

from rich.console import Console
from rich.theme import Theme

# Nord color palette (https://www.nordtheme.com/)
DASHLINT_THEME = Theme(
    {
        "info": "#88C0D0",  # Nord frost - light blue
        "success": "#A3BE8C",  # Nord aurora - green
        "warning": "#EBCB8B",  # Nord aurora - yellow
        "error": "#BF616A bold",  # Nord aurora - red
        "highlight": "#B48EAD",  # Nord aurora - purple
        "muted": "#D8DEE9",  # Nord snow storm - light grey
    }
)

console = Console(
    theme=DASHLINT_THEME,
    force_terminal=os.environ.get("FORCE_COLOR") is not None,
    no_color=os.environ.get("NO_COLOR") is not None,
)


def plain(message: str) -> None:
    """Print text verbatim; lint messages may contain brackets."""
    console.print(message, markup=False, highlight=False, soft_wrap=True)


def header(title: str) -> None:
    console.print(f"[highlight]{title}[/highlight]")


def success(message: str) -> None:
    console.print(f"[success]✓[/success] {message}")


def error(message: str) -> None:
    console.print(f"[error]✗[/error] {message}")


def warning(message: str) -> None:
    console.print(f"[warning]⚠[/warning] {message}")
