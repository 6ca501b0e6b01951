"""Rich terminal UI helpers for quicker-git."""

import os
import sys
from typing import Iterable

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()

# kind -> (symbol, style)
MESSAGE_STYLES = {
    "success": ("✓", "green"),
    "error": ("✗", "red"),
    "info": ("ℹ", "blue"),
    "warning": ("⚠", "yellow"),
}

_verbose = False


def set_verbose(enabled: bool) -> None:
    """Force debug output on or off (the --verbose flag)."""
    global _verbose
    _verbose = enabled


def is_debug() -> bool:
    """Check if debug output is enabled.

    Debug mode is on when --verbose was passed or the DEBUG environment
    variable holds anything other than an empty string, "0" or "false".
    """
    if _verbose:
        return True
    value = os.environ.get("DEBUG", "").strip().lower()
    return value not in ("", "0", "false")


def is_interactive() -> bool:
    """Check if we're running in an interactive terminal.

    Returns False when stdin is not a TTY or NO_INTERACTIVE is set.
    """
    if not sys.stdin.isatty():
        return False

    if os.environ.get("NO_INTERACTIVE"):
        return False

    return True


def format_message(kind: str, message: str) -> str:
    """Prefix a message with the symbol for its kind.

    Args:
        kind: One of success, error, info, warning (unknown kinds use info)
        message: Message text

    Returns:
        Plain decorated string, e.g. "✓ Saved"
    """
    symbol, _ = MESSAGE_STYLES.get(kind, MESSAGE_STYLES["info"])
    return f"{symbol} {message}"


def _emit(kind: str, message: str) -> None:
    symbol, style = MESSAGE_STYLES[kind]
    console.print(f"[{style}]{symbol}[/{style}] {escape(message)}")


def success(message: str) -> None:
    """Print a success message."""
    _emit("success", message)


def error(message: str) -> None:
    """Print an error message."""
    _emit("error", message)


def warning(message: str) -> None:
    """Print a warning message."""
    _emit("warning", message)


def info(message: str) -> None:
    """Print an info message."""
    _emit("info", message)


def debug(message: str) -> None:
    """Print a diagnostic message when debug mode is on."""
    if is_debug():
        console.print(f"[dim]· {escape(message)}[/dim]")


def title(message: str) -> None:
    """Print a section heading."""
    console.print()
    console.print(f"[bold cyan]{escape(message)}[/bold cyan]")
    console.print()


def separator() -> None:
    """Print a horizontal rule."""
    console.print("[dim]" + "─" * 50 + "[/dim]")


def key_value(key: str, value: str) -> None:
    """Print a "key: value" line."""
    console.print(f"[cyan]{escape(key)}:[/cyan] {escape(value)}")


def bullet_list(items: Iterable[str], bullet: str = "•") -> None:
    """Print items one per line with a bullet."""
    for item in items:
        console.print(f"[dim]{bullet}[/dim] {escape(item)}")


def create_table(
    title: str = "",
    show_header: bool = True,
    header_style: str = "bold cyan",
) -> Table:
    """Create a Rich table with quicker-git styling.

    Args:
        title: Optional table title
        show_header: Whether to show header row
        header_style: Style for header

    Returns:
        Configured Table instance
    """
    return Table(
        title=title or None,
        show_header=show_header,
        header_style=header_style,
        border_style="green",
    )
