"""Shared console and message formatting."""

from __future__ import annotations

from datetime import datetime

from rich.console import Console
from rich.markup import escape

MESSAGE_PREFIX = "[gqlmock]"

# Diagnostics go to stderr so mocked traffic never mixes with program output.
console = Console(stderr=True, highlight=False, soft_wrap=True)


def format_message(message: str, *args: object) -> str:
    """Prefix a message and interpolate printf-style arguments."""
    text = message % args if args else message
    return f"{MESSAGE_PREFIX} {text}"


def warn(message: str, *args: object) -> None:
    """Print a prefixed warning."""
    console.print(f"[yellow]{escape(format_message(message, *args))}[/yellow]")


def error(message: str) -> None:
    """Print an already formatted error message."""
    console.print(f"[red]{escape(message)}[/red]")


def timestamp() -> str:
    return datetime.now().strftime("%H:%M:%S")
