"""
Console rendering of device and firmware reports.

Report producers hand over an identifier plus a list of description strings;
each description is a ``", "``-separated run of ``Key: value`` pairs and is
printed one pair per line.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

_console: Console | None = None


def get_console() -> Console:
    """Get or create console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def display_list(
    identifier: str,
    descriptions: list[str],
    console: Console | None = None,
) -> None:
    """
    Print a report block.

    Example:
        >>> display_list("aabbccddeeff", ["Type: eap101, Firmware: 2.1"])
        SN: aabbccddeeff
            Type: eap101
            Firmware: 2.1
    """
    console = console or get_console()
    console.print(f"[bold]SN:[/bold] [cyan]{escape(identifier)}[/cyan]")
    for description in descriptions:
        for entry in description.split(", "):
            if entry:
                console.print(f"    {escape(entry)}", highlight=False)


__all__ = ["display_list", "get_console"]
