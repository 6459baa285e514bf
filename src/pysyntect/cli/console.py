"""Rich consoles shared by the CLI layer.

Diagnostics go to stderr through Rich; command output goes to stdout
untouched, since highlighted HTML must not be reinterpreted as Rich
markup.
"""

from __future__ import annotations

import sys

from rich.console import Console


def get_rich_console() -> Console:
    """Create a Rich console instance targeting the current stderr."""
    return Console(stderr=True, highlight=False)


class _ConsoleProxy:
    """``print``-compatible proxy that resolves stderr at call time."""

    def print(self, *objects: object) -> None:
        get_rich_console().print(*objects)


console = _ConsoleProxy()


def write_output(text: str) -> None:
    """Write *text* and a newline to stdout verbatim."""
    sys.stdout.write(text)
    sys.stdout.write("\n")
