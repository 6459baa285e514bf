"""CLI application entry point for pysyntect.

This module is the **sole error boundary** for the entire application.
It catches :class:`~pysyntect.exceptions.SyntectError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — requests, decoding, and file access
  are delegated to the core and infrastructure layers.
* Command output goes to stdout verbatim; diagnostics go to stderr
  through Rich.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from rich.markup import escape

from pysyntect.cli import exit_codes
from pysyntect.cli.console import console, write_output
from pysyntect.cli.render import render_response
from pysyntect.exceptions import SyntectError
from pysyntect.version import __version__

_USAGE_EXAMPLES = """\
Highlight file to HTML:
  pysyntect <server> <theme> <file>
  pysyntect http://localhost:9238 'InspiredGitHub' main.go

Scopify file:
  pysyntect -scopify <server> <file>
  pysyntect -scopify http://localhost:9238 main.go
"""


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser.

    Positional arguments are collected as a list because their meaning
    depends on ``-scopify``; :func:`_parse` checks the shape.  Option
    parsing stops at the first positional, so a theme such as ``-dark``
    is taken literally.
    """
    parser = argparse.ArgumentParser(
        prog="pysyntect",
        usage="%(prog)s [-scopify] <server> <theme?> <file>",
        description="Highlight or scopify a file with a syntect_server.",
        epilog=_USAGE_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-scopify",
        "--scopify",
        action="store_true",
        help="print scopified file regions instead of requesting highlighted HTML",
    )
    parser.add_argument(
        "arguments",
        nargs=argparse.REMAINDER,
        metavar="arg",
        help="<server> <theme> <file>, or <server> <file> with -scopify",
    )
    return parser


def _parse(parser: argparse.ArgumentParser, argv: list[str] | None) -> argparse.Namespace:
    """Parse *argv* and split the positionals into server, theme and file.

    Shape errors exit through ``parser.error`` with status 2.
    """
    args = parser.parse_args(argv)
    positionals: list[str] = args.arguments

    if args.scopify:
        if len(positionals) != 2:
            parser.error("-scopify expects <server> <file>")
        args.server, args.file = positionals
        args.theme = ""
    else:
        if len(positionals) != 3:
            parser.error("expected <server> <theme> <file>")
        args.server, args.theme, args.file = positionals
        if not args.theme:
            parser.error("theme argument is required (e.x. 'InspiredGitHub')")

    if not args.server.startswith(("http://", "https://")):
        parser.error("expected server to have http:// or https:// prefix")

    return args


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_query(server: str, file: str, *, theme: str, scopify: bool) -> int:
    """Read *file*, send it to *server*, and print the rendered response."""
    from pysyntect.client import new_client
    from pysyntect.core.models import Query
    from pysyntect.infra.source_files import read_source

    source = read_source(file)
    query = Query(
        filepath=source.name,
        code=source.code,
        theme=theme,
        scopify=scopify,
    )

    client = new_client(server)
    response = asyncio.run(client.highlight(query))

    # Render fully before writing so a failure leaves stdout empty.
    lines = render_response(query.code, response)
    for line in lines:
        write_output(line)
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the pysyntect CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = _parse(parser, argv)
    return _handle_query(
        args.server,
        args.file,
        theme=args.theme,
        scopify=args.scopify,
    )


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except SyntectError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
