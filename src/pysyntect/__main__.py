"""Allow ``python -m pysyntect`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m pysyntect`` behaves identically to the ``pysyntect``
console script.
"""

from __future__ import annotations

from pysyntect.cli.app import cli

if __name__ == "__main__":
    cli()
