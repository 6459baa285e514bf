"""Filesystem access for the code to highlight.

Reads the whole file and reduces its path to the base name the service
uses for grammar detection.  ``OSError`` is mapped to
:class:`~pysyntect.exceptions.SourceReadError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pysyntect.exceptions import SourceReadError


@dataclass(frozen=True, slots=True)
class SourceFile:
    """Contents of a source file and the name to send with it."""

    name: str
    """Base name of the file; directories are never sent."""

    code: str


def read_source(path: str | Path) -> SourceFile:
    """Read *path* as UTF-8, replacing undecodable bytes.

    Raises
    ------
    SourceReadError
        If the file does not exist or cannot be read.
    """
    source_path = Path(path)
    try:
        code = source_path.read_bytes().decode("utf-8", errors="replace")
    except OSError as exc:
        raise SourceReadError(
            f"cannot read {source_path}: {exc.strerror or exc}",
        ) from exc
    return SourceFile(name=source_path.name, code=code)
