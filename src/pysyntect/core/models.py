"""Domain models for pysyntect.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access and trivial derived values.  They carry
zero I/O and zero dependencies on external packages.

The success response is a tagged union: :class:`HighlightResponse` for
``scopify=False`` queries and :class:`ScopifyResponse` for
``scopify=True`` ones.  A response carrying both rendered HTML and
scopified regions cannot be constructed.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union

from pysyntect.exceptions import InvalidQueryError


# ---------------------------------------------------------------------------
# Query
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Query:
    """A single highlighting request."""

    filepath: str
    """File name used by the service to pick a grammar.

    Pass just the base name; the service infers the language from the
    name and extension only.
    """

    code: str
    """The literal source text to process."""

    theme: str = ""
    """Color theme for rendering.  Required unless :attr:`scopify`."""

    scopify: bool = False
    """Request scopified regions instead of highlighted HTML."""

    extension: str = ""
    """Deprecated alias of :attr:`filepath` kept on the wire."""

    def __post_init__(self) -> None:
        if not self.scopify and not self.theme:
            raise InvalidQueryError(
                "theme is required when not scopifying",
                hint="Pass a theme name such as 'InspiredGitHub'.",
            )
        try:
            self.code.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise InvalidQueryError(
                f"code is not valid UTF-8 text: {exc.reason} at position {exc.start}",
                hint="Decode the source with errors=\"replace\" before querying.",
            ) from exc

    @property
    def code_length(self) -> int:
        """Length of :attr:`code` in UTF-8 bytes."""
        return len(self.code.encode("utf-8"))

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON request body for this query."""
        return {
            "extension": self.extension,
            "filepath": self.filepath,
            "theme": self.theme,
            "scopify": self.scopify,
            "code": self.code,
        }


# ---------------------------------------------------------------------------
# Scopified region
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ScopifiedRegion:
    """A region of the input code annotated with grammar scopes."""

    offset: int
    """Byte offset relative to the input code."""

    length: int
    """Length of the region in bytes."""

    scopes: tuple[int, ...] = ()
    """Indices into :attr:`ScopifyResponse.scope_names`, as ordered by the service."""

    @property
    def end(self) -> int:
        return self.offset + self.length

    def slice(self, code: str) -> str:
        """Return the part of *code* covered by this region."""
        raw = code.encode("utf-8")[self.offset:self.end]
        return raw.decode("utf-8", errors="replace")


# ---------------------------------------------------------------------------
# Success responses
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class HighlightResponse:
    """Highlighted HTML for a ``scopify=False`` query."""

    data: str
    """The highlighted HTML version of :attr:`Query.code`."""

    plaintext: bool
    """``True`` when no grammar matched and the code was rendered as plain text."""

    detected_language: str
    """Name of the language the service highlighted the code as."""


@dataclass(frozen=True, slots=True)
class ScopifyResponse:
    """Scopified regions for a ``scopify=True`` query."""

    detected_language: str
    scope_names: Mapping[int, str] = field(
        default_factory=lambda: MappingProxyType({}),
    )
    regions: tuple[ScopifiedRegion, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.scope_names, MappingProxyType):
            object.__setattr__(
                self, "scope_names", MappingProxyType(dict(self.scope_names)),
            )

    def scope_names_for(self, region: ScopifiedRegion) -> list[str]:
        """Resolve *region*'s scope indices to names, preserving order."""
        return [self.scope_names[index] for index in region.scopes]


Response = Union[HighlightResponse, ScopifyResponse]
"""Either success shape, selected by :attr:`Query.scopify`."""
