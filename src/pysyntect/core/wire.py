"""Wire-format decoding for syntect_server responses.

The service answers every request with one flat JSON object that can
carry the highlight fields, the scopify fields, or an ``error``/``code``
pair.  This module turns raw response bytes into a :class:`WireResponse`,
maps error codes to typed exceptions, and projects successful records
into the public two-variant :data:`~pysyntect.core.models.Response`.

Guarantees
----------
* Pure transformations — no I/O, no logging side effects beyond DEBUG.
* Only :class:`~pysyntect.exceptions.SyntectError` subclasses escape.
* Field names are matched case-insensitively (the service is written in
  Go, whose JSON codec does the same).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from pysyntect.core.models import (
    HighlightResponse,
    Query,
    Response,
    ScopifiedRegion,
    ScopifyResponse,
)
from pysyntect.exceptions import (
    InternalError,
    InvalidThemeError,
    PanicError,
    ProtocolError,
    SyntectError,
    UnknownServiceError,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Raw record
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class WireResponse:
    """The decoded response body, before projection.

    Lives for a single request/response cycle.
    """

    data: str = ""
    plaintext: bool = False
    detected_language: str = ""
    scope_names: tuple[str, ...] = ()
    regions: tuple[ScopifiedRegion, ...] = ()
    error: str = ""
    code: str = ""


class _FieldTypeError(ValueError):
    """A field in the payload has the wrong JSON type."""


def _expect(value: Any, kind: type | tuple[type, ...], name: str) -> Any:
    # bool subclasses int.
    if isinstance(value, bool) and kind is int:
        raise _FieldTypeError(f"field {name!r}: expected int, got bool")
    if not isinstance(value, kind):
        raise _FieldTypeError(
            f"field {name!r}: expected {getattr(kind, '__name__', kind)}, "
            f"got {type(value).__name__}",
        )
    return value


def _fold(obj: Mapping[str, Any]) -> dict[str, Any]:
    """Lower-case the keys of a JSON object."""
    return {str(key).lower(): value for key, value in obj.items()}


def _field(obj: dict[str, Any], name: str, kind: type, default: Any) -> Any:
    value = obj.get(name)
    if value is None:
        return default
    return _expect(value, kind, name)


def _parse_region(raw: Any) -> ScopifiedRegion:
    obj = _fold(_expect(raw, dict, "scopified_regions[]"))
    scopes: Sequence[Any] = _field(obj, "scopes", list, [])
    return ScopifiedRegion(
        offset=_field(obj, "offset", int, 0),
        length=_field(obj, "length", int, 0),
        scopes=tuple(_expect(index, int, "scopes[]") for index in scopes),
    )


def parse_wire_response(obj: Mapping[str, Any]) -> WireResponse:
    """Convert a decoded JSON object into a :class:`WireResponse`.

    Raises
    ------
    ValueError
        If a field carries the wrong JSON type.
    """
    folded = _fold(obj)
    names: list[Any] = _field(folded, "scopified_scope_names", list, [])
    regions: list[Any] = _field(folded, "scopified_regions", list, [])
    return WireResponse(
        data=_field(folded, "data", str, ""),
        plaintext=_field(folded, "plaintext", bool, False),
        detected_language=_field(folded, "detected_language", str, ""),
        scope_names=tuple(_expect(name, str, "scopified_scope_names[]") for name in names),
        regions=tuple(_parse_region(region) for region in regions),
        error=_field(folded, "error", str, ""),
        code=_field(folded, "code", str, ""),
    )


def decode_wire_response(
    content: bytes,
    *,
    endpoint: str,
    server: str | None = None,
) -> WireResponse:
    """Decode a raw response body.

    Raises
    ------
    ProtocolError
        If *content* is not a JSON object matching the wire contract.
        The message names *endpoint*.
    """
    try:
        obj = json.loads(content)
        if not isinstance(obj, dict):
            raise _FieldTypeError(
                f"expected a JSON object, got {type(obj).__name__}",
            )
        return parse_wire_response(obj)
    except ValueError as exc:
        # json.JSONDecodeError and UnicodeDecodeError are ValueErrors too.
        raise ProtocolError(
            f"decoding JSON response from {endpoint}: {exc}",
            hint="The service returned an unexpected payload; check its health.",
            server=server,
        ) from exc


# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------

ErrorFactory = Callable[[WireResponse, str], SyntectError]

ERROR_CODES: Mapping[str, ErrorFactory] = MappingProxyType({
    "invalid_theme": lambda wire, server: InvalidThemeError(
        "invalid theme",
        hint="Choose a theme the service ships with.",
        server=server,
    ),
    # resource_not_found is what the service sends for a 404.  Treating
    # it as our own misconfiguration is a convention, not a documented
    # guarantee of the service.
    "resource_not_found": lambda wire, server: InternalError(
        "pysyntect internal error: resource_not_found",
        hint="Check that the server address points at the service root.",
        server=server,
    ),
    "panic": lambda wire, server: PanicError(
        "syntect panic while highlighting",
        hint="The grammar for this file is likely unsupported; skip the file.",
        server=server,
    ),
})
"""Known service error codes, matched exactly (case and whitespace included)."""


def error_for(wire: WireResponse, *, server: str) -> SyntectError:
    """Map an error record to its typed exception.

    Unrecognised codes become :class:`UnknownServiceError` so that new
    service error kinds still surface with their literal text.
    """
    factory = ERROR_CODES.get(wire.code)
    if factory is None:
        return UnknownServiceError(wire.error, wire.code, server=server)
    return factory(wire, server)


# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------

def index_scope_names(names: Sequence[str]) -> dict[int, str]:
    """Key each scope name by its position in the service's list.

    The service refers to scopes by list position; this is the one
    place that assumption is encoded.
    """
    return {index: name for index, name in enumerate(names)}


def to_response(wire: WireResponse, *, scopify: bool) -> Response:
    """Project a successful record into the variant *scopify* selects."""
    if scopify:
        return ScopifyResponse(
            detected_language=wire.detected_language,
            scope_names=index_scope_names(wire.scope_names),
            regions=wire.regions,
        )
    return HighlightResponse(
        data=wire.data,
        plaintext=wire.plaintext,
        detected_language=wire.detected_language,
    )


def check_regions(response: ScopifyResponse, query: Query, *, server: str) -> None:
    """Verify every region lies within the code and names known scopes.

    Raises
    ------
    ProtocolError
        On the first region that violates either condition.
    """
    code_length = query.code_length
    for position, region in enumerate(response.regions):
        if region.offset < 0 or region.length < 0 or region.end > code_length:
            raise ProtocolError(
                f"region {position} [{region.offset}:{region.end}] is outside "
                f"the submitted code ({code_length} bytes)",
                server=server,
            )
        for index in region.scopes:
            if index not in response.scope_names:
                raise ProtocolError(
                    f"region {position} references unknown scope index {index}",
                    server=server,
                )


def unpack(
    content: bytes,
    query: Query,
    *,
    server: str,
    endpoint: str,
) -> Response:
    """Decode *content* and return the success response or raise its error."""
    wire = decode_wire_response(content, endpoint=endpoint, server=server)
    if wire.error:
        logger.debug("service error code=%r error=%r", wire.code, wire.error)
        raise error_for(wire, server=server)

    response = to_response(wire, scopify=query.scopify)
    if isinstance(response, ScopifyResponse):
        check_regions(response, query, server=server)
    return response
