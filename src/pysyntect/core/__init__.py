"""Core / service layer — models, wire decoding, and the client.

Rules
-----
* No ``print()`` calls.
* No direct network I/O; the transport arrives through
  :class:`~pysyntect.core.protocols.QueryProvider`.
* No imports from ``cli`` or ``infra``.
"""

from pysyntect.core.client import SyntectClient
from pysyntect.core.models import (
    HighlightResponse,
    Query,
    Response,
    ScopifiedRegion,
    ScopifyResponse,
)
from pysyntect.core.protocols import QueryProvider, RawReply
from pysyntect.core.tracing import NO_TRACING, Span, TraceContext, Tracer

__all__: list[str] = [
    "HighlightResponse",
    "NO_TRACING",
    "Query",
    "QueryProvider",
    "RawReply",
    "Response",
    "ScopifiedRegion",
    "ScopifyResponse",
    "Span",
    "SyntectClient",
    "TraceContext",
    "Tracer",
]
