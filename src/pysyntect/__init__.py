"""pysyntect — client and CLI for the syntect_server highlighting service.

Typical use::

    client = new_client("http://localhost:9238")
    response = await client.highlight(
        Query(filepath="main.go", code=source, theme="InspiredGitHub"),
    )
"""

from pysyntect.client import new_client
from pysyntect.core import (
    HighlightResponse,
    Query,
    Response,
    ScopifiedRegion,
    ScopifyResponse,
    SyntectClient,
    TraceContext,
)
from pysyntect.version import __version__

__all__: list[str] = [
    "HighlightResponse",
    "Query",
    "Response",
    "ScopifiedRegion",
    "ScopifyResponse",
    "SyntectClient",
    "TraceContext",
    "__version__",
    "new_client",
]
