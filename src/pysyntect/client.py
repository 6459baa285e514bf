"""Wiring of the core client to the default httpx transport."""

from __future__ import annotations

import httpx

from pysyntect.core.client import SyntectClient
from pysyntect.infra.http_provider import HttpxQueryProvider


def new_client(
    server: str,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SyntectClient:
    """Return a client for the syntect_server at *server*.

    *transport* replaces httpx's network transport, e.g. with an
    ``httpx.MockTransport``.
    """
    return SyntectClient(server, HttpxQueryProvider(transport))
