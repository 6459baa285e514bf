"""httpx backed implementation of :class:`~pysyntect.core.protocols.QueryProvider`.

This module is the **only** place in the codebase that imports
``httpx``.  All httpx exceptions are caught here and re-raised as
:class:`~pysyntect.exceptions.TransportError` — nothing raw escapes
the infrastructure boundary.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import httpx

from pysyntect.core.protocols import RawReply
from pysyntect.exceptions import TransportError


class HttpxQueryProvider:
    """Concrete :class:`QueryProvider` backed by ``httpx.AsyncClient``.

    Usage::

        provider = HttpxQueryProvider()
        reply = await provider.post_json(url, payload, headers=headers)

    A fresh ``AsyncClient`` is opened per call, so the provider carries
    no connection state and is safe to share between tasks.  The client
    has no timeout of its own; deadlines come from the caller.

    Parameters
    ----------
    transport:
        Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport: httpx.AsyncBaseTransport | None = transport

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    async def post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        *,
        headers: Mapping[str, str],
    ) -> RawReply:
        """POST *payload* to *url* and read the whole response body.

        Raises
        ------
        TransportError
            For any httpx failure while sending or reading.
        """
        body = json.dumps(payload).encode("utf-8")

        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=None,
            ) as client:
                response = await client.post(url, content=body, headers=dict(headers))
        except httpx.HTTPError as exc:
            raise TransportError(
                f"making request to {url}: {exc}",
                hint="Check that the service is running and reachable.",
            ) from exc

        return RawReply(status_code=response.status_code, content=response.content)
