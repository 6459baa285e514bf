"""Core highlighting client — one request/response round trip per call.

:class:`SyntectClient` depends on a
:class:`~pysyntect.core.protocols.QueryProvider` injected at
construction time (dependency inversion), keeping the core free of any
HTTP library imports.  Use :func:`pysyntect.new_client` to get one wired
to the default httpx provider.

Guarantees
----------
* The only state is the configured server address and provider, both
  fixed at construction; one instance may serve concurrent tasks.
* Only :class:`~pysyntect.exceptions.SyntectError` subclasses escape,
  apart from ``asyncio.CancelledError``/``TimeoutError`` raised by the
  caller's cancellation or deadline.
* No retries, no caching.
"""

from __future__ import annotations

import logging

from pysyntect.core.models import Query, Response
from pysyntect.core.protocols import QueryProvider, RawReply
from pysyntect.core.tracing import NO_TRACING, TraceContext
from pysyntect.core.wire import unpack
from pysyntect.exceptions import RequestTooLargeError, SyntectError, TransportError

logger = logging.getLogger(__name__)

_STATUS_BAD_REQUEST = 400


class SyntectClient:
    """Client bound to a single syntect_server.

    Parameters
    ----------
    server:
        Base address of the service, e.g. ``http://localhost:9238``.
        A trailing ``/`` is stripped.
    provider:
        Any object satisfying the :class:`QueryProvider` protocol.
    """

    def __init__(self, server: str, provider: QueryProvider) -> None:
        self._server: str = server[:-1] if server.endswith("/") else server
        self._provider: QueryProvider = provider

    @property
    def server(self) -> str:
        return self._server

    def url(self, path: str) -> str:
        return self._server + path

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._server!r})"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def highlight(
        self,
        query: Query,
        *,
        tracing: TraceContext = NO_TRACING,
    ) -> Response:
        """Highlight or scopify *query*.

        Cancel the awaiting task, or wrap the call in
        ``asyncio.wait_for``, to abort it; the in-flight request is torn
        down and the cancellation propagates as is.

        Returns
        -------
        HighlightResponse
            When ``query.scopify`` is false.
        ScopifyResponse
            When ``query.scopify`` is true.

        Raises
        ------
        RequestTooLargeError
            The service answered HTTP 400.
        InvalidThemeError, PanicError, InternalError, UnknownServiceError
            The service reported an error in the body.
        ProtocolError
            The body did not match the wire contract.
        TransportError
            The request could not be delivered.
        """
        endpoint = self.url("/")
        headers = {"Content-Type": "application/json"}

        with tracing.span("Highlight") as span:
            tracing.inject_headers(headers)
            logger.debug(
                "POST %s filepath=%r scopify=%s chars=%d",
                endpoint, query.filepath, query.scopify, len(query.code),
            )
            reply = await self._post(endpoint, query, headers)
            logger.debug("%s answered HTTP %d", endpoint, reply.status_code)

            if reply.status_code == _STATUS_BAD_REQUEST:
                raise RequestTooLargeError(
                    "request too large",
                    hint="The file is too large to highlight; skip or shrink it.",
                    server=self._server,
                )

            # Attributes can only be attached once the request has run.
            span.set_attribute("Filepath", query.filepath)
            span.set_attribute("Theme", query.theme)

            return unpack(
                reply.content,
                query,
                server=self._server,
                endpoint=endpoint,
            )

    # ------------------------------------------------------------------
    # Provider delegation (safe boundary)
    # ------------------------------------------------------------------

    async def _post(
        self,
        endpoint: str,
        query: Query,
        headers: dict[str, str],
    ) -> RawReply:
        """Call the provider and ensure only our exceptions escape."""
        try:
            return await self._provider.post_json(
                endpoint,
                query.to_payload(),
                headers=headers,
            )
        except TransportError as exc:
            if exc.server is not None:
                raise
            raise TransportError(
                str(exc),
                hint=exc.hint,
                server=self._server,
            ) from exc
        except SyntectError:
            raise
        except Exception as exc:
            raise TransportError(
                f"unexpected provider error: {exc}",
                server=self._server,
            ) from exc
