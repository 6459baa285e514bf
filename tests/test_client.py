"""Tests for SyntectClient (core/client.py) over a mocked HTTP transport.

No network access: every request is answered by ``httpx.MockTransport``.
These tests verify:

* Request construction (URL, headers, JSON body)
* HTTP 400 handling without body decoding
* Service error mapping and server attribution
* Span naming, attribute ordering and header propagation
* Cancellation, deadlines, and concurrent use of one client
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable, MutableMapping
from typing import Any

import httpx
import pytest

from pysyntect import new_client
from pysyntect.core.client import SyntectClient
from pysyntect.core.models import HighlightResponse, Query, ScopifyResponse
from pysyntect.core.protocols import RawReply
from pysyntect.core.tracing import TraceContext
from pysyntect.exceptions import (
    InternalError,
    InvalidThemeError,
    PanicError,
    ProtocolError,
    RequestTooLargeError,
    TransportError,
    UnknownServiceError,
)

SERVER = "http://localhost:9238"


def _reply(body: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(body).encode("utf-8"))


def _highlight_body() -> dict[str, Any]:
    return {"Data": "<pre>x</pre>", "Plaintext": False, "detected_language": "Go"}


def _highlight_query(**overrides: Any) -> Query:
    defaults: dict[str, Any] = {
        "filepath": "main.go",
        "code": "package main",
        "theme": "InspiredGitHub",
    }
    defaults.update(overrides)
    return Query(**defaults)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_server_is_kept(self, make_client: Callable[..., SyntectClient]) -> None:
        client = make_client(lambda request: _reply({}))
        assert client.server == SERVER
        assert client.url("/") == "http://localhost:9238/"

    def test_trailing_slash_is_stripped(self, make_client: Callable[..., SyntectClient]) -> None:
        client = make_client(lambda request: _reply({}), server=SERVER + "/")
        assert client.server == SERVER
        assert client.url("/") == "http://localhost:9238/"

    def test_new_client_wires_httpx_provider(self) -> None:
        client = new_client(SERVER + "/")
        assert isinstance(client, SyntectClient)
        assert client.server == SERVER


# ---------------------------------------------------------------------------
# Request construction
# ---------------------------------------------------------------------------

class TestRequest:
    @pytest.mark.asyncio
    async def test_posts_json_to_service_root(
        self, make_client: Callable[..., SyntectClient],
    ) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _reply(_highlight_body())

        await make_client(handler, server=SERVER + "/").highlight(_highlight_query())

        (request,) = seen
        assert request.method == "POST"
        assert str(request.url) == "http://localhost:9238/"
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content) == {
            "extension": "",
            "filepath": "main.go",
            "theme": "InspiredGitHub",
            "scopify": False,
            "code": "package main",
        }

    @pytest.mark.asyncio
    async def test_new_client_uses_injected_transport(self) -> None:
        transport = httpx.MockTransport(lambda request: _reply(_highlight_body()))
        resp = await new_client(SERVER, transport=transport).highlight(_highlight_query())
        assert isinstance(resp, HighlightResponse)


# ---------------------------------------------------------------------------
# Successful responses
# ---------------------------------------------------------------------------

class TestSuccess:
    @pytest.mark.asyncio
    async def test_highlight_response(self, make_client: Callable[..., SyntectClient]) -> None:
        resp = await make_client(lambda r: _reply(_highlight_body())).highlight(_highlight_query())
        assert resp == HighlightResponse(data="<pre>x</pre>", plaintext=False, detected_language="Go")

    @pytest.mark.asyncio
    async def test_plaintext_response(self, make_client: Callable[..., SyntectClient]) -> None:
        body = {"Data": "<pre>?</pre>", "Plaintext": True, "detected_language": "Plain Text"}
        resp = await make_client(lambda r: _reply(body)).highlight(_highlight_query(filepath="x.unknown"))
        assert isinstance(resp, HighlightResponse)
        assert resp.plaintext is True

    @pytest.mark.asyncio
    async def test_scopify_response(self, make_client: Callable[..., SyntectClient]) -> None:
        body = {
            "detected_language": "Go",
            "scopified_scope_names": ["comment", "string", "keyword"],
            "scopified_regions": [
                {"Offset": 0, "Length": 3, "Scopes": [1]},
                {"Offset": 3, "Length": 1, "Scopes": [0, 2]},
            ],
        }
        query = Query(filepath="main.go", code="// x", scopify=True)
        resp = await make_client(lambda r: _reply(body)).highlight(query)

        assert isinstance(resp, ScopifyResponse)
        assert resp.detected_language == "Go"
        assert dict(resp.scope_names) == {0: "comment", 1: "string", 2: "keyword"}
        assert [r.slice(query.code) for r in resp.regions] == ["// ", "x"]
        for region in resp.regions:
            assert region.end <= query.code_length
            assert all(index in resp.scope_names for index in region.scopes)

    @pytest.mark.asyncio
    async def test_out_of_bounds_region_is_protocol_error(
        self, make_client: Callable[..., SyntectClient],
    ) -> None:
        body = {
            "scopified_scope_names": ["comment"],
            "scopified_regions": [{"Offset": 0, "Length": 99, "Scopes": [0]}],
        }
        query = Query(filepath="main.go", code="// x", scopify=True)
        with pytest.raises(ProtocolError) as exc_info:
            await make_client(lambda r: _reply(body)).highlight(query)
        assert exc_info.value.server == SERVER


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class TestErrors:
    @pytest.mark.asyncio
    async def test_400_is_request_too_large_without_decoding(
        self, make_client: Callable[..., SyntectClient],
    ) -> None:
        body = {"Error": "invalid theme", "Code": "invalid_theme"}
        client = make_client(lambda r: _reply(body, status_code=400))
        with pytest.raises(RequestTooLargeError) as exc_info:
            await client.highlight(_highlight_query())
        assert exc_info.value.server == SERVER

    @pytest.mark.asyncio
    async def test_400_with_garbage_body(self, make_client: Callable[..., SyntectClient]) -> None:
        client = make_client(lambda r: httpx.Response(400, content=b"too big"))
        with pytest.raises(RequestTooLargeError):
            await client.highlight(_highlight_query())

    @pytest.mark.parametrize(
        ("code", "exc_class"),
        [
            ("invalid_theme", InvalidThemeError),
            ("resource_not_found", InternalError),
            ("panic", PanicError),
            ("INVALID_THEME", UnknownServiceError),
            ("something_new", UnknownServiceError),
        ],
    )
    @pytest.mark.asyncio
    async def test_error_codes(
        self,
        make_client: Callable[..., SyntectClient],
        code: str,
        exc_class: type[Exception],
    ) -> None:
        body = {"Error": "it failed", "Code": code}
        client = make_client(lambda r: _reply(body))
        with pytest.raises(exc_class) as exc_info:
            await client.highlight(_highlight_query())
        assert SERVER in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_malformed_body_names_endpoint(
        self, make_client: Callable[..., SyntectClient],
    ) -> None:
        client = make_client(lambda r: httpx.Response(200, content=b"not json"))
        with pytest.raises(ProtocolError, match="http://localhost:9238/"):
            await client.highlight(_highlight_query())

    @pytest.mark.asyncio
    async def test_connect_failure_is_transport_error(
        self, make_client: Callable[..., SyntectClient],
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError) as exc_info:
            await make_client(handler).highlight(_highlight_query())
        assert exc_info.value.server == SERVER
        assert "connection refused" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_unexpected_provider_error_is_wrapped(self) -> None:
        class BrokenProvider:
            async def post_json(self, url: str, payload: Any, *, headers: Any) -> RawReply:
                raise RuntimeError("boom")

        client = SyntectClient(SERVER, BrokenProvider())
        with pytest.raises(TransportError, match="boom"):
            await client.highlight(_highlight_query())


# ---------------------------------------------------------------------------
# Tracing
# ---------------------------------------------------------------------------

class TestTracing:
    @pytest.mark.asyncio
    async def test_span_attributes_set_after_response(
        self, make_client: Callable[..., SyntectClient], tracer: Any,
    ) -> None:
        attributes_during_request: list[dict[str, Any]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            attributes_during_request.append(dict(tracer.spans[0].attributes))
            return _reply(_highlight_body())

        await make_client(handler).highlight(
            _highlight_query(), tracing=TraceContext(tracer=tracer),
        )

        (span,) = tracer.spans
        assert span.name == "Highlight"
        assert span.ended
        assert attributes_during_request == [{}]
        assert span.attributes == {"Filepath": "main.go", "Theme": "InspiredGitHub"}

    @pytest.mark.asyncio
    async def test_no_attributes_on_request_too_large(
        self, make_client: Callable[..., SyntectClient], tracer: Any,
    ) -> None:
        client = make_client(lambda r: httpx.Response(400))
        with pytest.raises(RequestTooLargeError):
            await client.highlight(_highlight_query(), tracing=TraceContext(tracer=tracer))
        assert tracer.spans[0].attributes == {}
        assert tracer.spans[0].ended

    @pytest.mark.asyncio
    async def test_inject_adds_propagation_headers(
        self, make_client: Callable[..., SyntectClient],
    ) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _reply(_highlight_body())

        def inject(carrier: MutableMapping[str, str]) -> None:
            carrier["traceparent"] = "00-abc-def-01"

        await make_client(handler).highlight(
            _highlight_query(), tracing=TraceContext(inject=inject),
        )
        assert seen[0].headers["traceparent"] == "00-abc-def-01"
        assert seen[0].headers["Content-Type"] == "application/json"


# ---------------------------------------------------------------------------
# Cancellation and concurrency
# ---------------------------------------------------------------------------

class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancel_aborts_in_flight_request(
        self, make_client: Callable[..., SyntectClient],
    ) -> None:
        started = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            started.set()
            await asyncio.sleep(3600)
            return _reply(_highlight_body())

        task = asyncio.create_task(make_client(handler).highlight(_highlight_query()))
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_deadline_surfaces_timeout(
        self, make_client: Callable[..., SyntectClient],
    ) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(3600)
            return _reply(_highlight_body())

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(make_client(handler).highlight(_highlight_query()), 0.05)

    @pytest.mark.asyncio
    async def test_one_client_serves_concurrent_calls(
        self, make_client: Callable[..., SyntectClient],
    ) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            payload = json.loads(request.content)
            await asyncio.sleep(0.01)
            return _reply({"Data": payload["code"], "detected_language": payload["filepath"]})

        client = make_client(handler)
        queries = [_highlight_query(filepath=f"f{i}.go", code=f"code {i}") for i in range(5)]
        responses = await asyncio.gather(*(client.highlight(q) for q in queries))

        assert [r.detected_language for r in responses] == [q.filepath for q in queries]
        assert [r.data for r in responses] == [q.code for q in queries]
