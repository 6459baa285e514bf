"""Shared pytest fixtures and configuration for the pysyntect test suite.

Guidelines
----------
* No network access in any test.
* HTTP is faked with ``httpx.MockTransport`` at the infra boundary.
* Core tests must be pure — no side effects.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import httpx
import pytest

from pysyntect.core.client import SyntectClient
from pysyntect.infra.http_provider import HttpxQueryProvider

SERVER = "http://localhost:9238"


# ---------------------------------------------------------------------------
# Tracing doubles
# ---------------------------------------------------------------------------

class RecordingSpan:
    def __init__(self, name: str) -> None:
        self.name = name
        self.attributes: dict[str, Any] = {}
        self.ended = False

    def set_attribute(self, key: str, value: Any) -> None:
        self.attributes[key] = value


class RecordingTracer:
    """Minimal tracer that keeps every span it starts."""

    def __init__(self) -> None:
        self.spans: list[RecordingSpan] = []

    @contextmanager
    def start_as_current_span(self, name: str) -> Iterator[RecordingSpan]:
        span = RecordingSpan(name)
        self.spans.append(span)
        try:
            yield span
        finally:
            span.ended = True


@pytest.fixture
def tracer() -> RecordingTracer:
    return RecordingTracer()


# ---------------------------------------------------------------------------
# Fake service
# ---------------------------------------------------------------------------

@pytest.fixture
def make_client() -> Callable[..., SyntectClient]:
    """Factory: ``make_client(handler, server=SERVER)`` -> client on a mock transport."""

    def _make(
        handler: Callable[[httpx.Request], Any],
        server: str = SERVER,
    ) -> SyntectClient:
        provider = HttpxQueryProvider(httpx.MockTransport(handler))
        return SyntectClient(server, provider)

    return _make
