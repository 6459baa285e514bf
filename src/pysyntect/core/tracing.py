"""Explicit trace context threaded through every client call.

There is no global tracer.  Callers that want spans pass a
:class:`TraceContext` built from their own tracer; the shapes below are
structural and an OpenTelemetry tracer and
``opentelemetry.propagate.inject`` satisfy them as-is.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, MutableMapping
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass
from typing import Any, Protocol


class Span(Protocol):
    """The part of a tracing span the client writes to."""

    def set_attribute(self, key: str, value: Any) -> None:
        ...  # pragma: no cover


class Tracer(Protocol):
    """Starts a span and makes it current for the duration of a block."""

    def start_as_current_span(self, name: str) -> AbstractContextManager[Span]:
        ...  # pragma: no cover


class _NoopSpan:
    def set_attribute(self, key: str, value: Any) -> None:
        return None


@dataclass(frozen=True, slots=True)
class TraceContext:
    """Tracer plus header propagation for one call.

    Parameters
    ----------
    tracer:
        Starts the span wrapping the request.  ``None`` records nothing.
    inject:
        Writes propagation headers into the outgoing request headers so
        the trace continues inside the service.  ``None`` sends none.
    """

    tracer: Tracer | None = None
    inject: Callable[[MutableMapping[str, str]], None] | None = None

    @contextmanager
    def span(self, name: str) -> Iterator[Span]:
        """Open a span named *name*, or a no-op span without a tracer."""
        if self.tracer is None:
            yield _NoopSpan()
            return
        with self.tracer.start_as_current_span(name) as span:
            yield span

    def inject_headers(self, headers: MutableMapping[str, str]) -> None:
        if self.inject is not None:
            self.inject(headers)


NO_TRACING = TraceContext()
"""Default context: no spans, no propagation headers."""
