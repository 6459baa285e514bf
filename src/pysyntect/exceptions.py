"""Custom exception hierarchy for pysyntect.

All exceptions that cross layer boundaries must inherit from
:class:`SyntectError`.  Raw third-party exceptions (e.g. from httpx or
the JSON decoder) must NEVER propagate beyond the layer that produced
them — they must be caught and re-raised as a typed subclass defined
here.

Cancellation (``asyncio.CancelledError``, ``TimeoutError``) is not an
error of ours and is never wrapped.

Hierarchy
---------
SyntectError
├── InvalidQueryError
├── SourceReadError
├── RequestTooLargeError
├── InvalidThemeError
├── PanicError
├── InternalError
├── UnknownServiceError
├── ProtocolError
└── TransportError
"""

from __future__ import annotations


class SyntectError(Exception):
    """Base exception for all pysyntect errors.

    Every failure a caller can observe maps to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        server: str | None = None,
    ) -> None:
        if server:
            message = f"{server}: {message}"
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""

        self.server: str | None = server
        """Service address the failing request was sent to, if any."""


# --- Client-side input -----------------------------------------------------

class InvalidQueryError(SyntectError):
    """Raised when a query violates its own invariants before sending."""


class SourceReadError(SyntectError):
    """Raised when the CLI cannot read the file to highlight."""


# --- Service-reported failures ---------------------------------------------

class RequestTooLargeError(SyntectError):
    """Raised when the service answers HTTP 400 (input exceeds its limits)."""


class InvalidThemeError(SyntectError):
    """Raised when the requested theme is unknown to the service."""


class PanicError(SyntectError):
    """Raised when the service panicked while processing this input.

    This most often happens when the grammar engine does not support an
    obscure syntax-definition feature.  Callers can treat it as a
    per-file skip rather than a systemic failure.
    """


class InternalError(SyntectError):
    """Raised when the service reports ``resource_not_found``.

    The service sends that code for a 404, which means this client
    targeted the wrong path.  That is a configuration bug on our side,
    not a problem with the caller's input.
    """


class UnknownServiceError(SyntectError):
    """Raised for an error code this client does not recognise."""

    def __init__(
        self,
        error: str,
        code: str,
        *,
        server: str | None = None,
    ) -> None:
        super().__init__(
            f"unknown error={error!r} code={code!r}",
            server=server,
        )
        self.error: str = error
        self.code: str = code


# --- Protocol / transport --------------------------------------------------

class ProtocolError(SyntectError):
    """Raised when the service response does not match the wire contract."""


class TransportError(SyntectError):
    """Raised when the request could not be delivered or answered."""
