"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class RawReply:
    """Status code and undecoded body of an HTTP response."""

    status_code: int
    content: bytes


class QueryProvider(Protocol):
    """Contract for the transport that carries queries to the service.

    Any object that implements :meth:`post_json` with the correct
    signature satisfies this protocol structurally (no explicit
    inheritance required).
    """

    async def post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        *,
        headers: Mapping[str, str],
    ) -> RawReply:
        """POST *payload* as a JSON body to *url* and return the raw reply.

        Implementations must not interpret the status code or body, and
        must let ``asyncio.CancelledError`` propagate unchanged so that
        cancelling the caller aborts the request.

        Raises
        ------
        TransportError
            When the request could not be sent or no response arrived.
        """
        ...  # pragma: no cover
