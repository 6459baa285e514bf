"""Plain-text rendering of service responses for the CLI.

Pure functions: they build strings and never write them.
"""

from __future__ import annotations

import json

from pysyntect.core.models import (
    HighlightResponse,
    Response,
    ScopifiedRegion,
    ScopifyResponse,
)


def quote(text: str) -> str:
    """Double-quote *text*, escaping quotes, backslashes and control characters."""
    return json.dumps(text, ensure_ascii=False)


def render_region(code: str, region: ScopifiedRegion, names: list[str]) -> str:
    """Render one region as ``"<substring>" <scope> <scope> ...``."""
    return " ".join([quote(region.slice(code)), *names])


def render_scopified(code: str, response: ScopifyResponse) -> list[str]:
    """Render every region, in the order the service returned them."""
    return [
        render_region(code, region, response.scope_names_for(region))
        for region in response.regions
    ]


def render_highlight(response: HighlightResponse) -> list[str]:
    return [response.data]


def render_response(code: str, response: Response) -> list[str]:
    """Render either response variant as output lines."""
    if isinstance(response, ScopifyResponse):
        return render_scopified(code, response)
    return render_highlight(response)
