"""Infrastructure layer — external system integration.

This layer wraps all interaction with the network.  Every raw
third-party exception must be caught here and re-raised as a
:class:`~pysyntect.exceptions.SyntectError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from pysyntect.infra.http_provider import HttpxQueryProvider

__all__: list[str] = [
    "HttpxQueryProvider",
]
