"""CLI layer — argument parsing, file reading, rendering, and error boundary.

This package is the outermost layer of the application.  It may import
from ``core``, ``infra``, and the top-level package, but no other layer
may import from ``cli``.
"""
