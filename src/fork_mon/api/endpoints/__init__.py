"""API endpoint handlers."""

from . import fork_choice, heads, health, metrics, spec

__all__ = [
    "fork_choice",
    "heads",
    "health",
    "metrics",
    "spec",
]
