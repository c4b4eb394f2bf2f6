"""API route definitions."""

from collections.abc import Awaitable, Callable

from aiohttp import web

from .endpoints import fork_choice, heads, health, metrics, spec

ROUTES: dict[str, Callable[[web.Request], Awaitable[web.Response]]] = {
    "/spec": spec.handle,
    "/heads": heads.handle_heads,
    "/chain-monitor": heads.handle_chain_monitor,
    "/fork-choice": fork_choice.handle,
    "/fork-choice-dot": fork_choice.handle_dot,
    "/health": health.handle,
    "/metrics": metrics.handle,
}
"""All API routes mapped to their handlers."""
