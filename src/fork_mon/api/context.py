"""Application state shared by the endpoint handlers."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Optional

from aiohttp import web

if TYPE_CHECKING:
    from fork_mon.monitor import MonitorService

MONITOR_GETTER = web.AppKey("monitor_getter", Callable[[], Optional["MonitorService"]])
"""Callable returning the running monitor, or None before it started."""


def get_monitor(request: web.Request) -> MonitorService | None:
    """Resolve the monitor behind a request, if any."""
    monitor_getter = request.app.get(MONITOR_GETTER)
    return monitor_getter() if monitor_getter else None


def json_response(payload: Any) -> web.Response:
    """
    Encode a JSON response readable from any origin.

    The browser UI may be served from elsewhere during development.
    """
    return web.Response(
        body=json.dumps(payload),
        content_type="application/json",
        headers={"Access-Control-Allow-Origin": "*"},
    )
