"""Chain timing endpoint handler."""

from __future__ import annotations

from aiohttp import web

from ..context import get_monitor, json_response


async def handle(request: web.Request) -> web.Response:
    """
    Handle chain timing request.

    The browser derives its slot clock from these values.

    Response: JSON object with fields:
        - seconds_per_slot (integer)
        - genesis_time (integer): Unix timestamp of slot 0.
        - slots_per_epoch (integer)
        - network (string)

    Status Codes:
        200 OK: Configuration returned.
        503 Service Unavailable: Monitor not initialized.
    """
    monitor = get_monitor(request)
    if monitor is None:
        raise web.HTTPServiceUnavailable(reason="Monitor not initialized")

    return json_response(monitor.config.eth2.model_dump())
