"""Node head endpoint handlers."""

from __future__ import annotations

from aiohttp import web

from ..context import get_monitor, json_response


async def handle_heads(request: web.Request) -> web.Response:
    """
    Handle heads request.

    Response: JSON list with one object per node:
        - id (string): Hash prefix identifying the node.
        - version (string): Client version.
        - slot (string): Head slot.
        - root (string): Head root, 0x-prefixed hex.
        - healthy (boolean): Whether the last head request succeeded.
        - syncing (boolean): Whether the node reported it is syncing.

    Status Codes:
        200 OK: Heads returned (empty list before the monitor started).
    """
    monitor = get_monitor(request)
    nodes = monitor.nodes if monitor is not None else []
    return json_response([node.to_json() for node in nodes])


async def handle_chain_monitor(request: web.Request) -> web.Response:
    """
    Handle chain monitor request.

    Response: JSON object with fields:
        - nodes (list): Same objects as the heads endpoint.
        - justified_checkpoint (object or null): epoch and root.
        - finalized_checkpoint (object or null): epoch and root.

    Status Codes:
        200 OK: State returned.
    """
    monitor = get_monitor(request)
    if monitor is None:
        return json_response(
            {"nodes": [], "justified_checkpoint": None, "finalized_checkpoint": None}
        )

    finality = monitor.finality
    return json_response(
        {
            "nodes": [node.to_json() for node in monitor.nodes],
            "justified_checkpoint": (
                finality.current_justified.model_dump() if finality is not None else None
            ),
            "finalized_checkpoint": (
                finality.finalized.model_dump() if finality is not None else None
            ),
        }
    )
