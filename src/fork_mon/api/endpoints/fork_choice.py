"""Fork choice endpoint handlers."""

from __future__ import annotations

from aiohttp import web

from fork_mon.forkchoice import ForkChoiceNode, build_dot, prune_for_browser

from ..context import get_monitor, json_response


async def handle(request: web.Request) -> web.Response:
    """
    Handle fork choice request.

    The snapshot is copied out under the lock; pruning and encoding run
    after the lock is released.

    Response: JSON object with fields:
        - block_tree (object): Block tree pruned to the trailing epochs.
          Each node has children, slot, root, weight, is_canonical and,
          when compacted, count_collapsed_blocks.
        - total_weight (number): Weight of the anchor block.

    Status Codes:
        200 OK: Tree returned. An empty node is served until a tree exists.
    """
    monitor = get_monitor(request)
    if monitor is None:
        return json_response({"block_tree": ForkChoiceNode.empty().to_json(), "total_weight": 0.0})

    snapshot = monitor.snapshots.current()

    # Nothing built yet: the placeholder has no slot to prune by.
    if not snapshot.tree.slot:
        block_tree = snapshot.tree
    else:
        block_tree = prune_for_browser(snapshot.tree, monitor.clock)

    return json_response(
        {"block_tree": block_tree.to_json(), "total_weight": snapshot.total_weight}
    )


async def handle_dot(request: web.Request) -> web.Response:
    """
    Handle fork choice DOT request.

    Response: Graphviz DOT text of the full (unpruned) block tree.

    Status Codes:
        200 OK: Graph returned.
    """
    monitor = get_monitor(request)
    tree = monitor.snapshots.current().tree if monitor is not None else ForkChoiceNode.empty()

    return web.Response(text=build_dot(tree), content_type="text/plain")
