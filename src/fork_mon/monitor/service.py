"""
Monitor service that polls the beacon nodes.

How It Works
------------
1. Register every configured endpoint; pick a Lighthouse node as the
   fork choice provider
2. Sleep until the next slot boundary
3. Build the fork choice tree once
4. Every second, fetch all heads in parallel
5. When the provider's head moved, rebuild the fork choice tree and
   refresh the finality checkpoints
6. Repeat until stopped

A node that fails a request is marked unhealthy for that round and
polled again in the next one. A failed rebuild keeps the previous tree.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from fork_mon import metrics
from fork_mon.beacon import BeaconNode, FinalityCheckpoints
from fork_mon.chain import HEAD_POLLING_INTERVAL, SlotClock
from fork_mon.config import MonitorConfig
from fork_mon.forkchoice import (
    compute_summary,
    extract_total_weight,
    select_head_index,
    tree_size,
)
from fork_mon.types import BeaconNodeError, InvalidInputError

from .state import ForkChoiceSnapshot, SnapshotHolder

logger = logging.getLogger(__name__)


async def register_node(endpoint: str, timeout: float) -> BeaconNode | None:
    """
    Connect to a node and read its first head.

    Returns None, after logging why, when the node is unusable.
    """
    try:
        node = await BeaconNode.connect(endpoint, timeout)
    except BeaconNodeError as e:
        logger.warning("Skipping node: %s", e)
        return None

    try:
        await node.fetch_latest_head()
    except BeaconNodeError as e:
        logger.warning("Skipping node without a head: %s", e)
        await node.aclose()
        return None

    node.is_healthy = True
    await node.refresh_sync_status()
    return node


@dataclass(slots=True)
class MonitorService:
    """
    Polls every node and keeps the fork choice snapshot current.

    The service owns the nodes and their HTTP clients. Readers access the
    published tree through `snapshots`.
    """

    config: MonitorConfig
    """Monitor configuration."""

    clock: SlotClock
    """Wall-clock slot source of the monitored chain."""

    nodes: list[BeaconNode] = field(default_factory=list)
    """Registered nodes, in configuration order."""

    fork_choice_provider: BeaconNode | None = None
    """Lighthouse node whose proto-array feeds the tree."""

    snapshots: SnapshotHolder = field(default_factory=SnapshotHolder)
    """Latest published fork choice tree."""

    finality: FinalityCheckpoints | None = None
    """Latest justified and finalized checkpoints of the provider."""

    polling_interval: float = HEAD_POLLING_INTERVAL
    """Seconds between two head polling rounds."""

    _running: bool = field(default=False, repr=False)
    """Whether the service is running."""

    @classmethod
    async def from_config(
        cls,
        config: MonitorConfig,
        time_fn: Callable[[], float] = time.time,
    ) -> MonitorService:
        """
        Register every configured node.

        The last Lighthouse node becomes the fork choice provider. Without
        one, the fork choice endpoints serve an empty tree.
        """
        registered = await asyncio.gather(
            *(register_node(endpoint, config.http_timeout) for endpoint in config.endpoints)
        )
        nodes = [node for node in registered if node is not None]

        provider = None
        for node in nodes:
            if node.is_lighthouse:
                provider = node

        if provider is None:
            logger.warning(
                "No Lighthouse node provided so the fork choice endpoint will be empty "
                "(requires the Lighthouse proto-array)"
            )

        metrics.nodes_total.set(len(nodes))
        return cls(
            config=config,
            clock=SlotClock.from_config(config.eth2, time_fn),
            nodes=nodes,
            fork_choice_provider=provider,
        )

    async def poll_heads(self) -> None:
        """
        Fetch every node's head in parallel.

        Rebuilds the fork choice tree when the provider's head changed.
        """
        provider = self.fork_choice_provider
        last_provider_head = provider.latest_head if provider is not None else None

        await asyncio.gather(*(self._poll_node(node) for node in self.nodes))

        metrics.nodes_healthy.set(sum(node.is_healthy for node in self.nodes))

        if provider is not None and provider.latest_head != last_provider_head:
            await self.rebuild_fork_choice()
            await self.refresh_finality()

    async def _poll_node(self, node: BeaconNode) -> None:
        await node.refresh_head()
        if node.is_healthy:
            await node.refresh_sync_status()

    async def rebuild_fork_choice(self) -> bool:
        """
        Fetch the provider's proto-array and publish a new tree.

        Returns:
            True if a new snapshot was published, False if the previous
            one was kept.
        """
        provider = self.fork_choice_provider
        if provider is None:
            return False

        head = provider.latest_head
        start = time.perf_counter()
        try:
            proto_array = await provider.fetch_proto_array()
            tree = await asyncio.to_thread(
                compute_summary,
                proto_array,
                select_head_index(proto_array),
                compact=self.config.compact_summary,
            )
            total_weight = extract_total_weight(proto_array)
        except (BeaconNodeError, InvalidInputError) as e:
            metrics.fork_choice_rebuild_failures.inc()
            logger.warning("Keeping previous fork choice tree: %s", e)
            return False

        self.snapshots.publish(ForkChoiceSnapshot(tree=tree, total_weight=total_weight, head=head))

        size = tree_size(tree)
        metrics.fork_choice_rebuilds.inc()
        metrics.fork_choice_rebuild_time.observe(time.perf_counter() - start)
        metrics.fork_choice_nodes.set(size)
        if head.slot.isdigit():
            metrics.head_slot.set(int(head.slot))

        logger.info("Fork choice rebuilt: head=%s blocks=%d", head, size)
        return True

    async def refresh_finality(self) -> None:
        """Fetch the provider's finality checkpoints, keeping the last ones on failure."""
        if self.fork_choice_provider is None:
            return
        try:
            self.finality = await self.fork_choice_provider.fetch_finality_checkpoints()
        except BeaconNodeError as e:
            logger.warning("Finality checkpoints fetch failed: %s", e)

    async def run(self) -> None:
        """
        Main loop: poll heads every interval until stopped.

        The first round starts on a slot boundary when configured to.
        """
        self._running = True

        if self.config.align_to_slot:
            logger.info("Synchronizing to next slot")
            await asyncio.sleep(self.clock.seconds_until_next_slot())
            logger.info("Aligned to slot %d, continuing", self.clock.current_slot())

        await self.rebuild_fork_choice()
        await self.refresh_finality()

        while self._running:
            await self.poll_heads()
            await asyncio.sleep(self.polling_interval)

    def stop(self) -> None:
        """
        Stop the service.

        The run() loop exits after its current sleep.
        """
        self._running = False

    @property
    def is_running(self) -> bool:
        """Check if the service is currently running."""
        return self._running

    async def aclose(self) -> None:
        """Release every node's HTTP client."""
        await asyncio.gather(*(node.aclose() for node in self.nodes))
