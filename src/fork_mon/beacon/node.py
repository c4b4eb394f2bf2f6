"""
A monitored beacon node.

Wraps one node's REST API behind the calls the monitor needs: its head,
its sync status, and for Lighthouse nodes the proto-array fork choice
dump and the finality checkpoints.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from fork_mon.forkchoice import ProtoArrayNode, parse_proto_array
from fork_mon.types import BeaconNodeError

from .flavors import NodeFlavor, detect_flavor, get_json, parse_as
from .responses import FinalityCheckpoints, HeadRef

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 0.5
"""HTTP request timeout in seconds. A slow node must not stall a polling round."""

PROTO_ARRAY_PATH = "/lighthouse/proto_array"
FINALITY_CHECKPOINTS_PATH = "/eth/v1/beacon/states/head/finality_checkpoints"


def id_hash_of(identity: str) -> str:
    """
    Derive a short public identifier for a node.

    Peer ids must not reach the browser, so only a hash prefix is exposed.
    """
    return hashlib.sha256(identity.encode()).hexdigest()[:8]


@dataclass(slots=True)
class BeaconNode:
    """A beacon node registered with the monitor."""

    endpoint: str
    """Base URL of the node API."""

    flavor: NodeFlavor
    """API flavor, detected at registration."""

    client: httpx.AsyncClient
    """HTTP client owned by this node."""

    id: str = ""
    """Hash prefix of the peer id (or endpoint)."""

    version: str = ""
    """Client version string, e.g. ``Lighthouse/v1.0.0``."""

    latest_head: HeadRef = field(default_factory=HeadRef)
    """Most recent head seen."""

    is_healthy: bool = False
    """Whether the last head request succeeded."""

    is_syncing: bool = False
    """Whether the node reported it is syncing."""

    @classmethod
    async def connect(
        cls,
        endpoint: str,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> BeaconNode:
        """
        Register the node at an endpoint.

        Detects the API flavor, then reads the version and identity.

        Raises:
            BeaconNodeError: If the node cannot be reached or answers badly.
        """
        endpoint = endpoint.rstrip("/")
        if client is None:
            client = httpx.AsyncClient(timeout=timeout)

        try:
            flavor = await detect_flavor(client, endpoint)
            version = await flavor.fetch_version(client, endpoint)
            identity = await flavor.fetch_identity(client, endpoint)
        except BaseException:
            await client.aclose()
            raise

        node = cls(
            endpoint=endpoint,
            flavor=flavor,
            client=client,
            id=id_hash_of(identity),
            version=version,
        )
        logger.info("Registered %s node %s (%s) at %s", flavor.name, node.id, version, endpoint)
        return node

    @property
    def is_lighthouse(self) -> bool:
        """Only Lighthouse exposes its proto-array."""
        return "Lighthouse" in self.version

    async def fetch_latest_head(self) -> None:
        """
        Fetch the head and record it when it changed.

        Raises:
            BeaconNodeError: If the head cannot be fetched.
        """
        head = await self.flavor.fetch_head(self.client, self.endpoint)
        if head.root == self.latest_head.root:
            return

        # Slow APIs may answer out of order; keep the newest head.
        if self.flavor.drops_stale_heads and self._is_older(head):
            return

        self.latest_head = head

    def _is_older(self, head: HeadRef) -> bool:
        try:
            return int(head.slot) < int(self.latest_head.slot)
        except ValueError:
            return False

    async def refresh_head(self) -> None:
        """Fetch the head, recording health instead of raising."""
        try:
            await self.fetch_latest_head()
        except BeaconNodeError as e:
            logger.warning("Head fetch failed: %s", e)
            self.is_healthy = False
        else:
            self.is_healthy = True

    async def refresh_sync_status(self) -> None:
        """Fetch the sync status; an unknown status keeps the previous one."""
        try:
            is_syncing = await self.flavor.fetch_sync_status(self.client, self.endpoint)
        except BeaconNodeError as e:
            logger.warning("Sync status fetch failed: %s", e)
            return
        if is_syncing is not None:
            self.is_syncing = is_syncing

    async def fetch_proto_array(self) -> list[ProtoArrayNode]:
        """
        Fetch the node's proto-array fork choice dump.

        Raises:
            BeaconNodeError: If the dump cannot be fetched.
            InvalidInputError: If the dump is malformed.
        """
        payload = await get_json(self.client, self.endpoint, PROTO_ARRAY_PATH)
        return parse_proto_array(payload)

    async def fetch_finality_checkpoints(self) -> FinalityCheckpoints:
        """
        Fetch the justified and finalized checkpoints of the head state.

        Raises:
            BeaconNodeError: If the checkpoints cannot be fetched.
        """
        payload = await get_json(self.client, self.endpoint, FINALITY_CHECKPOINTS_PATH)
        return parse_as(FinalityCheckpoints, self.endpoint, payload)

    def to_json(self) -> dict[str, Any]:
        """Describe the node for the browser."""
        return {
            "id": self.id,
            "version": self.version,
            "slot": self.latest_head.slot,
            "root": self.latest_head.root,
            "healthy": self.is_healthy,
            "syncing": self.is_syncing,
        }

    async def aclose(self) -> None:
        """Release the HTTP client."""
        await self.client.aclose()

    def __str__(self) -> str:
        return (
            f"[healthy: {str(self.is_healthy).lower()}] {self.version} "
            f"at {self.endpoint} has head {self.latest_head}"
        )
