"""
Response shapes of the beacon node APIs the monitor reads.

Field names follow the wire format. Camel case payloads (Prysm) are
matched through the camel case aliases of the base model.
"""

from __future__ import annotations

from dataclasses import dataclass

from fork_mon.types import WireModel


@dataclass(frozen=True, slots=True)
class HeadRef:
    """A node's view of its chain head."""

    slot: str = ""
    """Head slot as a decimal string; empty until first fetched."""

    root: str = ""
    """Head block root as 0x-prefixed hex; empty until first fetched."""

    def __str__(self) -> str:
        return f"({self.slot}, {self.root})"


# --- Standard Beacon API ---


class NodeVersion(WireModel):
    """Payload of /eth/v1/node/version."""

    version: str


class NodeIdentity(WireModel):
    """Payload of /eth/v1/node/identity."""

    peer_id: str


class SyncStatus(WireModel):
    """Payload of /eth/v1/node/syncing."""

    is_syncing: bool | None = None
    sync_distance: str | None = None


class _HeaderMessage(WireModel):
    slot: str


class _SignedHeader(WireModel):
    message: _HeaderMessage


class HeadHeader(WireModel):
    """Payload of /eth/v1/beacon/headers/head."""

    root: str
    header: _SignedHeader


class Checkpoint(WireModel):
    """An epoch boundary block."""

    epoch: str
    root: str


class FinalityCheckpoints(WireModel):
    """Payload of /eth/v1/beacon/states/head/finality_checkpoints."""

    current_justified: Checkpoint
    finalized: Checkpoint


# --- Prysm ---


class PrysmVersion(WireModel):
    """Payload of /eth/v1alpha1/node/version."""

    version: str


class PrysmChainHead(WireModel):
    """Payload of /eth/v1alpha1/beacon/chainhead (camel case keys)."""

    head_block_root: str
    """Base64 encoded root."""

    head_slot: str


# --- Nimbus JSON-RPC ---


class NimbusChainHead(WireModel):
    """Result of the getChainHead JSON-RPC method."""

    head_block_root: str
    """Hex root without 0x prefix."""

    head_slot: int
