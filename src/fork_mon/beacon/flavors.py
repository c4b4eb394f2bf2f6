"""
Per-implementation access to a beacon node.

Most clients serve the standard Beacon API. Some older releases do not:
Prysm serves its own v1alpha1 API with base64 roots, and Nimbus answers
JSON-RPC on the endpoint root. The differences are isolated behind
`NodeFlavor`, chosen once when a node is registered.
"""

from __future__ import annotations

import base64
import binascii
import logging
import secrets
from abc import ABC, abstractmethod
from typing import Any, ClassVar, TypeVar

import httpx
from pydantic import ValidationError

from fork_mon.types import BeaconNodeError, WireModel

from .responses import (
    HeadHeader,
    HeadRef,
    NimbusChainHead,
    NodeIdentity,
    NodeVersion,
    PrysmChainHead,
    PrysmVersion,
    SyncStatus,
)

logger = logging.getLogger(__name__)

CLIENT_VERSION_PATH = "/eth/v1/node/version"
NODE_IDENTITY_PATH = "/eth/v1/node/identity"
NODE_SYNCING_PATH = "/eth/v1/node/syncing"
HEAD_HEADER_PATH = "/eth/v1/beacon/headers/head"
PRYSM_VERSION_PATH = "/eth/v1alpha1/node/version"
PRYSM_CHAIN_HEAD_PATH = "/eth/v1alpha1/beacon/chainhead"

M = TypeVar("M", bound=WireModel)


async def get_json(client: httpx.AsyncClient, endpoint: str, path: str) -> Any:
    """
    GET a JSON document from a node.

    Raises:
        BeaconNodeError: On network errors, non-2xx statuses or invalid JSON.
    """
    try:
        response = await client.get(f"{endpoint}{path}")
        response.raise_for_status()
        return response.json()
    except httpx.RequestError as exc:
        raise BeaconNodeError(endpoint, f"network error on {path}: {exc!r}") from exc
    except httpx.HTTPStatusError as exc:
        raise BeaconNodeError(
            endpoint, f"HTTP {exc.response.status_code} on {path}: {exc.response.text[:200]}"
        ) from exc
    except ValueError as exc:
        raise BeaconNodeError(endpoint, f"invalid JSON on {path}: {exc}") from exc


async def call_json_rpc(client: httpx.AsyncClient, endpoint: str, method: str) -> Any:
    """
    Call a parameterless JSON-RPC method and return its result.

    Raises:
        BeaconNodeError: On transport errors or a response without result.
    """
    request = {"jsonrpc": "2.0", "id": secrets.token_hex(32), "method": method, "params": []}
    try:
        response = await client.post(endpoint, json=request)
        response.raise_for_status()
        payload = response.json()
    except httpx.RequestError as exc:
        raise BeaconNodeError(endpoint, f"network error on {method}: {exc!r}") from exc
    except httpx.HTTPStatusError as exc:
        raise BeaconNodeError(endpoint, f"HTTP {exc.response.status_code} on {method}") from exc
    except ValueError as exc:
        raise BeaconNodeError(endpoint, f"invalid JSON on {method}: {exc}") from exc

    if not isinstance(payload, dict) or "result" not in payload:
        raise BeaconNodeError(endpoint, f"{method} returned no result")
    return payload["result"]


def parse_as(model: type[M], endpoint: str, payload: Any, *, envelope: bool = True) -> M:
    """
    Validate a payload into a response model.

    Standard Beacon API payloads wrap their content in a ``data`` member;
    ``envelope`` unwraps it first.

    Raises:
        BeaconNodeError: If the payload does not have the expected shape.
    """
    if envelope:
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
            raise BeaconNodeError(endpoint, f"{model.__name__}: data not a map or missing")
        payload = payload["data"]
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise BeaconNodeError(endpoint, f"unexpected {model.__name__}: {exc}") from exc


def decode_prysm_root(root_as_b64: str) -> str:
    """Convert a base64 encoded root to unprefixed hex."""
    return base64.b64decode(root_as_b64, validate=True).hex()


class NodeFlavor(ABC):
    """Capability interface over one beacon node implementation's API."""

    name: ClassVar[str]
    """Short identifier used in logs."""

    drops_stale_heads: ClassVar[bool] = False
    """Whether a head older than the last one seen should be ignored."""

    @abstractmethod
    async def fetch_version(self, client: httpx.AsyncClient, endpoint: str) -> str:
        """Return the node's version string."""

    @abstractmethod
    async def fetch_head(self, client: httpx.AsyncClient, endpoint: str) -> HeadRef:
        """Return the node's current head."""

    async def fetch_identity(self, client: httpx.AsyncClient, endpoint: str) -> str:
        """
        Return a value uniquely identifying the node.

        Defaults to the endpoint for APIs without an identity route.
        """
        return endpoint

    async def fetch_sync_status(self, client: httpx.AsyncClient, endpoint: str) -> bool | None:
        """Return whether the node is syncing, or None when unknown."""
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class StandardFlavor(NodeFlavor):
    """Nodes serving the standard Beacon API."""

    name = "standard"

    async def fetch_version(self, client: httpx.AsyncClient, endpoint: str) -> str:
        payload = await get_json(client, endpoint, CLIENT_VERSION_PATH)
        return parse_as(NodeVersion, endpoint, payload).version

    async def fetch_identity(self, client: httpx.AsyncClient, endpoint: str) -> str:
        payload = await get_json(client, endpoint, NODE_IDENTITY_PATH)
        return parse_as(NodeIdentity, endpoint, payload).peer_id

    async def fetch_head(self, client: httpx.AsyncClient, endpoint: str) -> HeadRef:
        payload = await get_json(client, endpoint, HEAD_HEADER_PATH)
        head = parse_as(HeadHeader, endpoint, payload)
        return HeadRef(slot=head.header.message.slot, root=head.root)

    async def fetch_sync_status(self, client: httpx.AsyncClient, endpoint: str) -> bool | None:
        """
        Interpret the syncing route.

        Returns None when the node answers without a data member, which
        happens before genesis.
        """
        payload = await get_json(client, endpoint, NODE_SYNCING_PATH)
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
            return None

        status = parse_as(SyncStatus, endpoint, payload)
        if status.is_syncing is not None:
            return status.is_syncing
        if status.sync_distance is None:
            raise BeaconNodeError(endpoint, "sync status has neither is_syncing nor sync_distance")
        try:
            return int(status.sync_distance) > 1
        except ValueError as exc:
            raise BeaconNodeError(endpoint, f"bad sync distance {status.sync_distance!r}") from exc


class PrysmFlavor(NodeFlavor):
    """Prysm releases serving the v1alpha1 API."""

    name = "prysm"
    drops_stale_heads = True

    async def fetch_version(self, client: httpx.AsyncClient, endpoint: str) -> str:
        payload = await get_json(client, endpoint, PRYSM_VERSION_PATH)
        return parse_as(PrysmVersion, endpoint, payload, envelope=False).version

    async def fetch_head(self, client: httpx.AsyncClient, endpoint: str) -> HeadRef:
        payload = await get_json(client, endpoint, PRYSM_CHAIN_HEAD_PATH)
        head = parse_as(PrysmChainHead, endpoint, payload, envelope=False)
        try:
            root = decode_prysm_root(head.head_block_root)
        except (binascii.Error, ValueError) as exc:
            raise BeaconNodeError(endpoint, f"bad base64 root {head.head_block_root!r}") from exc
        return HeadRef(slot=head.head_slot, root=f"0x{root}")


class NimbusFlavor(NodeFlavor):
    """Nimbus releases answering JSON-RPC."""

    name = "nimbus"

    async def fetch_version(self, client: httpx.AsyncClient, endpoint: str) -> str:
        result = await call_json_rpc(client, endpoint, "getNodeVersion")
        if not isinstance(result, str):
            raise BeaconNodeError(endpoint, "bad version string")
        return result

    async def fetch_head(self, client: httpx.AsyncClient, endpoint: str) -> HeadRef:
        result = await call_json_rpc(client, endpoint, "getChainHead")
        head = parse_as(NimbusChainHead, endpoint, result, envelope=False)
        return HeadRef(slot=str(head.head_slot), root=f"0x{head.head_block_root}")


async def detect_flavor(client: httpx.AsyncClient, endpoint: str) -> NodeFlavor:
    """
    Pick the flavor of a node from how it answers the standard version route.

    A 404 means the standard API is missing (Prysm); a 411 is how Nimbus
    rejects a body-less request on its JSON-RPC server.

    Raises:
        BeaconNodeError: If the node cannot be reached.
    """
    try:
        response = await client.get(f"{endpoint}{CLIENT_VERSION_PATH}")
    except httpx.RequestError as exc:
        raise BeaconNodeError(endpoint, f"network error on {CLIENT_VERSION_PATH}: {exc!r}") from exc

    flavor: NodeFlavor
    if response.status_code == httpx.codes.NOT_FOUND:
        flavor = PrysmFlavor()
    elif response.status_code == httpx.codes.LENGTH_REQUIRED:
        flavor = NimbusFlavor()
    else:
        flavor = StandardFlavor()

    logger.debug("Detected %s API at %s", flavor.name, endpoint)
    return flavor
