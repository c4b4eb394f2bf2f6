"""
Beacon node client.

Polls each monitored node's REST API for its head and sync status, and
reads the proto-array dump from Lighthouse nodes.
"""

from .flavors import (
    NimbusFlavor,
    NodeFlavor,
    PrysmFlavor,
    StandardFlavor,
    decode_prysm_root,
    detect_flavor,
)
from .node import DEFAULT_TIMEOUT, BeaconNode, id_hash_of
from .responses import Checkpoint, FinalityCheckpoints, HeadRef

__all__ = [
    "DEFAULT_TIMEOUT",
    "BeaconNode",
    "Checkpoint",
    "FinalityCheckpoints",
    "HeadRef",
    "NimbusFlavor",
    "NodeFlavor",
    "PrysmFlavor",
    "StandardFlavor",
    "decode_prysm_root",
    "detect_flavor",
    "id_hash_of",
]
