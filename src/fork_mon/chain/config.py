"""
Chain Timing Configuration

Time parameters of the monitored beacon chain and the polling cadence
of the monitor itself.
"""

from pydantic import Field
from typing_extensions import Final

from fork_mon.types import StrictBaseModel

# --- Time Parameters ---

SECONDS_PER_SLOT: Final = 12
"""The fixed duration of a single slot in seconds (mainnet preset)."""

SLOTS_PER_EPOCH: Final = 32
"""The number of slots in an epoch (mainnet preset)."""

# --- Monitor Cadence ---

HEAD_POLLING_INTERVAL: Final = 1.0
"""Seconds between two rounds of head polling across all nodes."""

EPOCHS_TO_SEND: Final = 4
"""Number of trailing epochs of the block tree served to the browser."""


class Eth2Config(StrictBaseModel):
    """
    Timing parameters of the chain under observation.

    Served verbatim to the browser so its slot clock agrees with ours.
    """

    seconds_per_slot: int = Field(default=SECONDS_PER_SLOT, gt=0)
    """Duration of a slot in seconds."""

    genesis_time: int = Field(ge=0)
    """Unix timestamp (seconds) when slot 0 began."""

    slots_per_epoch: int = Field(default=SLOTS_PER_EPOCH, gt=0)
    """Number of slots in an epoch."""

    network: str = "mainnet"
    """Network name, used by the browser to build block explorer links."""
