"""
Slot Clock
==========

Time-to-slot conversion for the monitored chain.

The monitor needs wall-clock slots in two places: aligning the polling
loop to slot boundaries, and deciding which part of the block tree is
recent enough to send to the browser.
"""

from dataclasses import dataclass
from time import time as wall_time
from typing import Callable

from .config import SECONDS_PER_SLOT, SLOTS_PER_EPOCH, Eth2Config


@dataclass(frozen=True, slots=True)
class SlotClock:
    """
    Converts wall-clock time to slots and epochs.

    All time values are in seconds (Unix timestamps).
    """

    genesis_time: int
    """Unix timestamp (seconds) when slot 0 began."""

    seconds_per_slot: int = SECONDS_PER_SLOT
    """Duration of a slot in seconds."""

    slots_per_epoch: int = SLOTS_PER_EPOCH
    """Number of slots in an epoch."""

    time_fn: Callable[[], float] = wall_time
    """Time source function (injectable for testing)."""

    @classmethod
    def from_config(
        cls, config: Eth2Config, time_fn: Callable[[], float] = wall_time
    ) -> "SlotClock":
        """Build a clock from the chain configuration."""
        return cls(
            genesis_time=config.genesis_time,
            seconds_per_slot=config.seconds_per_slot,
            slots_per_epoch=config.slots_per_epoch,
            time_fn=time_fn,
        )

    def current_time(self) -> int:
        """Get current wall-clock time as a whole Unix timestamp in seconds."""
        return int(self.time_fn())

    def _seconds_since_genesis(self) -> int:
        """Seconds elapsed since genesis (0 if before genesis)."""
        return max(0, self.current_time() - self.genesis_time)

    def current_slot(self) -> int:
        """Get the current slot number (0 if before genesis)."""
        return self._seconds_since_genesis() // self.seconds_per_slot

    def current_epoch(self) -> int:
        """Get the current epoch number (0 if before genesis)."""
        return self.current_slot() // self.slots_per_epoch

    def seconds_until_next_slot(self) -> float:
        """
        Calculate seconds until the next slot boundary.

        Returns time until genesis if before genesis.
        Returns a full slot duration if exactly at a boundary.
        """
        elapsed = self.time_fn() - self.genesis_time

        if elapsed < 0:
            return -elapsed

        return self.seconds_per_slot - (elapsed % self.seconds_per_slot)
