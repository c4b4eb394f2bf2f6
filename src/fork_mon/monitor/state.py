"""
Shared fork choice state.

The polling service publishes a new snapshot after every successful
rebuild while HTTP handlers read the current one. A snapshot is never
modified: publishing swaps the reference under a lock, so readers see
either the previous complete tree or the new one.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from fork_mon.beacon import HeadRef
from fork_mon.forkchoice import ForkChoiceNode


@dataclass(frozen=True, slots=True)
class ForkChoiceSnapshot:
    """One fork choice tree together with the data it was built from."""

    tree: ForkChoiceNode = field(default_factory=ForkChoiceNode.empty)
    """Block tree rolled from the provider's proto-array."""

    total_weight: float = 0.0
    """Weight of the anchor, i.e. every vote counted in the tree."""

    head: HeadRef = field(default_factory=HeadRef)
    """Provider head at the time the proto-array was fetched."""


@dataclass(slots=True)
class SnapshotHolder:
    """Single-writer, many-reader slot for the current snapshot."""

    _snapshot: ForkChoiceSnapshot = field(default_factory=ForkChoiceSnapshot)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def current(self) -> ForkChoiceSnapshot:
        """Copy out the current snapshot. Hold the lock only for the read."""
        with self._lock:
            return self._snapshot

    def publish(self, snapshot: ForkChoiceSnapshot) -> None:
        """Replace the current snapshot wholesale."""
        with self._lock:
            self._snapshot = snapshot
