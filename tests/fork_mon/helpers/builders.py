"""
Factory functions for constructing test fixtures.

Provides deterministic builders for proto-arrays, block trees and clocks.
"""

from __future__ import annotations

import hashlib
from collections.abc import Sequence

from fork_mon.chain import SlotClock
from fork_mon.forkchoice import ForkChoiceNode, ProtoArrayNode


def make_root(seed: object) -> str:
    """Create a deterministic 0x-prefixed 32-byte root from a seed."""
    return "0x" + hashlib.sha256(str(seed).encode()).hexdigest()


def make_proto_node(
    index: int,
    *,
    parent: int | None = None,
    slot: int | None = None,
    weight: float = 0.0,
    best_descendant: int | None = None,
) -> ProtoArrayNode:
    """Create a proto-array entry whose root derives from its index."""
    return ProtoArrayNode(
        slot=str(index if slot is None else slot),
        root=make_root(index),
        parent_index=parent,
        weight=weight,
        best_descendant_index=best_descendant,
    )


def make_proto_array(
    parents: Sequence[int | None],
    *,
    head: int | None = None,
) -> list[ProtoArrayNode]:
    """
    Create a proto-array from a parent list.

    Every ancestor of `head`, the head included, points its best
    descendant at the head. Entry i sits at slot i.
    """
    on_path: set[int] = set()
    cursor = head
    while cursor is not None:
        on_path.add(cursor)
        cursor = parents[cursor]

    return [
        make_proto_node(
            index,
            parent=parent,
            weight=float(len(parents) - index),
            best_descendant=head if index in on_path else None,
        )
        for index, parent in enumerate(parents)
    ]


def make_chain(length: int, *, start_slot: int = 0, canonical: bool = True) -> ForkChoiceNode:
    """Create a linear tree of `length` blocks at consecutive slots."""
    node: ForkChoiceNode | None = None
    for slot in reversed(range(start_slot, start_slot + length)):
        node = ForkChoiceNode(
            slot=str(slot),
            root=make_root(slot),
            is_canonical=canonical,
            children=(node,) if node is not None else (),
        )
    assert node is not None
    return node


def make_clock(slot: int, *, slots_per_epoch: int = 32, seconds_per_slot: int = 12) -> SlotClock:
    """Create a clock frozen in the middle of `slot`, with genesis at time 0."""
    now = slot * seconds_per_slot + seconds_per_slot / 2
    return SlotClock(
        genesis_time=0,
        seconds_per_slot=seconds_per_slot,
        slots_per_epoch=slots_per_epoch,
        time_fn=lambda: now,
    )
