"""
Browser pruning.

The browser only renders the recent past. Starting at the anchor, walk
down the canonical chain until reaching the first block inside the
trailing window of epochs, and serve the subtree rooted there.
"""

from __future__ import annotations

import logging

from fork_mon.chain import EPOCHS_TO_SEND, SlotClock

from .tree import ForkChoiceNode

logger = logging.getLogger(__name__)


def parse_slot(slot: str) -> int:
    """
    Parse a decimal slot string.

    Raises:
        ValueError: Unless the string is plain ASCII digits.
    """
    if not (slot.isascii() and slot.isdecimal()):
        raise ValueError(f"invalid slot {slot!r}")
    return int(slot)


def compute_target_slot(clock: SlotClock, window_epochs: int = EPOCHS_TO_SEND) -> int:
    """First slot of the oldest epoch still inside the window."""
    target_epoch = max(0, clock.current_epoch() - window_epochs)
    return target_epoch * clock.slots_per_epoch


def prune_for_browser(
    tree: ForkChoiceNode,
    clock: SlotClock,
    *,
    window_epochs: int = EPOCHS_TO_SEND,
) -> ForkChoiceNode:
    """
    Drop history older than the display window.

    Only canonical children are followed. The walk stops early, returning
    the node reached so far, when that node is a leaf, when no child is
    canonical, or when a slot cannot be parsed.

    Args:
        tree: Full block tree, possibly rooted at genesis.
        clock: Wall-clock slot source for the monitored chain.
        window_epochs: Number of trailing epochs to keep.

    Returns:
        The subtree rooted at the earliest canonical block in the window.
    """
    target_slot = compute_target_slot(clock, window_epochs)

    node = tree
    while True:
        try:
            slot = parse_slot(node.slot)
        except ValueError:
            logger.warning("Cannot parse slot %r of block %s", node.slot, node.root)
            return node

        if slot >= target_slot or not node.children:
            return node

        canonical_child = next((child for child in node.children if child.is_canonical), None)
        if canonical_child is None:
            logger.warning(
                "No canonical child below block %s at slot %d; pruning stops here",
                node.root,
                slot,
            )
            return node

        node = canonical_child
