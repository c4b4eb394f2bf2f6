"""
Block tree reconstruction from a proto-array dump.

Pure functions turning the flat, parent-indexed proto-array into a nested
tree annotated with canonical chain membership, and compacting that tree
for display.

None of these functions touch shared state or perform I/O, so they are
safe to call from any thread. All traversals are iterative: a chain can
be thousands of slots deep during periods of non-finality.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Iterator, Sequence

from fork_mon.types import InvalidInputError

from .proto_array import ProtoArrayNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ForkChoiceNode:
    """
    A block in the reconstructed fork choice tree.

    Trees are immutable: every refresh builds a new one.
    """

    slot: str
    """Block slot as a decimal string."""

    root: str
    """Block root as 0x-prefixed hex."""

    weight: float = 0.0
    """Accumulated attestation weight of this block and its descendants."""

    is_canonical: bool = False
    """Whether the block lies on the path from the anchor to the head."""

    children: tuple[ForkChoiceNode, ...] = ()
    """Child blocks in proto-array discovery order."""

    count_collapsed_blocks: int | None = None
    """Single-child blocks elided below this node. Set only by compaction."""

    @classmethod
    def empty(cls) -> ForkChoiceNode:
        """The placeholder tree served before any proto-array was processed."""
        return cls(slot="", root="")

    def to_json(self) -> dict[str, Any]:
        """Render the tree as the nested dict served to the browser."""
        rendered: dict[int, dict[str, Any]] = {}
        for node in iter_post_order(self):
            entry: dict[str, Any] = {
                "children": [rendered[id(child)] for child in node.children],
                "slot": node.slot,
                "root": node.root,
                "weight": node.weight,
                "is_canonical": node.is_canonical,
            }
            if node.count_collapsed_blocks is not None:
                entry["count_collapsed_blocks"] = node.count_collapsed_blocks
            rendered[id(node)] = entry
        return rendered[id(self)]


def iter_pre_order(tree: ForkChoiceNode) -> Iterator[ForkChoiceNode]:
    """Yield every node, parents before children, siblings in order."""
    stack = [tree]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def iter_post_order(tree: ForkChoiceNode) -> Iterator[ForkChoiceNode]:
    """Yield every node, children before parents, siblings in order."""
    stack: list[tuple[ForkChoiceNode, bool]] = [(tree, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            yield node
            continue
        stack.append((node, True))
        stack.extend((child, False) for child in reversed(node.children))


def count_tree(node: ForkChoiceNode) -> int:
    """Count the descendants of a node (the node itself excluded)."""
    return tree_size(node) - 1


def tree_size(node: ForkChoiceNode) -> int:
    """Count the nodes of a tree, its root included."""
    return sum(1 for _ in iter_pre_order(node))


def roll_proto_array(
    proto_array: Sequence[ProtoArrayNode], canonical_head_index: int | None
) -> ForkChoiceNode:
    """
    Turn the flat proto-array into a nested block tree.

    A node starts out canonical when its best descendant is the canonical
    head, or when it is the head itself. Proto-arrays do not mark blocks
    that extend a canonical block without any fork, so a canonical node
    with exactly one child also makes that child canonical. This restores
    a contiguous canonical chain from the anchor to the head. Inference
    stops at the head, so blocks built on top of it stay non-canonical.

    Args:
        proto_array: Nodes in registration order; parents are referenced by index.
        canonical_head_index: Index of the head (the anchor's best descendant).

    Returns:
        The tree rooted at the single parentless entry.

    Raises:
        InvalidInputError: If the array is empty, has duplicate roots,
            dangling or self-referencing parents, several or no parentless
            entries, or entries unreachable from the anchor.
    """
    if not proto_array:
        raise InvalidInputError("proto-array is empty")

    # One pass: root -> descriptor, parent root -> ordered child roots.
    nodes: dict[str, ProtoArrayNode] = {}
    provisional: dict[str, bool] = {}
    children_index: dict[str, list[str]] = {}
    anchors: list[str] = []

    for index, proto_node in enumerate(proto_array):
        root = proto_node.root
        if root in nodes:
            raise InvalidInputError(f"duplicate root {root}", index=index)

        nodes[root] = proto_node
        provisional[root] = canonical_head_index is not None and (
            proto_node.best_descendant_index == canonical_head_index
            or index == canonical_head_index
        )

        parent_index = proto_node.parent_index
        if parent_index is None:
            anchors.append(root)
            continue
        if not 0 <= parent_index < len(proto_array) or parent_index == index:
            raise InvalidInputError(f"invalid parent index {parent_index}", index=index)
        children_index.setdefault(proto_array[parent_index].root, []).append(root)

    if len(anchors) != 1:
        raise InvalidInputError(f"expected exactly one parentless node, found {len(anchors)}")

    head_root = None
    if canonical_head_index is not None and 0 <= canonical_head_index < len(proto_array):
        head_root = proto_array[canonical_head_index].root

    # Top-down: settle canonical flags and the traversal order.
    # The canonical chain ends at the head; blocks below it are never inferred.
    anchor = anchors[0]
    canonical = {anchor: provisional[anchor]}
    order: list[str] = []
    stack = [anchor]
    while stack:
        root = stack.pop()
        order.append(root)
        children = children_index.get(root, [])
        inherits = canonical[root] and len(children) == 1 and root != head_root
        for child in children:
            canonical[child] = provisional[child] or inherits
        stack.extend(reversed(children))

    if len(order) != len(proto_array):
        raise InvalidInputError(
            f"{len(proto_array) - len(order)} nodes are not reachable from anchor {anchor}"
        )

    # Bottom-up: children are always materialized before their parent.
    built: dict[str, ForkChoiceNode] = {}
    for root in reversed(order):
        proto_node = nodes[root]
        built[root] = ForkChoiceNode(
            slot=proto_node.slot,
            root=root,
            weight=proto_node.weight,
            is_canonical=canonical[root],
            children=tuple(built.pop(child) for child in children_index.get(root, [])),
        )

    logger.debug(
        "Rolled proto-array: %d nodes, %d canonical",
        len(order),
        sum(canonical.values()),
    )
    return built[anchor]


def compact_single_children(tree: ForkChoiceNode) -> ForkChoiceNode:
    """
    Summarize a block tree by only keeping the root, forks and leaves.

    Every run of single-child blocks is replaced by one edge to the first
    block below it that is a leaf or a fork point. The number of skipped
    blocks is added to ``count_collapsed_blocks`` of the node above the run.

    Returns a new tree; the input is left untouched.
    """
    # For a node with one child: the node its edge collapses onto, and how
    # many blocks that skips. Filled in post-order so a run is walked once.
    collapse: dict[int, tuple[ForkChoiceNode, int]] = {}
    compacted: dict[int, ForkChoiceNode] = {}

    for node in iter_post_order(tree):
        skipped = 0
        if len(node.children) == 1:
            child = node.children[0]
            if len(child.children) == 1:
                target, below = collapse[id(child)]
                skipped = below + 1
            else:
                target = child
            collapse[id(node)] = (target, skipped)
            children: tuple[ForkChoiceNode, ...] = (compacted[id(target)],)
        else:
            children = tuple(compacted[id(child)] for child in node.children)

        compacted[id(node)] = replace(
            node,
            children=children,
            count_collapsed_blocks=(node.count_collapsed_blocks or 0) + skipped,
        )

    return compacted[id(tree)]


def compute_summary(
    proto_array: Sequence[ProtoArrayNode],
    canonical_head_index: int | None,
    *,
    compact: bool = False,
) -> ForkChoiceNode:
    """
    Build the block tree served by the monitor.

    The served tree is uncompacted by default; ``compact`` collapses
    single-child runs before serving.
    """
    block_tree = roll_proto_array(proto_array, canonical_head_index)
    if compact:
        return compact_single_children(block_tree)
    return block_tree
