"""
Fork choice tree reconstruction.

Rebuilds the block tree from a node's proto-array dump, marks the
canonical chain, and compacts or prunes the tree for display.
"""

from .dot import build_dot, humanize_root
from .proto_array import (
    ProtoArrayNode,
    extract_total_weight,
    parse_proto_array,
    select_head_index,
)
from .prune import prune_for_browser
from .tree import (
    ForkChoiceNode,
    compact_single_children,
    compute_summary,
    count_tree,
    roll_proto_array,
    tree_size,
)

__all__ = [
    "ForkChoiceNode",
    "ProtoArrayNode",
    "build_dot",
    "compact_single_children",
    "compute_summary",
    "count_tree",
    "extract_total_weight",
    "humanize_root",
    "parse_proto_array",
    "prune_for_browser",
    "roll_proto_array",
    "select_head_index",
    "tree_size",
]
