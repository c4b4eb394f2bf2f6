"""Graphviz DOT rendering of a block tree, for offline inspection."""

from __future__ import annotations

from .tree import ForkChoiceNode

CANONICAL_FILL_COLOR = "#fdfd96"
"""Fill color of canonical blocks."""

_ROOT_HEX_LENGTH = 66
"""Length of a 0x-prefixed 32-byte root."""


def humanize_root(root: str) -> str:
    """Shorten a 32-byte hex root to its first and last two bytes."""
    if len(root) != _ROOT_HEX_LENGTH:
        return root
    return f"{root[2:6]}..{root[-4:]}"


def node_label(node: ForkChoiceNode) -> str:
    """Label a block with its slot, short root and collapsed block count."""
    return f"({node.slot},{humanize_root(node.root)}) ({node.count_collapsed_blocks or 0})"


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_dot(tree: ForkChoiceNode) -> str:
    """
    Render the tree as a directed graph.

    Edges point from each block to its parent, like block parent roots do.
    Canonical blocks are filled.
    """
    lines = ["digraph  {"]
    stack: list[tuple[ForkChoiceNode, str | None]] = [(tree, None)]
    counter = 0

    while stack:
        node, parent_id = stack.pop()
        counter += 1
        node_id = f"n{counter}"

        attrs = [f"label={_quote(node_label(node))}"]
        if node.is_canonical:
            attrs.append(f"fillcolor={_quote(CANONICAL_FILL_COLOR)}")
            attrs.append('style="filled"')
        lines.append(f"\t{node_id} [{','.join(attrs)}];")

        if parent_id is not None:
            lines.append(f"\t{node_id} -> {parent_id};")

        stack.extend((child, node_id) for child in reversed(node.children))

    lines.append("}")
    return "\n".join(lines) + "\n"
