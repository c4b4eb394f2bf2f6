"""Tree shapes and hypothesis strategies for fork choice tests."""

from __future__ import annotations

from typing import Any

from hypothesis import strategies as st
from hypothesis.strategies import DrawFn

from fork_mon.forkchoice import ForkChoiceNode


def tree_of(slot: str, *children: ForkChoiceNode, canonical: bool = False) -> ForkChoiceNode:
    """Create a node keyed by slot only, like hand-drawn test trees."""
    return ForkChoiceNode(slot=slot, root="", is_canonical=canonical, children=children)


def shape(tree: ForkChoiceNode) -> tuple[Any, ...]:
    """Reduce a tree to (slot, collapsed count, children shapes) for comparison."""
    return (
        tree.slot,
        tree.count_collapsed_blocks,
        [shape(child) for child in tree.children],
    )


@st.composite
def parent_lists(draw: DrawFn, max_size: int = 40) -> list[int | None]:
    """Parent lists of random spanning trees: entry i points at some j < i."""
    size = draw(st.integers(min_value=1, max_value=max_size))
    return [None] + [draw(st.integers(min_value=0, max_value=i - 1)) for i in range(1, size)]
