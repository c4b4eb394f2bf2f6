"""Tests for the Graphviz export."""

from __future__ import annotations

import hashlib

from fork_mon.forkchoice import ForkChoiceNode, build_dot, compact_single_children, humanize_root
from tests.fork_mon.helpers import make_chain


class TestHumanizeRoot:
    """Tests for root shortening."""

    def test_full_root_is_shortened(self) -> None:
        """First and last two bytes are kept."""
        root = "0x" + hashlib.sha256(b"a").hexdigest()

        assert humanize_root(root) == "ca97..48bb"

    def test_other_lengths_are_unchanged(self) -> None:
        """Anything that is not a 32-byte hex root is left alone."""
        assert humanize_root("0xabcd") == "0xabcd"
        assert humanize_root("") == ""


class TestBuildDot:
    """Tests for DOT rendering."""

    def test_fork(self) -> None:
        """Canonical blocks are filled and edges point at parents."""
        tree = ForkChoiceNode(
            slot="1",
            root="0xaa",
            is_canonical=True,
            children=(
                ForkChoiceNode(slot="2", root="0xbb", is_canonical=True),
                ForkChoiceNode(slot="2", root="0xcc"),
            ),
        )

        assert build_dot(tree) == (
            "digraph  {\n"
            '\tn1 [label="(1,0xaa) (0)",fillcolor="#fdfd96",style="filled"];\n'
            '\tn2 [label="(2,0xbb) (0)",fillcolor="#fdfd96",style="filled"];\n'
            "\tn2 -> n1;\n"
            '\tn3 [label="(2,0xcc) (0)"];\n'
            "\tn3 -> n1;\n"
            "}\n"
        )

    def test_collapsed_counts_in_labels(self) -> None:
        """Compacted trees show how many blocks each edge hides."""
        dot = build_dot(compact_single_children(make_chain(4, canonical=False)))

        assert 'n1 [label="(0,' in dot
        assert ') (2)"];' in dot
        assert dot.count("->") == 1

    def test_deep_chain_does_not_recurse(self) -> None:
        """Every block gets a node and an edge to its parent."""
        dot = build_dot(make_chain(20_000))

        assert dot.count("->") == 19_999
        assert "\tn20000 -> n19999;" in dot
