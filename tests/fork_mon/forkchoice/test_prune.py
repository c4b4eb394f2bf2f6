"""Tests for trimming the block tree to the display window."""

from __future__ import annotations

import logging

import pytest
from hypothesis import given
from hypothesis import strategies as st

from fork_mon.forkchoice import ForkChoiceNode, prune_for_browser, roll_proto_array
from fork_mon.forkchoice.prune import compute_target_slot, parse_slot
from tests.fork_mon.helpers import make_chain, make_clock, make_proto_array, make_root
from tests.fork_mon.helpers.trees import parent_lists


class TestComputeTargetSlot:
    """Tests for the start of the display window."""

    @pytest.mark.parametrize(
        ("current_slot", "expected"),
        [
            (0, 0),
            (4 * 32 - 1, 0),
            (4 * 32, 0),
            (5 * 32, 32),
            (10 * 32 + 17, 6 * 32),
        ],
    )
    def test_window_of_four_epochs(self, current_slot: int, expected: int) -> None:
        """The window starts at the first slot four epochs back."""
        assert compute_target_slot(make_clock(current_slot)) == expected

    def test_custom_window(self) -> None:
        """The number of trailing epochs is configurable."""
        assert compute_target_slot(make_clock(10 * 32), window_epochs=1) == 9 * 32


class TestPruneForBrowser:
    """Tests for the pruner."""

    def test_young_chain_is_served_whole(self) -> None:
        """Before the window fills up, the anchor is returned as is."""
        tree = make_chain(10)

        assert prune_for_browser(tree, make_clock(9)) is tree

    def test_walks_canonical_chain_to_window(self) -> None:
        """The returned subtree starts at the first canonical block in the window."""
        tree = make_chain(300)

        pruned = prune_for_browser(tree, make_clock(299))

        # Slot 299 lies in epoch 9, so the window starts at epoch 5.
        assert pruned.slot == "160"
        assert pruned.root == make_root(160)

    def test_follows_canonical_branch_at_forks(self) -> None:
        """Non-canonical siblings are skipped."""
        canonical = make_chain(3, start_slot=1)
        orphan = ForkChoiceNode(slot="1", root="0xorphan")
        tree = ForkChoiceNode(
            slot="0", root="0xanchor", is_canonical=True, children=(orphan, canonical)
        )

        pruned = prune_for_browser(tree, make_clock(2, slots_per_epoch=1), window_epochs=0)

        assert pruned.root == make_root(2)

    def test_stops_at_leaf(self) -> None:
        """A chain ending before the window yields its last block."""
        tree = make_chain(5)

        assert prune_for_browser(tree, make_clock(1000)).slot == "4"

    def test_stops_without_canonical_child(self, caplog: pytest.LogCaptureFixture) -> None:
        """When no child is canonical, the current block is returned with a warning."""
        tree = make_chain(5, canonical=False)

        with caplog.at_level(logging.WARNING):
            pruned = prune_for_browser(tree, make_clock(1000))

        assert pruned is tree
        assert "No canonical child" in caplog.text

    def test_unparsable_slot_returns_node(self, caplog: pytest.LogCaptureFixture) -> None:
        """The placeholder tree is served unchanged."""
        tree = ForkChoiceNode.empty()

        with caplog.at_level(logging.WARNING):
            pruned = prune_for_browser(tree, make_clock(1000))

        assert pruned is tree
        assert "Cannot parse slot" in caplog.text

    @pytest.mark.parametrize("slot", ["1_0", " 10", "10 ", "+10", "-1", "１０"])
    def test_non_decimal_slot_returns_node(
        self, slot: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Slots must be plain ASCII digits; anything else stops the walk."""
        tree = ForkChoiceNode(
            slot=slot, root="0xanchor", is_canonical=True, children=(make_chain(3, start_slot=11),)
        )

        with caplog.at_level(logging.WARNING):
            pruned = prune_for_browser(tree, make_clock(1000))

        assert pruned is tree
        assert "Cannot parse slot" in caplog.text


class TestParseSlot:
    """Tests for slot string parsing."""

    def test_decimal(self) -> None:
        """Plain digits parse, leading zeros included."""
        assert parse_slot("0") == 0
        assert parse_slot("0042") == 42

    @pytest.mark.parametrize("slot", ["", "1_0", " 1", "+1", "1.0", "0x10", "٣"])
    def test_rejects_non_decimal(self, slot: str) -> None:
        """Underscores, whitespace, signs and non-ASCII digits are rejected."""
        with pytest.raises(ValueError, match="invalid slot"):
            parse_slot(slot)


@given(parents=parent_lists(), data=st.data())
def test_property_prune_follows_canonical_children(
    parents: list[int | None], data: st.DataObject
) -> None:
    """The pruned root is reached from the input root through canonical blocks only."""
    head = data.draw(st.integers(min_value=0, max_value=len(parents) - 1))
    current_slot = data.draw(st.integers(min_value=0, max_value=2 * len(parents)))
    tree = roll_proto_array(make_proto_array(parents, head=head), head)

    pruned = prune_for_browser(tree, make_clock(current_slot, slots_per_epoch=2), window_epochs=1)

    assert int(pruned.slot) >= int(tree.slot)
    node = tree
    while node is not pruned:
        node = next(child for child in node.children if child.is_canonical)
