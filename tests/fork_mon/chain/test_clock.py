"""Tests for the slot clock."""

from __future__ import annotations

import pytest

from fork_mon.chain import Eth2Config, SlotClock


class TestSlotClock:
    """Tests for wall-clock to slot conversion."""

    def test_from_config(self) -> None:
        """The clock takes its timing from the chain configuration."""
        config = Eth2Config(genesis_time=1000, seconds_per_slot=6, slots_per_epoch=8)

        clock = SlotClock.from_config(config, time_fn=lambda: 1000 + 6 * 8 * 3 + 7)

        assert clock.current_slot() == 25
        assert clock.current_epoch() == 3

    def test_before_genesis_is_slot_zero(self) -> None:
        """Slots and epochs are clamped at zero before genesis."""
        clock = SlotClock(genesis_time=1000, time_fn=lambda: 500.0)

        assert clock.current_slot() == 0
        assert clock.current_epoch() == 0

    def test_current_time_is_whole_seconds(self) -> None:
        """Fractions of a second are truncated."""
        clock = SlotClock(genesis_time=0, time_fn=lambda: 12.9)

        assert clock.current_time() == 12
        assert clock.current_slot() == 1

    @pytest.mark.parametrize(
        ("now", "expected"),
        [
            (500.0, 500.0),
            (1000.0, 12.0),
            (1003.5, 8.5),
            (1023.0, 1.0),
        ],
    )
    def test_seconds_until_next_slot(self, now: float, expected: float) -> None:
        """Time to the next boundary, or to genesis before it."""
        clock = SlotClock(genesis_time=1000, time_fn=lambda: now)

        assert clock.seconds_until_next_slot() == pytest.approx(expected)
