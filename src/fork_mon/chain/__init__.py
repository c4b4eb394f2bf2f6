"""Chain timing parameters and the wall-clock slot converter."""

from .clock import SlotClock
from .config import EPOCHS_TO_SEND, HEAD_POLLING_INTERVAL, Eth2Config

__all__ = [
    "EPOCHS_TO_SEND",
    "HEAD_POLLING_INTERVAL",
    "Eth2Config",
    "SlotClock",
]
