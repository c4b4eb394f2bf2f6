"""Polling service and the shared fork choice snapshot."""

from .service import MonitorService, register_node
from .state import ForkChoiceSnapshot, SnapshotHolder

__all__ = [
    "ForkChoiceSnapshot",
    "MonitorService",
    "SnapshotHolder",
    "register_node",
]
