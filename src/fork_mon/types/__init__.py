"""Reusable type definitions for the fork monitor."""

from .base import CamelModel, StrictBaseModel, WireModel
from .exceptions import BeaconNodeError, InvalidInputError, MonitorError

__all__ = [
    # Models
    "CamelModel",
    "StrictBaseModel",
    "WireModel",
    # Exceptions
    "MonitorError",
    "InvalidInputError",
    "BeaconNodeError",
]
