"""Exception hierarchy for the fork monitor."""

from __future__ import annotations


class MonitorError(Exception):
    """
    Base exception for all monitor errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class InvalidInputError(MonitorError):
    """
    Raised when fork choice data is structurally malformed.

    Malformed data points at an upstream parsing bug, so it must surface
    instead of being patched with defaults.

    Attributes:
        index: Position of the offending proto-array entry, when known.
    """

    def __init__(self, message: str, *, index: int | None = None) -> None:
        self.index = index
        if index is not None:
            message = f"proto-array node {index}: {message}"
        super().__init__(message)


class BeaconNodeError(MonitorError):
    """
    Raised when a beacon node cannot be reached or returns unusable data.

    Attributes:
        endpoint: Base URL of the node that failed.
    """

    def __init__(self, endpoint: str, detail: str) -> None:
        self.endpoint = endpoint
        self.detail = detail
        super().__init__(f"{endpoint}: {detail}")
