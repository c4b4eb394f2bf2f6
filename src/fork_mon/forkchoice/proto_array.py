"""
Proto-array ingestion.

A proto-array is a node's internal fork choice scoring structure: a flat,
index-addressed list of blocks where each entry points at its parent by
position. Indices are only meaningful within one dump. They are never
stored across refreshes.
"""

from __future__ import annotations

from typing import Any, Sequence

from pydantic import Field, ValidationError

from fork_mon.types import InvalidInputError, WireModel


class ProtoArrayNode(WireModel):
    """One weighted block of a proto-array dump."""

    slot: str
    """Block slot as a decimal string (wire format)."""

    root: str
    """Block root as 0x-prefixed hex."""

    parent_index: int | None = Field(default=None, alias="parent")
    """Index of the parent entry in the same dump; None for the anchor."""

    weight: float
    """Accumulated attestation weight of this block and its descendants."""

    best_descendant_index: int | None = Field(default=None, alias="best_descendant")
    """Index of the head this subtree currently leads to; None for leaves."""


def parse_proto_array(payload: Any) -> list[ProtoArrayNode]:
    """
    Validate a raw proto-array dump.

    Accepts either the bare list of node records or the envelope served by
    Lighthouse (``{"data": {"nodes": [...]}}``).

    Raises:
        InvalidInputError: If the payload is empty or any record is malformed.
    """
    if isinstance(payload, dict):
        try:
            payload = payload["data"]["nodes"]
        except (KeyError, TypeError) as e:
            raise InvalidInputError(f"missing data.nodes in proto-array envelope: {e!r}") from e

    if not isinstance(payload, list):
        raise InvalidInputError(f"proto-array must be a list, got {type(payload).__name__}")

    if not payload:
        raise InvalidInputError("proto-array is empty")

    nodes = []
    for index, record in enumerate(payload):
        try:
            nodes.append(ProtoArrayNode.model_validate(record))
        except ValidationError as e:
            raise InvalidInputError(str(e), index=index) from e
    return nodes


def select_head_index(nodes: Sequence[ProtoArrayNode]) -> int | None:
    """
    Return the index of the canonical head.

    The anchor entry's best descendant is the head its fork choice selected.
    """
    if not nodes:
        raise InvalidInputError("proto-array is empty")
    return nodes[0].best_descendant_index


def extract_total_weight(nodes: Sequence[ProtoArrayNode]) -> float:
    """
    Return the total weight tracked by the dump.

    Weights accumulate upward, so the anchor carries every vote in the tree.
    """
    if not nodes:
        raise InvalidInputError("proto-array is empty")
    return nodes[0].weight
