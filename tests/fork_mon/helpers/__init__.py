"""Test helpers for fork monitor unit tests."""

from .builders import make_chain, make_clock, make_proto_array, make_proto_node, make_root
from .fake_beacon import FakeBeaconNode, head_payload, standard_routes

__all__ = [
    "FakeBeaconNode",
    "head_payload",
    "make_chain",
    "make_clock",
    "make_proto_array",
    "make_proto_node",
    "make_root",
    "standard_routes",
]
