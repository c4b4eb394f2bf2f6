"""
Metrics module for observability.

Provides counters, gauges, and histograms for tracking the monitor.
Exposes metrics in Prometheus text format.
"""

from .registry import (
    REGISTRY,
    fork_choice_nodes,
    fork_choice_rebuild_failures,
    fork_choice_rebuild_time,
    fork_choice_rebuilds,
    generate_metrics,
    head_slot,
    nodes_healthy,
    nodes_total,
)

__all__ = [
    "REGISTRY",
    "fork_choice_nodes",
    "fork_choice_rebuild_failures",
    "fork_choice_rebuild_time",
    "fork_choice_rebuilds",
    "generate_metrics",
    "head_slot",
    "nodes_healthy",
    "nodes_total",
]
