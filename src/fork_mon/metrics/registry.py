"""
Metric registry using prometheus_client.

Provides pre-defined metrics for the fork monitor.
Exposes metrics in Prometheus text format via the /metrics endpoint.
"""

from __future__ import annotations

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Create a dedicated registry for fork monitor metrics.
#
# Using a dedicated registry avoids pollution from default Python process metrics.
REGISTRY = CollectorRegistry()

# -----------------------------------------------------------------------------
# Monitored Nodes
# -----------------------------------------------------------------------------

nodes_total = Gauge(
    "fork_mon_nodes_total",
    "Registered beacon nodes",
    registry=REGISTRY,
)

nodes_healthy = Gauge(
    "fork_mon_nodes_healthy",
    "Beacon nodes whose last head request succeeded",
    registry=REGISTRY,
)

head_slot = Gauge(
    "fork_mon_head_slot",
    "Head slot of the fork choice provider",
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Fork Choice
# -----------------------------------------------------------------------------

fork_choice_nodes = Gauge(
    "fork_mon_fork_choice_nodes",
    "Blocks in the latest fork choice tree",
    registry=REGISTRY,
)

fork_choice_rebuilds = Counter(
    "fork_mon_fork_choice_rebuilds_total",
    "Fork choice trees published",
    registry=REGISTRY,
)

fork_choice_rebuild_failures = Counter(
    "fork_mon_fork_choice_rebuild_failures_total",
    "Fork choice refreshes that kept the previous tree",
    registry=REGISTRY,
)

fork_choice_rebuild_time = Histogram(
    "fork_mon_fork_choice_rebuild_seconds",
    "Fork choice fetch and rebuild duration",
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics output.

    Returns:
        Prometheus text format output as bytes.
    """
    return generate_latest(REGISTRY)
