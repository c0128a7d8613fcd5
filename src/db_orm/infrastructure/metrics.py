"""Prometheus metrics for the ORM."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all ORM metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Statement metrics
        self.statements_total = Counter(
            "orm_statements_total",
            "Total number of statements executed",
            ["statement", "status"],  # statement: select, insert, update, delete; status: success, error
            registry=self._registry,
        )

        self.statement_latency_seconds = Histogram(
            "orm_statement_latency_seconds",
            "Statement latency in seconds",
            ["statement"],
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
            registry=self._registry,
        )

        # Transaction metrics
        self.transactions_total = Counter(
            "orm_transactions_total",
            "Total number of transactions",
            ["status"],  # commit, rollback
            registry=self._registry,
        )

        # Save metrics
        self.saves_total = Counter(
            "orm_saves_total",
            "Total number of Model.save() calls",
            ["status"],  # success, error
            registry=self._registry,
        )

        # Metadata cache metrics
        self.metadata_cache_hits_total = Counter(
            "orm_metadata_cache_hits_total",
            "Table descriptors served from the driver cache",
            registry=self._registry,
        )

        self.metadata_cache_misses_total = Counter(
            "orm_metadata_cache_misses_total",
            "Table descriptors read from the metadata source",
            registry=self._registry,
        )

        self.info = Info(
            "db_orm",
            "ORM information",
            registry=self._registry,
        )


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from db_orm import __version__
    _metrics.info.info({
        "version": __version__,
    })

    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
