"""One-call setup of logging, tracing and metrics from configuration."""

from __future__ import annotations

from typing import TextIO

from db_orm.infrastructure.config import ObservabilityConfig, get_config
from db_orm.infrastructure.logging import get_logger, setup_logging
from db_orm.infrastructure.metrics import setup_metrics
from db_orm.infrastructure.tracing import setup_tracing


def setup_observability(
    config: ObservabilityConfig | None = None,
    stream: TextIO | None = None,
) -> None:
    """
    Configure structlog, and OpenTelemetry and Prometheus when enabled.

    Tracing is exported only when otel_endpoint is set; the metrics server
    starts only when metrics_port is set.

    Args:
        config: Observability settings, from get_config() by default
        stream: Log destination, see setup_logging()
    """
    config = config or get_config().observability

    setup_logging(level=config.log_level, log_format=config.log_format, stream=stream)

    if config.otel_endpoint:
        setup_tracing(service_name=config.otel_service_name, otlp_endpoint=config.otel_endpoint)

    if config.metrics_port is not None:
        setup_metrics(port=config.metrics_port)

    get_logger(__name__).info(
        "observability_configured",
        log_level=config.log_level,
        tracing=bool(config.otel_endpoint),
        metrics_port=config.metrics_port,
    )
