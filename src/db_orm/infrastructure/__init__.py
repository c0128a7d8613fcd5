"""Infrastructure layer - cross-cutting concerns."""

from db_orm.infrastructure.config import Config, DatabaseConfig, ObservabilityConfig, get_config
from db_orm.infrastructure.logging import setup_logging, get_logger
from db_orm.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from db_orm.infrastructure.observability import setup_observability
from db_orm.infrastructure.tracing import setup_tracing, get_tracer, trace_function, trace_span

__all__ = [
    "Config",
    "DatabaseConfig",
    "ObservabilityConfig",
    "get_config",
    "setup_logging",
    "get_logger",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_observability",
    "setup_tracing",
    "get_tracer",
    "trace_function",
    "trace_span",
]
