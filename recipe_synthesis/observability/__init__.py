"""
Observability Package - structured logging and HTTP metrics.
"""

from recipe_synthesis.observability.logging import (
    clear_correlation_id,
    configure_logging,
    correlation_id_context,
    get_correlation_id,
    get_logger,
    set_correlation_id,
)
from recipe_synthesis.observability.metrics import MetricsMiddleware, generate_metrics

__all__ = [
    "configure_logging",
    "get_logger",
    "correlation_id_context",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    "MetricsMiddleware",
    "generate_metrics",
]
