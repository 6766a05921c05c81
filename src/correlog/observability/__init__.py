"""
Observability Module
====================

correlog's own diagnostics: structured logging and Prometheus metrics.
"""

from correlog.observability.logging_config import setup_logging, get_logger
from correlog.observability.metrics import metrics_endpoint, track_correlated_request

__all__ = [
    "setup_logging",
    "get_logger",
    "metrics_endpoint",
    "track_correlated_request",
]
