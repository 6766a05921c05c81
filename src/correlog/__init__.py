"""
correlog
========

Request correlation and structured log emission for ASGI services.

Usage:
    from fastapi import FastAPI
    import correlog

    correlog.configure_aggregator({"host": "fluentd", "port": 24224})
    app = FastAPI(middleware=[correlog.request_correlator()])

    correlog.log_application("error", traceback_text)
"""

import threading
from typing import Any, Mapping

from correlog.application import ApplicationLogger
from correlog.config import AggregatorConfig, Settings
from correlog.exceptions import CorrelogError, SinkConfigurationError
from correlog.identifiers import humanize_duration, new_correlation_id, new_request_id
from correlog.middleware import (
    CompletionGuard,
    RequestCorrelatorMiddleware,
    request_correlator,
)
from correlog.models import LogRecord, RecordClass, Severity
from correlog.observability.logging_config import get_logger
from correlog.router import ConsoleWriter, EmissionRouter
from correlog.sinks import (
    AggregatorSink,
    MessageBusSink,
    NullSink,
    RotatingFileSink,
    Sink,
    SinkSelection,
)

__version__ = "0.1.0"

logger = get_logger(__name__)

_lock = threading.Lock()
_router: EmissionRouter | None = None
_app_logger: ApplicationLogger | None = None


def get_router() -> EmissionRouter:
    """The process router, built from `Settings.from_env()` on first use."""
    global _router
    with _lock:
        if _router is None:
            _router = EmissionRouter.from_settings(Settings.from_env())
        return _router


def set_router(router: EmissionRouter) -> None:
    """Replace the process router, e.g. with one built from explicit settings."""
    global _router, _app_logger
    with _lock:
        _router = router
        _app_logger = None


def reset_default_router() -> None:
    """Close and forget the process router; the next use rebuilds it."""
    global _router, _app_logger
    with _lock:
        router, _router, _app_logger = _router, None, None
    if router is not None:
        router.close()


def configure_message_bus(address: str) -> MessageBusSink:
    """Send production records to a message bus at `address` ("host:port")."""
    return get_router().sinks.configure_message_bus(address)


def configure_aggregator(config: AggregatorConfig | Mapping[str, Any]) -> AggregatorSink:
    """Send production records to a log aggregator ({"host": ..., "port": ...})."""
    return get_router().sinks.configure_aggregator(config)


def log_application(level: str, message: Any) -> None:
    """Emit an application record through the process router. Never raises."""
    global _app_logger
    try:
        router = get_router()
    except Exception as e:
        logger.error("Cannot build the emission router", error=str(e))
        return
    with _lock:
        if _app_logger is None or _app_logger.router is not router:
            _app_logger = ApplicationLogger(router)
        app_logger = _app_logger
    app_logger.log(level, message)


__all__ = [
    # Models
    "LogRecord",
    "RecordClass",
    "Severity",
    # Configuration
    "Settings",
    "AggregatorConfig",
    "CorrelogError",
    "SinkConfigurationError",
    # Sinks
    "Sink",
    "NullSink",
    "MessageBusSink",
    "AggregatorSink",
    "RotatingFileSink",
    "SinkSelection",
    # Emission
    "ConsoleWriter",
    "EmissionRouter",
    "ApplicationLogger",
    # Correlation
    "CompletionGuard",
    "RequestCorrelatorMiddleware",
    "humanize_duration",
    "new_correlation_id",
    "new_request_id",
    # Process API
    "get_router",
    "set_router",
    "reset_default_router",
    "configure_message_bus",
    "configure_aggregator",
    "log_application",
    "request_correlator",
]
