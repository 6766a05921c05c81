"""
Prometheus Metrics
==================

Counters for routed records, sink failures and correlated requests.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    multiprocess,
)
from starlette.requests import Request
from starlette.responses import Response

# Create a custom registry for this package
REGISTRY = CollectorRegistry()

RECORDS_ROUTED = Counter(
    "correlog_records_routed_total",
    "Log records handed to an emission destination",
    ["category", "destination"],  # destination: development, sink
    registry=REGISTRY,
)

SINK_FAILURES = Counter(
    "correlog_sink_failures_total",
    "Records a sink failed to deliver or dropped",
    ["sink"],
    registry=REGISTRY,
)

REQUESTS_CORRELATED = Counter(
    "correlog_requests_correlated_total",
    "Requests that produced a request/response record pair",
    ["class", "signal"],  # signal: finish, close
    registry=REGISTRY,
)

RESOLUTION_SECONDS = Histogram(
    "correlog_request_resolution_seconds",
    "Time from request entry to its terminal event",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
    registry=REGISTRY,
)


def track_correlated_request(record_class: str, signal: str, duration_seconds: float) -> None:
    """
    Track a completed request lifecycle.

    Args:
        record_class: client_request or service_request
        signal: Terminal event that completed the request (finish or close)
        duration_seconds: Time from entry to the terminal event
    """
    REQUESTS_CORRELATED.labels(record_class, signal).inc()
    RESOLUTION_SECONDS.observe(duration_seconds)


async def metrics_endpoint(request: Request) -> Response:
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format.
    """
    # Handle multiprocess mode if using gunicorn
    try:
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        metrics = generate_latest(registry)
    except ValueError:
        # Not in multiprocess mode
        metrics = generate_latest(REGISTRY)

    return Response(
        content=metrics,
        media_type=CONTENT_TYPE_LATEST,
    )
