"""
Health Check Routes
===================

Kubernetes-compatible health and readiness endpoints.
"""

from fastapi import APIRouter

import correlog
from api import __version__
from api.schemas import HealthResponse, HealthStatus, ReadinessResponse
from correlog.observability import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns the health status of the service and its log sink",
)
async def health_check() -> HealthResponse:
    """
    Health check endpoint for load balancers and monitoring.

    A production service without a configured sink is reported as degraded:
    its request records are being dropped.
    """
    emitter = correlog.get_router()
    checks = {
        "api": True,
        "log_sink": emitter.development or emitter.sinks.configured,
    }

    return HealthResponse(
        status=HealthStatus.HEALTHY if all(checks.values()) else HealthStatus.DEGRADED,
        version=__version__,
        environment="development" if emitter.development else "production",
        sink=emitter.sinks.sink.name,
        checks=checks,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Returns whether the service is ready to handle requests",
)
async def readiness_check() -> ReadinessResponse:
    """Readiness check for Kubernetes: the emission router can be built."""
    try:
        correlog.get_router()
        router_loaded = True
    except Exception as e:
        logger.error("Emission router unavailable", error=str(e))
        router_loaded = False

    checks = {
        "router_loaded": router_loaded,
    }

    return ReadinessResponse(
        ready=all(checks.values()),
        checks=checks,
    )


@router.get(
    "/live",
    summary="Liveness check",
    description="Simple liveness probe",
)
async def liveness_check() -> dict:
    return {"status": "ok"}
