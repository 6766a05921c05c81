"""
Base Sink Classes
=================

The `emit(category, record)` contract shared by every backend.
"""

from abc import ABC, abstractmethod

from correlog.models import LogRecord
from correlog.observability.logging_config import get_logger
from correlog.observability.metrics import SINK_FAILURES

logger = get_logger(__name__)


class Sink(ABC):
    """
    Base class for all sinks.

    Subclasses implement `_send`. `emit` wraps it so that a delivery failure
    is logged and counted locally and never reaches the caller.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name used in diagnostics and metric labels."""
        pass

    @abstractmethod
    def _send(self, category: str, record: LogRecord) -> bool:
        """
        Deliver one record.

        Args:
            category: Record category (application, request, response)
            record: The record to deliver

        Returns:
            True if the record was handed to the backend, False if dropped
        """
        pass

    def emit(self, category: str, record: LogRecord) -> bool:
        """Deliver a record; failures are swallowed and reported locally."""
        try:
            delivered = self._send(category, record)
        except Exception as e:
            logger.warning(
                "Sink delivery failed",
                sink=self.name,
                category=category,
                error=str(e),
            )
            delivered = False

        if not delivered:
            SINK_FAILURES.labels(self.name).inc()
        return delivered

    def close(self) -> None:
        """Release backend resources."""


class NullSink(Sink):
    """Placeholder used until a real sink is configured; drops everything."""

    @property
    def name(self) -> str:
        return "none"

    def _send(self, category: str, record: LogRecord) -> bool:
        logger.warning("no valid sink configured", category=category)
        return False
