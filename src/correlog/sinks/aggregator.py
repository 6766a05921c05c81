"""
Aggregator Sink
===============

Forwards records to a Fluentd-compatible log aggregator.
"""

import threading
import time
from typing import Callable

from fluent import sender

from correlog.config import AggregatorConfig
from correlog.models import LogRecord
from correlog.observability.logging_config import get_logger
from correlog.sinks.base import Sink

logger = get_logger(__name__)


class AggregatorSink(Sink):
    """
    Client for a remote log aggregator.

    Every record goes out under the same `<tag>.<label>`. After a failed
    delivery the sink stops sending for `reconnect_interval` seconds and
    drops records in the meantime.
    """

    def __init__(
        self,
        config: AggregatorConfig,
        client: sender.FluentSender | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self._monotonic = monotonic
        self._lock = threading.Lock()
        self._suspended_until = 0.0
        self._client = client or sender.FluentSender(
            config.tag,
            host=config.host,
            port=config.port,
            timeout=config.timeout,
        )
        logger.info("Aggregator sink configured", host=config.host, port=config.port)

    @property
    def name(self) -> str:
        return "aggregator"

    @property
    def suspended(self) -> bool:
        with self._lock:
            return self._monotonic() < self._suspended_until

    def _send(self, category: str, record: LogRecord) -> bool:
        if self.suspended:
            return False

        if self._client.emit(self.config.label, record.to_dict()):
            return True

        error = self._client.last_error
        self._client.clear_last_error()
        # The sender keeps a failed buffer and prepends it to the next emit
        self._client.pendings = None
        with self._lock:
            self._suspended_until = self._monotonic() + self.config.reconnect_interval
        logger.warning(
            "Aggregator unreachable, backing off",
            host=self.config.host,
            port=self.config.port,
            retry_in_seconds=self.config.reconnect_interval,
            error=str(error),
        )
        return False

    def close(self) -> None:
        self._client.close()
