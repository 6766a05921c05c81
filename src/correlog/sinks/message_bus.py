"""
Message Bus Sink
================

Publishes records on a ZeroMQ PUB socket as `[category, json]` frames.
"""

import threading

import zmq

from correlog.exceptions import SinkConfigurationError
from correlog.models import LogRecord
from correlog.observability.logging_config import get_logger
from correlog.sinks.base import Sink

logger = get_logger(__name__)


def endpoint_for(address: str) -> str:
    """Bare "host:port" addresses are published over TCP."""
    return address if "://" in address else f"tcp://{address}"


class MessageBusSink(Sink):
    """
    Publish-only connection to a message bus.

    zmq sockets are not thread-safe and records are emitted from worker
    threads, so sends go through a lock.
    """

    def __init__(self, address: str, context: zmq.Context | None = None) -> None:
        if not address:
            raise SinkConfigurationError("Message bus address is required")

        self.address = address
        self.endpoint = endpoint_for(address)
        self._lock = threading.Lock()
        self._context = context or zmq.Context.instance()
        self._socket = self._context.socket(zmq.PUB)
        try:
            self._socket.connect(self.endpoint)
        except zmq.ZMQError as e:
            self._socket.close(linger=0)
            raise SinkConfigurationError(f"Cannot connect to {self.endpoint}: {e}") from e

        logger.info("Message bus sink connected", endpoint=self.endpoint)

    @property
    def name(self) -> str:
        return "message_bus"

    def _send(self, category: str, record: LogRecord) -> bool:
        frames = [category.encode("utf-8"), record.serialize().encode("utf-8")]
        with self._lock:
            try:
                self._socket.send_multipart(frames, flags=zmq.NOBLOCK)
            except zmq.Again:
                logger.debug("Message bus queue full, record dropped", category=category)
                return False
        return True

    def close(self) -> None:
        with self._lock:
            self._socket.close(linger=0)
