"""
Emission Router
===============

Sends records to the console and the rotating file in development, or to
the configured sink in production.
"""

import sys
import threading
from typing import TextIO

from structlog.dev import BRIGHT, CYAN, DIM, GREEN, RED, RESET_ALL

from correlog.config import Settings
from correlog.models import LogRecord
from correlog.observability.logging_config import get_logger
from correlog.observability.metrics import RECORDS_ROUTED
from correlog.sinks import RotatingFileSink, SinkSelection

logger = get_logger(__name__)


class ConsoleWriter:
    """One colored line per record message."""

    def __init__(self, stream: TextIO | None = None, colors: bool = True) -> None:
        self._stream = stream
        self.colors = colors
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        # Resolved late so pytest's capsys sees the output
        return self._stream or sys.stdout

    def write(self, message: str, style: str = "") -> None:
        line = f"{style}{message}{RESET_ALL}" if self.colors and style else message
        with self._lock:
            print(line, file=self.stream, flush=True)

    def record(self, record: LogRecord) -> None:
        self.write(record.message, BRIGHT + RED if record.is_error else DIM)

    def request(self, record: LogRecord) -> None:
        self.write(record.message, BRIGHT + CYAN)

    def response(self, record: LogRecord) -> None:
        self.write(record.message, BRIGHT + (RED if record.is_error else GREEN))


class EmissionRouter:
    """
    Chooses where each record goes.

    Development: colored console line plus a JSON line in the rotating file.
    Production: the sink currently held by `sinks`. Routing never raises.
    """

    def __init__(
        self,
        development: bool = False,
        sinks: SinkSelection | None = None,
        dev_file: RotatingFileSink | None = None,
        console: ConsoleWriter | None = None,
    ) -> None:
        """
        Initialize the router.

        Args:
            development: Use the console + file path instead of the sink
            sinks: Sink selection for production records
            dev_file: Rotating file mirroring development records
            console: Console writer for development records
        """
        self.development = development
        self.sinks = sinks or SinkSelection()
        self.dev_file = dev_file or RotatingFileSink()
        self.console = console or ConsoleWriter()

    @classmethod
    def from_settings(cls, settings: Settings, sinks: SinkSelection | None = None) -> "EmissionRouter":
        """Build a router from settings, applying any sinks they name."""
        sinks = sinks or SinkSelection()
        settings.configure_sinks(sinks)
        return cls(
            development=settings.development,
            sinks=sinks,
            dev_file=RotatingFileSink(
                settings.log_file,
                max_bytes=settings.log_file_max_bytes,
                backup_count=settings.log_file_backups,
            ),
        )

    @property
    def destination(self) -> str:
        return "development" if self.development else "sink"

    def route(self, category: str, record: LogRecord) -> None:
        """
        Emit a single record.

        Args:
            category: application, request or response
            record: Record to emit
        """
        try:
            if self.development:
                self.console.record(record)
                self.dev_file.emit(category, record)
            else:
                self.sinks.sink.emit(category, record)
            RECORDS_ROUTED.labels(category, self.destination).inc()
        except Exception as e:
            logger.error("Failed to route log record", category=category, error=str(e))

    def route_pair(self, request: LogRecord, response: LogRecord) -> None:
        """Emit the request/response records of one request, request first."""
        try:
            if self.development:
                self.console.request(request)
                self.console.response(response)
                self.dev_file.emit("request", request)
                self.dev_file.emit("response", response)
            else:
                sink = self.sinks.sink
                sink.emit("request", request)
                sink.emit("response", response)
            RECORDS_ROUTED.labels("request", self.destination).inc()
            RECORDS_ROUTED.labels("response", self.destination).inc()
        except Exception as e:
            logger.error(
                "Failed to route request records",
                request_id=request.request_id,
                error=str(e),
            )

    def close(self) -> None:
        self.sinks.sink.close()
        self.dev_file.close()
