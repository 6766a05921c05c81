"""
Rotating File Sink
==================

Append-only JSON-lines file with size-based rotation, used for local
inspection in development.
"""

import logging
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path

from correlog.models import LogRecord
from correlog.sinks.base import Sink

DEFAULT_PATH = Path("./logs/out.log")
DEFAULT_MAX_BYTES = 100 * 1024
DEFAULT_BACKUP_COUNT = 7


class _RaisingRotatingFileHandler(RotatingFileHandler):
    """Write and rollover errors propagate to the sink instead of stderr."""

    def handleError(self, record: logging.LogRecord) -> None:
        raise


class RotatingFileSink(Sink):
    """
    One serialized record per line.

    The handler is opened lazily on first write, creating the directory if
    needed. RotatingFileHandler holds a lock around each write and rollover,
    so concurrent records never interleave within a line.
    """

    def __init__(
        self,
        path: Path | str = DEFAULT_PATH,
        max_bytes: int = DEFAULT_MAX_BYTES,
        backup_count: int = DEFAULT_BACKUP_COUNT,
    ) -> None:
        self.path = Path(path)
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self._lock = threading.Lock()
        self._handler: _RaisingRotatingFileHandler | None = None

    @property
    def name(self) -> str:
        return "rotating_file"

    def _open(self) -> _RaisingRotatingFileHandler:
        with self._lock:
            if self._handler is None:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                handler = _RaisingRotatingFileHandler(
                    self.path,
                    maxBytes=self.max_bytes,
                    backupCount=self.backup_count,
                    encoding="utf-8",
                )
                handler.setFormatter(logging.Formatter("%(message)s"))
                self._handler = handler
            return self._handler

    def _send(self, category: str, record: LogRecord) -> bool:
        line = logging.makeLogRecord({"msg": record.serialize(), "levelno": logging.INFO})
        self._open().handle(line)
        return True

    def close(self) -> None:
        with self._lock:
            if self._handler is not None:
                self._handler.close()
                self._handler = None
