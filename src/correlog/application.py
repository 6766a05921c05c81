"""
Application Logger
==================

Ad-hoc application messages turned into structured records.
"""

import os
import re
import socket
from typing import Any

from correlog.models import application_record
from correlog.observability.logging_config import get_logger
from correlog.router import EmissionRouter

logger = get_logger(__name__)

# A line break followed by indentation, as in multi-line stack traces
_INDENTED_BREAK = re.compile(r"(?:\r\n|\r|\n)\s\s+")


def normalize_message(message: Any) -> str:
    """Coerce to text and fold indented line breaks into single spaces."""
    if message is None:
        return ""
    return _INDENTED_BREAK.sub(" ", str(message))


class ApplicationLogger:
    """Builds application-class records and hands them to a router."""

    def __init__(
        self,
        router: EmissionRouter,
        hostname: str | None = None,
        pid: int | None = None,
    ) -> None:
        self.router = router
        self.hostname = hostname or socket.gethostname()
        self.pid = pid or os.getpid()

    def log(self, level: str, message: Any) -> None:
        """
        Emit an application record.

        Args:
            level: Severity name; "error" also attaches the full text as trace
            message: Anything printable; None becomes an empty message
        """
        try:
            record = application_record(
                str(level or "info"),
                normalize_message(message),
                host=self.hostname,
                pid=self.pid,
            )
        except Exception as e:
            logger.error("Failed to build application record", level=level, error=str(e))
            return

        self.router.route("application", record)

    def info(self, message: Any) -> None:
        self.log("info", message)

    def error(self, message: Any) -> None:
        self.log("error", message)
