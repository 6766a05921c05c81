"""
Data Models
===========

Structured log records emitted to the console, the rotating file or a sink.
"""

import json
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from correlog.observability.logging_config import get_logger

logger = get_logger(__name__)

# Application messages are cut to this many characters; the full text goes to `trace`
MESSAGE_LIMIT = 100


class RecordClass(str, Enum):
    """Kind of event a record describes."""

    APPLICATION = "application"
    CLIENT_REQUEST = "client_request"
    SERVICE_REQUEST = "service_request"


class Severity(str, Enum):
    """Severities produced by the request correlator."""

    INFO = "INFO"
    ERROR = "ERROR"


class LogRecord(BaseModel):
    """
    A single structured log record.

    Built once, serialized, emitted, never mutated afterwards. Fields left
    as None are omitted from the serialized form.
    """

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    record_class: RecordClass = Field(..., alias="class")
    severity: str
    message: str
    host: Optional[str] = None
    pid: Optional[int] = None
    request_id: Optional[str] = None
    correlation_id: Optional[str] = None
    client: Optional[str] = None
    path: Optional[str] = None
    method: Optional[str] = None
    status: Optional[int] = None
    trace: Optional[str] = None
    request_time: Optional[str] = None
    response_time: Optional[str] = None
    resolution_time: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR.value

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-compatible mapping, keyed by wire names."""
        try:
            return self.model_dump(mode="json", by_alias=True, exclude_none=True)
        except (TypeError, ValueError) as e:
            logger.warning(
                "Dropping unserializable record metadata",
                request_id=self.request_id,
                error=str(e),
            )
            return self.model_dump(
                mode="json", by_alias=True, exclude_none=True, exclude={"metadata"}
            )

    def serialize(self) -> str:
        """Render the record as one line of JSON."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)


def response_severity(status: int) -> Severity:
    """ERROR for client and server errors, INFO otherwise."""
    return Severity.ERROR if status >= 400 else Severity.INFO


def application_record(
    level: str,
    message: str,
    host: str,
    pid: int,
) -> LogRecord:
    """
    Build an application-class record.

    Args:
        level: Caller-supplied level ("info", "error", ...)
        message: Normalized message text
        host: Process hostname
        pid: Process id

    Returns:
        LogRecord with the message truncated and, for errors, the full trace
    """
    return LogRecord(
        record_class=RecordClass.APPLICATION,
        host=host,
        pid=pid,
        severity=level.upper(),
        message=message[:MESSAGE_LIMIT],
        trace=message if level.lower() == "error" else None,
    )
