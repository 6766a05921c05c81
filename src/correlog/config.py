"""
Configuration
=============

Environment-driven settings for the emission pipeline.
"""

import os
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from correlog.sinks import SinkSelection

DEVELOPMENT = "development"


class AggregatorConfig(BaseModel):
    """Connection settings for the remote log aggregator."""

    host: str = Field(..., min_length=1, description="Aggregator host")
    port: int = Field(default=24224, gt=0, lt=65536, description="Aggregator port")
    tag: str = Field(default="correlog", description="Tag prefix for every record")
    label: str = Field(default="log", description="Fixed label appended to the tag")
    timeout: float = Field(default=3.0, gt=0, description="Connect timeout in seconds")
    reconnect_interval: float = Field(
        default=600.0,
        ge=0,
        description="Seconds to stop sending after a failed delivery",
    )


class Settings(BaseModel):
    """Runtime settings, usually built with `Settings.from_env()`."""

    environment: str = Field(default="production")
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="")
    log_file: Path = Field(default=Path("./logs/out.log"))
    log_file_max_bytes: int = Field(default=100 * 1024, gt=0)
    log_file_backups: int = Field(default=7, ge=0)
    correlation_header: str = Field(default="x-correlation-id")
    message_bus_address: Optional[str] = None
    aggregator: Optional[AggregatorConfig] = None

    @property
    def development(self) -> bool:
        return self.environment == DEVELOPMENT

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from environment variables."""
        aggregator = None
        aggregator_host = os.getenv("CORRELOG_AGGREGATOR_HOST")
        if aggregator_host:
            aggregator = AggregatorConfig(
                host=aggregator_host,
                port=int(os.getenv("CORRELOG_AGGREGATOR_PORT", "24224")),
            )

        return cls(
            environment=os.getenv("ENVIRONMENT", "production"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", ""),
            log_file=Path(os.getenv("CORRELOG_LOG_FILE", "./logs/out.log")),
            log_file_max_bytes=int(os.getenv("CORRELOG_LOG_FILE_MAX_BYTES", str(100 * 1024))),
            log_file_backups=int(os.getenv("CORRELOG_LOG_FILE_BACKUPS", "7")),
            correlation_header=os.getenv("CORRELOG_CORRELATION_HEADER", "x-correlation-id"),
            message_bus_address=os.getenv("CORRELOG_MESSAGE_BUS") or None,
            aggregator=aggregator,
        )

    def configure_sinks(self, selection: "SinkSelection") -> None:
        """
        Apply the configured sinks to a selection.

        The message bus is applied first and the aggregator second, so the
        aggregator wins when both are set.
        """
        if self.message_bus_address:
            selection.configure_message_bus(self.message_bus_address)
        if self.aggregator is not None:
            selection.configure_aggregator(self.aggregator)
