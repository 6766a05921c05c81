"""
Sink Selection
==============

Holds the one sink production records are sent to.
"""

import threading
from typing import Any, Mapping

from pydantic import ValidationError

from correlog.config import AggregatorConfig
from correlog.exceptions import SinkConfigurationError
from correlog.observability.logging_config import get_logger
from correlog.sinks.aggregator import AggregatorSink
from correlog.sinks.base import NullSink, Sink
from correlog.sinks.message_bus import MessageBusSink

logger = get_logger(__name__)


class SinkSelection:
    """
    The configured sink, injected into the emission router.

    Configuring a sink replaces and closes the previous one; the last call
    wins. Until something is configured every record goes to a NullSink.
    """

    def __init__(self, sink: Sink | None = None) -> None:
        self._lock = threading.Lock()
        self._sink: Sink = sink or NullSink()

    @property
    def sink(self) -> Sink:
        return self._sink

    @property
    def configured(self) -> bool:
        return not isinstance(self._sink, NullSink)

    def use(self, sink: Sink) -> Sink:
        """Install `sink`, closing the one it replaces."""
        with self._lock:
            previous, self._sink = self._sink, sink
        if previous is not sink:
            previous.close()
        logger.info("Log sink selected", sink=sink.name, replaced=previous.name)
        return sink

    def configure_message_bus(self, address: str) -> MessageBusSink:
        return self.use(MessageBusSink(address))

    def configure_aggregator(
        self, config: AggregatorConfig | Mapping[str, Any]
    ) -> AggregatorSink:
        if not isinstance(config, AggregatorConfig):
            try:
                config = AggregatorConfig.model_validate(config)
            except ValidationError as e:
                raise SinkConfigurationError(f"Invalid aggregator config: {e}") from e
        return self.use(AggregatorSink(config))

    def reset(self) -> None:
        self.use(NullSink())
