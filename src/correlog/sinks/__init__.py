"""
Sinks Module
============

Interchangeable backends for structured log records.
"""

from correlog.sinks.base import Sink, NullSink
from correlog.sinks.message_bus import MessageBusSink
from correlog.sinks.aggregator import AggregatorSink
from correlog.sinks.rotating_file import RotatingFileSink
from correlog.sinks.selection import SinkSelection

__all__ = [
    "Sink",
    "NullSink",
    "MessageBusSink",
    "AggregatorSink",
    "RotatingFileSink",
    "SinkSelection",
]
