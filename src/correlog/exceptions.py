"""
Exceptions
==========

Errors raised by configuration calls. Nothing on the request path raises these.
"""


class CorrelogError(Exception):
    """Base class for correlog errors."""


class SinkConfigurationError(CorrelogError):
    """A sink could not be configured from the given address or settings."""
