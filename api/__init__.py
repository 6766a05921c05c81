"""Demo service instrumented with correlog."""

__version__ = "0.1.0"
