"""
Pytest Fixtures
===============

Shared fixtures for correlog tests.
"""

import io
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))

import correlog
from correlog.router import ConsoleWriter, EmissionRouter
from correlog.sinks import RotatingFileSink, SinkSelection
from support import RecordingSink


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep the process router and env-driven settings out of other tests' way."""
    for name in (
        "ENVIRONMENT",
        "CORRELOG_MESSAGE_BUS",
        "CORRELOG_AGGREGATOR_HOST",
        "CORRELOG_AGGREGATOR_PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CORRELOG_LOG_FILE", str(tmp_path / "default" / "out.log"))
    correlog.reset_default_router()
    yield
    correlog.reset_default_router()


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def console_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    """Rotating file path inside a directory that does not exist yet."""
    return tmp_path / "logs" / "out.log"


@pytest.fixture
def production_router(recording_sink: RecordingSink, log_file: Path) -> EmissionRouter:
    """Router sending records to the recording sink."""
    return EmissionRouter(
        development=False,
        sinks=SinkSelection(recording_sink),
        dev_file=RotatingFileSink(log_file),
        console=ConsoleWriter(io.StringIO()),
    )


@pytest.fixture
def development_router(
    recording_sink: RecordingSink, log_file: Path, console_stream: io.StringIO
) -> EmissionRouter:
    """Router using the console + rotating file path."""
    return EmissionRouter(
        development=True,
        sinks=SinkSelection(recording_sink),
        dev_file=RotatingFileSink(log_file),
        console=ConsoleWriter(console_stream),
    )
