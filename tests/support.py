"""
Test Support
============

Fakes and helpers shared by the unit tests.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable

from correlog.models import LogRecord
from correlog.sinks import Sink

T0 = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


class RecordingSink(Sink):
    """Sink that keeps every emitted record in memory."""

    def __init__(self) -> None:
        self.emitted: list[tuple[str, LogRecord]] = []
        self.closed = False

    @property
    def name(self) -> str:
        return "recording"

    def _send(self, category: str, record: LogRecord) -> bool:
        self.emitted.append((category, record))
        return True

    def close(self) -> None:
        self.closed = True

    @property
    def categories(self) -> list[str]:
        return [category for category, _ in self.emitted]

    @property
    def records(self) -> list[LogRecord]:
        return [record for _, record in self.emitted]


class FailingSink(Sink):
    """Sink whose backend always blows up."""

    @property
    def name(self) -> str:
        return "failing"

    def _send(self, category: str, record: LogRecord) -> bool:
        raise ConnectionError("backend unavailable")


class FakeClock:
    """Returns the given moments in order, then keeps repeating the last one."""

    def __init__(self, moments: Iterable[datetime]) -> None:
        self.moments = list(moments)
        self.calls = 0

    def __call__(self) -> datetime:
        index = min(self.calls, len(self.moments) - 1)
        self.calls += 1
        return self.moments[index]


def clock_after(**elapsed) -> FakeClock:
    """Clock whose second reading is `elapsed` after the first."""
    return FakeClock([T0, T0 + timedelta(**elapsed)])


def http_scope(
    path: str = "/widgets",
    method: str = "GET",
    headers: dict[str, str] | None = None,
    query_string: bytes = b"",
    client: tuple[str, int] | None = ("10.0.0.7", 51234),
) -> dict:
    """Minimal ASGI HTTP scope."""
    raw_headers = [(b"host", b"testserver")]
    for name, value in (headers or {}).items():
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": path,
        "raw_path": path.encode("latin-1"),
        "query_string": query_string,
        "headers": raw_headers,
        "client": client,
        "server": ("testserver", 80),
    }


def run_asgi(app, scope: dict, inbound: list[dict] | None = None) -> list[dict]:
    """
    Drive an ASGI app to completion.

    Args:
        app: ASGI application
        scope: Request scope
        inbound: Messages returned by successive receive() calls; once they
            run out receive() reports a disconnect

    Returns:
        Messages the app sent
    """
    sent: list[dict] = []
    if inbound is None:
        inbound = [{"type": "http.request", "body": b"", "more_body": False}]
    pending = list(inbound)

    async def receive() -> dict:
        if pending:
            return pending.pop(0)
        return {"type": "http.disconnect"}

    async def send(message: dict) -> None:
        sent.append(message)

    asyncio.run(app(scope, receive, send))
    return sent


def read_lines(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8").splitlines()
