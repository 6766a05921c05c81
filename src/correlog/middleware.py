"""
Request Correlator
==================

Pure ASGI middleware that pairs every request with exactly one request
record and one response record.

Implemented as raw ASGI (not BaseHTTPMiddleware) because it has to watch the
`send` and `receive` channels: a request ends either when the last body
chunk has been handed to the server (finish) or when the client disconnects
or the app stops without finishing the response (close).
"""

from dataclasses import dataclass, field
from datetime import datetime
from http import HTTPStatus
from typing import Callable, Optional

import anyio
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import Headers
from starlette.middleware import Middleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from correlog.identifiers import (
    elapsed_ms,
    humanize_duration,
    new_correlation_id,
    new_request_id,
    timestamp,
    utcnow,
)
from correlog.models import LogRecord, RecordClass, Severity, response_severity
from correlog.observability.logging_config import get_logger
from correlog.observability.metrics import track_correlated_request
from correlog.router import EmissionRouter

logger = get_logger(__name__)

CORRELATION_HEADER = "x-correlation-id"

# Status reported when the app stopped before starting a response
UNSENT_STATUS = 500


class CompletionGuard:
    """
    Single-fire latch shared by the two terminal signals.

    `fire()` returns True exactly once. The check and the set happen without
    an intervening await, so concurrent tasks on one event loop cannot both win.
    """

    def __init__(self) -> None:
        self._fired = False
        self.signal: Optional[str] = None

    @property
    def fired(self) -> bool:
        return self._fired

    def fire(self, signal: str) -> bool:
        if self._fired:
            return False
        self._fired = True
        self.signal = signal
        return True


@dataclass
class CorrelatorSession:
    """Bookkeeping for one in-flight request."""

    start_time: datetime
    status: Optional[int] = None
    guard: CompletionGuard = field(default_factory=CompletionGuard)


def status_text(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return ""


def request_url(scope: Scope) -> str:
    """Path plus query string, as the client sent it."""
    path = scope.get("raw_path") or scope.get("path", "")
    if isinstance(path, bytes):
        path = path.decode("latin-1")
    path = path.split("?", 1)[0]
    query = scope.get("query_string", b"")
    if query:
        return f"{path}?{query.decode('latin-1')}"
    return path


def client_address(scope: Scope, headers: Headers) -> Optional[str]:
    client = scope.get("client")
    if client:
        return client[0]
    return headers.get("x-forwarded-for")


def build_record_pair(
    scope: Scope,
    session: CorrelatorSession,
    end_time: datetime,
    header: str = CORRELATION_HEADER,
) -> tuple[LogRecord, LogRecord]:
    """
    Build the request and response records of one completed request.

    Identifiers are minted here once and threaded into both records, so the
    two halves always share request_id and correlation_id.

    Args:
        scope: ASGI scope of the request
        session: The request's bookkeeping
        end_time: Moment of the terminal event
        header: Name of the inbound correlation header

    Returns:
        (request_record, response_record)
    """
    headers = Headers(scope=scope)
    inbound_correlation_id = headers.get(header)
    if inbound_correlation_id:
        record_class = RecordClass.SERVICE_REQUEST
        correlation_id = inbound_correlation_id
    else:
        record_class = RecordClass.CLIENT_REQUEST
        correlation_id = new_correlation_id()
    request_id = new_request_id()

    method = scope.get("method", "")
    url = request_url(scope)
    status = session.status or UNSENT_STATUS
    common = {
        "record_class": record_class,
        "request_id": request_id,
        "correlation_id": correlation_id,
        "host": headers.get("host"),
        "client": client_address(scope, headers),
        "path": url,
        "method": method,
    }

    request = LogRecord(
        **common,
        severity=Severity.INFO.value,
        message=f"{method} {url}",
        request_time=timestamp(session.start_time),
        metadata={},
    )
    response = LogRecord(
        **common,
        severity=response_severity(status).value,
        message=" ".join(part for part in (str(status), status_text(status), url) if part),
        status=status,
        response_time=timestamp(end_time),
        resolution_time=humanize_duration(session.start_time, end_time),
        metadata={},
    )
    return request, response


class RequestCorrelatorMiddleware:
    """
    Emits one request/response record pair per HTTP request.

    Downstream exceptions propagate unchanged; emission failures never
    reach the response.
    """

    def __init__(
        self,
        app: ASGIApp,
        router: Optional[EmissionRouter] = None,
        header: str = CORRELATION_HEADER,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """
        Initialize the middleware.

        Args:
            app: Downstream ASGI application
            router: Router for the records (default: the process router)
            header: Inbound correlation header name
            clock: Source of wall-clock time
        """
        self.app = app
        self._router = router
        self.header = header.lower()
        self.clock = clock

    @property
    def router(self) -> EmissionRouter:
        if self._router is not None:
            return self._router
        from correlog import get_router

        return get_router()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        session = CorrelatorSession(start_time=self.clock())

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                session.status = message["status"]
            await send(message)
            if message["type"] == "http.response.body" and not message.get("more_body", False):
                await self._complete(scope, session, "finish")

        async def receive_wrapper() -> Message:
            message = await receive()
            if message["type"] == "http.disconnect":
                await self._complete(scope, session, "close")
            return message

        try:
            await self.app(scope, receive_wrapper, send_wrapper)
        finally:
            if not session.guard.fired:
                await self._complete(scope, session, "close")

    async def _complete(self, scope: Scope, session: CorrelatorSession, signal: str) -> None:
        if not session.guard.fire(signal):
            return

        try:
            end_time = self.clock()
            router = self.router
            request, response = build_record_pair(scope, session, end_time, self.header)
        except Exception as e:
            logger.error(
                "Failed to build request records",
                path=scope.get("path"),
                signal=signal,
                error=str(e),
            )
            return

        track_correlated_request(
            request.record_class,
            signal,
            elapsed_ms(session.start_time, end_time) / 1000,
        )
        # Sink I/O runs off the event loop and survives cancellation of the request task
        with anyio.CancelScope(shield=True):
            await run_in_threadpool(router.route_pair, request, response)


def request_correlator(
    router: Optional[EmissionRouter] = None,
    header: str = CORRELATION_HEADER,
    clock: Callable[[], datetime] = utcnow,
) -> Middleware:
    """
    Middleware entry for `FastAPI(middleware=[...])` or `Starlette(middleware=[...])`.

    Args:
        router: Router for the records (default: the process router)
        header: Inbound correlation header name
        clock: Source of wall-clock time
    """
    return Middleware(RequestCorrelatorMiddleware, router=router, header=header, clock=clock)
