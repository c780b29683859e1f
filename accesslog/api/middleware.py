"""HTTP middleware for access logging."""

from __future__ import annotations

import socket
import time
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Protocol

import structlog
from fastapi import Request, Response

from accesslog.core.constants import ACCESS_LOGGER_NAME, UNKNOWN_HOSTNAME
from accesslog.core.fields import DEFAULT_CONFIG, FieldKey, LoggerConfig
from accesslog.core.request_errors import ErrorType, record_error, request_errors

CallNext = Callable[[Request], Awaitable[Response]]
Middleware = Callable[[Request, CallNext], Awaitable[Response]]


class LoggerSink(Protocol):
    """Anything that binds fields and emits at info/warning/error."""

    def bind(self, **fields: Any) -> Any: ...


class Severity(str, Enum):
    """Log level of an access record; the value is the logger method name."""

    info = "info"
    warning = "warning"
    error = "error"


@dataclass(slots=True)
class AccessRecord:
    """Per-request values captured once the response has been sent."""

    client_ip: str
    method: str
    path: str
    referrer: str
    user_agent: str
    status_code: int
    data_length: int
    latency_us: int
    hostname: str

    def fields(self, config: LoggerConfig) -> dict[str, Any]:
        field_map = config.field_map
        return {
            field_map.label(FieldKey.hostname): self.hostname,
            field_map.label(FieldKey.status_code): self.status_code,
            field_map.label(FieldKey.latency): self.latency_us,
            field_map.label(FieldKey.client_ip): self.client_ip,
            field_map.label(FieldKey.method): self.method,
            field_map.label(FieldKey.path): self.path,
            field_map.label(FieldKey.referrer): self.referrer,
            field_map.label(FieldKey.data_length): self.data_length,
            field_map.label(FieldKey.user_agent): self.user_agent,
        }


def latency_microseconds(elapsed_ns: int) -> int:
    """Round elapsed nanoseconds up to whole microseconds."""
    return max(0, -(-elapsed_ns // 1000))


def select_severity(status_code: int, has_errors: bool = False) -> Severity:
    """Pick log level from recorded errors and response status."""
    if has_errors or status_code > 499:
        return Severity.error
    if status_code > 399:
        return Severity.warning
    return Severity.info


def resolve_hostname(lookup: Callable[[], str] = socket.gethostname) -> str:
    """Return local hostname, or ``unknown`` when lookup fails."""
    try:
        hostname = lookup()
    except OSError:
        return UNKNOWN_HOSTNAME
    return hostname or UNKNOWN_HOSTNAME


def client_ip(request: Request, remote_ip_headers: Sequence[str] = ()) -> str:
    """Return client address, preferring the first forwarding header set."""
    for header in remote_ip_headers:
        value = request.headers.get(header, "")
        candidate = value.split(",")[0].strip()
        if candidate:
            return candidate
    return request.client.host if request.client else ""


def response_size(size: int) -> int:
    """Clamp a byte count so unknown (-1) sizes log as zero."""
    return max(size, 0)


def chunk_size(chunk: bytes | memoryview | str, charset: str = "utf-8") -> int:
    if isinstance(chunk, str):
        return len(chunk.encode(charset))
    return len(chunk)


def format_access_line(record: AccessRecord, timestamp: str) -> str:
    # Latency is in microseconds; the "ms" suffix is kept for output compatibility.
    return (
        f'{record.client_ip} - {record.hostname} [{timestamp}] '
        f'"{record.method} {record.path}" {record.status_code} {record.data_length} '
        f'"{record.referrer}" "{record.user_agent}" ({record.latency_us}ms)'
    )


def request_logger(
    logger: LoggerSink | None = None,
    config: LoggerConfig = DEFAULT_CONFIG,
    *,
    clock: Callable[[], int] = time.perf_counter_ns,
    hostname_lookup: Callable[[], str] = socket.gethostname,
) -> Middleware:
    """Build an HTTP middleware emitting one access record per request.

    Register it with ``app.middleware("http")(request_logger())``. Records
    go to ``logger`` (a structlog logger by default) with fields named by
    ``config.field_map``. The record is emitted once the last body chunk
    has been sent, so latency and size cover the whole response.
    """
    sink = logger if logger is not None else structlog.get_logger(logger=ACCESS_LOGGER_NAME)

    async def access_log_middleware(request: Request, call_next: CallNext) -> Response:
        # handlers may rewrite the path, so read it first
        path = request.url.path
        started = clock()
        try:
            response = await call_next(request)
        except Exception as exc:
            record_error(request, exc)
            _emit(request, 500, -1, path, clock() - started)
            raise
        body = response.body_iterator  # type: ignore[attr-defined]
        response.body_iterator = _counting_body(  # type: ignore[attr-defined]
            request, response, body, path, started
        )
        return response

    async def _counting_body(
        request: Request,
        response: Response,
        body: AsyncIterator[bytes | str],
        path: str,
        started: int,
    ) -> AsyncIterator[bytes | str]:
        sent = 0
        try:
            async for chunk in body:
                sent += chunk_size(chunk, response.charset)
                yield chunk
        finally:
            _emit(request, response.status_code, sent, path, clock() - started)

    def _emit(
        request: Request,
        status_code: int,
        size: int,
        path: str,
        elapsed_ns: int,
    ) -> None:
        record = AccessRecord(
            client_ip=client_ip(request, config.remote_ip_headers),
            method=request.method,
            path=path,
            referrer=request.headers.get("referer", ""),
            user_agent=request.headers.get("user-agent", ""),
            status_code=status_code,
            data_length=response_size(size),
            latency_us=latency_microseconds(elapsed_ns),
            hostname=resolve_hostname(hostname_lookup),
        )
        entry = sink.bind(**record.fields(config))

        errors = request_errors(request)
        severity = select_severity(record.status_code, has_errors=bool(errors))
        if errors:
            message = str(errors.by_type(ErrorType.private))
        else:
            timestamp = datetime.now().astimezone().strftime(config.time_format)
            message = format_access_line(record, timestamp)
        getattr(entry, severity.value)(message)

    return access_log_middleware
