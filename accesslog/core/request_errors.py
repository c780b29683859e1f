"""Errors recorded by request handlers for the access log."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import Any

from starlette.requests import Request

STATE_KEY = "request_errors"


class ErrorType(IntFlag):
    """Classification of a recorded error. ``any`` matches every type."""

    private = 1 << 0
    public = 1 << 1
    render = 1 << 2
    bind = 1 << 3
    any = private | public | render | bind


@dataclass(slots=True)
class RequestError:
    """One error recorded during request handling."""

    error: BaseException
    type: ErrorType = ErrorType.private
    meta: Any = None

    def is_type(self, flags: ErrorType) -> bool:
        return bool(self.type & flags)

    def __str__(self) -> str:
        return str(self.error)


class ErrorList(list):
    """Ordered errors of one request."""

    def by_type(self, flags: ErrorType) -> ErrorList:
        """Return only errors matching any of ``flags``."""
        if flags == ErrorType.any:
            return ErrorList(self)
        return ErrorList(item for item in self if item.is_type(flags))

    def __str__(self) -> str:
        lines = []
        for index, item in enumerate(self, start=1):
            lines.append(f"Error #{index:02d}: {item}\n")
            if item.meta is not None:
                lines.append(f"     Meta: {item.meta}\n")
        return "".join(lines)


def request_errors(request: Request) -> ErrorList:
    """Return the request's error list, creating it on first use."""
    errors = getattr(request.state, STATE_KEY, None)
    if errors is None:
        errors = ErrorList()
        setattr(request.state, STATE_KEY, errors)
    return errors


def record_error(
    request: Request,
    error: BaseException,
    error_type: ErrorType = ErrorType.private,
    meta: Any = None,
) -> RequestError:
    """Attach ``error`` to the request so the access log reports it."""
    entry = RequestError(error=error, type=error_type, meta=meta)
    request_errors(request).append(entry)
    return entry
