"""Access-log middleware for FastAPI and Starlette applications."""

from accesslog.api.middleware import Severity, request_logger
from accesslog.core.fields import DEFAULT_CONFIG, DEFAULT_FIELD_MAP, FieldKey, FieldMap, LoggerConfig
from accesslog.core.request_errors import ErrorType, record_error, request_errors

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_FIELD_MAP",
    "ErrorType",
    "FieldKey",
    "FieldMap",
    "LoggerConfig",
    "Severity",
    "record_error",
    "request_errors",
    "request_logger",
]
