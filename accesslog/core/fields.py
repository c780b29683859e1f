"""Field labels and logger configuration for access-log records."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from enum import Enum

from accesslog.core.constants import DEFAULT_REMOTE_IP_HEADERS, DEFAULT_TIME_FORMAT
from accesslog.core.exceptions import ConfigurationError


class FieldKey(str, Enum):
    """Semantic attributes attached to every access-log record."""

    hostname = "hostname"
    status_code = "status_code"
    latency = "latency"
    client_ip = "client_ip"
    method = "method"
    path = "path"
    referrer = "referrer"
    data_length = "data_length"
    user_agent = "user_agent"


@dataclass(frozen=True, slots=True)
class FieldMap:
    """Output label for each semantic field.

    Every key always has a label, so a record never loses a field to an
    empty or shared key.
    """

    hostname: str = "hostname"
    status_code: str = "statusCode"
    latency: str = "latency"
    client_ip: str = "ClientIP"
    method: str = "method"
    path: str = "path"
    referrer: str = "referer"
    data_length: str = "dataLength"
    user_agent: str = "userAgent"

    def __post_init__(self) -> None:
        seen: dict[str, str] = {}
        for item in fields(self):
            label = getattr(self, item.name)
            if not isinstance(label, str) or not label.strip():
                raise ConfigurationError(f"Empty label for field '{item.name}'")
            if label in seen:
                raise ConfigurationError(
                    f"Label '{label}' used by both '{seen[label]}' and '{item.name}'"
                )
            seen[label] = item.name

    def label(self, key: FieldKey) -> str:
        """Return output label for a semantic field."""
        return getattr(self, FieldKey(key).value)

    def items(self) -> list[tuple[FieldKey, str]]:
        return [(key, self.label(key)) for key in FieldKey]

    @classmethod
    def from_mapping(cls, mapping: Mapping[FieldKey | str, str]) -> FieldMap:
        """Build a field map overriding default labels with ``mapping``."""
        overrides: dict[str, str] = {}
        for key, label in mapping.items():
            try:
                name = FieldKey(key).value
            except ValueError as exc:
                raise ConfigurationError(f"Unknown field key '{key}'") from exc
            overrides[name] = label
        return replace(DEFAULT_FIELD_MAP, **overrides)


DEFAULT_FIELD_MAP = FieldMap()


@dataclass(frozen=True, slots=True)
class LoggerConfig:
    """Immutable configuration shared by all requests of one middleware."""

    time_format: str = DEFAULT_TIME_FORMAT
    field_map: FieldMap = field(default_factory=FieldMap)
    remote_ip_headers: tuple[str, ...] = DEFAULT_REMOTE_IP_HEADERS

    def __post_init__(self) -> None:
        if not self.time_format:
            raise ConfigurationError("time_format must not be empty")


DEFAULT_CONFIG = LoggerConfig()
