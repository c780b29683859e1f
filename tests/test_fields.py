"""Tests for field labels and logger configuration."""

import pytest

from accesslog.core.exceptions import ConfigurationError
from accesslog.core.fields import DEFAULT_CONFIG, DEFAULT_FIELD_MAP, FieldKey, FieldMap, LoggerConfig


def test_default_labels_cover_every_key() -> None:
    labels = dict(DEFAULT_FIELD_MAP.items())

    assert set(labels) == set(FieldKey)
    assert labels[FieldKey.hostname] == "hostname"
    assert labels[FieldKey.status_code] == "statusCode"
    assert labels[FieldKey.client_ip] == "ClientIP"
    assert labels[FieldKey.referrer] == "referer"
    assert labels[FieldKey.data_length] == "dataLength"
    assert labels[FieldKey.user_agent] == "userAgent"


def test_from_mapping_overrides_only_given_keys() -> None:
    field_map = FieldMap.from_mapping({FieldKey.status_code: "http_status", "path": "uri"})

    assert field_map.label(FieldKey.status_code) == "http_status"
    assert field_map.label(FieldKey.path) == "uri"
    assert field_map.label(FieldKey.method) == "method"
    assert DEFAULT_FIELD_MAP.status_code == "statusCode"


def test_unknown_key_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        FieldMap.from_mapping({"status": "http_status"})


def test_empty_label_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        FieldMap(latency="")


def test_duplicate_label_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        FieldMap(method="path")


def test_default_config_is_immutable() -> None:
    assert DEFAULT_CONFIG.time_format == "%d/%b/%Y:%H:%M:%S %z"
    assert DEFAULT_CONFIG.remote_ip_headers == ("X-Forwarded-For", "X-Real-IP")
    with pytest.raises(AttributeError):
        DEFAULT_CONFIG.time_format = "%Y"  # type: ignore[misc]


def test_empty_time_format_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        LoggerConfig(time_format="")
