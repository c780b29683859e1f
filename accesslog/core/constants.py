"""Shared constants."""

from datetime import timezone

UTC_TIMEZONE = timezone.utc

# 10/Oct/2000:13:55:36 -0700
DEFAULT_TIME_FORMAT = "%d/%b/%Y:%H:%M:%S %z"

UNKNOWN_HOSTNAME = "unknown"

DEFAULT_REMOTE_IP_HEADERS = ("X-Forwarded-For", "X-Real-IP")

ACCESS_LOGGER_NAME = "accesslog.access"
