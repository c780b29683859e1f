"""Custom exception hierarchy for the access-log service."""


class AppError(Exception):
    """Base application error."""


class ConfigurationError(AppError, ValueError):
    """Raised when a field map or logger configuration is invalid."""
