"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from accesslog.core.constants import DEFAULT_REMOTE_IP_HEADERS, DEFAULT_TIME_FORMAT
from accesslog.core.fields import FieldKey, FieldMap, LoggerConfig


class Settings(BaseSettings):
    """Runtime settings for the service and its access log."""

    model_config = SettingsConfigDict(
        env_prefix="ACCESSLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "accesslog"
    environment: str = "dev"
    log_level: str = "INFO"
    access_log_level: str = "INFO"

    time_format: str = DEFAULT_TIME_FORMAT
    remote_ip_headers: str = ",".join(DEFAULT_REMOTE_IP_HEADERS)

    field_hostname: str = "hostname"
    field_status_code: str = "statusCode"
    field_latency: str = "latency"
    field_client_ip: str = "ClientIP"
    field_method: str = "method"
    field_path: str = "path"
    field_referrer: str = "referer"
    field_data_length: str = "dataLength"
    field_user_agent: str = "userAgent"

    @field_validator("log_level", "access_log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.strip().upper()

    def field_map(self) -> FieldMap:
        """Build field map from ``field_*`` settings."""
        return FieldMap(**{key.value: getattr(self, f"field_{key.value}") for key in FieldKey})

    def logger_config(self) -> LoggerConfig:
        """Build validated access-log configuration."""
        headers = tuple(
            header.strip() for header in self.remote_ip_headers.split(",") if header.strip()
        )
        return LoggerConfig(
            time_format=self.time_format,
            field_map=self.field_map(),
            remote_ip_headers=headers,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return singleton settings instance."""
    return Settings()
