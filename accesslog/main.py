"""FastAPI application entrypoint."""

from __future__ import annotations

from datetime import datetime

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from accesslog.api.middleware import LoggerSink, request_logger
from accesslog.config.settings import Settings, get_settings
from accesslog.core.constants import UTC_TIMEZONE
from accesslog.core.exceptions import AppError
from accesslog.core.request_errors import record_error
from accesslog.logging.setup import configure_logging

settings = get_settings()
configure_logging(settings.log_level, settings.access_log_level)
logger = structlog.get_logger(__name__)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Report application errors through the access log."""
    record_error(request, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", error=str(exc))
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "timestamp": datetime.now(tz=UTC_TIMEZONE).isoformat(),
        },
    )


async def healthcheck() -> dict[str, str]:
    """Liveness endpoint."""
    return {"status": "ok"}


def create_app(app_settings: Settings, access_logger: LoggerSink | None = None) -> FastAPI:
    """Create the service with access logging and error handlers installed."""
    app = FastAPI(title=app_settings.app_name, version="1.0.0")
    app.middleware("http")(request_logger(access_logger, app_settings.logger_config()))
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.add_api_route("/health", healthcheck, methods=["GET"])

    @app.on_event("startup")
    async def on_startup() -> None:
        logger.info("startup_completed", environment=app_settings.environment)

    return app


app = create_app(settings)
