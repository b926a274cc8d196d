"""
Monitoring and Tracing Configuration Module.

This module wires the service to Pydantic Logfire, which installs the global
OpenTelemetry tracer provider and exporter, and provides:
- HTTPX instrumentation for the outbound agent platform calls
- FastAPI endpoint instrumentation
- The tracer used by the orchestration spans
- Structured request logging helpers

Telemetry is best-effort: when it is disabled or fails to initialize, the
OpenTelemetry API falls back to non-recording spans and the service keeps
serving requests.
"""

import logging
import os
from typing import Optional

from fastapi import FastAPI
from opentelemetry import trace

logger = logging.getLogger(__name__)

TRACER_NAME = "joke-api"

def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _get_monitoring_config():
    """Get Logfire configuration from the settings model.

    Settings also read the ``.env`` file, so the flags work from there as well
    as from the process environment. Settings are imported lazily to avoid
    circular imports during module initialization.
    """
    try:
        from joke_api.server.core.config import settings

        return {
            "enabled": settings.logfire_enabled,
            "token": settings.logfire_token or "",
            "environment": settings.logfire_environment,
            "service_name": settings.logfire_service_name,
            "service_version": settings.logfire_service_version,
            "trace_httpx": settings.logfire_trace_httpx,
            "trace_fastapi": settings.logfire_trace_fastapi,
            "capture_httpx_content": settings.logfire_capture_httpx_content,
        }
    except Exception:
        # Fallback to environment variables if settings not available
        return {
            "enabled": _env_flag("LOGFIRE_ENABLED", "false"),
            "token": os.getenv("LOGFIRE_TOKEN", ""),
            "environment": os.getenv("LOGFIRE_ENVIRONMENT", "development"),
            "service_name": os.getenv("LOGFIRE_SERVICE_NAME", "joke-api"),
            "service_version": os.getenv("LOGFIRE_SERVICE_VERSION", "1.0.0"),
            "trace_httpx": _env_flag("LOGFIRE_TRACE_HTTPX", "true"),
            "trace_fastapi": _env_flag("LOGFIRE_TRACE_FASTAPI", "true"),
            "capture_httpx_content": _env_flag("LOGFIRE_CAPTURE_HTTPX_CONTENT", "true"),
        }


_config = _get_monitoring_config()
LOGFIRE_ENABLED = _config["enabled"]
LOGFIRE_TOKEN = _config["token"]
LOGFIRE_ENVIRONMENT = _config["environment"]
LOGFIRE_SERVICE_NAME = _config["service_name"]
LOGFIRE_SERVICE_VERSION = _config["service_version"]

# Feature flags
LOGFIRE_TRACE_HTTPX = _config["trace_httpx"]
LOGFIRE_TRACE_FASTAPI = _config["trace_fastapi"]
LOGFIRE_CAPTURE_HTTPX_CONTENT = _config["capture_httpx_content"]


def initialize_telemetry(app: FastAPI | None = None) -> bool:
    """
    Initialize Logfire/OpenTelemetry for the service.

    Args:
        app: FastAPI application instance for endpoint instrumentation (optional).

    Returns:
        True when an exporter was configured, False when tracing stays a no-op.
    """
    if not LOGFIRE_ENABLED:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False

    if not LOGFIRE_TOKEN:
        logger.warning(
            "Logfire is enabled but LOGFIRE_TOKEN is not set. "
            "Spans will not be exported. Set LOGFIRE_TOKEN to enable Logfire."
        )
        return False

    try:
        import logfire

        logfire.configure(
            token=LOGFIRE_TOKEN,
            service_name=LOGFIRE_SERVICE_NAME,
            service_version=LOGFIRE_SERVICE_VERSION,
            environment=LOGFIRE_ENVIRONMENT,
        )

        if LOGFIRE_TRACE_HTTPX:
            try:
                logfire.instrument_httpx(capture_all=LOGFIRE_CAPTURE_HTTPX_CONTENT)
                logger.info("Logfire: HTTPX instrumentation enabled")
            except Exception as e:
                logger.warning(f"Failed to instrument HTTPX: {e}")

        if LOGFIRE_TRACE_FASTAPI:
            try:
                if app is not None:
                    logfire.instrument_fastapi(app=app)
                    logger.info("Logfire: FastAPI instrumentation enabled")
                else:
                    logger.debug("FastAPI app instance not provided, skipping FastAPI instrumentation")
            except Exception as e:
                logger.warning(f"Failed to instrument FastAPI: {e}")

        logger.info(
            f"Logfire / OpenTelemetry initialized: environment={LOGFIRE_ENVIRONMENT}, service={LOGFIRE_SERVICE_NAME}"
        )
        return True

    except Exception as e:
        logger.warning(f"Telemetry instrumentation failed: {e}")
        return False


def get_tracer() -> trace.Tracer:
    """Return the tracer used for orchestration spans."""
    return trace.get_tracer(TRACER_NAME)


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """
    Log an API request with performance metrics.

    Args:
        method: HTTP method
        path: Request path
        status_code: HTTP status code
        duration_ms: Request duration in milliseconds
    """
    try:
        import logfire

        logfire.info(
            "API request completed",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=duration_ms,
        )
    except Exception:
        logger.debug(f"Could not log API request to Logfire: {method} {path}")


def log_error(error_type: str, error_message: str, context: Optional[dict] = None) -> None:
    """
    Log an error with context for debugging.

    Args:
        error_type: Type of error
        error_message: Error message
        context: Additional context dictionary
    """
    try:
        import logfire

        logfire.error(
            f"{error_type}: {error_message}",
            **(context or {}),
        )
    except Exception:
        logger.debug(f"Could not log error to Logfire: {error_type}")
