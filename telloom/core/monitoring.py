"""
Optional Pydantic Logfire tracing.

When ``LOGFIRE_ENABLED`` is true and ``LOGFIRE_TOKEN`` is set,
``initialize_logfire`` configures the SDK and instruments SQLAlchemy, HTTPX
(the video, email, storage and auth clients) and FastAPI. The ``log_*``
helpers emit structured records for requests, webhook deliveries and
errors; with tracing off they do nothing, and an SDK failure only costs a
debug line.
"""

import logging
import os
from typing import Any, Optional

from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


LOGFIRE_ENABLED = _flag("LOGFIRE_ENABLED", "false")
LOGFIRE_TOKEN = os.getenv("LOGFIRE_TOKEN", "")
LOGFIRE_ENVIRONMENT = os.getenv("LOGFIRE_ENVIRONMENT", "development")
LOGFIRE_SERVICE_NAME = os.getenv("LOGFIRE_SERVICE_NAME", "telloom-server")
LOGFIRE_SERVICE_VERSION = os.getenv("LOGFIRE_SERVICE_VERSION", "0.0.0")

LOGFIRE_TRACE_SQLALCHEMY = _flag("LOGFIRE_TRACE_SQLALCHEMY", "true")
LOGFIRE_TRACE_HTTPX = _flag("LOGFIRE_TRACE_HTTPX", "true")
LOGFIRE_TRACE_FASTAPI = _flag("LOGFIRE_TRACE_FASTAPI", "true")


def _instrument(label: str, enabled: bool, hook, **kwargs: Any) -> None:
    if not enabled:
        return
    try:
        hook(**kwargs)
    except Exception as e:
        logger.warning(f"Failed to instrument {label}: {e}")
    else:
        logger.info(f"Logfire: {label} instrumentation enabled")


def initialize_logfire(app: FastAPI | None = None) -> bool:
    """
    Configure Logfire and its instrumentations.

    Args:
        app: Application whose endpoints should be traced. Skipped when omitted.

    Returns:
        Whether Logfire is now active. A failing instrumentation is logged
        and does not turn the result False; a failing ``configure`` does.
    """
    if not LOGFIRE_ENABLED:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False
    if not LOGFIRE_TOKEN:
        logger.warning("LOGFIRE_ENABLED is set without LOGFIRE_TOKEN; tracing stays off.")
        return False

    try:
        import logfire

        logfire.configure(
            token=LOGFIRE_TOKEN,
            service_name=LOGFIRE_SERVICE_NAME,
            service_version=LOGFIRE_SERVICE_VERSION,
            environment=LOGFIRE_ENVIRONMENT,
        )
    except Exception as e:
        logger.error(f"Failed to initialize Logfire: {e}", exc_info=True)
        return False

    _instrument("SQLAlchemy", LOGFIRE_TRACE_SQLALCHEMY, logfire.instrument_sqlalchemy)
    _instrument("HTTPX", LOGFIRE_TRACE_HTTPX, logfire.instrument_httpx)
    _instrument("FastAPI", LOGFIRE_TRACE_FASTAPI and app is not None, logfire.instrument_fastapi, app=app)

    logger.info(f"Logfire monitoring initialized: environment={LOGFIRE_ENVIRONMENT}, service={LOGFIRE_SERVICE_NAME}")
    return True


def _emit(level: str, message: str, **attributes: Any) -> None:
    if not LOGFIRE_ENABLED:
        return
    try:
        import logfire

        getattr(logfire, level)(message, **attributes)
    except Exception:
        logger.debug(f"Could not send to Logfire: {message}")


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """Record one finished API request."""
    _emit("info", "API request completed", method=method, path=path, status_code=status_code, duration_ms=duration_ms)


def log_webhook_event(event_type: str, video_id: Optional[str], outcome: str) -> None:
    """Record what a video pipeline webhook did (``outcome`` is a new status or ``ignored``)."""
    _emit("info", "Webhook processed", event_type=event_type, video_id=video_id, outcome=outcome)


def log_error(error_type: str, error_message: str, context: Optional[dict] = None) -> None:
    _emit("error", f"{error_type}: {error_message}", **(context or {}))
