# api/griddo/utils/logger.py
"""
App-wide logging helpers.

- Only warnings and errors in production, everything locally.
- In production, errors are also forwarded to Sentry (if SENTRY_DSN is set).
"""
from __future__ import annotations

import logging
from typing import Any

import sentry_sdk

from ..settings import settings

logger = logging.getLogger("griddo")

_configured = False


def configure_logging() -> None:
    global _configured
    if _configured:
        return

    level = logging.WARNING if settings.is_production else logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.setLevel(level)

    if settings.is_production and settings.SENTRY_DSN:
        sentry_sdk.init(dsn=settings.SENTRY_DSN, environment=settings.ENV)

    _configured = True


def _fmt(context: str, message: Any, metadata: dict[str, Any]) -> str:
    if metadata:
        return f"{context}: {message} {metadata}"
    return f"{context}: {message}"


def log_info(context: str, message: str, **metadata: Any) -> None:
    logger.info(_fmt(context, message, metadata))


def log_warning(context: str, message: str, **metadata: Any) -> None:
    logger.warning(_fmt(context, message, metadata))


def log_error(context: str, error: Any, **metadata: Any) -> None:
    logger.error(_fmt(context, repr(error), metadata))

    if settings.is_production and settings.SENTRY_DSN:
        with sentry_sdk.new_scope() as scope:
            scope.set_extra("context", context)
            for key, value in metadata.items():
                scope.set_extra(key, value)
            if isinstance(error, BaseException):
                sentry_sdk.capture_exception(error)
            else:
                sentry_sdk.capture_message(f"{context}: {error}", level="error")
