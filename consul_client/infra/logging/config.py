"""Logging configuration setup.

Configures the root logger through ``logging.config.dictConfig`` with a
single stderr handler. Library modules only call ``logging.getLogger``;
applications that want the client's logs formatted call setup_logging()
once at startup.
"""

from __future__ import annotations

import logging
import logging.config
from typing import TYPE_CHECKING, Any

logger = logging.getLogger(__name__)
_LOGGING_INITIALIZED = False

if TYPE_CHECKING:
    from consul_client.core.settings.logs import LoggingSettings

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    settings_obj = log_settings
    if settings_obj is None:
        from consul_client.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    log_config = {**settings_obj.to_logging_kwargs(), **configure_kwargs}
    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    service_name: str | None = None,
    capture_warnings: bool = True,
    include_thread_info: bool = False,
) -> None:
    """Configure the root logger with dictConfig.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_logs: Emit JSON Lines instead of plain text.
        service_name: Static ``service`` field added to JSON records.
        capture_warnings: Forward Python warnings to logging system.
        include_thread_info: Include thread ID and name in JSON records.

    Example:
        from consul_client.core.settings import get_logging_settings
        configure_logging(**get_logging_settings().to_logging_kwargs())
    """
    logging.captureWarnings(capture_warnings)
    logging.config.dictConfig(
        build_logging_config(
            log_level=log_level,
            json_logs=json_logs,
            service_name=service_name,
            include_thread_info=include_thread_info,
        )
    )
    logger.debug("Logging configured", extra={"level": log_level, "json": json_logs})


def build_logging_config(
    log_level: str,
    json_logs: bool,
    service_name: str | None = None,
    include_thread_info: bool = False,
) -> dict[str, Any]:
    """Build the dictConfig mapping used by configure_logging()."""
    if json_logs:
        formatter: dict[str, Any] = {
            "()": "consul_client.infra.logging.formatters.JSONFormatter",
            "static": {"service": service_name} if service_name else None,
            "include_thread_info": include_thread_info,
        }
    else:
        formatter = {"format": TEXT_FORMAT}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
            },
        },
        "root": {
            "level": log_level.upper(),
            "handlers": ["console"],
        },
        # httpx logs every request at INFO; keep it quiet unless debugging
        "loggers": {
            "httpx": {"level": "WARNING"},
            "httpcore": {"level": "WARNING"},
        },
    }
