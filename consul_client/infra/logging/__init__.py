"""Logging infrastructure.

Basic usage:
    from consul_client.infra.logging import setup_logging

    setup_logging()  # reads LOG_LEVEL / LOG_JSON_LOGS from the environment
"""

from consul_client.infra.logging.config import (
    build_logging_config,
    configure_logging,
    setup_logging,
)
from consul_client.infra.logging.formatters import JSONFormatter

__all__ = [
    "JSONFormatter",
    "build_logging_config",
    "configure_logging",
    "setup_logging",
]
