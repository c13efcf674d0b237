"""Pydantic Settings v2 configuration.

Import settings via cached loaders:
    from consul_client.core.settings import get_consul_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
    4. secrets_dir
"""

from __future__ import annotations

from .consul import ConsulSettings
from .loader import clear_all_caches, get_consul_settings, get_logging_settings
from .logs import LoggingSettings

__all__ = [
    "ConsulSettings",
    "LoggingSettings",
    "clear_all_caches",
    "get_consul_settings",
    "get_logging_settings",
]
