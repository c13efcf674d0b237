"""Consul HTTP API entry point.

ConsulClient owns the single ``httpx.Client`` used for every request and
hands out endpoint clients that share it. Timeouts, TLS verification and
the ACL token are configured once here from ConsulSettings.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from consul_client.infra.consul.kv import KeyValueClient

if TYPE_CHECKING:
    from types import TracebackType

    from consul_client.core.settings.consul import ConsulSettings

logger = logging.getLogger(__name__)


class ConsulClient:
    """Connection to a Consul agent's HTTP API.

    Example:
        settings = get_consul_settings()

        with ConsulClient(settings) as consul:
            consul.key_values.put_value("config/app/name", "billing")
    """

    def __init__(
        self,
        settings: ConsulSettings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the Consul client.

        Args:
            settings: Connection settings. Loaded from the environment when omitted.
            transport: Optional httpx transport (e.g. ``httpx.MockTransport`` in tests).
        """
        if settings is None:
            from consul_client.core.settings import get_consul_settings

            settings = get_consul_settings()

        self._settings = settings
        self._base_url = settings.base_url

        self._client = httpx.Client(
            base_url=self._base_url,
            headers=settings.get_auth_headers(),
            timeout=httpx.Timeout(settings.read_timeout, connect=settings.connect_timeout),
            verify=settings.verify_ssl,
            transport=transport,
        )
        self._key_values = KeyValueClient(self._client, datacenter=settings.datacenter)

        logger.debug(
            "ConsulClient initialized",
            extra={"base_url": self._base_url, "datacenter": settings.datacenter},
        )

    @property
    def key_values(self) -> KeyValueClient:
        """Client for the ``/v1/kv/`` endpoints."""
        return self._key_values

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._client.close()
        logger.debug("ConsulClient closed")

    def __enter__(self) -> ConsulClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
