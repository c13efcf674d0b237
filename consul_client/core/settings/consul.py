"""Consul agent connection settings.

Environment variables use CONSUL_ prefix.
Example: CONSUL_HOST=consul.local, CONSUL_TOKEN=...

The read timeout bounds every request, including blocking queries, so it
must stay above the longest ``wait`` a caller passes in QueryOptions.
"""

from __future__ import annotations

from pydantic import Field, SecretStr, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from consul_client.infra.consul.models import Check


class ConsulSettings(BaseSettings):
    """Consul HTTP API settings.

    Environment variables use CONSUL_ prefix.
    Example: CONSUL_DATACENTER=dc1
    """

    # ──────────────────────────────────────────────────────────────
    # Consul agent connection
    # ──────────────────────────────────────────────────────────────

    host: str = Field(
        default="127.0.0.1",
        description="Consul agent hostname or IP address",
    )

    port: int = Field(
        default=8500,
        ge=1,
        le=65535,
        description="Consul agent HTTP API port",
    )

    scheme: str = Field(
        default="http",
        pattern=r"^https?$",
        description="HTTP scheme for Consul API (http or https)",
    )

    token: SecretStr | None = Field(
        default=None,
        description="Consul ACL token for authentication",
    )

    datacenter: str | None = Field(
        default=None,
        description="Consul datacenter (defaults to agent's datacenter)",
    )

    verify_ssl: bool = Field(
        default=True,
        description="Verify SSL certificates when using HTTPS",
    )

    connect_timeout: float = Field(
        default=5.0,
        ge=0.5,
        le=30.0,
        description="HTTP connection timeout in seconds",
    )

    read_timeout: float = Field(
        default=360.0,
        ge=1.0,
        le=3600.0,
        description="HTTP read timeout in seconds (must exceed blocking query waits)",
    )

    # ──────────────────────────────────────────────────────────────
    # Health check defaults (used when building Check definitions)
    # ──────────────────────────────────────────────────────────────

    ttl_seconds: int = Field(
        default=30,
        ge=5,
        le=300,
        description="TTL duration in seconds (how long before a check goes critical)",
    )

    http_check_interval: str = Field(
        default="10s",
        description="How often Consul performs an HTTP check (e.g., '10s', '1m')",
    )

    # ──────────────────────────────────────────────────────────────
    # Validators
    # ──────────────────────────────────────────────────────────────

    @model_validator(mode="after")
    def _validate_timeouts(self) -> ConsulSettings:
        """Ensure the read timeout is not shorter than the connect timeout."""
        if self.read_timeout < self.connect_timeout:
            raise ValueError(
                f"read_timeout ({self.read_timeout}s) must not be less than "
                f"connect_timeout ({self.connect_timeout}s)"
            )
        return self

    # ──────────────────────────────────────────────────────────────
    # Computed properties
    # ──────────────────────────────────────────────────────────────

    @computed_field
    @property
    def base_url(self) -> str:
        """Build Consul agent base URL."""
        return f"{self.scheme}://{self.host}:{self.port}"

    # ──────────────────────────────────────────────────────────────
    # Helper methods
    # ──────────────────────────────────────────────────────────────

    def get_auth_headers(self) -> dict[str, str]:
        """Get HTTP headers for Consul API authentication.

        Returns:
            Dictionary with X-Consul-Token header if token is set.
        """
        if self.token:
            return {"X-Consul-Token": self.token.get_secret_value()}
        return {}

    def build_ttl_check(self, check_id: str, name: str, notes: str | None = None) -> Check:
        """Build a TTL health check definition.

        Args:
            check_id: Unique check identifier.
            name: Human-readable check name.
            notes: Optional free-form notes.

        Returns:
            Check carrying the configured TTL.
        """
        return Check(id=check_id, name=name, notes=notes, ttl=f"{self.ttl_seconds}s")

    def build_http_check(self, check_id: str, name: str, url: str) -> Check:
        """Build an HTTP health check definition.

        Args:
            check_id: Unique check identifier.
            name: Human-readable check name.
            url: URL Consul will poll.

        Returns:
            Check polling ``url`` at the configured interval.
        """
        return Check(id=check_id, name=name, http=url, interval=self.http_check_interval)

    # ──────────────────────────────────────────────────────────────
    # Model configuration
    # ──────────────────────────────────────────────────────────────

    model_config = SettingsConfigDict(
        env_prefix="CONSUL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )
