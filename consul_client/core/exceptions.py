"""Exception classes raised by the Consul client."""

from __future__ import annotations

from typing import Any


class ConsulException(Exception):
    """Base Consul client exception.

    All client-raised exceptions inherit from this class. Transport
    failures (timeouts, refused connections) are not wrapped and surface
    as ``httpx.HTTPError`` subclasses.

    Attributes:
        status_code: HTTP status code returned by Consul, if any.
        detail: Human-readable error message.
        extra: Additional context-specific information about the error.

    Example:
            raise ConsulException(
            detail="Unexpected response from Consul",
            status_code=500,
            extra={"key": "config/app/name"}
        )
    """

    def __init__(
        self,
        detail: str,
        status_code: int | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize Consul exception.

        Args:
            detail: Human-readable error message.
            status_code: HTTP status code, when the error came from a response.
            extra: Additional context about the error.
        """
        self.detail = detail
        self.status_code = status_code
        self.extra = extra or {}
        super().__init__(detail)


class ConsulResponseError(ConsulException):
    """Exception raised when Consul answers with an unexpected status or body.

    The response body text is kept as the detail so callers see exactly
    what the agent reported.

    Example:
            raise ConsulResponseError(
            detail="Permission denied",
            status_code=403,
            extra={"method": "DELETE", "path": "/v1/kv/config/app"}
        )
    """

    def __init__(
        self,
        detail: str,
        status_code: int | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize response error.

        Args:
            detail: Response body text or a description of the malformed body.
            status_code: HTTP status code of the response.
            extra: Additional context about the error.
        """
        super().__init__(detail=detail, status_code=status_code, extra=extra)


class ValueDecodeError(ConsulException, ValueError):
    """Exception raised when a stored value is not valid base64 or UTF-8."""

    def __init__(self, detail: str, extra: dict[str, Any] | None = None) -> None:
        super().__init__(detail=detail, status_code=None, extra=extra)
