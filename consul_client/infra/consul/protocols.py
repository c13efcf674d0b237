"""Protocol definitions for the Consul KV client abstraction.

KeyValueClientProtocol lets application code depend on the contract rather
than on the HTTP implementation, so tests can inject MockKeyValueClient.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from consul_client.infra.consul.models import Value
    from consul_client.infra.consul.options import PutOptions, QueryOptions


@runtime_checkable
class KeyValueClientProtocol(Protocol):
    """Protocol for Consul key/value operations.

    Reads return None or an empty list for missing keys. Writes report
    precondition failures (CAS, session locks) as False. Other failures
    raise.
    """

    def get_value(self, key: str, options: QueryOptions = ...) -> Value | None:
        """Retrieve the entry stored at ``key``, or None."""
        ...

    def get_values(self, key: str, options: QueryOptions = ...) -> list[Value]:
        """Retrieve every entry under the ``key`` prefix."""
        ...

    def get_value_as_string(self, key: str, options: QueryOptions = ...) -> str | None:
        """Retrieve the decoded value at ``key``, or None."""
        ...

    def get_values_as_string(self, key: str, options: QueryOptions = ...) -> list[str]:
        """Retrieve every decoded value under the ``key`` prefix."""
        ...

    def get_keys(self, key: str, options: QueryOptions = ...) -> list[str]:
        """List key names under the ``key`` prefix."""
        ...

    def put_value(
        self,
        key: str,
        value: str | bytes,
        flags: int = 0,
        options: PutOptions = ...,
    ) -> bool:
        """Store ``value`` at ``key``; False when a precondition fails."""
        ...

    def delete_key(self, key: str) -> None:
        """Delete a single key."""
        ...

    def delete_keys(self, key: str) -> None:
        """Delete every key under the ``key`` prefix."""
        ...
