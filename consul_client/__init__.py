"""Client library for the Consul HTTP API key/value store."""

from consul_client.core.exceptions import (
    ConsulException,
    ConsulResponseError,
    ValueDecodeError,
)
from consul_client.infra.consul import (
    Check,
    ConsistencyMode,
    ConsulClient,
    KeyValueClient,
    KeyValueClientProtocol,
    MockKeyValueClient,
    PutOptions,
    QueryOptions,
    Value,
)

__all__ = [
    "Check",
    "ConsistencyMode",
    "ConsulClient",
    "ConsulException",
    "ConsulResponseError",
    "KeyValueClient",
    "KeyValueClientProtocol",
    "MockKeyValueClient",
    "PutOptions",
    "QueryOptions",
    "Value",
    "ValueDecodeError",
]
