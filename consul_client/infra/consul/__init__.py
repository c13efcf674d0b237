"""Consul HTTP API client.

This package provides a synchronous client for the Consul key/value store with:
- Typed entries (pydantic) and base64 decoding helpers
- Consistency modes and blocking queries via QueryOptions
- CAS writes and session locks via PutOptions
- OpenTelemetry tracing and Prometheus metrics
- Mock client for testing

Usage:
    from consul_client.infra.consul import ConsulClient, PutOptions

    with ConsulClient() as consul:
        kv = consul.key_values
        entry = kv.get_value("config/app/name")
        if entry is not None:
            kv.put_value("config/app/name", "billing", options=PutOptions(cas=entry.modify_index))

Configuration:
    # Environment variables
    CONSUL_HOST=consul.service.consul
    CONSUL_PORT=8500
    CONSUL_TOKEN=...

Testing:
    from consul_client.infra.consul import MockKeyValueClient

    kv = MockKeyValueClient()
    kv.put_value("a/b", "c")
    assert kv.get_keys("a/") == ["a/b"]
"""

from consul_client.infra.consul.client import ConsulClient
from consul_client.infra.consul.encoding import decode_base64, encode_base64
from consul_client.infra.consul.kv import KeyValueClient
from consul_client.infra.consul.mock_client import MockKeyValueClient
from consul_client.infra.consul.models import Check, Value
from consul_client.infra.consul.options import (
    ConsistencyMode,
    PutOptions,
    QueryOptions,
    QueryParams,
)
from consul_client.infra.consul.protocols import KeyValueClientProtocol

__all__ = [
    # Protocol
    "KeyValueClientProtocol",
    # Clients
    "ConsulClient",
    "KeyValueClient",
    "MockKeyValueClient",
    # Models
    "Check",
    "Value",
    # Options
    "ConsistencyMode",
    "PutOptions",
    "QueryOptions",
    "QueryParams",
    # Encoding
    "decode_base64",
    "encode_base64",
]
