"""Pytest configuration and shared fixtures.

Organization:
    - Fake Consul agent: an in-memory KV store served through httpx.MockTransport
    - Client fixtures: settings, ConsulClient and KeyValueClient wired to the fake
    - Metrics helpers

The fake agent follows the agent's observable KV behavior closely enough
for client tests: 404 for missing keys, lexicographic listing, Raft-style
indices, CAS and session locks, and forced responses for error paths.
"""

from __future__ import annotations

import base64
import json
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

from consul_client.core.settings import ConsulSettings
from consul_client.infra.consul import ConsulClient, KeyValueClient
from consul_client.infra.metrics.prometheus import REGISTRY

KV_PREFIX = "/v1/kv/"


# ============================================================================
# Fake Consul agent
# ============================================================================


@dataclass
class FakeConsulAgent:
    """In-memory stand-in for the Consul agent's /v1/kv/ endpoints.

    Attributes:
        entries: Stored entries in Consul's JSON shape, keyed by key.
        requests: Every request received, for asserting on params and bodies.
        forced: Queue of responses returned instead of store behavior.
        index: Store-wide index bumped on every applied write.
    """

    entries: dict[str, dict[str, Any]] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)
    forced: list[httpx.Response] = field(default_factory=list)
    index: int = 0

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def respond_with(self, status_code: int, body: Any = None, text: str | None = None) -> None:
        """Queue a canned response for the next request."""
        if text is not None:
            self.forced.append(httpx.Response(status_code, text=text))
        elif body is not None:
            self.forced.append(httpx.Response(status_code, json=body))
        else:
            self.forced.append(httpx.Response(status_code))

    def seed(self, key: str, value: str | None, **fields: Any) -> dict[str, Any]:
        """Insert an entry directly, bypassing PUT semantics."""
        self.index += 1
        entry = {
            "Key": key,
            "Value": base64.b64encode(value.encode()).decode() if value else None,
            "CreateIndex": self.index,
            "ModifyIndex": self.index,
            "LockIndex": 0,
            "Flags": 0,
            "Session": None,
        }
        entry.update(fields)
        self.entries[key] = entry
        return entry

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.forced:
            return self.forced.pop(0)

        path = request.url.path
        assert path.startswith(KV_PREFIX), f"Unexpected path: {path}"
        key = path[len(KV_PREFIX):]
        params = request.url.params

        if request.method == "GET":
            return self._get(key, params)
        if request.method == "PUT":
            return self._put(key, params, request.content)
        if request.method == "DELETE":
            return self._delete(key, params)
        return httpx.Response(405, text="method not allowed")

    def _matching(self, prefix: str) -> list[dict[str, Any]]:
        return [self.entries[k] for k in sorted(self.entries) if k.startswith(prefix)]

    def _get(self, key: str, params: httpx.QueryParams) -> httpx.Response:
        headers = {"X-Consul-Index": str(self.index)}
        if "keys" in params:
            found = [e["Key"] for e in self._matching(key)]
            return httpx.Response(200, json=found, headers=headers) if found else httpx.Response(404)
        if "recurse" in params:
            found = self._matching(key)
            return httpx.Response(200, json=found, headers=headers) if found else httpx.Response(404)
        if key in self.entries:
            return httpx.Response(200, json=[self.entries[key]], headers=headers)
        return httpx.Response(404, headers=headers)

    def _put(self, key: str, params: httpx.QueryParams, body: bytes) -> httpx.Response:
        current = self.entries.get(key)
        if "cas" in params:
            expected = int(params["cas"])
            if expected != (current["ModifyIndex"] if current else 0):
                return httpx.Response(200, json=False)
        acquire = params.get("acquire")
        release = params.get("release")
        holder = current["Session"] if current else None
        if acquire and holder not in (None, acquire):
            return httpx.Response(200, json=False)
        if release and holder != release:
            return httpx.Response(200, json=False)

        self.index += 1
        lock_index = current["LockIndex"] if current else 0
        session = holder
        if acquire:
            if holder != acquire:
                lock_index += 1
            session = acquire
        elif release:
            session = None

        self.entries[key] = {
            "Key": key,
            "Value": base64.b64encode(body).decode() if body else None,
            "CreateIndex": current["CreateIndex"] if current else self.index,
            "ModifyIndex": self.index,
            "LockIndex": lock_index,
            "Flags": int(params.get("flags", 0)),
            "Session": session,
        }
        return httpx.Response(200, content=json.dumps(True).encode())

    def _delete(self, key: str, params: httpx.QueryParams) -> httpx.Response:
        if "recurse" in params:
            for k in [k for k in self.entries if k.startswith(key)]:
                del self.entries[k]
        else:
            self.entries.pop(key, None)
        self.index += 1
        return httpx.Response(200)


@pytest.fixture
def fake_consul() -> FakeConsulAgent:
    """Fresh fake Consul agent per test."""
    return FakeConsulAgent()


# ============================================================================
# Client Fixtures
# ============================================================================


@pytest.fixture
def consul_settings() -> ConsulSettings:
    """Settings pointing at the fake agent, ignoring any local .env file."""
    return ConsulSettings(_env_file=None, host="consul.test", port=8500)


@pytest.fixture
def consul_client(
    consul_settings: ConsulSettings, fake_consul: FakeConsulAgent
) -> Iterator[ConsulClient]:
    """ConsulClient whose transport is the fake agent."""
    client = ConsulClient(consul_settings, transport=httpx.MockTransport(fake_consul.handler))
    yield client
    client.close()


@pytest.fixture
def kv(consul_client: ConsulClient) -> KeyValueClient:
    """KeyValueClient wired to the fake agent."""
    return consul_client.key_values


# ============================================================================
# Metrics helpers
# ============================================================================


@pytest.fixture
def metric_value():
    """Return a reader for samples in the client's registry (missing reads as zero).

    Example:
        def test_counts(kv, metric_value):
            before = metric_value("consul_kv_operations_total", {"operation": "get", "status": "success"})
    """

    def _read(name: str, labels: dict[str, str]) -> float:
        return REGISTRY.get_sample_value(name, labels) or 0.0

    return _read
