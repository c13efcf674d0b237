"""Mock Consul KV client for testing without a real Consul agent.

MockKeyValueClient implements KeyValueClientProtocol and keeps every entry
in memory with the same index, CAS and session-lock rules the agent
applies, so code written against the protocol can be tested offline.

Usage in tests:
    from consul_client.infra.consul.mock_client import MockKeyValueClient

    @pytest.fixture
    def mock_kv():
        return MockKeyValueClient()

    def test_feature_flag(mock_kv):
        mock_kv.put_value("flags/new-ui", "on")
        assert mock_kv.get_value_as_string("flags/new-ui") == "on"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from consul_client.core.exceptions import ConsulResponseError
from consul_client.infra.consul.encoding import encode_base64
from consul_client.infra.consul.models import Value
from consul_client.infra.consul.options import PutOptions, QueryOptions, format_flags

logger = logging.getLogger(__name__)


@dataclass
class CallRecord:
    """Record of a method call for assertion in tests."""

    method: str
    args: dict[str, Any]
    success: bool


class MockKeyValueClient:
    """In-memory mock Consul KV client for testing.

    Attributes:
        entries: Stored entries by key.
        index: Store-wide Raft index, bumped on every applied write.
        call_history: List of all method calls for assertion.
        fail_next_call: Set to True to make the next call raise ConsulResponseError.
    """

    def __init__(self) -> None:
        """Initialize the mock client with an empty store."""
        self.entries: dict[str, Value] = {}
        self.index: int = 0
        self.call_history: list[CallRecord] = []
        self.fail_next_call: bool = False

    def _check_failure(self, method: str, call_args: dict[str, Any]) -> None:
        """Raise a simulated server error if fail_next_call is set, then reset it."""
        if self.fail_next_call:
            self.fail_next_call = False
            self.call_history.append(CallRecord(method, call_args, False))
            logger.debug("MockKeyValueClient: %s failed (simulated)", method)
            raise ConsulResponseError(
                detail="simulated failure",
                status_code=500,
                extra={"method": method},
            )

    def _under(self, prefix: str) -> list[Value]:
        return [self.entries[k] for k in sorted(self.entries) if k.startswith(prefix)]

    # ──────────────────────────────────────────────────────────────
    # Reads
    # ──────────────────────────────────────────────────────────────

    def get_value(self, key: str, options: QueryOptions = QueryOptions.BLANK) -> Value | None:
        """Return the stored entry, or None if absent."""
        call_args = {"key": key, "options": options}
        self._check_failure("get_value", call_args)
        self.call_history.append(CallRecord("get_value", call_args, True))
        return self.entries.get(key)

    def get_values(self, key: str, options: QueryOptions = QueryOptions.BLANK) -> list[Value]:
        """Return every entry under the prefix, sorted by key."""
        call_args = {"key": key, "options": options}
        self._check_failure("get_values", call_args)
        self.call_history.append(CallRecord("get_values", call_args, True))
        return self._under(key)

    def get_value_as_string(
        self, key: str, options: QueryOptions = QueryOptions.BLANK
    ) -> str | None:
        """Return the decoded value, or None if absent."""
        value = self.get_value(key, options)
        return value.decode_value() if value is not None else None

    def get_values_as_string(
        self, key: str, options: QueryOptions = QueryOptions.BLANK
    ) -> list[str]:
        """Return every decoded value under the prefix."""
        return [value.decode_value() for value in self.get_values(key, options)]

    def get_keys(self, key: str, options: QueryOptions = QueryOptions.BLANK) -> list[str]:
        """Return key names under the prefix, sorted."""
        call_args = {"key": key, "options": options}
        self._check_failure("get_keys", call_args)
        self.call_history.append(CallRecord("get_keys", call_args, True))
        return [value.key for value in self._under(key)]

    # ──────────────────────────────────────────────────────────────
    # Writes
    # ──────────────────────────────────────────────────────────────

    def put_value(
        self,
        key: str,
        value: str | bytes,
        flags: int = 0,
        options: PutOptions = PutOptions.BLANK,
    ) -> bool:
        """Store a value, applying CAS and session lock rules.

        Returns:
            False if the CAS index or session lock precondition fails.
        """
        format_flags(flags)
        call_args = {"key": key, "value": value, "flags": flags, "options": options}
        self._check_failure("put_value", call_args)

        current = self.entries.get(key)
        applied = self._precondition_met(current, options)
        self.call_history.append(CallRecord("put_value", call_args, applied))
        if not applied:
            logger.debug("MockKeyValueClient: put %s rejected", key)
            return False

        self.index += 1
        session = current.session if current is not None else None
        lock_index = current.lock_index if current is not None else 0
        if options.acquire:
            if session != options.acquire:
                lock_index += 1
            session = options.acquire
        elif options.release:
            session = None

        self.entries[key] = Value(
            key=key,
            value=encode_base64(value) if value else None,
            create_index=current.create_index if current is not None else self.index,
            modify_index=self.index,
            lock_index=lock_index,
            flags=flags,
            session=session,
        )
        logger.debug("MockKeyValueClient: stored %s at index %d", key, self.index)
        return True

    @staticmethod
    def _precondition_met(current: Value | None, options: PutOptions) -> bool:
        if options.cas is not None:
            current_index = current.modify_index if current is not None else 0
            if options.cas != current_index:
                return False
        if options.acquire and current is not None and current.session not in (None, options.acquire):
            return False
        if options.release and (current is None or current.session != options.release):
            return False
        return True

    def delete_key(self, key: str) -> None:
        """Delete a single key; absent keys are ignored like the agent does."""
        call_args = {"key": key}
        self._check_failure("delete_key", call_args)
        if self.entries.pop(key, None) is not None:
            self.index += 1
        self.call_history.append(CallRecord("delete_key", call_args, True))

    def delete_keys(self, key: str) -> None:
        """Delete every key under the prefix."""
        call_args = {"key": key}
        self._check_failure("delete_keys", call_args)
        doomed = [k for k in self.entries if k.startswith(key)]
        for k in doomed:
            del self.entries[k]
        if doomed:
            self.index += 1
        self.call_history.append(CallRecord("delete_keys", call_args, True))

    # ──────────────────────────────────────────────────────────────
    # Test helper methods
    # ──────────────────────────────────────────────────────────────

    def get_calls(self, method: str | None = None) -> list[CallRecord]:
        """Get call history, optionally filtered by method (test helper)."""
        if method is None:
            return list(self.call_history)
        return [c for c in self.call_history if c.method == method]

    def reset(self) -> None:
        """Reset all state (test helper)."""
        self.entries.clear()
        self.index = 0
        self.call_history.clear()
        self.fail_next_call = False
