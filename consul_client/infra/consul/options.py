"""Request options and query parameter building for the KV endpoints.

Every optional parameter goes through QueryParams, which only records a
parameter when it carries a non-default value. Callers build one
QueryParams per request and pass ``build()`` straight to httpx.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from consul_client.infra.consul.models import MAX_FLAGS


class ConsistencyMode(str, Enum):
    """Read consistency modes supported by Consul."""

    DEFAULT = "default"
    CONSISTENT = "consistent"  # Leader verifies it still holds leadership
    STALE = "stale"  # Any server may answer, possibly with stale data


class QueryParams:
    """Accumulates query parameters, skipping unset values.

    Example:
        params = QueryParams().set("cas", 5).set("acquire", None).build()
        # {"cas": "5"}
    """

    def __init__(self) -> None:
        self._params: dict[str, str] = {}

    def set(self, name: str, value: object) -> QueryParams:
        """Record ``name=value`` unless value is None or an empty string."""
        if value is None or value == "":
            return self
        self._params[name] = str(value)
        return self

    def flag(self, name: str, enabled: bool = True) -> QueryParams:
        """Record a presence-only parameter (sent as ``name=``)."""
        if enabled:
            self._params[name] = ""
        return self

    def update(self, params: dict[str, str]) -> QueryParams:
        """Merge already-built parameters."""
        self._params.update(params)
        return self

    def build(self) -> dict[str, str]:
        """Return a copy of the accumulated parameters."""
        return dict(self._params)


def format_flags(flags: int) -> str | None:
    """Serialize KV flags as an unsigned 64-bit decimal string.

    Args:
        flags: Caller-defined flags, 0 <= flags <= 2**64 - 1.

    Returns:
        Decimal string, or None when flags is 0 (parameter omitted).

    Raises:
        ValueError: If flags is outside the unsigned 64-bit range.
    """
    if isinstance(flags, bool) or not isinstance(flags, int):
        raise TypeError(f"flags must be an int, got {type(flags).__name__}")
    if flags < 0 or flags > MAX_FLAGS:
        raise ValueError(f"flags must be between 0 and {MAX_FLAGS}, got {flags}")
    if flags == 0:
        return None
    return str(flags)


@dataclass(frozen=True)
class QueryOptions:
    """Read-time options: consistency mode, blocking wait and datacenter.

    Attributes:
        consistency_mode: How fresh the answer must be.
        index: Block until the entry's index moves past this value.
        wait: Maximum blocking time in seconds (requires ``index``).
        datacenter: Query this datacenter instead of the agent's own.
    """

    BLANK: ClassVar[QueryOptions]

    consistency_mode: ConsistencyMode = ConsistencyMode.DEFAULT
    index: int | None = None
    wait: int | None = None
    datacenter: str | None = None

    def __post_init__(self) -> None:
        if self.index is not None and self.index < 0:
            raise ValueError(f"index must be non-negative, got {self.index}")
        if self.wait is not None:
            if self.wait < 0:
                raise ValueError(f"wait must be non-negative, got {self.wait}")
            if self.index is None:
                raise ValueError("wait requires an index to block on")

    @classmethod
    def blocking(
        cls,
        index: int,
        wait: int | None = None,
        datacenter: str | None = None,
    ) -> QueryOptions:
        """Build options for a blocking query past ``index``."""
        return cls(index=index, wait=wait, datacenter=datacenter)

    def to_params(self) -> dict[str, str]:
        """Translate the options into query parameters."""
        params = QueryParams()
        params.flag("consistent", self.consistency_mode is ConsistencyMode.CONSISTENT)
        params.flag("stale", self.consistency_mode is ConsistencyMode.STALE)
        params.set("index", self.index)
        params.set("wait", f"{self.wait}s" if self.wait is not None else None)
        params.set("dc", self.datacenter)
        return params.build()


@dataclass(frozen=True)
class PutOptions:
    """Write-time options: check-and-set index and session lock operations.

    Attributes:
        cas: Only write if the entry's ModifyIndex equals this value
            (0 means only write if the key does not exist).
        acquire: Session ID that should take the lock on the entry.
        release: Session ID that should give up the lock on the entry.
    """

    BLANK: ClassVar[PutOptions]

    cas: int | None = None
    acquire: str | None = None
    release: str | None = None

    def __post_init__(self) -> None:
        if self.cas is not None and self.cas < 0:
            raise ValueError(f"cas must be non-negative, got {self.cas}")
        if self.acquire and self.release:
            raise ValueError("acquire and release cannot be combined in one write")

    def to_params(self) -> dict[str, str]:
        """Translate the options into query parameters."""
        params = QueryParams()
        params.set("cas", self.cas)
        params.set("acquire", self.acquire)
        params.set("release", self.release)
        return params.build()


QueryOptions.BLANK = QueryOptions()
PutOptions.BLANK = PutOptions()
