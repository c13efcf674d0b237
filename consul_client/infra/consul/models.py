"""Data models for Consul API payloads.

Field names follow Python conventions; aliases match the JSON keys Consul
emits. Unknown fields are ignored so newer agents do not break parsing.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from consul_client.infra.consul.encoding import decode_base64

MAX_FLAGS = 2**64 - 1


class Value(BaseModel):
    """A key/value entry as returned by ``GET /v1/kv/{key}``.

    ``value`` keeps the base64 text from the wire; use ``decode_value()``
    for the string form. Instances are immutable snapshots.
    """

    key: str = Field(alias="Key")
    value: str | None = Field(default=None, alias="Value")
    create_index: int = Field(default=0, ge=0, alias="CreateIndex")
    modify_index: int = Field(default=0, ge=0, alias="ModifyIndex")
    lock_index: int = Field(default=0, ge=0, alias="LockIndex")
    flags: int = Field(default=0, ge=0, le=MAX_FLAGS, alias="Flags")
    session: str | None = Field(default=None, alias="Session")

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    def decode_value(self) -> str:
        """Decode the stored payload into a UTF-8 string.

        Raises:
            ValueDecodeError: If the payload is malformed.
        """
        return decode_base64(self.value)


class Check(BaseModel):
    """Agent health check definition.

    Plain data record; the KV client never sends it. Note that Consul uses
    a lowercase ``http`` key here.
    """

    id: str | None = Field(default=None, alias="ID")
    name: str | None = Field(default=None, alias="Name")
    notes: str | None = Field(default=None, alias="Notes")
    script: str | None = Field(default=None, alias="Script")
    http: str | None = Field(default=None, alias="http")
    interval: str | None = Field(default=None, alias="Interval")
    ttl: str | None = Field(default=None, alias="TTL")

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )

    def to_payload(self) -> dict[str, str]:
        """Serialize to the JSON shape Consul expects, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)
