"""Base64 helpers for Consul KV payloads.

Consul returns stored values base64-encoded inside the JSON body. Decoding
is strict: anything outside the base64 alphabet, bad padding or bytes that
are not UTF-8 raise ValueDecodeError instead of producing a partial string.
"""

from __future__ import annotations

import base64
import binascii

from consul_client.core.exceptions import ValueDecodeError


def decode_base64(encoded: str | None) -> str:
    """Decode a base64 payload into a UTF-8 string.

    Args:
        encoded: Base64 text as returned by Consul. ``None`` (an entry with
            an empty value) decodes to an empty string.

    Returns:
        The decoded string.

    Raises:
        ValueDecodeError: If the payload is not valid base64 or UTF-8.
    """
    if encoded is None:
        return ""

    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueDecodeError(
            f"Value is not valid base64: {e}",
            extra={"length": len(encoded)},
        ) from e

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ValueDecodeError(
            f"Value is not valid UTF-8: {e}",
            extra={"length": len(raw)},
        ) from e


def encode_base64(value: str | bytes) -> str:
    """Encode a value the way Consul stores it; strings are encoded as UTF-8 first."""
    raw = value.encode("utf-8") if isinstance(value, str) else value
    return base64.b64encode(raw).decode("ascii")
