"""HTTP client for the Consul ``/v1/kv/`` endpoints.

Each method is one synchronous request through a shared ``httpx.Client``:
- Missing keys come back as ``None`` or an empty list, never an error
- Failed CAS and lock preconditions come back as ``False`` from put_value
- Unexpected statuses raise ConsulResponseError carrying the body text
- Transport errors (``httpx.HTTPError``) propagate unchanged

Every request is traced with OpenTelemetry and counted in Prometheus.
"""

from __future__ import annotations

import logging
import time
from typing import Any
from urllib.parse import quote

import httpx
from opentelemetry import trace
from pydantic import ValidationError

from consul_client.core.exceptions import ConsulResponseError
from consul_client.infra.consul.metrics import (
    consul_kv_blocking_query_duration_seconds,
    consul_kv_errors_total,
    consul_kv_operation_duration_seconds,
    consul_kv_operations_total,
)
from consul_client.infra.consul.models import Value
from consul_client.infra.consul.options import (
    PutOptions,
    QueryOptions,
    QueryParams,
    format_flags,
)

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

KV_PATH = "/v1/kv/"


def _key_path(key: str) -> str:
    """Percent-encode ``key`` into a request path, keeping ``/`` as the separator."""
    return KV_PATH + quote(key, safe="/")


class KeyValueClient:
    """Client for reading and writing Consul key/value entries.

    Holds only the HTTP client and a default datacenter, so a single
    instance can be shared between threads.

    Example:
        with ConsulClient() as consul:
            kv = consul.key_values
            kv.put_value("config/app/name", "billing")
            kv.get_value_as_string("config/app/name")  # "billing"
    """

    def __init__(self, http_client: httpx.Client, datacenter: str | None = None) -> None:
        """Initialize the KV client.

        Args:
            http_client: httpx client whose base_url points at the Consul agent.
            datacenter: Datacenter sent as ``dc`` on every request unless a
                QueryOptions instance names another one.
        """
        self._client = http_client
        self._datacenter = datacenter

    # ──────────────────────────────────────────────────────────────
    # Reads
    # ──────────────────────────────────────────────────────────────

    def get_value(self, key: str, options: QueryOptions = QueryOptions.BLANK) -> Value | None:
        """Retrieve the entry stored at ``key``.

        GET /v1/kv/{key}

        Args:
            key: The key to retrieve.
            options: Consistency, blocking and datacenter options.

        Returns:
            The first entry in Consul's answer, or None if the key is absent.
        """
        body = self._read("get", key, options)
        values = self._parse_values(body, "get", key)
        consul_kv_operations_total.labels(operation="get", status="success").inc()
        return values[0] if values else None

    def get_values(self, key: str, options: QueryOptions = QueryOptions.BLANK) -> list[Value]:
        """Retrieve every entry whose key starts with ``key``.

        GET /v1/kv/{key}?recurse=true

        Args:
            key: The key prefix to list.
            options: Consistency, blocking and datacenter options.

        Returns:
            Zero or more entries in the order Consul returned them.
        """
        body = self._read("get_recurse", key, options, QueryParams().set("recurse", "true"))
        values = self._parse_values(body, "get_recurse", key)
        consul_kv_operations_total.labels(operation="get_recurse", status="success").inc()
        return values

    def get_value_as_string(
        self, key: str, options: QueryOptions = QueryOptions.BLANK
    ) -> str | None:
        """Retrieve the value at ``key`` decoded as a UTF-8 string.

        Returns:
            The decoded value, or None if the key is absent.

        Raises:
            ValueDecodeError: If the stored payload is malformed.
        """
        value = self.get_value(key, options)
        if value is None:
            return None
        return value.decode_value()

    def get_values_as_string(
        self, key: str, options: QueryOptions = QueryOptions.BLANK
    ) -> list[str]:
        """Retrieve every value under ``key`` decoded as UTF-8 strings.

        Raises:
            ValueDecodeError: If any stored payload is malformed.
        """
        return [value.decode_value() for value in self.get_values(key, options)]

    def get_keys(self, key: str, options: QueryOptions = QueryOptions.BLANK) -> list[str]:
        """List the key names under ``key`` without their values.

        GET /v1/kv/{key}?keys=true

        Args:
            key: The key prefix to list.
            options: Consistency, blocking and datacenter options.

        Returns:
            Zero or more key names.
        """
        body = self._read("keys", key, options, QueryParams().set("keys", "true"))
        if body is None:
            return []
        if not isinstance(body, list) or not all(isinstance(k, str) for k in body):
            raise self._invalid_body("keys", key, "expected a JSON array of key names")
        consul_kv_operations_total.labels(operation="keys", status="success").inc()
        return body

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
        """Store ``value`` at ``key``.

        PUT /v1/kv/{key}

        The value is sent as the raw request body; Consul base64-encodes it
        in read responses.

        Args:
            key: The key to write.
            value: The value to store.
            flags: Opaque unsigned 64-bit flags stored with the entry.
            options: CAS and session lock options.

        Returns:
            True if the write was applied, False if a CAS or lock
            precondition was not met.

        Raises:
            ValueError: If flags is outside the unsigned 64-bit range.
            ConsulResponseError: On an unexpected status or non-boolean body.
        """
        params = self._base_params()
        params.set("flags", format_flags(flags))
        params.update(options.to_params())

        content = value.encode("utf-8") if isinstance(value, str) else value
        response = self._send(
            "put",
            "PUT",
            key,
            params.build(),
            content=content,
            headers={"Content-Type": "text/plain; charset=utf-8"},
        )

        if response.status_code != 200:
            raise self._status_error("put", key, response)

        try:
            result = response.json()
        except ValueError as e:
            raise self._invalid_body("put", key, f"body is not JSON: {response.text[:200]}") from e

        if not isinstance(result, bool):
            raise self._invalid_body("put", key, f"expected a boolean, got {response.text[:200]}")

        status = "success" if result else "rejected"
        consul_kv_operations_total.labels(operation="put", status=status).inc()
        if result:
            logger.debug("Consul KV put applied", extra={"key": key})
        else:
            logger.info(
                "Consul KV put rejected by precondition",
                extra={"key": key, "cas": options.cas, "session": options.acquire or options.release},
            )
        return result

    def delete_key(self, key: str) -> None:
        """Delete a single key.

        DELETE /v1/kv/{key}

        Raises:
            ConsulResponseError: If Consul does not answer 200.
        """
        self._delete("delete", key, QueryParams())

    def delete_keys(self, key: str) -> None:
        """Delete ``key`` and every key below it.

        DELETE /v1/kv/{key}?recurse=true

        Raises:
            ConsulResponseError: If Consul does not answer 200.
        """
        self._delete("delete_recurse", key, QueryParams().set("recurse", "true"))

    # ──────────────────────────────────────────────────────────────
    # Internals
    # ──────────────────────────────────────────────────────────────

    def _base_params(self) -> QueryParams:
        return QueryParams().set("dc", self._datacenter)

    def _read(
        self,
        operation: str,
        key: str,
        options: QueryOptions,
        extra_params: QueryParams | None = None,
    ) -> Any:
        """Issue a GET and return the decoded JSON body, or None when absent."""
        params = self._base_params()
        if extra_params is not None:
            params.update(extra_params.build())
        params.update(options.to_params())

        response = self._send(
            operation,
            "GET",
            key,
            params.build(),
            headers={"Accept": "application/json"},
            blocking=options.index is not None,
        )

        if response.status_code == 404:
            consul_kv_operations_total.labels(operation=operation, status="not_found").inc()
            logger.debug("Consul KV key not found", extra={"key": key, "operation": operation})
            return None

        if response.status_code != 200:
            raise self._status_error(operation, key, response)

        if not response.content.strip():
            return None

        try:
            return response.json()
        except ValueError as e:
            raise self._invalid_body(operation, key, "body is not JSON") from e

    def _parse_values(self, body: Any, operation: str, key: str) -> list[Value]:
        if body is None:
            return []
        if not isinstance(body, list):
            raise self._invalid_body(operation, key, "expected a JSON array of entries")
        try:
            return [Value.model_validate(item) for item in body]
        except ValidationError as e:
            raise self._invalid_body(operation, key, f"invalid entry: {e}") from e

    def _delete(self, operation: str, key: str, extra_params: QueryParams) -> None:
        params = self._base_params().update(extra_params.build())
        response = self._send(operation, "DELETE", key, params.build())
        try:
            if response.status_code != 200:
                raise self._status_error(operation, key, response)
            consul_kv_operations_total.labels(operation=operation, status="success").inc()
            logger.debug("Consul KV delete applied", extra={"key": key, "operation": operation})
        finally:
            response.close()

    def _send(
        self,
        operation: str,
        method: str,
        key: str,
        params: dict[str, str],
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
        blocking: bool = False,
    ) -> httpx.Response:
        """Send one request, recording its span, latency and transport errors."""
        start_time = time.perf_counter()
        histogram = (
            consul_kv_blocking_query_duration_seconds
            if blocking
            else consul_kv_operation_duration_seconds
        )

        with tracer.start_as_current_span(f"consul.kv.{operation}") as span:
            span.set_attribute("consul.key", key)
            span.set_attribute("consul.operation", operation)
            span.set_attribute("consul.blocking", blocking)

            try:
                response = self._client.request(
                    method,
                    _key_path(key),
                    params=params,
                    content=content,
                    headers=headers,
                )
            except httpx.TimeoutException as e:
                histogram.labels(operation=operation).observe(time.perf_counter() - start_time)
                span.set_attribute("consul.success", False)
                span.record_exception(e)
                consul_kv_operations_total.labels(operation=operation, status="failure").inc()
                consul_kv_errors_total.labels(operation=operation, error_type="timeout").inc()
                logger.warning(
                    "Consul KV request timed out",
                    extra={"key": key, "operation": operation, "error": str(e)},
                )
                raise
            except httpx.HTTPError as e:
                histogram.labels(operation=operation).observe(time.perf_counter() - start_time)
                span.set_attribute("consul.success", False)
                span.record_exception(e)
                consul_kv_operations_total.labels(operation=operation, status="failure").inc()
                consul_kv_errors_total.labels(operation=operation, error_type="connection").inc()
                logger.warning(
                    "Consul KV connection error",
                    extra={"key": key, "operation": operation, "error": str(e)},
                )
                raise

            histogram.labels(operation=operation).observe(time.perf_counter() - start_time)
            span.set_attribute("consul.status_code", response.status_code)
            span.set_attribute("consul.success", response.status_code in (200, 404))
            return response

    def _status_error(
        self, operation: str, key: str, response: httpx.Response
    ) -> ConsulResponseError:
        consul_kv_operations_total.labels(operation=operation, status="failure").inc()
        consul_kv_errors_total.labels(operation=operation, error_type="http_error").inc()
        logger.warning(
            "Consul KV request failed",
            extra={
                "key": key,
                "operation": operation,
                "status_code": response.status_code,
                "response": response.text[:200],
            },
        )
        return ConsulResponseError(
            detail=response.text,
            status_code=response.status_code,
            extra={"key": key, "operation": operation},
        )

    def _invalid_body(self, operation: str, key: str, reason: str) -> ConsulResponseError:
        consul_kv_operations_total.labels(operation=operation, status="failure").inc()
        consul_kv_errors_total.labels(operation=operation, error_type="invalid_body").inc()
        logger.warning(
            "Consul KV response body malformed",
            extra={"key": key, "operation": operation, "reason": reason},
        )
        return ConsulResponseError(
            detail=f"Malformed response for {key!r}: {reason}",
            status_code=200,
            extra={"key": key, "operation": operation},
        )

