"""Tracing tests for KeyValueClient spans."""
from __future__ import annotations

import httpx
import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from consul_client.infra.consul import ConsulClient

_EXPORTER = InMemorySpanExporter()


@pytest.fixture(scope="module")
def span_exporter() -> InMemorySpanExporter:
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(_EXPORTER))
    trace.set_tracer_provider(provider)
    return _EXPORTER


@pytest.mark.unit
class TestKeyValueTracing:
    """Test that every KV request produces a span."""

    def test_span_per_request(self, span_exporter, kv, fake_consul):
        span_exporter.clear()
        fake_consul.seed("config/app/name", "billing")

        kv.get_value("config/app/name")

        spans = [s for s in span_exporter.get_finished_spans() if s.name == "consul.kv.get"]
        assert len(spans) == 1
        assert spans[0].attributes["consul.key"] == "config/app/name"
        assert spans[0].attributes["consul.status_code"] == 200
        assert spans[0].attributes["consul.success"] is True

    def test_transport_error_recorded(self, span_exporter, consul_settings):
        span_exporter.clear()

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with ConsulClient(consul_settings, transport=httpx.MockTransport(refuse)) as client:
            with pytest.raises(httpx.ConnectError):
                client.key_values.delete_keys("config")

        spans = [
            s for s in span_exporter.get_finished_spans() if s.name == "consul.kv.delete_recurse"
        ]
        assert len(spans) == 1
        assert spans[0].attributes["consul.success"] is False
        assert any(event.name == "exception" for event in spans[0].events)
