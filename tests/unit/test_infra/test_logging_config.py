"""Unit tests for logging configuration and the JSONL formatter."""
from __future__ import annotations

import json
import logging

import pytest

from consul_client.core.settings import LoggingSettings
from consul_client.infra.logging import (
    JSONFormatter,
    build_logging_config,
    configure_logging,
    setup_logging,
)


def _record(msg: str = "Consul KV request failed", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="consul_client.infra.consul.kv",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


@pytest.mark.unit
class TestJSONFormatter:
    """Test suite for JSONFormatter."""

    def test_emits_single_json_line(self):
        output = JSONFormatter().format(_record(key="config/app", status_code=500))

        assert "\n" not in output
        data = json.loads(output)
        assert data["level"] == "WARNING"
        assert data["logger"] == "consul_client.infra.consul.kv"
        assert data["message"] == "Consul KV request failed"
        assert data["timestamp"].endswith("Z")
        assert data["key"] == "config/app"
        assert data["status_code"] == 500

    def test_static_fields(self):
        data = json.loads(JSONFormatter(static={"service": "billing"}).format(_record()))
        assert data["service"] == "billing"

    def test_exception_kept_on_one_line(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            import sys

            record = _record()
            record.exc_info = sys.exc_info()

        output = JSONFormatter().format(record)

        assert "\n" not in output
        assert "RuntimeError: boom" in json.loads(output)["exception"]

    def test_unserializable_extra_uses_str(self):
        data = json.loads(JSONFormatter().format(_record(options=object())))
        assert data["options"].startswith("<object object")


@pytest.mark.unit
class TestConfigureLogging:
    """Test suite for dictConfig-based setup."""

    def test_text_config(self):
        config = build_logging_config(log_level="debug", json_logs=False)

        assert config["root"]["level"] == "DEBUG"
        assert "format" in config["formatters"]["default"]
        assert config["loggers"]["httpx"]["level"] == "WARNING"

    def test_json_config(self):
        config = build_logging_config(log_level="INFO", json_logs=True, service_name="svc")

        formatter = config["formatters"]["default"]
        assert formatter["()"].endswith("JSONFormatter")
        assert formatter["static"] == {"service": "svc"}

    def test_configure_installs_json_handler(self, restore_root_logger):
        configure_logging(log_level="WARNING", json_logs=True, service_name="svc")

        root = restore_root_logger
        assert root.level == logging.WARNING
        assert any(isinstance(h.formatter, JSONFormatter) for h in root.handlers)

    def test_setup_logging_from_settings(self, restore_root_logger):
        settings = LoggingSettings(_env_file=None, level="ERROR")

        setup_logging(settings, force=True)

        assert restore_root_logger.level == logging.ERROR
