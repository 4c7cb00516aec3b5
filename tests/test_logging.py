import json
import logging

import pytest
import structlog

from cluster_cache.core import logging as cache_logging
from cluster_cache.core.config import settings


@pytest.fixture
def json_logging(monkeypatch):
    monkeypatch.setattr(settings, "LOG_FORMAT", "json")
    cache_logging.setup_logging()
    yield
    structlog.reset_defaults()


def test_console_renderer_outside_production(monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "development")
    monkeypatch.setattr(settings, "LOG_FORMAT", "console")
    assert isinstance(cache_logging._get_processor(), structlog.dev.ConsoleRenderer)


def test_json_renderer_in_production(monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    monkeypatch.setattr(settings, "LOG_FORMAT", "console")
    assert isinstance(cache_logging._get_processor(), structlog.processors.JSONRenderer)


def test_log_error_includes_context(json_logging, caplog):
    caplog.set_level(logging.INFO)

    try:
        raise ValueError("boom")
    except ValueError as e:
        cache_logging.log_error(e, {"group": "default"})

    payload = json.loads(caplog.records[-1].getMessage())
    assert payload["error"] == "boom"
    assert payload["error_type"] == "ValueError"
    assert payload["context"] == {"group": "default"}
    assert payload["level"] == "error"
    assert payload["logger"] == "error"


def test_log_cache_operation_is_debug(json_logging, caplog):
    caplog.set_level(logging.DEBUG)

    cache_logging.log_cache_operation("delete_all", key="prefix-*", group="default", deleted=3)

    payload = json.loads(caplog.records[-1].getMessage())
    assert payload["event"] == "Cache operation"
    assert payload["operation"] == "delete_all"
    assert payload["deleted"] == 3
    assert payload["level"] == "debug"
