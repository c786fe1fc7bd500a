import json
import logging

import pytest
from conftest import load_app
from storefront.logging import JsonFormatter, MaskingFilter


@pytest.fixture()
def test_client(monkeypatch):
    return load_app(monkeypatch).test_client()


def test_request_id_header_and_propagation(test_client):
    resp = test_client.get("/__ok", headers={"X-Request-ID": "my-fixed-id-123"})
    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == "my-fixed-id-123"


def test_request_id_generated_when_missing(test_client):
    resp = test_client.get("/__ok")
    assert len(resp.headers.get("X-Request-ID", "")) == 32


def test_logs_include_request_id_attribute(monkeypatch, caplog):
    app = load_app(monkeypatch)
    caplog.set_level("INFO")
    client = app.test_client()
    resp = client.get("/__log", headers={"X-Request-ID": "rid-abc"})
    assert resp.status_code == 200
    assert any(getattr(r, "request_id", "") == "rid-abc" for r in caplog.records)


def test_sensitive_fields_masked_in_info(monkeypatch, caplog):
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    app = load_app(monkeypatch)
    caplog.set_level("INFO")
    caplog.handler.addFilter(MaskingFilter())
    logger = logging.getLogger("mask_test")
    with app.app_context():
        logger.info({"phone": "+919876543210", "code": "123456", "event": "otp_sent"})
    record = next(r for r in caplog.records if r.name == "mask_test")
    assert record.msg["phone"] == "[REDACTED]"
    assert record.msg["code"] == "[REDACTED]"
    assert record.msg["event"] == "otp_sent"


def test_sensitive_fields_visible_in_debug(monkeypatch, caplog):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    app = load_app(monkeypatch)
    monkeypatch.setenv("APP_ENV", "development")
    caplog.set_level("DEBUG")
    caplog.handler.addFilter(MaskingFilter())
    logger = logging.getLogger("mask_test_debug")
    with app.app_context():
        logger.debug({"password": "secret"})
    record = next(r for r in caplog.records if r.name == "mask_test_debug")
    assert record.msg["password"] == "secret"


def test_json_formatter_merges_dict_payload():
    record = logging.LogRecord("fmt", logging.INFO, __file__, 1, {"event": "cart_add"}, None, None)
    record.request_id = "rid-1"
    line = json.loads(JsonFormatter().format(record))
    assert line["event"] == "cart_add"
    assert line["request_id"] == "rid-1"
    assert line["level"] == "INFO"
