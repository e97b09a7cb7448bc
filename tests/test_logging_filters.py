"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from chat_gateway.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    hash_identity,
    set_request_id,
)


@pytest.fixture
def capture():
    """Logger wired like production: filters on the handler, JSON output."""
    logger = logging.getLogger("test_gateway_logging")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    yield logger, stream

    logger.handlers.clear()
    clear_request_id()


def test_redacts_client_address_and_chat_content(capture):
    logger, stream = capture

    logger.info(
        "chat_event",
        extra={
            "client_ip": "198.51.100.4",
            "messages": [{"role": "user", "content": "My passport number is X123"}],
            "message_count": 1,
        },
    )

    output = stream.getvalue()
    assert "198.51.100.4" not in output
    assert "X123" not in output
    assert "[REDACTED]" in output
    assert json.loads(output)["message_count"] == 1


def test_redacts_nested_sensitive_keys(capture):
    logger, stream = capture

    logger.info(
        "nested_event",
        extra={
            "headers": {
                "Authorization": "Bearer sk-secret",
                "X-Forwarded-For": "203.0.113.7",
                "user-agent": "pytest",
            },
        },
    )

    output = stream.getvalue()
    assert "sk-secret" not in output
    assert "203.0.113.7" not in output
    assert "pytest" in output


def test_safe_fields_pass_through(capture):
    logger, stream = capture

    logger.info(
        "rate_limit.allowed",
        extra={"identity_hash": "abc123", "limit": 5, "remaining": 4, "window_ms": 60000},
    )

    data = json.loads(stream.getvalue())
    assert data["message"] == "rate_limit.allowed"
    assert data["level"] == "info"
    assert data["identity_hash"] == "abc123"
    assert data["remaining"] == 4
    assert "[REDACTED]" not in stream.getvalue()


def test_request_id_from_context_is_attached(capture):
    logger, stream = capture

    set_request_id("req-789")
    logger.info("with_context")

    assert json.loads(stream.getvalue())["request_id"] == "req-789"


def test_hash_identity_is_stable_and_short():
    assert hash_identity("198.51.100.4") == hash_identity("198.51.100.4")
    assert hash_identity("198.51.100.4") != hash_identity("198.51.100.5")
    assert len(hash_identity("198.51.100.4")) == 16
