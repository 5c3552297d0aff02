"""Tests for TelemetryTransport"""

import logging

import pytest
import requests

from transit.domain.errors import CallCancelledError
from transit.infrastructure.transport.mock import MockTransport
from transit.infrastructure.transport.telemetry import TelemetryTransport


def _prepare():
    return requests.Request("GET", "http://example.test/items").prepare()


def test_successful_request_is_logged_and_counted(caplog):
    """Test a response is logged at DEBUG and counted by status"""
    transport = TelemetryTransport(MockTransport([200]))

    with caplog.at_level(logging.DEBUG, logger="transit.infrastructure.transport.telemetry"):
        response = transport.send(_prepare())

    assert response.status_code == 200
    assert "GET http://example.test/items -> 200" in caplog.text
    assert transport.get_stats() == {"requests": 1, "errors": 0, "statuses": {200: 1}}


def test_transport_error_is_logged_and_reraised(caplog):
    """Test transport errors are logged at WARNING and propagate unchanged"""
    transport = TelemetryTransport(MockTransport([requests.ConnectionError("refused")]))

    with caplog.at_level(logging.WARNING, logger="transit.infrastructure.transport.telemetry"):
        with pytest.raises(requests.ConnectionError, match="refused"):
            transport.send(_prepare())

    assert "failed" in caplog.text
    assert transport.get_stats()["errors"] == 1


def test_aborted_call_is_counted_as_error():
    """Test cancellation passing through is counted and re-raised"""
    transport = TelemetryTransport(MockTransport([CallCancelledError("stop")]))

    with pytest.raises(CallCancelledError):
        transport.send(_prepare())

    assert transport.get_stats() == {"requests": 1, "errors": 1, "statuses": {}}


def test_custom_logger_is_used(caplog):
    """Test a caller-supplied logger receives the records"""
    custom = logging.getLogger("tests.telemetry")
    transport = TelemetryTransport(MockTransport([503]), logger=custom)

    with caplog.at_level(logging.DEBUG, logger="tests.telemetry"):
        transport.send(_prepare())

    assert any(record.name == "tests.telemetry" for record in caplog.records)


def test_send_arguments_are_forwarded():
    """Test timeout and verify reach the inner transport"""
    inner = MockTransport([200])
    TelemetryTransport(inner).send(_prepare(), timeout=5, verify="/tmp/ca.pem")
    assert inner.send_kwargs[0]["timeout"] == 5
    assert inner.send_kwargs[0]["verify"] == "/tmp/ca.pem"
