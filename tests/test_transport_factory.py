"""Tests for TransportFactory"""

import pytest
import requests
from requests.adapters import HTTPAdapter

from transit.domain.config import ClientConfig, RetryConfig
from transit.domain.errors import InvalidPolicyError
from transit.infrastructure.transport.factory import TransportFactory
from transit.infrastructure.transport.mock import MockTransport
from transit.infrastructure.transport.network import create_base_transport
from transit.infrastructure.transport.retry import RetryTransport
from transit.infrastructure.transport.telemetry import TelemetryTransport


def _chain(transport):
    layers = [type(transport)]
    while hasattr(transport, "inner"):
        transport = transport.inner
        layers.append(type(transport))
    return layers


class TestStackingOrder:
    """Tests for the fixed decorator order"""

    def test_default_order_is_telemetry_retry_base(self):
        """Test telemetry wraps retry by default"""
        transport = TransportFactory.create(ClientConfig(), base=MockTransport())
        assert _chain(transport) == [TelemetryTransport, RetryTransport, MockTransport]

    def test_inner_telemetry_order(self):
        """Test inner placement puts telemetry under retry"""
        config = ClientConfig(telemetry={"placement": "inner"})
        transport = TransportFactory.create(config, base=MockTransport())
        assert _chain(transport) == [RetryTransport, TelemetryTransport, MockTransport]

    def test_disabled_layers_are_omitted(self):
        """Test disabling retry and telemetry leaves the base transport"""
        base = MockTransport()
        config = ClientConfig(retry={"enabled": False}, telemetry={"enabled": False})
        assert TransportFactory.create(config, base=base) is base

    def test_default_base_is_pooled_adapter(self):
        """Test the base transport is an HTTPAdapter without urllib3 retries"""
        config = ClientConfig(retry={"enabled": False}, telemetry={"enabled": False})
        transport = TransportFactory.create(config)
        assert isinstance(transport, HTTPAdapter)
        assert transport.max_retries.total == 0

    def test_retry_layer_gets_policy_from_config(self):
        """Test the retry policy mirrors the retry section"""
        config = ClientConfig(
            retry={"max_attempts": 5, "retry_delay": 0.0, "retry_statuses": [500, 500]},
            telemetry={"enabled": False},
        )
        transport = TransportFactory.create(config, base=MockTransport())
        assert transport.policy.max_attempts == 5
        assert transport.policy.retryable_statuses == frozenset({500})

    def test_invalid_policy_propagates(self):
        """Test an invalid policy fails assembly"""
        # model_copy skips validation, so the bad value reaches the factory
        retry = RetryConfig().model_copy(update={"max_attempts": 0})
        config = ClientConfig(retry=retry, telemetry={"enabled": False})
        with pytest.raises(InvalidPolicyError):
            TransportFactory.create(config, base=MockTransport())


class TestTelemetryPlacement:
    """Tests that placement decides what telemetry sees"""

    def _send(self, placement):
        base = MockTransport([503, 503, 200])
        config = ClientConfig(retry={"retry_delay": 0.0}, telemetry={"placement": placement})
        transport = TransportFactory.create(config, base=base)
        response = transport.send(requests.Request("GET", "http://example.test").prepare())
        telemetry = transport if placement == "outer" else transport.inner
        return response, telemetry.get_stats()

    def test_outer_sees_one_logical_call(self):
        """Test outer telemetry records the call once"""
        response, stats = self._send("outer")
        assert response.status_code == 200
        assert stats == {"requests": 1, "errors": 0, "statuses": {200: 1}}

    def test_inner_sees_every_attempt(self):
        """Test inner telemetry records every attempt"""
        response, stats = self._send("inner")
        assert response.status_code == 200
        assert stats == {"requests": 3, "errors": 0, "statuses": {503: 2, 200: 1}}


def test_create_base_transport_defaults():
    """Test pooling defaults"""
    adapter = create_base_transport()
    assert adapter._pool_maxsize == 100
    assert adapter._pool_connections == 10
