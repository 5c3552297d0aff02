"""Transports and transport decorators"""

from transit.infrastructure.transport.base import TransportDecorator
from transit.infrastructure.transport.factory import TransportFactory
from transit.infrastructure.transport.mock import MockTransport, build_response
from transit.infrastructure.transport.network import create_base_transport
from transit.infrastructure.transport.retry import RetryTransport
from transit.infrastructure.transport.telemetry import TelemetryTransport

__all__ = [
    "MockTransport",
    "RetryTransport",
    "TelemetryTransport",
    "TransportDecorator",
    "TransportFactory",
    "build_response",
    "create_base_transport",
]
