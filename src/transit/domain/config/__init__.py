"""Configuration models with Pydantic validation."""

from transit.domain.config.app import ClientConfig
from transit.domain.config.pool import PoolConfig
from transit.domain.config.retry import RetryConfig
from transit.domain.config.telemetry import TelemetryConfig
from transit.domain.config.tls import TLSConfig

__all__ = [
    "ClientConfig",
    "PoolConfig",
    "RetryConfig",
    "TelemetryConfig",
    "TLSConfig",
]
