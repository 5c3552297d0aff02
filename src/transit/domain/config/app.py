"""Root client configuration model."""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from transit.domain.config.pool import PoolConfig
from transit.domain.config.retry import RetryConfig
from transit.domain.config.telemetry import TelemetryConfig
from transit.domain.config.tls import TLSConfig


class ClientConfig(BaseModel):
    """HTTP client configuration.

    This is the root configuration model that aggregates all configuration sections.
    It is consumed once by the client assembly step.

    Attributes:
        timeout: Overall deadline per logical call in seconds, retries and delays included
        connect_timeout: Per-attempt cap on connection setup in seconds (None = bounded by timeout only)
        headers: Default headers sent with every request
        retry: Retry layer configuration
        tls: TLS trust configuration
        pool: Base transport pooling configuration
        telemetry: Request logging layer configuration
    """

    timeout: float = Field(30.0, gt=0.0)
    connect_timeout: Optional[float] = Field(10.0, gt=0.0)
    headers: Dict[str, str] = Field(default_factory=dict)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    tls: TLSConfig = Field(default_factory=TLSConfig)
    pool: PoolConfig = Field(default_factory=PoolConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    model_config = ConfigDict(
        validate_assignment=True,  # Validate on attribute assignment
        extra="forbid",  # Reject unknown fields
        json_schema_extra={
            "example": {
                "timeout": 30.0,
                "connect_timeout": 10.0,
                "headers": {"User-Agent": "transit"},
                "retry": {
                    "enabled": True,
                    "max_attempts": 3,
                    "retry_delay": 1.0,
                    "retry_statuses": [429, 502, 503, 504],
                },
                "tls": {
                    "verify": True,
                    "ca_bundle": None,
                    "ca_cert_pem": None,
                },
                "pool": {
                    "pool_connections": 10,
                    "pool_maxsize": 100,
                    "pool_block": False,
                },
                "telemetry": {
                    "enabled": True,
                    "placement": "outer",
                },
            }
        },
    )
