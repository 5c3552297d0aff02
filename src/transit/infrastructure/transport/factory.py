"""Factory for assembling the transport chain"""

import logging
from typing import Optional

from requests.adapters import BaseAdapter

from transit.domain.config.app import ClientConfig
from transit.domain.models.retry_policy import RetryPolicy
from transit.infrastructure.transport.network import create_base_transport
from transit.infrastructure.transport.retry import RetryTransport
from transit.infrastructure.transport.telemetry import TelemetryTransport

logger = logging.getLogger(__name__)


class TransportFactory:
    """Factory for building decorated transports

    The stacking order is fixed:

    - telemetry placement "outer": telemetry -> retry -> base
      (one telemetry event per logical call)
    - telemetry placement "inner": retry -> telemetry -> base
      (one telemetry event per physical attempt)

    Disabled layers are left out of the chain.
    """

    @classmethod
    def create(cls, config: ClientConfig, base: Optional[BaseAdapter] = None) -> BaseAdapter:
        """Create the outermost transport of the chain

        Args:
            config: Validated client configuration
            base: Transport performing the network I/O (defaults to a pooled HTTPAdapter)

        Returns:
            Outermost transport

        Raises:
            InvalidPolicyError: If the retry configuration yields an invalid policy
        """
        transport = base if base is not None else create_base_transport(config.pool)
        telemetry = config.telemetry.enabled
        layers = ["base"]

        if telemetry and config.telemetry.placement == "inner":
            transport = TelemetryTransport(transport)
            layers.append("telemetry")

        if config.retry.enabled:
            transport = RetryTransport(transport, RetryPolicy.from_config(config.retry))
            layers.append("retry")

        if telemetry and config.telemetry.placement == "outer":
            transport = TelemetryTransport(transport)
            layers.append("telemetry")

        logger.debug(f"Assembled transport chain: {' -> '.join(reversed(layers))}")
        return transport
