"""Telemetry configuration model."""

from typing import Literal

from pydantic import BaseModel


class TelemetryConfig(BaseModel):
    """Configuration for the request logging layer.

    Attributes:
        enabled: Whether the telemetry layer is stacked
        placement: "outer" logs logical calls, "inner" logs every attempt
    """

    enabled: bool = True
    placement: Literal["outer", "inner"] = "outer"
