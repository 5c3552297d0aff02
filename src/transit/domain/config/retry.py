"""Retry configuration model."""

from typing import List

from pydantic import BaseModel, Field, field_validator


class RetryConfig(BaseModel):
    """Configuration for retry logic.

    Attributes:
        enabled: Whether the retry layer is stacked at all
        max_attempts: Total attempts per call, the first one included
        retry_delay: Fixed pause between attempts in seconds
        retry_statuses: HTTP status codes that trigger another attempt
    """

    enabled: bool = True
    max_attempts: int = Field(3, gt=0, le=10)
    retry_delay: float = Field(1.0, ge=0.0)  # Allow 0 for tests
    retry_statuses: List[int] = Field(default_factory=lambda: [429, 502, 503, 504])

    @field_validator("retry_statuses")
    @classmethod
    def _check_statuses(cls, value: List[int]) -> List[int]:
        for code in value:
            if not 100 <= code <= 599:
                raise ValueError(f"{code} is not an HTTP status code")
        return value
