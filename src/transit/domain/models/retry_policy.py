"""Immutable retry policy shared by every call through a retry transport."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, FrozenSet, Iterable

from transit.domain.errors import InvalidPolicyError

if TYPE_CHECKING:
    from transit.domain.config.retry import RetryConfig


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try a request and which statuses warrant another try.

    Attributes:
        max_attempts: Total attempts per logical call, the first one included
        retry_delay: Fixed pause between two attempts, in seconds
        retryable_statuses: Status codes that trigger another attempt
    """

    max_attempts: int = 1
    retry_delay: float = 0.0
    retryable_statuses: FrozenSet[int] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int):
            raise InvalidPolicyError(f"max_attempts must be an integer, got {self.max_attempts!r}")
        if self.max_attempts < 1:
            raise InvalidPolicyError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.retry_delay < 0:
            raise InvalidPolicyError(f"retry_delay must be >= 0, got {self.retry_delay}")
        if not isinstance(self.retryable_statuses, frozenset):
            object.__setattr__(self, "retryable_statuses", frozenset(self.retryable_statuses))

    @classmethod
    def create(
        cls,
        max_attempts: int,
        retry_delay: float = 0.0,
        status_codes: Iterable[int] = (),
    ) -> RetryPolicy:
        """Build a policy, deduplicating status codes into a set.

        Raises:
            InvalidPolicyError: If max_attempts < 1 or retry_delay < 0
        """
        return cls(
            max_attempts=max_attempts,
            retry_delay=float(retry_delay),
            retryable_statuses=frozenset(int(code) for code in status_codes),
        )

    @classmethod
    def from_config(cls, config: RetryConfig) -> RetryPolicy:
        """Build a policy from the validated retry configuration section."""
        return cls.create(config.max_attempts, config.retry_delay, config.retry_statuses)

    @classmethod
    def single_attempt(cls) -> RetryPolicy:
        return cls()

    def is_retryable(self, status_code: int) -> bool:
        return status_code in self.retryable_statuses
