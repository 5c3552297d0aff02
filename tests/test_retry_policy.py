"""Tests for RetryPolicy"""

import dataclasses

import pytest

from transit.domain.config.retry import RetryConfig
from transit.domain.errors import InvalidPolicyError
from transit.domain.models.retry_policy import RetryPolicy


class TestRetryPolicyConstruction:
    """Tests for policy validation"""

    def test_create_valid_policy(self):
        """Test a valid policy keeps its settings"""
        policy = RetryPolicy.create(3, 0.5, [502, 503])
        assert policy.max_attempts == 3
        assert policy.retry_delay == 0.5
        assert policy.retryable_statuses == frozenset({502, 503})

    def test_status_codes_are_deduplicated(self):
        """Test duplicate status codes collapse into a set"""
        policy = RetryPolicy.create(2, 0, [500, 502, 500, 502])
        assert policy.retryable_statuses == frozenset({500, 502})
        assert len(policy.retryable_statuses) == 2

    @pytest.mark.parametrize("max_attempts", [0, -1, -10])
    def test_non_positive_attempts_rejected(self, max_attempts):
        """Test max_attempts below 1 is a construction error"""
        with pytest.raises(InvalidPolicyError, match="max_attempts"):
            RetryPolicy.create(max_attempts, 0, [503])

    def test_negative_delay_rejected(self):
        """Test a negative delay is a construction error"""
        with pytest.raises(InvalidPolicyError, match="retry_delay"):
            RetryPolicy.create(3, -1.0, [503])

    def test_invalid_policy_is_value_error(self):
        """Test InvalidPolicyError can be caught as ValueError"""
        with pytest.raises(ValueError):
            RetryPolicy.create(0)

    def test_direct_construction_validates(self):
        """Test the dataclass constructor validates too"""
        with pytest.raises(InvalidPolicyError):
            RetryPolicy(max_attempts=0)
        policy = RetryPolicy(max_attempts=2, retryable_statuses=[503, 503])
        assert policy.retryable_statuses == frozenset({503})

    def test_policy_is_immutable(self):
        """Test fields cannot be reassigned after construction"""
        policy = RetryPolicy.create(3, 0, [503])
        with pytest.raises(dataclasses.FrozenInstanceError):
            policy.max_attempts = 10

    def test_single_attempt_policy(self):
        """Test the single-attempt policy retries nothing"""
        policy = RetryPolicy.single_attempt()
        assert policy.max_attempts == 1
        assert not policy.is_retryable(503)

    def test_from_config(self):
        """Test building a policy from RetryConfig"""
        policy = RetryPolicy.from_config(
            RetryConfig(max_attempts=4, retry_delay=0.2, retry_statuses=[429, 429, 503])
        )
        assert policy.max_attempts == 4
        assert policy.retry_delay == 0.2
        assert policy.retryable_statuses == frozenset({429, 503})


class TestIsRetryable:
    """Tests for status classification"""

    def test_listed_status_is_retryable(self):
        """Test membership of listed codes"""
        policy = RetryPolicy.create(3, 0, [500, 502])
        assert policy.is_retryable(500)
        assert policy.is_retryable(502)

    def test_unlisted_status_is_not_retryable(self):
        """Test codes outside the set are final"""
        policy = RetryPolicy.create(3, 0, [500, 502])
        assert not policy.is_retryable(200)
        assert not policy.is_retryable(503)
        assert not policy.is_retryable(404)
