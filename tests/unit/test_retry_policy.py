"""
Test suite for RetryPolicy delay computation and serialisation.

System role: Verification of retry timing decisions
"""

import pytest

from bgupload.core.retry_policy import CustomStrategy, ExponentialStrategy, NoRetryStrategy, RetryPolicy


class TestExponentialBackoff:
    """Test suite for the exponential strategy."""

    def test_first_delay_equals_initial(self) -> None:
        policy = RetryPolicy.exponential_backoff(initial=3, multiplier=2, maximum=60)

        assert policy.delay(1) == 3

    def test_delays_double_until_capped(self) -> None:
        """Test exponential_backoff(2, 2, 10) yields 2, 4, 8, 10, 10."""
        # Arrange
        policy = RetryPolicy.exponential_backoff(initial=2, multiplier=2, maximum=10)

        # Act
        delays = [policy.delay(attempt) for attempt in range(1, 6)]

        # Assert
        assert delays == [2, 4, 8, 10, 10]

    def test_delays_monotonic_and_bounded(self) -> None:
        """Test delays never decrease and never exceed maximum."""
        # Arrange
        policy = RetryPolicy.exponential_backoff(initial=1.5, multiplier=3, maximum=500)

        # Act
        delays = [policy.delay(attempt) for attempt in range(1, 40)]

        # Assert
        assert all(later >= earlier for earlier, later in zip(delays, delays[1:]))
        assert max(delays) == 500

    def test_huge_attempt_returns_maximum(self) -> None:
        """Test overflow in the power does not escape."""
        policy = RetryPolicy.exponential_backoff(initial=5, multiplier=10, maximum=300)

        assert policy.delay(100_000) == 300

    def test_zero_initial_stays_zero_for_huge_attempts(self) -> None:
        policy = RetryPolicy.exponential_backoff(initial=0, multiplier=10, maximum=300)

        assert [policy.delay(attempt) for attempt in (1, 5, 100_000)] == [0, 0, 0]

    def test_defaults(self) -> None:
        strategy = RetryPolicy.exponential_backoff().strategy

        assert isinstance(strategy, ExponentialStrategy)
        assert (strategy.initial, strategy.multiplier, strategy.maximum) == (5, 2, 300)

    def test_multiplier_below_one_rejected(self) -> None:
        with pytest.raises(ValueError):
            RetryPolicy.exponential_backoff(initial=5, multiplier=0.5, maximum=300)


class TestOtherStrategies:
    """Test suite for none and custom strategies."""

    def test_none_policy_always_zero(self) -> None:
        policy = RetryPolicy.none()

        assert [policy.delay(attempt) for attempt in (1, 2, 50)] == [0, 0, 0]

    def test_default_policy_is_none(self) -> None:
        assert isinstance(RetryPolicy().strategy, NoRetryStrategy)

    def test_custom_handler_receives_attempt(self) -> None:
        # Arrange
        seen = []

        def handler(attempt: int):
            seen.append(attempt)
            return None if attempt > 2 else 1.0

        policy = RetryPolicy.custom(handler)

        # Act
        results = [policy.delay(1), policy.delay(3)]

        # Assert
        assert results == [1.0, None]
        assert seen == [1, 3]

    @pytest.mark.parametrize(
        "policy",
        [
            RetryPolicy.none(),
            RetryPolicy.exponential_backoff(2, 2, 10),
            RetryPolicy.custom(lambda attempt: 99.0),
        ],
    )
    @pytest.mark.parametrize("attempt", [0, -1, -100])
    def test_non_positive_attempt_clamped_to_zero(self, policy: RetryPolicy, attempt: int) -> None:
        assert policy.delay(attempt) == 0


class TestSerialisation:
    """Test suite for persisting policies as JSON."""

    def test_exponential_survives_json(self) -> None:
        # Arrange
        policy = RetryPolicy.exponential_backoff(initial=2, multiplier=3, maximum=40)

        # Act
        restored = RetryPolicy.model_validate_json(policy.model_dump_json())

        # Assert
        assert restored == policy
        assert restored.delay(2) == 6

    def test_dump_is_tagged_by_kind(self) -> None:
        assert RetryPolicy.none().model_dump() == {"strategy": {"kind": "none"}}

    def test_custom_is_not_persistable(self) -> None:
        policy = RetryPolicy.custom(lambda attempt: 1.0)

        assert isinstance(policy.strategy, CustomStrategy)
        assert policy.is_persistable is False
        assert RetryPolicy.none().is_persistable is True
