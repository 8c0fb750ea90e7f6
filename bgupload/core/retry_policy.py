"""
Retry policy for failed upload attempts.

Maps the number of the attempt that just failed to the delay before the
next attempt. A delay of None (or <= 0) means the failure is terminal.
Policies are pure: the same attempt always yields the same delay, so the
answer does not depend on which process asks.

Dependencies: pydantic
System role: Retry timing decisions for the job processor
"""

from typing import Annotated, Callable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class NoRetryStrategy(BaseModel):
    """Never retry: every failure surfaces immediately."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["none"] = "none"

    def delay(self, attempt: int) -> Optional[float]:
        return 0.0


class ExponentialStrategy(BaseModel):
    """delay = min(initial * multiplier ** (attempt - 1), maximum)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["exponential"] = "exponential"
    initial: float = Field(default=5.0, ge=0, description="Delay after the first failure (seconds)")
    multiplier: float = Field(default=2.0, ge=1, description="Growth factor per attempt")
    maximum: float = Field(default=300.0, ge=0, description="Delay ceiling (seconds)")

    def delay(self, attempt: int) -> Optional[float]:
        if self.initial == 0:
            return 0.0
        try:
            value = self.initial * self.multiplier ** (attempt - 1)
        except OverflowError:
            return self.maximum
        return min(value, self.maximum)


class CustomStrategy(BaseModel):
    """User-supplied pure function of the attempt number. Not persistable."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["custom"] = "custom"
    handler: Callable[[int], Optional[float]] = Field(exclude=True)

    def delay(self, attempt: int) -> Optional[float]:
        return self.handler(attempt)


RetryStrategy = Annotated[
    Union[NoRetryStrategy, ExponentialStrategy, CustomStrategy],
    Field(discriminator="kind"),
]


class RetryPolicy(BaseModel):
    """
    Retry cadence applied when an upload attempt fails.

    Usage:
        policy = RetryPolicy.exponential_backoff(initial=2, multiplier=2, maximum=10)
        policy.delay(1)  # 2.0
        policy.delay(3)  # 8.0
        policy.delay(4)  # 10.0
    """

    model_config = ConfigDict(frozen=True)

    strategy: RetryStrategy = Field(default_factory=NoRetryStrategy)

    @classmethod
    def none(cls) -> "RetryPolicy":
        """Policy that never retries."""
        return cls(strategy=NoRetryStrategy())

    @classmethod
    def exponential_backoff(
        cls,
        initial: float = 5.0,
        multiplier: float = 2.0,
        maximum: float = 5 * 60.0,
    ) -> "RetryPolicy":
        """
        Exponential backoff policy.

        Args:
            initial: Delay after the first failed attempt (seconds)
            multiplier: Growth factor per attempt (>= 1)
            maximum: Upper bound for any delay (seconds)

        Returns:
            RetryPolicy: Configured policy
        """
        return cls(
            strategy=ExponentialStrategy(initial=initial, multiplier=multiplier, maximum=maximum)
        )

    @classmethod
    def custom(cls, handler: Callable[[int], Optional[float]]) -> "RetryPolicy":
        """
        Policy backed by a caller-supplied function.

        Args:
            handler: Pure function of the 1-based attempt number returning
                seconds to wait, or None to stop retrying

        Returns:
            RetryPolicy: Configured policy
        """
        return cls(strategy=CustomStrategy(handler=handler))

    @property
    def is_persistable(self) -> bool:
        """Whether this policy survives a JSON round trip."""
        return not isinstance(self.strategy, CustomStrategy)

    def delay(self, attempt: int) -> Optional[float]:
        """
        Delay before retrying after the given failed attempt.

        Args:
            attempt: 1-based number of the attempt that just failed.
                Non-positive values are clamped to "no delay".

        Returns:
            float | None: Seconds to wait, or None to stop retrying
        """
        if attempt <= 0:
            return 0.0
        return self.strategy.delay(attempt)
