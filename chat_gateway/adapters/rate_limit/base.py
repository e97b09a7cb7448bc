"""Rate limiter interfaces.

The API should depend on this abstraction (not the concrete implementation)
so we can swap storage backends later (e.g., Redis) with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitPolicy:
    """Limit configuration for one rate-limited call site.

    Attributes:
        limit: Max admitted events per window.
        window_ms: Window length in milliseconds.

    Raises:
        ValueError: If limit or window_ms are invalid.
    """

    limit: int
    window_ms: int

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError("limit must be >= 1")
        if self.window_ms < 1:
            raise ValueError("window_ms must be >= 1")


@dataclass(frozen=True)
class RateLimitDecision:
    """Result of a single rate limit evaluation.

    Attributes:
        success: Whether the event is admitted.
        limit: Echo of the policy limit.
        remaining: Slots left in the current window (0 once the limit is hit).
        reset_seconds: Whole seconds until the oldest retained event leaves
            the window.
        retry_after_seconds: Suggested wait in seconds when rejected.
    """

    success: bool
    limit: int
    remaining: int
    reset_seconds: int
    retry_after_seconds: int | None = None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def evaluate(self, identity: str, policy: RateLimitPolicy) -> RateLimitDecision:
        """Record one event for identity and decide whether it is admitted.

        Args:
            identity: Caller key (e.g., client IP address).
            policy: Limit and window governing the call site.

        Returns:
            RateLimitDecision describing whether it was admitted.
        """
        raise NotImplementedError

    @abstractmethod
    def __len__(self) -> int:
        """Number of identities currently tracked."""
        raise NotImplementedError
