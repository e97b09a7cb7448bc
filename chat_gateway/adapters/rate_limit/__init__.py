"""Rate limiting adapters.

This package provides a small abstraction layer so the service can start with
an in-memory limiter and later migrate to Redis or another shared store without
changing the API layer.
"""

from chat_gateway.adapters.rate_limit.base import (
    AbstractRateLimiter,
    RateLimitDecision,
    RateLimitPolicy,
)
from chat_gateway.adapters.rate_limit.sliding_window import (
    UNKNOWN_IDENTITY,
    SlidingWindowRateLimiter,
    normalize_identity,
)

__all__ = [
    "AbstractRateLimiter",
    "RateLimitDecision",
    "RateLimitPolicy",
    "SlidingWindowRateLimiter",
    "UNKNOWN_IDENTITY",
    "normalize_identity",
]
