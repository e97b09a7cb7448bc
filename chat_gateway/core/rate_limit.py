"""Rate limiting dependency for FastAPI routes.

This module wires the sliding-window limiter into the HTTP layer.

Rate limiting strategy:
- Sliding window per client, keyed by the first address of the forwarded-for
  chain (or "unknown" when absent).
- Admitted responses carry X-RateLimit-* headers; rejected ones get HTTP 429
  with the same headers plus Retry-After.

The forwarded address is client-controlled unless a trusted proxy rewrites it,
so this throttles abuse but is not an access control.
"""

from __future__ import annotations

import logging

from fastapi import Request, Response

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
from chat_gateway.core.config import settings
from chat_gateway.core.errors import RateLimitAppError
from chat_gateway.core.logging import hash_identity

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."


_limiter: AbstractRateLimiter | None = None
_limiter_config: tuple[int, int] | None = None


def get_rate_limiter() -> AbstractRateLimiter:
    """Return a process-wide rate limiter instance.

    The instance is cached in-module to preserve state across requests.
    If configuration changes (primarily in tests), the limiter is rebuilt.

    Returns:
        AbstractRateLimiter: Configured limiter instance.
    """

    global _limiter, _limiter_config

    config = (
        settings.app.rate_limit_max_identities,
        settings.app.rate_limit_sweep_interval_ms,
    )

    if _limiter is None or _limiter_config != config:
        _limiter = SlidingWindowRateLimiter(
            max_identities=settings.app.rate_limit_max_identities,
            sweep_interval_ms=settings.app.rate_limit_sweep_interval_ms,
        )
        _limiter_config = config

    return _limiter


def get_chat_completions_policy() -> RateLimitPolicy:
    """Policy guarding the chat completions endpoint (5 per minute by default)."""

    return RateLimitPolicy(
        limit=settings.app.rate_limit_chat_requests,
        window_ms=settings.app.rate_limit_chat_window_ms,
    )


def get_client_identity(request: Request) -> str:
    """Derive the rate limit identity for the current request.

    Args:
        request: FastAPI request.

    Returns:
        str: First entry of the forwarded-for header, or "unknown".

    Examples:
        "203.0.113.7, 10.0.0.1" -> "203.0.113.7"
        missing header          -> "unknown"
    """

    forwarded_for = request.headers.get(settings.app.client_ip_header, "")
    first = forwarded_for.split(",")[0].strip()
    return first or UNKNOWN_IDENTITY


def build_rate_limit_headers(decision: RateLimitDecision) -> dict[str, str]:
    """Map a decision onto the client-visible quota headers."""

    headers = {
        "X-RateLimit-Limit": str(decision.limit),
        "X-RateLimit-Remaining": str(decision.remaining),
        "X-RateLimit-Reset": str(decision.reset_seconds),
    }
    if decision.retry_after_seconds is not None:
        headers["Retry-After"] = str(decision.retry_after_seconds)
    return headers


def check_rate_limit(identity: str, policy: RateLimitPolicy) -> RateLimitDecision:
    """Evaluate identity against policy and raise when over quota.

    Args:
        identity: Caller identity.
        policy: Policy of the call site.

    Returns:
        RateLimitDecision: The admitting decision.

    Raises:
        RateLimitAppError: When the sliding window holds more than policy.limit
            events.
    """

    decision = get_rate_limiter().evaluate(identity, policy)
    identity_hash = hash_identity(normalize_identity(identity))

    if decision.success:
        logger.info(
            "rate_limit.allowed",
            extra={
                "identity_hash": identity_hash,
                "limit": decision.limit,
                "remaining": decision.remaining,
                "window_ms": policy.window_ms,
            },
        )
        return decision

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "identity_hash": identity_hash,
            "limit": decision.limit,
            "remaining": decision.remaining,
            "window_ms": policy.window_ms,
            "retry_after_s": decision.retry_after_seconds,
        },
    )
    raise RateLimitAppError(
        code="rate_limit_exceeded",
        message=RATE_LIMIT_MESSAGE,
        details={
            "limit": decision.limit,
            "remaining": decision.remaining,
            "reset_seconds": decision.reset_seconds,
            "retry_after": decision.retry_after_seconds or 0,
        },
        headers=build_rate_limit_headers(decision),
    )


async def enforce_chat_rate_limit(
    request: Request, response: Response
) -> RateLimitDecision | None:
    """FastAPI dependency enforcing the chat completions policy.

    When enabled, records one event for the caller. Admitted requests get the
    quota headers on their eventual response; rejected ones raise 429.

    Args:
        request: FastAPI request.
        response: Response whose headers are merged into the route's response.

    Returns:
        The admitting decision, or None when rate limiting is disabled.

    Raises:
        RateLimitAppError: 429 Too Many Requests when the limit is exceeded.
    """

    if not settings.app.rate_limit_enabled:
        return None

    decision = check_rate_limit(get_client_identity(request), get_chat_completions_policy())
    response.headers.update(build_rate_limit_headers(decision))
    return decision
