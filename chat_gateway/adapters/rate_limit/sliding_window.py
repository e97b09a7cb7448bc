"""In-memory sliding-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
- Bounded: least recently evaluated identities are evicted past
  ``max_identities`` and idle windows are swept periodically.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable

from chat_gateway.adapters.rate_limit.base import (
    AbstractRateLimiter,
    RateLimitDecision,
    RateLimitPolicy,
)

logger = logging.getLogger(__name__)

# Shared bucket for callers without a usable identity
UNKNOWN_IDENTITY = "unknown"


def _now_ms() -> float:
    return time.time() * 1000


def normalize_identity(identity: str | None) -> str:
    """Bucket key for identity: stripped, with missing or blank values mapped to "unknown"."""
    if identity is None:
        return UNKNOWN_IDENTITY
    return identity.strip() or UNKNOWN_IDENTITY


@dataclass
class _RateWindow:
    identity: str
    window_ms: int
    timestamps: list[float] = field(default_factory=list)


class SlidingWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter keeping a sliding window of event timestamps per identity.

    Every evaluation drops timestamps that are ``window_ms`` old or older,
    records the current event, then admits it if the window holds at most
    ``limit`` events. The current event is recorded even when rejected, so a
    rejected caller keeps occupying a slot until that event ages out.

    Important:
        This limiter is per-process only. If the API runs with multiple workers
        (e.g., multiple Uvicorn/Gunicorn workers), each worker will enforce its
        own independent limits.
    """

    def __init__(
        self,
        *,
        max_identities: int | None = 10_000,
        sweep_interval_ms: int | None = 60_000,
        clock: Callable[[], float] = _now_ms,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            max_identities: Maximum tracked identities before the least
                recently evaluated one is evicted. None disables the bound.
            sweep_interval_ms: Minimum delay between opportunistic sweeps of
                idle windows. None disables sweeping from evaluate().
            clock: Time source function returning UNIX time in milliseconds.

        Raises:
            ValueError: If max_identities or sweep_interval_ms are invalid.
        """
        if max_identities is not None and max_identities < 1:
            raise ValueError("max_identities must be >= 1")
        if sweep_interval_ms is not None and sweep_interval_ms < 1:
            raise ValueError("sweep_interval_ms must be >= 1")

        self._max_identities = max_identities
        self._sweep_interval_ms = sweep_interval_ms
        self._clock = clock
        self._lock = threading.RLock()
        self._windows: OrderedDict[str, _RateWindow] = OrderedDict()
        self._last_sweep_ms: float | None = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def _get_or_create_window(self, identity: str, window_ms: int) -> _RateWindow:
        """Fetch the window for identity, creating it (and evicting) if needed."""
        window = self._windows.get(identity)
        if window is not None:
            self._windows.move_to_end(identity)
            window.window_ms = window_ms
            return window

        if self._max_identities is not None:
            while len(self._windows) >= self._max_identities:
                self._windows.popitem(last=False)
                logger.debug("rate_limit.evicted", extra={"reason": "max_identities"})

        window = _RateWindow(identity=identity, window_ms=window_ms)
        self._windows[identity] = window
        return window

    def _maybe_sweep(self, now: float) -> None:
        if self._sweep_interval_ms is None:
            return
        if self._last_sweep_ms is None:
            self._last_sweep_ms = now
            return
        if now - self._last_sweep_ms >= self._sweep_interval_ms:
            self.sweep(now)

    @staticmethod
    def _retry_after(timestamps: list[float], limit: int, window_ms: int, now: float) -> int:
        """Seconds until enough events expire for the next one to be admitted."""
        # Entries [0 .. count - limit] must leave the window first
        blocking = timestamps[len(timestamps) - limit]
        return max(1, int(math.ceil((blocking + window_ms - now) / 1000)))

    def evaluate(self, identity: str, policy: RateLimitPolicy) -> RateLimitDecision:
        """Record an event for identity and decide admission under policy.

        Args:
            identity: Caller key. Empty or blank values share the
                ``"unknown"`` bucket instead of raising.
            policy: Limit and window for the call site.

        Returns:
            RateLimitDecision with admission and quota metadata.
        """
        key = normalize_identity(identity)
        now = self._clock()
        threshold = now - policy.window_ms

        with self._lock:
            self._maybe_sweep(now)

            window = self._get_or_create_window(key, policy.window_ms)
            timestamps = [ts for ts in window.timestamps if ts > threshold]
            timestamps.append(now)
            window.timestamps = timestamps

            count = len(timestamps)
            success = count <= policy.limit
            remaining = max(0, policy.limit - count)
            reset_ms = max(0.0, timestamps[0] + policy.window_ms - now)
            retry_after = (
                None
                if success
                else self._retry_after(timestamps, policy.limit, policy.window_ms, now)
            )

        return RateLimitDecision(
            success=success,
            limit=policy.limit,
            remaining=remaining,
            reset_seconds=int(reset_ms // 1000),
            retry_after_seconds=retry_after,
        )

    def sweep(self, now_ms: float | None = None) -> int:
        """Drop windows whose newest event is already outside their window.

        Args:
            now_ms: Reference time in milliseconds; defaults to the clock.

        Returns:
            Number of identities removed.
        """
        now = self._clock() if now_ms is None else now_ms

        with self._lock:
            stale = [
                identity
                for identity, window in self._windows.items()
                if not window.timestamps or window.timestamps[-1] <= now - window.window_ms
            ]
            for identity in stale:
                del self._windows[identity]
            self._last_sweep_ms = now
            tracked = len(self._windows)

        if stale:
            logger.info(
                "rate_limit.sweep",
                extra={"removed": len(stale), "tracked": tracked},
            )
        return len(stale)

    def reset(self, identity: str | None = None) -> None:
        """Forget tracked events for one identity, or for all when omitted."""
        with self._lock:
            if identity is None:
                self._windows.clear()
                self._last_sweep_ms = None
            else:
                self._windows.pop(normalize_identity(identity), None)
