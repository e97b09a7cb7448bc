from __future__ import annotations

from fastapi import APIRouter

from chat_gateway.core.config import settings
from chat_gateway.core.rate_limit import get_rate_limiter

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness check, with the size of the in-memory rate limit state.

    Never rate limited, so load balancers can always reach it.
    """

    return {
        "status": "ok",
        "rate_limit": {
            "enabled": settings.app.rate_limit_enabled,
            "tracked_clients": len(get_rate_limiter()),
        },
    }
