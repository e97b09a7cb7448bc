"""Application factory for FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) so
tests can build isolated instances.
"""

from __future__ import annotations

from fastapi import FastAPI

from chat_gateway.api.routes import chat_router, health_router
from chat_gateway.core.config import settings
from chat_gateway.core.exception_handlers import setup_exception_handlers
from chat_gateway.core.logging import configure_logging
from chat_gateway.core.middleware import request_id_middleware
from chat_gateway.core.openapi import apply_openapi_customizations


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Chat Gateway",
        description=(
            "Chat completion proxy for the travel assistant bot. Each client is "
            "limited by a sliding window (5 requests per minute by default) and "
            "receives X-RateLimit-Limit, X-RateLimit-Remaining and "
            "X-RateLimit-Reset headers."
        ),
        version="0.1.0",
        debug=settings.app.debug,
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )

    # Middleware
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(chat_router)
    app.include_router(health_router)

    # OpenAPI customizations (tags, quota headers)
    apply_openapi_customizations(app)

    return app
