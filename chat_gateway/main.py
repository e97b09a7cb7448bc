import os

import uvicorn

from chat_gateway.core.app_factory import create_app

app = create_app()


def run() -> None:
    """Serve the app with uvicorn (single worker: limits are per process)."""
    uvicorn.run(
        "chat_gateway.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_config=None,
    )
