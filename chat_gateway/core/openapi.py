"""OpenAPI metadata and customization utilities.

Enriches the generated schema with:
- Tags metadata
- The X-RateLimit-* and Retry-After headers on rate limited operations

This keeps documentation concerns decoupled from the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

_RATE_LIMIT_HEADERS: Dict[str, Any] = {
    "X-RateLimit-Limit": {
        "description": "Maximum requests allowed in the sliding window.",
        "schema": {"type": "integer"},
    },
    "X-RateLimit-Remaining": {
        "description": "Requests left in the current window.",
        "schema": {"type": "integer"},
    },
    "X-RateLimit-Reset": {
        "description": "Seconds until the oldest counted request leaves the window.",
        "schema": {"type": "integer"},
    },
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add metadata and quota headers.

    - Adds tags metadata if not present
    - Documents quota headers on the 200 and 429 responses of every operation
      that declares a 429 response
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        desired_tags = [
            {
                "name": "Chat",
                "description": "Rate limited chat completion proxy.",
            },
            {
                "name": "Health",
                "description": "Liveness checks.",
            },
        ]
        for tag in desired_tags:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for methods in schema.get("paths", {}).values():
            for method_obj in methods.values():
                if not isinstance(method_obj, dict):
                    continue
                responses = method_obj.get("responses", {})
                if "429" not in responses:
                    continue
                for status_code in ("200", "429"):
                    headers = responses.get(status_code, {}).setdefault("headers", {})
                    for name, header in _RATE_LIMIT_HEADERS.items():
                        headers.setdefault(name, header)
                responses["429"]["headers"].setdefault(
                    "Retry-After",
                    {
                        "description": "Seconds to wait before the next request can be admitted.",
                        "schema": {"type": "integer"},
                    },
                )

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
