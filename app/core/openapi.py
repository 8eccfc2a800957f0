"""OpenAPI metadata and customization utilities.

Enriches the generated schema with tag descriptions and documents the 429
response (with its Retry-After header) on cooldown-guarded operations, which
FastAPI cannot infer because it is raised from a dependency.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

_TAGS = [
    {
        "name": "Play",
        "description": "Play once per cooldown window, per client IP.",
    },
    {
        "name": "Health",
        "description": "Liveness and readiness checks.",
    },
]

_COOLDOWN_RESPONSE = {
    "description": "Play cooldown active (or the play could not be recorded).",
    "headers": {
        "Retry-After": {
            "description": "Seconds until the client may play again.",
            "schema": {"type": "integer", "minimum": 0},
        }
    },
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tags and cooldown responses."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in _TAGS:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        paths = schema.get("paths", {})
        for path, methods in paths.items():
            if not path.endswith("/play"):
                continue
            post = methods.get("post")
            if isinstance(post, dict):
                post.setdefault("responses", {}).setdefault("429", _COOLDOWN_RESPONSE)

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
