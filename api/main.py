"""FastAPI service for NOLA Buddy."""
from __future__ import annotations

import logging
import os
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import get_settings
from api.routers import action_base_router, analysis_router, databases_router, notes_router
from nola_buddy.api.auth import require_api_key
from nola_buddy.config import Settings
from nola_buddy.notion_client import NotionClient
from nola_buddy.schema import SchemaError, WorkspaceSchema, load_workspace_schema
from nola_buddy.sheets_client import SheetsClient

logger = logging.getLogger(__name__)

ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "https://chat.openai.com",
    "https://chatgpt.com",
    os.getenv("NOLA_ALLOWED_FRONTEND", "").strip(),
]


def create_app(
    settings: Optional[Settings] = None,
    *,
    notion_client: Optional[NotionClient] = None,
    sheets_client: Optional[SheetsClient] = None,
) -> FastAPI:
    """Build the app with its remote clients attached to ``app.state``.

    Clients that are not passed in are built from ``settings``; a broken
    workspace schema leaves them unset and the affected routes answer 503.
    """

    settings = settings or get_settings()
    app = FastAPI(
        title="NOLA Buddy API",
        version="0.1.0",
        description="Schedule coaching over a Notion Action Base plus Sheets notes.",
    )

    origins = [origin for origin in ALLOWED_ORIGINS if origin]
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    schema: Optional[WorkspaceSchema] = None
    if notion_client is None or sheets_client is None:
        try:
            schema = load_workspace_schema(settings.schema_path)
        except SchemaError as exc:
            logger.warning(f"Workspace schema unavailable; remote routes disabled: {exc}")

    if notion_client is None and schema is not None:
        notion_client = NotionClient(settings, schema=schema)
    if sheets_client is None and schema is not None:
        sheets_client = SheetsClient(settings, schema=schema)
    app.state.notion_client = notion_client
    app.state.sheets_client = sheets_client

    @app.get("/health")
    def health_check() -> dict:
        return {
            "status": "ok",
            "environment": settings.environment,
            "timezone": settings.timezone,
            "hasSecret": settings.notion_configured,
            "sheetsConfigured": settings.sheets_configured,
        }

    protected = [Depends(require_api_key)]
    app.include_router(
        analysis_router, prefix="/analysis", tags=["analysis"], dependencies=protected
    )
    app.include_router(
        action_base_router, prefix="/actionBase", tags=["actionBase"], dependencies=protected
    )
    app.include_router(
        databases_router, prefix="/databases", tags=["databases"], dependencies=protected
    )
    app.include_router(notes_router, prefix="/notes", tags=["notes"], dependencies=protected)
    return app


app = create_app()
