"""FastAPI application entry point for the portfolio CMS API."""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portfolio_cms.api.errors import register_error_handlers
from portfolio_cms.api.routes import content, health, preview, publishing, settings

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


def get_cors_origins() -> list[str]:
    """Return allowed CORS origins from PORTFOLIO_CORS_ORIGINS (comma separated)."""
    raw = os.getenv("PORTFOLIO_CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize resources on startup and clean up on shutdown."""
    from portfolio_cms.data.db import init_db

    init_db()
    yield


app = FastAPI(
    title="Portfolio CMS API",
    description="Draft/publish content management for a personal portfolio site",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(content.router, prefix="/api")
app.include_router(settings.router, prefix="/api")
app.include_router(publishing.router, prefix="/api")
app.include_router(preview.router, prefix="/api")
app.include_router(preview.public_router, prefix="/api")


def main() -> None:
    """Start the development server."""
    import uvicorn

    uvicorn.run(
        "portfolio_cms.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
