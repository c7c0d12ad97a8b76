"""Shared dependencies for API routes.

Routes receive their services through ``Depends`` so tests can swap them
with ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query

from portfolio_cms.constants import PreviewMode
from portfolio_cms.services import AuthoringService, PreviewProjector, PublishingEngine


def get_publishing_engine() -> PublishingEngine:
    """Return a publishing engine bound to the application database."""
    return PublishingEngine()


def get_preview_projector() -> PreviewProjector:
    """Return a preview projector bound to the application database."""
    return PreviewProjector()


def get_authoring_service() -> AuthoringService:
    """Return an authoring service bound to the application database."""
    return AuthoringService()


EngineDep = Annotated[PublishingEngine, Depends(get_publishing_engine)]
ProjectorDep = Annotated[PreviewProjector, Depends(get_preview_projector)]
AuthoringDep = Annotated[AuthoringService, Depends(get_authoring_service)]
ModeQuery = Annotated[
    PreviewMode,
    Query(description="'draft' shows working copies, 'published' shows the live site"),
]
