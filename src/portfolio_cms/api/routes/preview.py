"""Preview and public read routes.

``/preview/*`` serves the admin preview in either mode; ``/public/*`` is what
the live site renders and always reads published values.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Path

from portfolio_cms.api.dependencies import ModeQuery, ProjectorDep
from portfolio_cms.constants import PreviewMode

router = APIRouter(prefix="/preview", tags=["preview"])
public_router = APIRouter(prefix="/public", tags=["public"])


@router.get("/site", response_model=dict[str, Any])
def preview_site(projector: ProjectorDep, mode: ModeQuery = PreviewMode.DRAFT) -> dict[str, Any]:
    """Project the whole site in the requested mode."""
    return projector.project(mode)


@router.get("/sections/{section_id}", response_model=dict[str, Any])
def preview_section(
    section_id: Annotated[str, Path(description="Section ID")],
    projector: ProjectorDep,
    mode: ModeQuery = PreviewMode.DRAFT,
) -> dict[str, Any]:
    """Project one section with its bullets."""
    return projector.project_section(section_id, mode)


@router.get("/projects/{project_id}", response_model=dict[str, Any])
def preview_project(
    project_id: Annotated[str, Path(description="Project ID")],
    projector: ProjectorDep,
    mode: ModeQuery = PreviewMode.DRAFT,
) -> dict[str, Any]:
    """Project one project with its pages."""
    return projector.project_project(project_id, mode)


@public_router.get("/site", response_model=dict[str, Any])
def public_site(projector: ProjectorDep) -> dict[str, Any]:
    """Return the live site."""
    return projector.project(PreviewMode.PUBLISHED)


@public_router.get("/projects/{slug}", response_model=dict[str, Any])
def public_project(
    slug: Annotated[str, Path(description="Project slug")], projector: ProjectorDep
) -> dict[str, Any]:
    """Return one live project by slug."""
    return projector.project_project_by_slug(slug, PreviewMode.PUBLISHED)
