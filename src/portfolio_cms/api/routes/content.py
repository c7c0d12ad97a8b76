"""Content authoring routes for the API."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Path, Query, status

from portfolio_cms.api.dependencies import AuthoringDep, EngineDep
from portfolio_cms.api.schemas.content import (
    AttributesUpdateRequest,
    DraftUpdateRequest,
    EntityResponse,
    ProjectCreateRequest,
    ProjectPageCreateRequest,
    ReorderRequest,
    ResumeAssetCreateRequest,
    SectionBulletCreateRequest,
    SectionCreateRequest,
    SocialLinkCreateRequest,
)
from portfolio_cms.constants import EntityType

router = APIRouter(prefix="/content", tags=["content"])

EntityTypePath = Annotated[EntityType, Path(description="Entity type, e.g. 'section'")]
EntityIdPath = Annotated[str, Path(description="Entity ID")]


@router.post(
    "/section",
    response_model=EntityResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_section(data: SectionCreateRequest, authoring: AuthoringDep) -> EntityResponse:
    """Create a section. Only its draft fields are populated."""
    return EntityResponse(**authoring.create_section(**data.model_dump()))


@router.post(
    "/section_bullet",
    response_model=EntityResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_section_bullet(
    data: SectionBulletCreateRequest, authoring: AuthoringDep
) -> EntityResponse:
    """Add a bullet to a section."""
    result = authoring.create_section_bullet(
        data.section_id, content=data.content, display_order=data.display_order
    )
    return EntityResponse(**result)


@router.post(
    "/project",
    response_model=EntityResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_project(data: ProjectCreateRequest, authoring: AuthoringDep) -> EntityResponse:
    """Create a project."""
    return EntityResponse(**authoring.create_project(**data.model_dump()))


@router.post(
    "/project_page",
    response_model=EntityResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_project_page(data: ProjectPageCreateRequest, authoring: AuthoringDep) -> EntityResponse:
    """Add a detail page to a project."""
    result = authoring.create_project_page(
        data.project_id, content=data.content, display_order=data.display_order
    )
    return EntityResponse(**result)


@router.post(
    "/social_link",
    response_model=EntityResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_social_link(data: SocialLinkCreateRequest, authoring: AuthoringDep) -> EntityResponse:
    """Create a social link."""
    return EntityResponse(**authoring.create_social_link(**data.model_dump()))


@router.post(
    "/resume_asset",
    response_model=EntityResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_resume_asset(
    data: ResumeAssetCreateRequest, authoring: AuthoringDep
) -> EntityResponse:
    """Register a resume asset, optionally making it the active one."""
    return EntityResponse(**authoring.create_resume_asset(**data.model_dump()))


@router.get("/{entity_type}", response_model=list[EntityResponse])
def list_entities(
    entity_type: EntityTypePath,
    authoring: AuthoringDep,
    parent_id: Annotated[
        str | None, Query(description="Only children of this parent (bullets, pages)")
    ] = None,
) -> list[EntityResponse]:
    """List live entities of a type in display order."""
    return [
        EntityResponse(**record)
        for record in authoring.list_entities(entity_type, parent_id=parent_id)
    ]


@router.post("/{entity_type}/reorder", status_code=status.HTTP_204_NO_CONTENT)
def reorder_entities(
    entity_type: EntityTypePath, data: ReorderRequest, authoring: AuthoringDep
) -> None:
    """Set display_order for several entities at once."""
    authoring.reorder(entity_type, {item.id: item.display_order for item in data.items})


@router.get("/{entity_type}/{entity_id}", response_model=EntityResponse)
def get_entity(
    entity_type: EntityTypePath,
    entity_id: EntityIdPath,
    authoring: AuthoringDep,
    include_deleted: Annotated[bool, Query(description="Also return soft-deleted rows")] = False,
) -> EntityResponse:
    """Get one entity with its draft and published values."""
    return EntityResponse(
        **authoring.get_entity(entity_type, entity_id, include_deleted=include_deleted)
    )


@router.get("/{entity_type}/{entity_id}/draft", response_model=dict[str, Any])
def get_draft(
    entity_type: EntityTypePath, entity_id: EntityIdPath, engine: EngineDep
) -> dict[str, Any]:
    """Get the draft value of every versioned field."""
    return engine.get_draft(entity_type, entity_id)


@router.get("/{entity_type}/{entity_id}/published", response_model=dict[str, Any] | None)
def get_published(
    entity_type: EntityTypePath, entity_id: EntityIdPath, engine: EngineDep
) -> dict[str, Any] | None:
    """Get the published value of every versioned field (null if never published)."""
    return engine.get_published(entity_type, entity_id)


@router.patch("/{entity_type}/{entity_id}/draft", response_model=dict[str, Any])
def save_draft(
    entity_type: EntityTypePath,
    entity_id: EntityIdPath,
    data: DraftUpdateRequest,
    engine: EngineDep,
) -> dict[str, Any]:
    """Save new draft values. The live site does not change until publish."""
    return engine.save_draft(entity_type, entity_id, data.fields)


@router.patch("/{entity_type}/{entity_id}", response_model=EntityResponse)
def update_attributes(
    entity_type: EntityTypePath,
    entity_id: EntityIdPath,
    data: AttributesUpdateRequest,
    authoring: AuthoringDep,
) -> EntityResponse:
    """Update unversioned columns such as visibility, order or slug."""
    return EntityResponse(**authoring.update_attributes(entity_type, entity_id, data.attributes))


@router.delete("/{entity_type}/{entity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entity(
    entity_type: EntityTypePath, entity_id: EntityIdPath, authoring: AuthoringDep
) -> None:
    """Soft-delete an entity."""
    authoring.soft_delete(entity_type, entity_id)
