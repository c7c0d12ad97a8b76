"""Pydantic schemas for content authoring endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from portfolio_cms.constants import EntityType


class EntityResponse(BaseModel):
    """Admin view of one publishable entity."""

    id: str
    entity_type: EntityType
    is_published: bool
    is_visible: bool
    display_order: int
    deleted_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    attributes: dict[str, Any] = Field(
        default_factory=dict, description="Unversioned columns (slug, key, links, ...)"
    )
    draft: dict[str, Any] = Field(description="Current working value of each versioned field")
    published: dict[str, Any] | None = Field(
        None, description="Last published value of each versioned field, None if never published"
    )


class SectionCreateRequest(BaseModel):
    """Request schema for creating a section."""

    slug: str = Field(..., description="Section kind / anchor, e.g. 'hero' or 'experience'")
    title: str = Field(..., description="Draft heading")
    subtitle: str = Field("", description="Draft sub-heading")
    content: dict[str, Any] = Field(default_factory=dict, description="Draft content document")
    display_order: int = Field(0, description="Position among sections (lower = earlier)")
    is_visible: bool = Field(True, description="Whether the section is rendered")


class SectionBulletCreateRequest(BaseModel):
    """Request schema for adding a bullet to a section."""

    section_id: str = Field(..., description="Owning section id")
    content: str = Field(..., description="Draft bullet text")
    display_order: int = Field(0, description="Position among the section's bullets")


class ProjectCreateRequest(BaseModel):
    """Request schema for creating a project."""

    slug: str = Field(..., description="Unique URL handle")
    title: str = Field(..., description="Draft project name")
    description: str = Field("", description="Draft summary")
    technologies: list[str] = Field(default_factory=list, description="Draft technology list")
    github_url: str | None = Field(None, description="Repository URL")
    external_url: str | None = Field(None, description="Live site URL")
    thumbnail_url: str | None = Field(None, description="Card image URL")
    is_featured: bool = Field(False, description="Highlight the project card")
    display_order: int = Field(0, description="Position among projects")
    is_visible: bool = Field(True, description="Whether the project is rendered")


class ProjectPageCreateRequest(BaseModel):
    """Request schema for adding a detail page to a project."""

    project_id: str = Field(..., description="Owning project id")
    content: dict[str, Any] = Field(default_factory=dict, description="Draft page document")
    display_order: int = Field(0, description="Position among the project's pages")


class SocialLinkCreateRequest(BaseModel):
    """Request schema for creating a social link."""

    platform: str = Field(..., description="Platform name, e.g. 'GitHub'")
    url: str | None = Field(None, description="Draft profile URL")
    icon: str | None = Field(None, description="Icon identifier")
    display_order: int = Field(0, description="Position among links")
    is_visible: bool = Field(True, description="Whether the link is rendered")


class ResumeAssetCreateRequest(BaseModel):
    """Request schema for registering a resume asset."""

    filename: str | None = Field(None, description="Original file name")
    file_url: str | None = Field(None, description="Draft URL of the uploaded file")
    external_url: str | None = Field(None, description="Draft URL of a hosted resume")
    activate: bool = Field(False, description="Make this the only active resume")


class DraftUpdateRequest(BaseModel):
    """Partial update of versioned fields; only the listed fields change."""

    fields: dict[str, Any] = Field(..., description="Field name to new draft value")


class AttributesUpdateRequest(BaseModel):
    """Partial update of unversioned columns."""

    attributes: dict[str, Any] = Field(..., description="Column name to new value")


class ReorderItem(BaseModel):
    """New position for one entity."""

    id: str
    display_order: int


class ReorderRequest(BaseModel):
    """Request schema for reordering siblings."""

    items: list[ReorderItem] = Field(..., min_length=1)
