"""Pydantic schemas for publish, discard and change-status endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from portfolio_cms.constants import EntityType


class UnpublishedItemResponse(BaseModel):
    """An entity whose draft differs from what is live."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    entity_type: EntityType
    display_name: str
    updated_at: datetime | None = None


class BatchItemResponse(BaseModel):
    """Outcome of one item in a bulk operation."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    entity_type: EntityType
    display_name: str
    success: bool
    error: str | None = None


class BatchReportResponse(BaseModel):
    """Per-item report of a bulk publish or discard."""

    model_config = ConfigDict(from_attributes=True)

    action: str
    succeeded: list[BatchItemResponse] = Field(default_factory=list)
    failed: list[BatchItemResponse] = Field(default_factory=list)
    succeeded_count: int
    failed_count: int
    ok: bool = Field(description="True when no item failed")


class PublishResultResponse(BaseModel):
    """Result of publishing or discarding a single entity."""

    entity_type: EntityType
    id: str
    values: dict[str, Any] = Field(
        description="Published values after a publish, draft values after a discard"
    )


class ChangeStatusResponse(BaseModel):
    """Pending-change summary for one entity."""

    entity_type: EntityType
    id: str
    is_published: bool
    has_unpublished_changes: bool
    changed_fields: list[str] = Field(default_factory=list)
    dirty_children: list[str] = Field(
        default_factory=list, description="Ids of live children with pending changes"
    )


class AuditEntryResponse(BaseModel):
    """One publishing audit log entry."""

    id: str
    action: str
    entity_type: str
    entity_id: str
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
