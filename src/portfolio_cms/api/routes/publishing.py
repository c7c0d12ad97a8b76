"""Publish, discard and pending-change routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Path, Query

from portfolio_cms.api.dependencies import EngineDep
from portfolio_cms.api.schemas.publishing import (
    AuditEntryResponse,
    BatchReportResponse,
    ChangeStatusResponse,
    PublishResultResponse,
    UnpublishedItemResponse,
)
from portfolio_cms.constants import EntityType
from portfolio_cms.models.publishing import BatchReport
from portfolio_cms.services.audit import get_audit_entries

router = APIRouter(tags=["publishing"])

EntityTypePath = Annotated[EntityType, Path(description="Entity type, e.g. 'project'")]
EntityIdPath = Annotated[str, Path(description="Entity ID")]
StrictQuery = Annotated[
    bool,
    Query(description="Answer 207 Multi-Status instead of 200 when any item fails"),
]


def _report(report: BatchReport, strict: bool) -> BatchReportResponse:
    if strict:
        report.raise_for_failures()
    return BatchReportResponse.model_validate(report)


@router.get("/publish/pending", response_model=list[UnpublishedItemResponse])
def list_pending(engine: EngineDep) -> list[UnpublishedItemResponse]:
    """List every entity with unpublished changes."""
    return [
        UnpublishedItemResponse.model_validate(item) for item in engine.list_unpublished_items()
    ]


@router.get("/publish/status/{entity_type}/{entity_id}", response_model=ChangeStatusResponse)
def get_change_status(
    entity_type: EntityTypePath, entity_id: EntityIdPath, engine: EngineDep
) -> ChangeStatusResponse:
    """Report whether an entity (or any of its children) has unpublished changes."""
    return ChangeStatusResponse(**engine.describe_changes(entity_type, entity_id))


@router.get("/publish/audit", response_model=list[AuditEntryResponse])
def list_audit_entries(
    engine: EngineDep,
    entity_type: Annotated[EntityType | None, Query()] = None,
    entity_id: Annotated[str | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
) -> list[AuditEntryResponse]:
    """List recent publish, discard and activation events, newest first."""
    entries = get_audit_entries(
        store=engine.store, entity_type=entity_type, entity_id=entity_id, limit=limit
    )
    return [AuditEntryResponse(**entry) for entry in entries]


@router.post("/publish/all", response_model=BatchReportResponse)
def publish_all(engine: EngineDep, strict: StrictQuery = False) -> BatchReportResponse:
    """Publish every entity with pending changes; each one succeeds or fails on its own."""
    return _report(engine.publish_all(), strict)


@router.post("/publish/settings", response_model=BatchReportResponse)
def publish_settings(engine: EngineDep, strict: StrictQuery = False) -> BatchReportResponse:
    """Publish pending settings, social links and the active resume."""
    return _report(engine.publish_settings(), strict)


@router.post("/discard/all", response_model=BatchReportResponse)
def discard_all(engine: EngineDep, strict: StrictQuery = False) -> BatchReportResponse:
    """Discard every pending change."""
    return _report(engine.discard_all(), strict)


@router.post("/publish/{entity_type}/{entity_id}", response_model=PublishResultResponse)
def publish_entity(
    entity_type: EntityTypePath, entity_id: EntityIdPath, engine: EngineDep
) -> PublishResultResponse:
    """Publish an entity together with its children."""
    values = engine.publish(entity_type, entity_id)
    return PublishResultResponse(entity_type=entity_type, id=entity_id, values=values)


@router.post("/discard/{entity_type}/{entity_id}", response_model=PublishResultResponse)
def discard_entity(
    entity_type: EntityTypePath, entity_id: EntityIdPath, engine: EngineDep
) -> PublishResultResponse:
    """Throw away unpublished changes on an entity and its children."""
    values = engine.discard(entity_type, entity_id)
    return PublishResultResponse(entity_type=entity_type, id=entity_id, values=values)
