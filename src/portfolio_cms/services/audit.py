"""Helpers for writing and reading the publishing audit log."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from portfolio_cms.data.models import AuditLog
from portfolio_cms.services.content_store import ContentStore

__all__ = ["get_audit_entries", "record_action"]


def record_action(
    session: Session,
    *,
    action: str,
    entity_type: str,
    entity_id: str,
    payload: dict[str, Any] | None = None,
) -> AuditLog:
    """Add an audit row to the caller's transaction.

    The row commits or rolls back together with the action it describes.
    """
    entry = AuditLog(
        action=action,
        entity_type=str(entity_type),
        entity_id=entity_id,
        payload=payload or {},
    )
    session.add(entry)
    return entry


def get_audit_entries(
    *,
    store: ContentStore | None = None,
    entity_type: str | None = None,
    entity_id: str | None = None,
    limit: int = 50,
) -> list[dict[str, Any]]:
    """Return the most recent audit entries, newest first.

    Args:
        store: Store whose transaction scope is read; defaults to the
            application database.
        entity_type: Only entries for this type, if given.
        entity_id: Only entries for this entity id, if given.
        limit: Maximum number of entries.
    """
    with (store or ContentStore()).transaction() as session:
        query = session.query(AuditLog)
        if entity_type is not None:
            query = query.filter(AuditLog.entity_type == str(entity_type))
        if entity_id is not None:
            query = query.filter(AuditLog.entity_id == entity_id)
        entries = query.order_by(AuditLog.created_at.desc(), AuditLog.id).limit(limit).all()
        return [entry.to_dict() for entry in entries]
