"""Append-only record of publish, discard and activation actions."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, String, event
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_cms.data.db import Base
from portfolio_cms.data.models.mixins import new_id, utcnow


class AuditLog(Base):
    """One row per state-changing publishing action.

    Attributes:
        id: Opaque UUID string.
        action: Action name, e.g. ``publish`` or ``discard``.
        entity_type: Entity type value the action applied to.
        entity_id: Id of the root entity of the action.
        payload: Extra JSON details (cascaded child ids, ...).
        created_at: UTC timestamp of the action.
    """

    __tablename__ = "audit_logs"
    __table_args__ = (Index("ix_audit_entity", "entity_type", "entity_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    action: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(36), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "payload": self.payload,
            "created_at": self.created_at,
        }


@event.listens_for(AuditLog, "before_update")
@event.listens_for(AuditLog, "before_delete")
def _prevent_audit_mutation(mapper, connection, target) -> None:  # noqa: ANN001
    raise RuntimeError("Audit logs are immutable")
