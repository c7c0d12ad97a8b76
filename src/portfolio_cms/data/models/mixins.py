"""Column shape shared by every publishable table.

Each concrete table adds its own ``<field>_draft`` / ``<field>_published``
pairs on top of these columns.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return str(uuid.uuid4())


class PublishableMixin:
    """Common publish, visibility, ordering and soft-delete columns.

    Attributes:
        id: Opaque UUID string, immutable after creation.
        is_published: True once at least one publish has happened.
        draft_reset: Set when a never-published row was discarded back to its
            defaults; until then a never-published row always counts as pending.
        is_visible: Hidden rows are never projected, in any mode.
        display_order: Sibling ordering; ties fall back to created_at, then id.
        deleted_at: Soft-delete timestamp; set rows are inert.
        created_at: UTC timestamp of creation.
        updated_at: UTC timestamp of the last draft or published mutation.
    """

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    draft_reset: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )
