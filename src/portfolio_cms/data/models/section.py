"""ORM models for page sections and their bullet points."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_cms.data.db import Base
from portfolio_cms.data.models.mixins import PublishableMixin


class Section(PublishableMixin, Base):
    """A top-level block of the single-page site.

    The ``slug`` selects which renderer (and which content shape) applies,
    e.g. ``hero``, ``summary`` or ``experience``.

    Attributes:
        slug: Section kind / anchor, unique among live sections.
        title_draft, title_published: Heading text.
        subtitle_draft, subtitle_published: Optional sub-heading.
        content_draft, content_published: Structured JSON body.
    """

    __tablename__ = "sections"
    __table_args__ = (
        Index(
            "uq_sections_slug_live",
            "slug",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    slug: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    title_draft: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    title_published: Mapped[str | None] = mapped_column(String(255), nullable=True)
    subtitle_draft: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    subtitle_published: Mapped[str | None] = mapped_column(String(255), nullable=True)
    content_draft: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    content_published: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    bullets: Mapped[list[SectionBullet]] = relationship(
        "SectionBullet",
        back_populates="section",
        cascade="all, delete-orphan",
        order_by="SectionBullet.display_order",
    )


class SectionBullet(PublishableMixin, Base):
    """A single bullet point shown under a section."""

    __tablename__ = "section_bullets"

    section_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("sections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    content_draft: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content_published: Mapped[str | None] = mapped_column(Text, nullable=True)

    section: Mapped[Section] = relationship("Section", back_populates="bullets")
