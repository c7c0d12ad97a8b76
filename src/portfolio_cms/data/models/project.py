"""ORM models for showcased projects and their detail pages."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Boolean, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_cms.data.db import Base
from portfolio_cms.data.models.mixins import PublishableMixin


class Project(PublishableMixin, Base):
    """A portfolio project card, with optional detail pages.

    Attributes:
        slug: URL handle for the public project page; unique among live projects.
        title_draft, title_published: Project name.
        description_draft, description_published: Summary text.
        technologies_draft, technologies_published: JSON list of tech names.
        github_url, external_url, thumbnail_url: Unversioned links.
        is_featured: Whether the card is highlighted.
    """

    __tablename__ = "projects"
    # Slugs are unique among live rows only, so a soft-deleted slug can be reused.
    __table_args__ = (
        Index(
            "uq_projects_slug_live",
            "slug",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    slug: Mapped[str] = mapped_column(String(200), nullable=False, index=True)

    title_draft: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    title_published: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description_draft: Mapped[str] = mapped_column(Text, nullable=False, default="")
    description_published: Mapped[str | None] = mapped_column(Text, nullable=True)
    technologies_draft: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    technologies_published: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)

    github_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    external_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    thumbnail_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    pages: Mapped[list[ProjectPage]] = relationship(
        "ProjectPage",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectPage.display_order",
    )


class ProjectPage(PublishableMixin, Base):
    """A detail page attached to a project."""

    __tablename__ = "project_pages"

    project_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    content_draft: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    content_published: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    project: Mapped[Project] = relationship("Project", back_populates="pages")
