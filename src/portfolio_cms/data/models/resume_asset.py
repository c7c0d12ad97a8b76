"""ORM model for the downloadable resume.

Several assets may be stored, but at most one has ``is_active`` set; the
active one is what the site links to.
"""

from __future__ import annotations

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_cms.data.db import Base
from portfolio_cms.data.models.mixins import PublishableMixin


class ResumeAsset(PublishableMixin, Base):
    """A resume file or external resume link.

    Attributes:
        filename: Original file name, for display only.
        is_active: Whether this is the resume currently linked from the site.
        file_url_draft, file_url_published: URL of the uploaded file.
        external_url_draft, external_url_published: Link to a hosted resume.
    """

    __tablename__ = "resume_assets"

    filename: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)

    file_url_draft: Mapped[str | None] = mapped_column(String(512), nullable=True)
    file_url_published: Mapped[str | None] = mapped_column(String(512), nullable=True)
    external_url_draft: Mapped[str | None] = mapped_column(String(512), nullable=True)
    external_url_published: Mapped[str | None] = mapped_column(String(512), nullable=True)
