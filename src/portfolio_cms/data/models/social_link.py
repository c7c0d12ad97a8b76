"""ORM model for social profile links shown in the header and contact section."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_cms.data.db import Base
from portfolio_cms.data.models.mixins import PublishableMixin


class SocialLink(PublishableMixin, Base):
    """A link to an external profile (GitHub, LinkedIn, ...).

    Attributes:
        platform: Platform name used as the display label.
        icon: Optional icon identifier for the renderer.
        url_draft, url_published: Target URL.
    """

    __tablename__ = "social_links"

    platform: Mapped[str] = mapped_column(String(100), nullable=False)
    icon: Mapped[str | None] = mapped_column(String(100), nullable=True)

    url_draft: Mapped[str | None] = mapped_column(String(512), nullable=True)
    url_published: Mapped[str | None] = mapped_column(String(512), nullable=True)
