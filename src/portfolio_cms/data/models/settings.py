"""Key/value settings tables (site metadata and theme tokens).

One row per key; the value is any JSON document and is versioned like every
other publishable field.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_cms.data.db import Base
from portfolio_cms.data.models.mixins import PublishableMixin


class _SettingEntryMixin(PublishableMixin):
    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    value_draft: Mapped[Any] = mapped_column(JSON, nullable=True)
    value_published: Mapped[Any] = mapped_column(JSON, nullable=True)


class SiteSettingsEntry(_SettingEntryMixin, Base):
    """Site-wide setting such as ``site_title`` or ``contact_email``."""

    __tablename__ = "site_settings"


class ThemeSettingsEntry(_SettingEntryMixin, Base):
    """Theme token such as ``accent_color`` or ``font_family``."""

    __tablename__ = "theme_settings"
