"""ORM models package for database tables.

This package provides SQLAlchemy ORM models representing database tables:
- Section / SectionBullet: Page sections and their bullet points
- Project / ProjectPage: Showcased projects and their detail pages
- SiteSettingsEntry / ThemeSettingsEntry: Key/value settings
- SocialLink: External profile links
- ResumeAsset: Downloadable resume (single active row)
- AuditLog: Append-only log of publishing actions

All publishable models share PublishableMixin and inherit from the shared
Base declarative class defined in data.db.
"""

from portfolio_cms.data.db import Base
from portfolio_cms.data.models.audit_log import AuditLog
from portfolio_cms.data.models.mixins import PublishableMixin
from portfolio_cms.data.models.project import Project, ProjectPage
from portfolio_cms.data.models.resume_asset import ResumeAsset
from portfolio_cms.data.models.section import Section, SectionBullet
from portfolio_cms.data.models.settings import SiteSettingsEntry, ThemeSettingsEntry
from portfolio_cms.data.models.social_link import SocialLink

__all__ = [
    "AuditLog",
    "Base",
    "Project",
    "ProjectPage",
    "PublishableMixin",
    "ResumeAsset",
    "Section",
    "SectionBullet",
    "SiteSettingsEntry",
    "SocialLink",
    "ThemeSettingsEntry",
]
