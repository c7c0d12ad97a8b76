"""Entity type and preview mode taxonomy.

The order of ``ENTITY_TYPE_ORDER`` is the order in which pending changes are
listed and swept by the bulk publishing operations.
"""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    """Publishable entity kinds, as used in routes and audit records."""

    SECTION = "section"
    SECTION_BULLET = "section_bullet"
    PROJECT = "project"
    PROJECT_PAGE = "project_page"
    SITE_SETTING = "site_setting"
    THEME_SETTING = "theme_setting"
    SOCIAL_LINK = "social_link"
    RESUME_ASSET = "resume_asset"


class PreviewMode(StrEnum):
    """Which shadow column the projector reads."""

    DRAFT = "draft"
    PUBLISHED = "published"


class SectionSlug(StrEnum):
    """Section kinds with a known content shape."""

    HERO = "hero"
    SUMMARY = "summary"
    SKILLS = "skills"
    EXPERIENCE = "experience"
    HOW_I_WORK = "how-i-work"
    PROJECTS = "projects"
    CONTACT = "contact"


# Top-level types in listing / sweep order. Child types are covered by their parent.
ENTITY_TYPE_ORDER: tuple[EntityType, ...] = (
    EntityType.SECTION,
    EntityType.PROJECT,
    EntityType.SITE_SETTING,
    EntityType.THEME_SETTING,
    EntityType.SOCIAL_LINK,
    EntityType.RESUME_ASSET,
)

# Types published together by the "publish settings" action.
SETTINGS_GROUP: tuple[EntityType, ...] = (
    EntityType.SITE_SETTING,
    EntityType.THEME_SETTING,
    EntityType.SOCIAL_LINK,
    EntityType.RESUME_ASSET,
)
