from __future__ import annotations

from portfolio_cms.constants.content_types import (
    ENTITY_TYPE_ORDER,
    SETTINGS_GROUP,
    EntityType,
    PreviewMode,
    SectionSlug,
)

__all__ = [
    "ENTITY_TYPE_ORDER",
    "SETTINGS_GROUP",
    "EntityType",
    "PreviewMode",
    "SectionSlug",
]
