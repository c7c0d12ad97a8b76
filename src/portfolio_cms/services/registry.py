"""Descriptors for every publishable entity type.

The publishing engine, the projector and the authoring service are written
once against :class:`PublishableSpec`; the only per-type knowledge lives
here: which model backs the type, which fields are versioned (with their
defaults and validators), how to label a row, and which type is its parent
or child for cascading.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from portfolio_cms.constants import EntityType
from portfolio_cms.data.models import (
    Project,
    ProjectPage,
    PublishableMixin,
    ResumeAsset,
    Section,
    SectionBullet,
    SiteSettingsEntry,
    SocialLink,
    ThemeSettingsEntry,
)
from portfolio_cms.models.errors import ContentValidationError
from portfolio_cms.services import validation
from portfolio_cms.services.content_shapes import parse_section_content
from portfolio_cms.services.validation import FieldValidator

_DISPLAY_NAME_LENGTH = 60


@dataclass(frozen=True, slots=True)
class VersionedField:
    """A field stored as a ``<name>_draft`` / ``<name>_published`` column pair."""

    name: str
    default: Callable[[], Any]
    validator: FieldValidator

    @property
    def draft_column(self) -> str:
        return f"{self.name}_draft"

    @property
    def published_column(self) -> str:
        return f"{self.name}_published"


@dataclass(frozen=True, slots=True)
class PublishableSpec:
    """Everything the engine needs to know about one entity type.

    Attributes:
        entity_type: Type tag.
        model: ORM class carrying the publishable column shape.
        fields: Versioned fields.
        label: Returns a human-readable name for a row.
        parent_type: Parent type for child entities (cascade target of the parent).
        parent_key: Foreign key column on the child pointing at the parent.
        child_type: Child type cascaded by publish / discard of this type.
        row_validator: Extra validation needing the row itself (e.g. the section slug).
        plain_attributes: Unversioned columns editable through the authoring service.
    """

    entity_type: EntityType
    model: type[PublishableMixin]
    fields: tuple[VersionedField, ...]
    label: Callable[[Any], str]
    parent_type: EntityType | None = None
    parent_key: str | None = None
    child_type: EntityType | None = None
    row_validator: Callable[[Any, dict[str, Any]], None] | None = None
    plain_attributes: dict[str, FieldValidator] = field(default_factory=dict)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @property
    def is_child(self) -> bool:
        return self.parent_type is not None

    def read_draft(self, row: Any) -> dict[str, Any]:
        return {f.name: copy.deepcopy(getattr(row, f.draft_column)) for f in self.fields}

    def read_published(self, row: Any) -> dict[str, Any]:
        return {f.name: copy.deepcopy(getattr(row, f.published_column)) for f in self.fields}

    def defaults(self) -> dict[str, Any]:
        return {f.name: f.default() for f in self.fields}

    def baseline(self, row: Any) -> dict[str, Any]:
        """Values the draft is compared against: published if ever published, else defaults."""
        return self.read_published(row) if row.is_published else self.defaults()

    def clean_draft(self, values: Mapping[str, Any], row: Any | None = None) -> dict[str, Any]:
        """Validate a partial set of draft values keyed by field name.

        Raises:
            ContentValidationError: On unknown field names or malformed values.
        """
        by_name = {f.name: f for f in self.fields}
        unknown = sorted(set(values) - set(by_name))
        if unknown:
            raise ContentValidationError(
                f"unknown {self.entity_type} field(s): {', '.join(unknown)}",
                field=unknown[0],
            )

        cleaned = {name: by_name[name].validator(name, value) for name, value in values.items()}
        if self.row_validator is not None and row is not None:
            self.row_validator(row, cleaned)
        return cleaned

    def clean_attributes(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """Validate updates to unversioned columns."""
        unknown = sorted(set(values) - set(self.plain_attributes))
        if unknown:
            raise ContentValidationError(
                f"{self.entity_type} has no editable attribute(s): {', '.join(unknown)}",
                field=unknown[0],
            )
        return {
            name: self.plain_attributes[name](name, value) for name, value in values.items()
        }


def _truncate(text: str | None, fallback: str) -> str:
    text = (text or "").strip()
    if not text:
        return fallback
    if len(text) <= _DISPLAY_NAME_LENGTH:
        return text
    return text[: _DISPLAY_NAME_LENGTH - 1].rstrip() + "…"


def _validate_section_content(row: Section, cleaned: dict[str, Any]) -> None:
    if "content" in cleaned:
        parse_section_content(row.slug, cleaned["content"])


def _boolean(field_name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ContentValidationError(f"{field_name} must be a boolean", field=field_name)
    return value


def _order(field_name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ContentValidationError(f"{field_name} must be an integer", field=field_name)
    return value


def _slug(field_name: str, value: Any) -> str:
    return validation.validate_slug(value)


def _short_text(field_name: str, value: Any) -> str | None:
    if value is None:
        return None
    return validation.required_text(field_name, value)


_COMMON_ATTRIBUTES: dict[str, FieldValidator] = {
    "is_visible": _boolean,
    "display_order": _order,
}


def _text(name: str) -> VersionedField:
    return VersionedField(name, str, validation.optional_text)


def _title(name: str) -> VersionedField:
    return VersionedField(name, str, validation.required_text)


def _url(name: str) -> VersionedField:
    return VersionedField(name, lambda: None, validation.optional_url)


REGISTRY: dict[EntityType, PublishableSpec] = {
    EntityType.SECTION: PublishableSpec(
        entity_type=EntityType.SECTION,
        model=Section,
        fields=(
            _title("title"),
            _text("subtitle"),
            VersionedField("content", dict, validation.json_object),
        ),
        label=lambda row: _truncate(row.title_draft, row.slug),
        child_type=EntityType.SECTION_BULLET,
        row_validator=_validate_section_content,
        plain_attributes={**_COMMON_ATTRIBUTES, "slug": _slug},
    ),
    EntityType.SECTION_BULLET: PublishableSpec(
        entity_type=EntityType.SECTION_BULLET,
        model=SectionBullet,
        fields=(_text("content"),),
        label=lambda row: _truncate(row.content_draft, "Bullet"),
        parent_type=EntityType.SECTION,
        parent_key="section_id",
        plain_attributes=dict(_COMMON_ATTRIBUTES),
    ),
    EntityType.PROJECT: PublishableSpec(
        entity_type=EntityType.PROJECT,
        model=Project,
        fields=(
            _title("title"),
            _text("description"),
            VersionedField("technologies", list, validation.string_list),
        ),
        label=lambda row: _truncate(row.title_draft, row.slug),
        child_type=EntityType.PROJECT_PAGE,
        plain_attributes={
            **_COMMON_ATTRIBUTES,
            "slug": _slug,
            "github_url": validation.optional_url,
            "external_url": validation.optional_url,
            "thumbnail_url": validation.optional_url,
            "is_featured": _boolean,
        },
    ),
    EntityType.PROJECT_PAGE: PublishableSpec(
        entity_type=EntityType.PROJECT_PAGE,
        model=ProjectPage,
        fields=(VersionedField("content", dict, validation.json_object),),
        label=lambda row: _truncate(
            (row.content_draft or {}).get("title") if isinstance(row.content_draft, dict) else None,
            "Project page",
        ),
        parent_type=EntityType.PROJECT,
        parent_key="project_id",
        plain_attributes=dict(_COMMON_ATTRIBUTES),
    ),
    EntityType.SITE_SETTING: PublishableSpec(
        entity_type=EntityType.SITE_SETTING,
        model=SiteSettingsEntry,
        fields=(VersionedField("value", lambda: None, validation.json_value),),
        label=lambda row: row.key,
        plain_attributes=dict(_COMMON_ATTRIBUTES),
    ),
    EntityType.THEME_SETTING: PublishableSpec(
        entity_type=EntityType.THEME_SETTING,
        model=ThemeSettingsEntry,
        fields=(VersionedField("value", lambda: None, validation.json_value),),
        label=lambda row: row.key,
        plain_attributes=dict(_COMMON_ATTRIBUTES),
    ),
    EntityType.SOCIAL_LINK: PublishableSpec(
        entity_type=EntityType.SOCIAL_LINK,
        model=SocialLink,
        fields=(_url("url"),),
        label=lambda row: row.platform,
        plain_attributes={
            **_COMMON_ATTRIBUTES,
            "platform": validation.required_text,
            "icon": _short_text,
        },
    ),
    EntityType.RESUME_ASSET: PublishableSpec(
        entity_type=EntityType.RESUME_ASSET,
        model=ResumeAsset,
        fields=(_url("file_url"), _url("external_url")),
        label=lambda row: row.filename or "Resume",
        plain_attributes={**_COMMON_ATTRIBUTES, "filename": _short_text},
    ),
}


def get_spec(entity_type: EntityType | str) -> PublishableSpec:
    """Return the descriptor for an entity type given as enum or string.

    Raises:
        ContentValidationError: If the type is unknown.
    """
    try:
        return REGISTRY[EntityType(entity_type)]
    except ValueError as exc:
        raise ContentValidationError(
            f"unknown entity type '{entity_type}'", field="entity_type"
        ) from exc
