"""Authoring operations around the publishing engine.

New rows start with only their draft columns populated and
``is_published=False``. Unversioned columns (slug, visibility, ordering,
links, ...) are edited here directly; versioned fields go through
:meth:`PublishingEngine.save_draft`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portfolio_cms.constants import EntityType
from portfolio_cms.data.models import (
    Project,
    ProjectPage,
    ResumeAsset,
    Section,
    SectionBullet,
    SocialLink,
)
from portfolio_cms.data.models.mixins import utcnow
from portfolio_cms.models.errors import ContentValidationError, EntityNotFoundError
from portfolio_cms.services import validation
from portfolio_cms.services.content_store import ContentStore
from portfolio_cms.services.registry import PublishableSpec, get_spec

logger = logging.getLogger(__name__)

__all__ = ["AuthoringService", "to_admin_record"]

_SETTING_TYPES = (EntityType.SITE_SETTING, EntityType.THEME_SETTING)


_COMMON_COLUMNS = (
    "id",
    "is_published",
    "is_visible",
    "display_order",
    "draft_reset",
    "deleted_at",
    "created_at",
    "updated_at",
)


def to_admin_record(spec: PublishableSpec, row: Any) -> dict[str, Any]:
    """Convert a row to the admin view.

    Common publishable columns sit at the top level, the type's other
    unversioned columns under ``attributes``, and the versioned fields under
    ``draft`` and ``published`` (None until the first publish).
    """
    versioned = {f.draft_column for f in spec.fields} | {f.published_column for f in spec.fields}
    record: dict[str, Any] = {"entity_type": spec.entity_type}
    record.update({column: getattr(row, column) for column in _COMMON_COLUMNS})
    record["attributes"] = {
        column.key: getattr(row, column.key)
        for column in spec.model.__table__.columns
        if column.key not in versioned and column.key not in _COMMON_COLUMNS
    }
    record["draft"] = spec.read_draft(row)
    record["published"] = spec.read_published(row) if row.is_published else None
    return record


class AuthoringService:
    """Create, edit, reorder and soft-delete publishable entities."""

    def __init__(self, store: ContentStore | None = None) -> None:
        self.store = store or ContentStore()

    # Reads

    def list_entities(
        self, entity_type: EntityType | str, *, parent_id: str | None = None
    ) -> list[dict[str, Any]]:
        """List live entities of a type in display order (optionally one parent's children)."""
        spec = get_spec(entity_type)
        if parent_id is not None and not spec.is_child:
            raise ContentValidationError(
                f"{spec.entity_type} has no parent", field="parent_id"
            )
        with self.store.transaction() as session:
            rows = self.store.list_live(session, spec, parent_id=parent_id)
            return [to_admin_record(spec, row) for row in rows]

    def get_entity(
        self, entity_type: EntityType | str, entity_id: str, *, include_deleted: bool = False
    ) -> dict[str, Any]:
        """Return the admin record of one entity.

        Soft-deleted rows are only returned when ``include_deleted`` is set.
        """
        spec = get_spec(entity_type)
        with self.store.transaction() as session:
            row = self.store.get(session, spec, entity_id, include_deleted=include_deleted)
            if row is None:
                raise EntityNotFoundError(spec.entity_type, entity_id)
            return to_admin_record(spec, row)

    # Creation

    def create_section(
        self,
        *,
        slug: str,
        title: str,
        subtitle: str = "",
        content: dict[str, Any] | None = None,
        display_order: int = 0,
        is_visible: bool = True,
    ) -> dict[str, Any]:
        """Create a section with draft title, subtitle and content."""
        spec = get_spec(EntityType.SECTION)
        slug = validation.validate_slug(slug)
        row = Section(slug=slug, display_order=display_order, is_visible=is_visible)
        draft = spec.clean_draft(
            {"title": title, "subtitle": subtitle, "content": content or {}}, row
        )
        return self._insert(spec, row, draft)

    def create_section_bullet(
        self, section_id: str, *, content: str, display_order: int = 0
    ) -> dict[str, Any]:
        """Add a bullet to a live section."""
        spec = get_spec(EntityType.SECTION_BULLET)
        draft = spec.clean_draft({"content": content})
        row = SectionBullet(section_id=section_id, display_order=display_order)
        return self._insert(spec, row, draft, parent_id=section_id)

    def create_project(
        self,
        *,
        slug: str,
        title: str,
        description: str = "",
        technologies: list[str] | None = None,
        github_url: str | None = None,
        external_url: str | None = None,
        thumbnail_url: str | None = None,
        is_featured: bool = False,
        display_order: int = 0,
        is_visible: bool = True,
    ) -> dict[str, Any]:
        """Create a project with draft title, description and technologies."""
        spec = get_spec(EntityType.PROJECT)
        attributes = spec.clean_attributes(
            {
                "slug": slug,
                "github_url": github_url,
                "external_url": external_url,
                "thumbnail_url": thumbnail_url,
                "is_featured": is_featured,
                "display_order": display_order,
                "is_visible": is_visible,
            }
        )
        draft = spec.clean_draft(
            {"title": title, "description": description, "technologies": technologies or []}
        )
        return self._insert(spec, Project(**attributes), draft)

    def create_project_page(
        self, project_id: str, *, content: dict[str, Any] | None = None, display_order: int = 0
    ) -> dict[str, Any]:
        """Add a detail page to a live project."""
        spec = get_spec(EntityType.PROJECT_PAGE)
        draft = spec.clean_draft({"content": content or {}})
        row = ProjectPage(project_id=project_id, display_order=display_order)
        return self._insert(spec, row, draft, parent_id=project_id)

    def create_social_link(
        self,
        *,
        platform: str,
        url: str | None = None,
        icon: str | None = None,
        display_order: int = 0,
        is_visible: bool = True,
    ) -> dict[str, Any]:
        """Create a social link with a draft URL."""
        spec = get_spec(EntityType.SOCIAL_LINK)
        attributes = spec.clean_attributes(
            {
                "platform": platform,
                "icon": icon,
                "display_order": display_order,
                "is_visible": is_visible,
            }
        )
        draft = spec.clean_draft({"url": url})
        return self._insert(spec, SocialLink(**attributes), draft)

    def create_resume_asset(
        self,
        *,
        filename: str | None = None,
        file_url: str | None = None,
        external_url: str | None = None,
        activate: bool = False,
    ) -> dict[str, Any]:
        """Create a resume asset, optionally making it the only active one.

        Deactivating the previous asset and inserting the new active one
        happen in the same transaction.
        """
        spec = get_spec(EntityType.RESUME_ASSET)
        attributes = spec.clean_attributes({"filename": filename})
        draft = spec.clean_draft({"file_url": file_url, "external_url": external_url})
        row = ResumeAsset(**attributes, is_active=activate)

        def deactivate_others(session: Session) -> None:
            if not activate:
                return
            active = session.query(ResumeAsset).filter(ResumeAsset.is_active.is_(True)).all()
            for other in active:
                self.store.update_columns(session, other, {"is_active": False})

        return self._insert(spec, row, draft, before_insert=deactivate_others)

    def upsert_setting(
        self, entity_type: EntityType | str, key: str, value: Any
    ) -> dict[str, Any]:
        """Write the draft value of one settings key, creating the key if needed."""
        return self.update_settings(entity_type, {key: value})[key]

    def update_settings(
        self, entity_type: EntityType | str, values: Mapping[str, Any]
    ) -> dict[str, dict[str, Any]]:
        """Write draft values for several settings keys in one transaction.

        Returns:
            Admin records keyed by setting key.
        """
        spec = get_spec(entity_type)
        if spec.entity_type not in _SETTING_TYPES:
            raise ContentValidationError(
                f"{spec.entity_type} is not a settings type", field="entity_type"
            )
        cleaned = {
            validation.validate_setting_key(key): spec.clean_draft({"value": value})["value"]
            for key, value in values.items()
        }

        with self.store.transaction() as session:
            records = {}
            for key, value in cleaned.items():
                row = session.query(spec.model).filter(spec.model.key == key).first()
                if row is None:
                    row = self.store.add(session, spec.model(key=key, value_draft=value))
                else:
                    self.store.update_columns(
                        session, row, {"value_draft": value, "deleted_at": None}
                    )
                records[key] = to_admin_record(spec, row)
            return records

    # Editing

    def update_attributes(
        self, entity_type: EntityType | str, entity_id: str, values: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Update unversioned columns (visibility, order, slug, links, ...)."""
        spec = get_spec(entity_type)
        cleaned = spec.clean_attributes(values)
        try:
            with self.store.transaction() as session:
                row = self.store.require(session, spec, entity_id)
                if cleaned:
                    self.store.update_columns(session, row, cleaned)
                return to_admin_record(spec, row)
        except IntegrityError as exc:
            raise ContentValidationError(
                f"{spec.entity_type} attributes conflict with an existing entry"
            ) from exc

    def reorder(self, entity_type: EntityType | str, orders: Mapping[str, int]) -> None:
        """Set display_order for several siblings at once; all or nothing.

        Raises:
            EntityNotFoundError: If any id is missing or soft-deleted.
        """
        spec = get_spec(entity_type)
        cleaned = {
            entity_id: spec.clean_attributes({"display_order": order})["display_order"]
            for entity_id, order in orders.items()
        }
        with self.store.transaction() as session:
            for entity_id, order in cleaned.items():
                row = self.store.require(session, spec, entity_id)
                self.store.update_columns(session, row, {"display_order": order})
        logger.info("Reordered %d %s entries", len(cleaned), spec.entity_type)

    def soft_delete(self, entity_type: EntityType | str, entity_id: str) -> None:
        """Mark an entity deleted. Children of a deleted parent become inert with it."""
        spec = get_spec(entity_type)
        with self.store.transaction() as session:
            row = self.store.require(session, spec, entity_id)
            self.store.update_columns(session, row, {"deleted_at": utcnow()})
        logger.info("Soft-deleted %s %s", spec.entity_type, entity_id)

    # Internals

    def _insert(
        self,
        spec: PublishableSpec,
        row: Any,
        draft: dict[str, Any],
        *,
        parent_id: str | None = None,
        before_insert: Callable[[Session], None] | None = None,
    ) -> dict[str, Any]:
        for name, value in draft.items():
            setattr(row, f"{name}_draft", value)
        row.is_published = False

        try:
            with self.store.transaction() as session:
                if parent_id is not None:
                    self.store.require(session, get_spec(spec.parent_type), parent_id)
                if before_insert is not None:
                    before_insert(session)
                self.store.add(session, row)
                record = to_admin_record(spec, row)
        except IntegrityError as exc:
            logger.warning("Rejected new %s: %s", spec.entity_type, exc.orig)
            raise ContentValidationError(
                f"{spec.entity_type} conflicts with an existing entry (duplicate slug or key?)"
            ) from exc

        logger.info("Created %s %s", spec.entity_type, record["id"])
        return record
