"""Read-only projection of site content for renderers.

``project(mode)`` flattens every entity's draft/published column pairs into
one value per field, picking the draft column in ``draft`` mode and the
published column in ``published`` mode. Soft-deleted and hidden entities
are always skipped; ``published`` mode additionally skips entities that were
never published. Sections embed their bullets and projects embed their
pages, filtered and ordered the same way.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from portfolio_cms.constants import EntityType, PreviewMode
from portfolio_cms.models.errors import ContentValidationError, EntityNotFoundError
from portfolio_cms.services.content_store import ContentStore
from portfolio_cms.services.registry import PublishableSpec, get_spec

__all__ = ["PreviewProjector", "parse_mode"]

# Unversioned columns that are presentation flags rather than content.
_HIDDEN_ATTRIBUTES = frozenset({"is_visible"})


def parse_mode(mode: PreviewMode | str) -> PreviewMode:
    """Return ``mode`` as a :class:`PreviewMode`.

    Raises:
        ContentValidationError: If the mode is neither ``draft`` nor ``published``.
    """
    try:
        return PreviewMode(mode)
    except ValueError as exc:
        raise ContentValidationError(
            f"mode must be 'draft' or 'published', got '{mode}'", field="mode"
        ) from exc


class PreviewProjector:
    """Builds flattened content views over the content store."""

    def __init__(self, store: ContentStore | None = None) -> None:
        self.store = store or ContentStore()

    def project(self, mode: PreviewMode | str) -> dict[str, Any]:
        """Project the whole site.

        Returns:
            Mapping with ``sections``, ``projects``, ``site_settings``,
            ``theme_settings``, ``social_links`` and ``resume``.
        """
        mode = parse_mode(mode)
        with self.store.transaction() as session:
            return {
                "mode": mode,
                "sections": self._project_type(session, EntityType.SECTION, mode),
                "projects": self._project_type(session, EntityType.PROJECT, mode),
                "site_settings": self._project_settings(session, EntityType.SITE_SETTING, mode),
                "theme_settings": self._project_settings(session, EntityType.THEME_SETTING, mode),
                "social_links": self._project_type(session, EntityType.SOCIAL_LINK, mode),
                "resume": self._project_resume(session, mode),
            }

    def project_section(self, section_id: str, mode: PreviewMode | str) -> dict[str, Any]:
        """Project one section with its bullets.

        Raises:
            EntityNotFoundError: If the section is missing or filtered out in this mode.
        """
        return self._project_one(EntityType.SECTION, "id", section_id, mode)

    def project_project(self, project_id: str, mode: PreviewMode | str) -> dict[str, Any]:
        """Project one project with its pages."""
        return self._project_one(EntityType.PROJECT, "id", project_id, mode)

    def project_project_by_slug(self, slug: str, mode: PreviewMode | str) -> dict[str, Any]:
        """Project one project, looked up by its public slug."""
        return self._project_one(EntityType.PROJECT, "slug", slug, mode)

    # Internals

    def _project_one(
        self, entity_type: EntityType, attribute: str, value: str, mode: PreviewMode | str
    ) -> dict[str, Any]:
        mode = parse_mode(mode)
        spec = get_spec(entity_type)
        with self.store.transaction() as session:
            row = self.store.get_by_attribute(session, spec, attribute, value)
            if row is None or not self._is_projected(row, mode):
                raise EntityNotFoundError(spec.entity_type, value)
            return self._flatten(session, spec, row, mode)

    @staticmethod
    def _is_projected(row: Any, mode: PreviewMode) -> bool:
        if not row.is_visible:
            return False
        return mode is PreviewMode.DRAFT or row.is_published

    def _visible_rows(
        self,
        session: Session,
        spec: PublishableSpec,
        mode: PreviewMode,
        parent_id: str | None = None,
    ) -> list[Any]:
        rows = self.store.list_live(session, spec, parent_id=parent_id)
        return [row for row in rows if self._is_projected(row, mode)]

    def _flatten(
        self, session: Session, spec: PublishableSpec, row: Any, mode: PreviewMode
    ) -> dict[str, Any]:
        values = spec.read_draft(row) if mode is PreviewMode.DRAFT else spec.read_published(row)
        record: dict[str, Any] = {"id": row.id, "display_order": row.display_order}
        for attribute in spec.plain_attributes:
            if attribute not in _HIDDEN_ATTRIBUTES:
                record[attribute] = getattr(row, attribute)
        record.update(values)

        if spec.child_type is not None:
            child_spec = get_spec(spec.child_type)
            children = self._visible_rows(session, child_spec, mode, parent_id=row.id)
            record[_children_key(child_spec)] = [
                self._flatten(session, child_spec, child, mode) for child in children
            ]
        return record

    def _project_type(
        self, session: Session, entity_type: EntityType, mode: PreviewMode
    ) -> list[dict[str, Any]]:
        spec = get_spec(entity_type)
        return [
            self._flatten(session, spec, row, mode)
            for row in self._visible_rows(session, spec, mode)
        ]

    def _project_settings(
        self, session: Session, entity_type: EntityType, mode: PreviewMode
    ) -> dict[str, Any]:
        spec = get_spec(entity_type)
        column = "value_draft" if mode is PreviewMode.DRAFT else "value_published"
        return {row.key: getattr(row, column) for row in self._visible_rows(session, spec, mode)}

    def _project_resume(self, session: Session, mode: PreviewMode) -> dict[str, Any] | None:
        spec = get_spec(EntityType.RESUME_ASSET)
        for row in self._visible_rows(session, spec, mode):
            if row.is_active:
                return self._flatten(session, spec, row, mode)
        return None


def _children_key(child_spec: PublishableSpec) -> str:
    return {
        EntityType.SECTION_BULLET: "bullets",
        EntityType.PROJECT_PAGE: "pages",
    }[child_spec.entity_type]
