"""Draft/publish engine.

Every publishable entity stores each editable field twice: the working
``<field>_draft`` value and the last promoted ``<field>_published`` value.
This module is the only place that moves values between the two:

- ``save_draft`` writes draft columns only.
- ``publish`` copies draft -> published for an entity and its live children,
  in one transaction, and sets ``is_published``.
- ``discard`` copies published -> draft (or resets the draft to its defaults
  when nothing was ever published) for an entity and its live children.
- ``publish_all`` / ``discard_all`` sweep every entity with pending changes,
  one transaction per entity, and report per-item outcomes.

Change detection compares each draft value against a baseline: the published
value once the entity has been published, the field default before that. A
never-published entity stays pending until it is published, or until a
discard resets it to its defaults (tracked by ``draft_reset``).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portfolio_cms.constants import ENTITY_TYPE_ORDER, SETTINGS_GROUP, EntityType
from portfolio_cms.data.models import ResumeAsset
from portfolio_cms.models.errors import (
    ContentError,
    ContentValidationError,
    DiscardFailedError,
    PublishFailedError,
    ResumeActivationError,
)
from portfolio_cms.models.publishing import BatchItemResult, BatchReport, UnpublishedItem
from portfolio_cms.services.audit import record_action
from portfolio_cms.services.comparison import changed_fields
from portfolio_cms.services.content_store import ContentStore
from portfolio_cms.services.registry import PublishableSpec, get_spec

logger = logging.getLogger(__name__)

__all__ = ["PublishingEngine"]


class PublishingEngine:
    """Moves field values between draft and published shadows.

    Args:
        store: Content store to operate on. Defaults to one bound to the
            application database session factory.
    """

    def __init__(self, store: ContentStore | None = None) -> None:
        self.store = store or ContentStore()

    # Reads

    def get_draft(self, entity_type: EntityType | str, entity_id: str) -> dict[str, Any]:
        """Return the draft value of every versioned field.

        Raises:
            EntityNotFoundError: If the entity is missing or soft-deleted.
        """
        spec = get_spec(entity_type)
        with self.store.transaction() as session:
            row = self.store.require(session, spec, entity_id)
            return spec.read_draft(row)

    def get_published(
        self, entity_type: EntityType | str, entity_id: str
    ) -> dict[str, Any] | None:
        """Return the published value of every versioned field, or None if never published.

        Raises:
            EntityNotFoundError: If the entity is missing or soft-deleted.
        """
        spec = get_spec(entity_type)
        with self.store.transaction() as session:
            row = self.store.require(session, spec, entity_id)
            if not row.is_published:
                return None
            return spec.read_published(row)

    def has_unpublished_changes(self, entity_type: EntityType | str, entity_id: str) -> bool:
        """Return True if the entity, or any of its live children, has pending changes.

        Raises:
            EntityNotFoundError: If the entity is missing or soft-deleted.
        """
        spec = get_spec(entity_type)
        with self.store.transaction() as session:
            row = self.store.require(session, spec, entity_id)
            return self._is_dirty(session, spec, row)

    def describe_changes(self, entity_type: EntityType | str, entity_id: str) -> dict[str, Any]:
        """Return a change summary for one entity: changed fields and dirty children."""
        spec = get_spec(entity_type)
        with self.store.transaction() as session:
            row = self.store.require(session, spec, entity_id)
            fields = changed_fields(spec.read_draft(row), spec.baseline(row))
            own_changes = self._has_own_changes(spec, row)
            dirty_children = []
            if spec.child_type is not None:
                child_spec = get_spec(spec.child_type)
                dirty_children = [
                    child.id
                    for child in self.store.live_children(session, spec, row)
                    if self._is_dirty(session, child_spec, child)
                ]
            return {
                "entity_type": spec.entity_type,
                "id": row.id,
                "is_published": row.is_published,
                "has_unpublished_changes": own_changes or bool(dirty_children),
                "changed_fields": fields,
                "dirty_children": dirty_children,
            }

    def list_unpublished_items(self) -> list[UnpublishedItem]:
        """List every live top-level entity with pending changes.

        Child changes are reported through their parent. Items are ordered by
        entity type, then display_order and creation time.
        """
        return self._collect_unpublished(ENTITY_TYPE_ORDER)

    # Single-entity writes

    def save_draft(
        self, entity_type: EntityType | str, entity_id: str, fields: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Persist new draft values for some of the entity's versioned fields.

        Published columns and ``is_published`` are left untouched.

        Returns:
            The full draft after the update.

        Raises:
            EntityNotFoundError: If the entity is missing or soft-deleted.
            ContentValidationError: On unknown fields or malformed values.
        """
        spec = get_spec(entity_type)
        if not isinstance(fields, Mapping):
            raise ContentValidationError("draft fields must be a mapping")

        with self.store.transaction() as session:
            row = self.store.require(session, spec, entity_id)
            try:
                cleaned = spec.clean_draft(fields, row)
            except ContentValidationError as exc:
                logger.warning("Rejected draft for %s %s: %s", spec.entity_type, entity_id, exc)
                raise
            if cleaned:
                self.store.update_columns(
                    session,
                    row,
                    {f"{name}_draft": value for name, value in cleaned.items()},
                )
            return spec.read_draft(row)

    def publish(self, entity_type: EntityType | str, entity_id: str) -> dict[str, Any]:
        """Publish an entity and its live children atomically.

        A child entity can only be published on its own once its parent has
        been published, so a child is never public under a private parent.

        Returns:
            The entity's published values after the call.

        Raises:
            EntityNotFoundError: If the entity is missing or soft-deleted.
            ContentValidationError: If a child is published before its parent, or
                a draft (e.g. one reset to its defaults) fails validation.
            PublishFailedError: If the store fails; nothing was changed.
        """
        spec = get_spec(entity_type)
        try:
            with self.store.transaction() as session:
                row = self.store.require(session, spec, entity_id)
                if spec.is_child:
                    self._require_published_parent(session, spec, row)

                child_ids = self._apply_to_subtree(session, spec, row, self._publish_row)
                record_action(
                    session,
                    action="publish",
                    entity_type=spec.entity_type,
                    entity_id=row.id,
                    payload={"children": child_ids},
                )
                snapshot = spec.read_published(row)
        except ContentError:
            raise
        except SQLAlchemyError as exc:
            logger.exception("Failed to publish %s %s", spec.entity_type, entity_id)
            raise PublishFailedError(
                f"publishing {spec.entity_type} '{entity_id}' failed; nothing was changed"
            ) from exc

        logger.info(
            "Published %s %s with %d children", spec.entity_type, entity_id, len(child_ids)
        )
        return snapshot

    def discard(self, entity_type: EntityType | str, entity_id: str) -> dict[str, Any]:
        """Reset the draft of an entity and its live children to their baseline.

        The baseline is the published value, or the field default for rows
        that were never published. Published columns are not touched.

        Returns:
            The entity's draft values after the call.

        Raises:
            EntityNotFoundError: If the entity is missing or soft-deleted.
            DiscardFailedError: If the store fails; nothing was changed.
        """
        spec = get_spec(entity_type)
        try:
            with self.store.transaction() as session:
                row = self.store.require(session, spec, entity_id)
                child_ids = self._apply_to_subtree(session, spec, row, self._discard_row)
                record_action(
                    session,
                    action="discard",
                    entity_type=spec.entity_type,
                    entity_id=row.id,
                    payload={"children": child_ids},
                )
                draft = spec.read_draft(row)
        except ContentError:
            raise
        except SQLAlchemyError as exc:
            logger.exception("Failed to discard %s %s", spec.entity_type, entity_id)
            raise DiscardFailedError(
                f"discarding {spec.entity_type} '{entity_id}' failed; nothing was changed"
            ) from exc

        logger.info(
            "Discarded %s %s with %d children", spec.entity_type, entity_id, len(child_ids)
        )
        return draft

    def activate_resume(self, resume_id: str) -> None:
        """Make ``resume_id`` the only active resume asset.

        Deactivating the others and activating the target happen in one
        transaction, so a failure leaves the previously active asset active.

        Raises:
            EntityNotFoundError: If the asset is missing or soft-deleted.
            ResumeActivationError: If the store fails; nothing was changed.
        """
        spec = get_spec(EntityType.RESUME_ASSET)
        try:
            with self.store.transaction() as session:
                row = self.store.require(session, spec, resume_id)
                others = (
                    session.query(ResumeAsset)
                    .filter(ResumeAsset.is_active.is_(True), ResumeAsset.id != row.id)
                    .all()
                )
                for other in others:
                    self.store.update_columns(session, other, {"is_active": False})
                self.store.update_columns(session, row, {"is_active": True})
                record_action(
                    session,
                    action="activate",
                    entity_type=spec.entity_type,
                    entity_id=row.id,
                    payload={"deactivated": [other.id for other in others]},
                )
        except ContentError:
            raise
        except SQLAlchemyError as exc:
            logger.exception("Failed to activate resume %s", resume_id)
            raise ResumeActivationError(
                f"activating resume '{resume_id}' failed; the active resume is unchanged"
            ) from exc

        logger.info("Activated resume %s", resume_id)

    # Bulk operations

    def publish_all(self) -> BatchReport:
        """Publish every entity with pending changes, one transaction per entity."""
        return self._run_batch("publish_all", self.list_unpublished_items(), self.publish)

    def discard_all(self) -> BatchReport:
        """Discard pending changes on every entity, one transaction per entity."""
        return self._run_batch("discard_all", self.list_unpublished_items(), self.discard)

    def publish_settings(self) -> BatchReport:
        """Publish pending site settings, theme settings, social links and the active resume."""
        items = self._collect_unpublished(
            SETTINGS_GROUP,
            include=lambda spec, row: (
                spec.entity_type != EntityType.RESUME_ASSET or row.is_active
            ),
        )
        return self._run_batch("publish_settings", items, self.publish)

    # Internals

    @staticmethod
    def _has_own_changes(spec: PublishableSpec, row: Any) -> bool:
        # A never-published row is pending until it is published or discarded.
        if not row.is_published and not row.draft_reset:
            return True
        return bool(changed_fields(spec.read_draft(row), spec.baseline(row)))

    def _is_dirty(self, session: Session, spec: PublishableSpec, row: Any) -> bool:
        if self._has_own_changes(spec, row):
            return True
        if spec.child_type is None:
            return False
        child_spec = get_spec(spec.child_type)
        return any(
            self._is_dirty(session, child_spec, child)
            for child in self.store.live_children(session, spec, row)
        )

    def _collect_unpublished(
        self,
        entity_types: Iterable[EntityType],
        include: Callable[[PublishableSpec, Any], bool] | None = None,
    ) -> list[UnpublishedItem]:
        items: list[UnpublishedItem] = []
        with self.store.transaction() as session:
            for entity_type in entity_types:
                spec = get_spec(entity_type)
                for row in self.store.list_live(session, spec):
                    if include is not None and not include(spec, row):
                        continue
                    if self._is_dirty(session, spec, row):
                        items.append(
                            UnpublishedItem(
                                id=row.id,
                                entity_type=spec.entity_type,
                                display_name=spec.label(row),
                                updated_at=row.updated_at,
                            )
                        )
        return items

    def _require_published_parent(self, session: Session, spec: PublishableSpec, row: Any) -> None:
        parent_spec = get_spec(spec.parent_type)
        parent = self.store.require(session, parent_spec, getattr(row, spec.parent_key))
        if not parent.is_published:
            raise ContentValidationError(
                f"publish {parent_spec.entity_type} '{parent.id}' before publishing "
                f"its {spec.entity_type} entries on their own"
            )

    def _apply_to_subtree(
        self,
        session: Session,
        spec: PublishableSpec,
        row: Any,
        apply: Callable[[Session, PublishableSpec, Any], None],
    ) -> list[str]:
        """Apply ``apply`` to ``row`` and each of its live direct children.

        Returns the ids of the children that were touched.
        """
        apply(session, spec, row)
        if spec.child_type is None:
            return []
        child_spec = get_spec(spec.child_type)
        children = self.store.live_children(session, spec, row)
        for child in children:
            apply(session, child_spec, child)
        return [child.id for child in children]

    def _publish_row(self, session: Session, spec: PublishableSpec, row: Any) -> None:
        # Drafts reset to defaults (e.g. an empty title) must not go live unchecked.
        draft = spec.read_draft(row)
        try:
            spec.clean_draft(draft, row)
        except ContentValidationError as exc:
            logger.warning("Refused to publish %s %s: %s", spec.entity_type, row.id, exc)
            raise
        values: dict[str, Any] = {f.published_column: draft[f.name] for f in spec.fields}
        values["is_published"] = True
        values["draft_reset"] = False
        self.store.update_columns(session, row, values)

    def _discard_row(self, session: Session, spec: PublishableSpec, row: Any) -> None:
        baseline = spec.baseline(row)
        values: dict[str, Any] = {f.draft_column: baseline[f.name] for f in spec.fields}
        if not row.is_published:
            values["draft_reset"] = True
        self.store.update_columns(session, row, values)

    def _run_batch(
        self,
        action: str,
        items: list[UnpublishedItem],
        operation: Callable[[EntityType, str], Any],
    ) -> BatchReport:
        report = BatchReport(action=action)
        for item in items:
            try:
                operation(item.entity_type, item.id)
            except Exception as exc:
                logger.exception(
                    "%s: %s %s (%s) failed", action, item.entity_type, item.id, item.display_name
                )
                report.record(
                    BatchItemResult(
                        id=item.id,
                        entity_type=item.entity_type,
                        display_name=item.display_name,
                        success=False,
                        error=str(exc),
                    )
                )
            else:
                report.record(
                    BatchItemResult(
                        id=item.id,
                        entity_type=item.entity_type,
                        display_name=item.display_name,
                        success=True,
                    )
                )

        logger.info(
            "%s finished: %d succeeded, %d failed",
            action,
            report.succeeded_count,
            report.failed_count,
        )
        return report
