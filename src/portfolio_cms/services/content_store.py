"""Generic read/write access to publishable tables.

:class:`ContentStore` is the only component that talks to SQLAlchemy
directly. It is written against the shared publishable column shape rather
than named tables, and it is injected into the engine, the projector and the
authoring service so they can be bound to any session factory.

A transaction is one session: everything done inside ``store.transaction()``
commits together or rolls back together.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from contextlib import AbstractContextManager
from typing import Any

from sqlalchemy.orm import Query, Session

from portfolio_cms.data.db import get_session
from portfolio_cms.data.models.mixins import utcnow
from portfolio_cms.models.errors import EntityNotFoundError
from portfolio_cms.services.registry import PublishableSpec, get_spec

SessionScope = Callable[[], AbstractContextManager[Session]]


class ContentStore:
    """Per-type reads, partial column writes and transactional scopes."""

    def __init__(self, session_scope: SessionScope = get_session) -> None:
        self._session_scope = session_scope

    def transaction(self) -> AbstractContextManager[Session]:
        """Open a session that commits on success and rolls back on any exception."""
        return self._session_scope()

    # Reads

    def _ordered(self, spec: PublishableSpec, query: Query) -> Query:
        model = spec.model
        return query.order_by(model.display_order, model.created_at, model.id)

    def _live_query(self, session: Session, spec: PublishableSpec) -> Query:
        model = spec.model
        query = session.query(model).filter(model.deleted_at.is_(None))
        if spec.is_child:
            parent_model = get_spec(spec.parent_type).model
            query = query.join(
                parent_model, parent_model.id == getattr(model, spec.parent_key)
            ).filter(parent_model.deleted_at.is_(None))
        return query

    def get(
        self,
        session: Session,
        spec: PublishableSpec,
        entity_id: str,
        *,
        include_deleted: bool = False,
    ) -> Any | None:
        """Fetch one row by id.

        Soft-deleted rows (and children of soft-deleted parents) are only
        returned when ``include_deleted`` is set, for admin lookups.
        """
        if include_deleted:
            return session.get(spec.model, entity_id)
        return self._live_query(session, spec).filter(spec.model.id == entity_id).first()

    def require(self, session: Session, spec: PublishableSpec, entity_id: str) -> Any:
        """Fetch one live row by id or raise :class:`EntityNotFoundError`."""
        row = self.get(session, spec, entity_id)
        if row is None:
            raise EntityNotFoundError(spec.entity_type, entity_id)
        return row

    def get_by_attribute(
        self, session: Session, spec: PublishableSpec, attribute: str, value: Any
    ) -> Any | None:
        """Fetch the first live row whose ``attribute`` equals ``value`` (slug, key, ...)."""
        column = getattr(spec.model, attribute)
        return self._live_query(session, spec).filter(column == value).first()

    def list_live(
        self, session: Session, spec: PublishableSpec, *, parent_id: str | None = None
    ) -> list[Any]:
        """List non-deleted rows ordered by display_order, created_at, id.

        For child types, ``parent_id`` restricts the list to one parent.
        """
        query = self._live_query(session, spec)
        if parent_id is not None:
            query = query.filter(getattr(spec.model, spec.parent_key) == parent_id)
        return self._ordered(spec, query).all()

    def live_children(self, session: Session, spec: PublishableSpec, parent: Any) -> list[Any]:
        """List the live direct children of ``parent`` (empty for leaf types)."""
        if spec.child_type is None:
            return []
        return self.list_live(session, get_spec(spec.child_type), parent_id=parent.id)

    # Writes

    def add(self, session: Session, row: Any) -> Any:
        """Insert a new row and flush so its defaults (id, timestamps) are populated."""
        session.add(row)
        session.flush()
        return row

    def update_columns(self, session: Session, row: Any, values: Mapping[str, Any]) -> None:
        """Set the named columns on ``row`` and bump ``updated_at``, then flush."""
        for column, value in values.items():
            setattr(row, column, value)
        row.updated_at = utcnow()
        session.flush()
