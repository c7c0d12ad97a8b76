from __future__ import annotations

import pytest

from portfolio_cms.constants import EntityType
from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import AuditLog
from portfolio_cms.services import AuthoringService, PublishingEngine
from portfolio_cms.services.audit import get_audit_entries, record_action


def test_audit_rows_are_immutable(tmp_db):
    with get_session() as session:
        entry = record_action(
            session, action="publish", entity_type=EntityType.PROJECT, entity_id="p1"
        )
    entry_id = entry.id

    with pytest.raises(RuntimeError, match="immutable"):
        with get_session() as session:
            row = session.get(AuditLog, entry_id)
            row.action = "discard"
            session.flush()

    with pytest.raises(RuntimeError, match="immutable"):
        with get_session() as session:
            session.delete(session.get(AuditLog, entry_id))
            session.flush()

    assert [e["action"] for e in get_audit_entries(entity_id="p1")] == ["publish"]


def test_failed_publish_leaves_no_audit_row(tmp_db, fail_updates):
    from portfolio_cms.data.models import Project
    from portfolio_cms.models.errors import PublishFailedError

    project = AuthoringService().create_project(slug="cms", title="CMS")
    fail_updates(Project)

    with pytest.raises(PublishFailedError):
        PublishingEngine().publish(EntityType.PROJECT, project["id"])

    assert get_audit_entries(entity_type=EntityType.PROJECT) == []


def test_activation_is_audited(tmp_db):
    authoring = AuthoringService()
    first = authoring.create_resume_asset(filename="a.pdf", activate=True)
    second = authoring.create_resume_asset(filename="b.pdf")

    PublishingEngine().activate_resume(second["id"])

    entries = get_audit_entries(entity_type=EntityType.RESUME_ASSET, limit=1)
    assert entries[0]["action"] == "activate"
    assert entries[0]["payload"] == {"deactivated": [first["id"]]}


def test_audit_entries_read_from_the_given_store(tmp_db, other_store):
    project = AuthoringService(store=other_store).create_project(slug="cms", title="CMS")
    PublishingEngine(store=other_store).publish(EntityType.PROJECT, project["id"])

    entries = get_audit_entries(store=other_store, entity_id=project["id"])

    assert [entry["action"] for entry in entries] == ["publish"]
    assert get_audit_entries(entity_id=project["id"]) == []
