"""Test suite for the draft/publish engine."""

from __future__ import annotations

import pytest

from portfolio_cms.constants import EntityType, PreviewMode
from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import ResumeAsset, Section, SectionBullet
from portfolio_cms.models.errors import (
    ContentValidationError,
    EntityNotFoundError,
    PartialBatchFailure,
    PublishFailedError,
    ResumeActivationError,
)
from portfolio_cms.services import AuthoringService, PreviewProjector, PublishingEngine


@pytest.fixture
def engine(tmp_db) -> PublishingEngine:
    return PublishingEngine()


@pytest.fixture
def authoring(tmp_db) -> AuthoringService:
    return AuthoringService()


def _section_with_bullets(authoring: AuthoringService, count: int = 3) -> tuple[str, list[str]]:
    section = authoring.create_section(slug="about", title="About")
    bullets = [
        authoring.create_section_bullet(section["id"], content=f"Point {i}", display_order=i)[
            "id"
        ]
        for i in range(count)
    ]
    return section["id"], bullets


def test_save_draft_leaves_published_untouched(engine, authoring):
    """Draft edits never reach the published columns."""
    project = authoring.create_project(slug="cms", title="CMS")
    engine.publish(EntityType.PROJECT, project["id"])

    draft = engine.save_draft(
        EntityType.PROJECT, project["id"], {"title": "CMS v2", "technologies": ["python"]}
    )

    assert draft == {"title": "CMS v2", "description": "", "technologies": ["python"]}
    assert engine.get_published(EntityType.PROJECT, project["id"]) == {
        "title": "CMS",
        "description": "",
        "technologies": [],
    }
    assert engine.has_unpublished_changes(EntityType.PROJECT, project["id"]) is True


def test_save_draft_validation_and_not_found(engine, authoring):
    """Unknown fields, bad values and missing rows are rejected."""
    link = authoring.create_social_link(platform="GitHub", url="https://github.com/me")

    with pytest.raises(ContentValidationError):
        engine.save_draft(EntityType.SOCIAL_LINK, link["id"], {"url": "not a url"})
    with pytest.raises(ContentValidationError):
        engine.save_draft(EntityType.SOCIAL_LINK, link["id"], {"platform": "GitLab"})
    with pytest.raises(EntityNotFoundError):
        engine.save_draft(EntityType.SOCIAL_LINK, "missing", {"url": None})

    section = authoring.create_section(slug="hero", title="Hi")
    with pytest.raises(ContentValidationError):
        engine.save_draft(EntityType.SECTION, section["id"], {"title": "   "})
    with pytest.raises(ContentValidationError):
        engine.save_draft(EntityType.SECTION, section["id"], {"content": {"headline": 42}})

    # Rejected saves change nothing
    assert engine.get_draft(EntityType.SOCIAL_LINK, link["id"]) == {"url": "https://github.com/me"}


def test_publish_then_published_equals_draft(engine, authoring):
    """After publish, published == draft and nothing is pending."""
    section = authoring.create_section(
        slug="experience",
        title="Experience",
        content={
            "experiences": [
                {"role": "Engineer", "company": "Acme", "highlights": ["Shipped CMS"]}
            ]
        },
    )

    assert engine.get_published(EntityType.SECTION, section["id"]) is None
    snapshot = engine.publish(EntityType.SECTION, section["id"])

    assert snapshot == engine.get_draft(EntityType.SECTION, section["id"])
    assert engine.get_published(EntityType.SECTION, section["id"]) == snapshot
    assert engine.has_unpublished_changes(EntityType.SECTION, section["id"]) is False


def test_publish_is_idempotent(engine, authoring):
    """Publishing twice without edits yields the same published state."""
    project = authoring.create_project(slug="cms", title="CMS", technologies=["fastapi"])

    first = engine.publish(EntityType.PROJECT, project["id"])
    second = engine.publish(EntityType.PROJECT, project["id"])

    assert first == second
    assert engine.has_unpublished_changes(EntityType.PROJECT, project["id"]) is False


def test_publish_cascades_to_all_live_children(engine, authoring):
    """Publishing a section publishes each of its bullets."""
    section_id, bullet_ids = _section_with_bullets(authoring)

    engine.publish(EntityType.SECTION, section_id)

    with get_session() as session:
        bullets = session.query(SectionBullet).filter(SectionBullet.id.in_(bullet_ids)).all()
        assert len(bullets) == 3
        for bullet in bullets:
            assert bullet.is_published is True
            assert bullet.content_published == bullet.content_draft


def test_discard_cascade_reverts_children(engine, authoring):
    """Discarding a section reverts every bullet draft to its published value."""
    section_id, bullet_ids = _section_with_bullets(authoring)
    engine.publish(EntityType.SECTION, section_id)

    for bullet_id in bullet_ids:
        engine.save_draft(EntityType.SECTION_BULLET, bullet_id, {"content": "edited"})
    assert engine.has_unpublished_changes(EntityType.SECTION, section_id) is True

    engine.discard(EntityType.SECTION, section_id)

    for i, bullet_id in enumerate(bullet_ids):
        assert engine.get_draft(EntityType.SECTION_BULLET, bullet_id) == {"content": f"Point {i}"}
    assert engine.has_unpublished_changes(EntityType.SECTION, section_id) is False


def test_child_change_marks_parent_dirty(engine, authoring):
    """A dirty live child makes its parent dirty; a deleted child does not."""
    section_id, bullet_ids = _section_with_bullets(authoring, count=2)
    engine.publish(EntityType.SECTION, section_id)

    engine.save_draft(EntityType.SECTION_BULLET, bullet_ids[0], {"content": "changed"})
    status = engine.describe_changes(EntityType.SECTION, section_id)
    assert status["has_unpublished_changes"] is True
    assert status["changed_fields"] == []
    assert status["dirty_children"] == [bullet_ids[0]]

    authoring.soft_delete(EntityType.SECTION_BULLET, bullet_ids[0])
    assert engine.has_unpublished_changes(EntityType.SECTION, section_id) is False


def test_discard_scenario_restores_published_title(engine, authoring):
    """Draft 'New Title' over published 'Old Title' is discarded back to 'Old Title'."""
    project = authoring.create_project(slug="portfolio", title="Old Title")
    engine.publish(EntityType.PROJECT, project["id"])
    engine.save_draft(EntityType.PROJECT, project["id"], {"title": "New Title"})

    assert engine.has_unpublished_changes(EntityType.PROJECT, project["id"]) is True

    draft = engine.discard(EntityType.PROJECT, project["id"])

    assert draft["title"] == "Old Title"
    assert engine.has_unpublished_changes(EntityType.PROJECT, project["id"]) is False


def test_discard_never_published_resets_to_defaults(engine, authoring):
    """Discarding an entity with no published snapshot clears its draft to defaults."""
    section = authoring.create_section(
        slug="summary", title="Summary", subtitle="Who I am", content={"body": "Hello"}
    )
    assert engine.has_unpublished_changes(EntityType.SECTION, section["id"]) is True

    draft = engine.discard(EntityType.SECTION, section["id"])

    assert draft == {"title": "", "subtitle": "", "content": {}}
    assert engine.get_published(EntityType.SECTION, section["id"]) is None
    assert engine.has_unpublished_changes(EntityType.SECTION, section["id"]) is False


def test_new_entity_with_default_values_is_pending(engine, authoring):
    """A never-published row is pending even when its drafts equal the defaults."""
    link = authoring.create_social_link(platform="GitHub")

    assert engine.get_draft(EntityType.SOCIAL_LINK, link["id"]) == {"url": None}
    assert engine.has_unpublished_changes(EntityType.SOCIAL_LINK, link["id"]) is True
    assert [item.id for item in engine.list_unpublished_items()] == [link["id"]]

    report = engine.publish_all()

    assert report.succeeded_count == 1
    assert engine.has_unpublished_changes(EntityType.SOCIAL_LINK, link["id"]) is False
    published = PreviewProjector().project(PreviewMode.PUBLISHED)
    assert [entry["platform"] for entry in published["social_links"]] == ["GitHub"]


def test_publish_rejects_draft_reset_to_defaults(engine, authoring):
    """A discarded new section has an empty title and cannot go live."""
    section = authoring.create_section(slug="summary", title="Summary")
    engine.discard(EntityType.SECTION, section["id"])

    with pytest.raises(ContentValidationError):
        engine.publish(EntityType.SECTION, section["id"])

    assert engine.get_published(EntityType.SECTION, section["id"]) is None
    assert PreviewProjector().project(PreviewMode.PUBLISHED)["sections"] == []

    engine.save_draft(EntityType.SECTION, section["id"], {"title": "Summary"})
    assert engine.has_unpublished_changes(EntityType.SECTION, section["id"]) is True
    assert engine.publish(EntityType.SECTION, section["id"])["title"] == "Summary"


def test_structural_equality_ignores_key_order(engine, authoring):
    """Re-saving the same JSON with reordered keys is not a change."""
    section = authoring.create_section(
        slug="hero", title="Hi", content={"headline": "Dev", "tagline": "Builds things"}
    )
    engine.publish(EntityType.SECTION, section["id"])

    engine.save_draft(
        EntityType.SECTION, section["id"], {"content": {"tagline": "Builds things", "headline": "Dev"}}
    )

    assert engine.has_unpublished_changes(EntityType.SECTION, section["id"]) is False


def test_publish_child_requires_published_parent(engine, authoring):
    """A bullet cannot go live under a never-published section."""
    section_id, bullet_ids = _section_with_bullets(authoring, count=1)

    with pytest.raises(ContentValidationError):
        engine.publish(EntityType.SECTION_BULLET, bullet_ids[0])

    engine.publish(EntityType.SECTION, section_id)
    engine.save_draft(EntityType.SECTION_BULLET, bullet_ids[0], {"content": "solo"})
    assert engine.publish(EntityType.SECTION_BULLET, bullet_ids[0]) == {"content": "solo"}


def test_publish_failure_rolls_back_whole_subtree(engine, authoring, fail_updates):
    """A store failure on one child leaves the parent and siblings unpublished."""
    section_id, bullet_ids = _section_with_bullets(authoring)
    fail_updates(SectionBullet, lambda row: row.id == bullet_ids[-1])

    with pytest.raises(PublishFailedError):
        engine.publish(EntityType.SECTION, section_id)

    with get_session() as session:
        section = session.get(Section, section_id)
        assert section.is_published is False
        assert section.title_published is None
        bullets = session.query(SectionBullet).filter(SectionBullet.id.in_(bullet_ids)).all()
        assert all(b.is_published is False and b.content_published is None for b in bullets)


def test_deleted_entities_are_not_found(engine, authoring):
    project = authoring.create_project(slug="gone", title="Gone")
    authoring.soft_delete(EntityType.PROJECT, project["id"])

    with pytest.raises(EntityNotFoundError):
        engine.get_draft(EntityType.PROJECT, project["id"])
    with pytest.raises(EntityNotFoundError):
        engine.publish(EntityType.PROJECT, project["id"])
    assert engine.list_unpublished_items() == []


def test_list_unpublished_items_order_and_labels(engine, authoring):
    """Pending items are listed by type order, then display order."""
    link = authoring.create_social_link(platform="GitHub", url="https://github.com/me")
    second = authoring.create_section(slug="skills", title="Skills", display_order=2)
    first = authoring.create_section(slug="hero", title="Welcome", display_order=1)
    project = authoring.create_project(slug="cms", title="CMS")
    authoring.upsert_setting(EntityType.SITE_SETTING, "site_title", "My Site")
    clean = authoring.create_project(slug="done", title="Done", display_order=5)
    engine.publish(EntityType.PROJECT, clean["id"])

    items = engine.list_unpublished_items()

    assert [(item.entity_type, item.id) for item in items] == [
        (EntityType.SECTION, first["id"]),
        (EntityType.SECTION, second["id"]),
        (EntityType.PROJECT, project["id"]),
        (EntityType.SITE_SETTING, items[3].id),
        (EntityType.SOCIAL_LINK, link["id"]),
    ]
    assert [item.display_name for item in items] == [
        "Welcome",
        "Skills",
        "CMS",
        "site_title",
        "GitHub",
    ]


def test_publish_all_reports_partial_failure(engine, authoring, fail_updates):
    """One failing entity does not stop the others and is named in the report."""
    ids = [
        authoring.create_section(slug=f"part-{i}", title=f"Part {i}", display_order=i)["id"]
        for i in range(5)
    ]
    failing_id = ids[2]
    fail_updates(Section, lambda row: row.id == failing_id)

    report = engine.publish_all()

    assert report.succeeded_count == 4
    assert report.failed_count == 1
    assert report.ok is False
    assert report.failed[0].id == failing_id
    assert report.failed[0].display_name == "Part 2"
    assert report.failed[0].error

    with get_session() as session:
        failed = session.get(Section, failing_id)
        assert failed.is_published is False
        assert failed.title_published is None
        published = session.query(Section).filter(Section.is_published.is_(True)).count()
        assert published == 4

    with pytest.raises(PartialBatchFailure) as exc_info:
        report.raise_for_failures()
    assert exc_info.value.report is report


def test_discard_all_clears_every_pending_change(engine, authoring):
    project = authoring.create_project(slug="cms", title="CMS")
    engine.publish(EntityType.PROJECT, project["id"])
    engine.save_draft(EntityType.PROJECT, project["id"], {"description": "draft only"})
    authoring.create_section(slug="contact", title="Contact")

    report = engine.discard_all()

    assert report.succeeded_count == 2
    assert report.ok is True
    assert engine.list_unpublished_items() == []


def test_publish_settings_only_touches_settings_group(engine, authoring):
    """Settings publish covers settings, links and the active resume, not content."""
    section = authoring.create_section(slug="hero", title="Hi")
    authoring.update_settings(EntityType.THEME_SETTING, {"primary_color": "#112233"})
    link = authoring.create_social_link(platform="LinkedIn", url="https://linkedin.com/in/me")
    active = authoring.create_resume_asset(
        filename="cv.pdf", file_url="https://cdn.example.com/cv.pdf", activate=True
    )
    inactive = authoring.create_resume_asset(
        filename="old.pdf", file_url="https://cdn.example.com/old.pdf"
    )

    report = engine.publish_settings()

    published_ids = {item.id for item in report.succeeded}
    assert link["id"] in published_ids
    assert active["id"] in published_ids
    assert inactive["id"] not in published_ids
    assert section["id"] not in published_ids
    assert report.succeeded_count == 3
    assert engine.has_unpublished_changes(EntityType.SECTION, section["id"]) is True


def test_activate_resume_keeps_single_active(engine, authoring):
    first = authoring.create_resume_asset(filename="a.pdf", activate=True)
    second = authoring.create_resume_asset(filename="b.pdf")

    engine.activate_resume(second["id"])

    with get_session() as session:
        active = session.query(ResumeAsset).filter(ResumeAsset.is_active.is_(True)).all()
        assert [row.id for row in active] == [second["id"]]
        assert session.get(ResumeAsset, first["id"]).is_active is False


def test_activate_resume_failure_restores_original_state(engine, authoring, fail_updates):
    """A failure between deactivate and activate keeps the original asset active."""
    first = authoring.create_resume_asset(filename="a.pdf", activate=True)
    second = authoring.create_resume_asset(filename="b.pdf")
    fail_updates(ResumeAsset, lambda row: row.id == second["id"])

    with pytest.raises(ResumeActivationError):
        engine.activate_resume(second["id"])

    with get_session() as session:
        active = session.query(ResumeAsset).filter(ResumeAsset.is_active.is_(True)).all()
        assert [row.id for row in active] == [first["id"]]


def test_publish_writes_audit_entry(engine, authoring):
    from portfolio_cms.services.audit import get_audit_entries

    section_id, bullet_ids = _section_with_bullets(authoring, count=2)
    engine.publish(EntityType.SECTION, section_id)
    engine.discard(EntityType.SECTION, section_id)

    entries = get_audit_entries(entity_id=section_id)
    assert [entry["action"] for entry in entries] == ["discard", "publish"]
    assert sorted(entries[1]["payload"]["children"]) == sorted(bullet_ids)
