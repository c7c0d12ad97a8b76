from __future__ import annotations

from fastapi.testclient import TestClient

from portfolio_cms.api.dependencies import get_publishing_engine
from portfolio_cms.api.main import app
from portfolio_cms.constants import EntityType
from portfolio_cms.data.models import Project
from portfolio_cms.services import AuthoringService, PublishingEngine


def _create_project(client: TestClient, slug: str, title: str) -> dict:
    response = client.post("/api/content/project", json={"slug": slug, "title": title})
    assert response.status_code == 201
    return response.json()


def test_publish_discard_and_status() -> None:
    client = TestClient(app)
    project = _create_project(client, "cms", "Old Title")

    response = client.post(f"/api/publish/project/{project['id']}")
    assert response.status_code == 200
    assert response.json()["values"]["title"] == "Old Title"

    client.patch(
        f"/api/content/project/{project['id']}/draft", json={"fields": {"title": "New Title"}}
    )
    status = client.get(f"/api/publish/status/project/{project['id']}").json()
    assert status["has_unpublished_changes"] is True
    assert status["changed_fields"] == ["title"]

    response = client.post(f"/api/discard/project/{project['id']}")
    assert response.status_code == 200
    assert response.json()["values"]["title"] == "Old Title"

    status = client.get(f"/api/publish/status/project/{project['id']}").json()
    assert status["has_unpublished_changes"] is False


def test_pending_and_publish_all() -> None:
    client = TestClient(app)
    first = _create_project(client, "one", "One")
    second = _create_project(client, "two", "Two")

    pending = client.get("/api/publish/pending").json()
    assert {item["id"] for item in pending} == {first["id"], second["id"]}
    assert {item["display_name"] for item in pending} == {"One", "Two"}

    report = client.post("/api/publish/all").json()
    assert report["succeeded_count"] == 2
    assert report["failed_count"] == 0
    assert report["ok"] is True

    assert client.get("/api/publish/pending").json() == []


def test_publish_all_partial_failure_report(fail_updates) -> None:
    client = TestClient(app)
    ok = _create_project(client, "ok", "Works")
    broken = _create_project(client, "broken", "Breaks")
    fail_updates(Project, lambda row: row.id == broken["id"])

    response = client.post("/api/publish/all")
    assert response.status_code == 200
    report = response.json()
    assert [item["id"] for item in report["succeeded"]] == [ok["id"]]
    assert [item["display_name"] for item in report["failed"]] == ["Breaks"]

    response = client.post("/api/publish/all", params={"strict": True})
    assert response.status_code == 207
    assert response.json()["report"]["failed_count"] == 1


def test_single_publish_store_failure_is_500(fail_updates) -> None:
    client = TestClient(app)
    project = _create_project(client, "cms", "CMS")
    fail_updates(Project)

    response = client.post(f"/api/publish/project/{project['id']}")

    assert response.status_code == 500
    assert "nothing was changed" in response.json()["detail"]


def test_publish_settings_and_discard_all() -> None:
    client = TestClient(app)
    client.put("/api/settings/theme", json={"values": {"accent": "teal"}})
    project = _create_project(client, "cms", "CMS")

    report = client.post("/api/publish/settings").json()
    assert report["action"] == "publish_settings"
    assert report["succeeded_count"] == 1

    report = client.post("/api/discard/all").json()
    assert [item["id"] for item in report["succeeded"]] == [project["id"]]


def test_audit_listing() -> None:
    client = TestClient(app)
    project = _create_project(client, "cms", "CMS")
    client.post(f"/api/publish/project/{project['id']}")

    entries = client.get("/api/publish/audit", params={"entity_id": project["id"]}).json()
    assert [entry["action"] for entry in entries] == ["publish"]
    assert entries[0]["entity_type"] == "project"


def test_audit_listing_uses_the_engine_store(other_store) -> None:
    engine = PublishingEngine(store=other_store)
    project = AuthoringService(store=other_store).create_project(slug="cms", title="CMS")
    engine.publish(EntityType.PROJECT, project["id"])

    app.dependency_overrides[get_publishing_engine] = lambda: engine
    try:
        entries = TestClient(app).get(
            "/api/publish/audit", params={"entity_id": project["id"]}
        ).json()
    finally:
        app.dependency_overrides.pop(get_publishing_engine)

    assert [entry["action"] for entry in entries] == ["publish"]
