from __future__ import annotations

from fastapi.testclient import TestClient

from portfolio_cms.api.main import app


def test_preview_modes_and_public_site() -> None:
    client = TestClient(app)
    section = client.post(
        "/api/content/section",
        json={"slug": "summary", "title": "About", "content": {"body": "Hello"}},
    ).json()

    draft = client.get("/api/preview/site").json()
    assert draft["mode"] == "draft"
    assert draft["sections"][0]["title"] == "About"
    assert draft["sections"][0]["content"] == {"body": "Hello"}

    assert client.get("/api/public/site").json()["sections"] == []
    response = client.get(f"/api/preview/sections/{section['id']}", params={"mode": "published"})
    assert response.status_code == 404

    client.post(f"/api/publish/section/{section['id']}")

    public = client.get("/api/public/site").json()
    assert public["mode"] == "published"
    assert [s["title"] for s in public["sections"]] == ["About"]
    assert public["sections"][0]["bullets"] == []


def test_preview_mode_validation() -> None:
    client = TestClient(app)
    assert client.get("/api/preview/site", params={"mode": "staging"}).status_code == 422


def test_public_project_by_slug() -> None:
    client = TestClient(app)
    project = client.post(
        "/api/content/project",
        json={"slug": "cms", "title": "CMS", "technologies": ["fastapi"]},
    ).json()
    client.post(
        "/api/content/project_page",
        json={"project_id": project["id"], "content": {"title": "Overview"}},
    )

    assert client.get("/api/public/projects/cms").status_code == 404
    preview = client.get(f"/api/preview/projects/{project['id']}").json()
    assert preview["pages"][0]["content"] == {"title": "Overview"}

    client.post(f"/api/publish/project/{project['id']}")
    public = client.get("/api/public/projects/cms").json()
    assert public["technologies"] == ["fastapi"]
    assert [page["content"]["title"] for page in public["pages"]] == ["Overview"]
