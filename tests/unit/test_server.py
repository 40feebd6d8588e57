# tests/unit/test_server.py
"""
HTTP layer tests via FastAPI's TestClient.

The lifecycle is built with in-process fakes; the TestClient context
manager runs the app lifespan (startup + shutdown drain).
"""

import time

import pytest
from fastapi.testclient import TestClient

from changelog_scribe.background.lifecycle import AppLifecycle
from changelog_scribe.errors import CommitSourceError
from changelog_scribe.models.memory_store import InMemoryChangelogStore
from changelog_scribe.server import create_app

from conftest import FakeCommitSource, FakeLLM


def _lifecycle(config, source=None, llm=None) -> AppLifecycle:
    return AppLifecycle(
        config,
        store=InMemoryChangelogStore(),
        commit_source=source or FakeCommitSource(),
        llm_client=llm or FakeLLM(),
    )


def _poll(client: TestClient, job_id: str, timeout: float = 5.0) -> dict:
    deadline = time.monotonic() + timeout
    while True:
        body = client.get(f"/api/changelogs/status/{job_id}").json()
        if body["completed"] or time.monotonic() > deadline:
            return body
        time.sleep(0.01)


@pytest.fixture
def client(config, commits):
    source = FakeCommitSource(commits, total=25)
    app = create_app(config, lifecycle=_lifecycle(config, source))
    with TestClient(app) as client:
        yield client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "pendingJobs": 0,
        "trackedJobs": 0,
        "llmAvailable": True,
    }


def test_health_reports_unreachable_llm(config):
    app = create_app(config, lifecycle=_lifecycle(config, llm=FakeLLM(healthy=False)))

    with TestClient(app) as client:
        body = client.get("/health").json()

    assert body["llmAvailable"] is False


def test_unknown_job_is_404(client):
    response = client.get("/api/changelogs/status/1704067200000-abcdef")
    assert response.status_code == 404
    assert response.json() == {"error": "Job not found"}


def test_create_and_poll_changelog(client):
    response = client.post(
        "/api/changelogs",
        json={"startDate": "2024-01-01", "endDate": "2024-01-31", "version": "1.1", "title": "Jan"},
    )
    assert response.status_code == 200
    job_id = response.json()["id"]

    body = _poll(client, job_id)
    assert body["status"] == "completed"
    assert body["completed"] is True
    assert body["changelog"]["title"] == "Jan"
    assert [c["category"] for c in body["changelog"]["changes"]] == ["Features", "Bug Fixes"]

    assert client.get("/health").json()["trackedJobs"] == 1

    listing = client.get("/api/changelogs", params={"pageSize": 5}).json()
    assert listing["hasMore"] is False
    assert listing["lastTimestamp"] == "2024-01-01"
    assert listing["items"][0]["id"] == body["changelog"]["id"]
    assert listing["items"][0]["sections"][0]["heading"] == "Features"


def test_failed_job_reports_generic_error(config):
    source = FakeCommitSource(fail_with=CommitSourceError("GitHub API error 403: rate limited", 403))
    app = create_app(config, lifecycle=_lifecycle(config, source))

    with TestClient(app) as client:
        job_id = client.post(
            "/api/changelogs", json={"startDate": "2024-01-01", "endDate": "2024-01-31"}
        ).json()["id"]
        body = _poll(client, job_id)

    assert body == {"status": "error", "completed": True, "error": "Failed to generate changelog"}


def test_create_with_missing_field_is_400(client):
    response = client.post("/api/changelogs", json={"startDate": "2024-01-01"})
    assert response.status_code == 400
    assert "error" in response.json()


def test_create_with_bad_date_is_400(client):
    response = client.post(
        "/api/changelogs", json={"startDate": "yesterday", "endDate": "2024-01-31"}
    )
    assert response.status_code == 400
    assert "startDate" in response.json()["error"]


def test_list_commits(client):
    response = client.get("/api/commits", params={"page": 1, "pageSize": 10})
    assert response.status_code == 200
    body = response.json()
    assert body["totalPages"] == 3
    assert body["hasMore"] is True
    assert len(body["items"]) == 3


def test_list_commits_bad_page_size_is_400(client):
    response = client.get("/api/commits", params={"pageSize": 0})
    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid request")


def test_list_commits_upstream_failure_is_500(config):
    source = FakeCommitSource(fail_with=CommitSourceError("GitHub API error 401", 401))
    app = create_app(config, lifecycle=_lifecycle(config, source))

    with TestClient(app) as client:
        response = client.get("/api/commits")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch commits"}


def test_list_changelogs_empty(client):
    response = client.get("/api/changelogs")
    assert response.status_code == 200
    assert response.json() == {"items": [], "hasMore": False, "lastTimestamp": None}


def test_list_changelogs_bad_cursor_is_400(client):
    response = client.get("/api/changelogs", params={"lastTimestamp": "garbage"})
    assert response.status_code == 400


class BrokenStore(InMemoryChangelogStore):
    async def page(self, page_size, last_timestamp=None):
        raise OSError("database is locked")


def test_list_changelogs_store_failure_is_500(config):
    lifecycle = AppLifecycle(
        config, store=BrokenStore(), commit_source=FakeCommitSource(), llm_client=FakeLLM()
    )
    app = create_app(config, lifecycle=lifecycle)

    with TestClient(app) as client:
        response = client.get("/api/changelogs")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch changelogs"}


def test_cors_allows_configured_origin(client):
    response = client.options(
        "/api/changelogs",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
        },
    )
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert response.headers["access-control-allow-credentials"] == "true"


def test_cors_rejects_unknown_origin(client):
    response = client.get("/health", headers={"Origin": "https://evil.example.com"})
    assert "access-control-allow-origin" not in response.headers


def test_shutdown_closes_clients(config):
    source, llm = FakeCommitSource(), FakeLLM()
    app = create_app(config, lifecycle=_lifecycle(config, source, llm))

    with TestClient(app):
        pass

    assert source.closed is True
    assert llm.closed is True
