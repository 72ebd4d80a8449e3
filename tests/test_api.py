# tests/test_api.py

from __future__ import annotations

import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from app import config
from app.features.auth.cookies import read_session_tokens
from app.features.auth.dependencies import get_session_store
from app.features.tasks.dependencies import get_dashboard_cache
from app.main import app
from app.middleware import route_gate

from .fakes import FakeSessionStore


@pytest.fixture()
def client(monkeypatch, backend, db, cache):
    """
    The real application with Supabase replaced by in-memory fakes.

    The route gate and the routers build their session stores from the same
    fake auth backend, and every store shares one fake database.
    """

    def make_store(tokens):
        return FakeSessionStore(backend, tokens, client=db)

    def session_store_override(request: Request):
        tokens = getattr(request.state, "session_tokens", None) or read_session_tokens(request)
        return make_store(tokens)

    monkeypatch.setattr(route_gate, "create_session_store", make_store)
    app.dependency_overrides[get_session_store] = session_store_override
    app.dependency_overrides[get_dashboard_cache] = lambda: cache

    with TestClient(app, base_url="https://testserver", follow_redirects=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def _sign_in(client: TestClient, session) -> None:
    client.cookies.set(config.ACCESS_TOKEN_COOKIE, session.access_token)
    client.cookies.set(config.REFRESH_TOKEN_COOKIE, session.refresh_token)


def _create(client: TestClient, **fields):
    body = {"title": "Task", "due_date": "2025-06-01", **fields}
    response = client.post("/dashboard/tasks", json=body)
    assert response.status_code == 201, response.text
    return response.json()["task"]


def test_health(client) -> None:
    assert client.get("/api/health/").json()["status"] == "healthy"


def test_anonymous_dashboard_redirects_to_login(client) -> None:
    response = client.get("/dashboard")

    assert response.status_code == 307
    assert response.headers["location"] == "/login"


def test_signed_in_user_is_sent_from_login_to_dashboard(client, alice) -> None:
    _sign_in(client, alice)

    response = client.get("/login")

    assert response.status_code == 307
    assert response.headers["location"] == "/dashboard"


def test_login_sets_session_cookies(client, alice) -> None:
    response = client.post("/login", json={"email": "alice@example.com", "password": "alice-password"})

    assert response.status_code == 200
    assert response.json()["user"]["id"] == "alice-id"
    assert response.json()["redirect_to"] == "/dashboard"
    assert response.cookies.get(config.ACCESS_TOKEN_COOKIE)
    assert response.cookies.get(config.REFRESH_TOKEN_COOKIE)

    dashboard = client.get("/dashboard")
    assert dashboard.status_code == 200
    assert dashboard.json()["user"]["email"] == "alice@example.com"


def test_login_with_wrong_password_returns_provider_message(client, alice) -> None:
    response = client.post("/login", json={"email": "alice@example.com", "password": "nope"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid login credentials"
    assert config.ACCESS_TOKEN_COOKIE not in response.cookies


def test_signup_signs_the_user_in(client) -> None:
    response = client.post("/signup", json={"email": "carol@example.com", "password": "pw-123456"})

    assert response.status_code == 200
    assert response.json()["redirect_to"] == "/dashboard"
    assert response.cookies.get(config.ACCESS_TOKEN_COOKIE)


def test_signup_awaiting_confirmation_sets_no_cookies(client, backend) -> None:
    backend.require_confirmation = True

    response = client.post("/signup", json={"email": "dave@example.com", "password": "pw-123456"})

    assert response.status_code == 200
    assert response.json()["redirect_to"] is None
    assert response.json()["user"]["email"] == "dave@example.com"
    assert config.ACCESS_TOKEN_COOKIE not in response.cookies


def test_duplicate_signup_is_rejected(client, alice) -> None:
    response = client.post("/signup", json={"email": "alice@example.com", "password": "x"})

    assert response.status_code == 400
    assert response.json()["detail"] == "User already registered"


def test_dashboard_lists_tasks_with_stats(client, alice) -> None:
    _sign_in(client, alice)
    _create(client, title="one")
    _create(client, title="two", status="done")
    _create(client, title="three", status="in_progress")

    body = client.get("/dashboard").json()

    assert body["filter"] == "all"
    assert body["sort"] == "desc"
    assert body["sort_by"] == "created_at"
    assert [t["title"] for t in body["tasks"]] == ["three", "two", "one"]
    assert body["stats"] == {"total": 3, "todo": 1, "in_progress": 1, "done": 1}
    assert body["error"] is None


def test_dashboard_filter_and_sort_query(client, alice) -> None:
    _sign_in(client, alice)
    _create(client, title="late", due_date="2025-12-01", status="done")
    _create(client, title="early", due_date="2025-01-01", status="done")
    _create(client, title="open", due_date="2025-02-01")

    body = client.get("/dashboard", params={"filter": "done", "sort": "asc"}).json()

    assert body["filter"] == "done"
    assert body["sort_by"] == "due_date"
    assert [t["title"] for t in body["tasks"]] == ["early", "late"]


def test_dashboard_unknown_query_values_fall_back_to_defaults(client, alice) -> None:
    _sign_in(client, alice)
    _create(client, title="only")

    body = client.get("/dashboard", params={"filter": "archived", "sort": "sideways"}).json()

    assert body["filter"] == "all"
    assert body["sort"] == "desc"
    assert body["sort_by"] == "created_at"
    assert [t["title"] for t in body["tasks"]] == ["only"]


def test_writes_invalidate_the_cached_dashboard(client, alice) -> None:
    _sign_in(client, alice)
    assert client.get("/dashboard").json()["tasks"] == []

    task = _create(client, title="fresh")
    assert [t["id"] for t in client.get("/dashboard").json()["tasks"]] == [task["id"]]

    client.patch(f"/dashboard/tasks/{task['id']}", json={"status": "done"})
    assert client.get("/dashboard").json()["stats"]["done"] == 1

    client.delete(f"/dashboard/tasks/{task['id']}")
    assert client.get("/dashboard").json()["tasks"] == []


def test_create_ignores_client_owner(client, alice) -> None:
    _sign_in(client, alice)

    task = _create(client, title="mine", user_id="bob-id")

    assert task["user_id"] == "alice-id"
    assert task["status"] == "todo"
    assert task["description"] is None


def test_create_requires_title_and_due_date(client, alice) -> None:
    _sign_in(client, alice)

    assert client.post("/dashboard/tasks", json={"title": "", "due_date": "2025-01-01"}).status_code == 422
    assert client.post("/dashboard/tasks", json={"title": "x"}).status_code == 422
    assert client.post("/dashboard/tasks", json={"title": "x", "due_date": "2025-01-01", "status": "blocked"}).status_code == 422


def test_cross_user_update_and_delete_look_like_not_found(client, alice, bob) -> None:
    _sign_in(client, alice)
    task = _create(client, title="alice's")

    _sign_in(client, bob)
    update = client.patch(f"/dashboard/tasks/{task['id']}", json={"title": "bob's now"})
    delete = client.delete(f"/dashboard/tasks/{task['id']}")
    missing = client.delete("/dashboard/tasks/no-such-task")

    assert update.status_code == 404
    assert delete.status_code == 404
    assert update.json() == delete.json() == missing.json() == {"detail": "Task not found"}
    assert client.get("/dashboard").json()["tasks"] == []

    _sign_in(client, alice)
    assert [t["title"] for t in client.get("/dashboard").json()["tasks"]] == ["alice's"]


def test_update_and_delete_own_task(client, alice) -> None:
    _sign_in(client, alice)
    task = _create(client, title="draft")

    updated = client.patch(f"/dashboard/tasks/{task['id']}", json={"title": "final", "status": "in_progress"})
    deleted = client.delete(f"/dashboard/tasks/{task['id']}")

    assert updated.status_code == 200
    assert updated.json()["task"]["title"] == "final"
    assert updated.json()["task"]["status"] == "in_progress"
    assert deleted.json() == {"success": True, "error": None}


def test_patch_cannot_null_out_required_fields(client, db, alice) -> None:
    _sign_in(client, alice)
    task = _create(client, title="keep me", status="in_progress")
    before = dict(db.rows()[0])

    for body in ({"status": None, "title": None}, {"due_date": None}, {"title": None, "description": "x"}):
        response = client.patch(f"/dashboard/tasks/{task['id']}", json=body)
        assert response.status_code == 422, body

    assert db.rows()[0] == before
    listed = client.get("/dashboard").json()
    assert listed["error"] is None
    assert [t["title"] for t in listed["tasks"]] == ["keep me"]


def test_patch_may_clear_description(client, alice) -> None:
    _sign_in(client, alice)
    task = _create(client, title="notes", description="old")

    response = client.patch(f"/dashboard/tasks/{task['id']}", json={"description": None})

    assert response.status_code == 200
    assert response.json()["task"]["description"] is None
    assert response.json()["task"]["title"] == "notes"


def test_logout_clears_cookies_and_redirects(client, backend, alice) -> None:
    _sign_in(client, alice)

    response = client.post("/logout")

    assert response.status_code == 303
    assert response.headers["location"] == "/login"
    assert "Max-Age=0" in ",".join(response.headers.get_list("set-cookie"))
    assert alice.access_token not in backend.users_by_token

    second = client.post("/logout")
    assert second.status_code == 303
