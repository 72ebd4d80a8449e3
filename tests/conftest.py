# tests/conftest.py

from __future__ import annotations

import pytest

from app.features.auth.domain import AuthSession
from app.features.tasks.cache import DashboardCache
from app.features.tasks.service import TaskActions
from app.infra.supabase.repositories.tasks import TaskRepository

from .fakes import FakeAuthBackend, FakeSessionStore, FakeSupabaseClient


@pytest.fixture()
def db() -> FakeSupabaseClient:
    """One in-memory Supabase project shared by every user in a test."""
    return FakeSupabaseClient()


@pytest.fixture()
def backend() -> FakeAuthBackend:
    return FakeAuthBackend()


@pytest.fixture()
def alice(backend: FakeAuthBackend) -> AuthSession:
    return backend.register("alice@example.com", "alice-password", user_id="alice-id")


@pytest.fixture()
def bob(backend: FakeAuthBackend) -> AuthSession:
    return backend.register("bob@example.com", "bob-password", user_id="bob-id")


@pytest.fixture()
def invalidations() -> list[tuple[str, str]]:
    return []


@pytest.fixture()
def actions_for(db, backend, invalidations):
    """
    Build TaskActions for a session (or for an anonymous caller with None).

    All actions share the same store, so cross-user behaviour is observable.
    """

    def _build(session: AuthSession | None) -> TaskActions:
        if session is None:
            store = FakeSessionStore(backend, client=db)
        else:
            store = FakeSessionStore.signed_in(backend, session, client=db)
        return TaskActions(
            store,
            TaskRepository(db),
            observers=[lambda user_id, path: invalidations.append((user_id, path))],
        )

    return _build


@pytest.fixture()
def cache() -> DashboardCache:
    return DashboardCache(ttl_seconds=60)
