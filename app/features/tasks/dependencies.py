"""FastAPI dependencies for the Tasks feature"""

from fastapi import Depends

from app.features.auth.dependencies import get_session_store
from app.features.auth.session import SupabaseSessionStore
from app.features.tasks.cache import DashboardCache, dashboard_cache
from app.features.tasks.service import TaskActions
from app.infra.supabase.repositories.tasks import TaskRepository


def get_dashboard_cache() -> DashboardCache:
    return dashboard_cache


def get_task_actions(
    session_store: SupabaseSessionStore = Depends(get_session_store),
    cache: DashboardCache = Depends(get_dashboard_cache),
) -> TaskActions:
    """Task actions bound to the caller's session; writes invalidate the dashboard cache"""
    return TaskActions(
        session_store,
        TaskRepository(session_store.client),
        observers=[cache.invalidate],
    )
