"""Dashboard and task endpoints"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import RedirectResponse

from app import config
from app.features.tasks.cache import DashboardCache
from app.features.tasks.dependencies import get_dashboard_cache, get_task_actions
from app.features.tasks.domain import SortOrder, StatusFilter, TaskCreate, TaskUpdate
from app.features.tasks.schemas import DashboardStats, DashboardView, DeleteResult, TaskResult
from app.features.tasks.service import (
    CREATE_FAILED,
    DELETE_FAILED,
    FETCH_FAILED,
    NOT_AUTHENTICATED,
    TASK_NOT_FOUND,
    UPDATE_FAILED,
    TaskActions,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix=config.DASHBOARD_PATH, tags=["dashboard"])

ERROR_STATUS_CODES = {
    NOT_AUTHENTICATED: 401,
    TASK_NOT_FOUND: 404,
    FETCH_FAILED: 500,
    CREATE_FAILED: 500,
    UPDATE_FAILED: 500,
    DELETE_FAILED: 500,
}


def _raise_for_error(error: str) -> None:
    # Anything not listed is a store error passed through verbatim
    raise HTTPException(status_code=ERROR_STATUS_CODES.get(error, 400), detail=error)


def parse_filter(value: Optional[str]) -> StatusFilter:
    """Unknown or missing filter values mean "all" """
    try:
        return StatusFilter(value) if value else StatusFilter.ALL
    except ValueError:
        return StatusFilter.ALL


def parse_sort(value: Optional[str]) -> Optional[SortOrder]:
    """None (missing or unknown value) keeps the newest-created-first order"""
    try:
        return SortOrder(value) if value else None
    except ValueError:
        return None


@router.get("", response_model=DashboardView)
async def dashboard(
    request: Request,
    filter: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    actions: TaskActions = Depends(get_task_actions),
    cache: DashboardCache = Depends(get_dashboard_cache),
):
    """
    Dashboard view: the caller's tasks plus per-status counts.

    Query:
        filter: all | todo | in_progress | done (default all)
        sort: asc | desc by due date; without it tasks are ordered by
            creation time, newest first
    """
    user = getattr(request.state, "user", None) or await actions.session_store.get_current_user()
    if user is None:
        return RedirectResponse(config.LOGIN_PATH, status_code=303)

    status_filter = parse_filter(filter)
    sort_order = parse_sort(sort)

    cache_key = (user.id, status_filter.value, sort_order.value if sort_order else "")
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    result = await actions.get_tasks(status_filter, sort_order)
    tasks = result.tasks or []

    view = DashboardView(
        user=user,
        filter=status_filter,
        sort=sort_order or SortOrder.DESC,
        sort_by="due_date" if sort_order else "created_at",
        tasks=result.tasks,
        stats=DashboardStats.from_tasks(tasks),
        error=result.error,
    )

    if result.error is None:
        cache.set(cache_key, view)

    return view


@router.post("/tasks", response_model=TaskResult, status_code=201)
async def create_task(
    request: TaskCreate,
    actions: TaskActions = Depends(get_task_actions),
):
    """Create a task for the signed-in user"""
    result = await actions.create_task(request)
    if result.error:
        _raise_for_error(result.error)
    return result


@router.patch("/tasks/{task_id}", response_model=TaskResult)
async def update_task(
    task_id: str,
    request: TaskUpdate,
    actions: TaskActions = Depends(get_task_actions),
):
    """Patch a task; 404 when it does not exist or belongs to someone else"""
    result = await actions.update_task(task_id, request)
    if result.error:
        _raise_for_error(result.error)
    return result


@router.delete("/tasks/{task_id}", response_model=DeleteResult)
async def delete_task(
    task_id: str,
    actions: TaskActions = Depends(get_task_actions),
):
    result = await actions.delete_task(task_id)
    if result.error:
        _raise_for_error(result.error)
    return result
