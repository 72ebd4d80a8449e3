"""
Task actions

Server-side operations behind the dashboard. Every action:
- re-checks the session (the route gate is not trusted on its own)
- scopes its store call with the owner filter
- returns a result pair instead of raising
- notifies invalidation observers after a successful write
"""

import logging
from typing import Callable, Iterable, List, Optional, Union

from supabase import AuthError, PostgrestAPIError

from app import config
from app.features.auth.session import SessionMissingError, SessionStore
from app.features.tasks.domain import SortOrder, StatusFilter, TaskCreate, TaskInsert, TaskStatus, TaskUpdate
from app.features.tasks.ownership import owner_filter
from app.features.tasks.schemas import DeleteResult, LogoutResult, TaskListResult, TaskResult
from app.infra.supabase.repositories.tasks import TaskRepository

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED = "Not authenticated"
TASK_NOT_FOUND = "Task not found"
FETCH_FAILED = "Failed to fetch tasks"
CREATE_FAILED = "Failed to create task"
UPDATE_FAILED = "Failed to update task"
DELETE_FAILED = "Failed to delete task"
LOGOUT_FAILED = "Failed to logout"

# Failures reported by the store or the auth provider; their message is passed through
STORE_ERRORS = (PostgrestAPIError, AuthError, SessionMissingError)

InvalidationObserver = Callable[[str, str], None]


def _store_message(error: Exception) -> str:
    return getattr(error, "message", None) or str(error)


def _status_predicate(filter_status: Union[StatusFilter, TaskStatus, str, None]) -> Optional[TaskStatus]:
    if filter_status is None:
        return None
    value = getattr(filter_status, "value", filter_status)
    if value == StatusFilter.ALL.value:
        return None
    return TaskStatus(value)


class TaskActions:
    """Task CRUD on behalf of the session's user"""

    def __init__(
        self,
        session_store: SessionStore,
        repository: TaskRepository,
        observers: Optional[Iterable[InvalidationObserver]] = None,
    ):
        self.session_store = session_store
        self.repository = repository
        self.observers: List[InvalidationObserver] = list(observers or [])

    def _notify(self, user_id: str) -> None:
        for observer in self.observers:
            try:
                observer(user_id, config.DASHBOARD_PATH)
            except Exception as e:
                logger.warning(f"Invalidation observer failed for user {user_id}: {e}")

    async def get_tasks(
        self,
        filter_status: Union[StatusFilter, TaskStatus, str, None] = None,
        sort_order: Union[SortOrder, str, None] = None,
    ) -> TaskListResult:
        """
        List the caller's tasks.

        Args:
            filter_status: A task status, or "all"/None for every status
            sort_order: "asc"/"desc" sorts by due_date; None sorts by
                created_at, newest first

        Returns:
            TaskListResult with either tasks or error set
        """
        try:
            user = await self.session_store.get_current_user()
            if not user:
                return TaskListResult(error=NOT_AUTHENTICATED)

            filters = owner_filter(user.id)
            status = _status_predicate(filter_status)

            if sort_order is not None:
                ascending = SortOrder(getattr(sort_order, "value", sort_order)) == SortOrder.ASC
                tasks = await self.repository.find_tasks(
                    filters, status=status, order_by="due_date", desc=not ascending
                )
            else:
                tasks = await self.repository.find_tasks(
                    filters, status=status, order_by="created_at", desc=True
                )

            return TaskListResult(tasks=tasks)

        except STORE_ERRORS as e:
            logger.warning(f"Store rejected task listing: {_store_message(e)}")
            return TaskListResult(error=_store_message(e))
        except Exception as e:
            logger.error(f"Failed to fetch tasks: {e}", exc_info=True)
            return TaskListResult(error=FETCH_FAILED)

    async def create_task(self, data: TaskCreate) -> TaskResult:
        """Create a task owned by the caller; any client-supplied owner is ignored"""
        try:
            user = await self.session_store.get_current_user()
            if not user:
                return TaskResult(error=NOT_AUTHENTICATED)

            row = TaskInsert(
                **data.model_dump(),
                **owner_filter(user.id),
            )
            task = await self.repository.create(row)

            logger.info(f"Created task {task.id} for user {user.id}")
            self._notify(user.id)
            return TaskResult(task=task)

        except STORE_ERRORS as e:
            logger.warning(f"Store rejected task creation: {_store_message(e)}")
            return TaskResult(error=_store_message(e))
        except Exception as e:
            logger.error(f"Failed to create task: {e}", exc_info=True)
            return TaskResult(error=CREATE_FAILED)

    async def update_task(self, task_id: str, data: TaskUpdate) -> TaskResult:
        """
        Patch the fields set on data.

        A task the caller does not own is reported exactly like a task
        that does not exist.
        """
        try:
            user = await self.session_store.get_current_user()
            if not user:
                return TaskResult(error=NOT_AUTHENTICATED)

            task = await self.repository.update_by_filters(owner_filter(user.id, task_id), data)
            if task is None:
                return TaskResult(error=TASK_NOT_FOUND)

            logger.info(f"Updated task {task.id} for user {user.id}")
            self._notify(user.id)
            return TaskResult(task=task)

        except STORE_ERRORS as e:
            logger.warning(f"Store rejected update of task {task_id}: {_store_message(e)}")
            return TaskResult(error=_store_message(e))
        except Exception as e:
            logger.error(f"Failed to update task {task_id}: {e}", exc_info=True)
            return TaskResult(error=UPDATE_FAILED)

    async def delete_task(self, task_id: str) -> DeleteResult:
        try:
            user = await self.session_store.get_current_user()
            if not user:
                return DeleteResult(success=False, error=NOT_AUTHENTICATED)

            deleted = await self.repository.delete_by_filters(owner_filter(user.id, task_id))
            if not deleted:
                return DeleteResult(success=False, error=TASK_NOT_FOUND)

            logger.info(f"Deleted task {task_id} for user {user.id}")
            self._notify(user.id)
            return DeleteResult(success=True)

        except STORE_ERRORS as e:
            logger.warning(f"Store rejected delete of task {task_id}: {_store_message(e)}")
            return DeleteResult(success=False, error=_store_message(e))
        except Exception as e:
            logger.error(f"Failed to delete task {task_id}: {e}", exc_info=True)
            return DeleteResult(success=False, error=DELETE_FAILED)

    async def logout(self) -> LogoutResult:
        """End the session; without one the provider's error is returned"""
        try:
            await self.session_store.sign_out()
            return LogoutResult()
        except STORE_ERRORS as e:
            return LogoutResult(error=_store_message(e))
        except Exception as e:
            logger.error(f"Failed to logout: {e}", exc_info=True)
            return LogoutResult(error=LOGOUT_FAILED)
