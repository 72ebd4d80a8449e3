"""Request and response schemas for Tasks API"""

from typing import List, Optional

from pydantic import BaseModel

from app.features.auth.domain import User
from app.features.tasks.domain import SortOrder, StatusFilter, Task, TaskStatus


class TaskListResult(BaseModel):
    """Result pair of get_tasks"""
    tasks: Optional[List[Task]] = None
    error: Optional[str] = None


class TaskResult(BaseModel):
    """Result pair of create_task / update_task"""
    task: Optional[Task] = None
    error: Optional[str] = None


class DeleteResult(BaseModel):
    """Result pair of delete_task"""
    success: bool
    error: Optional[str] = None


class LogoutResult(BaseModel):
    """Result of logout"""
    error: Optional[str] = None


class DashboardStats(BaseModel):
    """Per-status counts of the listed tasks"""
    total: int = 0
    todo: int = 0
    in_progress: int = 0
    done: int = 0

    @classmethod
    def from_tasks(cls, tasks: List[Task]) -> "DashboardStats":
        return cls(
            total=len(tasks),
            todo=sum(1 for t in tasks if t.status == TaskStatus.TODO),
            in_progress=sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS),
            done=sum(1 for t in tasks if t.status == TaskStatus.DONE),
        )


class DashboardView(BaseModel):
    """Dashboard page payload"""
    user: User
    filter: StatusFilter
    sort: SortOrder
    sort_by: str
    tasks: Optional[List[Task]] = None
    stats: DashboardStats
    error: Optional[str] = None
