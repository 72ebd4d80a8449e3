"""Task repository"""
from typing import Any, Dict, List, Optional

from supabase import Client

from app.features.tasks.domain import Task, TaskInsert, TaskStatus, TaskUpdate

from .base import BaseRepository


class TaskRepository(BaseRepository[Task, TaskInsert, TaskUpdate]):
    """Repository for task operations"""

    def __init__(self, client: Client):
        super().__init__(client, "tasks", Task)

    async def find_tasks(
        self,
        filters: Dict[str, Any],
        status: Optional[TaskStatus] = None,
        order_by: str = "created_at",
        desc: bool = True,
    ) -> List[Task]:
        """Find tasks within the given scope

        Args:
            filters: Scope filters (always includes the owner)
            status: Optional status equality filter
            order_by: Single sort column
            desc: Sort descending when True
        """
        scoped = dict(filters)
        if status is not None:
            scoped["status"] = status.value
        return await self.find_by_filters(scoped, order_by=order_by, desc=desc)
