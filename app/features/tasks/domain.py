"""Domain models for Tasks feature"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskStatus(str, Enum):
    """Task status enum"""
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class StatusFilter(str, Enum):
    """Dashboard status filter; ALL disables the status predicate"""
    ALL = "all"
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class SortOrder(str, Enum):
    """Due date sort direction"""
    ASC = "asc"
    DESC = "desc"


class TaskBase(BaseModel):
    """Client-supplied task fields"""
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    due_date: date
    status: TaskStatus = TaskStatus.TODO


class TaskCreate(TaskBase):
    """Task creation model - owner is filled in from the session, never the client"""
    model_config = ConfigDict(extra="ignore")

    @field_validator("description")
    @classmethod
    def empty_description_is_null(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class TaskInsert(TaskCreate):
    """Row sent to the store on insert"""
    user_id: str


class TaskUpdate(BaseModel):
    """Task update model - all fields optional, only set fields are patched"""
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: Optional[TaskStatus] = None

    @field_validator("title", "due_date", "status")
    @classmethod
    def required_fields_are_not_nullable(cls, value):
        # Omitting a field leaves it untouched; sending null would erase a required column
        if value is None:
            raise ValueError("field may be omitted but not set to null")
        return value


class Task(TaskBase):
    """Complete task model from the store"""
    id: str
    user_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
