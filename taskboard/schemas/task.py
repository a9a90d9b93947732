from datetime import date, datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field

from ..models.task import TaskPriority, TaskRole, TaskStatus
from .base import CamelModel, NonEmptyStr


class TaskBase(CamelModel):
    """Fields every task variant requires."""
    title: NonEmptyStr
    description: NonEmptyStr
    priority: TaskPriority
    due_date: date
    timeline: NonEmptyStr
    notes: NonEmptyStr


class IndividualTaskCreate(TaskBase):
    """Task owned and worked by its creator alone."""
    role: Literal["individual"] = "individual"


class AdminTaskCreate(TaskBase):
    """Task assigned by its creator to a named group of users."""
    role: Literal["admin"] = "admin"
    group_name: NonEmptyStr
    assigned_users: List[str]


TaskCreate = Annotated[
    Union[IndividualTaskCreate, AdminTaskCreate],
    Field(discriminator="role"),
]


class TaskRead(CamelModel):
    id: str
    title: str
    description: str
    priority: TaskPriority
    due_date: date
    timeline: str
    notes: str
    status: TaskStatus
    role: TaskRole
    group_name: Optional[str] = None
    assigned_users: List[str] = []
    creator_id: str
    created_at: datetime
    updated_at: datetime


class TaskListItem(TaskRead):
    """Task as seen by one caller in their task list."""
    creator_name: Optional[str] = None
    creator_email: Optional[str] = None
    user_role: Literal["creator", "assigned"]


class TaskFieldsUpdate(CamelModel):
    """Partial update; anything outside the allow-list is ignored."""
    due_date: Optional[date] = None
    timeline: Optional[NonEmptyStr] = None
    notes: Optional[NonEmptyStr] = None


class TaskFieldsRead(CamelModel):
    id: str
    due_date: date
    timeline: str
    notes: str


class TaskFieldsUpdateResponse(CamelModel):
    success: bool = True
    task: TaskFieldsRead


class TaskStatusUpdate(CamelModel):
    status: TaskStatus
