from sqlmodel import SQLModel, Field, Relationship
from datetime import date, datetime, timezone
from typing import Optional
from uuid import uuid4
import enum


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, enum.Enum):
    TODO = "todo"
    IN_PROGRESS = "inProgress"
    DONE = "done"


class TaskRole(str, enum.Enum):
    INDIVIDUAL = "individual"
    ADMIN = "admin"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Task(SQLModel, table=True):
    """Task record.

    ``group_name`` and the ``task_assignees`` rows exist only for
    admin-assigned tasks.
    """
    __tablename__ = "tasks"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    title: str
    description: str
    priority: TaskPriority
    due_date: date
    timeline: str
    notes: str
    status: TaskStatus = Field(default=TaskStatus.TODO)
    role: TaskRole
    group_name: Optional[str] = None
    creator_id: str = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=_utcnow, index=True)
    updated_at: datetime = Field(default_factory=_utcnow)

    creator: Optional["User"] = Relationship()


class TaskAssignee(SQLModel, table=True):
    """Membership of a user in an admin-assigned task."""
    __tablename__ = "task_assignees"

    task_id: str = Field(foreign_key="tasks.id", primary_key=True)
    user_id: str = Field(foreign_key="users.id", primary_key=True, index=True)
