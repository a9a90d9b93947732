from sqlmodel import SQLModel, Field
from datetime import datetime, timezone
from uuid import uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """User model for authentication and task membership."""
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    name: str
    email: str = Field(unique=True, index=True)
    hashed_password: str
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class UserTaskRef(SQLModel, table=True):
    """One entry of a user's task-reference list.

    Written for the creator and every assignee of a task; a back-reference,
    not ownership.
    """
    __tablename__ = "user_task_refs"

    user_id: str = Field(foreign_key="users.id", primary_key=True)
    task_id: str = Field(foreign_key="tasks.id", primary_key=True, index=True)
