from sqlmodel import SQLModel, Field
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

TASK_COMPLETED_MESSAGE = "A member has completed their assigned task."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Notification(SQLModel, table=True):
    """Completion notice owned by the admin who created the task.

    ``task_id`` is cleared when the task is deleted; the notice itself is
    removed only by its recipient.
    """
    __tablename__ = "notifications"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    task_id: Optional[str] = Field(default=None, foreign_key="tasks.id")
    admin_id: str = Field(foreign_key="users.id", index=True)
    member_id: str = Field(foreign_key="users.id")
    message: str = Field(default=TASK_COMPLETED_MESSAGE)
    is_read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=_utcnow, index=True)
