from datetime import datetime
from typing import Optional

from .base import CamelModel


class NotificationRead(CamelModel):
    """Notification resolved with its task title and acting member name."""
    id: str
    task_id: Optional[str] = None
    task_title: Optional[str] = None
    member_id: str
    member_name: Optional[str] = None
    message: str
    is_read: bool
    created_at: datetime
