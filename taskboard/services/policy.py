"""Who may read or change which task or notification.

Each ``ensure_*`` check raises ``Forbidden`` before any mutation happens;
callers load the entity first so absence surfaces as ``NotFound``.
"""

from typing import Collection

from ..errors import Forbidden
from ..models import Notification, Task


def ensure_user_scope(user_id: str, caller_id: str) -> None:
    if user_id != caller_id:
        raise Forbidden("Forbidden")


def is_task_member(task: Task, assignee_ids: Collection[str], caller_id: str) -> bool:
    """Creator or assigned user."""
    return task.creator_id == caller_id or caller_id in assignee_ids


def ensure_can_view_task(task: Task, assignee_ids: Collection[str], caller_id: str) -> None:
    if not is_task_member(task, assignee_ids, caller_id):
        raise Forbidden("Not authorized to view this task.")


def ensure_can_edit_task(task: Task, assignee_ids: Collection[str], caller_id: str) -> None:
    if not is_task_member(task, assignee_ids, caller_id):
        raise Forbidden("Not authorized to update this task.")


def ensure_can_delete_task(task: Task, caller_id: str) -> None:
    if task.creator_id != caller_id:
        raise Forbidden("You are not allowed to delete this task.")


def ensure_notification_owner(notification: Notification, caller_id: str, action: str) -> None:
    if notification.admin_id != caller_id:
        raise Forbidden(f"Not authorized to {action} this notification.")
