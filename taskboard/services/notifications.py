import logging
from typing import List

from sqlmodel import Session, select

from ..database import atomic
from ..errors import NotFound
from ..models import TASK_COMPLETED_MESSAGE, Notification, Task, User
from ..schemas.notification import NotificationRead
from . import policy

logger = logging.getLogger(__name__)


def create_task_completion_notification(
    db: Session, task_id: str, member_id: str, admin_id: str
) -> Notification:
    """Stage a completion notice in the caller's open transaction.

    Only the status-transition path calls this; it never commits on its own.
    """
    notification = Notification(
        task_id=task_id,
        member_id=member_id,
        admin_id=admin_id,
        message=TASK_COMPLETED_MESSAGE,
    )
    db.add(notification)
    logger.info("Notifying admin %s: task %s completed by %s", admin_id, task_id, member_id)
    return notification


def list_notifications(db: Session, caller_id: str) -> List[NotificationRead]:
    """Notifications addressed to the caller, newest first."""
    statement = (
        select(Notification, Task.title, User.name)
        .join(Task, Task.id == Notification.task_id, isouter=True)
        .join(User, User.id == Notification.member_id, isouter=True)
        .where(Notification.admin_id == caller_id)
        .order_by(Notification.created_at.desc())
    )
    return [
        NotificationRead(
            id=notification.id,
            task_id=notification.task_id,
            task_title=task_title,
            member_id=notification.member_id,
            member_name=member_name,
            message=notification.message,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )
        for notification, task_title, member_name in db.exec(statement).all()
    ]


def _get_notification(db: Session, notification_id: str) -> Notification:
    notification = db.get(Notification, notification_id)
    if notification is None:
        raise NotFound("Notification not found.")
    return notification


def mark_notification_read(db: Session, notification_id: str, caller_id: str) -> Notification:
    notification = _get_notification(db, notification_id)
    policy.ensure_notification_owner(notification, caller_id, "update")

    if notification.is_read:
        return notification

    with atomic(db, "Updating notification failed."):
        notification.is_read = True
        db.add(notification)
    return notification


def delete_notification(db: Session, notification_id: str, caller_id: str) -> None:
    notification = _get_notification(db, notification_id)
    policy.ensure_notification_owner(notification, caller_id, "delete")

    with atomic(db, "Deleting notification failed."):
        db.delete(notification)
    logger.info("Notification %s deleted by %s", notification_id, caller_id)
