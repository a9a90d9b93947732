from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..database import get_db
from ..schemas.base import MessageResponse
from ..schemas.notification import NotificationRead
from ..services import notifications as notification_service
from .auth import get_current_user_id

router = APIRouter()


@router.get("", response_model=List[NotificationRead])
def get_notifications(
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return notification_service.list_notifications(db, current_user_id)


@router.patch("/{notification_id}", response_model=MessageResponse)
def mark_notification_read(
    notification_id: str,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    notification_service.mark_notification_read(db, notification_id, current_user_id)
    return MessageResponse(message="Notification marked as read.")


@router.delete("/{notification_id}", response_model=MessageResponse)
def delete_notification(
    notification_id: str,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    notification_service.delete_notification(db, notification_id, current_user_id)
    return MessageResponse(message="Notification deleted successfully.")
