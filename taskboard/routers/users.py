from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..database import get_db
from ..schemas.user import ProfileUpdate, ProfileUpdateResponse, UserProfile, UserRead, UserSummary
from ..services import users as user_service
from .auth import get_current_user_id

router = APIRouter()


@router.get("", response_model=List[UserSummary])
def list_users(db: Session = Depends(get_db)):
    """All users, for picking assignees."""
    return user_service.list_users(db)


@router.get("/me", response_model=UserRead)
def read_users_me(
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Get current user information."""
    user = user_service.get_user(db, current_user_id)
    return UserRead(
        id=user.id,
        name=user.name,
        email=user.email,
        tasks=user_service.task_ids_for_user(db, user.id),
        created_at=user.created_at,
    )


@router.get("/{user_id}/profile", response_model=UserProfile)
def get_profile(user_id: str, db: Session = Depends(get_db)):
    return user_service.get_profile(db, user_id)


@router.patch("/{user_id}/profile", response_model=ProfileUpdateResponse)
def update_profile(
    user_id: str,
    payload: ProfileUpdate,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return user_service.update_profile(db, user_id, current_user_id, payload)
