import logging
from datetime import datetime, timezone
from typing import List, Tuple

from sqlalchemy import func
from sqlmodel import Session, select

from ..database import atomic
from ..errors import NotFound, Unauthorized, ValidationError
from ..models import Task, TaskAssignee, User, UserTaskRef
from ..schemas.user import (
    MIN_PASSWORD_LENGTH,
    ProfileUpdate,
    ProfileUpdateResponse,
    UserCreate,
    UserProfile,
)
from ..security import create_access_token, get_password_hash, verify_password
from . import policy

logger = logging.getLogger(__name__)


def _find_by_email(db: Session, email: str):
    return db.exec(select(User).where(User.email == email)).first()


def get_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found.")
    return user


def list_users(db: Session) -> List[User]:
    return list(db.exec(select(User).order_by(User.name)).all())


def task_ids_for_user(db: Session, user_id: str) -> List[str]:
    """The user's task-reference list."""
    return list(db.exec(select(UserTaskRef.task_id).where(UserTaskRef.user_id == user_id)).all())


def signup(db: Session, payload: UserCreate) -> Tuple[User, str]:
    if _find_by_email(db, payload.email):
        raise ValidationError("Could not create user, email already exists.")

    user = User(
        name=payload.name,
        email=payload.email,
        hashed_password=get_password_hash(payload.password),
    )
    with atomic(db, "Could not create user, please try again."):
        db.add(user)

    logger.info("User %s signed up", user.id)
    return user, create_access_token(user.id, user.email)


def authenticate(db: Session, email: str, password: str) -> Tuple[User, str]:
    user = _find_by_email(db, email.strip().lower())
    if not user:
        raise Unauthorized("Could not identify user, credentials seem to be wrong.")
    if not verify_password(password, user.hashed_password):
        raise Unauthorized("Credentials seem to be wrong.")
    return user, create_access_token(user.id, user.email)


def task_counts(db: Session, user_id: str) -> Tuple[int, int]:
    """(created, assigned-but-not-created) task counts."""
    created = db.exec(
        select(func.count()).select_from(Task).where(Task.creator_id == user_id)
    ).one()
    assigned = db.exec(
        select(func.count())
        .select_from(TaskAssignee)
        .join(Task, Task.id == TaskAssignee.task_id)
        .where(TaskAssignee.user_id == user_id, Task.creator_id != user_id)
    ).one()
    return created, assigned


def get_profile(db: Session, user_id: str) -> UserProfile:
    user = get_user(db, user_id)
    created, assigned = task_counts(db, user.id)
    return UserProfile(
        name=user.name,
        email=user.email,
        created_tasks_count=created,
        assigned_tasks_count=assigned,
        total_tasks_count=created + assigned,
    )


def update_profile(db: Session, user_id: str, caller_id: str, payload: ProfileUpdate) -> ProfileUpdateResponse:
    """Change name, email and optionally password of the caller's own account."""
    policy.ensure_user_scope(user_id, caller_id)
    user = get_user(db, user_id)

    existing = _find_by_email(db, payload.email)
    if existing and existing.id != user.id:
        raise ValidationError("Email already exists.")

    hashed_password = None
    if payload.old_password or payload.new_password:
        if not payload.old_password or not payload.new_password:
            raise ValidationError("Both old and new passwords are required for password change")
        if not verify_password(payload.old_password, user.hashed_password):
            raise Unauthorized("Invalid old password")
        if len(payload.new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        hashed_password = get_password_hash(payload.new_password)

    with atomic(db, "Something went wrong."):
        user.name = payload.name
        user.email = payload.email
        if hashed_password:
            user.hashed_password = hashed_password
        user.updated_at = datetime.now(timezone.utc)
        db.add(user)

    profile = get_profile(db, user.id)
    return ProfileUpdateResponse(
        **profile.model_dump(),
        token=create_access_token(user.id, user.email),
    )
