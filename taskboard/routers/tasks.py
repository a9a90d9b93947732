from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from ..database import get_db
from ..schemas.base import MessageResponse
from ..schemas.task import (
    AdminTaskCreate,
    IndividualTaskCreate,
    TaskCreate,
    TaskFieldsUpdate,
    TaskFieldsUpdateResponse,
    TaskListItem,
    TaskRead,
    TaskStatusUpdate,
)
from ..services import policy
from ..services import tasks as task_service
from .auth import get_current_user_id

router = APIRouter()


@router.get("", response_model=List[TaskListItem])
def get_tasks(
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Tasks the caller created or is assigned to, newest first."""
    return task_service.list_tasks_for_user(db, current_user_id)


@router.get("/user/{user_id}", response_model=List[TaskListItem])
def get_tasks_by_user(
    user_id: str,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    policy.ensure_user_scope(user_id, current_user_id)
    return task_service.list_tasks_for_user(db, current_user_id)


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create an individual or admin-assigned task, chosen by ``role``."""
    return task_service.create_task(db, current_user_id, task)


@router.post("/member", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_individual_task(
    task: IndividualTaskCreate,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return task_service.create_individual_task(db, current_user_id, task)


@router.post("/admin", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_admin_task(
    task: AdminTaskCreate,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return task_service.create_admin_task(db, current_user_id, task)


@router.get("/{task_id}", response_model=TaskRead)
def get_task(
    task_id: str,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return task_service.get_task(db, task_id, current_user_id)


@router.patch("/{task_id}", response_model=TaskFieldsUpdateResponse)
def update_task(
    task_id: str,
    task_update: TaskFieldsUpdate,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Update dueDate, timeline and/or notes."""
    return task_service.update_task_fields(db, task_id, current_user_id, task_update)


@router.patch("/{task_id}/status", response_model=TaskRead)
def update_task_status(
    task_id: str,
    payload: TaskStatusUpdate,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return task_service.update_task_status(db, task_id, current_user_id, payload.status)


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: str,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    task_service.delete_task(db, task_id, current_user_id)
    return MessageResponse(message="Task deleted.")
