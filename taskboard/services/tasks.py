"""Task lifecycle: creation, retrieval, field and status updates, deletion.

Writes that touch more than one row (task + reference lists, status +
notification, task + every reference to it) run inside a single
``atomic`` block so they commit or roll back together.
"""

import logging
from datetime import datetime, timezone
from typing import Collection, Dict, List, Union

from sqlalchemy import delete, or_, update
from sqlmodel import Session, select

from ..database import atomic
from ..errors import NotFound, ValidationError
from ..models import Notification, Task, TaskAssignee, TaskRole, TaskStatus, User, UserTaskRef
from ..schemas.task import (
    AdminTaskCreate,
    IndividualTaskCreate,
    TaskFieldsRead,
    TaskFieldsUpdate,
    TaskFieldsUpdateResponse,
    TaskListItem,
    TaskRead,
)
from . import policy
from .notifications import create_task_completion_notification

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_read(task: Task, assignee_ids: Collection[str]) -> TaskRead:
    return TaskRead(**task.model_dump(), assigned_users=list(assignee_ids))


def _get_task(db: Session, task_id: str) -> Task:
    task = db.get(Task, task_id)
    if task is None:
        raise NotFound("Could not find the task for the provided id.")
    return task


def _get_creator(db: Session, creator_id: str) -> User:
    creator = db.get(User, creator_id)
    if creator is None:
        raise NotFound("Could not find user for provided id.")
    return creator


def assignee_ids(db: Session, task_id: str) -> List[str]:
    return list(db.exec(select(TaskAssignee.user_id).where(TaskAssignee.task_id == task_id)).all())


def _task_from_payload(payload: Union[IndividualTaskCreate, AdminTaskCreate], creator_id: str) -> Task:
    return Task(
        title=payload.title,
        description=payload.description,
        priority=payload.priority,
        due_date=payload.due_date,
        timeline=payload.timeline,
        notes=payload.notes,
        role=TaskRole(payload.role),
        group_name=getattr(payload, "group_name", None),
        creator_id=creator_id,
    )


def create_individual_task(db: Session, creator_id: str, payload: IndividualTaskCreate) -> TaskRead:
    """Create a task whose creator is its only member."""
    creator = _get_creator(db, creator_id)
    task = _task_from_payload(payload, creator.id)

    with atomic(db, "Could not create task, please try again."):
        db.add(task)
        db.flush()
        db.add(UserTaskRef(user_id=creator.id, task_id=task.id))

    logger.info("Individual task %s created by %s", task.id, creator.id)
    return _to_read(task, [])


def create_admin_task(db: Session, creator_id: str, payload: AdminTaskCreate) -> TaskRead:
    """Create a task assigned to a group of users.

    Assigned ids that match no user are skipped. At least one must match.
    """
    if not payload.assigned_users:
        raise ValidationError("At least one user must be assigned to the task")

    creator = _get_creator(db, creator_id)

    requested = list(dict.fromkeys(payload.assigned_users))
    found = set(db.exec(select(User.id).where(User.id.in_(requested))).all())
    members = [user_id for user_id in requested if user_id in found]
    skipped = [user_id for user_id in requested if user_id not in found]
    if skipped:
        logger.warning("Skipping unknown assigned users %s for task by %s", skipped, creator.id)
    if not members:
        raise ValidationError("None of the assigned users could be found.")

    task = _task_from_payload(payload, creator.id)

    with atomic(db, "Could not create task, please try again."):
        db.add(task)
        db.flush()
        for user_id in members:
            db.add(TaskAssignee(task_id=task.id, user_id=user_id))
        for user_id in dict.fromkeys([creator.id, *members]):
            db.add(UserTaskRef(user_id=user_id, task_id=task.id))

    logger.info(
        "Admin task %s (%s) created by %s for %d member(s)",
        task.id, task.group_name, creator.id, len(members),
    )
    return _to_read(task, members)


def create_task(db: Session, creator_id: str, payload: Union[IndividualTaskCreate, AdminTaskCreate]) -> TaskRead:
    if isinstance(payload, AdminTaskCreate):
        return create_admin_task(db, creator_id, payload)
    return create_individual_task(db, creator_id, payload)


def list_tasks_for_user(db: Session, caller_id: str) -> List[TaskListItem]:
    """Tasks the caller created or is assigned to, newest first."""
    assigned = select(TaskAssignee.task_id).where(TaskAssignee.user_id == caller_id)
    statement = (
        select(Task, User)
        .join(User, User.id == Task.creator_id, isouter=True)
        .where(or_(Task.creator_id == caller_id, Task.id.in_(assigned)))
        .order_by(Task.created_at.desc())
    )
    rows = db.exec(statement).all()

    members: Dict[str, List[str]] = {task.id: [] for task, _ in rows}
    if members:
        links = db.exec(select(TaskAssignee).where(TaskAssignee.task_id.in_(list(members)))).all()
        for link in links:
            members[link.task_id].append(link.user_id)

    return [
        TaskListItem(
            **task.model_dump(),
            assigned_users=members[task.id],
            creator_name=creator.name if creator else None,
            creator_email=creator.email if creator else None,
            user_role="creator" if task.creator_id == caller_id else "assigned",
        )
        for task, creator in rows
    ]


def get_task(db: Session, task_id: str, caller_id: str) -> TaskRead:
    task = _get_task(db, task_id)
    members = assignee_ids(db, task.id)
    policy.ensure_can_view_task(task, members, caller_id)
    return _to_read(task, members)


def update_task_fields(
    db: Session, task_id: str, caller_id: str, payload: TaskFieldsUpdate
) -> TaskFieldsUpdateResponse:
    """Patch dueDate, timeline and/or notes."""
    updates = payload.model_dump(exclude_none=True)
    if not updates:
        raise ValidationError("At least one field (dueDate, timeline, or notes) must be provided")

    task = _get_task(db, task_id)
    policy.ensure_can_edit_task(task, assignee_ids(db, task.id), caller_id)

    with atomic(db, "Could not update task"):
        for field, value in updates.items():
            setattr(task, field, value)
        task.updated_at = _utcnow()
        db.add(task)

    return TaskFieldsUpdateResponse(
        task=TaskFieldsRead(
            id=task.id,
            due_date=task.due_date,
            timeline=task.timeline,
            notes=task.notes,
        )
    )


def completion_notifies_creator(task: Task, caller_id: str, new_status: TaskStatus) -> bool:
    """A non-creator finishing an admin-assigned task notifies the creator."""
    return (
        new_status == TaskStatus.DONE
        and task.role == TaskRole.ADMIN
        and task.creator_id != caller_id
    )


def _parse_status(value: Union[str, TaskStatus]) -> TaskStatus:
    try:
        return TaskStatus(value)
    except ValueError:
        raise ValidationError("Invalid status value") from None


def update_task_status(
    db: Session, task_id: str, caller_id: str, status: Union[str, TaskStatus]
) -> TaskRead:
    """Move a task to any status; no transition graph is enforced."""
    new_status = _parse_status(status)

    task = _get_task(db, task_id)
    members = assignee_ids(db, task.id)
    policy.ensure_can_edit_task(task, members, caller_id)

    with atomic(db, "Could not update task status"):
        task.status = new_status
        task.updated_at = _utcnow()
        db.add(task)
        if completion_notifies_creator(task, caller_id, new_status):
            create_task_completion_notification(db, task.id, caller_id, task.creator_id)

    return _to_read(task, members)


def delete_task(db: Session, task_id: str, caller_id: str) -> None:
    """Delete a task and every reference to it. Creator only."""
    task = _get_task(db, task_id)
    policy.ensure_can_delete_task(task, caller_id)

    with atomic(db, "Could not remove this task."):
        db.exec(delete(UserTaskRef).where(UserTaskRef.task_id == task.id))
        db.exec(delete(TaskAssignee).where(TaskAssignee.task_id == task.id))
        db.exec(
            update(Notification)
            .where(Notification.task_id == task.id)
            .values(task_id=None)
        )
        db.delete(task)

    logger.info("Task %s deleted by %s", task_id, caller_id)
