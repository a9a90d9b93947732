from .user import User, UserTaskRef
from .task import Task, TaskAssignee, TaskPriority, TaskRole, TaskStatus
from .notification import Notification, TASK_COMPLETED_MESSAGE

# Export all models for easy importing
__all__ = [
    "User",
    "UserTaskRef",
    "Task",
    "TaskAssignee",
    "TaskPriority",
    "TaskRole",
    "TaskStatus",
    "Notification",
    "TASK_COMPLETED_MESSAGE",
]
