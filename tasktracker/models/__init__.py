"""SQLModel entities for the Task Tracker application."""

from tasktracker.models.task import Priority, Task, TaskChanges
from tasktracker.models.user import User

__all__ = [
    "User",
    "Task",
    "TaskChanges",
    "Priority",
]
