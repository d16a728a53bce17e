"""Task store accessor for owner-scoped CRUD operations.

Every lookup and mutation is constrained by both the task id and the owner
id, so a task belonging to another user behaves exactly like a missing one.
"""

import logging
from datetime import date

from sqlalchemy import not_, update
from sqlmodel import Session, col, select

from tasktracker.db.types import utc_now
from tasktracker.models.task import Priority, Task, TaskChanges

logger = logging.getLogger(__name__)


def list_by_owner(session: Session, owner_id: str) -> list[Task]:
    """Get all tasks of the owner, newest first."""
    query = (
        select(Task)
        .where(Task.owner_id == owner_id)
        .order_by(col(Task.created_at).desc(), col(Task.id).desc())
    )
    return list(session.exec(query).all())


def create_task(
    session: Session,
    owner_id: str,
    description: str,
    priority: Priority = Priority.MEDIUM,
    due_date: date | None = None,
) -> Task:
    """Create a new task for the specified owner."""
    task = Task(
        owner_id=owner_id,
        description=description,
        priority=priority,
        due_date=due_date,
    )
    session.add(task)
    session.commit()
    session.refresh(task)

    logger.info("Task created", extra={"task_id": task.id, "owner_id": owner_id})
    return task


def get_by_id_and_owner(session: Session, task_id: str, owner_id: str) -> Task | None:
    """Get a specific task owned by the user."""
    return session.exec(
        select(Task).where(Task.id == task_id, Task.owner_id == owner_id)
    ).first()


def _apply_update(session: Session, task_id: str, owner_id: str, values: dict) -> Task | None:
    # Applied as one UPDATE; the row is never read first.
    values["updated_at"] = utc_now()
    result = session.exec(
        update(Task)
        .where(col(Task.id) == task_id, col(Task.owner_id) == owner_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        session.rollback()
        return None
    session.commit()

    return get_by_id_and_owner(session, task_id, owner_id)


def update_by_id_and_owner(
    session: Session, task_id: str, owner_id: str, changes: TaskChanges
) -> Task | None:
    """Overwrite the supplied fields of an owned task.

    Returns None when no task matches both the id and the owner.
    """
    values = changes.as_values()
    if not values:
        return get_by_id_and_owner(session, task_id, owner_id)

    task = _apply_update(session, task_id, owner_id, values)
    if task is not None:
        logger.info("Task updated", extra={"task_id": task_id, "fields": sorted(values)})
    return task


def toggle_completed(session: Session, task_id: str, owner_id: str) -> Task | None:
    """Flip the completion flag of an owned task in a single statement."""
    task = _apply_update(session, task_id, owner_id, {"completed": not_(col(Task.completed))})
    if task is not None:
        logger.info(
            "Task toggled", extra={"task_id": task_id, "completed": task.completed}
        )
    return task


def delete_by_id_and_owner(session: Session, task_id: str, owner_id: str) -> Task | None:
    """Delete an owned task and return it as it was before deletion."""
    task = get_by_id_and_owner(session, task_id, owner_id)
    if task is None:
        return None

    session.delete(task)
    session.commit()

    logger.info("Task deleted", extra={"task_id": task_id, "owner_id": owner_id})
    return task
